"""initial journal admin schema

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-03-01 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0a1b2c3d4e5f'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


ROLE_KEYS = (
    'super_admin', 'site_admin', 'journal_manager', 'editor', 'section_editor', 'reviewer',
    'author', 'reader', 'copyeditor', 'proofreader', 'production_editor',
)
SUBMISSION_STATUSES = (
    'draft', 'submitted', 'under_review', 'review_completed',
    'revision_requested', 'accepted', 'declined', 'published',
)

ENUM_TYPES = (
    'role_key', 'journal_status', 'access_status', 'submission_status', 'review_status',
    'review_recommendation', 'decision_type', 'setting_type', 'setting_group',
    'menu_type', 'menu_position', 'announcement_type', 'task_status',
)


def timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    ]


def upgrade() -> None:
    # Tenants and users
    op.create_table(
        'tenants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_tenants_id', 'tenants', ['id'])
    op.create_index('ix_tenants_slug', 'tenants', ['slug'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'])
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    # Journals and issues
    op.create_table(
        'journals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('path', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('abbreviation', sa.String(length=100), nullable=True),
        sa.Column('issn', sa.String(length=9), nullable=True),
        sa.Column('e_issn', sa.String(length=9), nullable=True),
        sa.Column('publisher', sa.String(length=255), nullable=True),
        sa.Column('language', sa.String(length=2), nullable=False, server_default='en'),
        sa.Column('contact_name', sa.String(length=255), nullable=True),
        sa.Column('contact_email', sa.String(length=255), nullable=True),
        sa.Column('contact_phone', sa.String(length=50), nullable=True),
        sa.Column('status', sa.Enum('active', 'suspended', 'archived', name='journal_status'),
                  nullable=False, server_default='active'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_journals_id', 'journals', ['id'])
    op.create_index('ix_journals_path', 'journals', ['path'], unique=True)
    op.create_index('ix_journals_tenant_id', 'journals', ['tenant_id'])

    op.create_table(
        'role_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('role', sa.Enum(*ROLE_KEYS, name='role_key'), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=True),
        sa.Column('journal_id', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenants.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['journal_id'], ['journals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'role', 'tenant_id', 'journal_id', name='uq_role_assignment')
    )
    op.create_index('ix_role_assignments_id', 'role_assignments', ['id'])
    op.create_index('ix_role_assignments_user_id', 'role_assignments', ['user_id'])

    op.create_table(
        'issues',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('journal_id', sa.Integer(), nullable=False),
        sa.Column('volume', sa.Integer(), nullable=True),
        sa.Column('number', sa.String(length=50), nullable=True),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('published_date', sa.DateTime(), nullable=True),
        sa.Column('is_published', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('access_status', sa.Enum('open', 'subscription', 'restricted', name='access_status'),
                  nullable=False, server_default='open'),
        sa.Column('cover_image_url', sa.Text(), nullable=True),
        sa.Column('cover_image_alt_text', sa.String(length=255), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['journal_id'], ['journals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_issues_id', 'issues', ['id'])
    op.create_index('ix_issues_journal_id', 'issues', ['journal_id'])

    # Editorial workflow
    op.create_table(
        'submissions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('journal_id', sa.Integer(), nullable=False),
        sa.Column('submitter_id', sa.Integer(), nullable=True),
        sa.Column('editor_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('abstract', sa.Text(), nullable=True),
        sa.Column('language', sa.String(length=2), nullable=False, server_default='en'),
        sa.Column('status', sa.Enum(*SUBMISSION_STATUSES, name='submission_status'),
                  nullable=False, server_default='draft'),
        sa.Column('submission_date', sa.DateTime(), nullable=True),
        sa.Column('current_round', sa.Integer(), nullable=False, server_default='1'),
        *timestamps(),
        sa.ForeignKeyConstraint(['journal_id'], ['journals.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['submitter_id'], ['users.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['editor_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_submissions_id', 'submissions', ['id'])
    op.create_index('ix_submissions_journal_id', 'submissions', ['journal_id'])
    op.create_index('ix_submissions_submitter_id', 'submissions', ['submitter_id'])
    op.create_index('ix_submissions_status', 'submissions', ['status'])

    op.create_table(
        'articles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('journal_id', sa.Integer(), nullable=False),
        sa.Column('issue_id', sa.Integer(), nullable=True),
        sa.Column('submission_id', sa.Integer(), nullable=True),
        sa.Column('title', sa.String(length=500), nullable=False),
        sa.Column('abstract', sa.Text(), nullable=True),
        sa.Column('doi', sa.String(length=255), nullable=True),
        sa.Column('pages', sa.String(length=50), nullable=True),
        sa.Column('published_date', sa.DateTime(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['journal_id'], ['journals.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['issue_id'], ['issues.id']),
        sa.ForeignKeyConstraint(['submission_id'], ['submissions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_articles_id', 'articles', ['id'])
    op.create_index('ix_articles_journal_id', 'articles', ['journal_id'])
    op.create_index('ix_articles_issue_id', 'articles', ['issue_id'])

    op.create_table(
        'review_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('submission_id', sa.Integer(), nullable=False),
        sa.Column('reviewer_id', sa.Integer(), nullable=False),
        sa.Column('editor_id', sa.Integer(), nullable=True),
        sa.Column('round', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('status', sa.Enum('pending', 'completed', 'cancelled', name='review_status'),
                  nullable=False, server_default='pending'),
        sa.Column('recommendation', sa.Enum(
            'accept', 'minor_revision', 'major_revision', 'reject', 'resubmit',
            name='review_recommendation'), nullable=True),
        sa.Column('review_due_date', sa.DateTime(), nullable=True),
        sa.Column('review_completed_date', sa.DateTime(), nullable=True),
        sa.Column('review_form_data', sa.JSON(), nullable=True),
        *timestamps(),
        sa.ForeignKeyConstraint(['submission_id'], ['submissions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reviewer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['editor_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_review_assignments_id', 'review_assignments', ['id'])
    op.create_index('ix_review_assignments_submission_id', 'review_assignments', ['submission_id'])
    op.create_index('ix_review_assignments_reviewer_id', 'review_assignments', ['reviewer_id'])

    op.create_table(
        'editorial_decisions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('submission_id', sa.Integer(), nullable=False),
        sa.Column('editor_id', sa.Integer(), nullable=True),
        sa.Column('decision_type', sa.Enum('accept', 'decline', 'revision', 'resubmit', name='decision_type'),
                  nullable=False),
        sa.Column('round', sa.Integer(), nullable=False),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['submission_id'], ['submissions.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['editor_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_editorial_decisions_id', 'editorial_decisions', ['id'])
    op.create_index('ix_editorial_decisions_submission_id', 'editorial_decisions', ['submission_id'])

    # API keys and audit trail
    op.create_table(
        'api_keys',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key_name', sa.String(length=255), nullable=False),
        sa.Column('key_hash', sa.String(length=64), nullable=False),
        sa.Column('key_prefix', sa.String(length=20), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('permissions', sa.JSON(), nullable=False),
        sa.Column('last_used', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('key_hash')
    )
    op.create_index('ix_api_keys_id', 'api_keys', ['id'])
    op.create_index('ix_api_keys_user_id', 'api_keys', ['user_id'])

    op.create_table(
        'activity_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('action', sa.String(length=100), nullable=False),
        sa.Column('entity_type', sa.String(length=100), nullable=True),
        sa.Column('entity_id', sa.String(length=100), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('ip_address', sa.String(length=50), nullable=True),
        sa.Column('user_agent', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_activity_logs_id', 'activity_logs', ['id'])
    op.create_index('ix_activity_logs_user_id', 'activity_logs', ['user_id'])
    op.create_index('ix_activity_logs_action', 'activity_logs', ['action'])
    op.create_index('ix_activity_logs_entity_type', 'activity_logs', ['entity_type'])
    op.create_index('ix_activity_logs_created_at', 'activity_logs', ['created_at'])

    # Site configuration
    op.create_table(
        'site_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('setting_name', sa.String(length=255), nullable=False),
        sa.Column('setting_value', sa.Text(), nullable=True),
        sa.Column('setting_type', sa.Enum('string', 'number', 'boolean', 'json', name='setting_type'),
                  nullable=False, server_default='string'),
        sa.Column('setting_group', sa.Enum(
            'general', 'email', 'security', 'appearance', 'localization', name='setting_group'),
            nullable=False, server_default='general'),
        sa.Column('description', sa.String(length=500), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_site_settings_id', 'site_settings', ['id'])
    op.create_index('ix_site_settings_setting_name', 'site_settings', ['setting_name'], unique=True)

    op.create_table(
        'navigation_menus',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('menu_type', sa.Enum('custom', 'journal', 'article', 'issue', name='menu_type'),
                  nullable=False, server_default='custom'),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('sequence', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('target_blank', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('position', sa.Enum('header', 'footer', name='menu_position'),
                  nullable=False, server_default='header'),
        *timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['navigation_menus.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_navigation_menus_id', 'navigation_menus', ['id'])
    op.create_index('ix_navigation_menus_parent_id', 'navigation_menus', ['parent_id'])

    op.create_table(
        'email_templates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('subject', sa.String(length=500), nullable=False),
        sa.Column('body', sa.Text(), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_email_templates_id', 'email_templates', ['id'])
    op.create_index('ix_email_templates_key', 'email_templates', ['key'], unique=True)

    op.create_table(
        'plugin_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('plugin_name', sa.String(length=255), nullable=False),
        sa.Column('journal_id', sa.Integer(), nullable=True),
        sa.Column('setting_name', sa.String(length=255), nullable=False),
        sa.Column('setting_value', sa.Text(), nullable=True),
        sa.Column('setting_type', sa.String(length=20), nullable=False, server_default='string'),
        *timestamps(),
        sa.ForeignKeyConstraint(['journal_id'], ['journals.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('plugin_name', 'journal_id', 'setting_name', name='uq_plugin_setting')
    )
    op.create_index('ix_plugin_settings_id', 'plugin_settings', ['id'])
    op.create_index('ix_plugin_settings_plugin_name', 'plugin_settings', ['plugin_name'])

    op.create_table(
        'announcements',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('short_description', sa.String(length=500), nullable=True),
        sa.Column('type', sa.Enum('info', 'warning', 'success', 'error', name='announcement_type'),
                  nullable=False, server_default='info'),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('date_posted', sa.DateTime(), nullable=True),
        sa.Column('date_expire', sa.DateTime(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_announcements_id', 'announcements', ['id'])

    # Scheduled tasks
    op.create_table(
        'system_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_name', sa.String(length=255), nullable=False),
        sa.Column('task_class', sa.String(length=255), nullable=False),
        sa.Column('enabled', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('run_interval', sa.Integer(), nullable=False, server_default='86400'),
        sa.Column('last_run', sa.DateTime(), nullable=True),
        sa.Column('next_run', sa.DateTime(), nullable=True),
        sa.Column('last_status', sa.Enum('pending', 'running', 'success', 'error', name='task_status'),
                  nullable=False, server_default='pending'),
        sa.Column('last_message', sa.Text(), nullable=True),
        *timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('task_name')
    )
    op.create_index('ix_system_tasks_id', 'system_tasks', ['id'])

    op.create_table(
        'task_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('task_id', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('execution_time', sa.Integer(), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['task_id'], ['system_tasks.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_task_logs_id', 'task_logs', ['id'])
    op.create_index('ix_task_logs_task_id', 'task_logs', ['task_id'])
    op.create_index('ix_task_logs_created_at', 'task_logs', ['created_at'])


def downgrade() -> None:
    op.drop_table('task_logs')
    op.drop_table('system_tasks')
    op.drop_table('announcements')
    op.drop_table('plugin_settings')
    op.drop_table('email_templates')
    op.drop_table('navigation_menus')
    op.drop_table('site_settings')
    op.drop_table('activity_logs')
    op.drop_table('api_keys')
    op.drop_table('editorial_decisions')
    op.drop_table('review_assignments')
    op.drop_table('articles')
    op.drop_table('submissions')
    op.drop_table('issues')
    op.drop_table('role_assignments')
    op.drop_table('journals')
    op.drop_table('users')
    op.drop_table('tenants')

    # PostgreSQL keeps enum types after their tables are gone
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_name in ENUM_TYPES:
            op.execute(f'DROP TYPE IF EXISTS {enum_name}')
