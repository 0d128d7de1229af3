"""add backups table

Optional: deployments that skip this revision run with the backups
capability switched off.

Revision ID: 6f7e8d9c0b1a
Revises: 0a1b2c3d4e5f
Create Date: 2026-03-01 10:30:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '6f7e8d9c0b1a'
down_revision: Union[str, None] = '0a1b2c3d4e5f'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'backups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('backup_type', sa.String(length=20), nullable=False, server_default='full'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='completed'),
        sa.Column('file_size', sa.BigInteger(), nullable=True),
        sa.Column('file_url', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['created_by'], ['users.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_backups_id', 'backups', ['id'])


def downgrade() -> None:
    op.drop_index('ix_backups_id', table_name='backups')
    op.drop_table('backups')
