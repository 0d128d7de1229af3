"""
Initialize database - create all tables and seed defaults
Run this script to set up the database for the first time

Usage:
    python init_db.py                          # create tables, seed templates and default tenant
    python init_db.py admin@example.com secret # also create a super_admin account
    python init_db.py --reset ...              # drop every table first
"""
import asyncio
import sys

from sqlalchemy import select
from sqlalchemy.ext.asyncio import create_async_engine

from app.core.config import settings
from app.db.session import get_db_session
from app.models import Base, EmailTemplate, RoleAssignment, RoleKey, Tenant, User
from app.services.auth_service import auth_service

DEFAULT_EMAIL_TEMPLATES = [
    {
        "key": "submission_ack",
        "name": "Submission acknowledgement",
        "subject": "Submission received: {submission_title}",
        "body": "<p>Dear {author_name},</p><p>Thank you for submitting to {journal_title}.</p>",
    },
    {
        "key": "review_request",
        "name": "Review request",
        "subject": "Review request: {submission_title}",
        "body": "<p>Dear {reviewer_name},</p><p>You have been invited to review a submission.</p>",
    },
    {
        "key": "editor_decision_accept",
        "name": "Editor decision: accept",
        "subject": "Editor decision: {submission_title}",
        "body": "<p>Dear {author_name},</p><p>We are pleased to accept your submission.</p>",
    },
    {
        "key": "editor_decision_decline",
        "name": "Editor decision: decline",
        "subject": "Editor decision: {submission_title}",
        "body": "<p>Dear {author_name},</p><p>We regret that we cannot accept your submission.</p>",
    },
    {
        "key": "editor_decision_revisions",
        "name": "Editor decision: revisions required",
        "subject": "Revisions required: {submission_title}",
        "body": "<p>Dear {author_name},</p><p>Please revise your submission and resubmit.</p>",
    },
    {
        "key": "password_reset",
        "name": "Password reset",
        "subject": "Password reset",
        "body": "<p>Use the following link to reset your password: {reset_url}</p>",
    },
]


async def create_tables(reset: bool):
    """Create all database tables"""
    print("Connecting to database...")
    print(f"Database URL: {settings.DATABASE_URL[:50]}...")

    engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

    async with engine.begin() as conn:
        if reset:
            print("Dropping all tables...")
            await conn.run_sync(Base.metadata.drop_all)

        print("Creating all tables...")
        await conn.run_sync(Base.metadata.create_all)

    await engine.dispose()


async def seed_defaults(admin_email: str = None, admin_password: str = None):
    """Insert default tenant, email templates and optionally a super_admin"""
    async with get_db_session() as db:
        tenant = (await db.execute(select(Tenant).where(Tenant.slug == "default"))).scalar_one_or_none()
        if tenant is None:
            db.add(Tenant(name="Default", slug="default", is_active=True))
            print("Created default tenant")

        existing = set((await db.execute(select(EmailTemplate.key))).scalars().all())
        for template in DEFAULT_EMAIL_TEMPLATES:
            if template["key"] not in existing:
                db.add(EmailTemplate(enabled=True, **template))
                print(f"Created email template '{template['key']}'")

        if admin_email:
            user = (await db.execute(select(User).where(User.email == admin_email))).scalar_one_or_none()
            if user is None:
                user = User(
                    email=admin_email,
                    password_hash=auth_service.hash_password(admin_password),
                    full_name="Administrator",
                    is_active=True,
                )
                db.add(user)
                await db.flush()
                db.add(RoleAssignment(user_id=user.id, role=RoleKey.SUPER_ADMIN, is_active=True))
                print(f"Created super_admin {admin_email}")
            else:
                print(f"User {admin_email} already exists, use scripts/promote_to_super_admin.py")

        await db.commit()


async def init_database(reset: bool, admin_email: str = None, admin_password: str = None):
    await create_tables(reset)
    await seed_defaults(admin_email, admin_password)
    print("✅ Database initialized successfully!")


def main():
    args = sys.argv[1:]
    reset = "--reset" in args
    args = [arg for arg in args if arg != "--reset"]

    if len(args) == 1:
        print("Usage: python init_db.py [--reset] [<admin_email> <admin_password>]")
        sys.exit(1)

    admin_email, admin_password = (args[0], args[1]) if len(args) >= 2 else (None, None)
    asyncio.run(init_database(reset, admin_email, admin_password))


if __name__ == "__main__":
    main()
