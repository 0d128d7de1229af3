"""
User administration and role assignment tests
"""
import pytest
from sqlalchemy import select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.models.user import RoleAssignment, RoleKey, User
from app.services.auth_service import auth_service
from app.services.authorization import authorize
from app.services.user_service import user_service
from tests.conftest import create_user, token_for


class TestUserCreate:

    @pytest.mark.asyncio
    async def test_create_user_with_role(self, db_session, journal, admin_token):
        journal_id = journal.id

        result = await user_service.create_user(
            db_session,
            admin_token,
            {
                "email": "new.editor@example.com",
                "full_name": "New Editor",
                "password": "s3cretpass",
                "role": "editor",
                "journal_id": journal_id,
            },
        )

        assert result.success is True
        assert result.data.email == "new.editor@example.com"
        assert len(result.data.roles) == 1
        assert result.data.roles[0].role == RoleKey.EDITOR
        assert result.data.roles[0].journal_id == journal_id
        assert "password" not in result.to_envelope()["data"]

        password_hash = (
            await db_session.execute(select(User.password_hash).where(User.email == "new.editor@example.com"))
        ).scalar_one()
        assert password_hash != "s3cretpass"
        assert auth_service.verify_password("s3cretpass", password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db_session, reader, admin_token):
        result = await user_service.create_user(
            db_session,
            admin_token,
            {"email": "READER@example.com", "full_name": "Dup", "password": "password123"},
        )

        assert result.success is False
        assert result.code == ErrorCode.CONFLICT
        assert result.error == "User with this email already exists"

    @pytest.mark.asyncio
    async def test_invalid_payload(self, db_session, admin_token):
        result = await user_service.create_user(
            db_session, admin_token, {"email": "not-an-email", "full_name": "", "password": "short"}
        )

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION
        assert {"email", "full_name", "password"} <= set(result.details)

    @pytest.mark.asyncio
    async def test_super_admin_must_be_global_on_create(self, db_session, journal, admin_token):
        result = await user_service.create_user(
            db_session,
            admin_token,
            {
                "email": "scoped.admin@example.com",
                "full_name": "Scoped Admin",
                "password": "s3cretpass",
                "role": "super_admin",
                "journal_id": journal.id,
            },
        )

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION
        created_id = (
            await db_session.execute(select(User.id).where(User.email == "scoped.admin@example.com"))
        ).scalar_one_or_none()
        assert created_id is None


class TestUserDelete:

    @pytest.mark.asyncio
    async def test_soft_delete_deactivates_user_and_roles(self, db_session, reader, reader_token, admin_token):
        reader_id = reader.id

        result = await user_service.delete_user(db_session, admin_token, reader_id)

        assert result.success is True
        is_active = (await db_session.execute(select(User.is_active).where(User.id == reader_id))).scalar_one()
        assert is_active is False
        role_states = (
            await db_session.execute(select(RoleAssignment.is_active).where(RoleAssignment.user_id == reader_id))
        ).scalars().all()
        assert role_states == [False]
        # The deactivated account can no longer act
        assert (await authorize(db_session, reader_token, roles=None)).status.value == "unauthorized"

    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, db_session, super_admin, admin_token):
        admin_id = super_admin.id

        soft = await user_service.delete_user(db_session, admin_token, admin_id)
        hard = await user_service.hard_delete_user(db_session, admin_token, admin_id)

        assert soft.success is False
        assert soft.error == "You cannot delete your own account"
        assert hard.success is False

    @pytest.mark.asyncio
    async def test_hard_delete_removes_row(self, db_session, reader, admin_token):
        reader_id = reader.id

        result = await user_service.hard_delete_user(db_session, admin_token, reader_id)

        assert result.success is True
        assert (await db_session.execute(select(User.id).where(User.id == reader_id))).scalar_one_or_none() is None
        assert (
            await db_session.execute(select(RoleAssignment.id).where(RoleAssignment.user_id == reader_id))
        ).scalar_one_or_none() is None


class TestRoleAssignments:

    @pytest.mark.asyncio
    async def test_assign_and_revoke(self, db_session, journal, reader, admin_token):
        reader_id, journal_id = reader.id, journal.id
        payload = {"user_id": reader_id, "role": "reviewer", "journal_id": journal_id}

        assigned = await user_service.assign_role(db_session, admin_token, payload)
        again = await user_service.assign_role(db_session, admin_token, payload)
        revoked = await user_service.revoke_role(db_session, admin_token, payload)
        revoked_twice = await user_service.revoke_role(db_session, admin_token, payload)

        assert assigned.success is True
        assert again.success is True
        assert again.data.id == assigned.data.id
        assert revoked.success is True
        assert revoked.data.is_active is False
        assert revoked_twice.success is False
        assert revoked_twice.error == "Role assignment not found"

        actions = (
            await db_session.execute(select(ActivityLog.action).order_by(ActivityLog.id))
        ).scalars().all()
        assert actions == ["assign_user_role", "assign_user_role", "revoke_user_role"]

    @pytest.mark.asyncio
    async def test_super_admin_must_be_global(self, db_session, journal, reader, admin_token):
        result = await user_service.assign_role(
            db_session, admin_token, {"user_id": reader.id, "role": "super_admin", "journal_id": journal.id}
        )

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_granting_super_admin_grants_access(self, db_session, reader, reader_token, admin_token):
        reader_id = reader.id
        assert (await authorize(db_session, reader_token)).status.value == "forbidden"

        await user_service.assign_role(db_session, admin_token, {"user_id": reader_id, "role": "super_admin"})

        assert (await authorize(db_session, reader_token)).authorized is True


class TestUserListAndUpdate:

    @pytest.mark.asyncio
    async def test_filter_by_role(self, db_session, super_admin, reader, admin_token):
        await create_user(db_session, "rev@example.com", [RoleKey.REVIEWER])

        reviewers = await user_service.list_users(db_session, admin_token, {"role": "reviewer"})
        everyone = await user_service.list_users(db_session, admin_token)

        assert [u.email for u in reviewers.data.items] == ["rev@example.com"]
        assert everyone.data.total == 3

    @pytest.mark.asyncio
    async def test_update_and_reset_password(self, db_session, reader, admin_token):
        reader_id = reader.id

        updated = await user_service.update_user(
            db_session, admin_token, {"id": reader_id, "full_name": "Renamed Reader"}
        )
        reset = await user_service.reset_user_password(
            db_session, admin_token, {"user_id": reader_id, "new_password": "brand-new-pass"}
        )

        assert updated.data.full_name == "Renamed Reader"
        assert reset.success is True
        password_hash = (
            await db_session.execute(select(User.password_hash).where(User.id == reader_id))
        ).scalar_one()
        assert auth_service.verify_password("brand-new-pass", password_hash)

        details = (
            await db_session.execute(select(ActivityLog.details).where(ActivityLog.action == "reset_user_password"))
        ).scalar_one()
        assert "brand-new-pass" not in str(details)

    @pytest.mark.asyncio
    async def test_non_admin_cannot_read_users(self, db_session, reader, admin_token):
        other = await create_user(db_session, "other@example.com", [RoleKey.AUTHOR])
        result = await user_service.get_user(db_session, token_for(other), reader.id)

        assert result.success is False
        assert result.code == ErrorCode.FORBIDDEN
