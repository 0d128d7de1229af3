"""
Journal administration and dashboard tests
"""
import pytest
from sqlalchemy import func, select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.models.journal import Issue, Journal, JournalStatus
from app.services.cache_service import cache_invalidator
from app.services.dashboard_service import dashboard_service
from app.services.journal_service import journal_service


class TestJournals:

    @pytest.mark.asyncio
    async def test_create_journal(self, db_session, tenant, admin_token):
        result = await journal_service.create_journal(
            db_session,
            admin_token,
            {"tenant_id": tenant.id, "title": "Applied Ecology", "path": "applied-ecology", "issn": "2049-3630"},
        )

        assert result.success is True
        assert result.data.status == JournalStatus.ACTIVE
        assert cache_invalidator.consume("/applied-ecology") is True

    @pytest.mark.asyncio
    async def test_path_must_be_unique(self, db_session, journal, admin_token):
        tenant_id = journal.tenant_id

        result = await journal_service.create_journal(
            db_session, admin_token, {"tenant_id": tenant_id, "title": "Copy", "path": "testing"}
        )

        assert result.success is False
        assert result.code == ErrorCode.CONFLICT
        assert result.error == "A journal with this path already exists"

    @pytest.mark.asyncio
    async def test_invalid_path_and_issn(self, db_session, tenant, admin_token):
        result = await journal_service.create_journal(
            db_session,
            admin_token,
            {"tenant_id": tenant.id, "title": "Bad", "path": "Has Spaces", "issn": "12345678"},
        )

        assert result.success is False
        assert set(result.details) == {"path", "issn"}

    @pytest.mark.asyncio
    async def test_unknown_fields_are_rejected(self, db_session, tenant, admin_token):
        result = await journal_service.create_journal(
            db_session,
            admin_token,
            {"tenant_id": tenant.id, "title": "Extra", "path": "extra", "is_super": True},
        )

        assert result.success is False
        assert "is_super" in result.details

    @pytest.mark.asyncio
    async def test_status_only_update_is_audited_as_status_change(self, db_session, journal, admin_token):
        result = await journal_service.update_journal(
            db_session, admin_token, {"id": journal.id, "is_active": False}
        )

        assert result.data.is_active is False
        action = (await db_session.execute(select(ActivityLog.action))).scalar_one()
        assert action == "update_journal_status"

    @pytest.mark.asyncio
    async def test_path_change_invalidates_old_and_new_path(self, db_session, journal, admin_token):
        result = await journal_service.update_journal(
            db_session, admin_token, {"id": journal.id, "path": "testing-renamed"}
        )

        assert result.success is True
        assert cache_invalidator.consume("/testing") is True
        assert cache_invalidator.consume("/testing-renamed") is True

    @pytest.mark.asyncio
    async def test_delete_archives_by_default(self, db_session, journal, admin_token):
        journal_id = journal.id

        result = await journal_service.delete_journal(db_session, admin_token, journal_id)

        assert result.data.status == JournalStatus.ARCHIVED
        assert result.data.is_active is False
        count = (await db_session.execute(select(func.count(Journal.id)))).scalar()
        assert count == 1

    @pytest.mark.asyncio
    async def test_hard_delete_cascades_to_issues(self, db_session, issue, admin_token):
        journal_id = issue.journal_id

        result = await journal_service.hard_delete_journal(db_session, admin_token, journal_id)

        assert result.success is True
        assert (await db_session.execute(select(func.count(Journal.id)))).scalar() == 0
        assert (await db_session.execute(select(func.count(Issue.id)))).scalar() == 0

    @pytest.mark.asyncio
    async def test_search(self, db_session, journal, admin_token):
        hit = await journal_service.list_journals(db_session, admin_token, {"search": "testing"})
        miss = await journal_service.list_journals(db_session, admin_token, {"search": "zoology"})

        assert hit.data.total == 1
        assert miss.data.total == 0


class TestDashboard:

    @pytest.mark.asyncio
    async def test_counts_and_recent_activity(self, db_session, issue, super_admin, reader, admin_token):
        await journal_service.update_journal(db_session, admin_token, {"id": issue.journal_id, "title": "Renamed"})

        result = await dashboard_service.get_dashboard(db_session, admin_token, {"limit": "5"})

        assert result.success is True
        stats = result.data.stats
        assert stats.total_users == 2
        assert stats.active_journals == 1
        assert stats.total_issues == 1
        assert stats.active_tenants == 1
        assert stats.total_editors == 0
        assert [a.action for a in result.data.recent_activity] == ["update_journal"]
        assert result.data.recent_activity[0].user_email == "admin@example.com"

    @pytest.mark.asyncio
    async def test_reader_cannot_see_dashboard(self, db_session, reader_token):
        result = await dashboard_service.get_dashboard(db_session, reader_token)

        assert result.success is False
        assert result.code == ErrorCode.FORBIDDEN
