"""
Maintenance job tests
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.services.cache_service import cache_invalidator
from app.services.maintenance_service import CACHED_PATHS, maintenance_service


class TestMaintenanceInfo:

    @pytest.mark.asyncio
    async def test_lists_the_four_jobs(self, db_session, admin_token):
        await cache_invalidator.invalidate("/admin/issues", "/")

        result = await maintenance_service.get_maintenance_tasks(db_session, admin_token)

        assert result.success is True
        assert [task.id for task in result.data.maintenance_tasks] == [
            "clear_cache",
            "optimize_database",
            "cleanup_old_data",
            "rebuild_indexes",
        ]
        assert all(task.status == "ready" for task in result.data.maintenance_tasks)
        assert result.data.cache_status.backend == "memory"
        assert result.data.cache_status.stale_entries == 2

    @pytest.mark.asyncio
    async def test_reader_is_forbidden(self, db_session, reader_token):
        result = await maintenance_service.get_maintenance_tasks(db_session, reader_token)

        assert result.code == ErrorCode.FORBIDDEN


class TestMaintenanceRun:

    @pytest.mark.asyncio
    async def test_clear_cache_marks_every_view_stale(self, db_session, admin_token):
        result = await maintenance_service.run_maintenance_task(db_session, admin_token, "clear_cache")

        assert result.success is True
        assert result.data.task_id == "clear_cache"
        assert result.data.result["cleared_entries"] == len(CACHED_PATHS)
        for path in ("/", "/admin/issues", "/admin/navigation", "/admin/maintenance"):
            assert cache_invalidator.consume(path) is True
        log = (await db_session.execute(select(ActivityLog))).scalar_one()
        assert log.action == "maintenance_task_executed"
        assert log.entity_type == "maintenance"
        assert log.details["task_id"] == "clear_cache"

    @pytest.mark.asyncio
    async def test_cleanup_old_data_uses_retention_window(self, db_session, super_admin, admin_token):
        now = datetime.utcnow()
        db_session.add_all([
            ActivityLog(user_id=super_admin.id, action="old", created_at=now - timedelta(days=120)),
            ActivityLog(user_id=super_admin.id, action="recent", created_at=now - timedelta(days=5)),
        ])
        await db_session.commit()

        result = await maintenance_service.run_maintenance_task(db_session, admin_token, "cleanup_old_data")

        assert result.success is True
        assert result.data.result["deleted_records"] == 1
        remaining = (
            await db_session.execute(select(ActivityLog.action).where(ActivityLog.action != "maintenance_task_executed"))
        ).scalars().all()
        assert remaining == ["recent"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task_id", ["optimize_database", "rebuild_indexes"])
    async def test_database_jobs_cover_every_table(self, db_session, admin_token, task_id):
        result = await maintenance_service.run_maintenance_task(db_session, admin_token, task_id)

        assert result.success is True
        tables = result.data.result.get("optimized_tables") or result.data.result.get("rebuilt_indexes")
        assert "issues" in tables
        assert "activity_logs" in tables

    @pytest.mark.asyncio
    async def test_unknown_job_is_rejected(self, db_session, admin_token):
        result = await maintenance_service.run_maintenance_task(db_session, admin_token, "drop_everything")

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION
        assert "task_id" in result.details
        assert (await db_session.execute(select(func.count(ActivityLog.id)))).scalar() == 0
