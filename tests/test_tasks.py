"""
System task tests: definitions, manual runs and the run log
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.models.journal import Issue
from app.models.task import SystemTask, TaskLog, TaskStatus
from app.services import task_service as task_module
from app.services.cache_service import cache_invalidator
from app.services.task_service import task_service


async def create_task(db_session, token, **overrides):
    payload = {"task_name": "Publish scheduled issues", "task_class": "publish_scheduled_issues", **overrides}
    result = await task_service.create_task(db_session, token, payload)
    assert result.success is True
    return result.data.id


class TestTaskDefinitions:

    @pytest.mark.asyncio
    async def test_create_defaults(self, db_session, admin_token):
        result = await task_service.create_task(
            db_session, admin_token, {"task_name": "Nightly <b>cleanup</b>", "task_class": "cleanup_old_data"}
        )

        assert result.success is True
        task = result.data
        assert task.task_name == "Nightly cleanup"
        assert task.enabled is True
        assert task.run_interval == 86400
        assert task.last_status == TaskStatus.PENDING
        assert task.last_run is None
        expected_next = datetime.utcnow() + timedelta(days=1)
        assert abs((task.next_run - expected_next).total_seconds()) < 60
        log = (await db_session.execute(select(ActivityLog))).scalar_one()
        assert log.action == "system_task_created"
        assert log.details == {"task_name": "Nightly cleanup", "task_class": "cleanup_old_data"}
        assert cache_invalidator.consume("/admin/tasks") is True

    @pytest.mark.asyncio
    async def test_unknown_task_class_is_rejected(self, db_session, admin_token):
        result = await task_service.create_task(
            db_session, admin_token, {"task_name": "Mystery", "task_class": "send_newsletter"}
        )

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION
        assert "task_class" in result.details

    @pytest.mark.asyncio
    async def test_run_interval_must_be_positive(self, db_session, admin_token):
        result = await task_service.create_task(
            db_session, admin_token, {"task_name": "Busy", "task_class": "clear_cache", "run_interval": 0}
        )

        assert result.code == ErrorCode.VALIDATION

    @pytest.mark.asyncio
    async def test_duplicate_name(self, db_session, admin_token):
        await create_task(db_session, admin_token)

        result = await task_service.create_task(
            db_session, admin_token, {"task_name": "Publish scheduled issues", "task_class": "clear_cache"}
        )

        assert result.success is False
        assert result.code == ErrorCode.CONFLICT
        assert result.error == "A task with this name already exists"

    @pytest.mark.asyncio
    async def test_disable_clears_next_run(self, db_session, admin_token):
        task_id = await create_task(db_session, admin_token)

        disabled = await task_service.update_task(db_session, admin_token, {"id": task_id, "enabled": False})
        enabled = await task_service.update_task(
            db_session, admin_token, {"id": task_id, "enabled": True, "run_interval": 3600}
        )

        assert disabled.success is True
        assert disabled.data.next_run is None
        assert enabled.data.run_interval == 3600
        expected_next = datetime.utcnow() + timedelta(hours=1)
        assert abs((enabled.data.next_run - expected_next).total_seconds()) < 60
        details = (
            await db_session.execute(
                select(ActivityLog.details).where(ActivityLog.action == "system_task_updated").order_by(ActivityLog.id)
            )
        ).scalars().all()
        assert details == [{"changes": {"enabled": False}}, {"changes": {"enabled": True, "run_interval": 3600}}]

    @pytest.mark.asyncio
    async def test_update_missing_task(self, db_session, admin_token):
        result = await task_service.update_task(db_session, admin_token, {"id": 404, "enabled": False})

        assert result.code == ErrorCode.NOT_FOUND
        assert result.error == "Task not found"

    @pytest.mark.asyncio
    async def test_list_is_sorted_by_name(self, db_session, admin_token):
        await create_task(db_session, admin_token, task_name="Zeta", task_class="clear_cache")
        await create_task(db_session, admin_token, task_name="Alpha", task_class="optimize_database")

        result = await task_service.list_tasks(db_session, admin_token)

        assert [task.task_name for task in result.data] == ["Alpha", "Zeta"]
        assert all(task.logs is None for task in result.data)

    @pytest.mark.asyncio
    async def test_reader_cannot_manage_tasks(self, db_session, reader_token):
        listing = await task_service.list_tasks(db_session, reader_token)
        created = await task_service.create_task(
            db_session, reader_token, {"task_name": "Sneaky", "task_class": "clear_cache"}
        )

        assert listing.code == ErrorCode.FORBIDDEN
        assert created.code == ErrorCode.FORBIDDEN
        assert (await db_session.execute(select(SystemTask.id))).scalars().all() == []


class TestTaskRun:

    @pytest.mark.asyncio
    async def test_run_publishes_due_issues(self, db_session, journal, admin_token):
        journal_id = journal.id
        db_session.add_all([
            Issue(journal_id=journal_id, volume=1, number="1", year=2024, published_date=datetime(2024, 1, 1)),
            Issue(journal_id=journal_id, volume=1, number="2", year=2099, published_date=datetime(2099, 1, 1)),
            Issue(journal_id=journal_id, volume=1, number="3", year=2024),
        ])
        await db_session.commit()
        task_id = await create_task(db_session, admin_token)

        result = await task_service.run_task(db_session, admin_token, task_id)

        assert result.success is True
        assert result.data.status == TaskStatus.SUCCESS
        assert result.data.message == "Task executed successfully"
        assert len(result.data.result["published_issues"]) == 1
        published = (
            await db_session.execute(select(Issue.number).where(Issue.is_published.is_(True)))
        ).scalars().all()
        assert published == ["1"]

        task = (await db_session.execute(select(SystemTask).where(SystemTask.id == task_id))).scalar_one()
        assert task.last_status == TaskStatus.SUCCESS
        assert task.last_run is not None
        assert task.next_run == task.last_run + timedelta(seconds=task.run_interval)
        run_log = (await db_session.execute(select(TaskLog))).scalar_one()
        assert run_log.status == "success"
        assert run_log.details["manual"] is True

        actions = (await db_session.execute(select(ActivityLog.action).order_by(ActivityLog.id))).scalars().all()
        assert actions == ["system_task_created", "issue_published", "system_task_executed"]
        assert cache_invalidator.consume("/admin/issues") is True

    @pytest.mark.asyncio
    async def test_failed_run_is_recorded(self, db_session, admin_token, monkeypatch):
        task_id = await create_task(db_session, admin_token, task_name="Cache", task_class="clear_cache")

        async def broken(ctx):
            raise RuntimeError("disk full")

        monkeypatch.setitem(task_module.TASK_HANDLERS, "clear_cache", broken)

        result = await task_service.run_task(db_session, admin_token, task_id)

        assert result.success is False
        assert result.code == ErrorCode.UNEXPECTED
        last_status, last_message = (
            await db_session.execute(
                select(SystemTask.last_status, SystemTask.last_message).where(SystemTask.id == task_id)
            )
        ).one()
        assert last_status == TaskStatus.ERROR
        assert last_message == "An unexpected error occurred"
        statuses = (await db_session.execute(select(TaskLog.status))).scalars().all()
        assert statuses == ["error"]
        executed = (
            await db_session.execute(select(ActivityLog.id).where(ActivityLog.action == "system_task_executed"))
        ).scalars().all()
        assert executed == []

    @pytest.mark.asyncio
    async def test_run_missing_task(self, db_session, admin_token):
        result = await task_service.run_task(db_session, admin_token, 777)

        assert result.success is False
        assert result.code == ErrorCode.NOT_FOUND
        assert (await db_session.execute(select(TaskLog.id))).scalars().all() == []

    @pytest.mark.asyncio
    async def test_get_with_logs(self, db_session, admin_token):
        task_id = await create_task(db_session, admin_token, task_name="Cache", task_class="clear_cache")
        await task_service.run_task(db_session, admin_token, task_id)
        await task_service.run_task(db_session, admin_token, task_id)

        plain = await task_service.get_task(db_session, admin_token, task_id)
        with_logs = await task_service.get_task(db_session, admin_token, task_id, include_logs="true")
        listing = await task_service.list_tasks(db_session, admin_token, {"include_logs": "true"})

        assert plain.data.logs is None
        assert len(with_logs.data.logs) == 2
        assert all(log.status == "success" for log in with_logs.data.logs)
        assert len(listing.data[0].logs) == 2
