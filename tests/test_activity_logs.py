"""
Activity log listing and cleanup tests
"""
from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.services.activity_log_service import activity_log_service


async def seed_logs(db_session, user_id, ages_in_days):
    now = datetime.utcnow()
    for age in ages_in_days:
        db_session.add(
            ActivityLog(
                user_id=user_id,
                action="seeded",
                entity_type="test",
                details={"age": age},
                created_at=now - timedelta(days=age),
            )
        )
    await db_session.commit()


async def count_seeded(db_session) -> int:
    return (
        await db_session.execute(select(func.count(ActivityLog.id)).where(ActivityLog.action == "seeded"))
    ).scalar()


class TestActivityLogCleanup:

    @pytest.mark.asyncio
    async def test_deletes_only_records_older_than_cutoff(self, db_session, super_admin, admin_token):
        await seed_logs(db_session, super_admin.id, [1, 10, 29, 31, 45, 400])

        result = await activity_log_service.cleanup_activity_logs(db_session, admin_token, {"days": 30})

        assert result.success is True
        assert result.data.deleted == 3
        assert await count_seeded(db_session) == 3
        expected_cutoff = datetime.utcnow() - timedelta(days=30)
        assert abs((result.data.cutoff_date - expected_cutoff).total_seconds()) < 60

    @pytest.mark.asyncio
    async def test_cleanup_is_audited_and_idempotent(self, db_session, super_admin, admin_token):
        await seed_logs(db_session, super_admin.id, [100, 200])

        first = await activity_log_service.cleanup_activity_logs(db_session, admin_token, {"days": 90})
        second = await activity_log_service.cleanup_activity_logs(db_session, admin_token, {"days": 90})

        assert first.data.deleted == 2
        assert second.data.deleted == 0
        cleanup_logs = (
            await db_session.execute(
                select(ActivityLog.details).where(ActivityLog.action == "cleanup_activity_logs").order_by(ActivityLog.id)
            )
        ).scalars().all()
        assert [d["deleted"] for d in cleanup_logs] == [2, 0]

    @pytest.mark.asyncio
    async def test_default_retention_is_ninety_days(self, db_session, super_admin, admin_token):
        await seed_logs(db_session, super_admin.id, [89, 91])

        result = await activity_log_service.cleanup_activity_logs(db_session, admin_token)

        assert result.data.deleted == 1
        assert await count_seeded(db_session) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("days", [0, -5, 5000, "soon"])
    async def test_invalid_retention(self, db_session, admin_token, days):
        result = await activity_log_service.cleanup_activity_logs(db_session, admin_token, {"days": days})

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION
        assert "days" in result.details

    @pytest.mark.asyncio
    async def test_reader_cannot_cleanup(self, db_session, super_admin, reader_token):
        await seed_logs(db_session, super_admin.id, [365])

        result = await activity_log_service.cleanup_activity_logs(db_session, reader_token, {"days": 30})

        assert result.success is False
        assert result.code == ErrorCode.FORBIDDEN
        assert await count_seeded(db_session) == 1


class TestActivityLogList:

    @pytest.mark.asyncio
    async def test_list_newest_first_with_email(self, db_session, super_admin, admin_token):
        await seed_logs(db_session, super_admin.id, [5, 1, 3])

        result = await activity_log_service.list_activity_logs(db_session, admin_token, {"action": "seeded"})

        assert result.success is True
        assert result.data.total == 3
        assert [item.details["age"] for item in result.data.items] == [1, 3, 5]
        assert all(item.user_email == "admin@example.com" for item in result.data.items)

    @pytest.mark.asyncio
    async def test_list_rejects_inverted_date_range(self, db_session, admin_token):
        result = await activity_log_service.list_activity_logs(
            db_session, admin_token, {"date_from": "2024-02-01T00:00:00", "date_to": "2024-01-01T00:00:00"}
        )

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION


class TestActivityLogStats:

    @pytest.mark.asyncio
    async def test_counts_by_entity_type_and_action(self, db_session, super_admin, admin_token):
        user_id = super_admin.id
        db_session.add_all(
            [ActivityLog(user_id=user_id, action="issue_published", entity_type="issue") for _ in range(3)]
            + [ActivityLog(user_id=user_id, action="issue_created", entity_type="issue")]
            + [ActivityLog(user_id=user_id, action="login", entity_type=None) for _ in range(2)]
        )
        await db_session.commit()

        result = await activity_log_service.get_activity_log_stats(db_session, admin_token)

        assert result.success is True
        assert result.data.total == 6
        assert result.data.by_entity_type == {"issue": 4, "unknown": 2}
        assert [(item.action, item.count) for item in result.data.top_actions] == [
            ("issue_published", 3),
            ("login", 2),
            ("issue_created", 1),
        ]

    @pytest.mark.asyncio
    async def test_top_actions_are_capped_at_ten(self, db_session, super_admin, admin_token):
        user_id = super_admin.id
        db_session.add_all([ActivityLog(user_id=user_id, action=f"action_{i:02d}") for i in range(12)])
        await db_session.commit()

        result = await activity_log_service.get_activity_log_stats(db_session, admin_token)

        assert result.data.total == 12
        assert len(result.data.top_actions) == 10

    @pytest.mark.asyncio
    async def test_reader_cannot_read_stats(self, db_session, reader_token):
        result = await activity_log_service.get_activity_log_stats(db_session, reader_token)

        assert result.success is False
        assert result.code == ErrorCode.FORBIDDEN
