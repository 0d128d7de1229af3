"""
Activity Log Service
Read access to the audit trail, summary counts and the age-based cleanup action.
"""
import logging
from datetime import datetime, timedelta
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import ActivityLog
from app.models.user import User
from app.schemas.activity_log import (
    ActionCount,
    ActivityLogCleanup,
    ActivityLogQuery,
    ActivityLogResponse,
    ActivityLogStats,
    CleanupResult,
)
from app.schemas.common import ActionResult, Page
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

ACTIVITY_LOG_PATHS = ("/admin/activity-log", "/admin/dashboard")
TOP_ACTIONS_LIMIT = 10


def activity_rows_to_response(rows) -> list:
    """(ActivityLog, email) rows -> response items"""
    items = []
    for log, email in rows:
        item = ActivityLogResponse.model_validate(log)
        item.user_email = email
        items.append(item)
    return items


class ActivityLogService:
    """Service for the activity (audit) log"""

    async def _list(self, ctx: ActionContext, query: ActivityLogQuery) -> Page:
        filters = []
        if query.action:
            filters.append(ActivityLog.action == query.action)
        if query.entity_type:
            filters.append(ActivityLog.entity_type == query.entity_type)
        if query.user_id:
            filters.append(ActivityLog.user_id == query.user_id)
        if query.date_from:
            filters.append(ActivityLog.created_at >= query.date_from)
        if query.date_to:
            filters.append(ActivityLog.created_at <= query.date_to)

        total = (await ctx.db.execute(select(func.count(ActivityLog.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(ActivityLog, User.email)
            .outerjoin(User, User.id == ActivityLog.user_id)
            .where(*filters)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        return Page.build(activity_rows_to_response(result.all()), total, query.page, query.limit)

    async def _stats(self, ctx: ActionContext, _: Any) -> ActivityLogStats:
        db = ctx.db
        total = (await db.execute(select(func.count(ActivityLog.id)))).scalar() or 0

        by_type = await db.execute(
            select(ActivityLog.entity_type, func.count(ActivityLog.id)).group_by(ActivityLog.entity_type)
        )
        by_entity_type = {}
        for entity_type, count in by_type.all():
            key = entity_type or "unknown"
            by_entity_type[key] = by_entity_type.get(key, 0) + count

        action_count = func.count(ActivityLog.id).label("count")
        top = await db.execute(
            select(ActivityLog.action, action_count)
            .group_by(ActivityLog.action)
            .order_by(action_count.desc(), ActivityLog.action)
            .limit(TOP_ACTIONS_LIMIT)
        )
        top_actions = [ActionCount(action=action, count=count) for action, count in top.all()]
        return ActivityLogStats(total=total, by_entity_type=by_entity_type, top_actions=top_actions)

    async def _cleanup(self, ctx: ActionContext, data: ActivityLogCleanup) -> CleanupResult:
        cutoff_date = datetime.utcnow() - timedelta(days=data.days)
        result = await ctx.db.execute(delete(ActivityLog).where(ActivityLog.created_at < cutoff_date))
        deleted = result.rowcount or 0
        logger.info(f"Purged {deleted} activity log records older than {cutoff_date.isoformat()}")

        ctx.audit(
            "cleanup_activity_logs",
            "activity_logs",
            None,
            {"days": data.days, "deleted": deleted, "cutoff_date": cutoff_date.isoformat()},
        )
        ctx.invalidate(*ACTIVITY_LOG_PATHS)
        return CleanupResult(deleted=deleted, cutoff_date=cutoff_date)

    async def list_activity_logs(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_activity_logs", db, credentials, self._list, query or {}, ActivityLogQuery)

    async def get_activity_log_stats(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        """Total records, counts per entity type and the most frequent actions"""
        return await run_action("get_activity_log_stats", db, credentials, self._stats)

    async def cleanup_activity_logs(self, db: AsyncSession, credentials: CredentialsLike, payload: Any = None) -> ActionResult:
        """Delete records older than payload['days'] days (default 90)"""
        return await run_action(
            "cleanup_activity_logs", db, credentials, self._cleanup, payload or {}, ActivityLogCleanup
        )


# Global activity log service instance
activity_log_service = ActivityLogService()
