"""
Maintenance Service

A fixed set of housekeeping jobs an administrator can run on demand.
The same handlers back the scheduled task classes of the task service.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, List

from sqlalchemy import delete, inspect, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.audit import ActivityLog
from app.models.task import TaskLog
from app.schemas.common import ActionResult
from app.schemas.maintenance import (
    CacheStatus,
    MaintenanceInfo,
    MaintenanceRunResult,
    MaintenanceTaskInfo,
    MaintenanceTaskRun,
)
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.activity_log_service import ACTIVITY_LOG_PATHS
from app.services.announcement_service import ANNOUNCEMENT_PATHS
from app.services.api_key_service import API_KEY_PATHS
from app.services.backup_service import BACKUP_PATHS
from app.services.cache_service import cache_invalidator
from app.services.email_template_service import EMAIL_TEMPLATE_PATHS
from app.services.issue_service import ISSUE_PATHS
from app.services.navigation_service import NAVIGATION_PATHS
from app.services.plugin_service import PLUGIN_PATHS
from app.services.site_settings_service import SETTINGS_PATHS
from app.services.submission_service import SUBMISSION_PATHS
from app.services.user_service import USER_PATHS

logger = logging.getLogger(__name__)

MAINTENANCE_PATHS = ("/admin/maintenance",)

# Every view the admin actions ever mark stale
CACHED_PATHS = tuple(sorted(set(
    ACTIVITY_LOG_PATHS + ANNOUNCEMENT_PATHS + API_KEY_PATHS + BACKUP_PATHS + EMAIL_TEMPLATE_PATHS
    + ISSUE_PATHS + NAVIGATION_PATHS + PLUGIN_PATHS + SETTINGS_PATHS + SUBMISSION_PATHS + USER_PATHS
    + MAINTENANCE_PATHS + ("/admin/tasks", "/admin/languages", "/admin/statistics")
)))

Handler = Callable[[ActionContext], Awaitable[Dict[str, Any]]]


async def table_names(db: AsyncSession) -> List[str]:
    return await db.run_sync(lambda session: sorted(inspect(session.connection()).get_table_names()))


async def clear_cache(ctx: ActionContext) -> Dict[str, Any]:
    ctx.invalidate(*CACHED_PATHS)
    return {"message": "Cache cleared successfully", "cleared_entries": len(CACHED_PATHS)}


async def optimize_database(ctx: ActionContext) -> Dict[str, Any]:
    """Refresh planner statistics for every table"""
    tables = await table_names(ctx.db)
    await ctx.db.execute(text("ANALYZE"))
    return {"message": "Database optimization completed", "optimized_tables": tables}


async def cleanup_old_data(ctx: ActionContext) -> Dict[str, Any]:
    """Purge activity and task logs past the retention window"""
    cutoff_date = datetime.utcnow() - timedelta(days=settings.ACTIVITY_LOG_DEFAULT_RETENTION_DAYS)
    activity = await ctx.db.execute(delete(ActivityLog).where(ActivityLog.created_at < cutoff_date))
    task_logs = await ctx.db.execute(delete(TaskLog).where(TaskLog.created_at < cutoff_date))
    deleted = (activity.rowcount or 0) + (task_logs.rowcount or 0)
    logger.info(f"Maintenance cleanup removed {deleted} log records older than {cutoff_date.isoformat()}")

    ctx.invalidate(*ACTIVITY_LOG_PATHS)
    return {
        "message": "Old data cleaned up successfully",
        "deleted_records": deleted,
        "cutoff_date": cutoff_date.isoformat(),
    }


async def rebuild_indexes(ctx: ActionContext) -> Dict[str, Any]:
    dialect = ctx.db.bind.dialect
    if dialect.name == "sqlite":
        await ctx.db.execute(text("REINDEX"))
        rebuilt = await table_names(ctx.db)
    elif dialect.name == "postgresql":
        rebuilt = await table_names(ctx.db)
        for name in rebuilt:
            await ctx.db.execute(text(f"REINDEX TABLE {dialect.identifier_preparer.quote(name)}"))
    else:
        return {"message": f"Index rebuild is not supported on {dialect.name}", "rebuilt_indexes": []}
    return {"message": "Indexes rebuilt successfully", "rebuilt_indexes": rebuilt}


@dataclass(frozen=True)
class MaintenanceTask:
    id: str
    name: str
    description: str
    handler: Handler


MAINTENANCE_TASKS: Dict[str, MaintenanceTask] = {
    task.id: task
    for task in (
        MaintenanceTask("clear_cache", "Clear Cache", "Mark every cached admin and public view stale", clear_cache),
        MaintenanceTask(
            "optimize_database", "Optimize Database", "Analyze tables and refresh planner statistics", optimize_database
        ),
        MaintenanceTask(
            "cleanup_old_data",
            "Cleanup Old Data",
            f"Remove activity and task logs older than {settings.ACTIVITY_LOG_DEFAULT_RETENTION_DAYS} days",
            cleanup_old_data,
        ),
        MaintenanceTask("rebuild_indexes", "Rebuild Indexes", "Rebuild database indexes", rebuild_indexes),
    )
}


class MaintenanceService:
    """Service for on-demand maintenance jobs"""

    async def _info(self, ctx: ActionContext, _: Any) -> MaintenanceInfo:
        return MaintenanceInfo(
            maintenance_tasks=[
                MaintenanceTaskInfo(id=task.id, name=task.name, description=task.description)
                for task in MAINTENANCE_TASKS.values()
            ],
            cache_status=CacheStatus(
                backend=settings.CACHE_INVALIDATION_BACKEND,
                stale_entries=cache_invalidator.pending(),
            ),
        )

    async def _run(self, ctx: ActionContext, data: MaintenanceTaskRun) -> MaintenanceRunResult:
        task = MAINTENANCE_TASKS[data.task_id]
        result = await task.handler(ctx)
        logger.info(f"Maintenance task {task.id} executed: {result['message']}")

        ctx.audit("maintenance_task_executed", "maintenance", None, {"task_id": task.id, "result": result})
        ctx.invalidate(*MAINTENANCE_PATHS)
        return MaintenanceRunResult(message="Maintenance task executed successfully", task_id=task.id, result=result)

    async def get_maintenance_tasks(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        return await run_action("get_maintenance_tasks", db, credentials, self._info)

    async def run_maintenance_task(self, db: AsyncSession, credentials: CredentialsLike, task_id: Any) -> ActionResult:
        return await run_action(
            "run_maintenance_task", db, credentials, self._run, {"task_id": task_id}, MaintenanceTaskRun
        )


# Global maintenance service instance
maintenance_service = MaintenanceService()
