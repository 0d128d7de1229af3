"""
System Info Service

Runtime and database facts for the administrator. Connection details are
reported with the password hidden; a failing database is reported, not raised.
"""
import logging
import platform
import socket
import time
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.capabilities import capabilities
from app.core.config import settings
from app.models.journal import Article, Issue, Journal
from app.models.user import User
from app.schemas.common import ActionResult
from app.schemas.statistics import DatabaseHealth, DatabaseInfo, DatabaseStats, RuntimeInfo, SystemInfo
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.maintenance_service import table_names

logger = logging.getLogger(__name__)

STARTED_AT = time.monotonic()


def _server_version(dialect) -> Optional[str]:
    version = getattr(dialect, "server_version_info", None)
    if not version:
        return None
    return ".".join(str(part) for part in version)


class SystemInfoService:

    async def _ping(self, db: AsyncSession) -> bool:
        try:
            await db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            await db.rollback()
            return False

    async def _count(self, db: AsyncSession, column) -> int:
        return (await db.execute(select(func.count(column)))).scalar() or 0

    async def _info(self, ctx: ActionContext, _: Any) -> SystemInfo:
        db = ctx.db
        engine = db.bind
        connected = await self._ping(db)

        tables = []
        database_stats = None
        if connected:
            tables = await table_names(db)
            database_stats = DatabaseStats(
                total_tables=len(tables),
                total_users=await self._count(db, User.id),
                total_journals=await self._count(db, Journal.id),
                total_articles=await self._count(db, Article.id),
                total_issues=await self._count(db, Issue.id),
            )

        return SystemInfo(
            runtime=RuntimeInfo(
                python_version=platform.python_version(),
                implementation=platform.python_implementation(),
                platform=platform.system().lower(),
                architecture=platform.machine(),
                hostname=socket.gethostname(),
                app_version=settings.VERSION,
                environment=settings.ENVIRONMENT,
                uptime_seconds=round(time.monotonic() - STARTED_AT, 3),
                timestamp=datetime.utcnow(),
            ),
            database=DatabaseInfo(
                dialect=engine.dialect.name,
                driver=engine.dialect.driver,
                url=engine.url.render_as_string(hide_password=True),
                status="connected" if connected else "error",
                version=_server_version(engine.dialect) if connected else None,
            ),
            database_stats=database_stats,
            capabilities={"backups": capabilities.backups},
            cache_backend=settings.CACHE_INVALIDATION_BACKEND,
            tables=tables,
        )

    async def _health(self, ctx: ActionContext, _: Any) -> DatabaseHealth:
        started = time.perf_counter()
        healthy = await self._ping(ctx.db)
        return DatabaseHealth(
            status="healthy" if healthy else "unhealthy",
            response_time=int((time.perf_counter() - started) * 1000),
            timestamp=datetime.utcnow(),
        )

    async def get_system_info(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        return await run_action("get_system_info", db, credentials, self._info)

    async def get_database_health(self, db: AsyncSession, credentials: CredentialsLike) -> ActionResult:
        return await run_action("get_database_health", db, credentials, self._health)


# Global system info service instance
system_info_service = SystemInfoService()
