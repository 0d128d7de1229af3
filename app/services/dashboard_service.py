"""
Dashboard Service
Aggregate counters and recent activity for the admin dashboard
"""
import logging
from datetime import datetime
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.audit import ActivityLog
from app.models.journal import Article, Issue, Journal
from app.models.submission import Submission
from app.models.user import RoleAssignment, RoleKey, Tenant, User
from app.schemas.common import ActionResult
from app.schemas.dashboard import DashboardOverview, DashboardStats, RecentActivityQuery
from app.services.actions import ActionContext, CredentialsLike, run_action
from app.services.activity_log_service import activity_rows_to_response

logger = logging.getLogger(__name__)


class DashboardService:

    async def _count(self, db: AsyncSession, statement) -> int:
        return (await db.execute(statement)).scalar() or 0

    async def _stats(self, db: AsyncSession) -> DashboardStats:
        month_start = datetime.utcnow().replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        return DashboardStats(
            total_users=await self._count(db, select(func.count(User.id))),
            active_journals=await self._count(db, select(func.count(Journal.id)).where(Journal.is_active.is_(True))),
            total_editors=await self._count(
                db,
                select(func.count(func.distinct(RoleAssignment.user_id))).where(
                    RoleAssignment.role.in_([RoleKey.EDITOR, RoleKey.SECTION_EDITOR]),
                    RoleAssignment.is_active.is_(True),
                ),
            ),
            submissions_this_month=await self._count(
                db, select(func.count(Submission.id)).where(Submission.created_at >= month_start)
            ),
            total_articles=await self._count(db, select(func.count(Article.id))),
            total_issues=await self._count(db, select(func.count(Issue.id))),
            active_tenants=await self._count(db, select(func.count(Tenant.id)).where(Tenant.is_active.is_(True))),
        )

    async def _overview(self, ctx: ActionContext, query: RecentActivityQuery) -> DashboardOverview:
        stats = await self._stats(ctx.db)
        result = await ctx.db.execute(
            select(ActivityLog, User.email)
            .outerjoin(User, User.id == ActivityLog.user_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(query.limit)
        )
        return DashboardOverview(stats=stats, recent_activity=activity_rows_to_response(result.all()))

    async def get_dashboard(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("get_dashboard", db, credentials, self._overview, query or {}, RecentActivityQuery)


# Global dashboard service instance
dashboard_service = DashboardService()
