"""
Statistics Service
Platform-wide counters, optionally narrowed to a recent period
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.journal import Article, Issue, Journal
from app.models.submission import Submission
from app.models.user import RoleAssignment, RoleKey, Tenant, User
from app.schemas.common import ActionResult
from app.schemas.statistics import (
    ContentStatistics,
    JournalStatistics,
    PeriodCount,
    PlatformStatistics,
    StatisticsQuery,
    StatisticsReport,
    SubmissionStatistics,
    UserStatistics,
)
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

PERIOD_LENGTH = {
    "day": timedelta(days=1),
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
}


class StatisticsService:

    async def _count(self, db: AsyncSession, statement) -> int:
        return (await db.execute(statement)).scalar() or 0

    async def _role_holders(self, db: AsyncSession, role: RoleKey) -> int:
        return await self._count(
            db,
            select(func.count(func.distinct(RoleAssignment.user_id))).where(
                RoleAssignment.role == role, RoleAssignment.is_active.is_(True)
            ),
        )

    async def _submissions_by_status(self, db: AsyncSession) -> Dict[str, int]:
        result = await db.execute(select(Submission.status, func.count(Submission.id)).group_by(Submission.status))
        return {getattr(status, "value", status): count for status, count in result.all()}

    async def _report(self, ctx: ActionContext, query: StatisticsQuery) -> StatisticsReport:
        db = ctx.db
        end_date = datetime.utcnow()
        start_date: Optional[datetime] = None
        if query.period in PERIOD_LENGTH:
            start_date = end_date - PERIOD_LENGTH[query.period]

        published_articles = select(func.count(Article.id)).where(Article.published_date.is_not(None))
        period_articles = period_submissions = 0
        if start_date is not None:
            period_articles = await self._count(db, published_articles.where(Article.published_date >= start_date))
            period_submissions = await self._count(
                db, select(func.count(Submission.id)).where(Submission.created_at >= start_date)
            )

        statistics = PlatformStatistics(
            users=UserStatistics(
                total=await self._count(db, select(func.count(User.id))),
                editors=await self._role_holders(db, RoleKey.EDITOR),
                reviewers=await self._role_holders(db, RoleKey.REVIEWER),
            ),
            journals=JournalStatistics(
                total=await self._count(db, select(func.count(Journal.id)).where(Journal.is_active.is_(True))),
                tenants=await self._count(db, select(func.count(Tenant.id)).where(Tenant.is_active.is_(True))),
            ),
            content=ContentStatistics(
                articles=PeriodCount(total=await self._count(db, published_articles), period=period_articles),
                submissions=SubmissionStatistics(
                    total=await self._count(db, select(func.count(Submission.id))),
                    period=period_submissions,
                    by_status=await self._submissions_by_status(db),
                ),
                issues=await self._count(db, select(func.count(Issue.id)).where(Issue.is_published.is_(True))),
            ),
            journals_with_articles=await self._count(
                db,
                select(func.count(func.distinct(Article.journal_id))).where(Article.published_date.is_not(None)),
            ),
        )
        return StatisticsReport(period=query.period, start_date=start_date, end_date=end_date, statistics=statistics)

    async def get_statistics(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("get_statistics", db, credentials, self._report, query or {}, StatisticsQuery)


# Global statistics service instance
statistics_service = StatisticsService()
