"""
Issue Service
Lists, creates, updates, publishes and deletes journal issues
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from app.models.journal import Article, Issue, Journal
from app.schemas.common import ActionResult, IdPayload, Page
from app.schemas.issue import IssueCreate, IssueQuery, IssueResponse, IssueUpdate
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

ISSUE_PATHS = ("/admin/issues", "/admin/dashboard")


def apply_issue_status(issue: Issue, status: Optional[str], published_date: Optional[datetime]) -> None:
    """
    Map the requested status onto is_published / published_date.

    draft clears the date, scheduled keeps an explicit date, published
    keeps an existing date or stamps now.
    """
    if status is None:
        if published_date is not None:
            issue.published_date = published_date
        return

    if status == "published":
        issue.is_published = True
        issue.published_date = published_date or issue.published_date or datetime.utcnow()
    elif status == "scheduled":
        date = published_date or issue.published_date
        if date is None:
            raise InvalidInputError(
                "published_date is required for scheduled status",
                {"published_date": ["published_date is required for scheduled status"]},
            )
        issue.is_published = False
        issue.published_date = date
    else:
        issue.is_published = False
        issue.published_date = None


class IssueService:
    """Service for journal issues"""

    async def _get_issue(self, db: AsyncSession, issue_id: int) -> Issue:
        result = await db.execute(select(Issue).where(Issue.id == issue_id))
        issue = result.scalar_one_or_none()
        if not issue:
            raise NotFoundError("Issue not found")
        return issue

    async def _count_articles(self, db: AsyncSession, issue_id: int) -> int:
        result = await db.execute(select(func.count(Article.id)).where(Article.issue_id == issue_id))
        return result.scalar() or 0

    async def _check_duplicate(
        self,
        db: AsyncSession,
        journal_id: int,
        volume: Optional[int],
        number: Optional[str],
        year: int,
        exclude_id: Optional[int] = None,
    ) -> None:
        query = select(Issue.id).where(
            Issue.journal_id == journal_id,
            Issue.volume == volume,
            Issue.number == number,
            Issue.year == year,
        )
        if exclude_id is not None:
            query = query.where(Issue.id != exclude_id)
        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("An issue with this volume, number, and year already exists for this journal")

    async def _to_response(self, db: AsyncSession, issue: Issue) -> IssueResponse:
        journal_title = (
            await db.execute(select(Journal.title).where(Journal.id == issue.journal_id))
        ).scalar_one_or_none()
        response = IssueResponse.model_validate(issue)
        response.journal_title = journal_title
        response.item_count = await self._count_articles(db, issue.id)
        return response

    # ==================== OPERATIONS ====================

    async def _list(self, ctx: ActionContext, query: IssueQuery) -> Page:
        db = ctx.db
        filters = []
        if query.type == "future":
            filters.append(Issue.is_published.is_(False))
        elif query.type == "back":
            filters.append(Issue.is_published.is_(True))
        if query.journal_id:
            filters.append(Issue.journal_id == query.journal_id)
        if query.search:
            pattern = f"%{query.search}%"
            filters.append(or_(Issue.title.ilike(pattern), Issue.description.ilike(pattern)))

        total = (await db.execute(select(func.count(Issue.id)).where(*filters))).scalar() or 0

        result = await db.execute(
            select(Issue, Journal.title)
            .join(Journal, Journal.id == Issue.journal_id)
            .where(*filters)
            .order_by(Issue.year.desc(), Issue.volume.desc(), Issue.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        rows = result.all()

        issue_ids = [issue.id for issue, _ in rows]
        counts: Dict[int, int] = {}
        if issue_ids:
            count_result = await db.execute(
                select(Article.issue_id, func.count(Article.id))
                .where(Article.issue_id.in_(issue_ids))
                .group_by(Article.issue_id)
            )
            counts = {issue_id: count for issue_id, count in count_result.all()}

        items = []
        for issue, journal_title in rows:
            item = IssueResponse.model_validate(issue)
            item.journal_title = journal_title
            item.item_count = counts.get(issue.id, 0)
            items.append(item)

        return Page.build(items, total, query.page, query.limit)

    async def _create(self, ctx: ActionContext, data: IssueCreate) -> IssueResponse:
        db = ctx.db
        journal = (await db.execute(select(Journal.id).where(Journal.id == data.journal_id))).scalar_one_or_none()
        if journal is None:
            raise NotFoundError("Journal not found")

        await self._check_duplicate(db, data.journal_id, data.volume, data.number, data.year)

        issue = Issue(
            journal_id=data.journal_id,
            volume=data.volume,
            number=data.number,
            year=data.year,
            title=data.title,
            description=data.description,
            access_status=data.access_status,
            cover_image_url=data.cover_image_url,
            cover_image_alt_text=data.cover_image_alt_text,
        )
        apply_issue_status(issue, data.status, data.published_date)
        db.add(issue)
        await db.flush()
        await db.refresh(issue)

        ctx.audit("issue_created", "issue", issue.id, {"journal_id": issue.journal_id, "status": issue.status})
        ctx.invalidate(*ISSUE_PATHS)
        return await self._to_response(db, issue)

    async def _update(self, ctx: ActionContext, data: IssueUpdate) -> IssueResponse:
        db = ctx.db
        issue = await self._get_issue(db, data.id)
        changes = data.model_dump(exclude_unset=True, exclude={"id", "status", "published_date"})
        # year and access_status are required columns
        for field in ("year", "access_status"):
            if field in changes and changes[field] is None:
                del changes[field]

        volume = changes.get("volume", issue.volume)
        number = changes.get("number", issue.number)
        year = changes.get("year", issue.year)
        if (volume, number, year) != (issue.volume, issue.number, issue.year):
            await self._check_duplicate(db, issue.journal_id, volume, number, year, exclude_id=issue.id)

        for field, value in changes.items():
            setattr(issue, field, value)
        apply_issue_status(issue, data.status, data.published_date)

        await db.flush()
        await db.refresh(issue)

        ctx.audit("issue_updated", "issue", issue.id, {"fields": sorted(data.model_fields_set - {"id"})})
        ctx.invalidate(*ISSUE_PATHS)
        return await self._to_response(db, issue)

    async def _publish(self, ctx: ActionContext, data: IdPayload) -> IssueResponse:
        db = ctx.db
        issue = await self._get_issue(db, data.id)
        if issue.is_published:
            raise ConflictError("Issue is already published")

        issue.is_published = True
        if issue.published_date is None:
            issue.published_date = datetime.utcnow()
        await db.flush()
        await db.refresh(issue)

        ctx.audit("issue_published", "issue", issue.id, {"published_date": issue.published_date.isoformat()})
        ctx.invalidate(*ISSUE_PATHS)
        return await self._to_response(db, issue)

    async def _delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        db = ctx.db
        issue = await self._get_issue(db, data.id)

        article_count = await self._count_articles(db, issue.id)
        if article_count > 0:
            raise ConflictError(
                f"Cannot delete issue: It contains {article_count} article(s). Please remove articles first.",
                {"article_count": article_count},
            )

        details = {"journal_id": issue.journal_id, "year": issue.year}
        await db.delete(issue)
        await db.flush()

        ctx.audit("issue_deleted", "issue", data.id, details)
        ctx.invalidate(*ISSUE_PATHS)
        return {"id": data.id}

    # ==================== PUBLIC API ====================

    async def list_issues(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_issues", db, credentials, self._list, query or {}, IssueQuery)

    async def create_issue(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_issue", db, credentials, self._create, payload, IssueCreate)

    async def update_issue(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_issue", db, credentials, self._update, payload, IssueUpdate)

    async def publish_issue(self, db: AsyncSession, credentials: CredentialsLike, issue_id: Any) -> ActionResult:
        return await run_action("publish_issue", db, credentials, self._publish, {"id": issue_id}, IdPayload)

    async def delete_issue(self, db: AsyncSession, credentials: CredentialsLike, issue_id: Any) -> ActionResult:
        return await run_action("delete_issue", db, credentials, self._delete, {"id": issue_id}, IdPayload)


# Global issue service instance
issue_service = IssueService()
