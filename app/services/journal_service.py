"""
Journal Service
Journal CRUD. Deleting archives by default; hard delete removes the row.
"""
import logging
from typing import Any, Dict

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.models.journal import Journal, JournalStatus
from app.models.user import Tenant
from app.schemas.common import ActionResult, IdPayload, Page
from app.schemas.journal import JournalCreate, JournalQuery, JournalResponse, JournalUpdate
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)


def journal_paths(path: str) -> tuple:
    return ("/admin/journals", "/admin/dashboard", f"/{path}")


class JournalService:
    """Service for journal administration"""

    async def _get_journal(self, db: AsyncSession, journal_id: int) -> Journal:
        result = await db.execute(select(Journal).where(Journal.id == journal_id))
        journal = result.scalar_one_or_none()
        if not journal:
            raise NotFoundError("Journal not found")
        return journal

    async def _check_path_available(self, db: AsyncSession, path: str) -> None:
        result = await db.execute(select(Journal.id).where(Journal.path == path))
        if result.scalar_one_or_none() is not None:
            raise ConflictError("A journal with this path already exists")

    async def _list(self, ctx: ActionContext, query: JournalQuery) -> Page:
        filters = []
        if query.search:
            pattern = f"%{query.search}%"
            filters.append(
                or_(Journal.title.ilike(pattern), Journal.path.ilike(pattern), Journal.abbreviation.ilike(pattern))
            )
        if query.is_active is not None:
            filters.append(Journal.is_active.is_(query.is_active))

        total = (await ctx.db.execute(select(func.count(Journal.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(Journal)
            .where(*filters)
            .order_by(Journal.created_at.desc(), Journal.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [JournalResponse.model_validate(journal) for journal in result.scalars().all()]
        return Page.build(items, total, query.page, query.limit)

    async def _get(self, ctx: ActionContext, data: IdPayload) -> JournalResponse:
        return JournalResponse.model_validate(await self._get_journal(ctx.db, data.id))

    async def _create(self, ctx: ActionContext, data: JournalCreate) -> JournalResponse:
        db = ctx.db
        tenant = (await db.execute(select(Tenant.id).where(Tenant.id == data.tenant_id))).scalar_one_or_none()
        if tenant is None:
            raise NotFoundError("Tenant not found")
        await self._check_path_available(db, data.path)

        journal = Journal(**data.model_dump())
        journal.status = JournalStatus.ACTIVE if data.is_active else JournalStatus.SUSPENDED
        db.add(journal)
        await db.flush()
        await db.refresh(journal)

        ctx.audit("create_journal", "journal", journal.id, {"title": journal.title, "path": journal.path})
        ctx.invalidate(*journal_paths(journal.path))
        return JournalResponse.model_validate(journal)

    async def _update(self, ctx: ActionContext, data: JournalUpdate) -> JournalResponse:
        db = ctx.db
        journal = await self._get_journal(db, data.id)
        old_path = journal.path

        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        for field in ("title", "path", "language", "status", "is_active"):
            if field in changes and changes[field] is None:
                del changes[field]
        if "path" in changes and changes["path"] != old_path:
            await self._check_path_available(db, changes["path"])

        for field, value in changes.items():
            setattr(journal, field, value)
        await db.flush()
        await db.refresh(journal)

        action = "update_journal_status" if set(changes) <= {"status", "is_active"} else "update_journal"
        ctx.audit(action, "journal", journal.id, {"fields": sorted(changes)})
        ctx.invalidate(*journal_paths(journal.path))
        if old_path != journal.path:
            ctx.invalidate(f"/{old_path}")
        return JournalResponse.model_validate(journal)

    async def _archive(self, ctx: ActionContext, data: IdPayload) -> JournalResponse:
        journal = await self._get_journal(ctx.db, data.id)
        journal.status = JournalStatus.ARCHIVED
        journal.is_active = False
        await ctx.db.flush()
        await ctx.db.refresh(journal)

        ctx.audit("delete_journal", "journal", journal.id, {"title": journal.title, "soft_delete": True})
        ctx.invalidate(*journal_paths(journal.path))
        return JournalResponse.model_validate(journal)

    async def _hard_delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        journal = await self._get_journal(ctx.db, data.id)
        title, path = journal.title, journal.path
        await ctx.db.delete(journal)
        await ctx.db.flush()

        ctx.audit("hard_delete_journal", "journal", data.id, {"title": title, "path": path})
        ctx.invalidate(*journal_paths(path))
        return {"id": data.id}

    async def list_journals(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_journals", db, credentials, self._list, query or {}, JournalQuery)

    async def get_journal(self, db: AsyncSession, credentials: CredentialsLike, journal_id: Any) -> ActionResult:
        return await run_action("get_journal", db, credentials, self._get, {"id": journal_id}, IdPayload)

    async def create_journal(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_journal", db, credentials, self._create, payload, JournalCreate)

    async def update_journal(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_journal", db, credentials, self._update, payload, JournalUpdate)

    async def delete_journal(self, db: AsyncSession, credentials: CredentialsLike, journal_id: Any) -> ActionResult:
        """Soft delete: the journal is archived and deactivated"""
        return await run_action("delete_journal", db, credentials, self._archive, {"id": journal_id}, IdPayload)

    async def hard_delete_journal(self, db: AsyncSession, credentials: CredentialsLike, journal_id: Any) -> ActionResult:
        return await run_action("hard_delete_journal", db, credentials, self._hard_delete, {"id": journal_id}, IdPayload)


# Global journal service instance
journal_service = JournalService()
