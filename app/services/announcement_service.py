"""
Announcement Service
"""
import logging
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import InvalidInputError, NotFoundError
from app.models.site import Announcement
from app.schemas.announcement import AnnouncementCreate, AnnouncementQuery, AnnouncementResponse, AnnouncementUpdate
from app.schemas.common import ActionResult, IdPayload, Page
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

ANNOUNCEMENT_PATHS = ("/admin/announcements", "/")


class AnnouncementService:
    """Service for site announcements"""

    async def _get_announcement(self, db: AsyncSession, announcement_id: int) -> Announcement:
        result = await db.execute(select(Announcement).where(Announcement.id == announcement_id))
        announcement = result.scalar_one_or_none()
        if not announcement:
            raise NotFoundError("Announcement not found")
        return announcement

    async def _list(self, ctx: ActionContext, query: AnnouncementQuery) -> Page:
        filters = []
        if query.enabled is not None:
            filters.append(Announcement.enabled.is_(query.enabled))

        total = (await ctx.db.execute(select(func.count(Announcement.id)).where(*filters))).scalar() or 0
        result = await ctx.db.execute(
            select(Announcement)
            .where(*filters)
            .order_by(Announcement.created_at.desc(), Announcement.id.desc())
            .offset(query.offset)
            .limit(query.limit)
        )
        items = [AnnouncementResponse.model_validate(a) for a in result.scalars().all()]
        return Page.build(items, total, query.page, query.limit)

    async def _create(self, ctx: ActionContext, data: AnnouncementCreate) -> AnnouncementResponse:
        announcement = Announcement(**data.model_dump())
        if announcement.date_posted is None:
            announcement.date_posted = datetime.utcnow()
        ctx.db.add(announcement)
        await ctx.db.flush()
        await ctx.db.refresh(announcement)

        ctx.audit("create_announcement", "announcement", announcement.id, {"title": announcement.title})
        ctx.invalidate(*ANNOUNCEMENT_PATHS)
        return AnnouncementResponse.model_validate(announcement)

    async def _update(self, ctx: ActionContext, data: AnnouncementUpdate) -> AnnouncementResponse:
        announcement = await self._get_announcement(ctx.db, data.id)
        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        for field in ("title", "type", "enabled"):
            if field in changes and changes[field] is None:
                del changes[field]

        posted = changes.get("date_posted", announcement.date_posted)
        expire = changes.get("date_expire", announcement.date_expire)
        if posted and expire and expire < posted:
            raise InvalidInputError("date_expire must be after date_posted")

        for field, value in changes.items():
            setattr(announcement, field, value)
        await ctx.db.flush()
        await ctx.db.refresh(announcement)

        action = "update_announcement_status" if set(changes) == {"enabled"} else "update_announcement"
        ctx.audit(action, "announcement", announcement.id, {"fields": sorted(changes)})
        ctx.invalidate(*ANNOUNCEMENT_PATHS)
        return AnnouncementResponse.model_validate(announcement)

    async def _delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        announcement = await self._get_announcement(ctx.db, data.id)
        title = announcement.title
        await ctx.db.delete(announcement)
        await ctx.db.flush()

        ctx.audit("delete_announcement", "announcement", data.id, {"title": title})
        ctx.invalidate(*ANNOUNCEMENT_PATHS)
        return {"id": data.id}

    async def list_announcements(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_announcements", db, credentials, self._list, query or {}, AnnouncementQuery)

    async def create_announcement(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_announcement", db, credentials, self._create, payload, AnnouncementCreate)

    async def update_announcement(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_announcement", db, credentials, self._update, payload, AnnouncementUpdate)

    async def delete_announcement(self, db: AsyncSession, credentials: CredentialsLike, announcement_id: Any) -> ActionResult:
        return await run_action(
            "delete_announcement", db, credentials, self._delete, {"id": announcement_id}, IdPayload
        )


# Global announcement service instance
announcement_service = AnnouncementService()
