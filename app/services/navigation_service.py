"""
Navigation Service
Hierarchical menu entries. Children are removed by the parent_id foreign key
cascade when their parent is deleted.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from app.models.site import NavigationMenu
from app.schemas.common import ActionResult, IdPayload
from app.schemas.navigation import (
    NavigationMenuCreate,
    NavigationMenuResponse,
    NavigationMenuUpdate,
    NavigationQuery,
    NavigationReorder,
)
from app.services.actions import ActionContext, CredentialsLike, run_action

logger = logging.getLogger(__name__)

NAVIGATION_PATHS = ("/admin/navigation", "/admin/dashboard", "/")


class NavigationService:
    """Service for navigation menus"""

    async def _get_menu(self, db: AsyncSession, menu_id: int, message: str = "Menu item not found") -> NavigationMenu:
        result = await db.execute(select(NavigationMenu).where(NavigationMenu.id == menu_id))
        menu = result.scalar_one_or_none()
        if not menu:
            raise NotFoundError(message)
        return menu

    async def _check_parent(self, db: AsyncSession, menu_id: Optional[int], parent_id: int) -> None:
        """Parent must exist and must not be the item itself or one of its descendants"""
        if menu_id is not None and parent_id == menu_id:
            raise InvalidInputError("A menu item cannot be its own parent")

        current: Optional[int] = parent_id
        first = True
        while current is not None:
            result = await db.execute(select(NavigationMenu.parent_id).where(NavigationMenu.id == current))
            row = result.first()
            if row is None:
                if first:
                    raise NotFoundError("Parent menu item not found")
                break
            first = False
            current = row[0]
            if menu_id is not None and current == menu_id:
                raise InvalidInputError("A menu item cannot be moved under its own descendant")

    async def _count_descendants(self, db: AsyncSession, menu_id: int) -> int:
        """Every item below menu_id, at any depth"""
        descendants = (
            select(NavigationMenu.id)
            .where(NavigationMenu.parent_id == menu_id)
            .cte(name="descendants", recursive=True)
        )
        child = aliased(NavigationMenu)
        descendants = descendants.union_all(select(child.id).where(child.parent_id == descendants.c.id))
        result = await db.execute(select(func.count()).select_from(descendants))
        return result.scalar() or 0

    async def _list(self, ctx: ActionContext, query: NavigationQuery) -> List[NavigationMenuResponse]:
        statement = select(NavigationMenu)
        if query.position:
            statement = statement.where(NavigationMenu.position == query.position)
        result = await ctx.db.execute(statement.order_by(NavigationMenu.sequence, NavigationMenu.id))
        return [NavigationMenuResponse.model_validate(menu) for menu in result.scalars().all()]

    async def _create(self, ctx: ActionContext, data: NavigationMenuCreate) -> NavigationMenuResponse:
        db = ctx.db
        if data.parent_id is not None:
            await self._check_parent(db, None, data.parent_id)

        menu = NavigationMenu(**data.model_dump())
        db.add(menu)
        await db.flush()
        await db.refresh(menu)

        ctx.audit("create_navigation_menu", "navigation_menu", menu.id, {"name": menu.name, "title": menu.title})
        ctx.invalidate(*NAVIGATION_PATHS)
        return NavigationMenuResponse.model_validate(menu)

    async def _update(self, ctx: ActionContext, data: NavigationMenuUpdate) -> NavigationMenuResponse:
        db = ctx.db
        menu = await self._get_menu(db, data.id)
        changes = data.model_dump(exclude_unset=True, exclude={"id"})
        for field in ("name", "title", "menu_type", "sequence", "enabled", "target_blank", "position"):
            if field in changes and changes[field] is None:
                del changes[field]
        if changes.get("parent_id") is not None:
            await self._check_parent(db, menu.id, changes["parent_id"])

        for field, value in changes.items():
            setattr(menu, field, value)
        await db.flush()
        await db.refresh(menu)

        ctx.audit("update_navigation_menu", "navigation_menu", menu.id, {"fields": sorted(changes)})
        ctx.invalidate(*NAVIGATION_PATHS)
        return NavigationMenuResponse.model_validate(menu)

    async def _delete(self, ctx: ActionContext, data: IdPayload) -> Dict[str, Any]:
        db = ctx.db
        menu = await self._get_menu(db, data.id)
        name = menu.name
        descendant_count = await self._count_descendants(db, menu.id)

        # Core delete so the database cascade removes the children
        await db.execute(delete(NavigationMenu).where(NavigationMenu.id == data.id))

        ctx.audit(
            "delete_navigation_menu",
            "navigation_menu",
            data.id,
            {"name": name, "descendant_count": descendant_count},
        )
        ctx.invalidate(*NAVIGATION_PATHS)
        return {"id": data.id, "descendants_deleted": descendant_count}

    async def _reorder(self, ctx: ActionContext, data: NavigationReorder) -> Dict[str, Any]:
        """
        Apply every {id, sequence} pair. Any missing row fails the whole batch;
        the envelope rolls back so no partial order is left behind.
        """
        failed: List[int] = []
        for item in data.items:
            result = await ctx.db.execute(
                update(NavigationMenu)
                .where(NavigationMenu.id == item.id)
                .values(sequence=item.sequence)
            )
            if result.rowcount != 1:
                failed.append(item.id)

        if failed:
            logger.warning(f"Menu reorder failed for ids {failed}")
            raise ConflictError("Failed to reorder some menu items", {"failed_ids": failed})

        ctx.audit("reorder_navigation_menus", "navigation_menu", None, {"count": len(data.items)})
        ctx.invalidate(*NAVIGATION_PATHS)
        return {"updated": len(data.items)}

    async def list_menus(self, db: AsyncSession, credentials: CredentialsLike, query: Any = None) -> ActionResult:
        return await run_action("list_navigation_menus", db, credentials, self._list, query or {}, NavigationQuery)

    async def create_menu(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("create_navigation_menu", db, credentials, self._create, payload, NavigationMenuCreate)

    async def update_menu(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("update_navigation_menu", db, credentials, self._update, payload, NavigationMenuUpdate)

    async def delete_menu(self, db: AsyncSession, credentials: CredentialsLike, menu_id: Any) -> ActionResult:
        return await run_action("delete_navigation_menu", db, credentials, self._delete, {"id": menu_id}, IdPayload)

    async def reorder_menus(self, db: AsyncSession, credentials: CredentialsLike, payload: Any) -> ActionResult:
        return await run_action("reorder_navigation_menus", db, credentials, self._reorder, payload, NavigationReorder)


# Global navigation service instance
navigation_service = NavigationService()
