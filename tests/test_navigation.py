"""
Navigation menu tests: hierarchy, cascade delete and batch reorder
"""
import pytest
import pytest_asyncio
from sqlalchemy import func, select

from app.core.exceptions import ErrorCode
from app.models.audit import ActivityLog
from app.models.site import MenuPosition, NavigationMenu
from app.services.cache_service import cache_invalidator
from app.services.navigation_service import navigation_service


@pytest_asyncio.fixture
async def menu_ids(db_session):
    """Three top-level items plus two children under the first"""
    parents = [NavigationMenu(name=f"item-{i}", title=f"Item {i}", sequence=i) for i in range(3)]
    db_session.add_all(parents)
    await db_session.flush()
    children = [
        NavigationMenu(name=f"child-{i}", title=f"Child {i}", parent_id=parents[0].id, sequence=i)
        for i in range(2)
    ]
    db_session.add_all(children)
    await db_session.commit()
    return [m.id for m in parents], [m.id for m in children]


async def sequences(db_session):
    result = await db_session.execute(select(NavigationMenu.id, NavigationMenu.sequence))
    return {menu_id: sequence for menu_id, sequence in result.all()}


class TestNavigationReorder:

    @pytest.mark.asyncio
    async def test_reorder_applies_every_pair(self, db_session, menu_ids, admin_token):
        parent_ids, _ = menu_ids
        a, b, c = parent_ids

        result = await navigation_service.reorder_menus(
            db_session,
            admin_token,
            {"items": [{"id": c, "sequence": 0}, {"id": a, "sequence": 1}, {"id": b, "sequence": 2}]},
        )

        assert result.success is True
        assert result.data == {"updated": 3}
        current = await sequences(db_session)
        assert (current[a], current[b], current[c]) == (1, 2, 0)
        assert cache_invalidator.consume("/admin/navigation") is True

    @pytest.mark.asyncio
    async def test_reorder_with_unknown_id_changes_nothing(self, db_session, menu_ids, admin_token):
        parent_ids, _ = menu_ids
        a, b, _ = parent_ids
        before = await sequences(db_session)

        result = await navigation_service.reorder_menus(
            db_session,
            admin_token,
            {"items": [{"id": a, "sequence": 7}, {"id": 9999, "sequence": 8}, {"id": b, "sequence": 9}]},
        )

        assert result.success is False
        assert result.code == ErrorCode.CONFLICT
        assert result.error == "Failed to reorder some menu items"
        assert result.details == {"failed_ids": [9999]}
        assert await sequences(db_session) == before
        assert (await db_session.execute(select(func.count(ActivityLog.id)))).scalar() == 0

    @pytest.mark.asyncio
    async def test_reorder_requires_items(self, db_session, admin_token):
        result = await navigation_service.reorder_menus(db_session, admin_token, {"items": []})

        assert result.success is False
        assert result.code == ErrorCode.VALIDATION


class TestNavigationDelete:

    @pytest.mark.asyncio
    async def test_delete_parent_removes_children(self, db_session, menu_ids, admin_token):
        parent_ids, child_ids = menu_ids

        result = await navigation_service.delete_menu(db_session, admin_token, parent_ids[0])

        assert result.success is True
        assert result.data == {"id": parent_ids[0], "descendants_deleted": 2}
        remaining = set((await db_session.execute(select(NavigationMenu.id))).scalars().all())
        assert remaining == set(parent_ids[1:])
        log = (await db_session.execute(select(ActivityLog))).scalar_one()
        assert log.action == "delete_navigation_menu"
        assert log.details["descendant_count"] == 2

    @pytest.mark.asyncio
    async def test_delete_counts_grandchildren(self, db_session, menu_ids, admin_token):
        parent_ids, child_ids = menu_ids
        db_session.add(NavigationMenu(name="grandchild", title="Grandchild", parent_id=child_ids[0]))
        await db_session.commit()

        result = await navigation_service.delete_menu(db_session, admin_token, parent_ids[0])

        assert result.success is True
        assert result.data == {"id": parent_ids[0], "descendants_deleted": 3}
        remaining = set((await db_session.execute(select(NavigationMenu.id))).scalars().all())
        assert remaining == set(parent_ids[1:])
        log = (await db_session.execute(select(ActivityLog))).scalar_one()
        assert log.details["descendant_count"] == 3

    @pytest.mark.asyncio
    async def test_delete_missing_item(self, db_session, admin_token):
        result = await navigation_service.delete_menu(db_session, admin_token, 31337)

        assert result.success is False
        assert result.code == ErrorCode.NOT_FOUND
        assert result.error == "Menu item not found"


class TestNavigationCreateUpdate:

    @pytest.mark.asyncio
    async def test_create_child_item(self, db_session, menu_ids, admin_token):
        parent_ids, _ = menu_ids

        result = await navigation_service.create_menu(
            db_session,
            admin_token,
            {"name": "archive", "title": "<i>Archive</i>", "url": "/issues/archive", "parent_id": parent_ids[1]},
        )

        assert result.success is True
        assert result.data.title == "Archive"
        assert result.data.parent_id == parent_ids[1]

    @pytest.mark.asyncio
    async def test_create_with_unknown_parent(self, db_session, admin_token):
        result = await navigation_service.create_menu(
            db_session, admin_token, {"name": "x", "title": "X", "parent_id": 777}
        )

        assert result.success is False
        assert result.error == "Parent menu item not found"

    @pytest.mark.asyncio
    async def test_cannot_move_under_own_descendant(self, db_session, menu_ids, admin_token):
        parent_ids, child_ids = menu_ids

        own = await navigation_service.update_menu(
            db_session, admin_token, {"id": parent_ids[0], "parent_id": parent_ids[0]}
        )
        descendant = await navigation_service.update_menu(
            db_session, admin_token, {"id": parent_ids[0], "parent_id": child_ids[0]}
        )

        assert own.success is False
        assert own.code == ErrorCode.VALIDATION
        assert descendant.success is False
        assert descendant.error == "A menu item cannot be moved under its own descendant"

    @pytest.mark.asyncio
    async def test_list_by_position(self, db_session, menu_ids, admin_token):
        db_session.add(NavigationMenu(name="imprint", title="Imprint", position=MenuPosition.FOOTER))
        await db_session.commit()

        header = await navigation_service.list_menus(db_session, admin_token, {"position": "header"})
        footer = await navigation_service.list_menus(db_session, admin_token, {"position": "footer"})

        assert len(header.data) == 5
        assert [m.name for m in footer.data] == ["imprint"]
