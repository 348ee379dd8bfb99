"""Navigation menus: named trees of links, ordered among siblings."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from folio.db.models import MenuItem
from folio.db.services import audit_service
from folio.db.services.ordering import OrderedCollection
from folio.db.transaction import atomic
from folio.lib.exceptions import ValidationError
from folio.schemas import MenuItemInput, MenuItemUpdateInput


ENTITY = "MenuItem"


def menu_tag(menu: str) -> str:
    return f"menu:{menu}"


# Siblings share a menu and a parent; each parent orders its own children
menu_items: OrderedCollection[MenuItem] = OrderedCollection(
    MenuItem,
    name="menu_items",
    label="Menu item",
    order_field="order",
    scope_fields=("menu", "parent_id"),
    visibility_field="is_active",
    cache_tags=lambda scope: [menu_tag(scope["menu"])],
)


@dataclass
class MenuNode:
    """One entry of a rendered menu tree."""

    id: UUID
    title: str
    url: str
    order: int
    is_active: bool
    parent_id: UUID | None = None
    children: list[MenuNode] = field(default_factory=list)

    @classmethod
    def from_item(cls, item: MenuItem) -> MenuNode:
        return cls(
            id=item.id,
            title=item.title,
            url=item.url,
            order=item.order,
            is_active=item.is_active,
            parent_id=item.parent_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "url": self.url,
            "order": self.order,
            "is_active": self.is_active,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class FlatMenuEntry:
    id: UUID
    title: str
    depth: int

    @property
    def label(self) -> str:
        return f"{'- ' * self.depth}{self.title}"


def build_menu_tree(items: Iterable[MenuItem]) -> list[MenuNode]:
    """Nest menu rows under their parents, siblings sorted by order.

    Rows whose parent is not among ``items`` (hidden or deleted) are
    dropped along with their own children.
    """
    items = sorted(items, key=lambda item: item.order)
    nodes = {item.id: MenuNode.from_item(item) for item in items}

    roots: list[MenuNode] = []
    for item in items:
        node = nodes[item.id]
        if item.parent_id is None:
            roots.append(node)
        elif item.parent_id in nodes:
            nodes[item.parent_id].children.append(node)
    return roots


def flatten_menu_tree(tree: Iterable[MenuNode], depth: int = 0) -> list[FlatMenuEntry]:
    """Depth-first listing of a tree, parents before their children."""
    flat: list[FlatMenuEntry] = []
    for node in tree:
        flat.append(FlatMenuEntry(id=node.id, title=node.title, depth=depth))
        flat.extend(flatten_menu_tree(node.children, depth + 1))
    return flat


def _descendant_ids(items: Iterable[MenuItem], root_id: UUID) -> set[UUID]:
    children: dict[UUID | None, list[UUID]] = defaultdict(list)
    for item in items:
        children[item.parent_id].append(item.id)

    found: set[UUID] = set()
    pending = list(children[root_id])
    while pending:
        item_id = pending.pop()
        if item_id not in found:
            found.add(item_id)
            pending.extend(children[item_id])
    return found


async def _menu_rows(db_session: AsyncSession, menu: str, active_only: bool = False) -> list[MenuItem]:
    query = select(MenuItem).where(MenuItem.menu == menu)
    if active_only:
        query = query.where(MenuItem.is_active == True)  # noqa: E712
    result = await db_session.execute(query.order_by(MenuItem.order.asc(), MenuItem.created_at.asc()))
    return list(result.scalars().all())


async def _require_parent(db_session: AsyncSession, parent_id: UUID, menu: str) -> MenuItem:
    parent = await menu_items.get(db_session, parent_id)
    if parent is None or parent.menu != menu:
        raise ValidationError.for_field("parent_id", "Parent item not found in this menu.")
    return parent


async def list_menus(db_session: AsyncSession, fallback: Iterable[str] = ("main", "footer")) -> list[str]:
    """Menu names in use, followed by any fallback menus not yet created."""
    result = await db_session.execute(select(MenuItem.menu).distinct().order_by(MenuItem.menu.asc()))
    menus = list(result.scalars().all())
    menus.extend(name for name in fallback if name not in menus)
    return menus


async def menu_exists(db_session: AsyncSession, menu: str) -> bool:
    result = await db_session.execute(select(MenuItem.id).where(MenuItem.menu == menu).limit(1))
    return result.first() is not None


async def get_menu_tree(db_session: AsyncSession, menu: str, active_only: bool = False) -> list[MenuNode]:
    return build_menu_tree(await _menu_rows(db_session, menu, active_only=active_only))


async def create_menu_item(
    db_session: AsyncSession, data: MenuItemInput, user_id: str | None = None
) -> MenuItem:
    """Add a link at the end of its parent's children (or the top level)."""
    scope = {"menu": data.menu, "parent_id": data.parent_id}
    async with atomic(db_session, "create menu item"):
        if data.parent_id is not None:
            await _require_parent(db_session, data.parent_id, data.menu)
        item = await menu_items.stage_append(
            db_session, scope, title=data.title, url=data.url, is_active=data.is_active
        )
        audit_service.stage_audit_log(
            db_session, audit_service.CREATE, ENTITY, item.id, user_id, {"menu": item.menu, "title": item.title}
        )

    await menu_items.notify(scope, "create")
    return item


async def update_menu_item(
    db_session: AsyncSession, item_id: UUID, data: MenuItemUpdateInput, user_id: str | None = None
) -> MenuItem:
    """Edit a link. A new parent moves it to the end of that parent's children."""
    async with atomic(db_session, "update menu item"):
        item = await menu_items.get_or_raise(db_session, item_id)

        if data.parent_id != item.parent_id:
            if data.parent_id is not None:
                await _require_parent(db_session, data.parent_id, item.menu)
                rows = await _menu_rows(db_session, item.menu)
                if data.parent_id == item.id or data.parent_id in _descendant_ids(rows, item.id):
                    raise ValidationError.for_field("parent_id", "An item cannot be nested under itself.")

            new_order = await menu_items.next_order(db_session, {"menu": item.menu, "parent_id": data.parent_id})
            item.parent_id = data.parent_id
            item.order = new_order

        item.title = data.title
        item.url = data.url
        item.is_active = data.is_active
        scope = menu_items.scope_of(item)
        audit_service.stage_audit_log(
            db_session, audit_service.UPDATE, ENTITY, item.id, user_id, {"menu": item.menu, "title": item.title}
        )

    await menu_items.notify(scope, "update")
    return item


async def delete_menu_item(db_session: AsyncSession, item_id: UUID, user_id: str | None = None) -> MenuItem:
    """Delete a link and everything nested below it."""
    async with atomic(db_session, "delete menu item"):
        item = await menu_items.get_or_raise(db_session, item_id)
        scope = menu_items.scope_of(item)
        descendants = _descendant_ids(await _menu_rows(db_session, item.menu), item.id)
        await db_session.execute(delete(MenuItem).where(MenuItem.id.in_([*descendants, item.id])))
        audit_service.stage_audit_log(
            db_session,
            audit_service.DELETE,
            ENTITY,
            item.id,
            user_id,
            {"menu": item.menu, "title": item.title, "descendants": len(descendants)},
        )

    await menu_items.notify(scope, "remove")
    return item


async def move_menu_item(db_session: AsyncSession, item_id: UUID, direction: str) -> bool:
    return await menu_items.move_adjacent(db_session, item_id, direction)


async def set_menu_item_active(db_session: AsyncSession, item_id: UUID, is_active: bool) -> MenuItem:
    return await menu_items.set_visibility(db_session, item_id, is_active)
