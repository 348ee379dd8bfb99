"""Navigation menu admin controller."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, Request, get, post
from litestar.response import Response
from sqlalchemy.ext.asyncio import AsyncSession

from folio.admin.helpers import current_actor, respond
from folio.auth.guards import auth_guard
from folio.controllers.helpers import serialize_menu_item
from folio.db.services import menu_service
from folio.schemas import MenuItemInput, MenuItemUpdateInput, MoveInput, VisibilityInput, parse_input


class MenuAdminController(Controller):
    """JSON endpoints managing menu trees."""

    path = "/admin/menus"
    guards = [auth_guard]

    @get("/")
    async def list_menus(self, request: Request, db_session: AsyncSession) -> Response:
        fallback = request.app.state.settings.content.fallback_menus

        async def operation():
            return await menu_service.list_menus(db_session, fallback=fallback)

        return await respond(request, operation)

    @get("/{menu:str}")
    async def menu_detail(self, request: Request, db_session: AsyncSession, menu: str) -> Response:
        """The full tree of a menu plus the flat list used to pick a parent."""

        async def operation():
            tree = await menu_service.get_menu_tree(db_session, menu)
            return {
                "menu": menu,
                "tree": [node.to_dict() for node in tree],
                "parent_options": [
                    {"id": str(entry.id), "label": entry.label, "depth": entry.depth}
                    for entry in menu_service.flatten_menu_tree(tree)
                ],
            }

        return await respond(request, operation)

    @post("/items")
    async def create_item(self, request: Request, db_session: AsyncSession, data: dict[str, Any]) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            item = await menu_service.create_menu_item(db_session, parse_input(MenuItemInput, data), user_id)
            return serialize_menu_item(item)

        return await respond(request, operation)

    @post("/items/{item_id:uuid}")
    async def update_item(
        self, request: Request, db_session: AsyncSession, item_id: UUID, data: dict[str, Any]
    ) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            item = await menu_service.update_menu_item(
                db_session, item_id, parse_input(MenuItemUpdateInput, data), user_id
            )
            return serialize_menu_item(item)

        return await respond(request, operation)

    @post("/items/{item_id:uuid}/move")
    async def move_item(
        self, request: Request, db_session: AsyncSession, item_id: UUID, data: dict[str, Any]
    ) -> Response:
        """Swap an item with its neighbour among siblings."""

        async def operation():
            move = parse_input(MoveInput, data)
            return {"moved": await menu_service.move_menu_item(db_session, item_id, move.direction)}

        return await respond(request, operation)

    @post("/items/{item_id:uuid}/visibility")
    async def set_visibility(
        self, request: Request, db_session: AsyncSession, item_id: UUID, data: dict[str, Any]
    ) -> Response:
        async def operation():
            visibility = parse_input(VisibilityInput, data)
            item = await menu_service.set_menu_item_active(db_session, item_id, visibility.is_active)
            return serialize_menu_item(item)

        return await respond(request, operation)

    @post("/items/{item_id:uuid}/delete")
    async def delete_item(self, request: Request, db_session: AsyncSession, item_id: UUID) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            item = await menu_service.delete_menu_item(db_session, item_id, user_id)
            return {"id": str(item.id)}

        return await respond(request, operation)
