"""Public, read-only views of the ordered collections.

Responses are built once per cache tag and served from the view cache
until a mutation of the underlying scope invalidates them.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, Request, get
from sqlalchemy.ext.asyncio import AsyncSession

from folio.controllers.helpers import serialize_album, serialize_album_image, serialize_hero_slide
from folio.db.services import album_service, hero_slide_service, menu_service
from folio.lib.cache import view_cache
from folio.lib.exceptions import NotFound
from folio.lib.hooks import PUBLIC_HERO_SLIDE, PUBLIC_MENU_TREE, hooks
from folio.schemas import is_menu_name


class PublicController(Controller):
    path = "/api/public"

    @get("/hero-slides")
    async def hero_slides(self, db_session: AsyncSession) -> list[dict[str, Any]]:
        """Active slides in display order."""

        async def load():
            slides = await hero_slide_service.list_hero_slides(db_session, active_only=True)
            return [
                await hooks.apply_filters(PUBLIC_HERO_SLIDE, serialize_hero_slide(slide), slide)
                for slide in slides
            ]

        return await view_cache.get_or_load(hero_slide_service.HERO_SLIDES_TAG, load)

    @get("/menus/{menu:str}")
    async def menu(self, request: Request, db_session: AsyncSession, menu: str) -> list[dict[str, Any]]:
        """The active entries of a menu as a nested tree.

        Only menus with entries, or configured fallback menus, are served.
        """
        if not is_menu_name(menu):
            raise NotFound("Menu not found.")
        fallback_menus = request.app.state.settings.content.fallback_menus

        async def load():
            if menu not in fallback_menus and not await menu_service.menu_exists(db_session, menu):
                raise NotFound("Menu not found.")
            tree = await menu_service.get_menu_tree(db_session, menu, active_only=True)
            return await hooks.apply_filters(PUBLIC_MENU_TREE, [node.to_dict() for node in tree], menu)

        return await view_cache.get_or_load(menu_service.menu_tag(menu), load)

    @get("/albums/{album_id:uuid}")
    async def album(self, db_session: AsyncSession, album_id: UUID) -> dict[str, Any]:
        async def load():
            album = await album_service.get_album(db_session, album_id, published_only=True)
            if album is None:
                raise NotFound("Album not found.")
            gallery = await album_service.list_album_gallery(db_session, album_id)
            return {
                **serialize_album(album),
                "images": [serialize_album_image(image, url) for image, url in gallery],
            }

        return await view_cache.get_or_load(album_service.album_tag(album_id), load)
