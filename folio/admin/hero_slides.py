"""Hero slider admin controller."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, Request, get, post
from litestar.response import Response
from sqlalchemy.ext.asyncio import AsyncSession

from folio.admin.helpers import current_actor, respond
from folio.auth.guards import auth_guard
from folio.controllers.helpers import serialize_hero_slide
from folio.db.services import hero_slide_service
from folio.schemas import HeroSlideInput, MoveInput, VisibilityInput, parse_input


class HeroSlideAdminController(Controller):
    """JSON endpoints managing the hero slider."""

    path = "/admin/hero-slides"
    guards = [auth_guard]

    @get("/")
    async def list_slides(self, request: Request, db_session: AsyncSession) -> Response:
        """All slides in display order, hidden ones included."""

        async def operation():
            slides = await hero_slide_service.list_hero_slides(db_session)
            return [serialize_hero_slide(slide) for slide in slides]

        return await respond(request, operation)

    @post("/")
    async def create_slide(self, request: Request, db_session: AsyncSession, data: dict[str, Any]) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            slide_input = parse_input(HeroSlideInput, data)
            slide = await hero_slide_service.create_hero_slide(db_session, slide_input, user_id)
            return serialize_hero_slide(slide)

        return await respond(request, operation)

    @post("/{slide_id:uuid}")
    async def update_slide(
        self, request: Request, db_session: AsyncSession, slide_id: UUID, data: dict[str, Any]
    ) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            slide_input = parse_input(HeroSlideInput, data)
            slide = await hero_slide_service.update_hero_slide(db_session, slide_id, slide_input, user_id)
            return serialize_hero_slide(slide)

        return await respond(request, operation)

    @post("/{slide_id:uuid}/move")
    async def move_slide(
        self, request: Request, db_session: AsyncSession, slide_id: UUID, data: dict[str, Any]
    ) -> Response:
        """Swap a slide with its neighbour above or below."""
        user_id = current_actor(request).user_id

        async def operation():
            move = parse_input(MoveInput, data)
            moved = await hero_slide_service.move_hero_slide(db_session, slide_id, move.direction, user_id)
            return {"moved": moved}

        return await respond(request, operation)

    @post("/{slide_id:uuid}/visibility")
    async def set_visibility(
        self, request: Request, db_session: AsyncSession, slide_id: UUID, data: dict[str, Any]
    ) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            visibility = parse_input(VisibilityInput, data)
            slide = await hero_slide_service.set_hero_slide_active(
                db_session, slide_id, visibility.is_active, user_id
            )
            return serialize_hero_slide(slide)

        return await respond(request, operation)

    @post("/{slide_id:uuid}/delete")
    async def delete_slide(self, request: Request, db_session: AsyncSession, slide_id: UUID) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            slide = await hero_slide_service.delete_hero_slide(db_session, slide_id, user_id)
            return {"id": str(slide.id)}

        return await respond(request, operation)
