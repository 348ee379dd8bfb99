"""Photo album admin controller."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from litestar import Controller, Request, get, post
from litestar.response import Response
from sqlalchemy.ext.asyncio import AsyncSession

from folio.admin.helpers import current_actor, respond
from folio.auth.guards import auth_guard
from folio.controllers.helpers import serialize_album, serialize_album_image
from folio.db.models import AlbumStatus
from folio.db.services import album_service
from folio.schemas import (
    AddAlbumImagesInput,
    AlbumImagesReconcileInput,
    AlbumInput,
    MoveInput,
    parse_input,
)


class AlbumAdminController(Controller):
    """JSON endpoints managing albums and the order of their images."""

    path = "/admin/albums"
    guards = [auth_guard]

    @get("/")
    async def list_albums(
        self, request: Request, db_session: AsyncSession, status: AlbumStatus | None = None
    ) -> Response:
        async def operation():
            albums = await album_service.list_albums(db_session, status=status)
            return [serialize_album(album) for album in albums]

        return await respond(request, operation)

    @post("/")
    async def create_album(self, request: Request, db_session: AsyncSession, data: dict[str, Any]) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            album = await album_service.create_album(db_session, parse_input(AlbumInput, data), user_id)
            return serialize_album(album)

        return await respond(request, operation)

    @get("/{album_id:uuid}")
    async def album_detail(self, request: Request, db_session: AsyncSession, album_id: UUID) -> Response:
        """An album with its images in display order."""

        async def operation():
            album = await album_service.get_album_or_raise(db_session, album_id)
            gallery = await album_service.list_album_gallery(db_session, album_id)
            return {
                **serialize_album(album),
                "images": [serialize_album_image(image, url) for image, url in gallery],
            }

        return await respond(request, operation)

    @post("/{album_id:uuid}")
    async def update_album(
        self, request: Request, db_session: AsyncSession, album_id: UUID, data: dict[str, Any]
    ) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            album = await album_service.update_album(db_session, album_id, parse_input(AlbumInput, data), user_id)
            return serialize_album(album)

        return await respond(request, operation)

    @post("/{album_id:uuid}/delete")
    async def delete_album(self, request: Request, db_session: AsyncSession, album_id: UUID) -> Response:
        user_id = current_actor(request).user_id

        async def operation():
            await album_service.delete_album(db_session, album_id, user_id)
            return {"id": str(album_id)}

        return await respond(request, operation)

    @post("/{album_id:uuid}/images")
    async def add_images(
        self, request: Request, db_session: AsyncSession, album_id: UUID, data: dict[str, Any]
    ) -> Response:
        """Append images to the end of the album."""
        user_id = current_actor(request).user_id

        async def operation():
            images_input = parse_input(AddAlbumImagesInput, data)
            images = await album_service.add_album_images(db_session, album_id, images_input.images, user_id)
            return [serialize_album_image(image) for image in images]

        return await respond(request, operation)

    @post("/{album_id:uuid}/images/reconcile")
    async def reconcile_images(
        self, request: Request, db_session: AsyncSession, album_id: UUID, data: dict[str, Any]
    ) -> Response:
        """Save the editor's final image order, removals and captions at once."""
        user_id = current_actor(request).user_id

        async def operation():
            reconcile_input = parse_input(AlbumImagesReconcileInput, data)
            images = await album_service.reconcile_album_images(db_session, album_id, reconcile_input, user_id)
            return [serialize_album_image(image) for image in images]

        return await respond(request, operation)

    @post("/images/{image_id:uuid}/move")
    async def move_image(
        self, request: Request, db_session: AsyncSession, image_id: UUID, data: dict[str, Any]
    ) -> Response:
        async def operation():
            move = parse_input(MoveInput, data)
            return {"moved": await album_service.move_album_image(db_session, image_id, move.direction)}

        return await respond(request, operation)

    @post("/images/{image_id:uuid}/delete")
    async def delete_image(self, request: Request, db_session: AsyncSession, image_id: UUID) -> Response:
        async def operation():
            image = await album_service.remove_album_image(db_session, image_id)
            return {"id": str(image.id)}

        return await respond(request, operation)
