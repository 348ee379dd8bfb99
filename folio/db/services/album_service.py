"""Photo albums and the ordered images inside them."""

import logging
import re
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from folio.db.models import Album, AlbumImage, AlbumStatus, Media
from folio.db.services import audit_service, media_service
from folio.db.services.ordering import OrderedCollection
from folio.db.transaction import atomic
from folio.lib.exceptions import NotFound, ValidationError
from folio.lib.hooks import COLLECTION_CHANGED, hooks
from folio.schemas import AlbumImageInput, AlbumImagesReconcileInput, AlbumInput

logger = logging.getLogger(__name__)

ENTITY = "Album"
ALBUMS_TAG = "albums"


def album_tag(album_id: UUID) -> str:
    return f"album:{album_id}"


album_images: OrderedCollection[AlbumImage] = OrderedCollection(
    AlbumImage,
    name="album_images",
    label="Image",
    order_field="position",
    scope_fields=("album_id",),
    cache_tags=lambda scope: [album_tag(scope["album_id"]), ALBUMS_TAG],
)


def slugify(value: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-")
    return slug or "album"


async def _notify_album(album_id: UUID, operation: str) -> None:
    await album_images.notify({"album_id": album_id}, operation)


async def _notify_albums(operation: str) -> None:
    """Album list changed without touching any image sequence."""
    try:
        await hooks.do_action(COLLECTION_CHANGED, "albums", [ALBUMS_TAG], operation)
    except Exception:
        logger.warning("Change notification failed for albums", exc_info=True)


async def _slug_taken(db_session: AsyncSession, slug: str, exclude_id: UUID | None = None) -> bool:
    query = select(Album.id).where(Album.slug == slug)
    if exclude_id is not None:
        query = query.where(Album.id != exclude_id)
    result = await db_session.execute(query)
    return result.first() is not None


async def list_albums(db_session: AsyncSession, status: AlbumStatus | None = None) -> list[Album]:
    """Albums newest first, optionally filtered by status."""
    query = select(Album)
    if status is not None:
        query = query.where(Album.status == status.value)
    result = await db_session.execute(query.order_by(Album.created_at.desc()))
    return list(result.scalars().all())


async def get_album(db_session: AsyncSession, album_id: UUID, published_only: bool = False) -> Album | None:
    query = select(Album).where(Album.id == album_id)
    if published_only:
        query = query.where(Album.status == AlbumStatus.PUBLISHED.value)
    result = await db_session.execute(query)
    return result.scalar_one_or_none()


async def get_album_or_raise(db_session: AsyncSession, album_id: UUID, published_only: bool = False) -> Album:
    album = await get_album(db_session, album_id, published_only=published_only)
    if album is None:
        raise NotFound("Album not found.")
    return album


async def list_album_images(db_session: AsyncSession, album_id: UUID) -> list[AlbumImage]:
    return await album_images.list(db_session, {"album_id": album_id})


async def list_album_gallery(db_session: AsyncSession, album_id: UUID) -> list[tuple[AlbumImage, str]]:
    """Images of an album in order, each paired with its media URL."""
    result = await db_session.execute(
        select(AlbumImage, Media.url)
        .join(Media, AlbumImage.media_id == Media.id)
        .where(AlbumImage.album_id == album_id)
        .order_by(AlbumImage.position.asc())
    )
    return [(image, url) for image, url in result.all()]


async def create_album(db_session: AsyncSession, data: AlbumInput, user_id: str | None = None) -> Album:
    async with atomic(db_session, "create album"):
        slug = data.slug or slugify(data.title)
        if await _slug_taken(db_session, slug):
            raise ValidationError.for_field("slug", "An album with this slug already exists.")

        album = Album(
            title=data.title,
            slug=slug,
            description=data.description,
            status=data.status.value,
        )
        db_session.add(album)
        await db_session.flush()
        audit_service.stage_audit_log(
            db_session, audit_service.CREATE, ENTITY, album.id, user_id, {"title": album.title}
        )

    await _notify_albums("create")
    return album


async def update_album(
    db_session: AsyncSession,
    album_id: UUID,
    data: AlbumInput,
    user_id: str | None = None,
) -> Album:
    async with atomic(db_session, "update album"):
        album = await get_album_or_raise(db_session, album_id)
        slug = data.slug or album.slug
        if await _slug_taken(db_session, slug, exclude_id=album.id):
            raise ValidationError.for_field("slug", "An album with this slug already exists.")

        album.title = data.title
        album.slug = slug
        album.description = data.description
        album.status = data.status.value
        audit_service.stage_audit_log(
            db_session, audit_service.UPDATE, ENTITY, album.id, user_id, {"title": album.title}
        )

    await _notify_album(album_id, "update")
    return album


async def delete_album(db_session: AsyncSession, album_id: UUID, user_id: str | None = None) -> None:
    """Delete an album together with its images."""
    async with atomic(db_session, "delete album"):
        album = await get_album_or_raise(db_session, album_id)
        audit_service.stage_audit_log(
            db_session, audit_service.DELETE, ENTITY, album.id, user_id, {"title": album.title}
        )
        await db_session.refresh(album, ["images"])
        await db_session.delete(album)

    await _notify_album(album_id, "remove")


async def add_album_images(
    db_session: AsyncSession,
    album_id: UUID,
    images: list[AlbumImageInput],
    user_id: str | None = None,
) -> list[AlbumImage]:
    """Append images to the end of an album, in the order given."""
    async with atomic(db_session, "add album images"):
        await get_album_or_raise(db_session, album_id)
        await media_service.require_media(db_session, [image.media_id for image in images], field="images")

        created = []
        for image in images:
            created.append(
                await album_images.stage_append(
                    db_session, {"album_id": album_id}, media_id=image.media_id, caption=image.caption
                )
            )
        audit_service.stage_audit_log(
            db_session, audit_service.UPDATE, ENTITY, album_id, user_id, {"added_images": len(created)}
        )

    await _notify_album(album_id, "append")
    return created


async def move_album_image(db_session: AsyncSession, image_id: UUID, direction: str) -> bool:
    return await album_images.move_adjacent(db_session, image_id, direction)


async def remove_album_image(db_session: AsyncSession, image_id: UUID) -> AlbumImage:
    """Delete one image. Other images keep their positions."""
    return await album_images.remove(db_session, image_id)


async def reconcile_album_images(
    db_session: AsyncSession,
    album_id: UUID,
    data: AlbumImagesReconcileInput,
    user_id: str | None = None,
) -> list[AlbumImage]:
    """Apply an editor's final image list in one transaction.

    Deletes ``removed_ids``, renumbers the survivors to their index in
    ``ordered_ids`` and then applies caption edits.
    """
    async with atomic(db_session, "reconcile album images"):
        await get_album_or_raise(db_session, album_id)
        images = await album_images.stage_reconcile(
            db_session,
            {"album_id": album_id},
            data.ordered_ids,
            data.removed_ids,
            {image_id: {"caption": caption} for image_id, caption in data.captions.items()},
            updates_field="captions",
        )
        audit_service.stage_audit_log(
            db_session,
            audit_service.REORDER,
            ENTITY,
            album_id,
            user_id,
            {"order": [str(image_id) for image_id in data.ordered_ids], "removed": len(data.removed_ids)},
        )

    await _notify_album(album_id, "reconcile")
    return images

