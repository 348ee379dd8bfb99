"""Lookups of uploaded media referenced by slides and albums."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from folio.db.models import Media
from folio.lib.exceptions import ValidationError


async def get_media_by_id(db_session: AsyncSession, media_id: UUID) -> Media | None:
    result = await db_session.execute(select(Media).where(Media.id == media_id))
    return result.scalar_one_or_none()


async def resolve_image_reference(
    db_session: AsyncSession,
    image_id: UUID | None,
    explicit_url: str | None,
) -> tuple[UUID | None, str | None]:
    """Return ``(image_id, image_url)`` for a slide.

    A media reference wins over an explicit URL; an unknown media id is a
    validation error on ``image_id``.
    """
    if image_id is None:
        return None, explicit_url

    media = await get_media_by_id(db_session, image_id)
    if media is None:
        raise ValidationError.for_field("image_id", "Image media not found.")
    return media.id, media.url


async def require_media(db_session: AsyncSession, media_ids: Iterable[UUID], field: str = "media_id") -> dict[UUID, Media]:
    """Load every referenced media row, failing if any is missing."""
    wanted = set(media_ids)
    if not wanted:
        return {}
    result = await db_session.execute(select(Media).where(Media.id.in_(list(wanted))))
    found = {media.id: media for media in result.scalars().all()}
    if wanted - found.keys():
        raise ValidationError.for_field(field, "Image media not found.")
    return found
