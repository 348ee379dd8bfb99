"""Hero slider management: one global, ordered sequence of slides."""

from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from folio.db.models import HeroSlide
from folio.db.services import audit_service, media_service
from folio.db.services.ordering import OrderedCollection
from folio.db.transaction import atomic
from folio.schemas import HeroSlideInput

ENTITY = "HeroSlide"
HERO_SLIDES_TAG = "hero-slides"

hero_slides: OrderedCollection[HeroSlide] = OrderedCollection(
    HeroSlide,
    name="hero_slides",
    label="Slide",
    order_field="order",
    visibility_field="is_active",
    cache_tags=lambda scope: [HERO_SLIDES_TAG],
)


def _optional_str(value) -> str | None:
    return str(value) if value is not None else None


async def list_hero_slides(db_session: AsyncSession, active_only: bool = False) -> list[HeroSlide]:
    """All slides in display order, optionally only the active ones."""
    return await hero_slides.list(db_session, visible_only=active_only)


async def get_hero_slide(db_session: AsyncSession, slide_id: UUID) -> HeroSlide | None:
    return await hero_slides.get(db_session, slide_id)


async def create_hero_slide(
    db_session: AsyncSession,
    data: HeroSlideInput,
    user_id: str | None = None,
) -> HeroSlide:
    """Create a slide at the end of the slider.

    Args:
        db_session: Database session
        data: Validated slide fields
        user_id: Acting user, recorded in the audit log

    Returns:
        The created HeroSlide
    """
    async with atomic(db_session, "create hero slide"):
        image_id, image_url = await media_service.resolve_image_reference(
            db_session, data.image_id, _optional_str(data.image_url)
        )
        slide = await hero_slides.stage_append(
            db_session,
            None,
            title=data.title,
            subtitle=data.subtitle,
            description=data.description,
            button_label=data.button_label,
            button_url=_optional_str(data.button_url),
            image_id=image_id,
            image_url=image_url,
            is_active=data.is_active,
        )
        audit_service.stage_audit_log(
            db_session, audit_service.CREATE, ENTITY, slide.id, user_id, {"title": slide.title}
        )

    await hero_slides.notify({}, "create")
    return slide


async def update_hero_slide(
    db_session: AsyncSession,
    slide_id: UUID,
    data: HeroSlideInput,
    user_id: str | None = None,
) -> HeroSlide:
    """Replace a slide's content. Its position is left untouched.

    When neither an image reference nor an image URL is submitted the
    slide keeps its current image URL.
    """
    async with atomic(db_session, "update hero slide"):
        slide = await hero_slides.get_or_raise(db_session, slide_id)
        image_id, image_url = await media_service.resolve_image_reference(
            db_session, data.image_id, _optional_str(data.image_url) or slide.image_url
        )

        slide.title = data.title
        slide.subtitle = data.subtitle
        slide.description = data.description
        slide.button_label = data.button_label
        slide.button_url = _optional_str(data.button_url)
        slide.image_id = image_id
        slide.image_url = image_url
        slide.is_active = data.is_active

        audit_service.stage_audit_log(
            db_session, audit_service.UPDATE, ENTITY, slide.id, user_id, {"title": data.title}
        )

    await hero_slides.notify({}, "update")
    return slide


async def delete_hero_slide(db_session: AsyncSession, slide_id: UUID, user_id: str | None = None) -> HeroSlide:
    """Delete a slide. The remaining slides keep their order values."""
    async with atomic(db_session, "delete hero slide"):
        slide = await hero_slides.stage_remove(db_session, slide_id)
        audit_service.stage_audit_log(
            db_session, audit_service.DELETE, ENTITY, slide_id, user_id, {"title": slide.title}
        )

    await hero_slides.notify({}, "remove")
    return slide


async def move_hero_slide(
    db_session: AsyncSession,
    slide_id: UUID,
    direction: str,
    user_id: str | None = None,
) -> bool:
    """Swap a slide with its neighbour. Returns False when already at the edge."""
    async with atomic(db_session, "move hero slide"):
        slide, moved = await hero_slides.stage_move(db_session, slide_id, direction)
        if moved:
            audit_service.stage_audit_log(
                db_session,
                audit_service.MOVE,
                ENTITY,
                slide.id,
                user_id,
                {"direction": direction, "order": slide.order},
            )

    if moved:
        await hero_slides.notify({}, "move")
    return moved


async def set_hero_slide_active(
    db_session: AsyncSession,
    slide_id: UUID,
    is_active: bool,
    user_id: str | None = None,
) -> HeroSlide:
    async with atomic(db_session, "toggle hero slide"):
        slide = await hero_slides.stage_set_visibility(db_session, slide_id, is_active)
        audit_service.stage_audit_log(
            db_session, audit_service.TOGGLE, ENTITY, slide.id, user_id, {"is_active": slide.is_active}
        )

    await hero_slides.notify({}, "visibility")
    return slide
