from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from folio.db.base import Base


class HeroSlide(Base):
    """A slide of the homepage hero slider."""

    __tablename__ = "hero_slides"
    __table_args__ = (UniqueConstraint("order", name="uq_hero_slides_order"),)

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    subtitle: Mapped[str | None] = mapped_column(String(160), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    button_label: Mapped[str | None] = mapped_column(String(80), nullable=True)
    button_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Image either references a media row or carries an external URL
    image_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("media.id", ondelete="SET NULL"), nullable=True
    )
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    # Single global sequence, lower numbers first
    order: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
