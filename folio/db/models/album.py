from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from folio.db.base import Base

if TYPE_CHECKING:
    from folio.db.models.media import Media


class AlbumStatus(str, Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"


class Album(Base):
    """A photo album shown in the public gallery."""

    __tablename__ = "albums"

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=AlbumStatus.DRAFT.value, index=True
    )

    images: Mapped[list["AlbumImage"]] = relationship(
        "AlbumImage",
        back_populates="album",
        cascade="save-update, merge, delete",
        order_by="AlbumImage.position",
        lazy="selectin",
    )


class AlbumImage(Base):
    """An image placed in an album at a given position."""

    __tablename__ = "album_images"
    __table_args__ = (
        UniqueConstraint("album_id", "position", name="uq_album_images_album_position"),
    )

    album_id: Mapped[UUID] = mapped_column(
        ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    album: Mapped["Album"] = relationship("Album", back_populates="images")

    media_id: Mapped[UUID] = mapped_column(ForeignKey("media.id"), nullable=False)
    media: Mapped["Media"] = relationship("Media", lazy="selectin")

    caption: Mapped[str | None] = mapped_column(String(300), nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
