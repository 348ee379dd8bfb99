from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from folio.db.base import Base

TOP_LEVEL = text("parent_id IS NULL")
NESTED = text("parent_id IS NOT NULL")


class MenuItem(Base):
    """A navigation link. Items nest under ``parent_id`` within one menu."""

    __tablename__ = "menu_items"
    # NULL parent ids never collide in a composite unique index, so top level
    # and nested siblings each get their own partial index
    __table_args__ = (
        Index(
            "uq_menu_items_top_level_order",
            "menu",
            "order",
            unique=True,
            sqlite_where=TOP_LEVEL,
            postgresql_where=TOP_LEVEL,
        ),
        Index(
            "uq_menu_items_nested_order",
            "menu",
            "parent_id",
            "order",
            unique=True,
            sqlite_where=NESTED,
            postgresql_where=NESTED,
        ),
    )

    menu: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    parent_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("menu_items.id", ondelete="CASCADE"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
