from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from folio.db.base import Base


class Media(Base):
    """An uploaded file that slides and albums can reference."""

    __tablename__ = "media"

    url: Mapped[str] = mapped_column(String(1024), nullable=False)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    content_type: Mapped[str] = mapped_column(String(128), nullable=False, default="image/jpeg")
    alt_text: Mapped[str] = mapped_column(String(500), nullable=False, default="")
