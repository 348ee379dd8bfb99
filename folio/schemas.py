"""Input models for dashboard actions.

Every action parses its payload through :func:`parse_input`, which turns
pydantic errors into a :class:`~folio.lib.exceptions.ValidationError`
carrying one message per field, before any database access.
"""

import re
from typing import Any, Literal, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator
from pydantic import ValidationError as PydanticValidationError

from folio.db.models import AlbumStatus
from folio.lib.exceptions import ValidationError

InputT = TypeVar("InputT", bound=BaseModel)

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
MENU_NAME_PATTERN = r"^[a-z0-9_-]+$"
MENU_NAME_MAX_LENGTH = 64


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class HeroSlideInput(_Input):
    title: str = Field(min_length=8, max_length=500)
    subtitle: str | None = Field(default=None, max_length=160)
    description: str | None = Field(default=None, max_length=600)
    button_label: str | None = Field(default=None, max_length=80)
    button_url: HttpUrl | None = None
    image_id: UUID | None = None
    image_url: HttpUrl | None = None
    is_active: bool = True

    @field_validator(
        "subtitle", "description", "button_label", "button_url", "image_id", "image_url", mode="before"
    )
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AlbumInput(_Input):
    title: str = Field(min_length=1, max_length=255)
    slug: str | None = Field(default=None, max_length=255, pattern=SLUG_PATTERN)
    description: str | None = Field(default=None, max_length=5000)
    status: AlbumStatus = AlbumStatus.DRAFT

    @field_validator("slug", "description", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AlbumImageInput(_Input):
    media_id: UUID
    caption: str | None = Field(default=None, max_length=300)

    @field_validator("caption", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)


class AddAlbumImagesInput(_Input):
    images: list[AlbumImageInput] = Field(min_length=1)


class AlbumImagesReconcileInput(_Input):
    """Final image order of an album as submitted by the editor."""

    ordered_ids: list[UUID]
    removed_ids: list[UUID] = []
    captions: dict[UUID, str | None] = {}

    @field_validator("captions")
    @classmethod
    def check_captions(cls, captions: dict[UUID, str | None]) -> dict[UUID, str | None]:
        cleaned = {}
        for image_id, caption in captions.items():
            caption = caption.strip() if caption else None
            if caption and len(caption) > 300:
                raise ValueError("Captions may be at most 300 characters.")
            cleaned[image_id] = caption or None
        return cleaned


class MenuItemUpdateInput(_Input):
    title: str = Field(min_length=1, max_length=120)
    url: str = Field(min_length=1, max_length=1024)
    parent_id: UUID | None = None
    is_active: bool = True

    @field_validator("parent_id", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @field_validator("url")
    @classmethod
    def check_url(cls, url: str) -> str:
        if url.startswith(("/", "#", "http://", "https://", "mailto:")):
            return url
        raise ValueError("Use a site path starting with '/' or a full http(s) URL.")


class MenuItemInput(MenuItemUpdateInput):
    menu: str = Field(min_length=1, max_length=MENU_NAME_MAX_LENGTH, pattern=MENU_NAME_PATTERN)


class MoveInput(_Input):
    direction: Literal["up", "down"]


class VisibilityInput(_Input):
    is_active: bool


def is_menu_name(name: str) -> bool:
    return len(name) <= MENU_NAME_MAX_LENGTH and re.fullmatch(MENU_NAME_PATTERN, name) is not None


def field_errors_from(exc: PydanticValidationError) -> dict[str, str]:
    """First error message per top-level field."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = error.get("loc") or ("__root__",)
        key = str(loc[0])
        errors.setdefault(key, error["msg"].removeprefix("Value error, "))
    return errors


def parse_input(model: type[InputT], data: Any) -> InputT:
    """Validate raw request data against ``model``."""
    try:
        return model.model_validate(data if data is not None else {})
    except PydanticValidationError as exc:
        raise ValidationError(None, field_errors_from(exc)) from exc
