"""JSON payloads shared by the admin and public controllers."""

from __future__ import annotations

from typing import Any

from folio.db.models import Album, AlbumImage, AuditLog, HeroSlide, MenuItem


def serialize_hero_slide(slide: HeroSlide) -> dict[str, Any]:
    return {
        "id": str(slide.id),
        "title": slide.title,
        "subtitle": slide.subtitle,
        "description": slide.description,
        "button_label": slide.button_label,
        "button_url": slide.button_url,
        "image_id": str(slide.image_id) if slide.image_id else None,
        "image_url": slide.image_url,
        "order": slide.order,
        "is_active": slide.is_active,
    }


def serialize_album(album: Album) -> dict[str, Any]:
    return {
        "id": str(album.id),
        "title": album.title,
        "slug": album.slug,
        "description": album.description,
        "status": album.status,
    }


def serialize_album_image(image: AlbumImage, url: str | None = None) -> dict[str, Any]:
    data = {
        "id": str(image.id),
        "album_id": str(image.album_id),
        "media_id": str(image.media_id),
        "caption": image.caption,
        "position": image.position,
    }
    if url is not None:
        data["url"] = url
    return data


def serialize_menu_item(item: MenuItem) -> dict[str, Any]:
    return {
        "id": str(item.id),
        "menu": item.menu,
        "parent_id": str(item.parent_id) if item.parent_id else None,
        "title": item.title,
        "url": item.url,
        "order": item.order,
        "is_active": item.is_active,
    }




def serialize_audit_log(log: AuditLog) -> dict[str, Any]:
    return {
        "id": str(log.id),
        "action": log.action,
        "entity": log.entity,
        "entity_id": log.entity_id,
        "user_id": log.user_id,
        "details": log.details,
        "created_at": log.created_at.isoformat(),
    }
