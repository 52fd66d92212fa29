# mediatags/database/repos/_mapping.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from mediatags.domain.entities.links.media_tag_link import MediaTagLink
from mediatags.domain.entities.tag import Tag
from mediatags.domain.errors import StorageFailure


def _dt_out(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _dt_in(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def tag_to_record(tag: Tag) -> dict:
    return {
        "id": tag.id,
        "name": tag.name,
        "color": tag.color,
        "description": tag.description,
        "created_at": _dt_out(tag.created_at),
        "is_system": bool(tag.is_system),
    }


def to_domain_tag(row: dict) -> Tag:
    try:
        return Tag(
            id=int(row["id"]),
            name=row["name"],
            color=row["color"],
            description=row.get("description"),
            created_at=_dt_in(row.get("created_at")),
            is_system=bool(row.get("is_system", False)),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StorageFailure(f"Malformed tag record: {row!r}") from exc


def link_to_record(link: MediaTagLink) -> dict:
    return {
        "media_id": link.media_id,
        "tag_id": link.tag_id,
        "assigned_at": _dt_out(link.assigned_at),
        "assigned_by": link.assigned_by,
    }


def to_domain_link(row: dict) -> MediaTagLink:
    try:
        return MediaTagLink(
            media_id=str(row["media_id"]),
            tag_id=int(row["tag_id"]),
            assigned_at=_dt_in(row.get("assigned_at")),
            assigned_by=row.get("assigned_by"),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as exc:
        raise StorageFailure(f"Malformed media_tag record: {row!r}") from exc
