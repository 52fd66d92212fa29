# mediatags/domain/entities/links/media_tag_link.py
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class MediaTagLink:
    """
    Fact connecting a MediaItem and a Tag, by id only.
    The association repository enforces that (media_id, tag_id) is unique.
    """
    media_id: str
    tag_id: int
    assigned_at: Optional[datetime] = field(default=None, compare=False)
    assigned_by: Optional[str] = field(default=None, compare=False)

    def key(self) -> Tuple[str, int]:
        return (self.media_id, self.tag_id)
