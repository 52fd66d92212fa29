# mediatags/domain/entities/media_item.py
from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional

from mediatags.domain.enums.media_kind import MediaKind


@dataclass(frozen=True)
class MediaItem:
    """
    A photo or video known to the gallery. The tag engine never mutates media;
    it only references them by `media_id`, which is stable across restarts
    (derived from where the file was captured or imported from).

    Invariants that we keep here:
      - media_id and uri are non-empty
      - size, dimensions and duration non-negative when provided
    """
    media_id: str
    uri: str
    kind: MediaKind = MediaKind.photo
    filename: Optional[str] = None
    created_at: Optional[datetime] = None

    size_bytes: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    duration_sec: Optional[float] = None

    def __post_init__(self):
        if not self.media_id or not str(self.media_id).strip():
            raise ValueError("media_id is required")
        if not self.uri or not str(self.uri).strip():
            raise ValueError("uri is required")
        if self.size_bytes is not None and self.size_bytes < 0:
            raise ValueError("size_bytes must be >= 0")
        if self.width is not None and self.width < 0:
            raise ValueError("width must be >= 0")
        if self.height is not None and self.height < 0:
            raise ValueError("height must be >= 0")
        if self.duration_sec is not None and self.duration_sec < 0:
            raise ValueError("duration_sec must be >= 0")

    @property
    def is_video(self) -> bool:
        return self.kind == MediaKind.video

    def as_dict(self):
        return asdict(self)
