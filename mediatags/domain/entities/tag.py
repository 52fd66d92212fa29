# mediatags/domain/entities/tag.py
from __future__ import annotations

from dataclasses import dataclass, asdict, replace
from datetime import datetime
from typing import Optional


@dataclass
class Tag:
    """
    A user- or system-defined label that can be assigned to media.

    Invariants kept here:
      - id is a positive integer (assigned by the tag repository's counter)
      - name is non-empty after trimming
      - color is non-empty
    Name uniqueness spans the whole collection, so it lives in the service.
    """
    id: int
    name: str
    color: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    is_system: bool = False

    def __post_init__(self):
        if not isinstance(self.id, int) or isinstance(self.id, bool) or self.id < 1:
            raise ValueError("tag id must be a positive integer")
        if not self.name or not self.name.strip():
            raise ValueError("tag name is required")
        if not self.color or not self.color.strip():
            raise ValueError("tag color is required")

    def with_changes(self, **changes) -> "Tag":
        return replace(self, **changes)

    def as_dict(self):
        return asdict(self)
