# mediatags/domain/dataclasses/reports.py
from __future__ import annotations

from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from mediatags.domain.entities.media_item import MediaItem
from mediatags.domain.entities.tag import Tag


# ---------------------------------------------------------------------------
# Base report (shared fields + utilities)
# ---------------------------------------------------------------------------
@dataclass
class BaseReport:
    """Common report base:
    - timing: started_at / finished_at
    - error capture: error_details
    - helpers: start(), stop(), add_error(), as_dict()
    """
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    # Each tuple is (subject, message)
    error_details: List[Tuple[str, str]] = field(default_factory=list)

    def start(self) -> None:
        if self.started_at is None:
            self.started_at = datetime.now()

    def stop(self) -> None:
        self.finished_at = datetime.now()

    def add_error(self, subject: str, message: str) -> None:
        self.error_details.append((subject, message))

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------------
# Tag import report
# ---------------------------------------------------------------------------
@dataclass
class TagImportReport(BaseReport):
    planned: int = 0      # items found in the document
    imported: int = 0     # tags created
    skipped: int = 0      # name collisions or invalid items
    imported_ids: List[int] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Read-side aggregates
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class StorageStats:
    total_tags: int = 0
    total_associations: int = 0
    unique_media_count: int = 0


@dataclass(frozen=True)
class TagUsage:
    tag: Tag
    usage_count: int


@dataclass(frozen=True)
class TagStatistics:
    total_tags: int = 0
    total_associations: int = 0
    average_tags_per_media: float = 0.0
    most_used_tag: Optional[Tag] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class TaggedMedia:
    """A MediaItem together with the tags currently assigned to it."""
    item: MediaItem
    tags: List[Tag] = field(default_factory=list)
