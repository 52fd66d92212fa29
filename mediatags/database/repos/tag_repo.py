from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from mediatags.common.logging import get_logger
from mediatags.common.naming.collation import collation_key
from mediatags.common.settings import DEFAULT_PALETTE
from mediatags.database.core.records import RecordStore
from mediatags.database.repos._mapping import tag_to_record, to_domain_tag
from mediatags.database.repos.media_tag_repo import MediaTagRepo
from mediatags.domain.entities.tag import Tag
from mediatags.domain.policies.tag_defaults import pick_color

logger = get_logger(__name__)


class TagRepo:
    """
    Owns the tag collection and the id counter.
    Name uniqueness is NOT enforced here (seed/bulk inserts go straight in);
    TagService checks it before calling create_tag/update_tag.
    """

    def __init__(
        self,
        records: RecordStore,
        media_tags: MediaTagRepo,
        *,
        palette: Sequence[str] = DEFAULT_PALETTE,
    ) -> None:
        self.records = records
        self.media_tags = media_tags
        self.palette = tuple(palette)

    def _next_id(self, rows: List[dict]) -> int:
        # a counter that fell behind the stored ids must never hand one out twice
        highest = max((int(r.get("id", 0)) for r in rows), default=0)
        return max(self.records.read_counter(), highest) + 1

    def create_tag(
        self,
        name: str,
        color: Optional[str] = None,
        description: Optional[str] = None,
        is_system: bool = False,
    ) -> Tag:
        with self.records.atomic():
            rows = self.records.read_tags()
            tag = Tag(
                id=self._next_id(rows),
                name=name,
                color=pick_color(self.palette, color),
                description=description,
                created_at=datetime.now(timezone.utc),
                is_system=bool(is_system),
            )
            rows.append(tag_to_record(tag))
            self.records.write_tags(rows)
            self.records.write_counter(tag.id)
        logger.debug("Created tag id=%s name=%r", tag.id, tag.name)
        return tag

    def get_all_tags(self) -> List[Tag]:
        tags = [to_domain_tag(r) for r in self.records.read_tags()]
        return sorted(tags, key=lambda t: collation_key(t.name))

    def get_tag_by_id(self, tag_id: int) -> Optional[Tag]:
        for row in self.records.read_tags():
            if row.get("id") == tag_id:
                return to_domain_tag(row)
        return None

    def update_tag(
        self,
        tag_id: int,
        *,
        name: Optional[str] = None,
        color: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Tag]:
        # a blank color means "not supplied", same as on create
        if color is not None and not str(color).strip():
            color = None
        elif color is not None:
            color = str(color).strip()
        changes = {k: v for k, v in (("name", name), ("color", color), ("description", description)) if v is not None}
        with self.records.atomic():
            rows = self.records.read_tags()
            for i, row in enumerate(rows):
                if row.get("id") != tag_id:
                    continue
                updated = to_domain_tag(row).with_changes(**changes)
                rows[i] = tag_to_record(updated)
                self.records.write_tags(rows)
                return updated
        return None

    def delete_tag(self, tag_id: int) -> bool:
        with self.records.atomic():
            rows = self.records.read_tags()
            kept = [r for r in rows if r.get("id") != tag_id]
            removed = len(kept) != len(rows)
            if removed:
                self.records.write_tags(kept)
            # sweep links even when the tag row is already gone (orphans)
            self.media_tags.remove_all_for_tag(tag_id)
        if removed:
            logger.debug("Deleted tag id=%s", tag_id)
        return removed

    def clear(self) -> None:
        """Drop every tag and association. The counter is left alone so ids stay unique."""
        with self.records.atomic():
            self.records.write_tags([])
            self.records.write_links([])
