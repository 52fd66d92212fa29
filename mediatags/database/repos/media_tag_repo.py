# mediatags/database/repos/media_tag_repo.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from mediatags.common.logging import get_logger
from mediatags.database.core.records import RecordStore
from mediatags.database.repos._mapping import link_to_record, to_domain_link
from mediatags.domain.entities.links.media_tag_link import MediaTagLink
from mediatags.domain.errors import DuplicateAssociationError

logger = get_logger(__name__)


class MediaTagRepo:
    """
    Owns the media<->tag association collection. Associations reference
    media and tags by id only; nothing here checks that either side exists.
    """

    def __init__(self, records: RecordStore) -> None:
        self.records = records

    def list_links(self) -> List[MediaTagLink]:
        return [to_domain_link(r) for r in self.records.read_links()]

    def assign(self, media_id: str, tag_id: int, assigned_by: Optional[str] = None) -> MediaTagLink:
        with self.records.atomic():
            rows = self.records.read_links()
            # uniqueness is checked by scan; the collection is small and already in memory
            if any(r.get("media_id") == media_id and r.get("tag_id") == tag_id for r in rows):
                raise DuplicateAssociationError(media_id, tag_id)

            link = MediaTagLink(
                media_id=media_id,
                tag_id=tag_id,
                assigned_at=datetime.now(timezone.utc),
                assigned_by=assigned_by,
            )
            rows.append(link_to_record(link))
            self.records.write_links(rows)
        logger.debug("Assigned tag %s to media %r", tag_id, media_id)
        return link

    def unassign(self, media_id: str, tag_id: int) -> bool:
        with self.records.atomic():
            rows = self.records.read_links()
            kept = [r for r in rows if not (r.get("media_id") == media_id and r.get("tag_id") == tag_id)]
            if len(kept) == len(rows):
                return False
            self.records.write_links(kept)
        return True

    def remove_all_for_media(self, media_id: str) -> bool:
        with self.records.atomic():
            rows = self.records.read_links()
            kept = [r for r in rows if r.get("media_id") != media_id]
            if len(kept) == len(rows):
                return False
            self.records.write_links(kept)
        logger.debug("Removed %d association(s) for media %r", len(rows) - len(kept), media_id)
        return True

    def remove_all_for_tag(self, tag_id: int) -> None:
        with self.records.atomic():
            rows = self.records.read_links()
            kept = [r for r in rows if r.get("tag_id") != tag_id]
            if len(kept) != len(rows):
                self.records.write_links(kept)
