# mediatags/database/repos/media_tag_query.py
from __future__ import annotations

from typing import Dict, Iterable, List, Set, Tuple

from mediatags.database.core.records import RecordStore
from mediatags.database.repos._mapping import to_domain_link, to_domain_tag
from mediatags.domain.dataclasses.reports import StorageStats
from mediatags.domain.entities.tag import Tag


class MediaTagQuery:
    """
    Read-only set queries joining the tag and association collections.

    Nothing is cached between calls: each call loads both records once and
    builds throwaway hash maps (media_id -> tag ids, tag_id -> media ids), so
    the join itself is linear in the number of associations.
    """

    def __init__(self, records: RecordStore) -> None:
        self.records = records

    # ---------- per-call indexes ----------

    def _snapshot(self) -> Tuple[List[dict], List[dict]]:
        # one lock scope so tags and links come from the same moment
        with self.records.atomic():
            return self.records.read_tags(), self.records.read_links()

    def _links_by_media(self) -> Dict[str, Set[int]]:
        out: Dict[str, Set[int]] = {}
        for link in (to_domain_link(r) for r in self.records.read_links()):
            out.setdefault(link.media_id, set()).add(link.tag_id)
        return out

    def _links_by_tag(self) -> Dict[int, List[str]]:
        out: Dict[int, List[str]] = {}
        for link in (to_domain_link(r) for r in self.records.read_links()):
            out.setdefault(link.tag_id, []).append(link.media_id)
        return out

    # ---------- queries ----------

    def tags_for_media(self, media_id: str) -> List[Tag]:
        tag_rows, link_rows = self._snapshot()
        wanted = {to_domain_link(r).tag_id for r in link_rows if r.get("media_id") == media_id}
        if not wanted:
            return []
        return [t for t in (to_domain_tag(r) for r in tag_rows) if t.id in wanted]

    def tag_ids_for_media(self, media_id: str) -> Set[int]:
        return self._links_by_media().get(media_id, set())

    def has_tag(self, media_id: str, tag_id: int) -> bool:
        return tag_id in self.tag_ids_for_media(media_id)

    def media_for_tag(self, tag_id: int) -> List[str]:
        return list(self._links_by_tag().get(tag_id, []))

    def media_with_all_tags(self, tag_ids: Iterable[int]) -> List[str]:
        """
        Media whose tag set is a superset of `tag_ids`.

        Only media that appear in at least one association are candidates, so
        an empty `tag_ids` returns every tagged medium (never untagged ones).
        """
        required = set(tag_ids)
        return [mid for mid, have in self._links_by_media().items() if required <= have]

    def media_with_any_tags(self, tag_ids: Iterable[int]) -> List[str]:
        wanted = set(tag_ids)
        seen: Dict[str, None] = {}
        for link in (to_domain_link(r) for r in self.records.read_links()):
            if link.tag_id in wanted:
                seen.setdefault(link.media_id, None)
        return list(seen)

    # ---------- aggregates ----------

    def usage_counts(self) -> Dict[int, int]:
        """tag_id -> number of media carrying it (tags with no media are absent)."""
        return {tag_id: len(media) for tag_id, media in self._links_by_tag().items()}

    def batch_tags_for_media(self, media_ids: Iterable[str]) -> Dict[str, List[Tag]]:
        """
        Map of media_id -> [Tag] for a list of media. Every requested id is a
        key; untagged media map to an empty list.
        """
        ids = list(dict.fromkeys(media_ids))
        if not ids:
            return {}
        tag_rows, link_rows = self._snapshot()
        tags_by_id = {t.id: t for t in (to_domain_tag(r) for r in tag_rows)}
        out: Dict[str, List[Tag]] = {mid: [] for mid in ids}
        for link in (to_domain_link(r) for r in link_rows):
            bucket = out.get(link.media_id)
            tag = tags_by_id.get(link.tag_id)
            if bucket is not None and tag is not None:
                bucket.append(tag)
        return out

    def storage_stats(self) -> StorageStats:
        tag_rows, link_rows = self._snapshot()
        return StorageStats(
            total_tags=len(tag_rows),
            total_associations=len(link_rows),
            unique_media_count=len({r.get("media_id") for r in link_rows}),
        )
