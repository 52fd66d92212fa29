# mediatags/services/tags/service.py
from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

from pydantic import ValidationError

from mediatags.common.logging import get_logger
from mediatags.common.naming.collation import fold_name
from mediatags.database.repos.media_tag_query import MediaTagQuery
from mediatags.database.repos.media_tag_repo import MediaTagRepo
from mediatags.database.repos.tag_repo import TagRepo
from mediatags.domain.dataclasses.reports import TaggedMedia, TagImportReport, TagStatistics, TagUsage
from mediatags.domain.entities.links.media_tag_link import MediaTagLink
from mediatags.domain.entities.media_item import MediaItem
from mediatags.domain.entities.tag import Tag
from mediatags.domain.enums.toggle_result import ToggleResult
from mediatags.domain.errors import (
    DuplicateTagNameError,
    InvalidTagNameError,
    MediaTagsError,
    StorageFailure,
    TagImportError,
    TagServiceError,
)
from mediatags.domain.policies.tag_defaults import SYSTEM_TAGS
from mediatags.services.schemas.tags import TagExport, TagExportList
from mediatags.services.tags.observable import Subscription, TagListListener, TagListSubject

logger = get_logger(__name__)

T = TypeVar("T")


class TagService:
    """
    Business rules on top of the tag and association repositories.

    Error policy:
      - rule violations (duplicate name, duplicate association, blank name)
        are raised as-is so callers can show the reason;
      - storage failures on write paths become TagServiceError, with the
        StorageFailure kept as __cause__;
      - storage failures on read paths are logged and the call returns an
        empty result.
    Every mutation that changes the tag list pushes the new list to
    subscribers.
    """

    def __init__(
        self,
        tags: TagRepo,
        media_tags: MediaTagRepo,
        query: MediaTagQuery,
        *,
        subject: Optional[TagListSubject] = None,
        default_actor: Optional[str] = "user",
        most_used_limit: int = 10,
    ) -> None:
        self.tags = tags
        self.media_tags = media_tags
        self.query = query
        self.subject = subject or TagListSubject()
        self.default_actor = default_actor
        self.most_used_limit = most_used_limit

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------

    @property
    def _records(self):
        return self.tags.records

    @contextmanager
    def _writing(self, what: str) -> Iterator[None]:
        try:
            yield
        except StorageFailure as exc:
            logger.exception("Storage failure while trying to %s", what)
            raise TagServiceError(f"Could not {what}") from exc

    @staticmethod
    def _reading(what: str, fn: Callable[[], T], default: T) -> T:
        try:
            return fn()
        except StorageFailure:
            logger.exception("Storage failure while reading %s; returning an empty result", what)
            return default

    @staticmethod
    def _clean_name(name: Optional[str]) -> str:
        if name is None or not str(name).strip():
            raise InvalidTagNameError("Tag name must not be blank")
        return str(name).strip()

    def _ensure_unique(self, name: str, *, exclude_id: Optional[int] = None) -> None:
        folded = fold_name(name)
        for tag in self.tags.get_all_tags():
            if tag.id != exclude_id and fold_name(tag.name) == folded:
                logger.warning("Rejected tag name %r: clashes with tag id=%s", name, tag.id)
                raise DuplicateTagNameError(name, existing_id=tag.id)

    def _create(self, name: Optional[str], color: Optional[str], description: Optional[str], is_system: bool) -> Tag:
        clean = self._clean_name(name)
        with self._writing(f"create tag {clean!r}"):
            # check and insert under one lock scope
            with self._records.atomic():
                self._ensure_unique(clean)
                tag = self.tags.create_tag(clean, color, description, is_system)
        logger.info("Created tag id=%s name=%r system=%s", tag.id, tag.name, tag.is_system)
        return tag

    def _assign(self, media_id: str, tag_id: int, assigned_by: Optional[str]) -> Optional[MediaTagLink]:
        if self.tags.get_tag_by_id(tag_id) is None:
            logger.warning("Cannot assign unknown tag id=%s to media %r", tag_id, media_id)
            return None
        return self.media_tags.assign(media_id, tag_id, assigned_by or self.default_actor)

    # ------------------------------------------------------------------
    # subscription
    # ------------------------------------------------------------------

    def subscribe(self, listener: TagListListener) -> Subscription:
        return self.subject.subscribe(listener)

    @property
    def current_tags(self) -> List[Tag]:
        return self.subject.current

    def refresh_tags(self) -> List[Tag]:
        """Reload the tag list and push it to subscribers."""
        # under the record lock, so publications follow commit order
        with self._records.atomic():
            try:
                tags = self.tags.get_all_tags()
            except StorageFailure:
                logger.exception("Could not reload the tag list")
                return self.subject.current
            self.subject.publish(tags)
        return tags

    # ------------------------------------------------------------------
    # tags
    # ------------------------------------------------------------------

    def create_tag(
        self,
        name: str,
        color: Optional[str] = None,
        description: Optional[str] = None,
        is_system: bool = False,
    ) -> Tag:
        tag = self._create(name, color, description, is_system)
        self.refresh_tags()
        return tag

    def get_all_tags(self) -> List[Tag]:
        return self._reading("tags", self.tags.get_all_tags, [])

    def get_tag_by_id(self, tag_id: int) -> Optional[Tag]:
        return self._reading(f"tag {tag_id}", lambda: self.tags.get_tag_by_id(tag_id), None)

    def update_tag(
        self,
        tag_id: int,
        *,
        name: Optional[str] = None,
        color: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Tag]:
        clean = self._clean_name(name) if name is not None else None
        with self._writing(f"update tag {tag_id}"):
            with self._records.atomic():
                if clean is not None:
                    self._ensure_unique(clean, exclude_id=tag_id)
                updated = self.tags.update_tag(tag_id, name=clean, color=color, description=description)
        if updated is not None:
            logger.info("Updated tag id=%s", tag_id)
            self.refresh_tags()
        return updated

    def delete_tag(self, tag_id: int) -> bool:
        with self._writing(f"delete tag {tag_id}"):
            removed = self.tags.delete_tag(tag_id)
        if removed:
            logger.info("Deleted tag id=%s and its associations", tag_id)
            self.refresh_tags()
        return removed

    def search_tags(self, term: str) -> List[Tag]:
        needle = fold_name(term or "")
        tags = self.get_all_tags()
        if not needle:
            return tags
        return [
            t for t in tags
            if needle in fold_name(t.name) or (t.description and needle in fold_name(t.description))
        ]

    def create_default_tags(self) -> int:
        """Seed the built-in system tags; ones that already exist are skipped."""
        created = 0
        for default in SYSTEM_TAGS:
            try:
                self._create(default.name, default.color, default.description, True)
                created += 1
            except DuplicateTagNameError:
                logger.debug("Default tag %r already exists", default.name)
        if created:
            self.refresh_tags()
        return created

    def clear_all(self) -> None:
        """Remove every tag and association. Ids handed out so far are never reused."""
        with self._writing("clear all tags"):
            self.tags.clear()
        logger.info("Cleared all tags and associations")
        self.refresh_tags()

    # ------------------------------------------------------------------
    # associations
    # ------------------------------------------------------------------

    def assign_tag(self, media_id: str, tag_id: int, assigned_by: Optional[str] = None) -> Optional[MediaTagLink]:
        """
        Assign `tag_id` to `media_id`. Returns None when the tag does not exist.
        Raises DuplicateAssociationError when the pair is already present.
        """
        with self._writing(f"assign tag {tag_id} to media {media_id!r}"):
            with self._records.atomic():
                return self._assign(media_id, tag_id, assigned_by)

    def unassign_tag(self, media_id: str, tag_id: int) -> bool:
        with self._writing(f"unassign tag {tag_id} from media {media_id!r}"):
            return self.media_tags.unassign(media_id, tag_id)

    def assign_multiple(self, media_id: str, tag_ids: Iterable[int], assigned_by: Optional[str] = None) -> int:
        succeeded = 0
        for tag_id in tag_ids:
            try:
                if self.assign_tag(media_id, tag_id, assigned_by) is not None:
                    succeeded += 1
            except MediaTagsError as exc:
                logger.warning("Skipping tag %s for media %r: %s", tag_id, media_id, exc)
        return succeeded

    def unassign_multiple(self, media_id: str, tag_ids: Iterable[int]) -> int:
        succeeded = 0
        for tag_id in tag_ids:
            try:
                if self.unassign_tag(media_id, tag_id):
                    succeeded += 1
            except MediaTagsError as exc:
                logger.warning("Skipping tag %s for media %r: %s", tag_id, media_id, exc)
        return succeeded

    def toggle_tag_for_media(self, media_id: str, tag_id: int) -> ToggleResult:
        try:
            with self._records.atomic():
                if self.query.has_tag(media_id, tag_id):
                    removed = self.media_tags.unassign(media_id, tag_id)
                    return ToggleResult.unassigned if removed else ToggleResult.error
                link = self._assign(media_id, tag_id, None)
                return ToggleResult.assigned if link is not None else ToggleResult.error
        except MediaTagsError:
            logger.exception("Toggle of tag %s on media %r failed", tag_id, media_id)
            return ToggleResult.error

    def remove_all_tags_from_media(self, media_id: str) -> bool:
        """Cascade entry point for when a medium is deleted elsewhere."""
        with self._writing(f"remove tags from media {media_id!r}"):
            return self.media_tags.remove_all_for_media(media_id)

    # ------------------------------------------------------------------
    # queries
    # ------------------------------------------------------------------

    def has_tag(self, media_id: str, tag_id: int) -> bool:
        return self._reading("media tags", lambda: self.query.has_tag(media_id, tag_id), False)

    def tags_for_media(self, media_id: str) -> List[Tag]:
        return self._reading("media tags", lambda: self.query.tags_for_media(media_id), [])

    def media_for_tag(self, tag_id: int) -> List[str]:
        return self._reading("tag media", lambda: self.query.media_for_tag(tag_id), [])

    def media_with_all_tags(self, tag_ids: Iterable[int]) -> List[str]:
        ids = list(tag_ids)
        return self._reading("tag filter", lambda: self.query.media_with_all_tags(ids), [])

    def media_with_any_tags(self, tag_ids: Iterable[int]) -> List[str]:
        ids = list(tag_ids)
        return self._reading("tag filter", lambda: self.query.media_with_any_tags(ids), [])

    def filter_media(self, tag_ids: Iterable[int], *, match_all: bool = False) -> List[str]:
        return self.media_with_all_tags(tag_ids) if match_all else self.media_with_any_tags(tag_ids)

    def attach_tags(self, items: Iterable[MediaItem]) -> List[TaggedMedia]:
        items = list(items)
        by_media = self._reading(
            "media tags", lambda: self.query.batch_tags_for_media(i.media_id for i in items), {}
        )
        return [TaggedMedia(item=i, tags=by_media.get(i.media_id, [])) for i in items]

    def filter_media_items(
        self,
        items: Iterable[MediaItem],
        tag_ids: Iterable[int],
        *,
        match_all: bool = False,
    ) -> List[TaggedMedia]:
        wanted = set(self.filter_media(tag_ids, match_all=match_all))
        return [tm for tm in self.attach_tags(items) if tm.item.media_id in wanted]

    # ------------------------------------------------------------------
    # aggregates
    # ------------------------------------------------------------------

    def most_used_tags(self, limit: Optional[int] = None) -> List[TagUsage]:
        limit = self.most_used_limit if limit is None else limit
        if limit <= 0:
            return []

        def _load() -> List[TagUsage]:
            counts = self.query.usage_counts()
            usage = [TagUsage(tag=t, usage_count=counts.get(t.id, 0)) for t in self.tags.get_all_tags()]
            # stable sort keeps name order among equal counts
            usage.sort(key=lambda u: u.usage_count, reverse=True)
            return usage[:limit]

        return self._reading("tag usage", _load, [])

    def unused_tags(self) -> List[Tag]:
        def _load() -> List[Tag]:
            counts = self.query.usage_counts()
            return [t for t in self.tags.get_all_tags() if counts.get(t.id, 0) == 0]

        return self._reading("tag usage", _load, [])

    def statistics(self) -> TagStatistics:
        def _load() -> TagStatistics:
            stats = self.query.storage_stats()
            counts = self.query.usage_counts()
            most_used: Optional[Tag] = None
            best = 0
            for tag in self.tags.get_all_tags():
                n = counts.get(tag.id, 0)
                if n > best:
                    best, most_used = n, tag
            average = stats.total_associations / stats.unique_media_count if stats.unique_media_count else 0.0
            return TagStatistics(
                total_tags=stats.total_tags,
                total_associations=stats.total_associations,
                average_tags_per_media=round(average, 2),
                most_used_tag=most_used,
            )

        return self._reading("tag statistics", _load, TagStatistics())

    # ------------------------------------------------------------------
    # import / export
    # ------------------------------------------------------------------

    def export_tags(self) -> str:
        """
        Serialize all tags as a JSON array of {id, name, color, description, isSystem}.
        Associations are not included.
        """
        with self._writing("export tags"):
            tags = self.tags.get_all_tags()
        entries = [TagExport.model_validate(t) for t in tags]
        return TagExportList.dump_json(entries, indent=2, by_alias=True).decode("utf-8")

    def import_tags(self, data: str) -> TagImportReport:
        """
        Create a tag for each entry of an exported document. Entries whose name
        collides with an existing tag (or an earlier entry) and entries that do
        not validate are skipped and counted as such.
        """
        try:
            payload = json.loads(data)
        except (TypeError, ValueError) as exc:
            raise TagImportError("Import data is not valid JSON") from exc
        if not isinstance(payload, list):
            raise TagImportError("Import data must be a JSON array of tags")

        report = TagImportReport(planned=len(payload))
        report.start()
        try:
            for index, item in enumerate(payload):
                try:
                    entry = TagExport.model_validate(item)
                except ValidationError as exc:
                    report.skipped += 1
                    report.add_error(f"#{index}", f"invalid tag entry ({exc.error_count()} error(s))")
                    continue
                try:
                    tag = self._create(entry.name, entry.color, entry.description, entry.is_system)
                except (DuplicateTagNameError, InvalidTagNameError) as exc:
                    report.skipped += 1
                    report.add_error(entry.name, str(exc))
                    continue
                report.imported += 1
                report.imported_ids.append(tag.id)
        finally:
            # entries before a failure are already committed
            report.stop()
            if report.imported:
                self.refresh_tags()

        logger.info("Imported %d of %d tag(s), skipped %d", report.imported, report.planned, report.skipped)
        return report
