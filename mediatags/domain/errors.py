# mediatags/domain/errors.py
from __future__ import annotations


class MediaTagsError(Exception):
    """Base class for everything the tag engine raises on purpose."""


class StorageFailure(MediaTagsError):
    """The persistence adapter failed (I/O or serialization)."""

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class InvalidTagNameError(MediaTagsError, ValueError):
    pass


class DuplicateTagNameError(MediaTagsError, ValueError):
    def __init__(self, name: str, *, existing_id: int | None = None) -> None:
        super().__init__(f'A tag named "{name}" already exists')
        self.name = name
        self.existing_id = existing_id


class DuplicateAssociationError(MediaTagsError, ValueError):
    def __init__(self, media_id: str, tag_id: int) -> None:
        super().__init__(f"Tag {tag_id} is already assigned to media {media_id!r}")
        self.media_id = media_id
        self.tag_id = tag_id


class TagImportError(MediaTagsError, ValueError):
    """The import document could not be read as a JSON array of tags."""


class TagServiceError(MediaTagsError):
    """
    Generic failure surfaced by the service layer when a write could not be
    completed. The underlying StorageFailure is kept as __cause__.
    """
