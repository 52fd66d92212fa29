# mediatags/services/api/deps.py
from __future__ import annotations

from functools import lru_cache

from mediatags.services.tags.factory import build_tag_service
from mediatags.services.tags.service import TagService


@lru_cache(maxsize=1)
def _process_tag_service() -> TagService:
    return build_tag_service()


def get_tag_service() -> TagService:
    """
    Provide the process-wide TagService via DI.
    Tests swap it with app.dependency_overrides[get_tag_service].
    """
    return _process_tag_service()
