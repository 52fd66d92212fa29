# tests/conftest.py
from __future__ import annotations

from typing import Any, Optional, Set

import pytest
from sqlalchemy.engine import Engine

from mediatags.common import settings as settings_module
from mediatags.database.core.main import init_db, make_engine
from mediatags.database.core.records import RecordStore
from mediatags.database.repos.media_tag_query import MediaTagQuery
from mediatags.database.repos.media_tag_repo import MediaTagRepo
from mediatags.database.repos.tag_repo import TagRepo
from mediatags.database.stores.memory_store import InMemoryKeyValueStore
from mediatags.services.tags.service import TagService


class PlainStore:
    """
    get/set-only store (no set_many) that can be told to fail.
    Used to exercise the record store's sequential write + restore path.
    """

    def __init__(self) -> None:
        self.inner = InMemoryKeyValueStore()
        self.fail_set: Set[str] = set()
        self.fail_get = False
        self.set_calls: list[str] = []

    def get(self, key: str) -> Optional[Any]:
        if self.fail_get:
            raise OSError("disk unavailable")
        return self.inner.get(key)

    def set(self, key: str, value: Any) -> None:
        self.set_calls.append(key)
        if key in self.fail_set:
            raise OSError(f"cannot write {key}")
        self.inner.set(key, value)


@pytest.fixture(autouse=True)
def _fresh_settings():
    settings_module.get_settings.cache_clear()
    yield
    settings_module.get_settings.cache_clear()


@pytest.fixture()
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture()
def plain_store() -> PlainStore:
    return PlainStore()


@pytest.fixture()
def records(store) -> RecordStore:
    rs = RecordStore(store)
    rs.ensure_initialized()
    return rs


@pytest.fixture()
def media_tag_repo(records) -> MediaTagRepo:
    return MediaTagRepo(records)


@pytest.fixture()
def tag_repo(records, media_tag_repo) -> TagRepo:
    return TagRepo(records, media_tag_repo)


@pytest.fixture()
def query(records) -> MediaTagQuery:
    return MediaTagQuery(records)


@pytest.fixture()
def service(tag_repo, media_tag_repo, query) -> TagService:
    return TagService(tag_repo, media_tag_repo, query)


@pytest.fixture()
def service_on():
    """Build a TagService over an arbitrary port (e.g. a failing one)."""

    def _build(port) -> TagService:
        rs = RecordStore(port)
        rs.ensure_initialized()
        links = MediaTagRepo(rs)
        return TagService(TagRepo(rs, links), links, MediaTagQuery(rs))

    return _build


@pytest.fixture()
def db_engine() -> Engine:
    engine = make_engine("sqlite:///:memory:")
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()
