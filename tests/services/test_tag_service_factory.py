# tests/services/test_tag_service_factory.py
from __future__ import annotations

from mediatags.common.settings import Settings, StorageConfig, TagConfig
from mediatags.database.stores.memory_store import InMemoryKeyValueStore
from mediatags.database.stores.sqlalchemy_store import SqlAlchemyKeyValueStore
from mediatags.services.tags.factory import build_store, build_tag_service


def _settings(**tags) -> Settings:
    return Settings(storage=StorageConfig(backend="memory"), tags=TagConfig(**tags))


def test_build_store_picks_backend():
    assert isinstance(build_store(_settings()), InMemoryKeyValueStore)


def test_build_initializes_records():
    store = InMemoryKeyValueStore()
    build_tag_service(store, _settings())
    assert store.get("tags") == [] and store.get("media_tags") == []
    assert store.get("tag_counter") == 0


def test_build_seeds_defaults_once():
    store = InMemoryKeyValueStore()
    svc = build_tag_service(store, _settings(seed_defaults=True))
    assert len(svc.current_tags) == 5

    again = build_tag_service(store, _settings(seed_defaults=True))
    assert len(again.get_all_tags()) == 5


def test_build_applies_tag_settings():
    svc = build_tag_service(
        InMemoryKeyValueStore(),
        _settings(palette=["#0a0a0a"], default_actor="importer", most_used_limit=2),
    )
    t = svc.create_tag("Work")
    assert t.color == "#0a0a0a"
    assert svc.assign_tag("m1", t.id).assigned_by == "importer"
    svc.create_tag("A")
    svc.create_tag("B")
    assert len(svc.most_used_tags()) == 2


def test_build_uses_custom_record_keys():
    store = InMemoryKeyValueStore()
    cfg = Settings(storage=StorageConfig(backend="memory", tags_key="my_tags", media_tags_key="my_links", counter_key="my_ctr"))
    build_tag_service(store, cfg).create_tag("Work")
    assert store.keys() == ["my_ctr", "my_links", "my_tags"]


def test_state_survives_restart_on_sqlite(tmp_path):
    url = f"sqlite:///{tmp_path / 'tags.db'}"
    cfg = _settings()

    first = build_tag_service(SqlAlchemyKeyValueStore.from_url(url), cfg)
    t = first.create_tag("Beach")
    first.assign_tag("m1", t.id)

    second = build_tag_service(SqlAlchemyKeyValueStore.from_url(url), cfg)
    assert [x.name for x in second.current_tags] == ["Beach"]
    assert second.media_for_tag(t.id) == ["m1"]
    assert second.create_tag("Family").id == t.id + 1
