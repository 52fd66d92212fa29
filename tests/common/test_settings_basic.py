import pytest
from pydantic import ValidationError

from mediatags.common.settings import DEFAULT_PALETTE, DBConfig, TagConfig, get_settings


def test_settings_defaults(monkeypatch):
    for var in ("APP_ENV", "STORAGE__BACKEND", "TAGS__SEED_DEFAULTS", "DATABASE_URL", "DB__URL"):
        monkeypatch.delenv(var, raising=False)

    cfg = get_settings()
    assert cfg.app_name == "mediatags"
    assert cfg.api.prefix == "/api"
    assert cfg.storage.tags_key == "tags"
    assert cfg.storage.media_tags_key == "media_tags"
    assert cfg.storage.counter_key == "tag_counter"
    assert cfg.tags.palette == DEFAULT_PALETTE
    assert cfg.tags.most_used_limit >= 1
    assert cfg.database_url == cfg.db.effective_url


def test_settings_nested_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("STORAGE__BACKEND", "memory")
    monkeypatch.setenv("TAGS__SEED_DEFAULTS", "yes")
    monkeypatch.setenv("TAGS__DEFAULT_ACTOR", "importer")

    cfg = get_settings()
    assert cfg.app_env == "test"
    assert cfg.storage.backend == "memory"
    assert cfg.tags.seed_defaults is True
    assert cfg.tags.default_actor == "importer"


def test_settings_are_cached():
    assert get_settings() is get_settings()


def test_db_url_takes_precedence():
    assert DBConfig().effective_url == "sqlite:///mediatags.db"
    assert DBConfig(url="sqlite:///:memory:").effective_url == "sqlite:///:memory:"


def test_tag_palette_accepts_csv_and_rejects_empty():
    assert TagConfig(palette="#111111, #222222").palette == ["#111111", "#222222"]
    with pytest.raises(ValidationError):
        TagConfig(palette="")


def test_most_used_limit_bounds():
    with pytest.raises(ValidationError):
        TagConfig(most_used_limit=0)
