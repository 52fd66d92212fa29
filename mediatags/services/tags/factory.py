# mediatags/services/tags/factory.py
from __future__ import annotations

from typing import Optional

from mediatags.common.logging import get_logger
from mediatags.common.settings import Settings, get_settings
from mediatags.database.core.main import get_engine
from mediatags.database.core.records import RecordStore
from mediatags.database.repos.media_tag_query import MediaTagQuery
from mediatags.database.repos.media_tag_repo import MediaTagRepo
from mediatags.database.repos.tag_repo import TagRepo
from mediatags.database.stores.memory_store import InMemoryKeyValueStore
from mediatags.database.stores.sqlalchemy_store import SqlAlchemyKeyValueStore
from mediatags.domain.ports.storage import KeyValueStorePort
from mediatags.services.tags.service import TagService

logger = get_logger(__name__)


def build_store(cfg: Settings) -> KeyValueStorePort:
    if cfg.storage.backend == "memory":
        return InMemoryKeyValueStore()
    return SqlAlchemyKeyValueStore.from_engine(get_engine())


def build_tag_service(port: Optional[KeyValueStorePort] = None, cfg: Optional[Settings] = None) -> TagService:
    """
    Wire records -> repositories -> query engine -> service on top of `port`
    (or the store selected by settings), initialize absent records, optionally
    seed the default tags, and load the initial tag list for subscribers.
    """
    cfg = cfg or get_settings()
    port = port if port is not None else build_store(cfg)

    records = RecordStore.from_config(port, cfg.storage)
    records.ensure_initialized()

    media_tags = MediaTagRepo(records)
    tags = TagRepo(records, media_tags, palette=cfg.tags.palette)
    service = TagService(
        tags,
        media_tags,
        MediaTagQuery(records),
        default_actor=cfg.tags.default_actor,
        most_used_limit=cfg.tags.most_used_limit,
    )

    if cfg.tags.seed_defaults:
        created = service.create_default_tags()
        logger.info("Seeded %d default tag(s)", created)
    service.refresh_tags()
    return service
