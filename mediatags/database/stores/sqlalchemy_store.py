# mediatags/database/stores/sqlalchemy_store.py
from __future__ import annotations

from typing import Any, Mapping, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from mediatags.common.logging import get_logger
from mediatags.database.core.main import init_db, make_engine, make_session_factory
from mediatags.database.models.kv_record import KVRecord

logger = get_logger(__name__)


class SqlAlchemyKeyValueStore:
    """
    KeyValueStorePort over the `kv_record` table. Satisfies
    BatchKeyValueStorePort via structural typing: `set_many` writes all keys
    in one transaction.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @classmethod
    def from_engine(cls, engine: Engine, *, create_tables: bool = True) -> "SqlAlchemyKeyValueStore":
        if create_tables:
            init_db(engine)
        return cls(make_session_factory(engine))

    @classmethod
    def from_url(cls, url: str, *, echo: bool = False) -> "SqlAlchemyKeyValueStore":
        return cls.from_engine(make_engine(url, echo=echo))

    def get(self, key: str) -> Optional[Any]:
        with self._session_factory() as session:
            row = session.get(KVRecord, key)
            return row.value if row else None

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, items: Mapping[str, Any]) -> None:
        # Session.begin() commits on normal exit and rolls back if anything raises
        with self._session_factory.begin() as session:
            for key, value in items.items():
                row = session.get(KVRecord, key)
                if row is None:
                    session.add(KVRecord(key=key, value=value))
                else:
                    row.value = value
        logger.debug("kv_record wrote keys=%s", list(items))
