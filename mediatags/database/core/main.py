# mediatags/database/core/main.py
from __future__ import annotations

from functools import lru_cache

from sqlalchemy import MetaData, create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from mediatags.common.settings import get_settings

NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)


def make_engine(url: str, *, echo: bool = False) -> Engine:
    """
    Build an Engine for `url`. In-memory SQLite gets a single shared
    connection so every Session sees the same database.
    """
    kwargs: dict = {"echo": echo, "future": True}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url or url.rstrip("/") in ("sqlite:", "sqlite+pysqlite:"):
            kwargs["poolclass"] = StaticPool
    else:
        kwargs["pool_pre_ping"] = True
    return create_engine(url, **kwargs)


def make_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(bind=engine, expire_on_commit=False, future=True, autoflush=False)


def init_db(engine: Engine) -> None:
    """Create the tables if they do not exist yet. No migrations beyond this."""
    # models must be imported so they register on Base.metadata
    from mediatags.database import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    cfg = get_settings()
    return make_engine(cfg.database_url, echo=cfg.db.echo)

