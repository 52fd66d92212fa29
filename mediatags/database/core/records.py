# mediatags/database/core/records.py
from __future__ import annotations

import copy
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, TypeVar

from mediatags.common.logging import get_logger
from mediatags.common.settings import StorageConfig
from mediatags.domain.errors import StorageFailure
from mediatags.domain.ports.storage import BatchKeyValueStorePort, KeyValueStorePort

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RecordKeys:
    tags: str = "tags"
    media_tags: str = "media_tags"
    counter: str = "tag_counter"


class RecordStore:
    """
    Typed access to the three records the tag engine owns, on top of a
    KeyValueStorePort.

    - Every port error comes out as StorageFailure (original error chained).
    - `atomic()` holds a process-wide re-entrant lock for the whole
      read-modify-write and stages writes; staged values are visible to reads
      inside the scope and reach the port only when the scope exits cleanly.
    - Batch-capable ports get one `set_many`; plain ports get sequential
      `set` calls, and keys already written are restored if a later one fails.
    """

    def __init__(
        self,
        port: KeyValueStorePort,
        *,
        keys: Optional[RecordKeys] = None,
        lock: Optional[threading.RLock] = None,
    ) -> None:
        self._port = port
        self.keys = keys or RecordKeys()
        self._lock = lock or threading.RLock()
        self._staged: Optional[Dict[str, Any]] = None

    @classmethod
    def from_config(cls, port: KeyValueStorePort, cfg: StorageConfig) -> "RecordStore":
        keys = RecordKeys(tags=cfg.tags_key, media_tags=cfg.media_tags_key, counter=cfg.counter_key)
        return cls(port, keys=keys)

    # ---------- lifecycle ----------

    def ensure_initialized(self) -> None:
        """Write empty collections and a zero counter for any record that is absent."""
        with self.atomic():
            if self._get(self.keys.counter) is None:
                self._stage(self.keys.counter, 0)
            if not isinstance(self._get(self.keys.tags), list):
                self._stage(self.keys.tags, [])
            if not isinstance(self._get(self.keys.media_tags), list):
                self._stage(self.keys.media_tags, [])

    @contextmanager
    def atomic(self) -> Iterator["RecordStore"]:
        with self._lock:
            if self._staged is not None:
                # nested scope joins the outer one
                yield self
                return
            self._staged = {}
            try:
                yield self
                pending = self._staged
            finally:
                self._staged = None
            if pending:
                self._commit(pending)

    # ---------- typed reads ----------

    def read_tags(self) -> List[dict]:
        return self._read_list(self.keys.tags)

    def read_links(self) -> List[dict]:
        return self._read_list(self.keys.media_tags)

    def read_counter(self) -> int:
        with self._lock:
            raw = self._get(self.keys.counter)
        if raw is None:
            return 0
        if isinstance(raw, bool) or not isinstance(raw, (int, float)) or raw < 0:
            raise StorageFailure(f"Record {self.keys.counter!r} is not a counter: {raw!r}", key=self.keys.counter)
        return int(raw)

    # ---------- typed writes (staged) ----------

    def write_tags(self, rows: List[dict]) -> None:
        self._write(self.keys.tags, rows)

    def write_links(self, rows: List[dict]) -> None:
        self._write(self.keys.media_tags, rows)

    def write_counter(self, value: int) -> None:
        self._write(self.keys.counter, int(value))

    # ---------- internals ----------

    def _read_list(self, key: str) -> List[dict]:
        with self._lock:
            raw = self._get(key)
        if raw is None:
            return []
        if not isinstance(raw, list):
            raise StorageFailure(f"Record {key!r} is not a list", key=key)
        return raw

    def _get(self, key: str) -> Any:
        if self._staged is not None and key in self._staged:
            return copy.deepcopy(self._staged[key])
        return self._call(key, "read", lambda: self._port.get(key))

    def _write(self, key: str, value: Any) -> None:
        with self.atomic():
            self._stage(key, value)

    def _stage(self, key: str, value: Any) -> None:
        assert self._staged is not None, "writes must happen inside atomic()"
        self._staged[key] = copy.deepcopy(value)

    def _commit(self, pending: Dict[str, Any]) -> None:
        if isinstance(self._port, BatchKeyValueStorePort):
            self._call(",".join(pending), "write", lambda: self._port.set_many(pending))
            return

        previous = {k: self._call(k, "read", lambda k=k: self._port.get(k)) for k in pending}
        written: List[str] = []
        try:
            for key, value in pending.items():
                self._call(key, "write", lambda: self._port.set(key, value))
                written.append(key)
        except StorageFailure:
            for key in reversed(written):
                try:
                    self._port.set(key, previous[key])
                except Exception:
                    logger.exception("Could not restore record %r after a failed write", key)
            raise

    @staticmethod
    def _call(key: str, op: str, fn: Callable[[], T]) -> T:
        try:
            return fn()
        except StorageFailure:
            raise
        except Exception as exc:
            raise StorageFailure(f"Failed to {op} record {key!r}: {exc}", key=key) from exc
