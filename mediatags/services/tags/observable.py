# mediatags/services/tags/observable.py
from __future__ import annotations

import itertools
import threading
from typing import Callable, Dict, List, Optional

from mediatags.common.logging import get_logger
from mediatags.domain.entities.tag import Tag

logger = get_logger(__name__)

TagListListener = Callable[[List[Tag]], None]


class Subscription:
    """Handle returned by TagListSubject.subscribe(). Also usable as a context manager."""

    def __init__(self, subject: "TagListSubject", token: int) -> None:
        self._subject = subject
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self) -> None:
        if self._active:
            self._subject._remove(self._token)
            self._active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.unsubscribe()


class TagListSubject:
    """
    Holds the latest tag list and pushes it to listeners.

    New listeners get the current list right away, then the full list again
    after every publish(). A listener that raises is logged and skipped; the
    others still get the update.
    """

    def __init__(self, initial: Optional[List[Tag]] = None) -> None:
        self._current: List[Tag] = list(initial or [])
        self._listeners: Dict[int, TagListListener] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    @property
    def current(self) -> List[Tag]:
        with self._lock:
            return list(self._current)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    def subscribe(self, listener: TagListListener, *, emit_current: bool = True) -> Subscription:
        with self._lock:
            token = next(self._ids)
            self._listeners[token] = listener
            snapshot = list(self._current)
        if emit_current:
            self._notify(listener, snapshot)
        return Subscription(self, token)

    def publish(self, tags: List[Tag]) -> None:
        with self._lock:
            self._current = list(tags)
            listeners = list(self._listeners.values())
            snapshot = list(self._current)
        for listener in listeners:
            self._notify(listener, snapshot)

    def _remove(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)

    @staticmethod
    def _notify(listener: TagListListener, tags: List[Tag]) -> None:
        try:
            listener(list(tags))
        except Exception:
            logger.exception("Tag list listener %r failed", listener)
