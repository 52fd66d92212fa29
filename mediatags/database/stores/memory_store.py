# mediatags/database/stores/memory_store.py
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional


class InMemoryKeyValueStore:
    """
    Dict-backed KeyValueStorePort. Values are kept as JSON text so callers
    always get a fresh copy back and non-serializable values fail on `set`,
    the same way a real store would.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, str] = {}
        if initial:
            self.set_many(initial)

    def get(self, key: str) -> Optional[Any]:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value)

    def set_many(self, items: Mapping[str, Any]) -> None:
        encoded = {k: json.dumps(v) for k, v in items.items()}  # fail before touching anything
        self._data.update(encoded)

    def keys(self) -> list[str]:
        return sorted(self._data)

    def clear(self) -> None:
        self._data.clear()
