from __future__ import annotations
from typing import Any, Mapping, Optional, Protocol, runtime_checkable


class KeyValueStorePort(Protocol):
    """
    Narrow persistence contract the tag engine consumes.
    Values are JSON-compatible (dict / list / str / int / float / bool / None).
    Either call may raise on I/O or serialization problems.
    """
    def get(self, key: str) -> Optional[Any]: ...
    def set(self, key: str, value: Any) -> None: ...


@runtime_checkable
class BatchKeyValueStorePort(KeyValueStorePort, Protocol):
    """Stores that can write several keys as one unit (all or nothing)."""
    def set_many(self, items: Mapping[str, Any]) -> None: ...
