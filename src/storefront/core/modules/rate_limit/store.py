import threading
from collections.abc import Iterator
from typing import Protocol

from storefront.core.modules.rate_limit.models import RateLimitEntry


class RateLimitStore(Protocol):
    """Key-value storage for rate limit entries."""

    def get(self, key: str) -> RateLimitEntry | None: ...

    def set(self, key: str, entry: RateLimitEntry) -> None: ...

    def delete(self, key: str) -> None: ...

    def items(self) -> Iterator[tuple[str, RateLimitEntry]]: ...


class MemoryRateLimitStore:
    """Process-local store. Not shared between workers or replicas.

    Each operation is guarded by a lock; a get followed by a set is not atomic.
    """

    def __init__(self) -> None:
        self._entries: dict[str, RateLimitEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> RateLimitEntry | None:
        with self._lock:
            entry = self._entries.get(key)
            return entry.model_copy() if entry is not None else None

    def set(self, key: str, entry: RateLimitEntry) -> None:
        with self._lock:
            self._entries[key] = entry.model_copy()

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def items(self) -> Iterator[tuple[str, RateLimitEntry]]:
        with self._lock:
            snapshot = [(key, entry.model_copy()) for key, entry in self._entries.items()]
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
