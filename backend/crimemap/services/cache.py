"""Response cache used in front of the paid AI analysis calls."""

import logging
import time
from collections.abc import Callable
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class ResponseCache(Protocol):
    """Anything with TTL get/set can back the analysis cache (e.g. Redis)."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None: ...


class InMemoryTTLCache:
    """
    Single-process cache with per-key TTL.

    Expired entries are dropped on read. When a write pushes the map past
    max_entries, expired entries are pruned first and then the entries closest
    to expiry, until the map fits again.
    """

    def __init__(
        self,
        default_ttl: float = 1800,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store: dict[str, tuple[Any, float]] = {}
        self._default_ttl = default_ttl
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._store)

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        expires_at = self._clock() + (ttl if ttl is not None else self._default_ttl)
        self._store[key] = (value, expires_at)
        if len(self._store) > self._max_entries:
            self._prune()

    def _prune(self) -> None:
        before = len(self._store)
        self.evict_expired()
        while len(self._store) > self._max_entries:
            oldest_key = min(self._store, key=lambda k: self._store[k][1])
            del self._store[oldest_key]
        logger.debug(f"Pruned response cache from {before} to {len(self._store)} entries")

    def evict_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (_, exp) in self._store.items() if now >= exp]
        for k in expired:
            del self._store[k]

    def clear(self) -> None:
        self._store.clear()
