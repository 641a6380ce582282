# podcast_charts/cache.py
"""
Per-process TTL cache for store query results.

Each gunicorn worker holds its own copy; nothing is shared between workers.
Loader failures propagate and leave the previous entry (if any) untouched, so
fallback values substituted by callers are never cached.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A loaded value and the monotonic time it was stored at."""
    stored_at: float
    value: T


class TTLCache:
    """Key/value cache whose entries expire ttl_seconds after loading."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._store: Dict[str, CacheEntry[Any]] = {}

    def get_or_set(self, key: str, ttl_seconds: int, loader: Callable[[], T]) -> T:
        """
        Return the fresh cached value for key, or call loader and cache its result.

        A ttl_seconds of 0 disables caching for that call.
        """
        now = self._clock()
        entry = self._store.get(key)

        if entry is not None and (now - entry.stored_at) < ttl_seconds:
            return entry.value

        value = loader()
        if ttl_seconds > 0:
            self._store[key] = CacheEntry(stored_at=now, value=value)
        return value

    def clear(self) -> None:
        """Clear all cached entries."""
        self._store.clear()
