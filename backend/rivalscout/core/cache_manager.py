"""
Single-flight TTL cache for discovery results.

Concurrent requests for the same root domain share one underlying computation;
finished results are memoized for a bounded time window. Entries expire lazily
on read, there is no background sweep.

State belongs to the running event loop: the check for an in-flight task and its
registration happen without an ``await`` in between, so two callers can never
both start a computation for the same key.
"""

import asyncio
import logging
import time
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional, Tuple

from rivalscout.core.config import get_settings

logger = logging.getLogger(__name__)

_MISS = object()


class SingleFlightCache:
    """TTL cache with in-flight request coalescing."""

    def __init__(
        self,
        ttl_seconds: float = 600,
        max_entries: int = 200,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.name = name
        self._clock = clock
        # key -> (value, stored_at)
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}
        self._inflight: Dict[Hashable, asyncio.Task] = {}

    def _lookup(self, key: Hashable) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return _MISS
        value, stored_at = entry
        if self._clock() - stored_at < self.ttl_seconds:
            return value
        # Expired
        del self._entries[key]
        return _MISS

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value for *key*, or None on a miss or expiry."""
        value = self._lookup(key)
        return None if value is _MISS else value

    def set(self, key: Hashable, value: Any) -> None:
        """Store *value* with a fresh timestamp. Evicts the oldest entry if full."""
        if key not in self._entries and len(self._entries) >= self.max_entries:
            oldest = min(self._entries, key=lambda k: self._entries[k][1])
            del self._entries[oldest]
        self._entries[key] = (value, self._clock())

    def in_flight(self, key: Hashable) -> bool:
        return key in self._inflight

    async def resolve(self, key: Hashable, compute: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for *key*, or join / start its computation.

        Only successful results are stored. The in-flight marker is removed
        whether the computation succeeds or fails, so a later call can retry.
        """
        cached = self._lookup(key)
        if cached is not _MISS:
            logger.info("[%s] cache HIT for %s", self.name, key)
            return cached

        task = self._inflight.get(key)
        if task is None:
            logger.debug("[%s] computing %s", self.name, key)
            task = asyncio.ensure_future(self._run(key, compute))
            self._inflight[key] = task
        else:
            logger.info("[%s] joining in-flight computation for %s", self.name, key)

        return await asyncio.shield(task)

    async def _run(self, key: Hashable, compute: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await compute()
            self.set(key, value)
            return value
        finally:
            self._inflight.pop(key, None)

    def clear(self) -> int:
        """Drop all stored entries. Returns number of entries cleared."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def stats(self) -> Dict[str, int]:
        return {"entries": len(self._entries), "in_flight": len(self._inflight)}


@lru_cache()
def get_cache(bucket: str) -> SingleFlightCache:
    """Process-wide cache for a logical bucket ("competitors", "keywords")."""
    settings = get_settings()
    return SingleFlightCache(
        ttl_seconds=settings.cache_ttl_seconds,
        max_entries=settings.cache_max_size,
        name=bucket,
    )


def cache_stats() -> Dict[str, Dict[str, int]]:
    """Get statistics for every bucket created so far."""
    return {bucket: get_cache(bucket).stats() for bucket in ("competitors", "keywords")}


def clear_cache() -> None:
    """Clear all buckets (useful for testing or memory management)."""
    for bucket in ("competitors", "keywords"):
        get_cache(bucket).clear()
