"""In-memory expiring cache for GitHub API responses.

Entries live for the TTL given when they were stored. Expiry is
checked lazily on ``get`` and eagerly by ``cleanup``; both use the
same predicate, ``now - timestamp > ttl``.

The cache never schedules its own cleanup. An owning process that
wants proactive eviction starts ``run_periodic_cleanup`` as a task.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from github_dashboard.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TTL_MS = 15 * 60 * 1000

Clock = Callable[[], float]


@dataclass
class CacheEntry:
    """A cached payload with its storage time and lifetime."""

    data: Any
    """The cached value (any JSON-serializable payload)."""

    timestamp: int
    """Epoch milliseconds when the entry was stored."""

    ttl: int
    """Milliseconds the entry remains valid."""

    def is_expired(self, now_ms: int) -> bool:
        """Whether the entry is older than its TTL at ``now_ms``."""
        return now_ms - self.timestamp > self.ttl


class ResponseCache:
    """Expiring key-value store keyed by request signature.

    Usage:
        cache = ResponseCache()
        user = cache.get(CacheKeys.user("octocat"))
        if user is None:
            user = await service.get_user("octocat")
            cache.set(CacheKeys.user("octocat"), user, ttl=30 * 60 * 1000)
    """

    def __init__(
        self,
        default_ttl_ms: int = DEFAULT_TTL_MS,
        clock: Clock = time.time,
    ) -> None:
        """Initialize an empty cache.

        Args:
            default_ttl_ms: TTL used when ``set`` is called without one
            clock: Returns the current time in epoch seconds
        """
        self._entries: dict[str, CacheEntry] = {}
        self._default_ttl_ms = default_ttl_ms
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    @property
    def default_ttl_ms(self) -> int:
        return self._default_ttl_ms

    def get(self, key: str) -> Any | None:
        """Return the cached value, or None if absent or expired.

        An expired entry is evicted as a side effect.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if entry.is_expired(self._now_ms()):
            del self._entries[key]
            logger.debug("Cache expired for key: {}", key)
            return None

        logger.debug("Cache hit for key: {}", key)
        return entry.data

    def set(self, key: str, data: T, ttl: int | None = None) -> T:
        """Store ``data`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key (see CacheKeys)
            data: Value to store
            ttl: Lifetime in milliseconds (default TTL if None)

        Returns:
            The stored data, for call chaining
        """
        effective_ttl = self._default_ttl_ms if ttl is None else ttl
        self._entries[key] = CacheEntry(data=data, timestamp=self._now_ms(), ttl=effective_ttl)
        logger.debug("Cached data for key: {} (TTL: {}ms)", key, effective_ttl)
        return data

    def delete(self, key: str) -> None:
        """Remove an entry; no error if it is absent."""
        self._entries.pop(key, None)
        logger.debug("Deleted cache entry: {}", key)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()
        logger.debug("Cleared all cache entries")

    def get_stats(self) -> dict[str, Any]:
        """Size and keys of the store (diagnostics only)."""
        return {
            "size": len(self._entries),
            "keys": list(self._entries),
        }

    def cleanup(self) -> int:
        """Evict every expired entry.

        Returns:
            Number of entries removed
        """
        now = self._now_ms()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]

        if expired:
            logger.debug("Cleaned up {} expired cache entries", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


async def run_periodic_cleanup(cache: ResponseCache, interval_seconds: float) -> None:
    """Call ``cache.cleanup()`` every ``interval_seconds`` until cancelled.

    Usage:
        task = asyncio.create_task(run_periodic_cleanup(cache, 300))
        ...
        task.cancel()
    """
    logger.info("Starting cache cleanup every {}s", interval_seconds)
    try:
        while True:
            await asyncio.sleep(interval_seconds)
            cache.cleanup()
    except asyncio.CancelledError:
        logger.info("Cache cleanup task stopped")
        raise
