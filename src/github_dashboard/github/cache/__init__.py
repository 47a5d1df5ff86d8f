"""Short-lived memoization of GitHub API responses."""

from .keys import CacheKeys
from .store import DEFAULT_TTL_MS, CacheEntry, ResponseCache, run_periodic_cleanup

__all__ = [
    "DEFAULT_TTL_MS",
    "CacheEntry",
    "CacheKeys",
    "ResponseCache",
    "run_periodic_cleanup",
]
