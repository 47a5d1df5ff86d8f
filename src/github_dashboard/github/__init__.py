"""GitHub API access module.

This module provides:
- GitHubClient: Async GitHub API client gated by the rate limit tracker
- GitHubService: Typed operations with error translation and caching
- ActivityService: Per-user and per-dashboard activity aggregation
- Rate limit tracking: RateLimitTracker, RateLimitInfo, RateLimitStatus
- Response caching: ResponseCache, CacheKeys
"""

from .activity import ActivityService
from .cache import CacheEntry, CacheKeys, ResponseCache, run_periodic_cleanup
from .client import GitHubClient
from .exceptions import (
    GitHubAccessDeniedError,
    GitHubBadGatewayError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .rate_limit import AuthStatus, RateLimitInfo, RateLimitStatus, RateLimitTracker
from .service import GitHubService

__all__ = [
    # Client & services
    "ActivityService",
    "GitHubClient",
    "GitHubService",
    # Exceptions
    "GitHubAccessDeniedError",
    "GitHubBadGatewayError",
    "GitHubClientError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    # Rate limit tracking
    "AuthStatus",
    "RateLimitInfo",
    "RateLimitStatus",
    "RateLimitTracker",
    # Response cache
    "CacheEntry",
    "CacheKeys",
    "ResponseCache",
    "run_periodic_cleanup",
]
