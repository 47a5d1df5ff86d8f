"""Rate limit tracking for the GitHub API.

Keeps the most recently observed quota and gates outgoing requests
before they are made.
"""

from .schemas import DEFAULT_LIMIT, AuthStatus, RateLimitInfo, RateLimitStatus
from .tracker import RateLimitTracker

__all__ = [
    "DEFAULT_LIMIT",
    "AuthStatus",
    "RateLimitInfo",
    "RateLimitStatus",
    "RateLimitTracker",
]
