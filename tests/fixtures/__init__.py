"""Test fixtures for GitHub Dashboard."""

from .github_responses import (
    GITHUB_PR_CLOSED_RESPONSE,
    GITHUB_PR_MERGED_RESPONSE,
    GITHUB_PR_RESPONSE,
    GITHUB_REPO_RESPONSE,
    GITHUB_REVIEWS_RESPONSE,
    GITHUB_SEARCH_RESPONSE,
    GITHUB_USER_RESPONSE,
)
from .rate_limit_responses import (
    HEADERS_EXHAUSTED,
    HEADERS_HEALTHY,
    HEADERS_PARTIAL,
    HEADERS_UNAUTHENTICATED,
    make_rate_limit_headers,
)

__all__ = [
    # Mock GitHub API responses
    "GITHUB_PR_CLOSED_RESPONSE",
    "GITHUB_PR_MERGED_RESPONSE",
    "GITHUB_PR_RESPONSE",
    "GITHUB_REPO_RESPONSE",
    "GITHUB_REVIEWS_RESPONSE",
    "GITHUB_SEARCH_RESPONSE",
    "GITHUB_USER_RESPONSE",
    # Rate limit headers
    "HEADERS_EXHAUSTED",
    "HEADERS_HEALTHY",
    "HEADERS_PARTIAL",
    "HEADERS_UNAUTHENTICATED",
    "make_rate_limit_headers",
]
