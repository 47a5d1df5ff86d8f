"""Pydantic schemas for GitHub API rate limit data.

Rate limit state is read from the x-ratelimit-* headers GitHub sends
on every response, including error responses.
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Self

from pydantic import Field

from github_dashboard.schemas.base import SchemaBase

DEFAULT_LIMIT = 60
"""GitHub's ceiling for unauthenticated requests per hour."""


class RateLimitStatus(StrEnum):
    """Rate limit health status.

    Thresholds are configurable but defaults are:
    - HEALTHY: >= 50% remaining
    - WARNING: 20-50% remaining
    - CRITICAL: below 20% remaining
    - EXHAUSTED: 0 remaining
    """

    HEALTHY = "healthy"
    WARNING = "warning"
    CRITICAL = "critical"
    EXHAUSTED = "exhausted"


def _parse_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def normalize_headers(headers: Any) -> dict[str, str]:
    """Lower-case header names from a dict, httpx.Headers or similar mapping."""
    if headers is None:
        return {}
    if isinstance(headers, Mapping) or hasattr(headers, "items"):
        return {str(k).lower(): v for k, v in headers.items()}
    return {}


class RateLimitInfo(SchemaBase):
    """Most recently observed quota for the core REST pool.

    Serialises with camelCase keys (``resetTime``) for JSON consumers.
    """

    remaining: int = Field(description="Calls left in the current window")
    reset_time: int = Field(description="Epoch milliseconds when the window resets")
    limit: int = Field(description="Total calls allowed per window")

    @property
    def reset_at(self) -> datetime:
        """Reset time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.reset_time / 1000, tz=UTC)

    @property
    def remaining_percent(self) -> float:
        """Percentage of the window remaining (0.0 to 100.0)."""
        if self.limit <= 0:
            return 0.0
        return max(0.0, min(100.0, self.remaining / self.limit * 100))

    def get_status(
        self,
        healthy_threshold: float = 50.0,
        warning_threshold: float = 20.0,
    ) -> RateLimitStatus:
        """Classify the remaining quota."""
        if self.remaining <= 0:
            return RateLimitStatus.EXHAUSTED
        if self.remaining_percent >= healthy_threshold:
            return RateLimitStatus.HEALTHY
        if self.remaining_percent >= warning_threshold:
            return RateLimitStatus.WARNING
        return RateLimitStatus.CRITICAL

    @classmethod
    def from_headers(cls, headers: Any, default_limit: int = DEFAULT_LIMIT) -> Self:
        """Parse from HTTP response headers.

        Missing or malformed values never raise: remaining and reset
        fall back to 0 and the limit to ``default_limit``.

        Args:
            headers: Response headers (dict or httpx.Headers)
            default_limit: Limit used when x-ratelimit-limit is absent

        Returns:
            RateLimitInfo with reset converted from seconds to milliseconds
        """
        normalized = normalize_headers(headers)
        return cls(
            remaining=_parse_int(normalized.get("x-ratelimit-remaining"), 0),
            reset_time=_parse_int(normalized.get("x-ratelimit-reset"), 0) * 1000,
            limit=_parse_int(normalized.get("x-ratelimit-limit"), default_limit),
        )


class AuthStatus(SchemaBase):
    """Whether the configured token authenticates, and the quota it sees."""

    authenticated: bool = Field(description="Whether GET /user succeeded")
    has_token: bool = Field(description="Whether a token is configured")
    scopes: list[str] = Field(default_factory=list, description="OAuth scopes from x-oauth-scopes")
    rate_limit: RateLimitInfo = Field(description="Best-known rate limit snapshot")
