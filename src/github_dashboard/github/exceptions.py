"""GitHub client exceptions.

The taxonomy mirrors what callers surface to users: not found,
access denied, rate limit exceeded, and a generic bad gateway for
any other upstream failure. ``http_status`` is the status code an
outer surface should answer with.
"""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    http_status: int = 502


class GitHubNotFoundError(GitHubClientError):
    """Raised when a resource is not found (404)."""

    http_status = 404


class GitHubAccessDeniedError(GitHubClientError):
    """Raised on a 403 that is not a rate limit (SAML, missing scopes)."""

    http_status = 403


class GitHubRateLimitError(GitHubClientError):
    """Raised when the rate limit is exceeded.

    Either GitHub answered 403/429 with a rate limit signal, or the
    local tracker refused the request before it was sent.
    """

    http_status = 429

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubBadGatewayError(GitHubClientError):
    """Raised for any other upstream failure.

    The message is generic; the upstream detail is logged, not exposed.
    """

    http_status = 502
