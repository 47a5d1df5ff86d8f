"""Mock GitHub rate limit header fixtures.

GitHub sends x-ratelimit-* headers on every REST response, including
error responses. Reset times are relative to the fake clock's start
(``NOW`` in conftest) so tracker tests are deterministic.

See: https://docs.github.com/en/rest/using-the-rest-api/rate-limits-for-the-rest-api
"""

from tests.conftest import NOW

NOW_TS = int(NOW.timestamp())


def make_rate_limit_headers(
    remaining: int = 4999,
    limit: int = 5000,
    used: int | None = None,
    reset_in_seconds: int = 3600,
    resource: str = "core",
) -> dict[str, str]:
    """Create rate limit headers as returned by GitHub API.

    Args:
        remaining: Requests remaining in window
        limit: Maximum requests allowed
        used: Requests used in window (defaults to limit - remaining)
        reset_in_seconds: Seconds from NOW until reset
        resource: Rate limit resource pool

    Returns:
        Dict of header name -> value (all strings)
    """
    return {
        "x-ratelimit-limit": str(limit),
        "x-ratelimit-remaining": str(remaining),
        "x-ratelimit-used": str(limit - remaining if used is None else used),
        "x-ratelimit-reset": str(NOW_TS + reset_in_seconds),
        "x-ratelimit-resource": resource,
    }


# Pre-built header fixtures for common scenarios
HEADERS_HEALTHY = make_rate_limit_headers(remaining=4500, limit=5000, reset_in_seconds=3600)

HEADERS_WARNING = make_rate_limit_headers(remaining=1500, limit=5000, reset_in_seconds=1800)

HEADERS_CRITICAL = make_rate_limit_headers(remaining=250, limit=5000, reset_in_seconds=600)

HEADERS_EXHAUSTED = make_rate_limit_headers(remaining=0, limit=60, reset_in_seconds=300)

HEADERS_UNAUTHENTICATED = make_rate_limit_headers(remaining=55, limit=60, reset_in_seconds=3600)


# -----------------------------------------------------------------------------
# Edge Cases
# -----------------------------------------------------------------------------

# Headers with missing fields (partial response)
HEADERS_PARTIAL = {
    "x-ratelimit-remaining": "100",
    # Missing: limit, used, reset, resource
}

# Header values that don't parse as integers
HEADERS_MALFORMED = {
    "x-ratelimit-limit": "lots",
    "x-ratelimit-remaining": "",
    "x-ratelimit-reset": "soon",
}

# Mixed-case names, as some proxies send them
HEADERS_MIXED_CASE = {
    "X-RateLimit-Limit": "5000",
    "X-RateLimit-Remaining": "4321",
    "X-RateLimit-Reset": str(NOW_TS + 600),
}
