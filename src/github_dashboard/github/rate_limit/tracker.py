"""Rate limit tracking for the GitHub API.

The tracker keeps a single snapshot of the core quota, overwritten
from the headers of every response, and answers whether another
request may be sent right now.

Concurrent requests race on the snapshot: whichever response finishes
last decides its state. That imprecision is accepted; there is no
correlation between a request and the headers it produced.
"""

from __future__ import annotations

import math
import time
from collections.abc import Callable
from typing import Any

from github_dashboard.config import RateLimitConfig, get_settings
from github_dashboard.logging import get_logger

from .schemas import RateLimitInfo, RateLimitStatus

logger = get_logger(__name__)

Clock = Callable[[], float]


class RateLimitTracker:
    """Tracks the GitHub rate limit from response headers.

    Usage:
        tracker = RateLimitTracker()
        if tracker.can_make_request():
            response = await send(...)
            tracker.update_rate_limit_info(response.headers)

    The tracker is optimistic: before any response has been seen, and
    once the reset time has passed, requests are allowed.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Clock = time.time,
    ) -> None:
        """Initialize the tracker.

        Args:
            config: Rate limit configuration (uses settings if not provided)
            clock: Returns the current time in epoch seconds
        """
        self._config = config if config is not None else get_settings().rate_limit
        self._clock = clock
        self._info: RateLimitInfo | None = None

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------
    def update_rate_limit_info(self, headers: Any) -> None:
        """Overwrite the snapshot from response headers.

        Never raises; absent or malformed headers become 0 remaining,
        reset 0 and the configured default limit.
        """
        self._info = RateLimitInfo.from_headers(headers, self._config.default_limit)
        logger.debug(
            "Rate limit updated: {}/{} remaining, resets at {}",
            self._info.remaining,
            self._info.limit,
            self._info.reset_at.isoformat(),
        )

    def simulate_rate_limit(self, minutes: int = 5) -> None:
        """Pretend the quota is exhausted for the next ``minutes`` (development aid)."""
        self._info = RateLimitInfo(
            remaining=0,
            reset_time=self._now_ms() + minutes * 60 * 1000,
            limit=self._config.default_limit,
        )
        logger.warning("Simulated rate limit for {} minutes", minutes)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    def can_make_request(self) -> bool:
        """Check whether a request may be sent now.

        Returns:
            True if no rate limit info has been seen yet, if the reset
            time has passed (remaining is restored to the limit), or if
            calls remain in the current window.
        """
        if self._info is None:
            return True

        if self._now_ms() >= self._info.reset_time:
            if self._info.remaining < self._info.limit:
                logger.info("Rate limit window reset, allowing requests")
            self._info.remaining = self._info.limit
            return True

        return self._info.remaining > 0

    def get_time_until_reset(self) -> int:
        """Milliseconds until the window resets (0 if unknown or past)."""
        if self._info is None:
            return 0
        return max(0, self._info.reset_time - self._now_ms())

    def get_rate_limit_status(self) -> RateLimitInfo | None:
        """Current snapshot, or None if no response has been seen."""
        return self._info

    def get_rate_limit_snapshot(self) -> RateLimitInfo:
        """Current snapshot, or a full default quota resetting now if none was seen."""
        if self._info is not None:
            return self._info
        return RateLimitInfo(
            remaining=self._config.default_limit,
            reset_time=self._now_ms(),
            limit=self._config.default_limit,
        )

    def get_status(self) -> RateLimitStatus:
        """Health classification of the snapshot (HEALTHY if unknown)."""
        if self._info is None:
            return RateLimitStatus.HEALTHY
        return self._info.get_status(
            self._config.healthy_threshold_pct,
            self._config.warning_threshold_pct,
        )

    def get_rate_limit_message(self) -> str:
        """Human-readable description of the current quota."""
        if self._info is None:
            return "Rate limit information not available"

        minutes = math.ceil(self.get_time_until_reset() / (60 * 1000))

        if self._info.remaining <= 0:
            return (
                f"Rate limit exceeded. Try again in {minutes} minutes. "
                "Consider adding a GitHub Personal Access Token for higher limits."
            )

        return (
            f"{self._info.remaining}/{self._info.limit} requests remaining. "
            f"Resets in {minutes} minutes."
        )

    def to_dict(self) -> dict[str, Any]:
        """Export current state as dictionary (for CLI/JSON output)."""
        if self._info is None:
            return {"available": False, "message": self.get_rate_limit_message()}

        return {
            "available": True,
            **self._info.model_dump(by_alias=True),
            "resetAt": self._info.reset_at.isoformat(),
            "timeUntilResetMs": self.get_time_until_reset(),
            "status": self.get_status().value,
            "message": self.get_rate_limit_message(),
        }
