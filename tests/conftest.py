"""Pytest configuration and shared fixtures.

Usage Guide:
- For schema validation tests: use dict factories from tests.factories
- For GitHub API tests: patch the githubkit class via the ``mock_github`` fixture
- For time-dependent logic: inject ``fake_clock`` into trackers, caches and services
"""

from datetime import UTC, datetime
from unittest.mock import MagicMock, patch

import pytest

from github_dashboard.config import (
    ActivityConfig,
    CacheConfig,
    RateLimitConfig,
    Settings,
    get_settings,
)

# -----------------------------------------------------------------------------
# Test Timeline Constants
#
# Define a consistent "test epoch" for deterministic date matching across tests.
# Activity windows in tests run from JAN_01 to JAN_31 unless stated otherwise.
# -----------------------------------------------------------------------------

# Base dates (datetime objects for window arguments)
JAN_01 = datetime(2024, 1, 1, 0, 0, 0, tzinfo=UTC)    # Window start
JAN_10 = datetime(2024, 1, 10, 9, 0, 0, tzinfo=UTC)   # PR opened inside window
JAN_31 = datetime(2024, 1, 31, 23, 59, 59, tzinfo=UTC)  # Window end
NOW = datetime(2024, 2, 1, 12, 0, 0, tzinfo=UTC)      # Fake clock start

# ISO 8601 strings (for GitHub API mocks)
DEC_01_ISO = "2023-12-01T10:00:00Z"    # Before window
DEC_15_ISO = "2023-12-15T10:00:00Z"    # Before window
JAN_10_ISO = "2024-01-10T09:00:00Z"
JAN_12_ISO = "2024-01-12T16:00:00Z"
JAN_15_ISO = "2024-01-15T10:00:00Z"
JAN_20_ISO = "2024-01-20T16:00:00Z"
FEB_10_ISO = "2024-02-10T10:00:00Z"    # After window


class FakeClock:
    """Manually advanced clock returning epoch seconds."""

    def __init__(self, start: float) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


# -----------------------------------------------------------------------------
# Settings Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are lru_cached; give every test a fresh read of the env."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a token and no review pacing delay."""
    return Settings(
        github_token="test-token",
        rate_limit=RateLimitConfig(),
        cache=CacheConfig(),
        activity=ActivityConfig(review_batch_delay_ms=0),
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock(NOW.timestamp())


# -----------------------------------------------------------------------------
# GitHub HTTP Layer Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def mock_github():
    """Patch the githubkit GitHub class used by GitHubClient.

    Tests set ``mock_github.arequest`` (an AsyncMock) to control responses.
    """
    with patch("github_dashboard.github.client.GitHub") as mock_class:
        mock_instance = MagicMock()
        mock_class.return_value = mock_instance
        yield mock_instance
