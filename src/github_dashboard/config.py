"""Configuration settings for GitHub Dashboard."""

from functools import lru_cache
from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RateLimitConfig(BaseModel):
    """Configuration for rate limit tracking.

    Controls the fallback limit used when headers are missing and the
    thresholds for health status determination.
    """

    default_limit: int = Field(
        default=60,
        ge=0,
        description="Limit assumed when x-ratelimit-limit is absent (unauthenticated ceiling)",
    )

    # Threshold percentages for status determination
    healthy_threshold_pct: float = Field(
        default=50.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is HEALTHY",
    )
    warning_threshold_pct: float = Field(
        default=20.0,
        ge=0.0,
        le=100.0,
        description="% remaining above which status is WARNING (below healthy)",
    )


class CacheConfig(BaseModel):
    """Configuration for the in-memory response cache.

    All TTLs are in milliseconds.
    """

    default_ttl_ms: int = Field(
        default=15 * 60 * 1000,
        ge=0,
        description="TTL for PR lists, reviews and repository info (15 minutes)",
    )
    user_ttl_ms: int = Field(
        default=30 * 60 * 1000,
        ge=0,
        description="TTL for user profiles (30 minutes)",
    )
    batch_ttl_ms: int = Field(
        default=60 * 1000,
        ge=0,
        description="TTL for whole batch activity summaries (1 minute)",
    )
    cleanup_interval_seconds: float = Field(
        default=300.0,
        gt=0.0,
        description="Seconds between expired-entry sweeps in long-running commands",
    )


class ActivityConfig(BaseModel):
    """Configuration for activity aggregation."""

    default_window_days: int = Field(
        default=30,
        ge=1,
        description="Look-back window when no start date is given",
    )
    pulls_per_page: int = Field(
        default=100,
        ge=1,
        le=100,
        description="Page size for PR list fetches used in aggregation",
    )
    review_batch_size: int = Field(
        default=3,
        ge=1,
        description="PRs whose reviews are fetched concurrently",
    )
    review_batch_delay_ms: int = Field(
        default=100,
        ge=0,
        description="Pause between review batches",
    )
    org_review_pulls_per_page: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Newest PRs scanned per repository for the organization review summary",
    )


class LoggingConfig(BaseModel):
    """Configuration for logging behavior.

    Controls file logging, rotation, and output format.
    """

    log_file: str | None = Field(
        default=None,
        description="Optional path for file logging (enables rotation)",
    )
    rotation: str = Field(
        default="10 MB",
        description="When to rotate log file (e.g., '10 MB', '1 day')",
    )
    retention: str = Field(
        default="7 days",
        description="How long to keep rotated logs",
    )
    serialize: bool = Field(
        default=False,
        description="If True, output JSON format to file",
    )


class DashboardMemberConfig(BaseModel):
    """A GitHub user attached to a configured dashboard."""

    github_username: str
    github_user_id: int = 0
    display_name: str | None = None


class DashboardConfig(BaseModel):
    """Membership of one dashboard: its users and repositories."""

    users: list[DashboardMemberConfig] = Field(default_factory=list)
    repositories: list[str] = Field(default_factory=list)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --------------------------------------------------------------------------
    # GitHub API
    # --------------------------------------------------------------------------
    github_token: str = Field(
        default="",
        description="GitHub personal access token (empty = unauthenticated, 60/hour)",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the GitHub REST API",
    )
    user_agent: str = Field(
        default="GitHub-Dashboard-API",
        description="User-Agent sent with every request",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0.0,
        description="Per-request HTTP timeout",
    )

    # --------------------------------------------------------------------------
    # Application
    # --------------------------------------------------------------------------
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    # --------------------------------------------------------------------------
    # Rate Limiting & Caching
    # --------------------------------------------------------------------------
    rate_limit: RateLimitConfig = Field(
        default_factory=RateLimitConfig,
        description="Rate limit tracking configuration",
    )
    cache: CacheConfig = Field(
        default_factory=CacheConfig,
        description="Response cache configuration",
    )

    # --------------------------------------------------------------------------
    # Activity Aggregation
    # --------------------------------------------------------------------------
    activity: ActivityConfig = Field(
        default_factory=ActivityConfig,
        description="Activity aggregation configuration",
    )

    # --------------------------------------------------------------------------
    # Logging Configuration
    # --------------------------------------------------------------------------
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration (file output, rotation)",
    )

    # --------------------------------------------------------------------------
    # Dashboards
    # --------------------------------------------------------------------------
    dashboards: dict[str, DashboardConfig] = Field(
        default_factory=dict,
        description="Dashboard membership keyed by dashboard id (JSON in DASHBOARDS)",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
