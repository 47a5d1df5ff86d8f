"""Tests for configuration settings."""

import pytest

from github_dashboard.config import Settings, get_settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_defaults(self, monkeypatch):
        """Test default values are correct."""
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        settings = Settings(_env_file=None)

        assert settings.github_token == ""
        assert settings.github_api_url == "https://api.github.com"
        assert settings.user_agent == "GitHub-Dashboard-API"
        assert settings.log_level == "INFO"
        assert settings.dashboards == {}

    def test_nested_defaults(self):
        """Test rate limit, cache and activity defaults."""
        settings = Settings(_env_file=None)

        assert settings.rate_limit.default_limit == 60
        assert settings.cache.default_ttl_ms == 15 * 60 * 1000
        assert settings.cache.user_ttl_ms == 30 * 60 * 1000
        assert settings.cache.batch_ttl_ms == 60 * 1000
        assert settings.activity.default_window_days == 30
        assert settings.activity.review_batch_size == 3
        assert settings.activity.review_batch_delay_ms == 100
        assert settings.activity.org_review_pulls_per_page == 10
        assert settings.cache.cleanup_interval_seconds == 300.0

    def test_settings_from_env(self, monkeypatch):
        """Test environment variables override defaults."""
        monkeypatch.setenv("GITHUB_TOKEN", "test_token_123")
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        settings = Settings(_env_file=None)

        assert settings.github_token == "test_token_123"
        assert settings.github_api_url == "https://ghe.example.com/api/v3"
        assert settings.log_level == "DEBUG"

    def test_nested_config_from_env(self, monkeypatch):
        """Nested sections are read as JSON."""
        monkeypatch.setenv("CACHE", '{"batch_ttl_ms": 5000}')
        monkeypatch.setenv("ACTIVITY", '{"review_batch_size": 5, "review_batch_delay_ms": 0}')

        settings = Settings(_env_file=None)

        assert settings.cache.batch_ttl_ms == 5000
        assert settings.cache.default_ttl_ms == 15 * 60 * 1000
        assert settings.activity.review_batch_size == 5

    def test_dashboards_from_env(self, monkeypatch):
        """Test DASHBOARDS JSON is parsed into membership."""
        monkeypatch.setenv(
            "DASHBOARDS",
            '{"team-a": {"users": [{"github_username": "octocat", "github_user_id": 583231}],'
            ' "repositories": ["octocat/Hello-World"]}}',
        )

        settings = Settings(_env_file=None)

        team = settings.dashboards["team-a"]
        assert team.users[0].github_username == "octocat"
        assert team.users[0].github_user_id == 583231
        assert team.users[0].display_name is None
        assert team.repositories == ["octocat/Hello-World"]

    def test_unknown_keys_are_ignored(self, monkeypatch):
        """Stray variables such as ENVIRONMENT do not become settings."""
        monkeypatch.setenv("ENVIRONMENT", "production")

        settings = Settings(_env_file=None)

        assert not hasattr(settings, "environment")

    def test_settings_log_level_validation(self, monkeypatch):
        """Test that invalid log level is rejected."""
        monkeypatch.setenv("LOG_LEVEL", "INVALID")

        with pytest.raises(ValueError):
            Settings(_env_file=None)

    def test_review_batch_size_validation(self):
        """Test that a zero batch size is rejected."""
        with pytest.raises(ValueError):
            Settings(_env_file=None, activity={"review_batch_size": 0})

    def test_org_review_page_size_validation(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, activity={"org_review_pulls_per_page": 101})

    def test_cleanup_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, cache={"cleanup_interval_seconds": 0})

    def test_settings_case_insensitive(self, monkeypatch):
        """Test that env var names are case-insensitive."""
        monkeypatch.setenv("user_agent", "lower-agent")
        monkeypatch.setenv("GITHUB_TOKEN", "upper_token")

        settings = Settings(_env_file=None)

        assert settings.user_agent == "lower-agent"
        assert settings.github_token == "upper_token"


class TestGetSettings:
    """Tests for get_settings function."""

    def test_get_settings_returns_settings(self):
        """Test that get_settings returns a Settings instance."""
        get_settings.cache_clear()

        settings = get_settings()

        assert isinstance(settings, Settings)

    def test_get_settings_cached(self):
        """Test that get_settings returns cached instance."""
        get_settings.cache_clear()

        settings1 = get_settings()
        settings2 = get_settings()

        # Should be the same object (cached)
        assert settings1 is settings2
