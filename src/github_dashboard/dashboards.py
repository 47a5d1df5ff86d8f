"""Dashboard membership lookup.

Batch activity aggregation iterates over the users attached to a
dashboard. Where that membership lives is not this package's concern;
aggregation only talks to a DashboardDirectory.

Usage:
    directory = SettingsDashboardDirectory()
    users = await directory.get_users("team-a")
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from github_dashboard.config import DashboardConfig, Settings, get_settings
from github_dashboard.logging import get_logger
from github_dashboard.schemas import DashboardUser

logger = get_logger(__name__)


class DashboardNotFoundError(Exception):
    """Raised when a dashboard id is unknown to the directory."""

    def __init__(self, dashboard_id: str) -> None:
        super().__init__(f"Dashboard '{dashboard_id}' not found")
        self.dashboard_id = dashboard_id


@runtime_checkable
class DashboardDirectory(Protocol):
    """Source of dashboard membership."""

    async def get_users(self, dashboard_id: str) -> list[DashboardUser]:
        """Members of a dashboard, in membership order.

        Raises:
            DashboardNotFoundError: If the dashboard doesn't exist
        """
        ...

    async def get_repositories(self, dashboard_id: str) -> list[str]:
        """Repositories (``owner/name``) configured for a dashboard.

        Raises:
            DashboardNotFoundError: If the dashboard doesn't exist
        """
        ...


class InMemoryDashboardDirectory:
    """Directory backed by plain dictionaries."""

    def __init__(
        self,
        users: Mapping[str, list[DashboardUser]] | None = None,
        repositories: Mapping[str, list[str]] | None = None,
    ) -> None:
        self._users: dict[str, list[DashboardUser]] = dict(users or {})
        self._repositories: dict[str, list[str]] = dict(repositories or {})

    def add_dashboard(
        self,
        dashboard_id: str,
        users: list[DashboardUser],
        repositories: list[str] | None = None,
    ) -> None:
        self._users[dashboard_id] = list(users)
        self._repositories[dashboard_id] = list(repositories or [])

    def _check(self, dashboard_id: str) -> None:
        if dashboard_id not in self._users and dashboard_id not in self._repositories:
            raise DashboardNotFoundError(dashboard_id)

    async def get_users(self, dashboard_id: str) -> list[DashboardUser]:
        self._check(dashboard_id)
        return list(self._users.get(dashboard_id, []))

    async def get_repositories(self, dashboard_id: str) -> list[str]:
        self._check(dashboard_id)
        return list(self._repositories.get(dashboard_id, []))


class SettingsDashboardDirectory:
    """Directory read from ``Settings.dashboards`` (``DASHBOARDS`` JSON env var).

    Example:
        DASHBOARDS='{"team-a": {"users": [{"github_username": "octocat"}],
                                "repositories": ["octocat/Hello-World"]}}'
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings if settings is not None else get_settings()

    def _dashboard(self, dashboard_id: str) -> DashboardConfig:
        dashboard = self._settings.dashboards.get(dashboard_id)
        if dashboard is None:
            logger.warning("Unknown dashboard: {}", dashboard_id)
            raise DashboardNotFoundError(dashboard_id)
        return dashboard

    async def get_users(self, dashboard_id: str) -> list[DashboardUser]:
        return [
            DashboardUser.model_validate(member.model_dump())
            for member in self._dashboard(dashboard_id).users
        ]

    async def get_repositories(self, dashboard_id: str) -> list[str]:
        return list(self._dashboard(dashboard_id).repositories)
