"""Schemas for dashboard membership."""

from pydantic import Field

from .base import SchemaBase
from .github_api import GitHubUser


class DashboardUser(SchemaBase):
    """A GitHub user attached to a dashboard, as stored by the dashboard."""

    github_username: str = Field(description="GitHub login")
    github_user_id: int = Field(default=0, description="GitHub numeric user ID")
    display_name: str | None = Field(default=None, description="Name shown on the dashboard")

    def fallback_profile(self) -> GitHubUser:
        """Profile built from dashboard data when GitHub cannot be reached."""
        return GitHubUser(
            login=self.github_username,
            id=self.github_user_id,
            name=self.display_name or self.github_username,
        )
