"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure.
See: https://docs.github.com/en/rest
"""

from datetime import datetime

from pydantic import Field

from .base import GitHubObject


class GitHubUser(GitHubObject):
    """GitHub user object (profile or nested author)."""

    login: str = Field(description="GitHub username")
    id: int = Field(default=0, description="GitHub user ID")
    name: str | None = Field(default=None, description="Display name")
    avatar_url: str | None = Field(default=None, description="Avatar image URL")
    html_url: str | None = Field(default=None, description="Profile URL")
    type: str = Field(default="User", description="User type")


class GitHubRepo(GitHubObject):
    """GitHub repository object."""

    id: int = Field(description="Repository ID")
    name: str = Field(description="Repository name")
    full_name: str = Field(description="owner/name")
    owner: GitHubUser | None = Field(default=None, description="Owning user or org")
    private: bool = Field(default=False, description="Whether the repository is private")
    html_url: str | None = Field(default=None, description="Repository URL")
    description: str | None = Field(default=None, description="Repository description")


class GitHubPullRequest(GitHubObject):
    """GitHub pull request object from the list endpoint.

    Maps to: GET /repos/{owner}/{repo}/pulls
    """

    number: int = Field(description="PR number")
    state: str = Field(description="PR state (open, closed)")
    title: str = Field(default="", description="PR title")
    html_url: str | None = Field(default=None, description="GitHub PR URL")
    user: GitHubUser | None = Field(default=None, description="PR author")

    created_at: datetime = Field(description="When PR was created")
    updated_at: datetime = Field(description="Last update timestamp")
    closed_at: datetime | None = Field(default=None, description="When PR was closed")
    merged_at: datetime | None = Field(default=None, description="When PR was merged")

    @property
    def author_login(self) -> str | None:
        return self.user.login if self.user else None

    @property
    def author_id(self) -> int | None:
        return self.user.id if self.user else None

    @property
    def is_merged(self) -> bool:
        """Merged iff a merge timestamp is present, whatever ``state`` says."""
        return self.merged_at is not None


class GitHubReview(GitHubObject):
    """GitHub review object from reviews endpoint."""

    id: int = Field(description="Review ID")
    user: GitHubUser | None = Field(default=None, description="Reviewer (None for deleted users)")
    state: str = Field(default="COMMENTED", description="APPROVED, CHANGES_REQUESTED, COMMENTED, ...")
    submitted_at: datetime | None = Field(default=None, description="When review was submitted")


class GitHubIssue(GitHubObject):
    """Issue (or PR) item returned by the issue search endpoint."""

    number: int = Field(description="Issue/PR number")
    state: str = Field(default="open", description="open or closed")
    user: GitHubUser | None = Field(default=None, description="Author")


class GitHubSearchResult(GitHubObject):
    """Result page from GET /search/issues."""

    total_count: int = Field(default=0, description="Total matches for the query")
    incomplete_results: bool = Field(default=False)
    items: list[GitHubIssue] = Field(default_factory=list)


class GitHubReaction(GitHubObject):
    """Emoji reaction from GET /repos/{owner}/{repo}/issues/{number}/reactions."""

    id: int = Field(description="Reaction ID")
    user: GitHubUser | None = Field(default=None, description="Reacting user")
    content: str = Field(default="", description="+1, -1, laugh, hooray, ...")
    created_at: datetime | None = Field(default=None, description="When the reaction was added")


class GitHubEventRepo(GitHubObject):
    """Repository reference embedded in an event."""

    id: int = Field(default=0)
    name: str = Field(description="owner/name")


class GitHubEvent(GitHubObject):
    """Public event from GET /users/{username}/events."""

    id: str = Field(description="Event ID")
    type: str | None = Field(default=None, description="PushEvent, PullRequestEvent, ...")
    actor: GitHubUser | None = Field(default=None)
    repo: GitHubEventRepo | None = Field(default=None)
    created_at: datetime | None = Field(default=None)
