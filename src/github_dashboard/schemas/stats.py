"""Aggregated PR statistics and activity summaries.

These are derived on every call and never cached as entities of their
own; only the upstream responses they are built from are cached.
"""

from typing import Self

from pydantic import Field

from .base import SchemaBase
from .github_api import GitHubUser


class RepoPRStats(SchemaBase):
    """PR counts for one author in one repository."""

    repo: str = Field(description="owner/name")
    pr_count: int = 0
    open_count: int = 0
    closed_count: int = Field(default=0, description="Closed without being merged")
    merged_count: int = 0


class PRTotals(SchemaBase):
    """All-time PR counts for one author."""

    total_prs: int = 0
    open_prs: int = 0
    closed_prs: int = 0
    merged_prs: int = 0


class UserPRStats(PRTotals):
    """PR counts for one author across repositories."""

    repos: list[RepoPRStats] = Field(default_factory=list)

    def add(self, repo_stats: RepoPRStats) -> None:
        """Accumulate one repository's counts into the totals."""
        self.repos.append(repo_stats)
        self.total_prs += repo_stats.pr_count
        self.open_prs += repo_stats.open_count
        self.closed_prs += repo_stats.closed_count
        self.merged_prs += repo_stats.merged_count

    def totals(self) -> PRTotals:
        return PRTotals(
            total_prs=self.total_prs,
            open_prs=self.open_prs,
            closed_prs=self.closed_prs,
            merged_prs=self.merged_prs,
        )


class RepoActivity(SchemaBase):
    """A user's activity in one repository over a date window."""

    repo: str
    prs_created: int = 0
    prs_reviewed: int = 0
    prs_merged: int = 0
    total_recent_prs: int = Field(default=0, description="PRs touched in the window, any author")


class ActivityTotals(SchemaBase):
    """A user's activity totals over a date window."""

    prs_created: int = 0
    prs_reviewed: int = 0
    prs_merged: int = 0
    total_activity: int = 0


class ActivitySummary(ActivityTotals):
    """Activity totals with the per-repository breakdown."""

    repos: list[RepoActivity] = Field(default_factory=list)

    def add(self, repo_activity: RepoActivity) -> None:
        self.repos.append(repo_activity)
        self.prs_created += repo_activity.prs_created
        self.prs_reviewed += repo_activity.prs_reviewed
        self.prs_merged += repo_activity.prs_merged
        self.total_activity += (
            repo_activity.prs_created + repo_activity.prs_reviewed + repo_activity.prs_merged
        )

    def totals(self) -> ActivityTotals:
        return ActivityTotals(
            prs_created=self.prs_created,
            prs_reviewed=self.prs_reviewed,
            prs_merged=self.prs_merged,
            total_activity=self.total_activity,
        )


class UserActivitySummary(SchemaBase):
    """Profile plus activity for one dashboard member."""

    user: GitHubUser
    activity: ActivitySummary = Field(default_factory=ActivitySummary)

    @classmethod
    def empty(cls, user: GitHubUser) -> Self:
        """All-zero activity record, used when a member's data cannot be fetched."""
        return cls(user=user, activity=ActivitySummary())


class RepoOverview(SchemaBase):
    """Windowed activity next to all-time PR counts for one repository."""

    repo: str
    activity: RepoActivity
    overall_stats: RepoPRStats


class UserActivityOverview(SchemaBase):
    """A user's windowed activity combined with their all-time PR counts."""

    user: GitHubUser
    activity: ActivityTotals
    overall_stats: PRTotals
    repos: list[RepoOverview] = Field(default_factory=list)


class ReviewerStats(SchemaBase):
    """Distinct PRs one reviewer reviewed, as ``owner/name#number``."""

    prs_reviewed: int = 0
    prs: list[str] = Field(default_factory=list)


class DateRange(SchemaBase):
    start: str
    end: str


class OrganizationReviewSummary(SchemaBase):
    """Reviews across a set of repositories, grouped by reviewer login."""

    reviewer_stats: dict[str, ReviewerStats] = Field(default_factory=dict)
    total_reviews: int = 0
    date_range: DateRange

    def record(self, reviewer: str, pr_id: str) -> bool:
        """Count ``pr_id`` for ``reviewer`` once; False if already counted."""
        stats = self.reviewer_stats.setdefault(reviewer, ReviewerStats())
        if pr_id in stats.prs:
            return False
        stats.prs.append(pr_id)
        stats.prs_reviewed += 1
        self.total_reviews += 1
        return True
