"""Pydantic schemas for GitHub Dashboard.

This module provides GitHub payload parsing and result serialization models.
"""

from .base import GitHubObject, SchemaBase
from .dashboard import DashboardUser
from .github_api import (
    GitHubEvent,
    GitHubEventRepo,
    GitHubIssue,
    GitHubPullRequest,
    GitHubReaction,
    GitHubRepo,
    GitHubReview,
    GitHubSearchResult,
    GitHubUser,
)
from .repository import parse_repo_string, split_repo_list
from .stats import (
    ActivitySummary,
    ActivityTotals,
    DateRange,
    OrganizationReviewSummary,
    PRTotals,
    RepoActivity,
    RepoOverview,
    RepoPRStats,
    ReviewerStats,
    UserActivityOverview,
    UserActivitySummary,
    UserPRStats,
)

__all__ = [
    # Base
    "GitHubObject",
    "SchemaBase",
    # GitHub API
    "GitHubEvent",
    "GitHubEventRepo",
    "GitHubIssue",
    "GitHubPullRequest",
    "GitHubReaction",
    "GitHubRepo",
    "GitHubReview",
    "GitHubSearchResult",
    "GitHubUser",
    # Stats
    "ActivitySummary",
    "ActivityTotals",
    "DateRange",
    "OrganizationReviewSummary",
    "PRTotals",
    "RepoActivity",
    "RepoOverview",
    "RepoPRStats",
    "ReviewerStats",
    "UserActivityOverview",
    "UserActivitySummary",
    "UserPRStats",
    # Dashboard
    "DashboardUser",
    # Repository
    "parse_repo_string",
    "split_repo_list",
]
