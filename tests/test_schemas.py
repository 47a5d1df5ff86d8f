"""Contract tests for Pydantic schemas.

These tests verify that GitHub payloads parse (with unknown fields
passed through) and that result schemas serialize to camelCase.
"""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from github_dashboard.schemas import (
    ActivitySummary,
    DashboardUser,
    DateRange,
    GitHubPullRequest,
    GitHubRepo,
    GitHubReview,
    GitHubSearchResult,
    GitHubUser,
    OrganizationReviewSummary,
    RepoActivity,
    RepoPRStats,
    UserActivitySummary,
    UserPRStats,
    parse_repo_string,
    split_repo_list,
)
from tests.factories import make_github_pr
from tests.fixtures import (
    GITHUB_PR_CLOSED_RESPONSE,
    GITHUB_PR_MERGED_RESPONSE,
    GITHUB_PR_RESPONSE,
    GITHUB_REPO_RESPONSE,
    GITHUB_REVIEWS_RESPONSE,
    GITHUB_SEARCH_RESPONSE,
    GITHUB_USER_RESPONSE,
)


class TestGitHubPayloads:
    """GitHub API payload parsing."""

    def test_user_keeps_unknown_fields(self) -> None:
        user = GitHubUser.model_validate(GITHUB_USER_RESPONSE)
        assert user.login == "octocat"
        assert user.name == "The Octocat"
        assert user.model_dump()["public_repos"] == 8

    def test_user_requires_login(self) -> None:
        with pytest.raises(ValidationError):
            GitHubUser.model_validate({"id": 1})

    def test_repo(self) -> None:
        repo = GitHubRepo.model_validate(GITHUB_REPO_RESPONSE)
        assert repo.full_name == "octocat/Hello-World"
        assert repo.owner.id == 583231
        assert repo.private is False

    def test_open_pr(self) -> None:
        pr = GitHubPullRequest.model_validate(GITHUB_PR_RESPONSE)
        assert pr.number == 1347
        assert pr.author_login == "octocat"
        assert pr.author_id == 583231
        assert pr.is_merged is False
        assert pr.created_at == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

    def test_merged_pr(self) -> None:
        pr = GitHubPullRequest.model_validate(GITHUB_PR_MERGED_RESPONSE)
        assert pr.state == "closed"
        assert pr.is_merged is True

    def test_closed_pr(self) -> None:
        pr = GitHubPullRequest.model_validate(GITHUB_PR_CLOSED_RESPONSE)
        assert pr.state == "closed"
        assert pr.is_merged is False

    def test_pr_from_deleted_account(self) -> None:
        pr = GitHubPullRequest.model_validate(make_github_pr(user=None))
        assert pr.author_login is None
        assert pr.author_id is None

    def test_reviews(self) -> None:
        reviews = [GitHubReview.model_validate(r) for r in GITHUB_REVIEWS_RESPONSE]
        assert [r.state for r in reviews] == ["CHANGES_REQUESTED", "APPROVED", "COMMENTED"]
        assert reviews[2].user is None
        assert reviews[0].submitted_at is not None

    def test_search_result(self) -> None:
        result = GitHubSearchResult.model_validate(GITHUB_SEARCH_RESPONSE)
        assert result.total_count == 2
        assert [item.number for item in result.items] == [1347, 1350]
        assert result.items[0].model_dump()["pull_request"]["url"].endswith("/1347")

    def test_empty_search_result(self) -> None:
        result = GitHubSearchResult.model_validate({})
        assert result.total_count == 0
        assert result.items == []


class TestStats:
    """Aggregated results."""

    def test_user_pr_stats_accumulates(self) -> None:
        stats = UserPRStats()
        stats.add(RepoPRStats(repo="a/b", pr_count=3, open_count=1, closed_count=1, merged_count=1))
        stats.add(RepoPRStats(repo="c/d", pr_count=2, merged_count=2))

        assert stats.total_prs == 5
        assert stats.open_prs == 1
        assert stats.closed_prs == 1
        assert stats.merged_prs == 3
        assert [r.repo for r in stats.repos] == ["a/b", "c/d"]

    def test_totals_drop_the_breakdown(self) -> None:
        stats = UserPRStats()
        stats.add(RepoPRStats(repo="a/b", pr_count=2, open_count=1, merged_count=1))

        totals = stats.totals()

        assert totals.model_dump(by_alias=True) == {
            "totalPrs": 2,
            "openPrs": 1,
            "closedPrs": 0,
            "mergedPrs": 1,
        }

    def test_review_summary_counts_each_pr_once(self) -> None:
        summary = OrganizationReviewSummary(date_range=DateRange(start="2024-01-01", end="2024-01-31"))

        assert summary.record("bob", "o/r#1")
        assert not summary.record("bob", "o/r#1")
        assert summary.record("bob", "o/r#2")
        assert summary.record("alice", "o/r#1")

        assert summary.total_reviews == 3
        assert summary.reviewer_stats["bob"].prs == ["o/r#1", "o/r#2"]
        assert summary.reviewer_stats["bob"].prs_reviewed == 2

    def test_activity_summary_total(self) -> None:
        summary = ActivitySummary()
        summary.add(RepoActivity(repo="a/b", prs_created=2, prs_reviewed=3, prs_merged=1))
        summary.add(RepoActivity(repo="c/d"))

        assert summary.total_activity == 6
        assert len(summary.repos) == 2

    def test_activity_serializes_camel_case(self) -> None:
        summary = UserActivitySummary(
            user=GitHubUser(login="octocat", id=1),
            activity=ActivitySummary(prs_created=1, total_activity=1),
        )
        data = summary.model_dump(mode="json", by_alias=True)

        assert data["user"]["login"] == "octocat"
        assert data["activity"]["prsCreated"] == 1
        assert data["activity"]["totalActivity"] == 1

    def test_empty_summary(self) -> None:
        empty = UserActivitySummary.empty(GitHubUser(login="a"))
        assert empty.activity.total_activity == 0
        assert empty.activity.repos == []

    def test_populate_by_name_or_alias(self) -> None:
        assert RepoActivity(repo="a/b", prsCreated=4).prs_created == 4
        assert RepoActivity(repo="a/b", prs_created=4).prs_created == 4


class TestDashboardUser:
    def test_fallback_profile(self) -> None:
        member = DashboardUser(github_username="octocat", github_user_id=583231, display_name="Mona")
        profile = member.fallback_profile()
        assert profile.login == "octocat"
        assert profile.id == 583231
        assert profile.name == "Mona"

    def test_fallback_profile_without_name(self) -> None:
        profile = DashboardUser(github_username="hubot").fallback_profile()
        assert profile.name == "hubot"
        assert profile.id == 0


class TestRepoStrings:
    def test_parse(self) -> None:
        assert parse_repo_string("octocat/Hello-World") == ("octocat", "Hello-World")
        assert parse_repo_string("  o/r ") == ("o", "r")

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("a/b/c", ("a", "b")), ("o/r/tree/main", ("o", "r")), ("o/r/", ("o", "r"))],
    )
    def test_extra_segments_are_ignored(self, value: str, expected: tuple[str, str]) -> None:
        assert parse_repo_string(value) == expected

    @pytest.mark.parametrize("value", ["", "octocat", "/r", "o/", "//r"])
    def test_parse_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_repo_string(value)

    def test_split_list(self) -> None:
        assert split_repo_list("a/b, c/d,,") == ["a/b", "c/d"]
        assert split_repo_list(None) == []
        assert split_repo_list("") == []
