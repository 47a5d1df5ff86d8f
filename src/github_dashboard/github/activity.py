"""Per-user and per-dashboard PR activity over a date window.

Two ways of computing a repository's numbers for a user:

- repo-first: two issue searches per repository (created / merged in
  the window), counted per author and cached for every user of the
  repository. Used when reviews are not requested.
- detailed: the cached PR list (most recently updated first) filtered
  to the window, plus the reviews and reactions on PRs the user did not
  author. Also the fallback when the repo-first searches fail.

Batch operations fan out one task per dashboard member and substitute
an all-zero record for any member whose computation fails. Overviews
put windowed activity next to all-time PR counts, and the organization
review summary groups reviews by reviewer.
"""

from __future__ import annotations

import asyncio
import time
from collections import Counter
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

from github_dashboard.config import ActivityConfig, CacheConfig, get_settings
from github_dashboard.dashboards import DashboardDirectory, SettingsDashboardDirectory
from github_dashboard.logging import bind_repo, bind_user, dashboard_context, get_logger
from github_dashboard.schemas import (
    ActivitySummary,
    DashboardUser,
    DateRange,
    GitHubIssue,
    GitHubPullRequest,
    GitHubReaction,
    GitHubUser,
    OrganizationReviewSummary,
    RepoActivity,
    RepoOverview,
    RepoPRStats,
    UserActivityOverview,
    UserActivitySummary,
    parse_repo_string,
)

from .cache import CacheKeys
from .exceptions import GitHubClientError
from .service import GitHubService

logger = get_logger(__name__)

Clock = Callable[[], float]

COUNTED_REVIEW_STATES = frozenset({"APPROVED", "CHANGES_REQUESTED", "COMMENTED"})
ORG_REVIEW_LOOKBACK_DAYS = 30
ORG_REVIEW_LOOKAHEAD_DAYS = 7


def _as_utc(value: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _in_window(value: datetime | None, start: datetime, end: datetime) -> bool:
    return value is not None and start <= value <= end


def _touched_in_window(pr: GitHubPullRequest, start: datetime, end: datetime) -> bool:
    """Created, updated or merged inside the window."""
    return (
        _in_window(pr.created_at, start, end)
        or _in_window(pr.updated_at, start, end)
        or _in_window(pr.merged_at, start, end)
    )


def _is_same_user(candidate: GitHubUser | None, user: GitHubUser) -> bool:
    """Match on numeric id when both sides know it, otherwise on login."""
    if candidate is None:
        return False
    if candidate.id and user.id:
        return candidate.id == user.id
    return candidate.login == user.login


@dataclass
class RepoAggregate:
    """Per-author created/merged counts for one repository and window."""

    created_by_id: Counter[int] = field(default_factory=Counter)
    created_by_login: Counter[str] = field(default_factory=Counter)
    merged_by_id: Counter[int] = field(default_factory=Counter)
    merged_by_login: Counter[str] = field(default_factory=Counter)
    total_recent_prs: int = 0

    @staticmethod
    def _count(items: list[GitHubIssue], by_id: Counter[int], by_login: Counter[str]) -> None:
        for item in items:
            if item.user is None:
                continue
            if item.user.id:
                by_id[item.user.id] += 1
            by_login[item.user.login] += 1

    def add_created(self, items: list[GitHubIssue]) -> None:
        self._count(items, self.created_by_id, self.created_by_login)

    def add_merged(self, items: list[GitHubIssue]) -> None:
        self._count(items, self.merged_by_id, self.merged_by_login)

    def counts_for(self, user: GitHubUser) -> tuple[int, int]:
        """(created, merged) for a user."""
        if user.id:
            return self.created_by_id[user.id], self.merged_by_id[user.id]
        return self.created_by_login[user.login], self.merged_by_login[user.login]


class ActivityService:
    """Activity aggregation for single users and whole dashboards.

    Usage:
        async with GitHubClient() as client:
            activity = ActivityService(GitHubService(client))
            results = await activity.get_cached_batch_user_activity_summary("team-a")
    """

    def __init__(
        self,
        github: GitHubService,
        directory: DashboardDirectory | None = None,
        config: ActivityConfig | None = None,
        cache_config: CacheConfig | None = None,
        clock: Clock = time.time,
    ) -> None:
        """Initialize the service.

        Args:
            github: Façade used for every upstream call (and its cache)
            directory: Dashboard membership (settings-backed if not provided)
            config: Window and batching settings (uses settings if not provided)
            cache_config: TTLs (uses settings if not provided)
            clock: Returns the current time in epoch seconds
        """
        self._github = github
        self._directory = directory if directory is not None else SettingsDashboardDirectory()
        self._config = config if config is not None else get_settings().activity
        self._cache_config = cache_config if cache_config is not None else get_settings().cache
        self._clock = clock

    @property
    def directory(self) -> DashboardDirectory:
        return self._directory

    def resolve_window(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> tuple[datetime, datetime]:
        """Fill in the default window: the last N days up to now."""
        now = datetime.fromtimestamp(self._clock(), tz=UTC)
        resolved_end = _as_utc(end) if end else now
        resolved_start = (
            _as_utc(start) if start else now - timedelta(days=self._config.default_window_days)
        )
        return resolved_start, resolved_end

    # -------------------------------------------------------------------------
    # Single user
    # -------------------------------------------------------------------------
    async def get_user_activity_summary(
        self,
        user: GitHubUser,
        repo_list: Sequence[str],
        start: datetime | None = None,
        end: datetime | None = None,
        include_reviews: bool = True,
    ) -> UserActivitySummary:
        """Compute a user's created/reviewed/merged counts per repository.

        Malformed repository names are skipped. A repository whose data
        cannot be fetched contributes a zero entry; this method does not
        raise for per-repository failures.
        """
        window_start, window_end = self.resolve_window(start, end)
        log = bind_user(user.login)
        summary = ActivitySummary()

        for repo in repo_list:
            try:
                owner, name = parse_repo_string(repo)
            except ValueError:
                log.warning("Invalid repo format: {}", repo)
                continue

            if not include_reviews:
                try:
                    summary.add(
                        await self._repo_first_activity(user, repo, owner, name, window_start, window_end)
                    )
                    continue
                except GitHubClientError as e:
                    log.warning("Repo-first aggregation failed for {}: {}", repo, e)

            try:
                activity = await self._detailed_activity(user, repo, owner, name, window_start, window_end)
            except GitHubClientError as e:
                log.warning("Failed to get activity in {}: {}", repo, e)
                activity = RepoActivity(repo=repo)
            summary.add(activity)

        log.info(
            "Activity summary: created={}, reviewed={}, merged={} across {} repos",
            summary.prs_created,
            summary.prs_reviewed,
            summary.prs_merged,
            len(summary.repos),
        )
        return UserActivitySummary(user=user, activity=summary)

    async def _repo_first_activity(
        self,
        user: GitHubUser,
        repo: str,
        owner: str,
        name: str,
        start: datetime,
        end: datetime,
    ) -> RepoActivity:
        aggregate = await self._aggregate_repo(owner, name, start.date().isoformat(), end.date().isoformat())
        created, merged = aggregate.counts_for(user)
        return RepoActivity(
            repo=repo,
            prs_created=created,
            prs_merged=merged,
            total_recent_prs=aggregate.total_recent_prs,
        )

    async def _aggregate_repo(self, owner: str, name: str, start_day: str, end_day: str) -> RepoAggregate:
        """Search once per repository and window; shared by every member."""

        async def search() -> RepoAggregate:
            created = await self._github.search_issues(
                f"repo:{owner}/{name} is:pr created:{start_day}..{end_day}", per_page=100
            )
            merged = await self._github.search_issues(
                f"repo:{owner}/{name} is:pr is:merged merged:{start_day}..{end_day}", per_page=100
            )
            aggregate = RepoAggregate(total_recent_prs=created.total_count)
            aggregate.add_created(created.items)
            aggregate.add_merged(merged.items)
            return aggregate

        return await self._github.get_or_load(
            CacheKeys.repo_activity(owner, name, start_day, end_day),
            self._cache_config.default_ttl_ms,
            search,
        )

    async def _detailed_activity(
        self,
        user: GitHubUser,
        repo: str,
        owner: str,
        name: str,
        start: datetime,
        end: datetime,
    ) -> RepoActivity:
        pulls = await self._github.get_cached_pull_requests(
            owner,
            name,
            "all",
            self._config.pulls_per_page,
            sort="updated",
            direction="desc",
        )
        recent = [pr for pr in pulls if _touched_in_window(pr, start, end)]
        authored = [pr for pr in recent if _is_same_user(pr.user, user)]
        others = [pr for pr in recent if not _is_same_user(pr.user, user)]

        prs_created = sum(1 for pr in authored if _in_window(pr.created_at, start, end))
        prs_merged = sum(1 for pr in authored if _in_window(pr.merged_at, start, end))
        prs_reviewed = await self._count_reviewed(owner, name, others, user, start, end)

        bind_repo(owner, name).debug(
            "{}: created={}, reviewed={}, merged={}, recent={}",
            user.login,
            prs_created,
            prs_reviewed,
            prs_merged,
            len(recent),
        )
        return RepoActivity(
            repo=repo,
            prs_created=prs_created,
            prs_reviewed=prs_reviewed,
            prs_merged=prs_merged,
            total_recent_prs=len(recent),
        )

    async def _count_reviewed(
        self,
        owner: str,
        name: str,
        pulls: list[GitHubPullRequest],
        user: GitHubUser,
        start: datetime,
        end: datetime,
    ) -> int:
        """PRs the user reviewed or reacted to inside the window.

        Reviews count by ``submitted_at``, reactions by ``created_at``.
        Both are fetched a few PRs at a time with a short pause between
        batches. A PR whose reviews cannot be fetched counts as not
        reviewed; reactions that cannot be fetched count as none.
        """

        async def reactions_of(pr: GitHubPullRequest) -> list[GitHubReaction]:
            try:
                return await self._github.get_cached_pull_request_reactions(owner, name, pr.number)
            except GitHubClientError as e:
                logger.warning("Failed to get reactions for {}/{}#{}: {}", owner, name, pr.number, e)
                return []

        async def has_review(pr: GitHubPullRequest) -> bool:
            try:
                reviews, reactions = await asyncio.gather(
                    self._github.get_cached_pull_request_reviews(owner, name, pr.number),
                    reactions_of(pr),
                )
            except GitHubClientError as e:
                logger.warning("Failed to get reviews for {}/{}#{}: {}", owner, name, pr.number, e)
                return False
            return any(
                _is_same_user(review.user, user) and _in_window(review.submitted_at, start, end)
                for review in reviews
            ) or any(
                _is_same_user(reaction.user, user) and _in_window(reaction.created_at, start, end)
                for reaction in reactions
            )

        batch_size = self._config.review_batch_size
        delay = self._config.review_batch_delay_ms / 1000
        reviewed = 0
        for i in range(0, len(pulls), batch_size):
            batch = pulls[i : i + batch_size]
            results = await asyncio.gather(*(has_review(pr) for pr in batch))
            reviewed += sum(1 for result in results if result)
            if delay and i + batch_size < len(pulls):
                await asyncio.sleep(delay)
        return reviewed

    # -------------------------------------------------------------------------
    # Dashboards
    # -------------------------------------------------------------------------
    async def _resolve_repos(self, dashboard_id: str, repos: Sequence[str] | None) -> list[str]:
        if repos:
            return list(repos)
        repo_list = await self._directory.get_repositories(dashboard_id)
        logger.info("Loaded {} repositories for dashboard {}", len(repo_list), dashboard_id)
        return repo_list

    async def _gather_members(
        self,
        members: list[DashboardUser],
        summarize: Callable[[DashboardUser], Awaitable[UserActivitySummary]],
    ) -> list[UserActivitySummary]:
        """Run one task per member; a failed member gets an all-zero record."""
        results = await asyncio.gather(*(summarize(m) for m in members), return_exceptions=True)

        summaries: list[UserActivitySummary] = []
        for member, result in zip(members, results, strict=True):
            if isinstance(result, Exception):
                logger.warning("Failed to get activity for user {}: {}", member.github_username, result)
                summaries.append(UserActivitySummary.empty(member.fallback_profile()))
            elif isinstance(result, BaseException):
                raise result
            else:
                summaries.append(result)
        return summaries

    async def get_batch_user_activity_summary(
        self,
        dashboard_id: str,
        repos: Sequence[str] | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[UserActivitySummary]:
        """Activity for every member of a dashboard, computed in parallel.

        The result has one entry per member, in membership order.

        Raises:
            DashboardNotFoundError: If the dashboard doesn't exist
        """
        with dashboard_context(dashboard_id):
            members = await self._directory.get_users(dashboard_id)
            repo_list = await self._resolve_repos(dashboard_id, repos)
            logger.info(
                "Getting batch activity summary for {} users over {} repos",
                len(members),
                len(repo_list),
            )

            async def summarize(member: DashboardUser) -> UserActivitySummary:
                user = await self._github.get_user(member.github_username)
                return await self.get_user_activity_summary(user, repo_list, start, end)

            results = await self._gather_members(members, summarize)
            logger.info("Batch activity summary completed for {} users", len(results))
            return results

    async def get_cached_batch_user_activity_summary(
        self,
        dashboard_id: str,
        repos: Sequence[str] | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
        include_reviews: bool = True,
        users: Sequence[str] = (),
        no_cache: bool = False,
    ) -> list[UserActivitySummary]:
        """Batch activity through the response cache.

        The whole result is cached for a short TTL, keyed by dashboard,
        repositories, window and ``include_reviews``. ``users`` narrows
        the members (and a cached result) by login, ignoring case; a
        narrowed result is never stored. ``no_cache`` bypasses the batch
        cache for both reading and writing.

        Raises:
            DashboardNotFoundError: If the dashboard doesn't exist
        """
        key = CacheKeys.batch_summary(
            dashboard_id,
            list(repos or []),
            _as_utc(start).isoformat() if start else "auto30d",
            _as_utc(end).isoformat() if end else "now",
            include_reviews,
        )
        # GitHub logins are case-insensitive
        user_filter = {login.casefold() for login in users}
        cache = self._github.cache

        with dashboard_context(dashboard_id):
            if not no_cache:
                cached = cache.get(key)
                if cached is not None:
                    logger.debug("Batch cache hit: {}", key)
                    if user_filter:
                        return [s for s in cached if s.user.login.casefold() in user_filter]
                    return list(cached)

            members = await self._directory.get_users(dashboard_id)
            if user_filter:
                members = [m for m in members if m.github_username.casefold() in user_filter]
            repo_list = await self._resolve_repos(dashboard_id, repos)

            if repo_list:
                logger.info(
                    "Computing activity for {} users over {} repos", len(members), len(repo_list)
                )
            else:
                logger.info("Dashboard has no repositories configured, returning zero activity")

            async def summarize(member: DashboardUser) -> UserActivitySummary:
                user = await self._github.get_cached_user(member.github_username)
                if not repo_list:
                    return UserActivitySummary.empty(user)
                return await self.get_user_activity_summary(
                    user, repo_list, start, end, include_reviews
                )

            results = await self._gather_members(members, summarize)

            if not no_cache and not user_filter:
                cache.set(key, results, self._cache_config.batch_ttl_ms)
            return results

    # -------------------------------------------------------------------------
    # Overviews
    # -------------------------------------------------------------------------
    async def get_user_activity_overview(
        self,
        username: str,
        repo_list: Sequence[str],
        start: datetime | None = None,
        end: datetime | None = None,
        include_reviews: bool = True,
    ) -> UserActivityOverview:
        """Windowed activity next to all-time PR counts, per repository.

        Every requested repository gets an entry, zero-filled when it
        was skipped or failed on either side.

        Raises:
            GitHubNotFoundError: If the user doesn't exist
        """
        user = await self._github.get_user(username)
        summary = await self.get_user_activity_summary(user, repo_list, start, end, include_reviews)
        overall = await self._github.get_user_pr_stats(username, list(repo_list))

        activity_by_repo = {r.repo: r for r in summary.activity.repos}
        overall_by_repo = {r.repo: r for r in overall.repos}
        return UserActivityOverview(
            user=user,
            activity=summary.activity.totals(),
            overall_stats=overall.totals(),
            repos=[
                RepoOverview(
                    repo=repo,
                    activity=activity_by_repo.get(repo, RepoActivity(repo=repo)),
                    overall_stats=overall_by_repo.get(repo, RepoPRStats(repo=repo)),
                )
                for repo in repo_list
            ],
        )

    async def get_organization_review_summary(
        self,
        repos: Sequence[str],
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> OrganizationReviewSummary:
        """Who reviewed which PRs across a set of repositories.

        Only the newest PRs of each repository are scanned (newest
        created first). Scanning stops at a PR created more than the
        look-back margin before ``start``; PRs created more than a week
        after ``end`` are passed over. A review counts when it was
        submitted in the window with an approving, change-requesting or
        commenting state, by someone other than the PR author and not by
        a bot. Each reviewer counts a PR once.
        """
        window_start, window_end = self.resolve_window(start, end)
        oldest = window_start - timedelta(days=ORG_REVIEW_LOOKBACK_DAYS)
        newest = window_end + timedelta(days=ORG_REVIEW_LOOKAHEAD_DAYS)
        summary = OrganizationReviewSummary(
            date_range=DateRange(
                start=window_start.date().isoformat(),
                end=window_end.date().isoformat(),
            )
        )
        logger.info("Fetching organization review summary for {} repositories", len(repos))

        for repo in repos:
            try:
                owner, name = parse_repo_string(repo)
            except ValueError:
                logger.warning("Invalid repository format: {}", repo)
                continue

            try:
                pulls = await self._github.get_pull_requests(
                    owner, name, "all", self._config.org_review_pulls_per_page
                )
            except GitHubClientError as e:
                logger.error("Error processing repository {}: {}", repo, e)
                continue

            for pr in pulls:
                if pr.created_at < oldest:
                    break
                if pr.created_at > newest:
                    continue
                try:
                    reviews = await self._github.get_pull_request_reviews(owner, name, pr.number)
                except GitHubClientError as e:
                    logger.warning("Failed to fetch reviews for {}#{}: {}", repo, pr.number, e)
                    continue

                for review in reviews:
                    if review.user is None or review.state not in COUNTED_REVIEW_STATES:
                        continue
                    if not _in_window(review.submitted_at, window_start, window_end):
                        continue
                    reviewer = review.user.login
                    if reviewer == pr.author_login or "[bot]" in reviewer:
                        continue
                    if summary.record(reviewer, f"{repo}#{pr.number}"):
                        logger.debug("{} reviewed {}#{}", reviewer, repo, pr.number)

        logger.info(
            "Review summary: {} reviewers, {} reviews",
            len(summary.reviewer_stats),
            summary.total_reviews,
        )
        return summary
