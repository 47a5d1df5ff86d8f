"""GitHub access façade.

GitHubService turns raw rate-limited requests into typed results and
translates upstream failures into the package taxonomy:

- 404 -> GitHubNotFoundError naming the resource
- 403/429 with a rate limit signal -> GitHubRateLimitError
- other 403 -> GitHubAccessDeniedError (SAML wording)
- anything else -> GitHubBadGatewayError; the upstream detail is only logged

Single-resource operations raise. ``get_user_pr_stats`` isolates
failures per repository and never raises for one of them.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from functools import partial
from typing import Any, Literal, TypeVar

from githubkit.exception import GitHubException, RequestFailed
from pydantic import ValidationError

from github_dashboard.config import CacheConfig, get_settings
from github_dashboard.logging import get_logger
from github_dashboard.schemas import (
    GitHubEvent,
    GitHubPullRequest,
    GitHubReaction,
    GitHubRepo,
    GitHubReview,
    GitHubSearchResult,
    GitHubUser,
    RepoPRStats,
    UserPRStats,
    parse_repo_string,
)

from .cache import CacheKeys, ResponseCache
from .client import GitHubClient
from .exceptions import (
    GitHubAccessDeniedError,
    GitHubBadGatewayError,
    GitHubClientError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from .rate_limit.schemas import normalize_headers

logger = get_logger(__name__)

PRState = Literal["open", "closed", "all"]

T = TypeVar("T")

RATE_LIMIT_MESSAGE = "GitHub API rate limit exceeded. Please try again later or add authentication."


def _error_text(error: RequestFailed) -> str:
    text = getattr(error.response, "text", "")
    if not isinstance(text, str):
        text = ""
    return f"{text} {error}".lower()


def _is_rate_limited(error: RequestFailed) -> bool:
    """Whether a failed response is GitHub refusing for quota reasons."""
    if error.response.status_code not in (403, 429):
        return False
    headers = normalize_headers(getattr(error.response, "headers", None))
    if str(headers.get("x-ratelimit-remaining")) == "0":
        return True
    return "rate limit" in _error_text(error)


def _reset_at(error: RequestFailed) -> datetime | None:
    headers = normalize_headers(getattr(error.response, "headers", None))
    try:
        reset_ts = int(headers.get("x-ratelimit-reset", "0"))
    except (TypeError, ValueError):
        return None
    return datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None


def _upper_first(text: str) -> str:
    return text[:1].upper() + text[1:]


class GitHubService:
    """Typed GitHub operations with error translation and optional caching.

    Usage:
        async with GitHubClient() as client:
            service = GitHubService(client)
            user = await service.get_user("octocat")
            stats = await service.get_user_pr_stats("octocat", ["octocat/Hello-World"])
    """

    def __init__(
        self,
        client: GitHubClient | None = None,
        cache: ResponseCache | None = None,
        cache_config: CacheConfig | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            client: Rate-limited client (created from settings if not provided)
            cache: Response cache used by the ``get_cached_*`` methods
            cache_config: TTLs (uses settings if not provided)
        """
        self._cache_config = cache_config if cache_config is not None else get_settings().cache
        self._client = client if client is not None else GitHubClient()
        self._cache = (
            cache if cache is not None else ResponseCache(self._cache_config.default_ttl_ms)
        )
        self._inflight: dict[str, asyncio.Task[Any]] = {}

    @property
    def client(self) -> GitHubClient:
        return self._client

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _translate_error(self, error: GitHubException, resource: str, action: str) -> GitHubClientError:
        """Map a client failure to the package taxonomy.

        Args:
            error: githubkit failure raised by the client
            resource: Lower-case resource description, e.g. "repository 'o/r'"
            action: What was attempted, e.g. "fetch repository"
        """
        if isinstance(error, RequestFailed):
            status = error.response.status_code
            if status == 404:
                return GitHubNotFoundError(f"{_upper_first(resource)} not found")
            if _is_rate_limited(error):
                return GitHubRateLimitError(RATE_LIMIT_MESSAGE, reset_at=_reset_at(error))
            if status == 403:
                return GitHubAccessDeniedError(
                    f"Access denied to {resource}. Check SAML authorization."
                )

        logger.error("Failed to {} ({}): {}", action, resource, error)
        return GitHubBadGatewayError(f"Failed to {action} from GitHub")

    async def _get(
        self,
        path: str,
        *,
        resource: str,
        action: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        try:
            return await self._client.make_rate_limited_request(self._client.url_for(path), params)
        except GitHubClientError:
            # Blocked locally by the tracker, already in the taxonomy
            raise
        except GitHubException as e:
            raise self._translate_error(e, resource, action) from e

    # -------------------------------------------------------------------------
    # Users & Organizations
    # -------------------------------------------------------------------------
    async def get_user(self, username: str) -> GitHubUser:
        """Get a user profile.

        Raises:
            GitHubNotFoundError: If the user doesn't exist
        """
        logger.info("Fetching user: {}", username)
        data = await self._get(
            f"/users/{username}", resource=f"user '{username}'", action="fetch user"
        )
        return GitHubUser.model_validate(data)

    async def get_user_repos(self, username: str, per_page: int = 30, page: int = 1) -> list[GitHubRepo]:
        """List a user's repositories, most recently updated first."""
        logger.info("Fetching repositories for user: {}", username)
        data = await self._get(
            f"/users/{username}/repos",
            resource=f"user '{username}' repositories",
            action="fetch user repositories",
            params={"per_page": per_page, "page": page, "sort": "updated"},
        )
        return self._validate_list(GitHubRepo, data)

    async def get_organization_members(self, org: str) -> list[GitHubUser]:
        """List the public members of an organization (all members with org scope)."""
        logger.info("Fetching organization members: {}", org)
        data = await self._get(
            f"/orgs/{org}/members",
            resource=f"organization '{org}'",
            action="fetch organization members",
        )
        return self._validate_list(GitHubUser, data)

    async def get_organization_repositories(self, org: str) -> list[GitHubRepo]:
        """List an organization's repositories, most recently updated first.

        Private repositories are included when the token can see them.
        """
        logger.info("Fetching repositories for organization: {}", org)
        data = await self._get(
            f"/orgs/{org}/repos",
            resource=f"organization '{org}'",
            action="fetch organization repositories",
            params={"per_page": 100, "sort": "updated"},
        )
        return self._validate_list(GitHubRepo, data)

    async def get_user_events(
        self,
        username: str,
        since: str | None = None,
        until: str | None = None,
    ) -> list[GitHubEvent]:
        """List a user's recent public events.

        ``since``/``until`` are only sent when both are given.
        """
        logger.info("Fetching activity for user: {}", username)
        params = {"since": since, "until": until} if since and until else None
        data = await self._get(
            f"/users/{username}/events",
            resource=f"user '{username}'",
            action="fetch user activity",
            params=params,
        )
        return self._validate_list(GitHubEvent, data)

    # -------------------------------------------------------------------------
    # Repositories & Pull Requests
    # -------------------------------------------------------------------------
    async def get_repository(self, owner: str, repo: str) -> GitHubRepo:
        """Get repository information.

        Raises:
            GitHubNotFoundError: If the repository doesn't exist
            GitHubAccessDeniedError: On 403 (e.g. SAML enforcement)
        """
        logger.info("Fetching repository: {}/{}", owner, repo)
        data = await self._get(
            f"/repos/{owner}/{repo}",
            resource=f"repository '{owner}/{repo}'",
            action="fetch repository",
        )
        return GitHubRepo.model_validate(data)

    async def get_pull_requests(
        self,
        owner: str,
        repo: str,
        state: PRState = "all",
        per_page: int = 30,
        page: int = 1,
        *,
        sort: str | None = None,
        direction: str | None = None,
    ) -> list[GitHubPullRequest]:
        """Fetch one page of pull requests.

        ``state`` is passed through verbatim; a narrower state means
        PRs outside it are simply not returned.
        """
        logger.info("Fetching pull requests for {}/{} (state={}, page={})", owner, repo, state, page)
        params: dict[str, Any] = {"state": state, "per_page": per_page, "page": page}
        if sort:
            params["sort"] = sort
        if direction:
            params["direction"] = direction
        data = await self._get(
            f"/repos/{owner}/{repo}/pulls",
            resource=f"repository '{owner}/{repo}'",
            action="fetch pull requests",
            params=params,
        )
        return self._validate_list(GitHubPullRequest, data)

    async def get_pull_request_reviews(self, owner: str, repo: str, number: int) -> list[GitHubReview]:
        """List reviews submitted on a pull request."""
        logger.debug("Fetching reviews for PR #{} in {}/{}", number, owner, repo)
        data = await self._get(
            f"/repos/{owner}/{repo}/pulls/{number}/reviews",
            resource=f"pull request #{number} in {owner}/{repo}",
            action="fetch pull request reviews",
        )
        return self._validate_list(GitHubReview, data)

    async def get_pull_request_reactions(self, owner: str, repo: str, number: int) -> list[GitHubReaction]:
        """List emoji reactions on a pull request (via its issue)."""
        logger.debug("Fetching reactions for PR #{} in {}/{}", number, owner, repo)
        data = await self._get(
            f"/repos/{owner}/{repo}/issues/{number}/reactions",
            resource=f"pull request #{number} in {owner}/{repo}",
            action="fetch pull request reactions",
        )
        return self._validate_list(GitHubReaction, data)

    async def search_issues(self, query: str, per_page: int = 100) -> GitHubSearchResult:
        """Run an issue/PR search (counts against the search quota)."""
        logger.debug("Searching issues: {}", query)
        data = await self._get(
            "/search/issues",
            resource=f"search '{query}'",
            action="search issues",
            params={"q": query, "per_page": per_page},
        )
        return GitHubSearchResult.model_validate(data)

    @staticmethod
    def _validate_list(model: Any, data: Any) -> list[Any]:
        items = []
        for item in data or []:
            try:
                items.append(model.model_validate(item))
            except ValidationError:
                # Skip items that don't validate (shouldn't happen normally)
                continue
        return items

    # -------------------------------------------------------------------------
    # Aggregation
    # -------------------------------------------------------------------------
    async def get_user_pr_stats(self, username: str, repo_list: list[str]) -> UserPRStats:
        """Count a user's PRs across repositories.

        Each ``owner/repo`` is fetched with ``state=all`` (100 per page) and
        filtered to PRs authored by ``username``. A PR counts as merged when
        it has a merge timestamp, whatever its state. Malformed repo names
        are skipped with a warning; a repository that fails to load is
        logged and left out while the others still accumulate.
        """
        logger.info("Getting PR stats for user {} across {} repositories", username, len(repo_list))
        stats = UserPRStats()

        for repo in repo_list:
            try:
                owner, name = parse_repo_string(repo)
            except ValueError:
                logger.warning("Invalid repo format: {}", repo)
                continue

            try:
                pulls = await self.get_pull_requests(owner, name, "all", 100)
            except GitHubClientError as e:
                logger.error("Failed to get PR stats for {}: {}", repo, e)
                continue

            authored = [pr for pr in pulls if pr.author_login == username]
            stats.add(
                RepoPRStats(
                    repo=repo,
                    pr_count=len(authored),
                    open_count=sum(1 for pr in authored if pr.state == "open"),
                    closed_count=sum(
                        1 for pr in authored if pr.state == "closed" and not pr.is_merged
                    ),
                    merged_count=sum(1 for pr in authored if pr.is_merged),
                )
            )

        return stats

    # -------------------------------------------------------------------------
    # Cached Access
    # -------------------------------------------------------------------------
    async def get_or_load(self, key: str, ttl_ms: int, load: Callable[[], Awaitable[T]]) -> T:
        """Return the cached value for ``key``, loading it on a miss.

        Concurrent misses on the same key share one load. A failed load
        is not cached and is raised to every waiter.
        """
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        task = self._inflight.get(key)
        if task is None:
            logger.debug("Cache miss: {}", key)
            task = asyncio.ensure_future(self._load_and_store(key, ttl_ms, load))
            self._inflight[key] = task
            task.add_done_callback(partial(self._forget_inflight, key))
        else:
            logger.debug("Joining in-flight load: {}", key)
        # One waiter being cancelled must not cancel the load for the others
        return await asyncio.shield(task)

    async def _load_and_store(self, key: str, ttl_ms: int, load: Callable[[], Awaitable[T]]) -> T:
        return self._cache.set(key, await load(), ttl_ms)

    def _forget_inflight(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def get_cached_user(self, username: str) -> GitHubUser:
        return await self.get_or_load(
            CacheKeys.user(username),
            self._cache_config.user_ttl_ms,
            partial(self.get_user, username),
        )

    async def get_cached_repository(self, owner: str, repo: str) -> GitHubRepo:
        return await self.get_or_load(
            CacheKeys.repository(owner, repo),
            self._cache_config.default_ttl_ms,
            partial(self.get_repository, owner, repo),
        )

    async def get_cached_pull_requests(
        self,
        owner: str,
        repo: str,
        state: PRState = "all",
        per_page: int = 100,
        page: int = 1,
        *,
        sort: str | None = None,
        direction: str | None = None,
    ) -> list[GitHubPullRequest]:
        key = CacheKeys.pr_list(
            owner, repo, state, per_page, page, sort or "created", direction or "desc"
        )
        return await self.get_or_load(
            key,
            self._cache_config.default_ttl_ms,
            partial(
                self.get_pull_requests,
                owner,
                repo,
                state,
                per_page,
                page,
                sort=sort,
                direction=direction,
            ),
        )

    async def get_cached_pull_request_reviews(
        self, owner: str, repo: str, number: int
    ) -> list[GitHubReview]:
        return await self.get_or_load(
            CacheKeys.pr_reviews(owner, repo, number),
            self._cache_config.default_ttl_ms,
            partial(self.get_pull_request_reviews, owner, repo, number),
        )

    async def get_cached_pull_request_reactions(
        self, owner: str, repo: str, number: int
    ) -> list[GitHubReaction]:
        return await self.get_or_load(
            CacheKeys.pr_reactions(owner, repo, number),
            self._cache_config.default_ttl_ms,
            partial(self.get_pull_request_reactions, owner, repo, number),
        )
