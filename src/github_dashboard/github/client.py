"""Async GitHub API client wrapper using githubkit.

Every request goes through ``make_rate_limited_request``: the local
rate limit tracker is consulted first, the response headers are fed
back into it afterwards (also on failure), and the parsed JSON body
is returned. Error translation into the package taxonomy happens one
layer up, in GitHubService.
"""

from __future__ import annotations

from typing import Any

from githubkit import GitHub
from githubkit.exception import GitHubException, RequestFailed

from github_dashboard.config import Settings, get_settings
from github_dashboard.logging import get_logger

from .exceptions import GitHubClientError, GitHubRateLimitError
from .rate_limit import AuthStatus, RateLimitTracker
from .rate_limit.schemas import normalize_headers

logger = get_logger(__name__)

ACCEPT_HEADER = "application/vnd.github.v3+json"


class GitHubClient:
    """Async, rate-limit-aware GitHub REST client.

    Usage:
        async with GitHubClient() as client:
            user = await client.make_rate_limited_request(client.url_for("/users/octocat"))

    A token is optional. Without one requests are unauthenticated and
    GitHub allows 60 of them per hour.
    """

    def __init__(
        self,
        token: str | None = None,
        tracker: RateLimitTracker | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If None, uses GITHUB_TOKEN from settings;
                   an empty string forces unauthenticated requests.
            tracker: Rate limit tracker to gate and update (one is created
                     if not provided).
            settings: Settings override (defaults to get_settings()).
        """
        self._settings = settings if settings is not None else get_settings()
        self._token = token if token is not None else self._settings.github_token
        self._tracker = tracker if tracker is not None else RateLimitTracker(self._settings.rate_limit)
        self._base_url = self._settings.github_api_url.rstrip("/")
        self._client: GitHub[Any] | None = None

        if self._token:
            logger.info("GitHub PAT configured - using authenticated requests")
        else:
            logger.warning("No GitHub PAT found - using unauthenticated requests (60/hour limit)")

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance.

        Retries are disabled so a rate limit response reaches the tracker
        and the caller immediately.
        """
        if self._client is None:
            self._client = GitHub(
                self._token or None,
                base_url=self._base_url,
                user_agent=self._settings.user_agent,
                timeout=self._settings.request_timeout_seconds,
                auto_retry=False,
            )
        return self._client

    @property
    def tracker(self) -> RateLimitTracker:
        return self._tracker

    @property
    def has_token(self) -> bool:
        return bool(self._token)

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        """Absolute API URL for a path such as ``/users/octocat``."""
        return f"{self._base_url}/{path.lstrip('/')}"

    def _request_headers(self) -> dict[str, str]:
        # Authorization ("token <PAT>") is added by githubkit's token auth
        return {
            "Accept": ACCEPT_HEADER,
            "User-Agent": self._settings.user_agent,
        }

    async def close(self) -> None:
        """Drop the underlying githubkit client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.close()

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------
    async def request(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """Send a rate-checked GET and return the raw githubkit response.

        Raises:
            GitHubRateLimitError: If the tracker refuses the request; no
                network call is made in that case.
            RequestFailed: Upstream answered with an error status.
            GitHubException: Transport failure or timeout.
        """
        if not self._tracker.can_make_request():
            info = self._tracker.get_rate_limit_status()
            logger.warning("Request to {} blocked locally: {}", url, self._tracker.get_rate_limit_message())
            raise GitHubRateLimitError(
                "GitHub API rate limit exceeded",
                reset_at=info.reset_at if info else None,
            )

        try:
            response = await self._github.arequest(
                "GET",
                url,
                params=params,
                headers=self._request_headers(),
            )
        except RequestFailed as e:
            logger.error("GitHub API request failed for {}: {}", url, e)
            # Error responses carry rate limit headers too (403/429 included)
            self._update_rate_limit_from_response(e.response)
            raise
        except GitHubException as e:
            logger.error("GitHub API request failed for {}: {}", url, e)
            raise

        self._update_rate_limit_from_response(response)
        return response

    async def make_rate_limited_request(
        self,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a rate-checked GET and return the parsed JSON body."""
        response = await self.request(url, params)
        return response.parsed_data

    def _update_rate_limit_from_response(self, response: Any) -> None:
        headers = getattr(response, "headers", None)
        if headers is None:
            return
        self._tracker.update_rate_limit_info(headers)

    # -------------------------------------------------------------------------
    # Token status
    # -------------------------------------------------------------------------
    async def get_auth_status(self) -> AuthStatus:
        """Call GET /user to see whether the configured token authenticates.

        Never raises: on failure the status reports ``authenticated=False``
        together with the best-known rate limit snapshot.
        """
        try:
            response = await self.request(self.url_for("/user"))
        except (GitHubClientError, GitHubException) as e:
            logger.warning("Authentication check failed: {}", e)
            return AuthStatus(
                authenticated=False,
                has_token=self.has_token,
                scopes=[],
                rate_limit=self._tracker.get_rate_limit_snapshot(),
            )

        scopes_header = normalize_headers(response.headers).get("x-oauth-scopes") or ""
        scopes = [scope.strip() for scope in scopes_header.split(",") if scope.strip()]
        return AuthStatus(
            authenticated=True,
            has_token=self.has_token,
            scopes=scopes,
            rate_limit=self._tracker.get_rate_limit_snapshot(),
        )
