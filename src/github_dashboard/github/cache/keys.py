"""Cache key builders for GitHub data."""

from collections.abc import Sequence


class CacheKeys:
    """Namespaced cache keys, one builder per cached resource."""

    @staticmethod
    def user(username: str) -> str:
        return f"user:{username}"

    @staticmethod
    def repository(owner: str, repo: str) -> str:
        return f"repo:{owner}/{repo}:info"

    @staticmethod
    def pr_list(
        owner: str,
        repo: str,
        state: str = "all",
        per_page: int = 100,
        page: int = 1,
        sort: str = "created",
        direction: str = "desc",
    ) -> str:
        return f"repo:{owner}/{repo}:prs:{state}:{sort}:{direction}:{per_page}:{page}"

    @staticmethod
    def pr_reviews(owner: str, repo: str, pr_number: int) -> str:
        return f"repo:{owner}/{repo}:pr:{pr_number}:reviews"

    @staticmethod
    def pr_reactions(owner: str, repo: str, pr_number: int) -> str:
        return f"repo:{owner}/{repo}:pr:{pr_number}:reactions"

    @staticmethod
    def repo_activity(owner: str, repo: str, start: str, end: str) -> str:
        """Repo-first search aggregation over a date window."""
        return f"repo:{owner}/{repo}:agg:{start}:{end}"

    @staticmethod
    def batch_summary(
        dashboard_id: str,
        repos: Sequence[str],
        start: str,
        end: str,
        include_reviews: bool,
    ) -> str:
        """Whole batch activity summary for a dashboard and window."""
        include_key = "rev1" if include_reviews else "rev0"
        return f"batch:{dashboard_id}:{'|'.join(repos)}:{start}:{end}:{include_key}"
