"""Repository name helpers."""


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split an ``owner/name`` string.

    Anything after a second ``/`` is ignored, so ``owner/name/tree/main``
    names ``owner/name``.

    Args:
        repo: Full repository path like 'octocat/Hello-World'

    Returns:
        (owner, name)

    Raises:
        ValueError: If either part is missing
    """
    parts = repo.strip().split("/")
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise ValueError(f"Invalid repo format: {repo!r} (expected owner/name)")
    return parts[0], parts[1]


def split_repo_list(value: str | None) -> list[str]:
    """Parse a comma-separated repository list, dropping blanks."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]
