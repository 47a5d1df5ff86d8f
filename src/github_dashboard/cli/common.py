"""Common CLI option factories and helpers.

This module centralizes reusable CLI options to reduce duplication
and consolidate noqa comments for Typer's required function call pattern.

It also provides:
- `run_async_command`: Unified async execution with error handling for CLI commands
- `parse_date`: Date option parsing
- `print_model`: JSON output of result schemas
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Coroutine
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, TypeVar

import typer
from pydantic import BaseModel
from rich.console import Console

from github_dashboard.dashboards import DashboardNotFoundError
from github_dashboard.github import GitHubClientError
from github_dashboard.schemas import parse_repo_string, split_repo_list

# Shared console instance for CLI output
console = Console()

T = TypeVar("T")


class OutputFormat(str, Enum):
    """Output format for CLI commands."""

    TEXT = "text"
    """Human-readable text output."""

    JSON = "json"
    """Machine-readable JSON output (camelCase keys)."""


def run_async_command(
    coro: Coroutine[object, object, T],
    *,
    error_prefix: str = "Error",
) -> T:
    """Execute async code from synchronous CLI command with unified error handling.

    Uses asyncio.run() for clean event loop management. Catches exceptions,
    prints user-friendly error messages, and exits with code 1.

    Args:
        coro: Async coroutine to execute
        error_prefix: Prefix for error messages (default: "Error")

    Returns:
        Result from the coroutine

    Raises:
        typer.Exit: Re-raised from deliberate exits, or raised with code 1 on error

    Example:
        async def _user() -> GitHubUser:
            async with GitHubClient() as client:
                return await GitHubService(client).get_user("octocat")

        user = run_async_command(_user(), error_prefix="Lookup failed")
    """
    try:
        return asyncio.run(coro)
    except typer.Exit:
        # Re-raise deliberate exits (e.g., from validation helpers)
        raise
    except (GitHubClientError, DashboardNotFoundError) as e:
        console.print(f"[red]{error_prefix}:[/red] {e}")
        raise typer.Exit(1) from None
    except Exception as e:
        console.print(f"[red]{error_prefix}:[/red] Unexpected failure: {e}")
        raise typer.Exit(1) from None


def print_model(data: BaseModel | list[BaseModel] | dict[str, Any]) -> None:
    """Print a result schema (or list of them) as camelCase JSON."""
    if isinstance(data, BaseModel):
        payload: Any = data.model_dump(mode="json", by_alias=True)
    elif isinstance(data, list):
        payload = [item.model_dump(mode="json", by_alias=True) for item in data]
    else:
        payload = data
    console.print_json(json.dumps(payload))


def parse_date(date_str: str | None) -> datetime | None:
    """Parse a date string into a datetime object.

    Supports formats:
    - YYYY-MM-DD
    - YYYY-MM-DDTHH:MM:SS
    - ISO format with timezone

    Args:
        date_str: Date string to parse, or None

    Returns:
        datetime object with UTC timezone, or None if input was None

    Raises:
        typer.BadParameter: If the date string is invalid
    """
    if date_str is None:
        return None

    formats = [
        "%Y-%m-%d",
        "%Y-%m-%dT%H:%M:%S",
        "%Y-%m-%dT%H:%M:%SZ",
        "%Y-%m-%dT%H:%M:%S%z",
    ]

    for fmt in formats:
        try:
            dt = datetime.strptime(date_str, fmt)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=UTC)
            return dt
        except ValueError:
            continue

    raise typer.BadParameter(
        f"Invalid date format: {date_str}. Use YYYY-MM-DD or YYYY-MM-DDTHH:MM:SS format."
    )


# Typer requires function calls as default arguments, which triggers B008.
# Using Annotated with a centralized type alias keeps the noqa in one place.

OutputFormatOption = Annotated[
    OutputFormat,
    typer.Option(
        "--format",
        "-f",
        help="Output format",
    ),
]
"""Output format option type for CLI commands.

Usage:
    def command(output_format: OutputFormatOption = OutputFormat.TEXT):
"""

RepoArgument = Annotated[
    str,
    typer.Argument(
        help="Repository in owner/name format (e.g., octocat/Hello-World)",
    ),
]
"""Required positional repository argument."""

ReposListOption = Annotated[
    str | None,
    typer.Option(
        "--repos",
        "-r",
        help="Comma-separated list of repos (owner/repo).",
    ),
]
"""Comma-separated repository list option.

Usage:
    def pr_stats(username: str, repos: ReposListOption = None) -> None:
"""


# -----------------------------------------------------------------------------
# Repository Validation Helpers
# -----------------------------------------------------------------------------


def validate_repo(repo: str) -> tuple[str, str]:
    """Parse and validate a single repository string.

    Raises:
        typer.Exit(1): If format is invalid
    """
    try:
        return parse_repo_string(repo)
    except ValueError:
        console.print("[red]Error:[/red] Repository must be in owner/name format")
        raise typer.Exit(1) from None


def parse_repo_option(repos_str: str | None) -> list[str]:
    """Split a comma-separated repository option.

    Entries are not validated here: aggregation skips malformed names
    with a warning instead of failing.
    """
    return split_repo_list(repos_str)
