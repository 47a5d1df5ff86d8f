"""Dashboard activity commands."""

import asyncio
import contextlib
from typing import Annotated

import typer
from rich.table import Table

from github_dashboard.cli.common import (
    OutputFormat,
    OutputFormatOption,
    ReposListOption,
    console,
    parse_date,
    parse_repo_option,
    print_model,
    run_async_command,
)
from github_dashboard.config import get_settings
from github_dashboard.github import (
    ActivityService,
    GitHubClient,
    GitHubService,
    run_periodic_cleanup,
)
from github_dashboard.schemas import (
    OrganizationReviewSummary,
    UserActivityOverview,
    UserActivitySummary,
)

app = typer.Typer(help="Dashboard activity commands")

StartDateOption = Annotated[
    str | None,
    typer.Option(
        "--start-date",
        help="Window start (YYYY-MM-DD or ISO format); defaults to 30 days ago",
    ),
]

EndDateOption = Annotated[
    str | None,
    typer.Option(
        "--end-date",
        help="Window end (YYYY-MM-DD or ISO format); defaults to now",
    ),
]

IncludeReviewsOption = Annotated[
    bool,
    typer.Option(
        "--include-reviews/--no-include-reviews",
        help="Count reviews and reactions (slower; without it two searches per repository are used)",
    ),
]


def _print_activity_table(dashboard_id: str, results: list[UserActivitySummary]) -> None:
    if not results:
        console.print(f"[yellow]No users in dashboard {dashboard_id}[/yellow]")
        return

    table = Table(title=f"Activity for dashboard {dashboard_id}")
    table.add_column("User", style="bold")
    table.add_column("Name")
    table.add_column("Created", justify="right")
    table.add_column("Reviewed", justify="right")
    table.add_column("Merged", justify="right")
    table.add_column("Total", justify="right", style="cyan")

    for summary in results:
        table.add_row(
            summary.user.login,
            summary.user.name or "-",
            str(summary.activity.prs_created),
            str(summary.activity.prs_reviewed),
            str(summary.activity.prs_merged),
            str(summary.activity.total_activity),
        )

    console.print(table)


@app.command("batch")
def batch_activity(
    dashboard_id: str = typer.Argument(help="Dashboard id (a key of DASHBOARDS)"),
    repos: ReposListOption = None,
    start_date: StartDateOption = None,
    end_date: EndDateOption = None,
    include_reviews: IncludeReviewsOption = True,
    users: str | None = typer.Option(
        None,
        "--users",
        "-u",
        help="Comma-separated logins to restrict the result to",
    ),
    no_cache: bool = typer.Option(
        False,
        "--no-cache",
        help="Bypass the batch result cache",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Summarize PR activity for every member of a dashboard.

    A member whose data cannot be fetched is reported with zero activity.

    Examples:
        ghdash activity batch team-a
        ghdash activity batch team-a --repos octocat/Hello-World --start-date 2024-01-01
        ghdash activity batch team-a --no-include-reviews --format json
    """
    repo_list = parse_repo_option(repos)
    user_list = [u.strip() for u in users.split(",") if u.strip()] if users else []
    start = parse_date(start_date)
    end = parse_date(end_date)

    async def _summarize() -> list[UserActivitySummary]:
        async with GitHubClient() as client:
            activity = ActivityService(GitHubService(client))
            return await activity.get_cached_batch_user_activity_summary(
                dashboard_id,
                repo_list,
                start,
                end,
                include_reviews=include_reviews,
                users=user_list,
                no_cache=no_cache,
            )

    results = run_async_command(_summarize(), error_prefix="Batch activity failed")

    if output_format == OutputFormat.JSON:
        print_model(results)
        return

    _print_activity_table(dashboard_id, results)


@app.command("summary")
def user_summary(
    username: str = typer.Argument(help="GitHub login"),
    repos: ReposListOption = None,
    start_date: StartDateOption = None,
    end_date: EndDateOption = None,
    include_reviews: IncludeReviewsOption = True,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show one user's windowed activity next to their all-time PR counts.

    Examples:
        ghdash activity summary octocat --repos octocat/Hello-World
        ghdash activity summary octocat --repos o/r --start-date 2024-01-01 --format json
    """
    repo_list = parse_repo_option(repos)
    if not repo_list:
        console.print("[red]Error:[/red] --repos is required")
        raise typer.Exit(1)
    start = parse_date(start_date)
    end = parse_date(end_date)

    async def _overview() -> UserActivityOverview:
        async with GitHubClient() as client:
            activity = ActivityService(GitHubService(client))
            return await activity.get_user_activity_overview(
                username, repo_list, start, end, include_reviews
            )

    overview = run_async_command(_overview(), error_prefix="Activity summary failed")

    if output_format == OutputFormat.JSON:
        print_model(overview)
        return

    table = Table(title=f"Activity for {overview.user.login}")
    table.add_column("Repository", style="bold")
    table.add_column("Created", justify="right")
    table.add_column("Reviewed", justify="right")
    table.add_column("Merged", justify="right")
    table.add_column("All PRs", justify="right", style="dim")
    table.add_column("All merged", justify="right", style="dim")

    for entry in overview.repos:
        table.add_row(
            entry.repo,
            str(entry.activity.prs_created),
            str(entry.activity.prs_reviewed),
            str(entry.activity.prs_merged),
            str(entry.overall_stats.pr_count),
            str(entry.overall_stats.merged_count),
        )
    table.add_row(
        "[bold]Total[/bold]",
        str(overview.activity.prs_created),
        str(overview.activity.prs_reviewed),
        str(overview.activity.prs_merged),
        str(overview.overall_stats.total_prs),
        str(overview.overall_stats.merged_prs),
    )
    console.print(table)


@app.command("org-reviews")
def org_reviews(
    repos: ReposListOption = None,
    start_date: StartDateOption = None,
    end_date: EndDateOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Count distinct PRs reviewed per reviewer across repositories.

    Only the newest PRs of each repository are scanned; bots and
    self-reviews are left out.

    Examples:
        ghdash activity org-reviews --repos octo-org/api,octo-org/web --start-date 2024-01-01
    """
    repo_list = parse_repo_option(repos)
    if not repo_list:
        console.print("[red]Error:[/red] --repos is required")
        raise typer.Exit(1)
    start = parse_date(start_date)
    end = parse_date(end_date)

    async def _summarize() -> OrganizationReviewSummary:
        async with GitHubClient() as client:
            activity = ActivityService(GitHubService(client))
            return await activity.get_organization_review_summary(repo_list, start, end)

    summary = run_async_command(_summarize(), error_prefix="Review summary failed")

    if output_format == OutputFormat.JSON:
        print_model(summary)
        return

    dates = summary.date_range
    console.print(f"{summary.total_reviews} review(s) from {dates.start} to {dates.end}")
    if not summary.reviewer_stats:
        return

    table = Table(title="Reviews by reviewer")
    table.add_column("Reviewer", style="bold")
    table.add_column("PRs", justify="right", style="cyan")
    table.add_column("Reviewed")
    ranked = sorted(summary.reviewer_stats.items(), key=lambda item: -item[1].prs_reviewed)
    for reviewer, stats in ranked:
        table.add_row(reviewer, str(stats.prs_reviewed), ", ".join(stats.prs))
    console.print(table)


@app.command("watch")
def watch_activity(
    dashboard_id: str = typer.Argument(help="Dashboard id (a key of DASHBOARDS)"),
    repos: ReposListOption = None,
    include_reviews: IncludeReviewsOption = True,
    interval: float = typer.Option(
        300.0,
        "--interval",
        min=0.0,
        help="Seconds between refreshes",
    ),
    iterations: int = typer.Option(
        0,
        "--iterations",
        min=0,
        help="Stop after this many refreshes (0 runs until interrupted)",
    ),
) -> None:
    """Re-print a dashboard's activity table on a timer.

    Responses are reused across refreshes while their TTL lasts; expired
    entries are swept every CACHE.cleanup_interval_seconds.

    Examples:
        ghdash activity watch team-a --interval 120
    """
    repo_list = parse_repo_option(repos)
    cleanup_interval = get_settings().cache.cleanup_interval_seconds

    async def _watch() -> None:
        async with GitHubClient() as client:
            github = GitHubService(client)
            activity = ActivityService(github)
            janitor = asyncio.create_task(run_periodic_cleanup(github.cache, cleanup_interval))
            try:
                refreshes = 0
                while True:
                    results = await activity.get_cached_batch_user_activity_summary(
                        dashboard_id, repo_list, include_reviews=include_reviews
                    )
                    _print_activity_table(dashboard_id, results)
                    refreshes += 1
                    if iterations and refreshes >= iterations:
                        return
                    await asyncio.sleep(interval)
            finally:
                janitor.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await janitor

    run_async_command(_watch(), error_prefix="Watch failed")
