"""GitHub lookup commands."""

import typer
from rich.table import Table

from github_dashboard.cli.common import (
    OutputFormat,
    OutputFormatOption,
    RepoArgument,
    ReposListOption,
    console,
    parse_repo_option,
    print_model,
    run_async_command,
    validate_repo,
)
from github_dashboard.github import (
    AuthStatus,
    GitHubClient,
    GitHubService,
    RateLimitStatus,
    RateLimitTracker,
)
from github_dashboard.schemas import (
    GitHubEvent,
    GitHubPullRequest,
    GitHubRepo,
    GitHubUser,
    UserPRStats,
)

app = typer.Typer(help="GitHub API commands")


def _get_status_style(status: RateLimitStatus) -> str:
    """Get rich style for status."""
    match status:
        case RateLimitStatus.HEALTHY:
            return "[green]HEALTHY[/green]"
        case RateLimitStatus.WARNING:
            return "[yellow]WARNING[/yellow]"
        case RateLimitStatus.CRITICAL:
            return "[red]CRITICAL[/red]"
        case RateLimitStatus.EXHAUSTED:
            return "[bold red]EXHAUSTED[/bold red]"
        case _:
            return str(status)


@app.command("user")
def show_user(
    username: str = typer.Argument(help="GitHub login"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show a GitHub user profile.

    Examples:
        ghdash github user octocat
        ghdash github user octocat --format json
    """

    async def _fetch() -> GitHubUser:
        async with GitHubClient() as client:
            return await GitHubService(client).get_user(username)

    user = run_async_command(_fetch())

    if output_format == OutputFormat.JSON:
        print_model(user)
        return

    console.print(f"[bold]{user.login}[/bold] (ID: {user.id})")
    if user.name:
        console.print(f"  Name: {user.name}")
    if user.html_url:
        console.print(f"  Profile: {user.html_url}")


@app.command("repo")
def show_repo(
    repo: RepoArgument,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show repository information.

    Examples:
        ghdash github repo octocat/Hello-World
    """
    owner, name = validate_repo(repo)

    async def _fetch() -> GitHubRepo:
        async with GitHubClient() as client:
            return await GitHubService(client).get_repository(owner, name)

    info = run_async_command(_fetch())

    if output_format == OutputFormat.JSON:
        print_model(info)
        return

    visibility = "private" if info.private else "public"
    console.print(f"[bold]{info.full_name}[/bold] ({visibility})")
    if info.description:
        console.print(f"  {info.description}")
    if info.html_url:
        console.print(f"  URL: {info.html_url}")


@app.command("pulls")
def list_pulls(
    repo: RepoArgument,
    state: str = typer.Option(
        "all",
        "--state",
        "-s",
        help="PR state: open, closed or all",
    ),
    per_page: int = typer.Option(30, "--per-page", min=1, max=100, help="Page size"),
    page: int = typer.Option(1, "--page", min=1, help="Page number"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List one page of pull requests.

    Examples:
        ghdash github pulls octocat/Hello-World
        ghdash github pulls octocat/Hello-World --state open --per-page 10
    """
    if state not in ("open", "closed", "all"):
        raise typer.BadParameter("state must be one of: open, closed, all")
    owner, name = validate_repo(repo)

    async def _fetch() -> list[GitHubPullRequest]:
        async with GitHubClient() as client:
            return await GitHubService(client).get_pull_requests(
                owner, name, state, per_page, page  # type: ignore[arg-type]
            )

    pulls = run_async_command(_fetch())

    if output_format == OutputFormat.JSON:
        print_model(pulls)
        return

    console.print(f"Found {len(pulls)} PR(s)")
    if not pulls:
        return

    table = Table(title=f"PRs in {repo} ({state})")
    table.add_column("Number", style="cyan")
    table.add_column("Title", max_width=50)
    table.add_column("Author")
    table.add_column("State")
    table.add_column("Created")

    for pr in pulls:
        title = pr.title[:47] + "..." if len(pr.title) > 50 else pr.title
        pr_state = "merged" if pr.is_merged else pr.state
        table.add_row(
            str(pr.number),
            title,
            pr.author_login or "-",
            pr_state,
            pr.created_at.strftime("%Y-%m-%d"),
        )

    console.print(table)


@app.command("org-repos")
def list_org_repos(
    org: str = typer.Argument(help="Organization login"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """List an organization's repositories, most recently updated first.

    Examples:
        ghdash github org-repos octo-org
    """

    async def _fetch() -> list[GitHubRepo]:
        async with GitHubClient() as client:
            return await GitHubService(client).get_organization_repositories(org)

    repos = run_async_command(_fetch())

    if output_format == OutputFormat.JSON:
        print_model(repos)
        return

    console.print(f"Found {len(repos)} repositor{'y' if len(repos) == 1 else 'ies'}")
    for repo in repos:
        visibility = "[yellow]private[/yellow]" if repo.private else "public"
        console.print(f"  {repo.full_name} ({visibility})")


@app.command("events")
def list_user_events(
    username: str = typer.Argument(help="GitHub login"),
    since: str | None = typer.Option(None, "--since", help="Only with --until (YYYY-MM-DD)"),
    until: str | None = typer.Option(None, "--until", help="Only with --since (YYYY-MM-DD)"),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show a user's recent public events.

    Examples:
        ghdash github events octocat
        ghdash github events octocat --since 2024-01-01 --until 2024-01-31
    """

    async def _fetch() -> list[GitHubEvent]:
        async with GitHubClient() as client:
            return await GitHubService(client).get_user_events(username, since, until)

    events = run_async_command(_fetch())

    if output_format == OutputFormat.JSON:
        print_model(events)
        return

    console.print(f"Found {len(events)} event(s)")
    if not events:
        return

    table = Table(title=f"Events for {username}")
    table.add_column("When")
    table.add_column("Type", style="cyan")
    table.add_column("Repository")
    for event in events:
        table.add_row(
            f"{event.created_at:%Y-%m-%d %H:%M}" if event.created_at else "-",
            event.type or "-",
            event.repo.name if event.repo else "-",
        )
    console.print(table)


@app.command("pr-stats")
def show_pr_stats(
    username: str = typer.Argument(help="GitHub login"),
    repos: ReposListOption = None,
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Count a user's PRs across repositories.

    Malformed or unreachable repositories are skipped.

    Examples:
        ghdash github pr-stats octocat --repos octocat/Hello-World,octocat/Spoon-Knife
    """
    repo_list = parse_repo_option(repos)
    if not repo_list:
        console.print("[red]Error:[/red] --repos is required")
        raise typer.Exit(1)

    async def _fetch() -> UserPRStats:
        async with GitHubClient() as client:
            return await GitHubService(client).get_user_pr_stats(username, repo_list)

    stats = run_async_command(_fetch())

    if output_format == OutputFormat.JSON:
        print_model(stats)
        return

    table = Table(title=f"PR stats for {username}")
    table.add_column("Repository", style="bold")
    table.add_column("Total", justify="right")
    table.add_column("Open", justify="right")
    table.add_column("Closed", justify="right")
    table.add_column("Merged", justify="right")

    for repo_stats in stats.repos:
        table.add_row(
            repo_stats.repo,
            str(repo_stats.pr_count),
            str(repo_stats.open_count),
            str(repo_stats.closed_count),
            str(repo_stats.merged_count),
        )
    table.add_row(
        "[bold]Total[/bold]",
        str(stats.total_prs),
        str(stats.open_prs),
        str(stats.closed_prs),
        str(stats.merged_prs),
    )
    console.print(table)


@app.command("auth-status")
def show_auth_status(output_format: OutputFormatOption = OutputFormat.TEXT) -> None:
    """Check whether the configured token authenticates.

    Examples:
        ghdash github auth-status
    """

    async def _check() -> AuthStatus:
        async with GitHubClient() as client:
            return await client.get_auth_status()

    status = run_async_command(_check())

    if output_format == OutputFormat.JSON:
        print_model(status)
        return

    if status.authenticated:
        console.print("[green]✓[/green] Authenticated")
    elif status.has_token:
        console.print("[red]✗[/red] Token configured but not accepted")
    else:
        console.print("[yellow]⚠[/yellow] No token configured (60 requests/hour)")

    if status.scopes:
        console.print(f"  Scopes: {', '.join(status.scopes)}")
    rate = status.rate_limit
    console.print(f"  Rate limit: {rate.remaining}/{rate.limit} (resets at {rate.reset_at:%H:%M:%S UTC})")


@app.command("rate-limit")
def show_rate_limit(
    simulate: int | None = typer.Option(
        None,
        "--simulate",
        help="Show the tracker as if the quota were exhausted for N minutes",
    ),
    output_format: OutputFormatOption = OutputFormat.TEXT,
) -> None:
    """Show the rate limit as seen by the local tracker.

    GET /rate_limit does not count against the quota; its headers seed
    the tracker.

    Examples:
        ghdash github rate-limit
        ghdash github rate-limit --simulate 5
    """

    async def _check() -> RateLimitTracker:
        async with GitHubClient() as client:
            if simulate is not None:
                client.tracker.simulate_rate_limit(simulate)
            else:
                await client.request(client.url_for("/rate_limit"))
            return client.tracker

    tracker = run_async_command(_check())

    if output_format == OutputFormat.JSON:
        print_model(tracker.to_dict())
        return

    info = tracker.get_rate_limit_status()
    if info is not None:
        table = Table(title="GitHub API Rate Limit")
        table.add_column("Status")
        table.add_column("Remaining", justify="right")
        table.add_column("Limit", justify="right")
        table.add_column("Resets At", justify="right")
        table.add_row(
            _get_status_style(tracker.get_status()),
            str(info.remaining),
            str(info.limit),
            f"{info.reset_at:%H:%M:%S UTC}",
        )
        console.print(table)

    console.print(tracker.get_rate_limit_message())
