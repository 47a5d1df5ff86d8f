"""ghdash entry point."""

import typer

from github_dashboard import __version__
from github_dashboard.cli import activity, github
from github_dashboard.cli.common import console
from github_dashboard.config import get_settings
from github_dashboard.logging import setup_logging

app = typer.Typer(
    name="ghdash",
    help="PR activity for GitHub dashboards, within the API rate limit.",
    add_completion=False,
)
app.add_typer(github.app, name="github")
app.add_typer(activity.app, name="activity")


def _print_version(value: bool) -> None:
    if value:
        console.print(f"ghdash version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log at DEBUG, HTTP transport included."
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors."),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Print the version and exit.",
    ),
) -> None:
    """Look up GitHub data and summarize dashboard activity.

    Settings come from the environment (GITHUB_TOKEN, DASHBOARDS, ...)
    or a .env file.
    """
    setup_logging(get_settings(), verbose=verbose, quiet=quiet)
