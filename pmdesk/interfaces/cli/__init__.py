"""CLI interface for pmdesk using Typer.

Usage:
    pmdesk tui                      # Open the terminal UI
    pmdesk tui --resume             # Reopen the last viewed project
    pmdesk project list             # List projects
    pmdesk project show 7           # Show a project
    pmdesk task create "Name" -p 7  # Create a task
    pmdesk member add 3 -p 7        # Add user 3 to project 7

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (project, task, member)
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

import logging
from typing import Optional

import typer

from pmdesk import __version__
from pmdesk.config import get_client_config, get_last_project_id
from pmdesk.interfaces.cli.commands import member, project, task
from pmdesk.interfaces.cli.common import base_url_option, get_client, print_error
from pmdesk.logging_setup import setup_logging

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pmdesk",
    help="Terminal client for the project-management API",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"pmdesk version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="DEBUG, INFO, WARNING or ERROR (or set PMDESK_LOG_LEVEL env var)",
        envvar="PMDESK_LOG_LEVEL",
    ),
) -> None:
    """pmdesk - manage projects, tasks and teams from the terminal."""
    setup_logging(log_level or get_client_config().log_level)


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(project.app, name="project")
app.add_typer(task.app, name="task")
app.add_typer(member.app, name="member")


@app.command("tui")
def tui(
    project_id: Optional[int] = typer.Option(
        None, "--project", "-p", help="Open this project directly"
    ),
    resume: bool = typer.Option(False, "--resume", help="Reopen the last viewed project"),
    base_url: base_url_option = None,
) -> None:
    """Launch the terminal UI."""
    from pmdesk.tui import PmDeskApp

    if project_id is None and resume:
        project_id = get_last_project_id()
        if project_id is None:
            print_error("No project has been opened yet.")
            raise typer.Exit(1)

    api = get_client(base_url)
    logger.info(f"Starting TUI against {api.base_url}")
    PmDeskApp(api, project_id=project_id).run()


__all__ = ["app"]
