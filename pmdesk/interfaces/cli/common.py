"""Shared utilities for pmdesk CLI commands.

This module provides common utilities used across CLI commands:
- Connection options and API client construction
- Formatted output helpers (error, success, info)
- A notification adapter so application controllers can report to the terminal
- Running coroutines from synchronous Typer commands
"""

import asyncio
from collections.abc import Coroutine
from typing import Annotated, Any, Optional, TypeVar

import typer

from pmdesk.config import get_client_config
from pmdesk.domain.shared import FieldError
from pmdesk.infrastructure.api import ApiClient

T = TypeVar("T")

# Reusable base URL option for CLI commands
# Usage: def my_command(base_url: base_url_option = None) -> None:
base_url_option = Annotated[
    Optional[str],
    typer.Option(
        "--base-url",
        "-u",
        help="API base URL (or set PMDESK_BASE_URL env var)",
        envvar="PMDESK_BASE_URL",
    ),
]


def get_client(base_url: Optional[str] = None) -> ApiClient:
    """Build an API client from the option value or the saved config.

    Args:
        base_url: Base URL given on the command line, if any.
    """
    config = get_client_config()
    return ApiClient(base_url or config.base_url, timeout=config.timeout)


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine to completion from a synchronous command."""
    return asyncio.run(coro)


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message.

    Args:
        msg: Success message to display
    """
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_separator(char: str = "=", width: int = 60) -> None:
    typer.echo(char * width)


def print_header(title: str, width: int = 60) -> None:
    """Print a formatted header with separators."""
    print_separator("=", width)
    typer.echo(title)
    print_separator("=", width)


def print_field_errors(errors: list[FieldError]) -> None:
    """Print validation errors, one per field."""
    for error in errors:
        print_error(f"{error.field}: {error.message}")


class CliNotifier:
    """Prints controller notifications and remembers whether any was an error.

    Matches the ``notify(message, title=..., severity=...)`` call shape the
    controllers use.
    """

    def __init__(self) -> None:
        self.failed = False

    def __call__(self, message: str, title: str = "", severity: str = "information", **_: Any) -> None:
        text = f"{title}: {message}" if title else message
        if severity == "error":
            self.failed = True
            print_error(text)
        else:
            print_success(text)


__all__ = [
    "CliNotifier",
    "base_url_option",
    "get_client",
    "print_error",
    "print_field_errors",
    "print_header",
    "print_info",
    "print_separator",
    "print_success",
    "run",
]
