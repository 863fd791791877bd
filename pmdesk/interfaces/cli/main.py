"""Entry point for the pmdesk CLI.

Usage:
    python -m pmdesk.interfaces.cli.main

Or via installed entry point:
    pmdesk <command>
"""

from pmdesk.interfaces.cli import app


def main() -> None:
    """Run the pmdesk CLI application."""
    app()


if __name__ == "__main__":
    main()
