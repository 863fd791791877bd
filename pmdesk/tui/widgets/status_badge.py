"""Coloured status badge widget."""

from rich.text import Text
from textual.widgets import Static

from pmdesk.domain.project import StatusBadge, status_badge


class StatusBadgeLabel(Static):
    """Renders a project status as a coloured badge."""

    DEFAULT_CSS = """
    StatusBadgeLabel {
        width: auto;
        height: 1;
        margin: 0 1;
    }
    """

    def show_badge(self, badge: StatusBadge) -> None:
        self.update(Text(f" {badge.label} ", style=f"bold black on {badge.color}"))

    def show_status(self, status: str | None) -> None:
        """Render the badge for a raw status value."""
        self.show_badge(status_badge(status))
