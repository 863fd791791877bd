"""Activity log widget."""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.reactive import reactive
from textual.widgets import Static

from pmdesk.domain.activity import Activity
from pmdesk.domain.member import initials


def format_activity(activity: Activity) -> Text:
    """One-line rendering of an activity entry."""
    text = Text()
    text.append(f"[{initials(activity.actor_name)}] ", style="bold cyan")
    text.append(activity.actor_name, style="bold")
    text.append(f" {activity.action} ")
    text.append(activity.subject, style="italic")
    if activity.details:
        text.append(f": {activity.details}", style="dim")
    if activity.created_at:
        text.append(f"  {activity.created_at:%d/%m/%Y %H:%M}", style="dim")
    return text


class ActivityList(Vertical):
    """List of activity entries, newest first as served."""

    DEFAULT_CSS = """
    ActivityList {
        height: auto;
    }

    ActivityList .activity-item {
        padding: 0 1;
        margin-bottom: 1;
    }

    ActivityList .empty {
        color: $text-muted;
        text-align: center;
        padding: 1;
    }
    """

    activities: reactive[list[Activity]] = reactive(list, recompose=True)

    def __init__(self, empty_text: str = "No activity found", id: Optional[str] = None) -> None:
        super().__init__(id=id)
        self.empty_text = empty_text

    def compose(self) -> ComposeResult:
        if not self.activities:
            yield Static(self.empty_text, classes="empty")
            return
        for activity in self.activities:
            yield Static(format_activity(activity), classes="activity-item")
