"""Task list widget for the project detail screen."""

from typing import Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.reactive import reactive
from textual.widgets import Checkbox, Label, Static

from pmdesk.domain.task import PRIORITY_COLORS, PRIORITY_LABELS, Task


class TaskStatusToggled(Message):
    """Message sent when a task's completion checkbox is toggled."""

    def __init__(self, task_id: int, completed: bool) -> None:
        self.task_id = task_id
        self.completed = completed
        super().__init__()


class TaskItem(Horizontal):
    """A single task row with a completion checkbox."""

    DEFAULT_CSS = """
    TaskItem {
        height: 3;
        padding: 0 1;
        border-bottom: solid $primary-darken-2;
    }

    TaskItem Checkbox {
        width: 1fr;
        border: none;
    }

    TaskItem .task-meta {
        width: auto;
        padding: 1 1 0 1;
    }
    """

    def __init__(self, item: Task, project_name: str = "") -> None:
        super().__init__()
        self.item = item
        self.project_name = project_name

    def compose(self) -> ComposeResult:
        yield Checkbox(self.item.name, value=self.item.completed)
        yield Label(self._meta(), classes="task-meta")

    def _meta(self) -> Text:
        text = Text()
        priority = self.item.priority
        text.append(PRIORITY_LABELS[priority], style=PRIORITY_COLORS[priority])
        if self.project_name:
            text.append(f"  {self.project_name}", style="dim")
        if self.item.due_date:
            text.append(f"  due {self.item.due_date:%d/%m/%Y}", style="dim")
        return text

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        event.stop()
        self.post_message(TaskStatusToggled(self.item.id, event.value))


class TaskList(Vertical):
    """List of tasks, or a placeholder when there are none."""

    DEFAULT_CSS = """
    TaskList {
        height: auto;
    }

    TaskList .empty {
        color: $text-muted;
        text-align: center;
        padding: 1;
    }
    """

    tasks: reactive[list[Task]] = reactive(list, recompose=True)

    def __init__(
        self,
        empty_text: str = "No tasks found",
        project_name: str = "",
        id: Optional[str] = None,
    ) -> None:
        super().__init__(id=id)
        self.empty_text = empty_text
        self.project_name = project_name

    def compose(self) -> ComposeResult:
        if not self.tasks:
            yield Static(self.empty_text, classes="empty")
            return
        for task in self.tasks:
            yield TaskItem(task, self.project_name)
