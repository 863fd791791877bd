"""Task create/edit dialog."""

from typing import TYPE_CHECKING, Callable, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select, Static

from pmdesk.application.forms import TaskFormController, load_task_form_options
from pmdesk.domain.shared import Err, Ok
from pmdesk.domain.task import PRIORITY_LABELS, STATUS_LABELS, TaskPriority, TaskStatus
from pmdesk.infrastructure.cache import keys

from .form_helpers import (
    FORM_CSS,
    field_error,
    input_value,
    labelled,
    select_int,
    show_errors,
    text_or_none,
)

if TYPE_CHECKING:
    from pmdesk.tui.app import PmDeskApp

TASK_FIELDS = [
    "name",
    "description",
    "project_id",
    "priority",
    "status",
    "phase_id",
    "assigned_to",
    "due_date",
]


class TaskFormModal(ModalScreen[bool]):
    """Dialog wrapping a TaskFormController.

    Args:
        form: The controller holding the form state.
        title: Dialog title.
        still_open: Returns False once the owning view has closed the
            dialog after a successful submit.
    """

    CSS = FORM_CSS + """
    TaskFormModal {
        align: center middle;
    }

    #tag-list {
        color: $accent;
        height: auto;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        form: TaskFormController,
        title: str = "Create New Task",
        still_open: Optional[Callable[[], bool]] = None,
    ) -> None:
        super().__init__()
        self.form = form
        self.title_text = title
        self._still_open = still_open or (lambda: False)

    def compose(self) -> ComposeResult:
        values = self.form.values
        with VerticalScroll(classes="form-dialog"):
            yield Label(self.title_text, classes="form-title")
            yield from labelled(
                "Task Name",
                Input(value=values["name"], placeholder="Enter the task name", id="name"),
                "name",
            )
            yield from labelled(
                "Description",
                Input(
                    value=values["description"] or "",
                    placeholder="Describe the task details",
                    id="description",
                ),
                "description",
            )
            with Vertical(id="project-field", classes="field-row"):
                yield from labelled(
                    "Project",
                    Select[int]([], prompt="Select a project", id="project_id", disabled=True),
                    "project_id",
                )
            with Horizontal(classes="field-row"):
                with Vertical():
                    yield from labelled(
                        "Priority",
                        Select(
                            [(PRIORITY_LABELS[p], p.value) for p in TaskPriority],
                            value=TaskPriority(values["priority"]).value,
                            allow_blank=False,
                            id="priority",
                        ),
                        "priority",
                    )
                with Vertical():
                    yield from labelled(
                        "Status",
                        Select(
                            [(STATUS_LABELS[s], s.value) for s in TaskStatus],
                            value=TaskStatus(values["status"]).value,
                            allow_blank=False,
                            id="status",
                        ),
                        "status",
                    )
            with Horizontal(classes="field-row"):
                with Vertical(id="phase-field"):
                    yield from labelled(
                        "Phase", Select[int]([], prompt="Select the phase", id="phase_id"), "phase_id"
                    )
                with Vertical(id="assignee-field"):
                    yield from labelled(
                        "Assignee", Select[int]([], prompt="Assign to", id="assigned_to"), "assigned_to"
                    )
            due = values.get("due_date")
            yield from labelled(
                "Due Date",
                Input(value=str(due) if due else "", placeholder="YYYY-MM-DD", id="due_date"),
                "due_date",
            )
            yield Label("Tags", classes="field-label")
            yield Input(placeholder="Type a tag and press Enter", id="tag-input")
            yield Static(", ".join(self.form.tags.items), id="tag-list")
            yield field_error("tags")
            yield Static("Add tags to categorize the task and find it later.", classes="help-text")
            with Horizontal(classes="form-buttons"):
                yield Button(self.form.submit_label, id="submit-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#phase-field").display = False
        self.query_one("#assignee-field").display = False
        self.query_one("#project-field").display = False
        self.query_one("#name", Input).focus()
        self.run_worker(self._load_options(), group="options")

    async def _load_options(self) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        project_id = self.form.values.get("project_id") or None
        options = await load_task_form_options(app.api, app.cache, project_id)

        if options.projects:
            select = self.query_one("#project_id", Select)
            select.set_options([(p.name, p.id) for p in options.projects])
            if project_id in {p.id for p in options.projects}:
                select.value = project_id
            select.disabled = self.form.project_locked
            self.query_one("#project-field").display = True

        if options.users:
            select = self.query_one("#assigned_to", Select)
            select.set_options([(u.name, u.id) for u in options.users])
            assignee = self.form.values.get("assigned_to")
            if assignee in {u.id for u in options.users}:
                select.value = assignee
            self.query_one("#assignee-field").display = True

        self._show_phases(options.phases)

    def _show_phases(self, phases: list) -> None:
        select = self.query_one("#phase_id", Select)
        select.set_options([(phase.name, phase.id) for phase in phases])
        phase_id = self.form.values.get("phase_id")
        if phase_id in {phase.id for phase in phases}:
            select.value = phase_id
        self.query_one("#phase-field").display = bool(phases)

    async def _load_phases(self, project_id: int) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        key = keys.project_phases(project_id)
        await app.cache.fetch(key, lambda: app.api.list_phases(project_id))
        self._show_phases(app.cache.peek(key, []))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "project_id":
            project_id = select_int(event.select)
            if project_id:
                self.form.set("project_id", project_id)
                self.run_worker(self._load_phases(project_id), exclusive=True, group="phases")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "tag-input":
            return
        event.stop()
        result = self.form.tags.add(event.value)
        error = self.query_one("#tags-error", Static)
        if isinstance(result, Err):
            error.update(result.error)
            return
        error.update("")
        event.input.value = ""
        self.query_one("#tag-list", Static).update(", ".join(result.value))

    def _collect(self) -> dict:
        return {
            "name": input_value(self, "name"),
            "description": input_value(self, "description"),
            "project_id": select_int(self.query_one("#project_id", Select))
            or self.form.values.get("project_id")
            or 0,
            "priority": self.query_one("#priority", Select).value,
            "status": self.query_one("#status", Select).value,
            "phase_id": select_int(self.query_one("#phase_id", Select)),
            "assigned_to": select_int(self.query_one("#assigned_to", Select)),
            "due_date": text_or_none(input_value(self, "due_date")),
        }

    async def _submit(self) -> None:
        button = self.query_one("#submit-btn", Button)
        self.form.update(self._collect())
        button.disabled = True
        button.label = "Saving..."
        try:
            result = await self.form.submit()
        finally:
            button.disabled = False
            button.label = self.form.submit_label
        show_errors(self, TASK_FIELDS, self.form.errors)
        if isinstance(result, Ok) and not self._still_open():
            self.dismiss(True)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit-btn":
            if not self.form.pending:
                self.run_worker(self._submit(), group="submit")
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_cancel(self) -> None:
        self.dismiss(False)
