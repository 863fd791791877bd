"""Project edit dialog."""

from typing import Callable, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Select

from pmdesk.application.forms import FormController
from pmdesk.domain.project import STATUS_BADGES, ProjectFormValues, ProjectStatus
from pmdesk.domain.shared import Ok

from .form_helpers import FORM_CSS, input_value, int_or_raw, labelled, show_errors, text_or_none

PROJECT_FIELDS = ["name", "description", "status", "progress", "deadline"]


class ProjectFormModal(ModalScreen[bool]):
    """Dialog for editing a project's name, status, progress and deadline."""

    CSS = FORM_CSS + """
    ProjectFormModal {
        align: center middle;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(
        self,
        form: FormController[ProjectFormValues],
        still_open: Optional[Callable[[], bool]] = None,
    ) -> None:
        super().__init__()
        self.form = form
        self._still_open = still_open or (lambda: False)

    def compose(self) -> ComposeResult:
        values = self.form.values
        status = values.get("status") or ProjectStatus.PLANNING
        deadline = values.get("deadline")
        with VerticalScroll(classes="form-dialog"):
            yield Label("Edit Project", classes="form-title")
            yield from labelled(
                "Name", Input(value=values.get("name", ""), id="name"), "name"
            )
            yield from labelled(
                "Description",
                Input(value=values.get("description") or "", id="description"),
                "description",
            )
            yield from labelled(
                "Status",
                Select(
                    [(STATUS_BADGES[s.value].label, s.value) for s in ProjectStatus],
                    value=ProjectStatus(status).value,
                    allow_blank=False,
                    id="status",
                ),
                "status",
            )
            yield from labelled(
                "Progress (%)",
                Input(value=str(values.get("progress", 0)), type="integer", id="progress"),
                "progress",
            )
            yield from labelled(
                "Deadline",
                Input(value=str(deadline) if deadline else "", placeholder="YYYY-MM-DD", id="deadline"),
                "deadline",
            )
            with Horizontal(classes="form-buttons"):
                yield Button("Save Changes", id="submit-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        self.query_one("#name", Input).focus()

    def _collect(self) -> dict:
        return {
            "name": input_value(self, "name"),
            "description": input_value(self, "description"),
            "status": self.query_one("#status", Select).value,
            "progress": int_or_raw(input_value(self, "progress")),
            "deadline": text_or_none(input_value(self, "deadline")),
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
            button.label = "Save Changes"
        show_errors(self, PROJECT_FIELDS, self.form.errors)
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
