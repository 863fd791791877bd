"""Two-step project deletion dialog."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label

from pmdesk.application.project_detail import DeleteStep, ProjectDetailController


class ConfirmDeleteModal(ModalScreen[None]):
    """Asks twice before deleting a project.

    The first confirmation only arms the second one; the second sends the
    delete request. On success the controller navigates away, which also
    closes this dialog.
    """

    CSS = """
    ConfirmDeleteModal {
        align: center middle;
    }

    #confirm-dialog {
        width: 60;
        height: auto;
        border: thick $error;
        background: $surface;
        padding: 1 2;
    }

    #confirm-title {
        text-style: bold;
        color: $error;
        text-align: center;
        width: 100%;
        padding: 1;
    }

    #confirm-message {
        padding: 1;
    }

    #confirm-buttons {
        align: center middle;
        height: 3;
        margin-top: 1;
    }

    #cancel-btn {
        margin-right: 2;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, controller: ProjectDetailController) -> None:
        super().__init__()
        self.controller = controller

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            yield Label("", id="confirm-title")
            yield Label("", id="confirm-message")
            with Horizontal(id="confirm-buttons"):
                yield Button("Cancel", id="cancel-btn", variant="primary")
                yield Button("", id="confirm-btn", variant="error")

    def on_mount(self) -> None:
        self._sync()

    def _sync(self) -> None:
        name = self.controller.project.name if self.controller.project else ""
        title = self.query_one("#confirm-title", Label)
        message = self.query_one("#confirm-message", Label)
        button = self.query_one("#confirm-btn", Button)
        if self.controller.delete_step == DeleteStep.FIRST:
            title.update("Confirm deletion")
            message.update(
                f'Are you sure you want to delete the project "{name}"? This cannot be '
                "undone and all related data will be lost."
            )
            button.label = "Confirm"
        else:
            title.update("Are you absolutely sure?")
            message.update(
                f'This is the final confirmation. The project "{name}" will be permanently '
                "deleted together with its tasks, files and activity history."
            )
            button.label = "Yes, delete project"
        button.disabled = self.controller.delete_mutation.is_pending
        if button.disabled:
            button.label = "Deleting..."

    async def _confirm(self) -> None:
        if self.controller.delete_step == DeleteStep.FINAL:
            button = self.query_one("#confirm-btn", Button)
            button.disabled = True
            button.label = "Deleting..."
        await self.controller.request_delete()
        if self.controller.delete_open:
            self._sync()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "confirm-btn":
            self.run_worker(self._confirm(), exclusive=True, group="delete")
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_cancel(self) -> None:
        self.controller.reset_delete()
        self.dismiss(None)
