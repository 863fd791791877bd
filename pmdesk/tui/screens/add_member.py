"""Add-member dialog."""

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, LoadingIndicator, Select

from pmdesk.application.forms import FormController
from pmdesk.application.project_detail import ProjectDetailController
from pmdesk.domain.member import (
    PROFESSION_LABELS,
    ROLE_LABELS,
    AddMemberFormValues,
    MemberRole,
    Profession,
)
from pmdesk.domain.shared import Ok

from .form_helpers import FORM_CSS, labelled, select_int, show_errors

MEMBER_FIELDS = ["user_id", "role", "profession"]


class AddMemberModal(ModalScreen[bool]):
    """Dialog for adding a user to the project team.

    Opening the dialog tells the controller to fetch the user list;
    closing it stops further user fetches.
    """

    CSS = FORM_CSS + """
    AddMemberModal {
        align: center middle;
    }

    #users-loading {
        height: 3;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Cancel"),
    ]

    def __init__(self, controller: ProjectDetailController) -> None:
        super().__init__()
        self.controller = controller
        self.form = FormController(
            AddMemberFormValues,
            on_submit=controller.add_member,
            defaults={"role": MemberRole.MEMBER, "profession": Profession.OTHER},
        )

    def compose(self) -> ComposeResult:
        with Vertical(classes="form-dialog"):
            yield Label("Add Team Member", classes="form-title")
            yield LoadingIndicator(id="users-loading")
            yield from labelled(
                "User", Select[int]([], prompt="Select a user", id="user_id"), "user_id"
            )
            yield from labelled(
                "Role",
                Select(
                    [(ROLE_LABELS[r], r.value) for r in MemberRole],
                    value=MemberRole.MEMBER.value,
                    allow_blank=False,
                    id="role",
                ),
                "role",
            )
            yield from labelled(
                "Profession",
                Select(
                    [(PROFESSION_LABELS[p], p.value) for p in Profession],
                    value=Profession.OTHER.value,
                    allow_blank=False,
                    id="profession",
                ),
                "profession",
            )
            with Horizontal(classes="form-buttons"):
                yield Button("Add Member", id="submit-btn", variant="primary")
                yield Button("Cancel", id="cancel-btn")

    def on_mount(self) -> None:
        self.run_worker(self._load_users(), group="users")

    async def _load_users(self) -> None:
        await self.controller.set_add_member_open(True)
        self.query_one("#users-loading").display = False
        self.query_one("#user_id", Select).set_options(
            [(user.name, user.id) for user in self.controller.users]
        )

    async def _submit(self) -> None:
        button = self.query_one("#submit-btn", Button)
        self.form.update(
            {
                "user_id": select_int(self.query_one("#user_id", Select)),
                "role": self.query_one("#role", Select).value,
                "profession": self.query_one("#profession", Select).value,
            }
        )
        button.disabled = True
        button.label = "Adding..."
        try:
            result = await self.form.submit()
        finally:
            button.disabled = False
            button.label = "Add Member"
        show_errors(self, MEMBER_FIELDS, self.form.errors)
        if isinstance(result, Ok) and not self.controller.add_member_open:
            self.dismiss(True)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "submit-btn":
            if not self.form.pending:
                self.run_worker(self._submit(), group="submit")
        elif event.button.id == "cancel-btn":
            self.action_cancel()

    def action_cancel(self) -> None:
        self.controller.close_add_member()
        self.dismiss(False)
