"""Project detail screen.

Layout:
+--------------------------------------------------+
| Header                                            |
+--------------------------------------------------+
| Name  [Status]             [New Task][Edit][Del]  |
| Description                                       |
| Progress ████░░ 45%  Deadline  Created  Team      |
+--------------------------------------------------+
| Overview | Tasks | Files | Team | Activity        |
|                                                   |
+--------------------------------------------------+
| Footer                                            |
+--------------------------------------------------+

All data and mutations go through ProjectDetailController; the screen
only renders its state and forwards user actions to it.
"""

from typing import TYPE_CHECKING, Optional

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import (
    Button,
    Footer,
    Header,
    Label,
    LoadingIndicator,
    ProgressBar,
    Static,
    TabbedContent,
    TabPane,
)

from pmdesk.application.forms import FormController, TaskFormController
from pmdesk.application.project_detail import ProjectDetailController, format_created, format_deadline
from pmdesk.domain.project import ProjectFormValues
from pmdesk.tui.screens.add_member import AddMemberModal
from pmdesk.tui.screens.confirm_delete import ConfirmDeleteModal
from pmdesk.tui.screens.project_form import ProjectFormModal
from pmdesk.tui.screens.task_form import TaskFormModal
from pmdesk.tui.widgets import ActivityList, MemberList, StatusBadgeLabel, TaskList, TaskStatusToggled
from pmdesk.tui.widgets.member_list import format_member_strip

if TYPE_CHECKING:
    from pmdesk.tui.app import PmDeskApp


class ProjectDetailScreen(Screen):
    """Detail view of one project with overview, tasks, files, team and activity tabs."""

    BINDINGS = [
        Binding("n", "new_task", "New Task", show=True),
        Binding("e", "edit_project", "Edit", show=True),
        Binding("d", "delete_project", "Delete", show=True),
        Binding("m", "add_member", "Add Member", show=True),
        Binding("r", "refresh", "Refresh", show=True),
        Binding("escape", "back", "Projects", show=True),
    ]

    CSS = """
    #detail-loading {
        height: 100%;
    }

    #detail-not-found {
        align: center middle;
        height: 100%;
    }

    #detail-not-found Label {
        text-style: bold;
        width: 100%;
        text-align: center;
        margin-bottom: 1;
    }

    #detail-header {
        height: auto;
        padding: 1 2 0 2;
    }

    #project-title {
        height: auto;
        width: 1fr;
    }

    #project-name {
        text-style: bold;
        color: $primary;
    }

    #project-actions {
        width: auto;
        height: auto;
    }

    #project-actions Button {
        margin-left: 1;
    }

    #project-description {
        color: $text-muted;
        padding: 0 2;
    }

    #project-summary {
        height: auto;
        padding: 1 2;
        border-bottom: solid $primary;
    }

    #project-summary > Vertical {
        width: 1fr;
        height: auto;
    }

    .summary-label {
        color: $text-muted;
    }

    #detail-tabs {
        height: 1fr;
    }

    .section-title {
        text-style: bold;
        margin: 1 0 0 1;
    }

    .section-loading {
        color: $text-muted;
        padding: 0 1;
    }

    .view-more {
        margin: 0 1;
        min-width: 16;
    }

    #files-placeholder {
        color: $text-muted;
        text-align: center;
        padding: 2;
    }
    """

    def __init__(self, project_id: int) -> None:
        super().__init__()
        self.project_id = project_id
        self.controller: Optional[ProjectDetailController] = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield LoadingIndicator(id="detail-loading")
        with Vertical(id="detail-not-found"):
            yield Label("Project not found")
            yield Static(
                "The project you are looking for does not exist or has been deleted.",
                classes="summary-label",
            )
            yield Button("Back to projects", id="back-btn", variant="primary")
        with Container(id="detail-content"):
            with Horizontal(id="detail-header"):
                with Horizontal(id="project-title"):
                    yield Label("", id="project-name")
                    yield StatusBadgeLabel(id="project-status")
                with Horizontal(id="project-actions"):
                    yield Button("New Task", id="new-task-btn", variant="primary")
                    yield Button("Edit", id="edit-btn")
                    yield Button("Delete", id="delete-btn", variant="error")
            yield Static("", id="project-description")
            with Horizontal(id="project-summary"):
                with Vertical():
                    yield Label("Progress", classes="summary-label")
                    yield ProgressBar(total=100, show_eta=False, id="project-progress")
                with Vertical():
                    yield Label("Deadline", classes="summary-label")
                    yield Label("", id="project-deadline")
                with Vertical():
                    yield Label("Created", classes="summary-label")
                    yield Label("", id="project-created")
                with Vertical():
                    yield Label("Team", classes="summary-label")
                    yield Label("", id="member-strip")
            with TabbedContent(id="detail-tabs", initial="overview"):
                with TabPane("Overview", id="overview"):
                    with VerticalScroll():
                        yield Label("Recent Tasks", classes="section-title")
                        yield Static("Loading tasks...", classes="section-loading tasks-loading")
                        yield TaskList(id="recent-tasks")
                        yield Button("View all tasks", id="view-all-tasks", classes="view-more")
                        yield Label("Recent Activity", classes="section-title")
                        yield Static("Loading activity...", classes="section-loading activities-loading")
                        yield ActivityList(empty_text="No recent activity", id="recent-activity")
                        yield Button("View more", id="view-more-activity", classes="view-more")
                with TabPane("Tasks", id="tasks"):
                    with VerticalScroll():
                        yield Static("Loading tasks...", classes="section-loading tasks-loading")
                        yield TaskList(id="all-tasks")
                with TabPane("Files", id="files"):
                    yield Static(
                        "No file storage is configured for this project.",
                        id="files-placeholder",
                    )
                with TabPane("Team", id="team"):
                    with VerticalScroll():
                        yield Button("Add Member", id="add-member-btn", variant="primary")
                        yield Static("Loading members...", classes="section-loading members-loading")
                        yield MemberList(id="team-members")
                with TabPane("Activity", id="activity"):
                    with VerticalScroll():
                        yield Static("Loading activity...", classes="section-loading activities-loading")
                        yield ActivityList(id="all-activity")
        yield Footer()

    def on_mount(self) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        self.controller = ProjectDetailController(
            app.api,
            app.cache,
            notify=app.notify,
            navigate=app.navigate,
        )
        self.controller.subscribe(self._sync)
        self.controller.bind(self.project_id)
        self._sync()
        self.run_worker(self.controller.load(), exclusive=True, group="load")

    # =========================================================================
    # Rendering
    # =========================================================================

    def _sync(self) -> None:
        """Render the controller's current state."""
        if not self.is_mounted or self.controller is None:
            return
        c = self.controller
        loading = c.project_loading
        self.query_one("#detail-loading").display = loading
        self.query_one("#detail-not-found").display = not loading and c.not_found
        self.query_one("#detail-content").display = not loading and not c.not_found

        project = c.project
        if project is None:
            return

        self.sub_title = project.name
        self.query_one("#project-name", Label).update(project.name)
        self.query_one("#project-status", StatusBadgeLabel).show_badge(c.status_badge)
        self.query_one("#project-description", Static).update(
            project.description or "No description"
        )
        progress = self.query_one("#project-progress", ProgressBar)
        progress.update(progress=project.progress)
        progress.styles.color = c.progress_color
        self.query_one("#project-deadline", Label).update(format_deadline(project.deadline))
        self.query_one("#project-created", Label).update(format_created(project.created_at))
        self.query_one("#member-strip", Label).update(
            Text(format_member_strip(c.avatar_members, c.extra_member_count), style="bold cyan")
        )

        for widget in self.query(".tasks-loading"):
            widget.display = c.tasks_loading
        for widget in self.query(".activities-loading"):
            widget.display = c.activities_loading
        for widget in self.query(".members-loading"):
            widget.display = c.members_loading

        recent = self.query_one("#recent-tasks", TaskList)
        recent.project_name = project.name
        recent.tasks = c.recent_tasks
        self.query_one("#all-tasks", TaskList).tasks = c.tasks
        self.query_one("#view-all-tasks").display = c.has_more_tasks
        self.query_one("#recent-activity", ActivityList).activities = c.recent_activities
        self.query_one("#all-activity", ActivityList).activities = c.activities
        self.query_one("#view-more-activity").display = c.has_more_activities
        self.query_one("#team-members", MemberList).members = c.members

    # =========================================================================
    # Events
    # =========================================================================

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "back-btn":
            self.action_back()
        elif button_id == "new-task-btn":
            self.action_new_task()
        elif button_id == "edit-btn":
            self.action_edit_project()
        elif button_id == "delete-btn":
            self.action_delete_project()
        elif button_id == "add-member-btn":
            self.action_add_member()
        elif button_id == "view-all-tasks":
            self.query_one(TabbedContent).active = "tasks"
        elif button_id == "view-more-activity":
            self.query_one(TabbedContent).active = "activity"

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        if self.controller is not None:
            self.controller.active_tab = event.tabbed_content.active

    def on_task_status_toggled(self, message: TaskStatusToggled) -> None:
        if self.controller is not None:
            self.run_worker(self.controller.set_task_status(message.task_id, message.completed))

    # =========================================================================
    # Actions
    # =========================================================================

    def _ready(self) -> bool:
        return self.controller is not None and self.controller.project is not None

    def action_new_task(self) -> None:
        if not self._ready():
            return
        c = self.controller
        c.new_task_open = True
        form = TaskFormController(on_submit=c.create_task, project_id=c.project_id)

        def closed(_: Optional[bool]) -> None:
            c.new_task_open = False

        self.app.push_screen(
            TaskFormModal(form, still_open=lambda: c.new_task_open),
            closed,
        )

    def action_edit_project(self) -> None:
        if not self._ready():
            return
        c = self.controller
        c.edit_open = True
        form = FormController(
            ProjectFormValues,
            on_submit=c.update_project,
            defaults=ProjectFormValues.from_project(c.project),
        )

        def closed(_: Optional[bool]) -> None:
            c.edit_open = False

        self.app.push_screen(ProjectFormModal(form, still_open=lambda: c.edit_open), closed)

    def action_delete_project(self) -> None:
        if not self._ready():
            return
        self.controller.open_delete()
        self.app.push_screen(ConfirmDeleteModal(self.controller))

    def action_add_member(self) -> None:
        if not self._ready():
            return
        self.app.push_screen(AddMemberModal(self.controller))

    def action_refresh(self) -> None:
        if self.controller is not None:
            self.run_worker(self.controller.refresh(), exclusive=True, group="load")

    def action_back(self) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        app.navigate("/projects")
