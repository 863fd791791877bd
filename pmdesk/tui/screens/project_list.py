"""Project list screen.

Entry point of the TUI. Lists the projects returned by the API and opens
the detail screen for the selected one.
"""

from typing import TYPE_CHECKING

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Footer, Header, Label, ListItem, ListView, LoadingIndicator, Static

from pmdesk.domain.project import Project, status_badge
from pmdesk.infrastructure.cache import keys

if TYPE_CHECKING:
    from pmdesk.tui.app import PmDeskApp


class ProjectListItem(ListItem):
    """A selectable project row."""

    DEFAULT_CSS = """
    ProjectListItem {
        height: auto;
        padding: 0 1;
        margin: 0 1 1 1;
        border: solid $secondary;
    }

    ProjectListItem .project-name {
        text-style: bold;
        color: $primary;
    }

    ProjectListItem .project-meta {
        color: $text-muted;
    }
    """

    def __init__(self, project: Project) -> None:
        super().__init__(id=f"project-{project.id}")
        self.project = project

    def compose(self) -> ComposeResult:
        badge = status_badge(self.project.status)
        yield Label(self.project.name, classes="project-name")
        meta = Text()
        meta.append(f" {badge.label} ", style=f"bold black on {badge.color}")
        meta.append(f"  {self.project.progress}% complete")
        yield Label(meta, classes="project-meta")


class ProjectListScreen(Screen):
    """Screen listing every project the API returns."""

    BINDINGS = [
        ("r", "refresh", "Refresh"),
        ("q", "quit", "Quit"),
    ]

    CSS = """
    #project-list-container {
        width: 100%;
        height: 100%;
        padding: 1 2;
    }

    #project-list-title {
        text-style: bold;
        text-align: center;
        padding: 1;
        color: $primary;
        width: 100%;
    }

    #project-list-empty {
        text-align: center;
        color: $text-muted;
        width: 100%;
    }

    #project-list {
        height: 1fr;
    }
    """

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="project-list-container"):
            yield Label("Projects", id="project-list-title")
            yield LoadingIndicator(id="project-list-loading")
            yield Static("No projects found", id="project-list-empty")
            yield ListView(id="project-list")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#project-list-empty").display = False
        self.run_worker(self._load(), exclusive=True, group="projects")

    def on_screen_resume(self) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        if app.cache.is_stale(keys.PROJECTS):
            self.run_worker(self._load(), exclusive=True, group="projects")

    async def _load(self) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        entry = await app.cache.fetch(keys.PROJECTS, app.api.list_projects)
        self.query_one("#project-list-loading").display = False
        if entry.error is not None:
            app.notify(
                entry.error.message or "Could not load projects",
                title="Projects",
                severity="error",
            )
        projects: list[Project] = entry.data or []
        self.query_one("#project-list-empty").display = not projects
        list_view = self.query_one("#project-list", ListView)
        await list_view.clear()
        await list_view.extend(ProjectListItem(project) for project in projects)
        if projects:
            list_view.index = 0
            list_view.focus()

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        if isinstance(event.item, ProjectListItem):
            app: "PmDeskApp" = self.app  # type: ignore
            app.open_project(event.item.project.id)

    def action_refresh(self) -> None:
        app: "PmDeskApp" = self.app  # type: ignore
        app.cache.invalidate(keys.PROJECTS)
        self.run_worker(self._load(), exclusive=True, group="projects")
