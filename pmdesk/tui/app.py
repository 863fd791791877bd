"""Main pmdesk TUI application.

PmDeskApp owns the API client and the query cache shared by all screens,
and implements the small amount of routing the screens need.
"""

import logging
import re
from typing import Optional

from textual.app import App
from textual.binding import Binding

from pmdesk.config import save_last_project_id
from pmdesk.infrastructure.api import ApiClient
from pmdesk.infrastructure.cache import QueryCache
from pmdesk.tui.screens import ProjectDetailScreen, ProjectListScreen

logger = logging.getLogger(__name__)

PROJECT_ROUTE = re.compile(r"^/projects/(\d+)$")


class PmDeskApp(App):
    """Terminal client for the project-management API."""

    TITLE = "pmdesk"
    SUB_TITLE = "Projects"

    CSS = """
    Screen {
        background: $surface;
    }

    Footer {
        dock: bottom;
        height: 1;
    }

    TabbedContent {
        height: 100%;
    }

    TabPane {
        padding: 0;
    }
    """

    BINDINGS = [
        Binding("q", "quit", "Quit", show=True),
    ]

    def __init__(
        self,
        api: ApiClient,
        project_id: Optional[int] = None,
        cache: Optional[QueryCache] = None,
    ):
        super().__init__()
        self.api = api
        self.cache = cache or QueryCache()
        self._initial_project_id = project_id

    def on_mount(self) -> None:
        self.push_screen(ProjectListScreen())
        if self._initial_project_id:
            self.open_project(self._initial_project_id)

    async def on_unmount(self) -> None:
        await self.api.aclose()

    def open_project(self, project_id: int) -> None:
        """Open the detail screen for a project."""
        logger.info(f"Opening project {project_id}")
        save_last_project_id(project_id)
        self.push_screen(ProjectDetailScreen(project_id))

    def navigate(self, path: str) -> None:
        """Go to a route path.

        Deferred so that a screen or dialog asking to navigate has finished
        its own handler before screens are popped.
        """
        self.call_later(self._navigate, path)

    def _navigate(self, path: str) -> None:
        if path == "/projects":
            while len(self.screen_stack) > 1 and not isinstance(self.screen, ProjectListScreen):
                self.pop_screen()
            return
        match = PROJECT_ROUTE.match(path)
        if match:
            self._navigate("/projects")
            self.open_project(int(match.group(1)))
            return
        logger.warning(f"Unknown route: {path}")
