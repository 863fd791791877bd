"""Project detail orchestration.

ProjectDetailController backs the project detail screen. It loads a
project and its related collections through the query cache, exposes
per-collection loading flags and derived display state, and runs the
mutations offered on the screen. Every mutation follows the same shape:
send the request, on success invalidate the affected cache keys and
refetch what the screen shows, on failure notify and leave the cache and
dialogs as they were.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from enum import IntEnum
from typing import Any, Optional

from pmdesk.application.mutation import Mutation
from pmdesk.domain.activity import Activity
from pmdesk.domain.member import AddMemberFormValues, ProjectMember, User
from pmdesk.domain.project import Project, ProjectFormValues, StatusBadge, progress_color, status_badge
from pmdesk.domain.shared import Result
from pmdesk.domain.task import Task, TaskFormValues, TaskStatus
from pmdesk.infrastructure.api import ApiClient, ApiError
from pmdesk.infrastructure.cache import QueryCache, QueryKey, keys

logger = logging.getLogger(__name__)

# Notify is called as notify(message, title=..., severity=...), which is
# the signature of textual's App.notify.
Notify = Callable[..., Any]
Navigate = Callable[[str], Any]

PROJECTS_PATH = "/projects"

RECENT_TASKS = 5
RECENT_ACTIVITIES = 3
AVATAR_STRIP = 3

UPDATE_PROJECT_FALLBACK = "An error occurred while updating the project"
DELETE_PROJECT_FALLBACK = "An error occurred while deleting the project"
CREATE_TASK_FALLBACK = "An error occurred while creating the task"
UPDATE_TASK_FALLBACK = "An error occurred while updating the task"
ADD_MEMBER_FALLBACK = "An error occurred while adding the member to the project"


class DeleteStep(IntEnum):
    """Stage of the two-step delete confirmation."""

    FIRST = 1
    FINAL = 2


def format_deadline(deadline: Optional[datetime]) -> str:
    return deadline.strftime("%d %B, %Y") if deadline else "Not set"


def format_created(created_at: Optional[datetime]) -> str:
    return created_at.strftime("%d/%m/%Y") if created_at else "Date unavailable"


class ProjectDetailController:
    """State and operations of the project detail view.

    Args:
        api: REST client.
        cache: Shared query cache.
        notify: Callback for transient notifications.
        navigate: Callback receiving a route path, used after deletion.
    """

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        notify: Notify,
        navigate: Optional[Navigate] = None,
    ) -> None:
        self.api = api
        self.cache = cache
        self.notify = notify
        self.navigate = navigate or (lambda path: None)

        self.project_id = 0
        self._generation = 0
        self._load_task: Optional[asyncio.Task] = None
        self._listeners: list[Callable[[], Any]] = []

        self.active_tab = "overview"
        self.edit_open = False
        self.delete_open = False
        self.delete_step = DeleteStep.FIRST
        self.new_task_open = False
        self.add_member_open = False

        self.update_mutation: Mutation[Project] = Mutation(
            self._put_project,
            on_success=self._on_project_updated,
            on_error=lambda e: self._notify_error("Could not update project", e, UPDATE_PROJECT_FALLBACK),
            name="update project",
        )
        self.delete_mutation: Mutation[None] = Mutation(
            self._delete_project,
            on_success=self._on_project_deleted,
            on_error=lambda e: self._notify_error("Could not delete project", e, DELETE_PROJECT_FALLBACK),
            name="delete project",
        )
        self.create_task_mutation: Mutation[Task] = Mutation(
            self._post_task,
            on_success=self._on_task_created,
            on_error=lambda e: self._notify_error("Could not create task", e, CREATE_TASK_FALLBACK),
            name="create task",
        )
        self.task_status_mutation: Mutation[Task] = Mutation(
            self._put_task_status,
            on_success=self._on_task_updated,
            on_error=lambda e: self._notify_error("Could not update task", e, UPDATE_TASK_FALLBACK),
            name="update task status",
        )
        self.add_member_mutation: Mutation[ProjectMember] = Mutation(
            self._post_member,
            on_success=self._on_member_added,
            on_error=lambda e: self._notify_error("Could not add member", e, ADD_MEMBER_FALLBACK),
            name="add member",
        )

    # =========================================================================
    # Change listeners
    # =========================================================================

    def subscribe(self, listener: Callable[[], Any]) -> None:
        """Register a callback run whenever the view state changes."""
        self._listeners.append(listener)

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()

    # =========================================================================
    # Loading
    # =========================================================================

    @property
    def enabled(self) -> bool:
        """Queries only run for a valid project id."""
        return self.project_id >= 1

    def bind(self, project_id: int) -> None:
        """Point the controller at a project without fetching.

        Switching to a different project starts a new generation: the
        previous generation's load is cancelled and dialog state resets.
        """
        if project_id == self.project_id:
            return
        self._generation += 1
        if self._load_task is not None and not self._load_task.done():
            logger.debug(f"Cancelling load of project {self.project_id}")
            self._load_task.cancel()
        self._load_task = None
        self.project_id = project_id
        self.active_tab = "overview"
        self.edit_open = False
        self.new_task_open = False
        self.add_member_open = False
        self.reset_delete()

    def _active_keys(self) -> list[tuple[QueryKey, Callable[[], Any]]]:
        pid = self.project_id
        active: list[tuple[QueryKey, Callable[[], Any]]] = [
            (keys.project(pid), lambda: self.api.get_project(pid)),
            (keys.project_tasks(pid), lambda: self.api.list_project_tasks(pid)),
            (keys.project_members(pid), lambda: self.api.list_members(pid)),
            (keys.project_activities(pid), lambda: self.api.list_activities(pid)),
        ]
        if self.add_member_open:
            active.append((keys.USERS, self.api.list_users))
        return active

    async def load(self, project_id: Optional[int] = None) -> None:
        """Load the project and its collections concurrently.

        A load superseded by ``bind`` to another project returns quietly;
        whatever it fetched stays cached under its own project's keys.
        """
        if project_id is not None:
            self.bind(project_id)
        if not self.enabled:
            self._changed()
            return

        generation = self._generation
        task = asyncio.ensure_future(
            asyncio.gather(*(self.cache.fetch(key, fetcher) for key, fetcher in self._active_keys()))
        )
        self._load_task = task
        self._changed()
        try:
            await task
        except asyncio.CancelledError:
            if generation == self._generation:
                raise
            logger.debug(f"Discarded superseded load (generation {generation})")
            return
        if generation == self._generation:
            self._changed()

    async def refresh(self) -> None:
        """Invalidate and refetch everything the view shows."""
        for key, _ in self._active_keys():
            self.cache.invalidate(key)
        await self._refetch_stale()

    async def _refetch_stale(self) -> None:
        if not self.enabled:
            return
        generation = self._generation
        await asyncio.gather(
            *(
                self.cache.fetch(key, fetcher)
                for key, fetcher in self._active_keys()
                if self.cache.is_stale(key)
            )
        )
        if generation == self._generation:
            self._changed()

    def _entry_pending(self, key: QueryKey) -> bool:
        entry = self.cache.state(key)
        return entry is None or (not entry.has_data and entry.error is None)

    @property
    def project(self) -> Optional[Project]:
        return self.cache.peek(keys.project(self.project_id))

    @property
    def tasks(self) -> list[Task]:
        return self.cache.peek(keys.project_tasks(self.project_id)) or []

    @property
    def members(self) -> list[ProjectMember]:
        return self.cache.peek(keys.project_members(self.project_id)) or []

    @property
    def activities(self) -> list[Activity]:
        return self.cache.peek(keys.project_activities(self.project_id)) or []

    @property
    def users(self) -> list[User]:
        return self.cache.peek(keys.USERS) or []

    @property
    def project_loading(self) -> bool:
        return self.enabled and self._entry_pending(keys.project(self.project_id))

    @property
    def tasks_loading(self) -> bool:
        return self.enabled and self._entry_pending(keys.project_tasks(self.project_id))

    @property
    def members_loading(self) -> bool:
        return self.enabled and self._entry_pending(keys.project_members(self.project_id))

    @property
    def activities_loading(self) -> bool:
        return self.enabled and self._entry_pending(keys.project_activities(self.project_id))

    @property
    def users_loading(self) -> bool:
        return self.add_member_open and self._entry_pending(keys.USERS)

    @property
    def project_error(self) -> Optional[ApiError]:
        """Error of the last failed project fetch, if any."""
        entry = self.cache.state(keys.project(self.project_id))
        return entry.error if entry is not None else None

    @property
    def not_found(self) -> bool:
        """The project query settled without a project."""
        return not self.project_loading and self.project is None

    # =========================================================================
    # Derived display state
    # =========================================================================

    @property
    def status_badge(self) -> StatusBadge:
        return status_badge(self.project.status if self.project else None)

    @property
    def progress_color(self) -> str:
        return progress_color(self.project.progress if self.project else 0)

    @property
    def recent_tasks(self) -> list[Task]:
        return self.tasks[:RECENT_TASKS]

    @property
    def has_more_tasks(self) -> bool:
        return len(self.tasks) > RECENT_TASKS

    @property
    def recent_activities(self) -> list[Activity]:
        return self.activities[:RECENT_ACTIVITIES]

    @property
    def has_more_activities(self) -> bool:
        return len(self.activities) > RECENT_ACTIVITIES

    @property
    def avatar_members(self) -> list[ProjectMember]:
        return self.members[:AVATAR_STRIP]

    @property
    def extra_member_count(self) -> int:
        return max(0, len(self.members) - AVATAR_STRIP)

    # =========================================================================
    # Dialogs
    # =========================================================================

    def open_delete(self) -> None:
        self.delete_open = True
        self.delete_step = DeleteStep.FIRST

    def reset_delete(self) -> None:
        """Close the delete confirmation and disarm it."""
        self.delete_step = DeleteStep.FIRST
        self.delete_open = False

    async def set_add_member_open(self, is_open: bool) -> None:
        """Open or close the add-member dialog.

        The user list is only fetched while the dialog is open.
        """
        if not is_open:
            self.close_add_member()
            return
        self.add_member_open = True
        self._changed()
        await self.cache.fetch(keys.USERS, self.api.list_users)
        self._changed()

    def close_add_member(self) -> None:
        self.add_member_open = False
        self._changed()

    # =========================================================================
    # Mutations
    # =========================================================================

    async def update_project(self, values: ProjectFormValues) -> Result[Project, ApiError]:
        return await self.update_mutation.mutate(values)

    async def request_delete(self) -> Optional[Result[None, ApiError]]:
        """Advance the delete confirmation.

        The first call only arms the final confirmation and returns None.
        The second call sends the delete request.
        """
        if self.delete_step == DeleteStep.FIRST:
            self.delete_open = True
            self.delete_step = DeleteStep.FINAL
            self._changed()
            return None
        return await self.delete_mutation.mutate()

    async def create_task(self, values: TaskFormValues) -> Result[Task, ApiError]:
        return await self.create_task_mutation.mutate(values)

    async def set_task_status(self, task_id: int, completed: bool) -> Result[Task, ApiError]:
        status = TaskStatus.COMPLETED if completed else TaskStatus.TODO
        return await self.task_status_mutation.mutate(task_id, status)

    async def add_member(self, values: AddMemberFormValues) -> Result[ProjectMember, ApiError]:
        return await self.add_member_mutation.mutate(values)

    # Request functions

    async def _put_project(self, values: ProjectFormValues) -> Project:
        return await self.api.update_project(self.project_id, values)

    async def _delete_project(self) -> None:
        await self.api.delete_project(self.project_id)

    async def _post_task(self, values: TaskFormValues) -> Task:
        values = values.model_copy(update={"project_id": self.project_id})
        logger.info(f"Creating task in project {self.project_id}: {values.to_payload()}")
        return await self.api.create_task(self.project_id, values)

    async def _put_task_status(self, task_id: int, status: TaskStatus) -> Task:
        return await self.api.update_task_status(task_id, status)

    async def _post_member(self, values: AddMemberFormValues) -> ProjectMember:
        return await self.api.add_member(self.project_id, values)

    # Outcome handlers

    def _notify_error(self, title: str, error: ApiError, fallback: str) -> None:
        self.notify(error.message or fallback, title=title, severity="error")
        self._changed()

    async def _on_project_updated(self, project: Project) -> None:
        self.edit_open = False
        self.cache.invalidate(keys.project(self.project_id))
        self.cache.invalidate(keys.PROJECTS)
        self.notify("The project details were updated", title="Project updated")
        await self._refetch_stale()

    def _on_project_deleted(self, _: None) -> None:
        pid = self.project_id
        for key in (
            keys.project(pid),
            keys.project_tasks(pid),
            keys.project_members(pid),
            keys.project_activities(pid),
            keys.project_phases(pid),
        ):
            self.cache.remove(key)
        self.cache.invalidate(keys.PROJECTS)
        self.reset_delete()
        self.notify("The project was deleted", title="Project deleted")
        self.navigate(PROJECTS_PATH)

    async def _on_task_created(self, task: Task) -> None:
        pid = self.project_id
        self.new_task_open = False
        for key in (keys.project_tasks(pid), keys.TASKS, keys.MY_TASKS):
            self.cache.invalidate(key)
        await self.cache.fetch(
            keys.project_tasks(pid), lambda: self.api.list_project_tasks(pid), force=True
        )
        self.notify(f"Task '{task.name}' was created", title="Task created")
        self._changed()

    async def _on_task_updated(self, task: Task) -> None:
        self.cache.invalidate(keys.project_tasks(self.project_id))
        await self._refetch_stale()

    async def _on_member_added(self, member: ProjectMember) -> None:
        self.add_member_open = False
        self.cache.invalidate(keys.project_members(self.project_id))
        self.notify("The member was added to the project", title="Member added")
        await self._refetch_stale()
