"""Form controllers: bind edited values to a schema and submit them.

A controller holds the raw values a user is editing, validates them
against a FormSchema on submit, and only then hands the typed value
object to the caller's submit callback. While the callback runs the form
is pending and refuses further submits.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

from pmdesk.application.mutation import maybe_await
from pmdesk.domain.member import User
from pmdesk.domain.project import Phase, Project
from pmdesk.domain.shared import Err, FieldError, FormSchema, Ok, Result, errors_by_field, validate
from pmdesk.domain.task import MAX_TAGS, TaskFormValues, TaskPriority, TaskStatus
from pmdesk.infrastructure.api import ApiClient
from pmdesk.infrastructure.cache import QueryCache, keys

logger = logging.getLogger(__name__)

FormT = TypeVar("FormT", bound=FormSchema)

SubmitHandler = Callable[[FormT], Awaitable[Any] | Any]


class FormController(Generic[FormT]):
    """Editable state of a form bound to a schema.

    Args:
        schema: FormSchema subclass the values are validated against.
        on_submit: Called with the validated value object. May be async.
        defaults: Initial field values.
    """

    def __init__(
        self,
        schema: type[FormT],
        on_submit: SubmitHandler,
        defaults: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.schema = schema
        self._on_submit = on_submit
        self.values: dict[str, Any] = self.initial_values(defaults or {})
        self.errors: dict[str, str] = {}
        self.pending = False

    def initial_values(self, defaults: Mapping[str, Any]) -> dict[str, Any]:
        return dict(defaults)

    def set(self, name: str, value: Any) -> None:
        """Set a field value, clearing that field's error."""
        self.values[name] = value
        self.errors.pop(name, None)

    def update(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            self.set(name, value)

    async def submit(self) -> Optional[Result[FormT, list[FieldError]]]:
        """Validate the current values and submit them.

        Returns:
            None if a submission is already pending, Err with the field
            errors if validation failed (the callback is not called), or
            Ok with the value object that was handed to the callback.
        """
        if self.pending:
            logger.debug(f"{self.schema.__name__} submit ignored, already pending")
            return None

        result = validate(self.schema, self.values)
        if isinstance(result, Err):
            self.errors = errors_by_field(result.error)
            logger.debug(f"{self.schema.__name__} invalid: {self.errors}")
            return result

        self.errors = {}
        self.pending = True
        try:
            await self._handle(result.value)
        finally:
            self.pending = False
        return result

    async def _handle(self, values: FormT) -> None:
        await maybe_await(self._on_submit(values))


class TagCollector:
    """Tags gathered alongside a task form, outside the validated schema."""

    def __init__(self, initial: Iterable[str] = (), max_tags: int = MAX_TAGS) -> None:
        self.max_tags = max_tags
        self._tags: list[str] = []
        for tag in initial:
            self.add(tag)

    @property
    def items(self) -> list[str]:
        return list(self._tags)

    def add(self, tag: str) -> Result[list[str], str]:
        """Add a tag.

        Returns:
            Ok with the updated tag list, or Err explaining why the tag was
            rejected (empty, duplicate, or limit reached).
        """
        tag = tag.strip()
        if not tag:
            return Err("Tag cannot be empty")
        if tag.lower() in (existing.lower() for existing in self._tags):
            return Err(f"Tag '{tag}' already added")
        if len(self._tags) >= self.max_tags:
            return Err(f"At most {self.max_tags} tags allowed")
        self._tags.append(tag)
        return Ok(self.items)

    def remove(self, tag: str) -> None:
        self._tags = [existing for existing in self._tags if existing.lower() != tag.lower()]

    def clear(self) -> None:
        self._tags = []


class TaskFormController(FormController[TaskFormValues]):
    """Task create/edit form.

    When bound to a project the project selector is locked to it. Tags are
    collected by ``tags`` and recorded in ``submitted_tags`` on submit; the
    API has no tag field yet, so they are logged and kept out of the
    payload.
    """

    def __init__(
        self,
        on_submit: SubmitHandler,
        defaults: Optional[Mapping[str, Any]] = None,
        project_id: Optional[int] = None,
        tags: Iterable[str] = (),
    ) -> None:
        self.bound_project_id = project_id
        self.is_edit = bool(defaults and defaults.get("name"))
        super().__init__(TaskFormValues, on_submit, defaults)
        self.tags = TagCollector(tags)
        self.submitted_tags: list[str] = []

    def initial_values(self, defaults: Mapping[str, Any]) -> dict[str, Any]:
        return {
            "name": defaults.get("name") or "",
            "description": defaults.get("description") or "",
            "priority": defaults.get("priority") or TaskPriority.MEDIUM,
            "status": defaults.get("status") or TaskStatus.TODO,
            "project_id": defaults.get("project_id") or self.bound_project_id or 0,
            "phase_id": defaults.get("phase_id") or None,
            "assigned_to": defaults.get("assigned_to") or None,
            "due_date": defaults.get("due_date"),
        }

    @property
    def project_locked(self) -> bool:
        return self.bound_project_id is not None

    @property
    def submit_label(self) -> str:
        if self.pending:
            return "Saving..."
        return "Update Task" if self.is_edit else "Create Task"

    async def _handle(self, values: TaskFormValues) -> None:
        self.submitted_tags = self.tags.items
        # TODO: send tags with the task once the tasks endpoint accepts them
        logger.info(f"Tags collected for task '{values.name}': {self.submitted_tags}")
        await super()._handle(values)


# =============================================================================
# Select options
# =============================================================================


@dataclass
class TaskFormOptions:
    """Choices offered by the task form's select fields."""

    projects: list[Project] = field(default_factory=list)
    phases: list[Phase] = field(default_factory=list)
    users: list[User] = field(default_factory=list)


async def load_task_form_options(
    api: ApiClient,
    cache: QueryCache,
    project_id: Optional[int],
) -> TaskFormOptions:
    """Fetch projects, users, and (for a chosen project) its phases.

    Phases are only requested when a project is selected.
    """
    requests = [
        cache.fetch(keys.PROJECTS, api.list_projects),
        cache.fetch(keys.USERS, api.list_users),
    ]
    if project_id:
        requests.append(
            cache.fetch(keys.project_phases(project_id), lambda: api.list_phases(project_id))
        )
    await asyncio.gather(*requests)

    phases = cache.peek(keys.project_phases(project_id), []) if project_id else []
    return TaskFormOptions(
        projects=cache.peek(keys.PROJECTS, []),
        phases=phases,
        users=cache.peek(keys.USERS, []),
    )
