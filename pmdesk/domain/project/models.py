"""Project domain models.

This module contains the project aggregate as served by the API, the
project form schema, and the pure display mappings derived from a
project's status and progress.
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pmdesk.domain.shared.validation import FormSchema


class ProjectStatus(str, Enum):
    """Lifecycle status of a project."""

    PLANNING = "planning"
    IN_PROGRESS = "in_progress"
    TESTING = "testing"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class Project(BaseModel):
    """A project as returned by the API.

    ``status`` is kept as the raw string the server sent so that values
    this client does not know about still load; ``status_badge`` maps them
    to the planning badge.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    description: str | None = None
    status: str = ProjectStatus.PLANNING.value
    progress: int = 0
    deadline: datetime | None = None
    created_at: datetime | None = None


class Phase(BaseModel):
    """A phase of a project that tasks can be attached to."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    project_id: int | None = None


class ProjectFormValues(FormSchema):
    """Validated values of the project edit form."""

    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    status: ProjectStatus = ProjectStatus.PLANNING
    progress: int = Field(default=0, ge=0, le=100)
    deadline: date | None = None

    error_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("name", "string_too_short"): "Name must be at least 2 characters",
        ("name", "string_too_long"): "Name must be at most 100 characters",
        ("description", "string_too_long"): "Description must be at most 500 characters",
        ("progress", "greater_than_equal"): "Progress must be between 0 and 100",
        ("progress", "less_than_equal"): "Progress must be between 0 and 100",
        ("progress", "int_parsing"): "Progress must be a whole number",
    }

    @classmethod
    def from_project(cls, project: Project) -> dict:
        """Default form values for editing an existing project."""
        try:
            status = ProjectStatus(project.status)
        except ValueError:
            status = ProjectStatus.PLANNING
        return {
            "name": project.name,
            "description": project.description or "",
            "status": status,
            "progress": project.progress,
            "deadline": project.deadline.date() if project.deadline else None,
        }


# =============================================================================
# Display mappings
# =============================================================================


@dataclass(frozen=True, slots=True)
class StatusBadge:
    """Label and colour used to render a project status."""

    label: str
    color: str


STATUS_BADGES: dict[str, StatusBadge] = {
    ProjectStatus.PLANNING.value: StatusBadge("Planning", "yellow"),
    ProjectStatus.IN_PROGRESS.value: StatusBadge("In progress", "green"),
    ProjectStatus.TESTING.value: StatusBadge("Testing", "blue"),
    ProjectStatus.COMPLETED.value: StatusBadge("Completed", "magenta"),
    ProjectStatus.ON_HOLD.value: StatusBadge("On hold", "grey50"),
}


def status_badge(status: str | ProjectStatus | None) -> StatusBadge:
    """Badge for a project status, falling back to planning for unknown values."""
    if isinstance(status, ProjectStatus):
        status = status.value
    return STATUS_BADGES.get(status or "", STATUS_BADGES[ProjectStatus.PLANNING.value])


def progress_color(progress: int) -> str:
    """Colour of the progress bar for a completion percentage."""
    if progress >= 80:
        return "green"
    if progress >= 40:
        return "blue"
    return "yellow"
