"""Task domain models.

Pydantic models for tasks as served by the API and for the task form.
Wire JSON uses camelCase keys; the models expose snake_case attributes.
"""

from datetime import date, datetime
from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pmdesk.domain.shared.validation import FormSchema

MAX_TAGS = 8


class TaskPriority(str, Enum):
    """Priority of a task."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TaskStatus(str, Enum):
    """Workflow status of a task."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    REVIEW = "review"
    COMPLETED = "completed"


PRIORITY_LABELS = {
    TaskPriority.HIGH: "High",
    TaskPriority.MEDIUM: "Medium",
    TaskPriority.LOW: "Low",
}

STATUS_LABELS = {
    TaskStatus.TODO: "To do",
    TaskStatus.IN_PROGRESS: "In progress",
    TaskStatus.REVIEW: "In review",
    TaskStatus.COMPLETED: "Completed",
}

PRIORITY_COLORS = {
    TaskPriority.HIGH: "red",
    TaskPriority.MEDIUM: "yellow",
    TaskPriority.LOW: "green",
}


class Task(BaseModel):
    """A task as returned by the API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    description: str | None = None
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    project_id: int | None = None
    phase_id: int | None = None
    assigned_to: int | None = None
    due_date: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    @property
    def completed(self) -> bool:
        """Whether the task is in the completed state."""
        return self.status == TaskStatus.COMPLETED


class TaskFormValues(FormSchema):
    """Validated values of the task form.

    Tags are collected separately by the form controller and are not part
    of this object.
    """

    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(default=None, max_length=500)
    priority: TaskPriority = TaskPriority.MEDIUM
    status: TaskStatus = TaskStatus.TODO
    project_id: int = Field(default=0, ge=1, validate_default=True)
    phase_id: int | None = None
    assigned_to: int | None = None
    due_date: date | None = None

    error_messages: ClassVar[dict[tuple[str, str], str]] = {
        ("name", "string_too_short"): "Name must be at least 2 characters",
        ("name", "string_too_long"): "Name must be at most 100 characters",
        ("description", "string_too_long"): "Description must be at most 500 characters",
        ("project_id", "greater_than_equal"): "Select a project",
        ("project_id", "int_parsing"): "Select a project",
    }
