"""Task domain package.

Key Types:
    Task - A task as served by the API
    TaskFormValues - Validated task form values
    TaskPriority, TaskStatus - Task enumerations
"""

from pmdesk.domain.task.models import (
    MAX_TAGS,
    PRIORITY_COLORS,
    PRIORITY_LABELS,
    STATUS_LABELS,
    Task,
    TaskFormValues,
    TaskPriority,
    TaskStatus,
)

__all__ = [
    "MAX_TAGS",
    "PRIORITY_COLORS",
    "PRIORITY_LABELS",
    "STATUS_LABELS",
    "Task",
    "TaskFormValues",
    "TaskPriority",
    "TaskStatus",
]
