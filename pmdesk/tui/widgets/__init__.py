"""TUI widgets for pmdesk."""

from .activity_list import ActivityList
from .member_list import MemberList
from .status_badge import StatusBadgeLabel
from .task_list import TaskItem, TaskList, TaskStatusToggled

__all__ = [
    "ActivityList",
    "MemberList",
    "StatusBadgeLabel",
    "TaskItem",
    "TaskList",
    "TaskStatusToggled",
]
