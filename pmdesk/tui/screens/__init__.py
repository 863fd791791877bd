"""TUI screens for pmdesk."""

from .add_member import AddMemberModal
from .confirm_delete import ConfirmDeleteModal
from .project_detail import ProjectDetailScreen
from .project_form import ProjectFormModal
from .project_list import ProjectListItem, ProjectListScreen
from .task_form import TaskFormModal

__all__ = [
    "AddMemberModal",
    "ConfirmDeleteModal",
    "ProjectDetailScreen",
    "ProjectFormModal",
    "ProjectListItem",
    "ProjectListScreen",
    "TaskFormModal",
]
