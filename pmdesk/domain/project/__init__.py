"""Project domain package.

This package contains the project aggregate - models, the edit form
schema, and status display mappings.
"""

from pmdesk.domain.project.models import (
    STATUS_BADGES,
    Phase,
    Project,
    ProjectFormValues,
    ProjectStatus,
    StatusBadge,
    progress_color,
    status_badge,
)

__all__ = [
    "STATUS_BADGES",
    "Phase",
    "Project",
    "ProjectFormValues",
    "ProjectStatus",
    "StatusBadge",
    "progress_color",
    "status_badge",
]
