"""Application layer for pmdesk.

This package contains the controllers that sit between the screens and
the infrastructure: form controllers that validate before submitting, the
mutation handle, and the project detail orchestrator.

Example usage:
    >>> from pmdesk.application import ProjectDetailController
    >>> controller = ProjectDetailController(api, cache, notify=print)
    >>> await controller.load(7)
    >>> controller.status_badge.label
    'In progress'
"""

from pmdesk.application.forms import (
    FormController,
    TagCollector,
    TaskFormController,
    TaskFormOptions,
    load_task_form_options,
)
from pmdesk.application.mutation import Mutation, MutationState
from pmdesk.application.project_detail import (
    DeleteStep,
    ProjectDetailController,
    format_created,
    format_deadline,
)

__all__ = [
    # Forms
    "FormController",
    "TagCollector",
    "TaskFormController",
    "TaskFormOptions",
    "load_task_form_options",
    # Mutations
    "Mutation",
    "MutationState",
    # Project detail
    "DeleteStep",
    "ProjectDetailController",
    "format_created",
    "format_deadline",
]
