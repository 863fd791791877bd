"""Shared domain utilities for pmdesk.

This package provides common building blocks used across domain modules:

- Result monad for explicit error handling
- Form schema base class and validation into field-scoped errors

Example usage:
    >>> from pmdesk.domain.shared import Ok, validate
    >>> from pmdesk.domain.task import TaskFormValues
    >>>
    >>> result = validate(TaskFormValues, {"name": "Write report", "project_id": 7})
    >>> isinstance(result, Ok)
    True
"""

from pmdesk.domain.shared.result import (
    Err,
    Ok,
    Result,
)
from pmdesk.domain.shared.validation import (
    FieldError,
    FormSchema,
    errors_by_field,
    validate,
)

__all__ = [
    # Result monad
    "Ok",
    "Err",
    "Result",
    # Validation
    "FieldError",
    "FormSchema",
    "errors_by_field",
    "validate",
]
