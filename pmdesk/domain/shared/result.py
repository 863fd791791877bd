"""Result monad for explicit error handling in domain operations.

This module provides a Result type (also known as Either monad) for representing
operations that can succeed with a value or fail with an error. Form validation
and mutations return Results so callers branch on the outcome instead of
catching exceptions for expected failures.

Example usage:
    >>> def parse_progress(raw: str) -> Result[int, str]:
    ...     if not raw.isdigit():
    ...         return Err("Progress must be a number")
    ...     return Ok(int(raw))
    ...
    >>> result = parse_progress("40")
    >>> if isinstance(result, Ok):
    ...     print(f"Progress: {result.value}")
    Progress: 40
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Represents a successful result containing a value.

    Attributes:
        value: The success value of type T.
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Represents a failed result containing an error.

    Attributes:
        error: The error value of type E.
    """

    error: E


# Using Union here as TypeVar aliases don't work with | syntax at runtime
Result = Union[Ok[T], Err[E]]  # noqa: UP007
