"""Explicit handle for an asynchronous server mutation.

A Mutation wraps one write operation (create, update, delete) and
records where it stands: idle, pending, succeeded with a value, or
failed with an ApiError. Callbacks run after the state has been updated.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from pmdesk.domain.shared import Err, Ok, Result
from pmdesk.infrastructure.api import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MutationState(str, Enum):
    """Lifecycle of a mutation."""

    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


class Mutation(Generic[T]):
    """Runs a mutation function and tracks its state.

    Args:
        fn: Coroutine function performing the request.
        on_success: Called with the result value after a success.
        on_error: Called with the ApiError after a failure.
        name: Label used in log messages.
    """

    def __init__(
        self,
        fn: Callable[..., Awaitable[T]],
        on_success: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[ApiError], Any]] = None,
        name: str = "mutation",
    ) -> None:
        self._fn = fn
        self._on_success = on_success
        self._on_error = on_error
        self.name = name
        self.state = MutationState.IDLE
        self.value: Optional[T] = None
        self.error: Optional[ApiError] = None

    @property
    def is_pending(self) -> bool:
        return self.state == MutationState.PENDING

    def reset(self) -> None:
        """Return to the idle state, forgetting the last outcome."""
        self.state = MutationState.IDLE
        self.value = None
        self.error = None

    async def mutate(self, *args: Any, **kwargs: Any) -> Result[T, ApiError]:
        """Run the mutation.

        Returns:
            Ok(value) on success, Err(ApiError) on failure. Errors other
            than ApiError are not caught.
        """
        self.state = MutationState.PENDING
        self.error = None
        try:
            value = await self._fn(*args, **kwargs)
        except ApiError as e:
            logger.error(f"{self.name} failed: {e}")
            self.state = MutationState.FAILURE
            self.error = e
            if self._on_error is not None:
                await maybe_await(self._on_error(e))
            return Err(e)

        self.state = MutationState.SUCCESS
        self.value = value
        if self._on_success is not None:
            await maybe_await(self._on_success(value))
        return Ok(value)


async def maybe_await(value: Any) -> None:
    if inspect.isawaitable(value):
        await value
