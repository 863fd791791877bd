"""Errors raised by the REST client."""

from typing import Optional


class ApiError(Exception):
    """A request to the project-management API failed.

    Attributes:
        status_code: HTTP status of the response, or None when the request
            never produced one (connection refused, timeout).
        message: Message supplied by the server, or a transport description.
            May be empty when the server sent nothing useful.
    """

    def __init__(self, status_code: Optional[int], message: str = "") -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(message or f"Request failed with status {status_code}")


class NotFoundError(ApiError):
    """The requested entity does not exist (HTTP 404)."""


class InvalidResponseError(ApiError):
    """A 2xx response carried a body that does not match the expected shape.

    The message is left empty so callers fall back to their own wording.
    """
