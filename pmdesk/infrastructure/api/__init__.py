"""REST client for the project-management API."""

from pmdesk.infrastructure.api.client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, ApiClient
from pmdesk.infrastructure.api.errors import ApiError, InvalidResponseError, NotFoundError

__all__ = [
    "ApiClient",
    "ApiError",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "InvalidResponseError",
    "NotFoundError",
]
