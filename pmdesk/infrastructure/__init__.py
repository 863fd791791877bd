"""Infrastructure layer for pmdesk.

This package wraps all network I/O and the in-memory request cache.

Exports:
    API:
        - ApiClient: Async REST client for the project-management API
        - ApiError / NotFoundError: Request failures

    Cache:
        - QueryCache: Request cache keyed by typed query keys
        - QueryState: Cached data and fetch state for one key
        - keys: Query key constructors
"""

from pmdesk.infrastructure.api import ApiClient, ApiError, NotFoundError
from pmdesk.infrastructure.cache import QueryCache, QueryState, keys

__all__ = [
    # API
    "ApiClient",
    "ApiError",
    "NotFoundError",
    # Cache
    "QueryCache",
    "QueryState",
    "keys",
]
