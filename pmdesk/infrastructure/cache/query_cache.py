"""In-memory request cache keyed by typed query keys.

The cache holds the last successful response for each key together with
its fetch state. Entries are never updated optimistically: writes go to
the server, the affected keys are invalidated, and active views refetch.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Optional

from pmdesk.infrastructure.api.errors import ApiError
from pmdesk.infrastructure.cache.keys import QueryKey

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]


@dataclass
class QueryState:
    """Cached data and fetch state for one query key.

    Attributes:
        data: Last successfully fetched value, or None.
        error: Error of the most recent failed fetch, cleared on success.
        is_fetching: A fetch for this key is in flight.
        is_stale: The data must be refetched before it is trusted.
        updated_at: Monotonic time of the last successful fetch.
    """

    data: Any = None
    error: Optional[ApiError] = None
    is_fetching: bool = False
    is_stale: bool = True
    updated_at: Optional[float] = None

    @property
    def is_loading(self) -> bool:
        """Fetching with nothing to show yet."""
        return self.is_fetching and self.updated_at is None

    @property
    def has_data(self) -> bool:
        return self.updated_at is not None


def _matches(key: QueryKey, prefix: QueryKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache:
    """Cache of query results with prefix invalidation."""

    def __init__(self) -> None:
        self._entries: dict[QueryKey, QueryState] = {}
        self._inflight: dict[QueryKey, asyncio.Task] = {}

    def get(self, key: QueryKey) -> QueryState:
        """Return the state for a key, creating an empty entry if needed."""
        entry = self._entries.get(key)
        if entry is None:
            entry = QueryState()
            self._entries[key] = entry
        return entry

    def state(self, key: QueryKey) -> Optional[QueryState]:
        """Return the state for a key, or None if it was never fetched."""
        return self._entries.get(key)

    def peek(self, key: QueryKey, default: Any = None) -> Any:
        """Return the cached data for a key without fetching."""
        entry = self._entries.get(key)
        if entry is None or not entry.has_data:
            return default
        return entry.data

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def set_data(self, key: QueryKey, data: Any) -> None:
        entry = self.get(key)
        entry.data = data
        entry.error = None
        entry.is_stale = False
        entry.updated_at = time.monotonic()

    async def fetch(self, key: QueryKey, fetcher: Fetcher, force: bool = False) -> QueryState:
        """Fetch a key unless fresh data is cached.

        Concurrent callers for the same key share one request. Cancelling a
        caller does not cancel the shared request; its response still lands
        under its own key.

        Args:
            key: Query key to fetch.
            fetcher: Coroutine function that performs the request.
            force: Refetch even when the cached data is fresh.

        Returns:
            The entry for the key after the fetch completed.
        """
        entry = self.get(key)
        if not force and not entry.is_stale and entry.error is None:
            return entry

        pending = self._inflight.get(key)
        if pending is not None:
            await asyncio.shield(pending)
            # a forced refetch must not reuse a request that started before it
            if not force:
                return entry

        entry.is_fetching = True
        task = asyncio.ensure_future(self._run(key, fetcher))
        self._inflight[key] = task
        await asyncio.shield(task)
        return entry

    async def _run(self, key: QueryKey, fetcher: Fetcher) -> None:
        entry = self.get(key)
        current = asyncio.current_task()
        try:
            data = await fetcher()
        except ApiError as e:
            logger.warning(f"Query {key!r} failed: {e}")
            entry.error = e
        else:
            entry.data = data
            entry.error = None
            entry.is_stale = False
            entry.updated_at = time.monotonic()
        finally:
            if self._inflight.get(key) is current:
                del self._inflight[key]
                entry.is_fetching = False

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """Mark every entry whose key starts with ``prefix`` as stale.

        Cached data is kept so views can keep showing it until the refetch
        lands.

        Returns:
            The keys that were invalidated.
        """
        matched = [key for key in self._entries if _matches(key, prefix)]
        for key in matched:
            self._entries[key].is_stale = True
        logger.debug(f"Invalidated {prefix!r}: {len(matched)} entries")
        return matched

    def remove(self, prefix: QueryKey) -> None:
        """Drop every entry whose key starts with ``prefix``."""
        for key in [key for key in self._entries if _matches(key, prefix)]:
            del self._entries[key]

    def is_stale(self, key: QueryKey) -> bool:
        entry = self._entries.get(key)
        return entry is None or entry.is_stale
