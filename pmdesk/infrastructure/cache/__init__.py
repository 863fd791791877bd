"""Request cache for API queries."""

from pmdesk.infrastructure.cache import keys
from pmdesk.infrastructure.cache.keys import QueryKey
from pmdesk.infrastructure.cache.query_cache import QueryCache, QueryState

__all__ = ["QueryCache", "QueryKey", "QueryState", "keys"]
