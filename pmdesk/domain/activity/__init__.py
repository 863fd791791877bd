"""Activity log domain package."""

from pmdesk.domain.activity.models import Activity

__all__ = ["Activity"]
