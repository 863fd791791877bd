"""Terminal user interface for pmdesk.

Built with Textual. The app holds one API client and one query cache;
screens read through the cache and mutate through controllers from
pmdesk.application.
"""

from pmdesk.tui.app import PmDeskApp

__all__ = ["PmDeskApp"]
