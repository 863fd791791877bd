"""Activity log models.

Activities are an append-only audit trail written by the server; the
client only reads them.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from pmdesk.domain.member.models import User


class Activity(BaseModel):
    """A single entry of a project's activity log."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int
    user_id: int | None = None
    user: User | None = None
    action: str = ""
    subject: str = ""
    details: str | None = None
    created_at: datetime | None = None

    @property
    def actor_name(self) -> str:
        """Name of the user who performed the action."""
        if self.user and self.user.name:
            return self.user.name
        return "User"
