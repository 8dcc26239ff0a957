"""User-visible notifications produced by dashboard commands."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_serializer


class NotificationVariant(str, Enum):
    """Visual weight of a notification."""

    DEFAULT = "default"
    DESTRUCTIVE = "destructive"


class Notification(BaseModel):
    """A toast-style message describing the outcome of an action.

    Args:
        title: Headline.
        description: Optional detail line.
        variant: DESTRUCTIVE for failures, DEFAULT otherwise.
        created_at: When the notification was raised.
    """

    title: str = Field(description="Headline")
    description: str = Field(default="", description="Detail line")
    variant: NotificationVariant = Field(default=NotificationVariant.DEFAULT)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_serializer("created_at")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format string."""
        return dt.isoformat()

    @classmethod
    def error(cls, title: str, description: str = "") -> "Notification":
        return cls(title=title, description=description, variant=NotificationVariant.DESTRUCTIVE)
