"""Canonical dashboard event model.

Every time-bound record shown on the dashboard (task deadlines, team
meetings, study-group meetings, personal events) is normalized into an
Event before it enters the aggregated collection.
"""

from datetime import date, datetime, tzinfo
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator


class EventOrigin(str, Enum):
    """Subsystem that owns an event's lifecycle."""

    TEAM = "team"
    STUDY_GROUP = "study-group"
    PERSONAL = "personal"


class EventKind(str, Enum):
    """What an event represents."""

    HOMEWORK = "homework"
    STUDY = "study"
    MEETING = "meeting"
    OTHER = "other"


class InvalidEventData(ValueError):
    """Raised when a raw backend record cannot be normalized into an Event.

    Args:
        message: Why the record was rejected.
        raw: The offending record, kept for logging.
    """

    def __init__(self, message: str, raw: object = None):
        self.message = message
        self.raw = raw
        super().__init__(message)


class IllegalMutation(Exception):
    """Raised when a mutation is attempted on an event that does not allow it.

    Only confirmed personal events can be completed, cleared, restored or
    deleted from the dashboard.

    Args:
        event_id: The event the mutation targeted.
        operation: Name of the rejected operation.
        reason: Why the mutation is not allowed.
    """

    def __init__(self, event_id: str, operation: str, reason: str):
        self.event_id = event_id
        self.operation = operation
        self.reason = reason
        super().__init__(f"Cannot {operation} event '{event_id}': {reason}")


class EventNotFoundError(KeyError):
    """Raised when an operation targets an event id that is not in the collection."""

    def __init__(self, event_id: str):
        self.event_id = event_id
        super().__init__(event_id)

    def __str__(self) -> str:
        return f"Event '{self.event_id}' not found"


def format_clock(moment: datetime) -> str:
    """Format a datetime as a 12-hour clock string such as ``3:05 PM``."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d} {suffix}"


class Event(BaseModel):
    """A single entry of the unified dashboard timeline.

    Args:
        id: Identifier unique within the aggregated collection.
        title: Event title.
        description: Free-form description.
        start_at: Start instant (timezone-aware).
        end_at: End instant (timezone-aware).
        origin: Which subsystem owns the event.
        origin_id: Id of the owning team or study group, or the event id for personal events.
        origin_name: Display name of the owning team or study group.
        kind: What the event represents.
        location: Where it takes place.
        completed: Completion flag (personal events only).
        cleared: Soft-delete flag; cleared events leave the calendar grid only.
        from_task: Whether the event was derived from a task deadline.
        pending: Whether the event is an optimistic insert awaiting confirmation.
    """

    id: str = Field(min_length=1, description="Unique event identifier")
    title: str = Field(description="Event title")
    description: str = Field(default="", description="Event description")
    start_at: datetime = Field(description="Start instant")
    end_at: datetime = Field(description="End instant")
    origin: EventOrigin = Field(default=EventOrigin.PERSONAL, description="Owning subsystem")
    origin_id: str = Field(default="", description="Owning team/group id")
    origin_name: Optional[str] = Field(default=None, description="Owning team/group name")
    kind: EventKind = Field(default=EventKind.OTHER, description="Event kind")
    location: Optional[str] = Field(default="", description="Event location")
    completed: bool = Field(default=False, description="Completion flag")
    cleared: bool = Field(default=False, description="Soft-delete flag")
    from_task: bool = Field(default=False, description="Derived from a task deadline")
    pending: bool = Field(default=False, description="Awaiting server confirmation")

    @field_validator("start_at", "end_at")
    @classmethod
    def validate_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware."""
        if v.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware (recommend UTC)")
        return v

    @field_serializer("start_at", "end_at")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format string."""
        return dt.isoformat()

    @property
    def is_personal(self) -> bool:
        """Whether the event belongs to the user rather than a team or group."""
        return self.origin == EventOrigin.PERSONAL

    @property
    def is_mutable(self) -> bool:
        """Whether complete/clear/unclear/delete may be applied to this event."""
        return self.is_personal and not self.from_task and not self.pending

    def falls_on(self, day: date, tz: tzinfo) -> bool:
        """Check whether the event starts on a calendar day.

        Args:
            day: The calendar day.
            tz: Time zone the day is expressed in.

        Returns:
            True if start_at, seen in tz, falls on day.
        """
        return self.start_at.astimezone(tz).date() == day

    def time_label(self, tz: Optional[tzinfo] = None) -> str:
        """Human-readable time range for list views.

        Homework and study entries are deadlines, so only the due time is shown.

        Args:
            tz: Time zone to render in (default: the event's own offset).

        Returns:
            A label such as ``Due 3:00 PM`` or ``3:00 PM - 4:00 PM``.
        """
        start = self.start_at.astimezone(tz) if tz else self.start_at
        end = self.end_at.astimezone(tz) if tz else self.end_at
        if self.kind in (EventKind.HOMEWORK, EventKind.STUDY):
            return f"Due {format_clock(start)}"
        return f"{format_clock(start)} - {format_clock(end)}"


class PersonalEventDraft(BaseModel):
    """User input for a new personal event.

    Args:
        title: Event title.
        description: Event description.
        start_at: Start instant.
        end_at: End instant.
        kind: Event kind.
        custom_type: Free-text type label, only kept for kind "other".
        location: Where it takes place.
    """

    title: str = Field(min_length=1, description="Event title")
    description: str = Field(default="", description="Event description")
    start_at: datetime = Field(description="Start instant")
    end_at: datetime = Field(description="End instant")
    kind: EventKind = Field(default=EventKind.OTHER, description="Event kind")
    custom_type: Optional[str] = Field(default=None, description="Custom type label")
    location: Optional[str] = Field(default="", description="Event location")

    @field_validator("start_at", "end_at")
    @classmethod
    def validate_timezone_aware(cls, v: datetime) -> datetime:
        """Ensure datetime is timezone-aware."""
        if v.tzinfo is None:
            raise ValueError("Datetime must be timezone-aware (recommend UTC)")
        return v

    def to_payload(self) -> dict:
        """Convert to the backend's create-event body."""
        payload = {
            "title": self.title,
            "description": self.description,
            "startDate": self.start_at.isoformat(),
            "endDate": self.end_at.isoformat(),
            "type": self.kind.value,
            "location": self.location or "",
            "source": EventOrigin.PERSONAL.value,
            "completed": False,
        }
        if self.kind == EventKind.OTHER and self.custom_type:
            payload["customType"] = self.custom_type
        return payload
