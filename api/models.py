"""Shared request and response models for API endpoints.

Route-specific models live next to their routes; the ones here are used
by more than one route module.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field

from models.event import Event


CommandStatus = Literal["ok", "ignored"]


class EventListResponse(BaseModel):
    """A list of events plus the store version it was read at.

    Attributes:
        events: The selected events, ordered by start.
        total_count: Number of events returned.
        version: Aggregator version when the list was built.
        status: "ignored" when the triggering command was a duplicate.
    """

    events: list[Event]
    total_count: int
    version: int
    status: CommandStatus = "ok"

    @classmethod
    def build(
        cls, events: list[Event], version: int, status: CommandStatus = "ok"
    ) -> "EventListResponse":
        return cls(events=events, total_count=len(events), version=version, status=status)


class EventCommandResponse(BaseModel):
    """Result of a command targeting a single event.

    Attributes:
        status: "ok", or "ignored" when an identical command was in flight.
        event: The event after the command (None for deletes and ignored commands).
        message: Human-readable description of the result.
    """

    status: CommandStatus
    event: Optional[Event] = None
    message: str = Field(default="")
