"""Calendar endpoints.

These endpoints serve render-ready calendar projections and day views of
the aggregated event collection.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from pydantic import BaseModel

from api.dependencies import DashboardControllerDep
from api.models import EventListResponse
from models.calendar import CalendarInterval


router = APIRouter(
    prefix="/calendar",
    tags=["calendar"],
)


class CalendarResponse(BaseModel):
    """Response model for a calendar projection.

    Attributes:
        intervals: Intervals ordered by start, recurring occurrences included.
        window_start: First day recurring meetings were expanded over.
        window_end: Last day recurring meetings were expanded over.
        total_count: Number of intervals returned.
    """

    intervals: list[CalendarInterval]
    window_start: date
    window_end: date
    total_count: int


@router.get("", response_model=CalendarResponse)
async def get_calendar(
    controller: DashboardControllerDep,
    window_end: Optional[date] = Query(
        default=None, description="Last day to expand recurring meetings over"
    ),
    today: Optional[date] = Query(default=None, description="First day of the window"),
):
    """Project the current events and recurring meetings onto the calendar.

    Cleared events are not included.

    Raises:
        HTTPException: If window_end is before the first day of the window.
    """
    projector = controller.projector
    window_start = today or projector.today()
    window_end = window_end or projector.default_window_end(window_start)
    if window_end < window_start:
        raise HTTPException(
            status_code=400,
            detail="window_end must not be before the start of the window",
        )

    intervals = controller.calendar(window_end=window_end, today=window_start)
    return CalendarResponse(
        intervals=intervals,
        window_start=window_start,
        window_end=window_end,
        total_count=len(intervals),
    )


class DayViewResponse(EventListResponse):
    """Events starting on one day, with a display label for each.

    Attributes:
        time_labels: Event id -> time range such as ``3:00 PM - 4:00 PM``,
            or ``Due 3:00 PM`` for homework and study entries.
    """

    time_labels: dict[str, str]


@router.get("/day/{day}", response_model=DayViewResponse)
async def get_day(day: date, controller: DashboardControllerDep):
    """List every event starting on a day, cleared ones included."""
    events = controller.day_view(day)
    tz = controller.projector.tz
    return DayViewResponse(
        events=events,
        total_count=len(events),
        version=controller.aggregator.version,
        time_labels={event.id: event.time_label(tz) for event in events},
    )
