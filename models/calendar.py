"""Calendar projection of the aggregated event collection.

Turns Events and weekly recurring meeting rules into render-ready
CalendarIntervals. Recurring meetings are never stored; they are expanded
over a bounded window every time a projection is requested.
"""

from collections.abc import Callable, Iterable
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

from models.event import Event, EventKind, EventOrigin


DayName = Literal[
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
]

# Indexed by date.weekday()
DAY_NAMES: tuple[str, ...] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

DEFAULT_HORIZON_MONTHS = 3
DEFAULT_MEETING_DURATION = timedelta(hours=1)


class EventCategory(str, Enum):
    """Rendering category of a calendar interval."""

    TEAM = "team"
    STUDY_GROUP = "study-group"
    HOMEWORK = "homework"
    STUDY = "study"
    MEETING = "meeting"
    OTHER = "other"
    DONE = "done"


CATEGORY_TABLE: dict[tuple[EventOrigin, EventKind], EventCategory] = {
    **{(EventOrigin.TEAM, kind): EventCategory.TEAM for kind in EventKind},
    **{(EventOrigin.STUDY_GROUP, kind): EventCategory.STUDY_GROUP for kind in EventKind},
    (EventOrigin.PERSONAL, EventKind.HOMEWORK): EventCategory.HOMEWORK,
    (EventOrigin.PERSONAL, EventKind.STUDY): EventCategory.STUDY,
    (EventOrigin.PERSONAL, EventKind.MEETING): EventCategory.MEETING,
    (EventOrigin.PERSONAL, EventKind.OTHER): EventCategory.OTHER,
}

CATEGORY_COLORS: dict[EventCategory, str] = {
    EventCategory.TEAM: "#6366f1",
    EventCategory.STUDY_GROUP: "#a855f7",
    EventCategory.HOMEWORK: "#3b82f6",
    EventCategory.STUDY: "#22c55e",
    EventCategory.MEETING: "#f97316",
    EventCategory.OTHER: "#0ea5e9",
    EventCategory.DONE: "#e5e7eb",
}


def category_for(origin: EventOrigin, kind: EventKind, completed: bool) -> EventCategory:
    """Look up the rendering category; completed events are always DONE."""
    if completed:
        return EventCategory.DONE
    return CATEGORY_TABLE[(origin, kind)]


def add_months(day: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the month."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    next_month_start = date(year + month // 12, month % 12 + 1, 1)
    last_day = (next_month_start - timedelta(days=1)).day
    return date(year, month, min(day.day, last_day))


class RecurringMeetingRule(BaseModel):
    """A weekly recurring commitment, such as a study group's regular meeting.

    Args:
        origin: Owning subsystem (usually STUDY_GROUP).
        origin_id: Id of the owning team or group.
        origin_name: Display name of the owner.
        days_of_week: Weekdays on which the meeting happens.
        start_time: Local start time.
        end_time: Local end time (default: one hour after start).
        meeting_type: Meeting format (online, in-person, hybrid).
        location: Where the meeting happens.
    """

    origin: EventOrigin = Field(default=EventOrigin.STUDY_GROUP, description="Owning subsystem")
    origin_id: str = Field(description="Owner id")
    origin_name: Optional[str] = Field(default=None, description="Owner display name")
    days_of_week: set[DayName] = Field(description="Meeting weekdays")
    start_time: time = Field(description="Local start time")
    end_time: Optional[time] = Field(default=None, description="Local end time")
    meeting_type: str = Field(default="online", description="Meeting format")
    location: Optional[str] = Field(default=None, description="Meeting location")

    @field_validator("days_of_week", mode="before")
    @classmethod
    def normalize_day_names(cls, days):
        """Accept day names in any capitalization."""
        if isinstance(days, (list, tuple, set, frozenset)):
            return {str(day).strip().capitalize() for day in days}
        return days

    def occurs_on(self, day: date) -> bool:
        """Check whether the rule has an occurrence on a day."""
        return DAY_NAMES[day.weekday()] in self.days_of_week

    def occurrence_bounds(self, day: date, tz: tzinfo) -> tuple[datetime, datetime]:
        """Compute the start and end of the occurrence on a day.

        Args:
            day: The occurrence day.
            tz: Time zone the rule's times are expressed in.

        Returns:
            Tuple of (start, end).
        """
        start = datetime.combine(day, self.start_time, tzinfo=tz)
        if self.end_time is None:
            return start, start + DEFAULT_MEETING_DURATION
        return start, datetime.combine(day, self.end_time, tzinfo=tz)


class CalendarInterval(BaseModel):
    """A render-ready block on the calendar grid.

    Args:
        id: Interval id (the event id, or a derived id for recurring occurrences).
        title: Display title.
        start: Interval start.
        end: Interval end.
        origin: Owning subsystem.
        origin_id: Owner id.
        origin_name: Owner display name.
        kind: Event kind.
        location: Location, if any.
        completed: Completion flag.
        category: Rendering category.
        color: Rendering color for the category.
        recurring: Whether the interval is a materialized recurring occurrence.
    """

    id: str
    title: str
    start: datetime
    end: datetime
    origin: EventOrigin
    origin_id: str
    origin_name: Optional[str] = None
    kind: EventKind
    location: Optional[str] = None
    completed: bool = False
    category: EventCategory
    color: str
    recurring: bool = False

    @field_serializer("start", "end")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime to ISO format string."""
        return dt.isoformat()

    @classmethod
    def from_event(cls, event: Event) -> "CalendarInterval":
        """Build an interval from an aggregated Event."""
        category = category_for(event.origin, event.kind, event.completed)
        return cls(
            id=event.id,
            title=event.title,
            start=event.start_at,
            end=event.end_at,
            origin=event.origin,
            origin_id=event.origin_id,
            origin_name=event.origin_name,
            kind=event.kind,
            location=event.location,
            completed=event.completed,
            category=category,
            color=CATEGORY_COLORS[category],
        )


class CalendarProjector:
    """Derives calendar intervals from events and recurring rules.

    Projection is a pure function of its inputs: nothing about recurring
    occurrences is cached between calls.

    Attributes:
        horizon_months: Default expansion window for recurring rules.
        tz: Time zone used for "today" and for rule times.
    """

    def __init__(
        self,
        horizon_months: int = DEFAULT_HORIZON_MONTHS,
        tz: tzinfo = timezone.utc,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the projector.

        Args:
            horizon_months: Months ahead to expand recurring rules by default.
            tz: Time zone for rule times and day boundaries.
            clock: Returns the current time (default: datetime.now(tz)).
        """
        if horizon_months < 1:
            raise ValueError(f"horizon_months must be positive, got {horizon_months}")
        self.horizon_months = horizon_months
        self.tz = tz
        self._clock = clock or (lambda: datetime.now(self.tz))

    def today(self) -> date:
        """Current calendar day in the projector's time zone."""
        return self._clock().astimezone(self.tz).date()

    def default_window_end(self, today: Optional[date] = None) -> date:
        """Last day of the default expansion window."""
        return add_months(today or self.today(), self.horizon_months)

    def project(
        self,
        events: Iterable[Event],
        recurring_rules: Iterable[RecurringMeetingRule] = (),
        window_end: Optional[date] = None,
        today: Optional[date] = None,
    ) -> list[CalendarInterval]:
        """Project events and recurring rules onto the calendar.

        Cleared events are left out. Each rule is expanded over every day
        from today through window_end, inclusive.

        Args:
            events: Aggregated events.
            recurring_rules: Weekly rules to materialize.
            window_end: Last day to expand rules over (default: today + horizon).
            today: First day to expand rules over (default: the clock's today).

        Returns:
            Intervals ordered by start; ties keep input order.
        """
        first_day = today or self.today()
        last_day = window_end or self.default_window_end(first_day)

        intervals = [
            CalendarInterval.from_event(event) for event in events if not event.cleared
        ]
        for rule in recurring_rules:
            intervals.extend(self.expand_rule(rule, first_day, last_day))

        intervals.sort(key=lambda interval: interval.start)
        return intervals

    def expand_rule(
        self, rule: RecurringMeetingRule, first_day: date, last_day: date
    ) -> list[CalendarInterval]:
        """Materialize one rule's occurrences between two days, inclusive.

        Args:
            rule: The weekly rule.
            first_day: First day to consider.
            last_day: Last day to consider.

        Returns:
            One interval per matching day, in date order.
        """
        category = category_for(rule.origin, EventKind.MEETING, completed=False)
        occurrences = []
        current = first_day
        while current <= last_day:
            if rule.occurs_on(current):
                start, end = rule.occurrence_bounds(current, self.tz)
                occurrences.append(
                    CalendarInterval(
                        id=f"meeting-{rule.origin_id}-{start.isoformat()}",
                        title=f"{rule.meeting_type} Meeting",
                        start=start,
                        end=end,
                        origin=rule.origin,
                        origin_id=rule.origin_id,
                        origin_name=rule.origin_name,
                        kind=EventKind.MEETING,
                        location=rule.location,
                        category=category,
                        color=CATEGORY_COLORS[category],
                        recurring=True,
                    )
                )
            current += timedelta(days=1)
        return occurrences
