"""Aggregated event store behind the dashboard.

EventAggregator owns the single in-memory collection of Events. It fills
the collection from the backend, exposes ordered, filtered copies of it,
and applies personal-event mutations once the backend has confirmed them.
Nothing outside this class can modify the collection directly.
"""

import logging
from collections.abc import Iterable, Mapping
from datetime import date, time, timezone, tzinfo
from typing import TYPE_CHECKING, Any, Literal, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field, ValidationError

from client.models import DashboardPayload, TaskPayload
from models.calendar import RecurringMeetingRule
from models.event import (
    Event,
    EventNotFoundError,
    EventOrigin,
    IllegalMutation,
    InvalidEventData,
    PersonalEventDraft,
)
from models.normalizer import EventNormalizer

if TYPE_CHECKING:
    from client.client import AsyncBackendClient

logger = logging.getLogger(__name__)


PENDING_PREFIX = "pending-"

TaskFilter = Union[Literal["all", "completed", "pending"], EventOrigin]


class EventFilter(BaseModel):
    """Selection applied by EventAggregator.view().

    Args:
        exclude_cleared: Leave out cleared events (ignored when on_date is set).
        on_date: Only events starting on this day, cleared ones included.
        origin: Only events from this subsystem.
        completed: Only events with this completion flag.
    """

    exclude_cleared: bool = Field(default=True, description="Hide cleared events")
    on_date: Optional[date] = Field(default=None, description="Day-level view")
    origin: Optional[EventOrigin] = Field(default=None, description="Origin filter")
    completed: Optional[bool] = Field(default=None, description="Completion filter")

    def matches(self, event: Event, tz: tzinfo) -> bool:
        """Check whether an event is selected by this filter."""
        if self.on_date is not None:
            if not event.falls_on(self.on_date, tz):
                return False
        elif self.exclude_cleared and event.cleared:
            return False

        if self.origin is not None and event.origin != self.origin:
            return False

        if self.completed is not None and event.completed != self.completed:
            return False

        return True


def _parse_clock(value: Any) -> time:
    """Parse an ``HH:MM`` backend time string."""
    if isinstance(value, time):
        return value
    hours, minutes = str(value).strip().split(":")[:2]
    return time(int(hours), int(minutes))


class EventAggregator:
    """Merges the dashboard's event sources into one ordered collection.

    Sources are task deadlines, team meetings, study-group meetings and
    personal events, all delivered by ``GET /api/dashboard``. Records that
    fail normalization are dropped individually; they never abort a refresh.

    Attributes:
        version: Incremented on every change to the collection.
        tz: Time zone used for day-level views.
    """

    def __init__(
        self,
        client: "AsyncBackendClient",
        normalizer: Optional[EventNormalizer] = None,
        tz: tzinfo = timezone.utc,
    ) -> None:
        """Initialize an empty aggregator.

        Args:
            client: Backend client used for fetches and mutations.
            normalizer: Record normalizer (default: a new EventNormalizer).
            tz: Time zone used for day-level views.
        """
        self._client = client
        self._normalizer = normalizer or EventNormalizer()
        self.tz = tz
        self.version = 0

        self._events: dict[str, Event] = {}
        self._tasks: list[TaskPayload] = []
        self._rules: list[RecurringMeetingRule] = []

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self._events

    # Reading

    def get(self, event_id: str) -> Event:
        """Get a copy of one event.

        Raises:
            EventNotFoundError: If no event has this id.
        """
        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event.model_copy()

    def view(self, event_filter: Optional[EventFilter] = None) -> list[Event]:
        """Return events selected by a filter, ordered by start.

        Without a day filter, cleared events are left out. With ``on_date``
        every event starting that day is returned, cleared ones included.

        Args:
            event_filter: Selection to apply (default: exclude cleared).

        Returns:
            Copies of the selected events sorted by start_at; ties keep
            insertion order.
        """
        event_filter = event_filter or EventFilter()
        selected = [
            event.model_copy()
            for event in self._events.values()
            if event_filter.matches(event, self.tz)
        ]
        selected.sort(key=lambda event: event.start_at)
        return selected

    def all_events(self) -> list[Event]:
        """Every event, cleared ones included, ordered by start."""
        return self.view(EventFilter(exclude_cleared=False))

    def tasks(self, task_filter: TaskFilter = "all") -> list[TaskPayload]:
        """Return tasks from the last refresh.

        Args:
            task_filter: "all", "completed", "pending", or an EventOrigin.

        Returns:
            Copies of the matching tasks in backend order.
        """
        if task_filter == "all":
            selected = self._tasks
        elif task_filter == "completed":
            selected = [task for task in self._tasks if task.completed]
        elif task_filter == "pending":
            selected = [task for task in self._tasks if not task.completed]
        else:
            origin = EventOrigin(task_filter)
            selected = [task for task in self._tasks if task.source == origin.value]
        return [task.model_copy() for task in selected]

    @property
    def recurring_rules(self) -> list[RecurringMeetingRule]:
        """Weekly meeting rules of the study groups from the last refresh."""
        return [rule.model_copy() for rule in self._rules]

    # Refresh

    async def refresh(self) -> list[Event]:
        """Reload every source and replace the collection.

        Returns:
            All events after the refresh, ordered by start.

        Raises:
            BackendClientError: If the dashboard fetch itself fails; the
                collection is left untouched in that case.
        """
        payload = await self._client.dashboard.fetch()
        events = self._collect(payload)

        self._tasks = self._collect_tasks(payload.tasks)
        self._rules = self._collect_rules(payload.study_groups)
        self._replace_all(events)

        logger.info(
            f"Refreshed dashboard: {len(events)} events, {len(self._tasks)} tasks, "
            f"{len(self._rules)} recurring rules (version {self.version})"
        )
        return self.all_events()

    def _collect(self, payload: DashboardPayload) -> list[Event]:
        normalizer = self._normalizer
        candidates: list[Optional[Event]] = []

        for task in payload.tasks:
            candidates.append(normalizer.try_normalize(normalizer.from_task, task))

        for origin, owners in (
            (EventOrigin.TEAM, payload.teams),
            (EventOrigin.STUDY_GROUP, payload.study_groups),
        ):
            for owner in owners:
                if not isinstance(owner, Mapping):
                    logger.warning(f"Skipping malformed {origin.value} record: {owner!r}")
                    continue
                for meeting in owner.get("meetings") or []:
                    candidates.append(
                        normalizer.try_normalize(normalizer.from_meeting, meeting, owner, origin)
                    )

        for raw in payload.events:
            candidates.append(normalizer.try_normalize(normalizer.from_personal, raw))

        events: list[Event] = []
        seen: set[str] = set()
        for event in candidates:
            if event is None:
                continue
            if event.id in seen:
                logger.warning(f"Dropping duplicate event id {event.id}")
                continue
            seen.add(event.id)
            events.append(event)
        return events

    def _collect_tasks(self, raw_tasks: Iterable[Any]) -> list[TaskPayload]:
        tasks = []
        for raw in raw_tasks:
            try:
                tasks.append(TaskPayload.model_validate(raw))
            except ValidationError as e:
                logger.warning(f"Skipping malformed task: {e.error_count()} validation errors")
        return tasks

    def _collect_rules(self, study_groups: Iterable[Any]) -> list[RecurringMeetingRule]:
        rules = []
        for group in study_groups:
            if not isinstance(group, Mapping):
                continue
            days = group.get("meetingDays")
            start = group.get("meetingTime")
            if not days or not start:
                continue
            try:
                end = group.get("meetingEndTime")
                rules.append(
                    RecurringMeetingRule(
                        origin=EventOrigin.STUDY_GROUP,
                        origin_id=str(group.get("_id") or group.get("id") or ""),
                        origin_name=group.get("name"),
                        days_of_week=days,
                        start_time=_parse_clock(start),
                        end_time=_parse_clock(end) if end else None,
                        meeting_type=group.get("meetingType") or "online",
                        location=group.get("meetingLocation"),
                    )
                )
            except (ValueError, ValidationError) as e:
                logger.warning(f"Skipping meeting schedule of group {group.get('name')!r}: {e}")
        return rules

    # Personal event mutations

    async def add_personal(self, draft: PersonalEventDraft) -> Event:
        """Create a personal event and insert it without a full refresh.

        The draft is inserted immediately as a pending record. Once the
        backend confirms, the pending record is replaced by the confirmed
        event; if the request fails or is cancelled it is removed again.

        Args:
            draft: The new event's fields.

        Returns:
            The confirmed event.

        Raises:
            BackendClientError: If the backend request fails.
            InvalidEventData: If the backend response cannot be normalized.
        """
        sent = draft.to_payload()
        placeholder = Event(
            id=f"{PENDING_PREFIX}{uuid4().hex}",
            title=draft.title,
            description=draft.description,
            start_at=draft.start_at,
            end_at=draft.end_at,
            origin=EventOrigin.PERSONAL,
            kind=draft.kind,
            location=draft.location,
            pending=True,
        )
        self._insert(placeholder)

        try:
            response = await self._client.events.create(sent)
            if not isinstance(response, Mapping) or not (
                response.get("_id") or response.get("id")
            ):
                raise InvalidEventData("Server returned invalid response format", response)
            confirmed = self._normalizer.from_personal(
                {**sent, **response, "source": EventOrigin.PERSONAL.value}
            )
        except BaseException:
            self._discard(placeholder.id)
            logger.warning(f"Rolled back pending event {placeholder.id}")
            raise

        self._confirm(placeholder.id, confirmed)
        logger.info(f"Added personal event {confirmed.id}")
        return confirmed.model_copy()

    async def mark_complete(self, event_id: str) -> Event:
        """Mark a personal event as completed once the backend confirms.

        Raises:
            EventNotFoundError: If no event has this id.
            IllegalMutation: If the event is not a confirmed personal event.
            BackendClientError: If the backend request fails.
        """
        self._require_mutable(event_id, "complete")
        await self._client.events.complete(event_id)
        return self._patch(event_id, completed=True)

    async def clear(self, event_id: str) -> Event:
        """Soft-delete a personal event from the calendar once confirmed.

        Raises:
            EventNotFoundError: If no event has this id.
            IllegalMutation: If the event is not a confirmed personal event.
            BackendClientError: If the backend request fails.
        """
        self._require_mutable(event_id, "clear")
        await self._client.events.clear(event_id)
        return self._patch(event_id, cleared=True)

    async def unclear(self, event_id: str) -> Event:
        """Restore a cleared personal event once confirmed.

        Raises:
            EventNotFoundError: If no event has this id.
            IllegalMutation: If the event is not a confirmed personal event.
            BackendClientError: If the backend request fails.
        """
        self._require_mutable(event_id, "unclear")
        await self._client.events.unclear(event_id)
        return self._patch(event_id, cleared=False)

    async def delete(self, event_id: str) -> None:
        """Remove a personal event once the backend confirms the deletion.

        Raises:
            EventNotFoundError: If no event has this id.
            IllegalMutation: If the event is not a confirmed personal event.
            BackendClientError: If the backend request fails.
        """
        self._require_mutable(event_id, "delete")
        await self._client.events.delete(event_id)
        if self._discard(event_id):
            logger.info(f"Deleted personal event {event_id}")

    async def toggle_task(self, task_id: str) -> list[Event]:
        """Toggle a task's completion and reload the dashboard.

        Args:
            task_id: Backend id of the task (without the ``task-`` prefix).

        Returns:
            All events after the follow-up refresh.

        Raises:
            KeyError: If the task is not part of the last refresh.
            BackendClientError: If either backend call fails.
        """
        task = next((task for task in self._tasks if task.id == task_id), None)
        if task is None:
            raise KeyError(f"Task '{task_id}' not found")
        await self._client.dashboard.toggle_task(task)
        return await self.refresh()

    # Internal collection management

    def _require_mutable(self, event_id: str, operation: str) -> Event:
        event = self._events.get(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if event.pending:
            raise IllegalMutation(event_id, operation, "event is still being created")
        if event.from_task:
            raise IllegalMutation(event_id, operation, "tasks are toggled, not edited")
        if not event.is_personal:
            raise IllegalMutation(
                event_id, operation, f"event belongs to a {event.origin.value}"
            )
        return event

    def _patch(self, event_id: str, **changes: Any) -> Event:
        # A refresh may have replaced the record while the request was in flight
        event = self._events.get(event_id)
        if event is None:
            logger.warning(f"Event {event_id} vanished before its update was applied")
            raise EventNotFoundError(event_id)
        for field_name, value in changes.items():
            setattr(event, field_name, value)
        self.version += 1
        logger.info(f"Updated event {event_id}: {changes}")
        return event.model_copy()

    def _insert(self, event: Event) -> None:
        self._events[event.id] = event
        self.version += 1

    def _discard(self, event_id: str) -> bool:
        if self._events.pop(event_id, None) is None:
            return False
        self.version += 1
        return True

    def _confirm(self, placeholder_id: str, confirmed: Event) -> None:
        if confirmed.id in self._events:
            # A refresh already delivered the confirmed record; last writer wins
            self._events.pop(placeholder_id, None)
            self._events[confirmed.id] = confirmed
        elif placeholder_id in self._events:
            self._events = {
                (confirmed.id if key == placeholder_id else key): (
                    confirmed if key == placeholder_id else value
                )
                for key, value in self._events.items()
            }
        else:
            self._events[confirmed.id] = confirmed
        self.version += 1

    def _replace_all(self, events: Iterable[Event]) -> None:
        self._events = {event.id: event for event in events}
        self.version += 1
