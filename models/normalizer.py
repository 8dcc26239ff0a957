"""Conversion of raw backend records into canonical Events.

The backend returns four differently shaped record types. Each has an
adapter here that reshapes it and hands it to ``EventNormalizer.normalize``,
the shared validator. Normalization is pure: the only side effect is logging.
"""

import logging
import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ValidationError

from models.event import Event, EventKind, EventOrigin, InvalidEventData

logger = logging.getLogger(__name__)


# Id prefixes that keep ids from different sources from colliding
TASK_PREFIX = "task-"
TEAM_PREFIX = "team-"
STUDY_GROUP_PREFIX = "study-"


def parse_instant(value: Any) -> datetime:
    """Parse a backend timestamp into a timezone-aware datetime.

    Accepts ISO 8601 strings (a trailing ``Z`` is read as UTC), datetime
    objects, and numbers interpreted as epoch milliseconds. Naive values are
    taken to be UTC.

    Args:
        value: The raw timestamp.

    Returns:
        The parsed instant.

    Raises:
        InvalidEventData: If the value is not a valid date.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, bool):
        raise InvalidEventData(f"Invalid date: {value!r}")
    elif isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise InvalidEventData(f"Invalid date: {value!r}")
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as e:
            raise InvalidEventData(f"Invalid date: {value!r}") from e
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidEventData(f"Invalid date: {value!r}") from e
    else:
        raise InvalidEventData(f"Invalid date: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    """Return the first non-empty value among keys."""
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _flag(raw: Mapping[str, Any], key: str) -> Any:
    # Left for pydantic to parse, so "false" and 0 read as False
    value = _first(raw, key)
    return False if value is None else value


def _coerce_origin(value: Any, default: EventOrigin) -> EventOrigin:
    if value is None:
        return default
    try:
        return EventOrigin(value)
    except ValueError as e:
        raise InvalidEventData(f"Unknown event source: {value!r}") from e


def _coerce_kind(value: Any) -> EventKind:
    # Unknown kinds (e.g. custom types) render as "other"
    try:
        return EventKind(value) if value else EventKind.OTHER
    except ValueError:
        return EventKind.OTHER


class EventNormalizer:
    """Validates raw records and builds canonical Events.

    Example:
        normalizer = EventNormalizer()
        event = normalizer.from_task({"id": "7", "title": "Essay", "dueDate": "2025-03-01T12:00:00Z"})
        assert event.id == "task-7"
    """

    def normalize(
        self, raw: Any, origin_hint: EventOrigin = EventOrigin.PERSONAL
    ) -> Event:
        """Validate a record and convert it into an Event.

        The record uses backend field names: ``_id``/``id``, ``title``,
        ``startAt``/``startDate``, ``endAt``/``endDate``, and optionally
        ``description``, ``source``, ``sourceId``, ``sourceName``, ``type``,
        ``location``, ``completed``, ``cleared``.

        Args:
            raw: The raw record.
            origin_hint: Origin to use when the record carries no ``source``.

        Returns:
            The normalized Event.

        Raises:
            InvalidEventData: If the record is not a mapping, lacks title,
                start, end or id, or has unparseable dates.
        """
        if not isinstance(raw, Mapping):
            raise InvalidEventData("Invalid event data: not an object", raw)

        title = raw.get("title")
        start_raw = _first(raw, "startAt", "startDate")
        end_raw = _first(raw, "endAt", "endDate")
        if not title or start_raw is None or end_raw is None:
            raise InvalidEventData("Invalid event data: missing required fields", raw)

        event_id = _first(raw, "_id", "id")
        if event_id is None:
            raise InvalidEventData("Invalid event data: missing id", raw)

        try:
            start_at = parse_instant(start_raw)
            end_at = parse_instant(end_raw)
        except InvalidEventData as e:
            raise InvalidEventData(f"Error parsing event dates: {e.message}", raw) from e

        if end_at < start_at:
            # Tolerated; calendar consumers decide how to render it
            logger.debug(f"Event {event_id} ends before it starts")

        try:
            return Event(
                id=str(event_id),
                title=str(title),
                description=str(raw.get("description") or ""),
                start_at=start_at,
                end_at=end_at,
                origin=_coerce_origin(raw.get("source"), origin_hint),
                origin_id=str(_first(raw, "sourceId", "_id", "id")),
                origin_name=raw.get("sourceName") or "",
                kind=_coerce_kind(raw.get("type")),
                location=raw.get("location") or "",
                completed=_flag(raw, "completed"),
                cleared=_flag(raw, "cleared"),
                from_task=_flag(raw, "fromTask"),
            )
        except ValidationError as e:
            raise InvalidEventData(f"Invalid event data: {e.errors()[0]['msg']}", raw) from e

    def from_task(self, task: Any) -> Event:
        """Convert a task into a zero-length deadline event.

        Args:
            task: Raw task with ``id``, ``title``, ``dueDate`` and ``source`` fields.

        Returns:
            Event whose start and end are the due date, id prefixed ``task-``.

        Raises:
            InvalidEventData: If the task is malformed.
        """
        if not isinstance(task, Mapping):
            raise InvalidEventData("Invalid task data: not an object", task)

        task_id = _first(task, "id", "_id")
        if task_id is None:
            raise InvalidEventData("Invalid task data: missing id", task)

        due = task.get("dueDate")
        return self.normalize(
            {
                "id": f"{TASK_PREFIX}{task_id}",
                "title": task.get("title"),
                "description": task.get("description"),
                "startAt": due,
                "endAt": due,
                "source": task.get("source"),
                "sourceId": task.get("sourceId"),
                "sourceName": task.get("sourceName"),
                "type": EventKind.OTHER.value,
                "completed": task.get("completed", False),
                "fromTask": True,
            },
            origin_hint=EventOrigin.PERSONAL,
        )

    def from_meeting(self, meeting: Any, owner: Mapping[str, Any], origin: EventOrigin) -> Event:
        """Convert a team or study-group meeting into an Event.

        Args:
            meeting: Raw meeting with ``_id``, ``title``, ``startDate``, ``endDate``.
            owner: The team or study group embedding the meeting.
            origin: EventOrigin.TEAM or EventOrigin.STUDY_GROUP.

        Returns:
            Event of kind meeting, id prefixed ``team-`` or ``study-``.

        Raises:
            InvalidEventData: If the meeting is malformed.
            ValueError: If origin is PERSONAL.
        """
        if origin == EventOrigin.PERSONAL:
            raise ValueError("Meetings belong to a team or study group")
        if not isinstance(meeting, Mapping):
            raise InvalidEventData("Invalid meeting data: not an object", meeting)

        meeting_id = _first(meeting, "_id", "id")
        if meeting_id is None:
            raise InvalidEventData("Invalid meeting data: missing id", meeting)

        prefix = TEAM_PREFIX if origin == EventOrigin.TEAM else STUDY_GROUP_PREFIX
        return self.normalize(
            {
                "id": f"{prefix}{meeting_id}",
                "title": meeting.get("title"),
                "description": meeting.get("description"),
                "startAt": _first(meeting, "startAt", "startDate"),
                "endAt": _first(meeting, "endAt", "endDate"),
                "source": origin.value,
                "sourceId": _first(owner, "_id", "id"),
                "sourceName": owner.get("name"),
                "type": EventKind.MEETING.value,
                "location": meeting.get("location"),
            },
            origin_hint=origin,
        )

    def from_personal(self, raw: Any) -> Event:
        """Convert a personal event; its backend id is already globally unique."""
        return self.normalize(raw, origin_hint=EventOrigin.PERSONAL)

    def try_normalize(self, adapter, *args: Any) -> Optional[Event]:
        """Run an adapter, returning None instead of raising for bad records.

        Args:
            adapter: One of the ``from_*`` methods.
            *args: Arguments for the adapter.

        Returns:
            The Event, or None if the record was rejected.
        """
        try:
            return adapter(*args)
        except InvalidEventData as e:
            logger.warning(f"Dropping invalid record: {e.message}")
            logger.debug(f"Rejected record: {e.raw!r}")
            return None
