"""Unit tests for EventNormalizer.

These verify:
- Core validation: required fields, date parsing, defaults
- Origin-specific adapters: tasks, team/study-group meetings, personal events
- try_normalize(): rejection without raising
"""

from datetime import datetime, timedelta, timezone

import pytest

from models.event import EventKind, EventOrigin, InvalidEventData
from models.normalizer import EventNormalizer, parse_instant
from tests.fixtures.core.events import (
    create_raw_meeting,
    create_raw_personal_event,
    create_raw_study_group,
    create_raw_task,
    create_raw_team,
)


@pytest.fixture
def normalizer() -> EventNormalizer:
    return EventNormalizer()


class TestParseInstant:
    """Test timestamp parsing."""

    def test_iso_with_z_suffix(self):
        """A trailing Z is read as UTC."""
        assert parse_instant("2025-03-10T15:00:00Z") == datetime(
            2025, 3, 10, 15, 0, tzinfo=timezone.utc
        )

    def test_iso_with_offset_kept(self):
        """Explicit offsets are preserved."""
        parsed = parse_instant("2025-03-10T15:00:00+02:00")
        assert parsed.utcoffset() == timedelta(hours=2)

    def test_naive_string_taken_as_utc(self):
        """Strings without an offset are taken to be UTC."""
        assert parse_instant("2025-03-10T15:00:00").tzinfo == timezone.utc

    def test_epoch_milliseconds(self):
        """Numbers are epoch milliseconds."""
        assert parse_instant(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert parse_instant(86_400_000) == datetime(1970, 1, 2, tzinfo=timezone.utc)

    @pytest.mark.parametrize(
        "value", ["not a date", "", float("nan"), float("inf"), True, None, [], {}]
    )
    def test_invalid_values_rejected(self, value):
        """Non-dates and non-finite numbers raise InvalidEventData."""
        with pytest.raises(InvalidEventData):
            parse_instant(value)


class TestNormalize:
    """Test the shared core validator."""

    def test_fills_defaults(self, normalizer):
        """Optional fields get defaults."""
        event = normalizer.normalize(
            {"_id": "e1", "title": "Read", "startAt": "2025-03-10T09:00:00Z", "endAt": "2025-03-10T10:00:00Z"}
        )

        assert event.id == "e1"
        assert event.description == ""
        assert event.location == ""
        assert event.completed is False
        assert event.cleared is False
        assert event.kind == EventKind.OTHER
        assert event.origin == EventOrigin.PERSONAL

    def test_accepts_start_date_aliases(self, normalizer):
        """startDate/endDate are accepted in place of startAt/endAt."""
        event = normalizer.normalize(create_raw_personal_event())
        assert event.start_at == datetime(2025, 3, 10, 18, 0, tzinfo=timezone.utc)

    def test_not_a_record_rejected(self, normalizer):
        """Non-mapping input is rejected."""
        with pytest.raises(InvalidEventData, match="not an object"):
            normalizer.normalize(["title", "start"])

    @pytest.mark.parametrize("missing", ["title", "startDate", "endDate"])
    def test_missing_required_field_rejected(self, normalizer, missing):
        """Records without title, start or end are rejected."""
        raw = create_raw_personal_event()
        del raw[missing]

        with pytest.raises(InvalidEventData, match="missing required fields"):
            normalizer.normalize(raw)

    def test_missing_id_rejected(self, normalizer):
        """Records without an id cannot be stored."""
        raw = create_raw_personal_event()
        del raw["_id"]

        with pytest.raises(InvalidEventData):
            normalizer.normalize(raw)

    def test_unparseable_date_rejected(self, normalizer):
        """Bad dates are reported as date parsing errors."""
        raw = create_raw_personal_event(start="yesterday-ish")

        with pytest.raises(InvalidEventData, match="Error parsing event dates"):
            normalizer.normalize(raw)

    def test_end_before_start_tolerated(self, normalizer):
        """Inverted intervals are passed through."""
        raw = create_raw_personal_event(start="2025-03-10T12:00:00Z", end="2025-03-10T11:00:00Z")

        event = normalizer.normalize(raw)
        assert event.end_at < event.start_at

    def test_unknown_kind_becomes_other(self, normalizer):
        """Unrecognized types render as "other"."""
        event = normalizer.normalize(create_raw_personal_event(type="yoga"))
        assert event.kind == EventKind.OTHER

    def test_unknown_source_rejected(self, normalizer):
        """An unknown source cannot be mapped to an origin."""
        with pytest.raises(InvalidEventData, match="Unknown event source"):
            normalizer.normalize(create_raw_personal_event(source="club"))

    def test_cleared_flag_honored(self, normalizer):
        """A cleared flag from the backend is kept."""
        event = normalizer.normalize(create_raw_personal_event(cleared=True))
        assert event.cleared is True

    @pytest.mark.parametrize(
        "value, expected",
        [("false", False), ("true", True), (0, False), (1, True), (None, False), ("", False)],
    )
    def test_flag_strings_parsed(self, normalizer, value, expected):
        event = normalizer.normalize(create_raw_personal_event(completed=value, cleared=value))

        assert event.completed is expected
        assert event.cleared is expected

    def test_unparseable_flag_rejected(self, normalizer):
        with pytest.raises(InvalidEventData, match="Invalid event data"):
            normalizer.normalize(create_raw_personal_event(completed="maybe"))

    def test_pure(self, normalizer):
        """Normalizing the same record twice yields equal events and leaves it untouched."""
        raw = create_raw_personal_event()
        snapshot = dict(raw)

        assert normalizer.normalize(raw) == normalizer.normalize(raw)
        assert raw == snapshot


class TestAdapters:
    """Test the origin-specific adapters."""

    def test_task_becomes_deadline(self, normalizer):
        """Tasks become zero-length events prefixed task-."""
        event = normalizer.from_task(create_raw_task(id=42, completed=True))

        assert event.id == "task-42"
        assert event.start_at == event.end_at
        assert event.kind == EventKind.OTHER
        assert event.from_task is True
        assert event.completed is True

    def test_team_task_keeps_team_origin(self, normalizer):
        """Team tasks keep their owning team."""
        event = normalizer.from_task(
            create_raw_task(source="team", sourceId="team-a", sourceName="Capstone Team")
        )

        assert event.origin == EventOrigin.TEAM
        assert event.origin_id == "team-a"
        assert event.origin_name == "Capstone Team"

    def test_task_without_due_date_rejected(self, normalizer):
        """Tasks need a due date."""
        with pytest.raises(InvalidEventData):
            normalizer.from_task(create_raw_task(due=None))

    def test_team_meeting(self, normalizer):
        """Team meetings are prefixed team- and carry the team name."""
        team = create_raw_team()
        event = normalizer.from_meeting(team["meetings"][0], team, EventOrigin.TEAM)

        assert event.id == "team-m1"
        assert event.kind == EventKind.MEETING
        assert event.origin == EventOrigin.TEAM
        assert event.origin_id == "team-a"
        assert event.origin_name == "Capstone Team"

    def test_study_group_meeting(self, normalizer):
        """Study-group meetings are prefixed study-."""
        group = create_raw_study_group()
        event = normalizer.from_meeting(group["meetings"][0], group, EventOrigin.STUDY_GROUP)

        assert event.id == "study-m1"
        assert event.origin == EventOrigin.STUDY_GROUP
        assert event.origin_name == "Calculus Crew"

    def test_meeting_requires_owner_origin(self, normalizer):
        """Meetings cannot be personal."""
        with pytest.raises(ValueError):
            normalizer.from_meeting(create_raw_meeting(), create_raw_team(), EventOrigin.PERSONAL)

    def test_personal_event_id_unprefixed(self, normalizer):
        """Personal ids are already unique and stay as they are."""
        event = normalizer.from_personal(create_raw_personal_event(id="abc123"))
        assert event.id == "abc123"

    def test_colliding_local_ids_disambiguated(self, normalizer):
        """Records sharing a local id get distinct ids."""
        team = create_raw_team(meetings=[create_raw_meeting(id="1")])
        group = create_raw_study_group(meetings=[create_raw_meeting(id="1")])

        ids = {
            normalizer.from_task(create_raw_task(id="1")).id,
            normalizer.from_meeting(team["meetings"][0], team, EventOrigin.TEAM).id,
            normalizer.from_meeting(group["meetings"][0], group, EventOrigin.STUDY_GROUP).id,
            normalizer.from_personal(create_raw_personal_event(id="1")).id,
        }
        assert ids == {"task-1", "team-1", "study-1", "1"}


class TestTryNormalize:
    """Test the non-raising wrapper."""

    def test_returns_event(self, normalizer):
        event = normalizer.try_normalize(normalizer.from_personal, create_raw_personal_event())
        assert event is not None

    def test_returns_none_for_invalid_record(self, normalizer):
        """Invalid records are dropped, not raised."""
        assert normalizer.try_normalize(normalizer.from_personal, {"title": "no dates"}) is None
