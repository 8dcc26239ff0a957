"""Helper functions for API integration tests.

This module provides convenience functions for building request bodies and
for seeding the fake backend before a refresh.
"""

from datetime import datetime, timedelta
from typing import Any, Optional

from tests.fixtures.api import FIXED_NOW
from tests.fixtures.backend import FakeBackend
from tests.fixtures.core.events import (
    create_dashboard_payload,
    create_raw_personal_event,
    create_raw_task,
    create_raw_team,
)


def make_draft_request(
    title: str = "Flashcards",
    start_at: Optional[datetime] = None,
    duration: timedelta = timedelta(hours=1),
    kind: str = "study",
    **extra: Any,
) -> dict[str, Any]:
    """Create a POST /events request body.

    Args:
        title: Event title.
        start_at: Start instant (default: one day after FIXED_NOW).
        duration: Event length.
        kind: Event kind ("homework", "study", "meeting" or "other").
        **extra: Additional draft fields, e.g. location or custom_type.

    Returns:
        Request dictionary ready for client.post("/events", json=...).
    """
    start_at = start_at or FIXED_NOW + timedelta(days=1)
    return {
        "title": title,
        "start_at": start_at.isoformat(),
        "end_at": (start_at + duration).isoformat(),
        "kind": kind,
        **extra,
    }


def seed_backend(backend: FakeBackend) -> None:
    """Load a personal event, a team meeting and a team task into the backend.

    After a refresh the aggregated ids are "p1", "team-m1" and "task-t1".
    """
    backend.payload = create_dashboard_payload(
        tasks=[create_raw_task(source="team", sourceId="team-a", sourceName="Capstone Team")],
        events=[create_raw_personal_event(id="p1")],
        teams=[create_raw_team()],
    )
