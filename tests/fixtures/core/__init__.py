"""Core fixtures."""

from tests.fixtures.core.events import (
    PERSONAL_EVENT,
    TASK_DEADLINE,
    TEAM_MEETING,
    create_dashboard_payload,
    create_event,
    create_raw_meeting,
    create_raw_personal_event,
    create_raw_study_group,
    create_raw_task,
    create_raw_team,
)
from tests.fixtures.core.timers import (
    DEFAULT_CONFIG,
    SHORT_CONFIG,
    create_timer,
    create_timer_config,
)

__all__ = [
    "create_event",
    "create_raw_task",
    "create_raw_meeting",
    "create_raw_team",
    "create_raw_study_group",
    "create_raw_personal_event",
    "create_dashboard_payload",
    "PERSONAL_EVENT",
    "TEAM_MEETING",
    "TASK_DEADLINE",
    "create_timer",
    "create_timer_config",
    "DEFAULT_CONFIG",
    "SHORT_CONFIG",
]
