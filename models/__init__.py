"""Study Buddy scheduling models package.

This package contains the core of the dashboard: the canonical Event
model and its normalizer, the aggregated event store, the calendar
projector, the focus timer and its tick source, and the controller that
orchestrates them.
"""

from models.event import (
    Event,
    EventKind,
    EventNotFoundError,
    EventOrigin,
    IllegalMutation,
    InvalidEventData,
    PersonalEventDraft,
)
from models.normalizer import EventNormalizer
from models.aggregator import EventAggregator, EventFilter
from models.calendar import CalendarInterval, CalendarProjector, RecurringMeetingRule
from models.timer import FocusTimer, TimerConfig, TimerMode, TimerState
from models.ticker import TimerLoop
from models.notification import Notification
from models.preferences import Preferences, PreferencesStore
from models.dashboard import DashboardController

__all__ = [
    "Event",
    "EventKind",
    "EventOrigin",
    "EventNotFoundError",
    "IllegalMutation",
    "InvalidEventData",
    "PersonalEventDraft",
    "EventNormalizer",
    "EventAggregator",
    "EventFilter",
    "CalendarInterval",
    "CalendarProjector",
    "RecurringMeetingRule",
    "FocusTimer",
    "TimerConfig",
    "TimerMode",
    "TimerState",
    "TimerLoop",
    "Notification",
    "Preferences",
    "PreferencesStore",
    "DashboardController",
]
