"""Dashboard orchestration.

DashboardController is the single entry point for user commands. It
routes them to the EventAggregator or the FocusTimer, turns outcomes into
Notifications, and serves calendar projections of the current collection.
"""

import logging
from collections import deque
from collections.abc import Awaitable, Callable, Iterable
from datetime import date
from typing import Optional, TypeVar

from client.exceptions import UnauthorizedError
from client.models import TaskPayload
from models.aggregator import EventAggregator, EventFilter, TaskFilter
from models.calendar import CalendarInterval, CalendarProjector
from models.event import Event, InvalidEventData, PersonalEventDraft
from models.notification import Notification
from models.preferences import LayoutItem, Preferences, PreferencesStore
from models.timer import CYCLES_PER_ROUND, FocusTimer, TimerConfig, TimerMode, TimerState

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_NOTIFICATIONS = 50


class DashboardController:
    """Coordinates the event store, the calendar and the focus timer.

    Every event command is guarded against duplicates: while a command for
    a given (operation, event id) pair is in flight, an identical command
    is logged and ignored. Failures other than UnauthorizedError produce a
    destructive notification and are re-raised.

    Attributes:
        aggregator: The event store.
        projector: Calendar projection settings.
        timer: The focus timer.
        preferences: Local cache for timer config and layout (optional).
    """

    def __init__(
        self,
        aggregator: EventAggregator,
        projector: Optional[CalendarProjector] = None,
        timer: Optional[FocusTimer] = None,
        preferences: Optional[PreferencesStore] = None,
        max_notifications: int = MAX_NOTIFICATIONS,
    ) -> None:
        """Initialize the controller.

        When a preferences store is given, the cached timer config and layout
        are loaded from it and a new FocusTimer is built from the config
        unless a timer is passed in.
        """
        self.aggregator = aggregator
        self.projector = projector or CalendarProjector(tz=aggregator.tz)
        self.preferences = preferences

        cached = preferences.load() if preferences else Preferences()
        self.timer = timer or FocusTimer(cached.timer)
        self._layout = cached.layout

        self._notifications: deque[Notification] = deque(maxlen=max_notifications)
        self._in_flight: set[tuple[str, str]] = set()

        self.timer.add_listener(self._on_session_complete)

    # Notifications

    @property
    def notifications(self) -> list[Notification]:
        """Recent notifications, oldest first."""
        return list(self._notifications)

    def notify(self, notification: Notification) -> None:
        self._notifications.append(notification)
        logger.debug(f"Notification: {notification.title} - {notification.description}")

    def clear_notifications(self) -> None:
        self._notifications.clear()

    def _on_session_complete(self, completed: TimerMode, state: TimerState) -> None:
        if completed == TimerMode.WORK:
            if state.cycle_count < CYCLES_PER_ROUND:
                description = "Time for a short break."
            else:
                description = "Time for a long break!"
            self.notify(Notification(title="Work session complete!", description=description))
        else:
            self.notify(
                Notification(title="Break time's over!", description="Time to get back to work.")
            )

    # Command plumbing

    async def _run(
        self,
        operation: str,
        target: str,
        command: Callable[[], Awaitable[T]],
        failure: str,
    ) -> Optional[T]:
        key = (operation, target)
        if key in self._in_flight:
            logger.warning(f"Ignoring duplicate {operation} for {target}: already in progress")
            return None

        self._in_flight.add(key)
        try:
            return await command()
        except UnauthorizedError:
            raise
        except InvalidEventData as e:
            self.notify(Notification.error("Error", e.message or failure))
            logger.warning(f"{operation} {target} rejected: {e}")
            raise
        except Exception as e:
            self.notify(Notification.error("Error", failure))
            logger.warning(f"{operation} {target} failed: {e}")
            raise
        finally:
            self._in_flight.discard(key)

    # Event commands

    async def refresh(self) -> Optional[list[Event]]:
        """Reload the dashboard from the backend."""
        return await self._run(
            "refresh",
            "dashboard",
            self.aggregator.refresh,
            "Failed to load dashboard data. Please try again.",
        )

    async def add_event(self, draft: PersonalEventDraft) -> Optional[Event]:
        """Create a personal event.

        Returns:
            The confirmed event, or None if an identical add is in flight.
        """
        target = f"{draft.title}@{draft.start_at.isoformat()}"
        event = await self._run(
            "add",
            target,
            lambda: self.aggregator.add_personal(draft),
            "Failed to add event. Please try again.",
        )
        if event is not None:
            self.notify(
                Notification(
                    title="Event added",
                    description="Your event has been successfully added to the calendar.",
                )
            )
        return event

    async def complete_event(self, event_id: str) -> Optional[Event]:
        event = await self._run(
            "complete",
            event_id,
            lambda: self.aggregator.mark_complete(event_id),
            "Failed to mark event as complete. Please try again.",
        )
        if event is not None:
            self.notify(
                Notification(
                    title="Event completed",
                    description="The event has been marked as complete.",
                )
            )
        return event

    async def clear_event(self, event_id: str) -> Optional[Event]:
        event = await self._run(
            "clear",
            event_id,
            lambda: self.aggregator.clear(event_id),
            "Failed to clear event. Please try again.",
        )
        if event is not None:
            self.notify(
                Notification(
                    title="Event cleared",
                    description=(
                        "The event has been cleared from your calendar "
                        "but will still appear in daily view."
                    ),
                )
            )
        return event

    async def unclear_event(self, event_id: str) -> Optional[Event]:
        event = await self._run(
            "unclear",
            event_id,
            lambda: self.aggregator.unclear(event_id),
            "Failed to restore event. Please try again.",
        )
        if event is not None:
            self.notify(
                Notification(
                    title="Event restored",
                    description="The event has been restored to your calendar.",
                )
            )
        return event

    async def delete_event(self, event_id: str) -> bool:
        """Delete a personal event.

        Returns:
            True if the event was deleted, False if an identical delete was
            already in flight.
        """

        async def delete() -> bool:
            await self.aggregator.delete(event_id)
            return True

        deleted = await self._run(
            "delete", event_id, delete, "Failed to delete event. Please try again."
        )
        if deleted:
            self.notify(
                Notification(
                    title="Event deleted",
                    description="The event has been successfully deleted.",
                )
            )
        return bool(deleted)

    async def toggle_task(self, task_id: str) -> Optional[list[Event]]:
        """Toggle a task's completion, then reload the dashboard."""
        return await self._run(
            "toggle",
            task_id,
            lambda: self.aggregator.toggle_task(task_id),
            "Failed to update task. Please try again.",
        )

    # Queries

    def events(self, event_filter: Optional[EventFilter] = None) -> list[Event]:
        return self.aggregator.view(event_filter)

    def day_view(self, day: date) -> list[Event]:
        """Every event starting on a day, cleared ones included."""
        return self.aggregator.view(EventFilter(on_date=day))

    def tasks(self, task_filter: TaskFilter = "all") -> list[TaskPayload]:
        return self.aggregator.tasks(task_filter)

    def calendar(
        self, window_end: Optional[date] = None, today: Optional[date] = None
    ) -> list[CalendarInterval]:
        """Project the current collection and recurring meetings onto the calendar."""
        return self.projector.project(
            self.aggregator.all_events(),
            self.aggregator.recurring_rules,
            window_end=window_end,
            today=today,
        )

    # Timer commands

    def start_timer(self) -> TimerState:
        self.timer.start()
        return self.timer.state

    def pause_timer(self) -> TimerState:
        self.timer.pause()
        return self.timer.state

    def reset_timer(self) -> TimerState:
        self.timer.reset()
        return self.timer.state

    def update_timer_config(self, config: TimerConfig, apply: bool = False) -> TimerState:
        """Replace the timer configuration and cache it locally.

        Args:
            config: New configuration.
            apply: Also recompute the current session's remaining time.

        Returns:
            The timer state after the update.
        """
        self.timer.update_config(config)
        if apply:
            self.timer.apply_config()
        self._persist()
        return self.timer.state

    # Layout

    @property
    def layout(self) -> list[LayoutItem]:
        return [item.model_copy() for item in self._layout]

    def save_layout(self, layout: Iterable[LayoutItem]) -> list[LayoutItem]:
        self._layout = [item.model_copy() for item in layout]
        self._persist()
        return self.layout

    def _persist(self) -> None:
        if self.preferences is None:
            return
        try:
            self.preferences.save(Preferences(timer=self.timer.config, layout=self._layout))
        except OSError as e:
            logger.warning(f"Could not save preferences: {e}")
