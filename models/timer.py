"""Pomodoro focus timer.

FocusTimer is a small state machine alternating between Work and Break
sessions. It does no I/O of its own: something else (see models.ticker)
calls ``tick()`` once per elapsed second while the timer is running.
"""

import logging
from collections.abc import Callable
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


# Work sessions per round; the break after the 4th one is a long break
CYCLES_PER_ROUND = 4


class TimerMode(str, Enum):
    """Session type of the focus timer."""

    WORK = "work"
    BREAK = "break"


class TimerConfig(BaseModel):
    """Session durations and auto-start behavior.

    Args:
        work_minutes: Length of a focus session.
        short_break_minutes: Length of a break after cycles 1-3.
        long_break_minutes: Length of a break after the 4th cycle onward.
        auto_start: Whether the next session starts without user action.
    """

    work_minutes: int = Field(default=25, ge=1, description="Focus session length")
    short_break_minutes: int = Field(default=5, ge=1, description="Short break length")
    long_break_minutes: int = Field(default=15, ge=1, description="Long break length")
    auto_start: bool = Field(default=True, description="Start the next session automatically")


class TimerState(BaseModel):
    """Snapshot of a FocusTimer.

    Args:
        mode: Current session type.
        remaining_seconds: Seconds left in the current session.
        cycle_count: Completed work sessions since the last reset.
        running: Whether ticks currently count down.
    """

    mode: TimerMode = Field(default=TimerMode.WORK, description="Current session type")
    remaining_seconds: int = Field(ge=0, description="Seconds left in the session")
    cycle_count: int = Field(default=0, ge=0, description="Completed work sessions")
    running: bool = Field(default=False, description="Whether the timer is counting down")


CompletionListener = Callable[[TimerMode, TimerState], None]


def break_seconds(config: TimerConfig, cycle_count: int) -> int:
    """Duration of the break following a work session.

    The counter is never wrapped, so every break from the 4th cycle on is long.
    """
    if cycle_count < CYCLES_PER_ROUND:
        return config.short_break_minutes * 60
    return config.long_break_minutes * 60


class FocusTimer:
    """Work/Break state machine with a 4-cycle long-break rule.

    Example:
        timer = FocusTimer()
        timer.start()
        for _ in range(25 * 60):
            timer.tick()
        assert timer.state.mode == TimerMode.BREAK
    """

    def __init__(self, config: Optional[TimerConfig] = None) -> None:
        self._config = config or TimerConfig()
        self._state = self._initial_state()
        self._listeners: list[CompletionListener] = []

    def _initial_state(self) -> TimerState:
        return TimerState(remaining_seconds=self._config.work_minutes * 60)

    @property
    def config(self) -> TimerConfig:
        return self._config.model_copy()

    @property
    def state(self) -> TimerState:
        return self._state.model_copy()

    @property
    def running(self) -> bool:
        return self._state.running

    # Commands

    def start(self) -> None:
        """Start or resume counting down; no-op if already running."""
        if self._state.running:
            return
        self._state.running = True
        logger.debug(f"Timer started in {self._state.mode.value} mode")

    def pause(self) -> None:
        """Stop counting down, keeping the remaining time."""
        self._state.running = False

    def reset(self) -> None:
        """Return to a stopped Work session of full length with zero cycles."""
        self._state = self._initial_state()
        logger.info("Timer reset")

    def tick(self) -> Optional[TimerMode]:
        """Advance the timer by one second.

        Ticks are ignored while the timer is stopped. When the last second of
        a session elapses, the session completes and the next one begins.

        Returns:
            The mode that just completed, or None if no session completed.
        """
        state = self._state
        if not state.running:
            return None

        if state.remaining_seconds > 1:
            state.remaining_seconds -= 1
            return None

        return self._complete_session()

    def update_config(self, config: TimerConfig) -> None:
        """Replace the configuration.

        The remaining time of a session in progress is kept until
        ``apply_config()`` is called.
        """
        self._config = config.model_copy()
        logger.info(
            f"Timer config updated: {config.work_minutes}/{config.short_break_minutes}/"
            f"{config.long_break_minutes} min, auto_start={config.auto_start}"
        )

    def apply_config(self) -> None:
        """Recompute the remaining time of the current mode from the config."""
        state = self._state
        if state.mode == TimerMode.WORK:
            state.remaining_seconds = self._config.work_minutes * 60
        else:
            state.remaining_seconds = break_seconds(self._config, state.cycle_count)

    def add_listener(self, listener: CompletionListener) -> None:
        """Register a callback invoked after every session completion.

        Listeners receive the completed mode and the new state. A listener
        that raises is logged and skipped.
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: CompletionListener) -> None:
        self._listeners.remove(listener)

    # Transitions

    def _complete_session(self) -> TimerMode:
        state = self._state
        completed = state.mode

        if completed == TimerMode.WORK:
            state.cycle_count += 1
            state.mode = TimerMode.BREAK
            state.remaining_seconds = break_seconds(self._config, state.cycle_count)
        else:
            state.mode = TimerMode.WORK
            state.remaining_seconds = self._config.work_minutes * 60

        if not self._config.auto_start:
            state.running = False

        logger.info(
            f"{completed.value.capitalize()} session complete "
            f"(cycle {state.cycle_count}, next {state.mode.value} "
            f"{state.remaining_seconds}s)"
        )
        self._notify(completed)
        return completed

    def _notify(self, completed: TimerMode) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(completed, snapshot)
            except Exception as e:
                logger.error(f"Timer completion listener failed: {e}", exc_info=True)

    # Presentation

    @property
    def is_long_break(self) -> bool:
        return (
            self._state.mode == TimerMode.BREAK
            and self._state.cycle_count >= CYCLES_PER_ROUND
        )

    @property
    def session_label(self) -> str:
        if self._state.mode == TimerMode.WORK:
            return "Focus Time"
        return "Long Break" if self.is_long_break else "Short Break"

    @property
    def cycle_label(self) -> str:
        current = min(self._state.cycle_count, CYCLES_PER_ROUND - 1) + 1
        return f"Cycle {current}/{CYCLES_PER_ROUND}"

    @property
    def next_session_label(self) -> str:
        """Short description of the session that follows the current one."""
        if self._state.mode == TimerMode.WORK:
            minutes = break_seconds(self._config, self._state.cycle_count + 1) // 60
            return f"{minutes}m break"
        return f"{self._config.work_minutes}m focus"

    def format_remaining(self) -> str:
        """Remaining time as ``MM:SS``."""
        minutes, seconds = divmod(self._state.remaining_seconds, 60)
        return f"{minutes:02d}:{seconds:02d}"
