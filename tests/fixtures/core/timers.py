"""Fixtures for FocusTimer."""

import pytest

from models.timer import FocusTimer, TimerConfig


def create_timer_config(**kwargs) -> TimerConfig:
    """Create a TimerConfig, defaulting to 25/5/15 with auto-start."""
    return TimerConfig(**kwargs)


def create_timer(**config_overrides) -> FocusTimer:
    """Create a stopped FocusTimer in its initial state.

    Args:
        **config_overrides: TimerConfig fields to override.

    Returns:
        FocusTimer instance ready for testing.
    """
    return FocusTimer(create_timer_config(**config_overrides))


def run_ticks(timer: FocusTimer, count: int) -> None:
    """Tick a timer count times."""
    for _ in range(count):
        timer.tick()


def finish_session(timer: FocusTimer) -> None:
    """Tick until the current session completes."""
    run_ticks(timer, timer.state.remaining_seconds)


# Pre-built example constants
DEFAULT_CONFIG = create_timer_config()

SHORT_CONFIG = create_timer_config(
    work_minutes=1, short_break_minutes=1, long_break_minutes=2
)


@pytest.fixture
def timer() -> FocusTimer:
    """Provide a stopped FocusTimer with the default config."""
    return create_timer()


@pytest.fixture
def running_timer() -> FocusTimer:
    """Provide a started FocusTimer with the default config."""
    timer = create_timer()
    timer.start()
    return timer
