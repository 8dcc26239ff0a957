"""Focus timer endpoints.

These endpoints control the Pomodoro timer. The timer itself is ticked by
the TimerLoop started with the application.
"""

from fastapi import APIRouter
from pydantic import BaseModel, Field

from api.dependencies import DashboardControllerDep
from models.dashboard import DashboardController
from models.timer import TimerConfig, TimerMode


router = APIRouter(
    prefix="/timer",
    tags=["timer"],
)


class TimerStateResponse(BaseModel):
    """Response model for the timer state.

    Attributes:
        mode: Current session type.
        remaining_seconds: Seconds left in the session.
        cycle_count: Completed work sessions since the last reset.
        running: Whether the timer is counting down.
        display: Remaining time as MM:SS.
        session_label: "Focus Time", "Short Break" or "Long Break".
        cycle_label: Position within the 4-cycle round.
        next_session_label: What follows the current session.
        config: Active configuration.
    """

    mode: TimerMode
    remaining_seconds: int
    cycle_count: int
    running: bool
    display: str
    session_label: str
    cycle_label: str
    next_session_label: str
    config: TimerConfig


class UpdateTimerConfigRequest(TimerConfig):
    """Request model for replacing the timer configuration.

    Attributes:
        apply: Also recompute the current session's remaining time.
    """

    apply: bool = Field(default=True, description="Apply to the current session")


def _timer_response(controller: DashboardController) -> TimerStateResponse:
    timer = controller.timer
    state = timer.state
    return TimerStateResponse(
        mode=state.mode,
        remaining_seconds=state.remaining_seconds,
        cycle_count=state.cycle_count,
        running=state.running,
        display=timer.format_remaining(),
        session_label=timer.session_label,
        cycle_label=timer.cycle_label,
        next_session_label=timer.next_session_label,
        config=timer.config,
    )


@router.get("", response_model=TimerStateResponse)
async def get_timer(controller: DashboardControllerDep):
    """Get the current timer state."""
    return _timer_response(controller)


@router.post("/start", response_model=TimerStateResponse)
async def start_timer(controller: DashboardControllerDep):
    """Start or resume the timer."""
    controller.start_timer()
    return _timer_response(controller)


@router.post("/pause", response_model=TimerStateResponse)
async def pause_timer(controller: DashboardControllerDep):
    """Pause the timer, keeping the remaining time."""
    controller.pause_timer()
    return _timer_response(controller)


@router.post("/reset", response_model=TimerStateResponse)
async def reset_timer(controller: DashboardControllerDep):
    """Reset to a stopped, full-length work session with zero cycles."""
    controller.reset_timer()
    return _timer_response(controller)


@router.put("/config", response_model=TimerStateResponse)
async def update_timer_config(
    request: UpdateTimerConfigRequest, controller: DashboardControllerDep
):
    """Replace the timer configuration and cache it locally."""
    config = TimerConfig(**request.model_dump(exclude={"apply"}))
    controller.update_timer_config(config, apply=request.apply)
    return _timer_response(controller)
