"""Dependency injection providers for the FastAPI application.

This module owns the shared DashboardController, the backend client it
talks through, and the TimerLoop that ticks its focus timer.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends

from client import AsyncBackendClient
from config import Settings, load_settings
from models.aggregator import EventAggregator
from models.calendar import CalendarProjector
from models.dashboard import DashboardController
from models.preferences import PreferencesStore
from models.ticker import TimerLoop

logger = logging.getLogger(__name__)


# Global state, created once by the application lifespan
_dashboard_controller: DashboardController | None = None
_backend_client: AsyncBackendClient | None = None
_timer_loop: TimerLoop | None = None


def get_dashboard_controller() -> DashboardController:
    """Get the shared DashboardController instance.

    Returns:
        The shared DashboardController.

    Raises:
        RuntimeError: If the controller hasn't been initialized yet.

    Example:
        @router.get("/events")
        async def list_events(controller: DashboardControllerDep):
            return controller.events()
    """
    if _dashboard_controller is None:
        raise RuntimeError(
            "DashboardController not initialized. Call initialize_dashboard() first."
        )

    return _dashboard_controller


def build_dashboard_controller(
    settings: Settings, backend_client: AsyncBackendClient
) -> DashboardController:
    """Wire a DashboardController from settings and a backend client."""
    aggregator = EventAggregator(backend_client)
    return DashboardController(
        aggregator=aggregator,
        projector=CalendarProjector(horizon_months=settings.horizon_months, tz=aggregator.tz),
        preferences=PreferencesStore(settings.preferences_path),
    )


async def initialize_dashboard(settings: Optional[Settings] = None) -> DashboardController:
    """Initialize the shared DashboardController and start the timer loop.

    Must be called from within the running event loop (the app lifespan).

    Args:
        settings: Service settings (default: loaded from the environment).

    Returns:
        The newly created DashboardController.
    """
    global _dashboard_controller, _backend_client, _timer_loop

    settings = settings or load_settings()

    _backend_client = AsyncBackendClient(
        base_url=settings.api_url,
        token_provider=lambda: settings.token,
        timeout=settings.timeout,
    )
    _dashboard_controller = build_dashboard_controller(settings, _backend_client)

    _timer_loop = TimerLoop(_dashboard_controller.timer, tick_interval=settings.tick_interval)
    _timer_loop.start()

    logger.info(f"Dashboard initialized against {settings.api_url}")
    return _dashboard_controller


async def shutdown_dashboard() -> None:
    """Stop the timer loop and close the backend client."""
    global _dashboard_controller, _backend_client, _timer_loop

    if _timer_loop is not None:
        await _timer_loop.stop()
    if _backend_client is not None:
        await _backend_client.close()

    _dashboard_controller = None
    _backend_client = None
    _timer_loop = None


# Type alias for dependency injection
DashboardControllerDep = Annotated[DashboardController, Depends(get_dashboard_controller)]
