"""Main entry point for the Study Buddy dashboard FastAPI application.

This module creates and configures the FastAPI app instance that serves
the dashboard's scheduling API: aggregated events, calendar projection,
the focus timer and notifications.

To run the development server:
    uvicorn main:app --reload

To run in production:
    uvicorn main:app --host 0.0.0.0 --port 8080
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_dashboard, shutdown_dashboard
from api.exceptions import (
    event_not_found_handler,
    generic_exception_handler,
    http_error_handler,
    illegal_mutation_handler,
    invalid_event_data_handler,
    network_failure_handler,
    unauthorized_handler,
    validation_exception_handler,
)
from api.routes import calendar as calendar_routes
from api.routes import events as events_routes
from api.routes import layout as layout_routes
from api.routes import notifications as notifications_routes
from api.routes import timer as timer_routes
from client.exceptions import HttpError, NetworkFailure, UnauthorizedError
from models.event import EventNotFoundError, IllegalMutation, InvalidEventData

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events.

    Startup builds the DashboardController and starts the timer loop;
    shutdown stops the loop and closes the backend client.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    logger.info("Starting Study Buddy dashboard")
    await initialize_dashboard()

    yield

    logger.info("Shutting down Study Buddy dashboard")
    await shutdown_dashboard()


app = FastAPI(
    title="Study Buddy Dashboard",
    description="Unified scheduling API: events, calendar, focus timer and notifications",
    version="0.1.0",
    lifespan=lifespan,
)

# Specific exceptions before general ones
app.add_exception_handler(InvalidEventData, invalid_event_data_handler)
app.add_exception_handler(IllegalMutation, illegal_mutation_handler)
app.add_exception_handler(EventNotFoundError, event_not_found_handler)
app.add_exception_handler(UnauthorizedError, unauthorized_handler)
app.add_exception_handler(HttpError, http_error_handler)
app.add_exception_handler(NetworkFailure, network_failure_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(events_routes.router)
app.include_router(calendar_routes.router)
app.include_router(timer_routes.router)
app.include_router(notifications_routes.router)
app.include_router(layout_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message."""
    return {
        "message": "Welcome to the Study Buddy Dashboard API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
