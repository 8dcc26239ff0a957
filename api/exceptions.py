"""Exception handlers for the dashboard FastAPI application.

This module converts dashboard and backend-client exceptions into
consistent JSON responses.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from client.exceptions import HttpError, NetworkFailure, UnauthorizedError
from models.event import EventNotFoundError, IllegalMutation, InvalidEventData

logger = logging.getLogger(__name__)


async def invalid_event_data_handler(request: Request, exc: InvalidEventData):
    """Handle InvalidEventData exceptions with a 422."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Invalid Event Data",
            "detail": exc.message,
        },
    )


async def illegal_mutation_handler(request: Request, exc: IllegalMutation):
    """Handle IllegalMutation exceptions.

    Returns a 409 (Conflict): the event exists but its origin does not
    allow the requested operation.
    """
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={
            "error": "Illegal Mutation",
            "detail": str(exc),
            "event_id": exc.event_id,
            "operation": exc.operation,
        },
    )


async def event_not_found_handler(request: Request, exc: EventNotFoundError):
    """Handle EventNotFoundError exceptions with a 404."""
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={
            "error": "Event Not Found",
            "detail": str(exc),
            "event_id": exc.event_id,
        },
    )


async def unauthorized_handler(request: Request, exc: UnauthorizedError):
    """Handle UnauthorizedError exceptions.

    The backend rejected the stored token; the caller has to sign in again.
    """
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={
            "error": "Unauthorized",
            "detail": exc.message,
        },
    )


async def http_error_handler(request: Request, exc: HttpError):
    """Handle error responses from the backend.

    Returns a 502 (Bad Gateway) carrying the upstream status code.
    """
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "error": "Backend Error",
            "detail": exc.message,
            "upstream_status": exc.status_code,
        },
    )


async def network_failure_handler(request: Request, exc: NetworkFailure):
    """Handle NetworkFailure exceptions with a 503."""
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "error": "Backend Unreachable",
            "detail": exc.message,
        },
    )


async def validation_exception_handler(request: Request, exc: ValidationError):
    """Handle Pydantic validation errors raised outside request parsing.

    Args:
        request: The incoming request that triggered the error.
        exc: The ValidationError exception.

    Returns:
        JSONResponse with validation error details.
    """
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "Validation Error",
            "detail": "The request data failed validation",
            "validation_errors": exc.errors(include_url=False, include_context=False),
        },
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """Handle any unhandled exceptions.

    This is a catch-all handler for unexpected errors. It prevents
    stack traces from being exposed to clients.
    """
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}: {exc}")

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": type(exc).__name__,
        },
    )
