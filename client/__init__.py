"""Study Buddy backend client library.

Typed async client for the backend REST API consumed by the dashboard.

Example:
    from client import AsyncBackendClient

    async with AsyncBackendClient(token_provider=lambda: token) as client:
        payload = await client.dashboard.fetch()

Exports:
    AsyncBackendClient: Asynchronous client for the backend API.

    Exceptions:
        BackendClientError: Base exception for all client errors.
        NetworkFailure: Failed to reach the backend.
        RequestTimeoutError: Request timed out.
        HttpError: Backend returned an error response.
        UnauthorizedError: Missing or expired token (HTTP 401).
        NotFoundError: Resource not found (HTTP 404).
        ValidationError: Payload rejected (HTTP 422).
        ServerError: Backend-side error (HTTP 5xx).
"""

from client.client import AsyncBackendClient
from client.exceptions import (
    BackendClientError,
    HttpError,
    NetworkFailure,
    NotFoundError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from client.models import DashboardPayload, TaskPayload

__all__ = [
    "AsyncBackendClient",
    "DashboardPayload",
    "TaskPayload",
    "BackendClientError",
    "HttpError",
    "NetworkFailure",
    "NotFoundError",
    "RequestTimeoutError",
    "ServerError",
    "UnauthorizedError",
    "ValidationError",
]
