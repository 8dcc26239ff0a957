"""Exception hierarchy for the Study Buddy backend client.

Exception Hierarchy:
    BackendClientError (base)
    ├── NetworkFailure - Network/connection failures
    │   └── RequestTimeoutError - Request timed out
    └── HttpError - Backend returned an error response
        ├── UnauthorizedError (HTTP 401)
        ├── NotFoundError (HTTP 404)
        ├── ValidationError (HTTP 422)
        └── ServerError (HTTP 5xx)

Example:
    Catching a specific error::

        try:
            await client.events.clear("abc123")
        except UnauthorizedError:
            # Token missing or expired; re-authenticate
            ...

    Catching every backend failure::

        try:
            await client.dashboard.fetch()
        except BackendClientError as e:
            print(f"Backend unavailable: {e}")
"""

from typing import Any


class BackendClientError(Exception):
    """Base exception for all backend client errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class NetworkFailure(BackendClientError):
    """Failed to reach the backend.

    Attributes:
        message: Human-readable error description.
        url: The URL that failed.
        cause: The underlying transport exception.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.url = url
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        if self.url:
            return f"{self.message} (url: {self.url})"
        return self.message


class RequestTimeoutError(NetworkFailure):
    """Request took longer than the configured timeout.

    Attributes:
        timeout: The timeout value in seconds.
    """

    def __init__(
        self,
        message: str,
        timeout: float | None = None,
        url: str | None = None,
    ) -> None:
        self.timeout = timeout
        super().__init__(message, url=url)

    def __str__(self) -> str:
        parts = []
        if self.timeout is not None:
            parts.append(f"timeout: {self.timeout}s")
        if self.url:
            parts.append(f"url: {self.url}")
        if not parts:
            return self.message
        return f"{self.message} ({', '.join(parts)})"


class HttpError(BackendClientError):
    """Backend returned an HTTP error status.

    Attributes:
        message: Error message extracted from the response.
        status_code: HTTP status code.
        details: Additional error details from the response body.
        response_body: Raw response body for debugging.
    """

    def __init__(
        self,
        message: str,
        status_code: int,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        self.status_code = status_code
        self.details = details
        self.response_body = response_body
        super().__init__(message)

    def __str__(self) -> str:
        return f"[HTTP {self.status_code}] {self.message}"


class UnauthorizedError(HttpError):
    """Bearer token missing, invalid or expired (HTTP 401).

    Never retried; callers are expected to re-authenticate.
    """

    def __init__(
        self,
        message: str = "Not authenticated",
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=401,
            details=details,
            response_body=response_body,
        )


class NotFoundError(HttpError):
    """Resource not found (HTTP 404)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=404,
            details=details,
            response_body=response_body,
        )


class ValidationError(HttpError):
    """Backend rejected the request payload (HTTP 422)."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=422,
            details=details,
            response_body=response_body,
        )


class ServerError(HttpError):
    """Backend-side failure (HTTP 5xx)."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        response_body: Any = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=status_code,
            details=details,
            response_body=response_body,
        )
