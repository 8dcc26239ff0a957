"""Internal HTTP handling for the backend client.

This module provides the low-level communication layer used by all
sub-clients. It handles:
- Making async HTTP requests with bearer authentication
- Response parsing and error mapping
- Connection management

This is an internal module and should not be imported directly by users.
"""

import logging
from collections.abc import Callable
from typing import Any, Literal

import httpx

from client.exceptions import (
    HttpError,
    NetworkFailure,
    NotFoundError,
    RequestTimeoutError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)


HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

TokenProvider = Callable[[], str | None]


def _parse_error_response(response: httpx.Response) -> tuple[str, dict | None]:
    """Extract a message and details from an error response.

    The backend reports errors as ``{"message": ...}`` or ``{"error": ...}``;
    ``{"detail": ...}`` is accepted as well. Falls back to the raw text.

    Args:
        response: The HTTP response to parse.

    Returns:
        A tuple of (message, details).
    """
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        if text:
            return text, None
        return f"HTTP {response.status_code} error", None

    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str):
                return value, body.get("details")
            if isinstance(value, dict):
                return value.get("message", str(value)), value
            if isinstance(value, list):
                return "; ".join(str(item) for item in value), {"errors": value}

    return str(body), None


def _raise_for_status(response: httpx.Response) -> None:
    """Raise the exception matching an error status code.

    Args:
        response: The HTTP response to check.

    Raises:
        UnauthorizedError: For HTTP 401 responses.
        NotFoundError: For HTTP 404 responses.
        ValidationError: For HTTP 422 responses.
        ServerError: For HTTP 5xx responses.
        HttpError: For other HTTP 4xx responses.
    """
    if response.is_success:
        return

    message, details = _parse_error_response(response)
    status_code = response.status_code

    try:
        response_body = response.json()
    except ValueError:
        response_body = response.text

    if status_code == 401:
        raise UnauthorizedError(message=message, details=details, response_body=response_body)
    elif status_code == 404:
        raise NotFoundError(message=message, details=details, response_body=response_body)
    elif status_code == 422:
        raise ValidationError(message=message, details=details, response_body=response_body)
    elif status_code >= 500:
        raise ServerError(
            message=message,
            status_code=status_code,
            details=details,
            response_body=response_body,
        )
    else:
        raise HttpError(
            message=message,
            status_code=status_code,
            details=details,
            response_body=response_body,
        )


class AsyncHTTPClient:
    """Asynchronous HTTP client for the backend API.

    Wraps httpx.AsyncClient with bearer authentication and error mapping.
    The token is looked up on every request so a refreshed token is picked
    up without rebuilding the client. Failed requests are never retried;
    the caller re-triggers the operation.

    Attributes:
        base_url: The base URL for all API requests.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: TokenProvider | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the async HTTP client.

        Args:
            base_url: The base URL for all API requests.
            token_provider: Returns the current bearer token, or None.
            timeout: Request timeout in seconds.
            transport: Custom transport (e.g., MockTransport for testing).
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._token_provider = token_provider or (lambda: None)

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _headers(self) -> dict[str, str]:
        token = self._token_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Make a single HTTP request and return the parsed JSON response.

        Args:
            method: The HTTP method.
            path: The URL path (appended to base_url).
            params: Query parameters; None values are dropped.
            json: JSON body to send.

        Returns:
            The parsed JSON response body, or None for empty responses.

        Raises:
            NetworkFailure: If the connection fails.
            RequestTimeoutError: If the request times out.
            HttpError: If the backend returns an error response.
        """
        url = f"{self.base_url}{path}"

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        try:
            response = await self._client.request(
                method=method,
                url=path,
                params=params,
                json=json,
                headers=self._headers(),
            )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                message=f"Request to {url} timed out",
                timeout=self.timeout,
                url=url,
            ) from e
        except httpx.TransportError as e:
            raise NetworkFailure(
                message=f"Failed to connect to {url}",
                url=url,
                cause=e,
            ) from e

        logger.debug(f"{method} {path} -> {response.status_code}")
        _raise_for_status(response)

        if response.content:
            return response.json()
        return None

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make an async GET request."""
        return await self.request("GET", path, params=params)

    async def post(
        self,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async POST request."""
        return await self.request("POST", path, params=params, json=json)

    async def put(
        self,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async PUT request."""
        return await self.request("PUT", path, params=params, json=json)

    async def patch(
        self,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Make an async PATCH request."""
        return await self.request("PATCH", path, params=params, json=json)

    async def delete(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make an async DELETE request."""
        return await self.request("DELETE", path, params=params)
