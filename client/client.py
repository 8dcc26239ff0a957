"""Main backend client class.

AsyncBackendClient is the entry point for talking to the Study Buddy
backend. It provides namespaced access to the endpoints through sub-client
properties (``client.dashboard``, ``client.events``).

Example:
    async with AsyncBackendClient(
        base_url="http://localhost:8000",
        token_provider=lambda: os.environ.get("STUDY_BUDDY_TOKEN"),
    ) as client:
        payload = await client.dashboard.fetch()
        await client.events.clear("abc123")
"""

from typing import Any

from client._dashboard import AsyncDashboardClient
from client._events import AsyncEventsClient
from client._http import AsyncHTTPClient, TokenProvider


class AsyncBackendClient:
    """Asynchronous client for the Study Buddy backend API.

    Attributes:
        base_url: The base URL of the backend.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        token_provider: TokenProvider | None = None,
        timeout: float = 30.0,
        transport: Any = None,
    ) -> None:
        """Initialize the backend client.

        Args:
            base_url: The base URL of the backend (default: http://localhost:8000).
            token_provider: Returns the current bearer token, or None when the
                user is not signed in.
            timeout: Request timeout in seconds (default: 30.0).
            transport: Custom HTTP transport (e.g., MockTransport for testing).
        """
        self._http = AsyncHTTPClient(
            base_url=base_url,
            token_provider=token_provider,
            timeout=timeout,
            transport=transport,
        )

        self._dashboard: AsyncDashboardClient | None = None
        self._events: AsyncEventsClient | None = None

    async def __aenter__(self) -> "AsyncBackendClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the client and release resources."""
        await self._http.close()

    @property
    def base_url(self) -> str:
        return self._http.base_url

    @property
    def timeout(self) -> float:
        return self._http.timeout

    @property
    def dashboard(self) -> AsyncDashboardClient:
        """Access the aggregated dashboard endpoint (/api/dashboard) and task toggles."""
        if self._dashboard is None:
            self._dashboard = AsyncDashboardClient(self._http)
        return self._dashboard

    @property
    def events(self) -> AsyncEventsClient:
        """Access personal event endpoints (/api/events/*)."""
        if self._events is None:
            self._events = AsyncEventsClient(self._http)
        return self._events
