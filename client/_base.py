"""Base class for all sub-clients.

Provides access to the shared HTTP client and thin request helpers.

This is an internal module and should not be imported directly by users.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from client._http import AsyncHTTPClient


class AsyncBaseClient:
    """Base class for asynchronous sub-clients.

    Attributes:
        _http: The shared async HTTP client for making requests.
    """

    def __init__(self, http_client: "AsyncHTTPClient") -> None:
        """Initialize the sub-client.

        Args:
            http_client: The shared async HTTP client instance.
        """
        self._http = http_client

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return await self._http.get(path, params=params)

    async def _post(self, path: str, json: Any = None) -> Any:
        return await self._http.post(path, json=json)

    async def _put(self, path: str, json: Any = None) -> Any:
        return await self._http.put(path, json=json)

    async def _patch(self, path: str, json: Any = None) -> Any:
        return await self._http.patch(path, json=json)

    async def _delete(self, path: str) -> Any:
        return await self._http.delete(path)
