"""Personal events sub-client.

Wraps the ``/api/events`` endpoints used to create and update personal
events.

This is an internal module. Import from `client` instead.
"""

from typing import Any
from urllib.parse import quote

from client._base import AsyncBaseClient


class AsyncEventsClient(AsyncBaseClient):
    """Asynchronous client for personal event endpoints (/api/events/*).

    Example:
        async with AsyncBackendClient(token_provider=lambda: token) as client:
            created = await client.events.create({"title": "Revise", ...})
            await client.events.complete(created["_id"])
    """

    _BASE_PATH = "/api/events"

    def _event_path(self, event_id: str, action: str | None = None) -> str:
        path = f"{self._BASE_PATH}/{quote(event_id, safe='')}"
        if action:
            path = f"{path}/{action}"
        return path

    async def create(self, payload: dict[str, Any]) -> Any:
        """Create a personal event.

        Args:
            payload: Event fields in backend format.

        Returns:
            The created event as echoed by the backend.
        """
        return await self._post(self._BASE_PATH, json=payload)

    async def complete(self, event_id: str) -> Any:
        """Mark a personal event as completed."""
        return await self._put(self._event_path(event_id, "complete"))

    async def clear(self, event_id: str) -> Any:
        """Soft-delete a personal event from the calendar."""
        return await self._put(self._event_path(event_id, "clear"))

    async def unclear(self, event_id: str) -> Any:
        """Restore a cleared personal event."""
        return await self._put(self._event_path(event_id, "unclear"))

    async def delete(self, event_id: str) -> Any:
        """Permanently delete a personal event."""
        return await self._delete(self._event_path(event_id))
