"""Dashboard sub-client.

Wraps ``GET /api/dashboard`` and the task toggle endpoints.

This is an internal module. Import from `client` instead.
"""

from typing import Any

from client._base import AsyncBaseClient
from client.models import DashboardPayload, TaskPayload


class AsyncDashboardClient(AsyncBaseClient):
    """Asynchronous client for the dashboard endpoints.

    Example:
        async with AsyncBackendClient(token_provider=lambda: token) as client:
            payload = await client.dashboard.fetch()
            print(f"{len(payload.tasks)} tasks")
    """

    _BASE_PATH = "/api/dashboard"

    async def fetch(self) -> DashboardPayload:
        """Fetch tasks, personal events, teams and study groups in one call.

        Returns:
            The dashboard payload.

        Raises:
            BackendClientError: If the request fails.
        """
        data = await self._get(self._BASE_PATH)
        return DashboardPayload.model_validate(data or {})

    async def toggle_task(self, task: TaskPayload) -> Any:
        """Toggle a task's completion status.

        Team tasks are toggled through their team; every other task through
        the user's own task list.

        Args:
            task: The task to toggle.

        Returns:
            The backend response body.
        """
        if task.source == "team" and task.source_id:
            path = f"/api/teams/{task.source_id}/tasks/{task.id}/toggle"
        else:
            path = f"/api/users/tasks/{task.id}/toggle"
        return await self._patch(path)
