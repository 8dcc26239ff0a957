"""Integration tests for exception-to-response mapping.

Each dashboard or backend-client exception raised by a command becomes a
JSON response of the form {"error": ..., "detail": ...}.
"""

from unittest.mock import AsyncMock

from client.exceptions import NetworkFailure
from tests.api.helpers import make_draft_request, seed_backend


class TestBackendErrors:
    """Tests for errors coming from the backend client."""

    def test_unauthorized(self, client_with_controller, fake_backend):
        client, controller = client_with_controller
        fake_backend.fail("GET", "/api/dashboard", 401)

        response = client.post("/events/refresh")

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthorized"
        assert controller.notifications == []

    def test_backend_error_is_bad_gateway(self, client_with_controller, fake_backend):
        client, _ = client_with_controller
        seed_backend(fake_backend)
        client.post("/events/refresh")
        fake_backend.fail("PUT", "/api/events/p1/clear", 404)

        response = client.post("/events/p1/clear")

        assert response.status_code == 502
        assert response.json()["upstream_status"] == 404
        assert response.json()["detail"] == "Backend exploded"

    def test_server_error_keeps_local_state(self, client_with_controller, fake_backend):
        client, controller = client_with_controller
        seed_backend(fake_backend)
        client.post("/events/refresh")
        fake_backend.fail("PUT", "/api/events/p1/complete", 500)

        response = client.post("/events/p1/complete")

        assert response.status_code == 502
        assert controller.aggregator.get("p1").completed is False

    def test_failed_create_leaves_no_event(self, client_with_controller, fake_backend):
        client, _ = client_with_controller
        fake_backend.fail("POST", "/api/events", 503)

        response = client.post("/events", json=make_draft_request())

        assert response.status_code == 502
        assert client.get("/events").json()["events"] == []

    def test_network_failure(self, client_with_controller):
        client, controller = client_with_controller
        controller.aggregator._client.dashboard.fetch = AsyncMock(
            side_effect=NetworkFailure("Failed to connect", url="http://backend.test/api/dashboard")
        )

        response = client.post("/events/refresh")

        assert response.status_code == 503
        assert response.json() == {"error": "Backend Unreachable", "detail": "Failed to connect"}


class TestDashboardErrors:
    """Tests for errors raised by the dashboard models."""

    def test_invalid_server_response(self, client_with_controller):
        client, controller = client_with_controller
        controller.aggregator._client.events.create = AsyncMock(return_value={"title": "no id"})

        response = client.post("/events", json=make_draft_request())

        assert response.status_code == 422
        assert response.json()["detail"] == "Server returned invalid response format"
        assert controller.aggregator.all_events() == []

    def test_unexpected_error(self, client_with_controller):
        """Unexpected errors become a 500 without a stack trace."""
        client, controller = client_with_controller
        controller.aggregator._client.dashboard.fetch = AsyncMock(side_effect=RuntimeError("boom"))

        response = client.post("/events/refresh")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred",
            "type": "RuntimeError",
        }
