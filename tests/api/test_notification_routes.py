"""Integration tests for the notification and layout endpoints."""


class TestNotifications:
    """Tests for GET and DELETE /notifications."""

    def test_empty(self, client_with_controller):
        client, _ = client_with_controller

        response = client.get("/notifications")

        assert response.status_code == 200
        assert response.json() == {"notifications": [], "total_count": 0}

    def test_command_results_listed_oldest_first(self, client_with_controller, fake_backend):
        client, _ = client_with_controller
        fake_backend.fail("GET", "/api/dashboard", 500)

        client.post("/events/refresh")
        client.post(
            "/events",
            json={
                "title": "Gym",
                "start_at": "2025-03-11T18:00:00+00:00",
                "end_at": "2025-03-11T19:00:00+00:00",
            },
        )

        notifications = client.get("/notifications").json()["notifications"]
        assert [n["variant"] for n in notifications] == ["destructive", "default"]
        assert notifications[0]["description"] == "Failed to load dashboard data. Please try again."
        assert notifications[1]["title"] == "Event added"
        assert notifications[1]["created_at"].endswith("+00:00")

    def test_clear(self, client_with_controller):
        client, controller = client_with_controller
        client.post("/events/missing/complete")

        response = client.delete("/notifications")

        assert response.json()["total_count"] == 0
        assert controller.notifications == []


class TestLayout:
    """Tests for GET and PUT /layout."""

    def test_default_layout(self, client_with_controller):
        client, _ = client_with_controller

        layout = client.get("/layout").json()["layout"]

        assert [item["i"] for item in layout] == ["calendar", "daily", "tasks", "timer"]
        assert layout[0]["minW"] == 6

    def test_save_layout(self, client_with_controller, tmp_path):
        client, _ = client_with_controller
        body = {"layout": [{"i": "timer", "x": 0, "y": 0, "w": 12, "h": 2, "minW": 2}]}

        response = client.put("/layout", json=body)

        assert response.status_code == 200
        assert response.json()["layout"][0]["w"] == 12
        assert client.get("/layout").json()["layout"][0]["i"] == "timer"
        assert '"minW": 2' in (tmp_path / "preferences.json").read_text(encoding="utf-8")

    def test_invalid_layout(self, client_with_controller):
        client, _ = client_with_controller

        response = client.put("/layout", json={"layout": [{"i": "timer"}]})

        assert response.status_code == 422
