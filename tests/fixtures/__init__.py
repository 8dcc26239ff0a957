"""Test fixtures for the Study Buddy dashboard.

This package provides reusable test fixtures:
- core: Factories for events, raw backend records and focus timers
- backend: Mock and in-memory stand-ins for the backend API
- api: TestClient wired to a fresh DashboardController
"""
