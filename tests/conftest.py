"""Pytest configuration and shared fixtures."""

import os

import pytest

# Load environment variables from .env file at test startup
from dotenv import load_dotenv
load_dotenv()

# Import all fixtures from fixture modules
pytest_plugins = [
    "tests.fixtures.core.events",
    "tests.fixtures.core.timers",
    "tests.fixtures.backend",
    "tests.fixtures.api",
]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep STUDY_BUDDY_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("STUDY_BUDDY_"):
            monkeypatch.delenv(name, raising=False)
