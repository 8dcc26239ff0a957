"""Service configuration for the Study Buddy dashboard.

Settings are read from environment variables. A ``.env`` file in the
working directory is loaded first so local development does not need
exported variables.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field


ENV_PREFIX = "STUDY_BUDDY_"

# Settings field -> environment variable suffix
ENV_VARIABLES = {
    "api_url": "API_URL",
    "token": "TOKEN",
    "timeout": "TIMEOUT",
    "preferences_path": "PREFERENCES_PATH",
    "tick_interval": "TICK_INTERVAL",
    "horizon_months": "HORIZON_MONTHS",
}


class Settings(BaseModel):
    """Runtime settings for the dashboard service.

    Args:
        api_url: Base URL of the backend API.
        token: Bearer token for the backend, if one is stored.
        timeout: Request timeout in seconds.
        preferences_path: Location of the local preferences cache.
        tick_interval: Seconds between focus timer ticks.
        horizon_months: How far ahead recurring meetings are expanded.
    """

    api_url: str = Field(default="http://localhost:8000", description="Backend base URL")
    token: str | None = Field(default=None, description="Bearer token")
    timeout: float = Field(default=30.0, gt=0.0, description="Request timeout (seconds)")
    preferences_path: Path = Field(
        default=Path("~/.study_buddy/preferences.json"),
        description="Local preferences cache",
    )
    tick_interval: float = Field(default=1.0, gt=0.0, description="Timer tick period (seconds)")
    horizon_months: int = Field(default=3, ge=1, description="Recurring meeting horizon (months)")


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Build Settings from the environment.

    Only variables that are set are passed to the model, so unset ones keep
    their defaults and malformed ones fail validation.

    Args:
        env_file: Optional path to a ``.env`` file (default: search upwards).

    Returns:
        The validated settings.

    Raises:
        pydantic.ValidationError: If a variable holds an invalid value.
    """
    load_dotenv(dotenv_path=env_file)

    values = {}
    for field_name, suffix in ENV_VARIABLES.items():
        raw = os.environ.get(f"{ENV_PREFIX}{suffix}")
        if raw:
            values[field_name] = raw

    settings = Settings(**values)
    settings.preferences_path = settings.preferences_path.expanduser()
    return settings
