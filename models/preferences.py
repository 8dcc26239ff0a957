"""Local cache of user preferences.

Timer configuration and dashboard layout survive restarts in a small JSON
file. The cache is best-effort: anything wrong with the file yields the
defaults instead of an error.
"""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from models.timer import TimerConfig

logger = logging.getLogger(__name__)


class LayoutItem(BaseModel):
    """Position of one dashboard widget on the grid.

    Args:
        i: Widget key (calendar, daily, tasks, timer).
        x: Column.
        y: Row.
        w: Width in columns.
        h: Height in rows.
        min_w: Minimum width.
        min_h: Minimum height.
    """

    i: str = Field(min_length=1, description="Widget key")
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    w: int = Field(ge=1)
    h: int = Field(ge=1)
    min_w: int = Field(default=1, ge=1, alias="minW")
    min_h: int = Field(default=1, ge=1, alias="minH")

    model_config = {"populate_by_name": True}


def default_layout() -> list[LayoutItem]:
    return [
        LayoutItem(i="calendar", x=0, y=0, w=8, h=4, min_w=6, min_h=3),
        LayoutItem(i="daily", x=8, y=0, w=4, h=4, min_w=3, min_h=2),
        LayoutItem(i="tasks", x=0, y=4, w=6, h=2, min_w=3, min_h=2),
        LayoutItem(i="timer", x=6, y=4, w=6, h=2, min_w=2, min_h=2),
    ]


class Preferences(BaseModel):
    """Everything kept in the local preferences cache."""

    timer: TimerConfig = Field(default_factory=TimerConfig)
    layout: list[LayoutItem] = Field(default_factory=default_layout)


class PreferencesStore:
    """Reads and writes Preferences as a JSON document.

    Attributes:
        path: Location of the JSON file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Preferences:
        """Read the cached preferences.

        Returns:
            The cached preferences, or defaults if the file is missing,
            unreadable or invalid.
        """
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug(f"No preferences cache at {self.path}, using defaults")
            return Preferences()
        except OSError as e:
            logger.warning(f"Could not read preferences from {self.path}: {e}")
            return Preferences()

        try:
            return Preferences.model_validate_json(data)
        except (ValidationError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring invalid preferences cache {self.path} ({e}), using defaults")
            return Preferences()

    def save(self, preferences: Preferences) -> None:
        """Write preferences, creating the parent directory if needed.

        Raises:
            OSError: If the file cannot be written.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            preferences.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
        )
        logger.debug(f"Saved preferences to {self.path}")
