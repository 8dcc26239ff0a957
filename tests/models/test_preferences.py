"""Unit tests for PreferencesStore."""

import json

from models.preferences import LayoutItem, Preferences, PreferencesStore, default_layout
from models.timer import TimerConfig


class TestPreferencesDefaults:
    """Test fallback to defaults."""

    def test_missing_file_yields_defaults(self, tmp_path):
        store = PreferencesStore(tmp_path / "missing.json")

        preferences = store.load()

        assert preferences.timer == TimerConfig()
        assert [item.i for item in preferences.layout] == ["calendar", "daily", "tasks", "timer"]

    def test_corrupt_file_yields_defaults(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_text("{not json", encoding="utf-8")

        assert PreferencesStore(path).load() == Preferences()

    def test_undecodable_file_yields_defaults(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_bytes(b"\xff\xfe\x00garbage")

        assert PreferencesStore(path).load() == Preferences()

    def test_undecodable_string_value_yields_defaults(self, tmp_path):
        path = tmp_path / "preferences.json"
        path.write_bytes(b'{"layout": [{"i": "\xff", "x": 0, "y": 0, "w": 1, "h": 1}]}')

        assert PreferencesStore(path).load() == Preferences()

    def test_invalid_values_yield_defaults(self, tmp_path):
        """A cached config that fails validation is ignored."""
        path = tmp_path / "preferences.json"
        path.write_text(json.dumps({"timer": {"work_minutes": 0}}), encoding="utf-8")

        assert PreferencesStore(path).load().timer == TimerConfig()

    def test_unreadable_path_yields_defaults(self, tmp_path):
        """A directory in place of the file is treated as a lost cache."""
        assert PreferencesStore(tmp_path).load() == Preferences()


class TestPreferencesRoundTrip:
    """Test saving and loading."""

    def test_save_creates_parent_directories(self, tmp_path):
        path = tmp_path / "nested" / "dir" / "preferences.json"
        store = PreferencesStore(path)
        preferences = Preferences(
            timer=TimerConfig(work_minutes=50, auto_start=False),
            layout=[LayoutItem(i="timer", x=0, y=0, w=4, h=2)],
        )

        store.save(preferences)

        assert path.exists()
        assert store.load() == preferences

    def test_layout_saved_with_grid_field_names(self, tmp_path):
        """Layout items use the grid library's minW/minH keys on disk."""
        path = tmp_path / "preferences.json"
        PreferencesStore(path).save(Preferences(layout=default_layout()))

        saved = json.loads(path.read_text(encoding="utf-8"))

        assert saved["layout"][0] == {
            "i": "calendar", "x": 0, "y": 0, "w": 8, "h": 4, "minW": 6, "minH": 3
        }
