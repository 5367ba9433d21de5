"""Tests for settings and the configuration store."""

from pathlib import Path

import pytest

from budget_tracker.config import DEFAULT_CATEGORIES, AppSettings, ConfigStore, TrackerPaths
from budget_tracker.errors import InvalidDataError


CATEGORIES_TOML = """
[[expenses]]
name = "Rent"
description = "Monthly rent"

[[expenses]]
name = "Books"
"""


class TestTrackerPaths:
    """Tests for path resolution."""

    def test_defaults_derive_from_home(self, tmp_path, monkeypatch):
        """Unset roots fall back to ~/.btr and the XDG data dir."""
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg"))
        paths = TrackerPaths(home_dir=tmp_path)
        assert paths.cfg_file == tmp_path / ".btr" / "cfg.toml"
        assert paths.sheets_dir == tmp_path / ".btr" / "sheets"
        assert paths.state_file == tmp_path / "xdg" / "btr" / "state"

    def test_state_dir_without_xdg(self, tmp_path, monkeypatch):
        monkeypatch.delenv("XDG_DATA_HOME", raising=False)
        paths = TrackerPaths(home_dir=tmp_path)
        assert paths.state_dir == tmp_path / ".local" / "share" / "btr"

    def test_environment_override(self, tmp_path, monkeypatch):
        """BUDGET_TRACKER_* variables override the roots."""
        monkeypatch.setenv("BUDGET_TRACKER_DATA_DIR", str(tmp_path / "data"))
        paths = TrackerPaths(home_dir=tmp_path)
        assert paths.sheets_dir == tmp_path / "data" / "sheets"

    def test_expand_home(self, paths):
        assert paths.expand_home(Path("~/cats.toml")) == paths.home_dir / "cats.toml"
        assert paths.expand_home(Path("/etc/cats.toml")) == Path("/etc/cats.toml")


class TestAppSettings:
    """Tests for application settings."""

    def test_log_level_normalised(self):
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValueError):
            AppSettings(log_level="chatty")

    def test_history_size_bounds(self):
        with pytest.raises(ValueError):
            AppSettings(history_size=0)


class TestConfigStore:
    """Tests for loading categories and state."""

    def test_fresh_environment(self, paths):
        """A missing config and state are created empty."""
        store = ConfigStore.load(paths)
        assert paths.cfg_file.exists()
        assert paths.state_file.exists()
        assert store.expenses() == DEFAULT_CATEGORIES
        assert len(store.expenses()) >= 3
        assert store.load_active_sheet_path() is None
        assert store.state.command_history == []

    def test_configured_but_missing_categories_file(self, paths):
        """A dangling categories pointer falls back to the defaults."""
        paths.cfg_file.parent.mkdir(parents=True)
        paths.cfg_file.write_text('expenses_cfg = "~/nowhere.toml"\n')
        store = ConfigStore.load(paths)
        assert store.expenses() == DEFAULT_CATEGORIES

    def test_categories_file_with_home_prefix(self, paths):
        """Categories are read from a '~/' relative file, in order."""
        paths.home_dir.mkdir(parents=True, exist_ok=True)
        (paths.home_dir / "cats.toml").write_text(CATEGORIES_TOML)
        paths.cfg_file.parent.mkdir(parents=True, exist_ok=True)
        paths.cfg_file.write_text('expenses_cfg = "~/cats.toml"\n')

        store = ConfigStore.load(paths)
        names = [category.name for category in store.expenses()]
        assert names == ["Rent", "Books"]
        assert store.expenses()[0].description == "Monthly rent"
        assert store.expenses()[1].description is None

    def test_broken_main_config(self, paths):
        """An unparseable cfg.toml is invalid data."""
        paths.cfg_file.parent.mkdir(parents=True)
        paths.cfg_file.write_text("expenses_cfg = [unterminated\n")
        with pytest.raises(InvalidDataError, match="configuration file"):
            ConfigStore.load(paths)

    def test_broken_categories_file(self, paths, tmp_path):
        """An unparseable categories file is invalid data."""
        cats = tmp_path / "cats.toml"
        cats.write_text("[[expenses]]\ndescription = 'no name'\n")
        paths.cfg_file.parent.mkdir(parents=True)
        paths.cfg_file.write_text(f'expenses_cfg = "{cats.as_posix()}"\n')
        with pytest.raises(InvalidDataError, match="expenses configuration"):
            ConfigStore.load(paths)

    def test_unreadable_state_is_not_fatal(self, paths):
        """Garbage in the state file yields a default state."""
        paths.state_file.parent.mkdir(parents=True)
        paths.state_file.write_text("not json at all")
        store = ConfigStore.load(paths)
        assert store.load_active_sheet_path() is None

    def test_update_state_rewrites_file(self, paths):
        """Every state update is persisted immediately."""
        store = ConfigStore.load(paths)
        target = paths.sheets_dir / "01-2024.json"

        def select(state):
            state.selected_sheet = target

        store.update_state(select)

        reloaded = ConfigStore.load(paths)
        assert reloaded.load_active_sheet_path() == target

    def test_record_command_persists_history(self, paths):
        store = ConfigStore.load(paths)
        store.record_command("show sheets")
        store.record_command("show sheets")
        store.record_command("   ")
        store.record_command("add sheet")

        reloaded = ConfigStore.load(paths)
        assert reloaded.state.command_history == ["show sheets", "add sheet"]

    def test_history_size_respected(self, paths):
        store = ConfigStore.load(paths, history_size=2)
        for line in ("a", "b", "c"):
            store.record_command(line)
        assert store.state.command_history == ["b", "c"]

    def test_state_with_invalid_encoding_is_not_fatal(self, paths):
        """A state file that is not UTF-8 yields a default state."""
        paths.state_file.parent.mkdir(parents=True)
        paths.state_file.write_bytes(b"\xff\xfe\x00")
        store = ConfigStore.load(paths)
        assert store.load_active_sheet_path() is None
        assert store.state.command_history == []

    def test_main_config_with_invalid_encoding(self, paths):
        paths.cfg_file.parent.mkdir(parents=True)
        paths.cfg_file.write_bytes(b"\xff\xfe\x00")
        with pytest.raises(InvalidDataError, match="configuration file"):
            ConfigStore.load(paths)

    def test_categories_file_with_invalid_encoding(self, paths, tmp_path):
        cats = tmp_path / "cats.toml"
        cats.write_bytes(b"\xff\xfe\x00")
        paths.cfg_file.parent.mkdir(parents=True)
        paths.cfg_file.write_text(f'expenses_cfg = "{cats.as_posix()}"\n')
        with pytest.raises(InvalidDataError, match="expenses configuration"):
            ConfigStore.load(paths)
