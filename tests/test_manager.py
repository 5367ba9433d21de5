"""Tests for the tracker manager."""

import math
from datetime import date

import pytest

from budget_tracker.config import ConfigStore
from budget_tracker.errors import (
    ActiveSheetNotSelectedError,
    DuplicateError,
    InvalidDataError,
    NotFoundError,
)
from budget_tracker.manager import create_tracker_manager
from budget_tracker.models.period import Period


class TestActiveSheet:
    """Tests for selecting and updating the active sheet."""

    def test_no_active_sheet_initially(self, manager):
        assert manager.get_active_sheet() is None

    def test_update_without_active_sheet(self, manager):
        with pytest.raises(ActiveSheetNotSelectedError):
            manager.update_active_sheet(lambda sheet: None)

    def test_add_expense_without_active_sheet(self, manager):
        with pytest.raises(ActiveSheetNotSelectedError):
            manager.add_expense_to_active_sheet("Groceries", 10.0)

    def test_select_persists_selection(self, manager, paths, storage):
        """Selecting loads the sheet and records its path in the state file."""
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")

        assert manager.get_active_sheet().name == "01-2024"
        state = ConfigStore.load(paths).state
        assert state.selected_sheet == storage.path_for("01-2024")

    def test_select_missing_sheet(self, manager):
        with pytest.raises(NotFoundError):
            manager.set_active_sheet("nope")
        assert manager.get_active_sheet() is None

    def test_clear_selection(self, manager, paths):
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        manager.set_active_sheet(None)

        assert manager.get_active_sheet() is None
        assert ConfigStore.load(paths).load_active_sheet_path() is None

    def test_update_active_sheet_persists(self, manager, storage):
        """The mutation is on disk once update returns."""
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")

        record = manager.add_expense_to_active_sheet("groceries", 12.5, date(2024, 1, 5))

        assert record.category == "Groceries"
        reloaded = storage.load("01-2024")
        assert len(reloaded.expenses) == 1
        assert reloaded.expenses[0].amount == 12.5

    def test_add_expense_rejects_unknown_category(self, manager, storage):
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")

        with pytest.raises(InvalidDataError):
            manager.add_expense_to_active_sheet("Yachts", 1.0)
        assert storage.load("01-2024").expenses == []

    def test_remove_expense(self, manager, storage):
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        manager.add_expense_to_active_sheet("Groceries", 1.0)
        manager.add_expense_to_active_sheet("Transport", 2.0)

        removed = manager.remove_expense_from_active_sheet(0)

        assert removed.category == "Groceries"
        assert [e.category for e in storage.load("01-2024").expenses] == ["Transport"]
        with pytest.raises(InvalidDataError):
            manager.remove_expense_from_active_sheet(5)

    def test_infinite_amount_is_rejected(self, manager, storage):
        """Nothing unreadable reaches the sheet file."""
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")

        with pytest.raises(InvalidDataError):
            manager.add_expense_to_active_sheet("Groceries", math.inf)
        assert storage.load("01-2024").expenses == []

    def test_select_sheet_whose_file_was_renamed(self, manager, storage):
        """Selecting is refused when the file holds a differently named sheet."""
        storage.create("02-2024", Period.month(2, 2024))
        storage.path_for("02-2024").rename(storage.path_for("feb"))

        with pytest.raises(InvalidDataError, match="holds sheet '02-2024'"):
            manager.set_active_sheet("feb")
        assert manager.get_active_sheet() is None
        assert storage.list_names() == ["feb"]


class TestSheets:
    """Tests for sheet lifecycle through the manager."""

    def test_new_sheet_duplicate(self, manager):
        manager.new_sheet("budget", Period.year(2024))
        with pytest.raises(DuplicateError):
            manager.new_sheet("budget", Period.year(2024))

    def test_overwriting_active_sheet_refreshes_memory(self, manager):
        """The in-memory active sheet follows an overwrite."""
        manager.new_sheet("budget", Period.year(2024))
        manager.set_active_sheet("budget")
        manager.add_expense_to_active_sheet("Groceries", 3.0)

        manager.new_sheet("budget", Period.month(6, 2024), overwrite=True)

        active = manager.get_active_sheet()
        assert active.expenses == []
        assert active.period == Period.month(6, 2024)

    def test_delete_active_sheet_clears_selection(self, manager, paths):
        manager.new_sheet("budget", Period.year(2024))
        manager.set_active_sheet("budget")

        manager.delete_sheet("budget")

        assert manager.get_active_sheet() is None
        assert manager.list_sheets() == []
        assert ConfigStore.load(paths).load_active_sheet_path() is None


class TestStartup:
    """Tests for the composition root."""

    def test_restores_selected_sheet(self, manager, paths, settings):
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        manager.add_expense_to_active_sheet("Transport", 4.0)

        restarted = create_tracker_manager(paths, settings)

        active = restarted.get_active_sheet()
        assert active is not None
        assert active.name == "01-2024"
        assert len(active.expenses) == 1

    def test_stale_selection_is_tolerated(self, manager, paths, settings, storage):
        """A deleted-but-selected sheet leaves no active sheet."""
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        storage.path_for("01-2024").unlink()

        restarted = create_tracker_manager(paths, settings)

        assert restarted.get_active_sheet() is None

    def test_corrupt_selected_sheet_is_tolerated(self, manager, paths, settings, storage):
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        storage.path_for("01-2024").write_text("{]")

        restarted = create_tracker_manager(paths, settings)

        assert restarted.get_active_sheet() is None

    def test_broken_config_is_reported(self, paths, settings):
        """Config failures surface as errors from the composition root."""
        paths.cfg_file.parent.mkdir(parents=True)
        paths.cfg_file.write_text("= nonsense")
        with pytest.raises(InvalidDataError):
            create_tracker_manager(paths, settings)

    def test_command_history_survives_restart(self, manager, paths, settings):
        manager.record_command("show sheets")
        restarted = create_tracker_manager(paths, settings)
        assert restarted.command_history == ["show sheets"]

    def test_selected_sheet_with_invalid_encoding_is_tolerated(
        self, manager, paths, settings, storage
    ):
        """Undecodable bytes in the selected sheet leave no active sheet."""
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        storage.path_for("01-2024").write_bytes(b"\xff\xfe\x00garbage")

        restarted = create_tracker_manager(paths, settings)

        assert restarted.get_active_sheet() is None

    def test_renamed_selected_sheet_is_tolerated(self, manager, paths, settings, storage):
        """A file whose stored name differs from its file name is not restored."""
        manager.new_sheet("01-2024", Period.month(1, 2024))
        manager.set_active_sheet("01-2024")
        storage.path_for("01-2024").unlink()
        storage.create("02-2024", Period.month(2, 2024))
        storage.path_for("02-2024").rename(storage.path_for("01-2024"))

        restarted = create_tracker_manager(paths, settings)

        assert restarted.get_active_sheet() is None
