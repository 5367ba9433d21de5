"""
Tracker Manager

Ties the configuration store and the sheet storage together and owns
the one active sheet.

GUARANTEES:
- At most one sheet is active at a time
- Every change to the active sheet is written to disk before returning
- The persisted selection always names the active sheet (or nothing)

A selected sheet that cannot be loaded at startup (deleted file, broken
JSON) leaves the tracker without an active sheet. Startup continues.
"""

from datetime import date
from pathlib import Path
from typing import Callable, Optional

import structlog

from budget_tracker.audit import AuditLogger
from budget_tracker.config import AppSettings, ConfigStore, TrackerPaths
from budget_tracker.errors import ActiveSheetNotSelectedError, InvalidDataError, TrackerError
from budget_tracker.models.expense import ExpenseCategory, ExpenseRecord, ExpenseSheet
from budget_tracker.models.period import Period
from budget_tracker.models.state import TrackerState
from budget_tracker.services.storage import JsonSheetStorage, SheetStorageInterface


class TrackerManager:
    """Orchestrates categories, state and sheets."""

    def __init__(
        self,
        config: ConfigStore,
        storage: SheetStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._config = config
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._active_sheet: Optional[ExpenseSheet] = None

        self._restore_active_sheet()

    def _restore_active_sheet(self) -> None:
        selected = self._config.load_active_sheet_path()
        if selected is None:
            return

        try:
            self._active_sheet = _load_selected(self._storage, selected)
        except TrackerError as e:
            self._active_sheet = None
            self._audit_logger.log_stale_selection(str(selected), str(e))

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def get_categories(self) -> tuple[ExpenseCategory, ...]:
        return self._config.expenses()

    def get_active_sheet(self) -> Optional[ExpenseSheet]:
        return self._active_sheet

    def list_sheets(self) -> list[str]:
        return self._storage.list_names()

    @property
    def command_history(self) -> list[str]:
        return list(self._config.state.command_history)

    # -------------------------------------------------------------------------
    # Sheets
    # -------------------------------------------------------------------------

    def new_sheet(self, name: str, period: Period, overwrite: bool = False) -> ExpenseSheet:
        """
        Create an empty sheet.

        Raises:
            DuplicateError: The sheet exists and overwrite is False
        """
        sheet = self._storage.create(name, period, overwrite)
        self._audit_logger.log_sheet_created(name, str(period), overwritten=overwrite)

        # An overwritten active sheet must not keep its old expenses in memory.
        if self._active_sheet is not None and self._active_sheet.name == name:
            self._active_sheet = sheet
        return sheet

    def set_active_sheet(self, name: Optional[str]) -> None:
        """
        Select a sheet by name, or clear the selection with None.

        Raises:
            NotFoundError: No sheet with that name
            InvalidDataError: The sheet file cannot be parsed, or names
                a different sheet than its file
        """
        if name is None:
            self._active_sheet = None
            self._config.update_state(_clear_selection)
            self._audit_logger.log_sheet_deselected()
            return

        path = self._storage.path_for(name)
        sheet = _load_selected(self._storage, path)
        self._active_sheet = sheet
        self._config.update_state(lambda state: _select(state, path))
        self._audit_logger.log_sheet_selected(sheet.name)

    def update_active_sheet(self, mutator: Callable[[ExpenseSheet], object]) -> None:
        """
        Apply mutator to the active sheet and rewrite it.

        Raises:
            ActiveSheetNotSelectedError: No sheet is active
        """
        if self._active_sheet is None:
            raise ActiveSheetNotSelectedError()

        self._storage.update(self._active_sheet, mutator)

    def delete_sheet(self, name: str) -> None:
        """Remove a sheet file, clearing the selection first if it is active."""
        if self._active_sheet is not None and self._active_sheet.name == name:
            self.set_active_sheet(None)

        self._storage.delete(name)
        self._audit_logger.log_sheet_deleted(name)

    # -------------------------------------------------------------------------
    # Expenses
    # -------------------------------------------------------------------------

    def add_expense_to_active_sheet(
        self,
        category: str,
        amount: float,
        logged_on: Optional[date] = None,
    ) -> ExpenseRecord:
        """
        Append one expense to the active sheet.

        Raises:
            ActiveSheetNotSelectedError: No sheet is active
            InvalidDataError: Unknown category or non-positive amount
        """
        if self._active_sheet is None:
            raise ActiveSheetNotSelectedError()

        record = ExpenseRecord.create(
            category,
            amount,
            logged_on=logged_on,
            categories=self.get_categories(),
        )
        self.update_active_sheet(lambda sheet: sheet.expenses.append(record))
        self._audit_logger.log_expense_added(self._active_sheet.name, record.category, record.amount)
        return record

    def remove_expense_from_active_sheet(self, index: int) -> ExpenseRecord:
        """
        Remove the expense at a zero-based index.

        Raises:
            ActiveSheetNotSelectedError: No sheet is active
            InvalidDataError: Index out of range
        """
        if self._active_sheet is None:
            raise ActiveSheetNotSelectedError()

        count = len(self._active_sheet.expenses)
        if not 0 <= index < count:
            raise InvalidDataError(
                f"Expense index {index} out of range (sheet has {count} expenses)"
            )

        removed = self._active_sheet.expenses[index]
        self.update_active_sheet(lambda sheet: sheet.expenses.pop(index))
        self._audit_logger.log_expense_removed(
            self._active_sheet.name, index, removed.category, removed.amount
        )
        return removed

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    def record_command(self, line: str) -> None:
        self._config.record_command(line)


def _load_selected(storage: SheetStorageInterface, path: Path) -> ExpenseSheet:
    sheet = storage.load_path(path)
    # save() writes to path_for(sheet.name); it must be this file.
    if storage.path_for(sheet.name) != path:
        raise InvalidDataError(
            f"Sheet file {path.name} holds sheet '{sheet.name}'"
        )
    return sheet


def _select(state: TrackerState, path: Path) -> None:
    state.selected_sheet = path


def _clear_selection(state: TrackerState) -> None:
    state.selected_sheet = None


def create_tracker_manager(
    paths: TrackerPaths,
    settings: Optional[AppSettings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> TrackerManager:
    """
    Composition root: load config and state, then restore the active sheet.

    Raises:
        TrackerError: Configuration or state could not be loaded
    """
    settings = settings or AppSettings()
    config = ConfigStore.load(paths, history_size=settings.history_size)
    storage = JsonSheetStorage(paths.sheets_dir)

    structlog.get_logger(__name__).info(
        "tracker_started",
        config_dir=str(paths.config_dir),
        sheets_dir=str(paths.sheets_dir),
        categories=len(config.expenses()),
    )
    return TrackerManager(config, storage, audit_logger)
