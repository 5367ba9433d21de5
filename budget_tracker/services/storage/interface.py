"""
Abstract Sheet Storage Interface

The manager only talks to this interface, so the file-per-sheet JSON
layout can be replaced (or faked in tests) without touching the
business logic. The interface is intentionally small: just the
operations the tracker needs.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable

from budget_tracker.models.expense import ExpenseSheet
from budget_tracker.models.period import Period


class SheetStorageInterface(ABC):
    """Abstract interface for expense sheet storage."""

    @abstractmethod
    def path_for(self, name: str) -> Path:
        """Deterministic location of the sheet called name."""
        pass

    @abstractmethod
    def create(self, name: str, period: Period, overwrite: bool = False) -> ExpenseSheet:
        """
        Persist a fresh, empty sheet.

        Args:
            name: Sheet name
            period: Period the sheet covers
            overwrite: Replace an existing sheet instead of failing

        Returns:
            The sheet that was written

        Raises:
            DuplicateError: The sheet exists and overwrite is False
            InvalidDataError: The name is unusable or serialization failed
        """
        pass

    @abstractmethod
    def load(self, name: str) -> ExpenseSheet:
        """
        Read a sheet by name.

        Raises:
            NotFoundError: No such sheet
            InvalidDataError: The file does not hold a valid sheet
        """
        pass

    @abstractmethod
    def load_path(self, path: Path) -> ExpenseSheet:
        """Read a sheet from an explicit file path."""
        pass

    @abstractmethod
    def save(self, sheet: ExpenseSheet) -> None:
        """Rewrite the whole sheet file."""
        pass

    @abstractmethod
    def list_names(self) -> list[str]:
        """Names of all stored sheets, sorted."""
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """
        Remove a sheet.

        Raises:
            NotFoundError: No such sheet
        """
        pass

    def update(self, sheet: ExpenseSheet, mutator: Callable[[ExpenseSheet], object]) -> None:
        """Apply mutator to sheet, then rewrite it in full."""
        mutator(sheet)
        self.save(sheet)
