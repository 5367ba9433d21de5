"""
Storage Services Package

Provides the abstract sheet storage interface and the JSON file
implementation used by the tracker.
"""

from budget_tracker.services.storage.interface import SheetStorageInterface
from budget_tracker.services.storage.json_files import SHEET_SUFFIX, JsonSheetStorage

__all__ = [
    # Interfaces
    "SheetStorageInterface",
    # JSON file implementation
    "JsonSheetStorage",
    "SHEET_SUFFIX",
]
