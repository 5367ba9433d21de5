"""Services package."""

from budget_tracker.services.storage import (
    SHEET_SUFFIX,
    JsonSheetStorage,
    SheetStorageInterface,
)

__all__ = [
    # Storage services
    "JsonSheetStorage",
    "SHEET_SUFFIX",
    "SheetStorageInterface",
]
