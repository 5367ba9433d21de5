"""Configuration package."""

from budget_tracker.config.settings import AppSettings, TrackerPaths
from budget_tracker.config.store import (
    DEFAULT_CATEGORIES,
    CategoriesFile,
    ConfigStore,
    ExpensesConfigRaw,
)

__all__ = [
    "AppSettings",
    "CategoriesFile",
    "ConfigStore",
    "DEFAULT_CATEGORIES",
    "ExpensesConfigRaw",
    "TrackerPaths",
]
