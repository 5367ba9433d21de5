"""
Tracker Configuration Store

Loads the expense categories and the persisted interaction state.

The main config file (cfg.toml) only points at an optional external
categories file. If that pointer is unset, or points at a file that does
not exist, the built-in default categories are used. This fallback is
normal operation, not an error.

The state file is different: it is owned by the tracker and rewritten in
full after every change. A state file that is empty or unreadable is
replaced by a fresh default state instead of failing startup.
"""

import tomllib
from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from budget_tracker.config.settings import TrackerPaths
from budget_tracker.errors import InvalidDataError, storage_error_from
from budget_tracker.models.expense import ExpenseCategory
from budget_tracker.models.state import DEFAULT_HISTORY_SIZE, TrackerState


logger = structlog.get_logger(__name__)


DEFAULT_CATEGORIES: tuple[ExpenseCategory, ...] = (
    ExpenseCategory(name="Groceries", description="Groceries and dining"),
    ExpenseCategory(name="Cafe && Bar", description="Coffee shops, bars, and related expenses"),
    ExpenseCategory(name="Transport", description="Public transport tickets, taxi expenses"),
)


class ExpensesConfigRaw(BaseModel):
    """Shape of cfg.toml."""
    model_config = ConfigDict(extra="ignore")

    expenses_cfg: Optional[Path] = Field(
        default=None,
        description="Path to an external categories file; '~/' is expanded"
    )


class CategoriesFile(BaseModel):
    """Shape of the external categories file."""
    model_config = ConfigDict(extra="ignore")

    expenses: list[ExpenseCategory] = Field(default_factory=list)


class ConfigStore:
    """
    Owns the category list and the tracker state.

    Use ConfigStore.load() to read everything from disk.
    """

    def __init__(
        self,
        paths: TrackerPaths,
        categories: tuple[ExpenseCategory, ...],
        state: TrackerState,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ):
        self._paths = paths
        self._categories = categories
        self._state = state
        self._history_size = history_size

    @classmethod
    def load(
        cls,
        paths: TrackerPaths,
        history_size: int = DEFAULT_HISTORY_SIZE,
    ) -> "ConfigStore":
        """
        Load configuration and state.

        Raises:
            InvalidDataError: cfg.toml or the categories file cannot be parsed
            StorageError: a file cannot be created or read
        """
        raw = _read_main_config(paths.cfg_file)
        categories = _read_categories(paths, raw.expenses_cfg)
        state = _read_state(paths.state_file)
        return cls(paths, categories, state, history_size)

    @property
    def state(self) -> TrackerState:
        return self._state

    def expenses(self) -> tuple[ExpenseCategory, ...]:
        return self._categories

    def load_active_sheet_path(self) -> Optional[Path]:
        return self._state.selected_sheet

    def update_state(self, mutator: Callable[[TrackerState], object]) -> None:
        """Apply mutator to the in-memory state, then rewrite the state file."""
        mutator(self._state)
        self._save_state()

    def record_command(self, line: str) -> None:
        if line.strip():
            self.update_state(lambda state: state.record_command(line, self._history_size))

    def _save_state(self) -> None:
        path = self._paths.state_file
        try:
            payload = self._state.model_dump_json(indent=2)
        except ValueError as exc:
            raise InvalidDataError(f"Failed to serialize state: {exc}") from exc

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise storage_error_from(exc, path) from exc


def _read_main_config(cfg_file: Path) -> ExpensesConfigRaw:
    try:
        cfg_file.parent.mkdir(parents=True, exist_ok=True)
        cfg_file.touch(exist_ok=True)
        text = cfg_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise storage_error_from(exc, cfg_file) from exc
    except UnicodeDecodeError as exc:
        raise InvalidDataError(f"Failed to parse configuration file: {exc}") from exc

    try:
        return ExpensesConfigRaw.model_validate(tomllib.loads(text))
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        raise InvalidDataError(f"Failed to parse configuration file: {exc}") from exc


def _read_categories(
    paths: TrackerPaths,
    expenses_cfg: Optional[Path],
) -> tuple[ExpenseCategory, ...]:
    if expenses_cfg is None:
        return DEFAULT_CATEGORIES

    categories_path = paths.expand_home(expenses_cfg)
    if not categories_path.exists():
        logger.info("categories_file_missing", path=str(categories_path))
        return DEFAULT_CATEGORIES

    try:
        text = categories_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise storage_error_from(exc, categories_path) from exc
    except UnicodeDecodeError as exc:
        raise InvalidDataError(
            f"Failed to parse expenses configuration file: {exc}"
        ) from exc

    try:
        parsed = CategoriesFile.model_validate(tomllib.loads(text))
    except (tomllib.TOMLDecodeError, ValidationError) as exc:
        raise InvalidDataError(
            f"Failed to parse expenses configuration file: {exc}"
        ) from exc

    return tuple(parsed.expenses)


def _read_state(state_file: Path) -> TrackerState:
    try:
        if not state_file.exists():
            state_file.parent.mkdir(parents=True, exist_ok=True)
            state_file.touch()
        text = state_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise storage_error_from(exc, state_file) from exc
    except UnicodeDecodeError as exc:
        logger.warning("state_file_unreadable", path=str(state_file), error=str(exc))
        return TrackerState()

    if not text.strip():
        return TrackerState()

    try:
        return TrackerState.model_validate_json(text)
    except ValidationError as exc:
        logger.warning("state_file_unreadable", path=str(state_file), error=str(exc))
        return TrackerState()
