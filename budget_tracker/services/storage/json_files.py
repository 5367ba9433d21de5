"""
JSON File Sheet Storage

One pretty-printed JSON file per sheet under the sheets directory,
named after the sheet: <sheets_dir>/<name>.json.

Creating a sheet without overwrite opens the file in exclusive-create
mode, so the existence test and the creation are one filesystem
operation. A second creator gets DuplicateError and the first sheet's
content is left untouched.
"""

import os
from pathlib import Path

import structlog
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from budget_tracker.errors import InvalidDataError, storage_error_from
from budget_tracker.models.expense import ExpenseSheet
from budget_tracker.models.period import Period
from budget_tracker.services.storage.interface import SheetStorageInterface


SHEET_SUFFIX = ".json"


class JsonSheetStorage(SheetStorageInterface):
    """Sheet storage backed by individual JSON files."""

    def __init__(self, sheets_dir: Path):
        self._sheets_dir = sheets_dir
        self._logger = structlog.get_logger(__name__)

    @property
    def sheets_dir(self) -> Path:
        return self._sheets_dir

    def path_for(self, name: str) -> Path:
        _validate_name(name)
        return self._sheets_dir / f"{name}{SHEET_SUFFIX}"

    def create(self, name: str, period: Period, overwrite: bool = False) -> ExpenseSheet:
        path = self.path_for(name)
        sheet = ExpenseSheet.empty(name, period)
        # Serialized up front; a failure must not leave a truncated file.
        payload = _serialize(sheet)

        mode = "w" if overwrite else "x"
        try:
            self._sheets_dir.mkdir(parents=True, exist_ok=True)
            with path.open(mode, encoding="utf-8") as handle:
                handle.write(payload)
        except OSError as exc:
            raise storage_error_from(exc, path) from exc

        self._logger.info(
            "sheet_written",
            sheet=name,
            path=str(path),
            overwrite=overwrite,
        )
        return sheet

    def load(self, name: str) -> ExpenseSheet:
        return self.load_path(self.path_for(name))

    def load_path(self, path: Path) -> ExpenseSheet:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise storage_error_from(exc, path) from exc
        except UnicodeDecodeError as exc:
            raise InvalidDataError(f"Sheet {path.name} is not valid UTF-8: {exc}") from exc

        try:
            return ExpenseSheet.model_validate_json(text)
        except ValidationError as exc:
            raise InvalidDataError(f"Failed to parse sheet {path.name}: {exc}") from exc

    def save(self, sheet: ExpenseSheet) -> None:
        path = self.path_for(sheet.name)
        payload = _serialize(sheet)
        try:
            self._sheets_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(payload, encoding="utf-8")
        except OSError as exc:
            raise storage_error_from(exc, path) from exc

        self._logger.debug("sheet_saved", sheet=sheet.name, expenses=len(sheet.expenses))

    def list_names(self) -> list[str]:
        if not self._sheets_dir.is_dir():
            return []

        try:
            entries = list(self._sheets_dir.iterdir())
        except OSError as exc:
            raise storage_error_from(exc, self._sheets_dir) from exc

        return sorted(
            entry.stem
            for entry in entries
            if entry.is_file() and entry.suffix == SHEET_SUFFIX
        )

    def delete(self, name: str) -> None:
        path = self.path_for(name)
        try:
            path.unlink()
        except OSError as exc:
            raise storage_error_from(exc, path) from exc

        self._logger.info("sheet_removed", sheet=name, path=str(path))


def _validate_name(name: str) -> None:
    if not name or not name.strip():
        raise InvalidDataError("Sheet name must not be empty")
    if name in {".", ".."} or "\x00" in name:
        raise InvalidDataError(f"Invalid sheet name: '{name}'")

    separators = {"/", os.sep}
    if os.altsep:
        separators.add(os.altsep)
    if any(sep in name for sep in separators):
        raise InvalidDataError(f"Sheet name must not contain path separators: '{name}'")


def _serialize(sheet: ExpenseSheet) -> str:
    try:
        return sheet.model_dump_json(indent=2)
    except PydanticSerializationError as exc:
        raise InvalidDataError(f"Failed to serialize the data: {exc}") from exc
