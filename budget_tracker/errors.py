"""
Budget Tracker Errors

Every component raises a subclass of TrackerError instead of aborting.
The interaction loop prints these and moves on to the next command;
only the sheet overwrite prompt looks at the concrete error type.
"""

import errno
from enum import Enum
from pathlib import Path
from typing import Optional


class IOKind(str, Enum):
    """Filesystem failure categories the tracker distinguishes."""
    ALREADY_EXISTS = "already_exists"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    OTHER = "other"


class TrackerError(Exception):
    """Base exception for tracker operations."""
    pass


class StorageError(TrackerError):
    """A filesystem operation failed."""

    io_kind: IOKind = IOKind.OTHER

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        io_kind: Optional[IOKind] = None,
    ):
        super().__init__(message)
        self.path = path
        if io_kind is not None:
            self.io_kind = io_kind

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is not None:
            return f"IO error: {message} ({self.path})"
        return f"IO error: {message}"


class DuplicateError(StorageError):
    """Attempted to create a file that already exists."""

    io_kind = IOKind.ALREADY_EXISTS


class NotFoundError(StorageError):
    """File not found."""

    io_kind = IOKind.NOT_FOUND


class InvalidDataError(TrackerError):
    """Parsing, serialization or validation failed."""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        if self.message:
            return f"Invalid data: {self.message}"
        return "Invalid data"


class InvalidPeriodError(TrackerError):
    """Period start lies after its end."""

    def __str__(self) -> str:
        return f"Invalid period: {super().__str__()}"


class ActiveSheetNotSelectedError(TrackerError):
    """The operation needs an active sheet but none is selected."""

    def __init__(self, message: str = "No active sheet selected. Use 'select <name>' first."):
        super().__init__(message)


def storage_error_from(exc: OSError, path: Optional[Path] = None) -> StorageError:
    """Map an OSError onto the tracker's storage error hierarchy."""
    message = exc.strerror or str(exc)
    target = path if path is not None else (Path(exc.filename) if exc.filename else None)

    if isinstance(exc, FileExistsError) or exc.errno == errno.EEXIST:
        return DuplicateError(message, target)
    if isinstance(exc, FileNotFoundError) or exc.errno == errno.ENOENT:
        return NotFoundError(message, target)
    if isinstance(exc, PermissionError):
        return StorageError(message, target, IOKind.PERMISSION_DENIED)
    return StorageError(message, target)
