"""
Audit Models for Budget Tracker

Every change to sheets or the active selection produces an AuditEvent.
Events go to the structured log so the history of a budget can be
reconstructed from the log file alone.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Sheets
    SHEET_CREATED = "sheet_created"
    SHEET_OVERWRITTEN = "sheet_overwritten"
    SHEET_SELECTED = "sheet_selected"
    SHEET_DESELECTED = "sheet_deselected"
    SHEET_DELETED = "sheet_deleted"
    STALE_SELECTION_DROPPED = "stale_selection_dropped"

    # Expenses
    EXPENSE_ADDED = "expense_added"
    EXPENSE_REMOVED = "expense_removed"

    # Commands
    COMMAND_FAILED = "command_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single audit event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Which sheet the event is about, if any
    sheet_name: Optional[str] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "sheet_name": self.sheet_name,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """Helper to build audit events with common patterns."""

    @staticmethod
    def sheet_created(sheet_name: str, period: str, overwritten: bool = False) -> AuditEvent:
        return AuditEvent(
            event_type=(
                AuditEventType.SHEET_OVERWRITTEN if overwritten else AuditEventType.SHEET_CREATED
            ),
            sheet_name=sheet_name,
            description=f"Sheet '{sheet_name}' {'overwritten' if overwritten else 'created'}",
            details={"period": period},
        )

    @staticmethod
    def sheet_selected(sheet_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHEET_SELECTED,
            sheet_name=sheet_name,
            description=f"Sheet '{sheet_name}' selected as active",
        )

    @staticmethod
    def sheet_deselected() -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHEET_DESELECTED,
            description="Active sheet cleared",
        )

    @staticmethod
    def sheet_deleted(sheet_name: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SHEET_DELETED,
            severity=AuditSeverity.WARNING,
            sheet_name=sheet_name,
            description=f"Sheet '{sheet_name}' deleted",
        )

    @staticmethod
    def stale_selection_dropped(path: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STALE_SELECTION_DROPPED,
            severity=AuditSeverity.WARNING,
            description="Previously selected sheet could not be loaded",
            details={"path": path},
            error_message=error_message,
        )

    @staticmethod
    def expense_added(sheet_name: str, category: str, amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            sheet_name=sheet_name,
            description=f"Expense added to '{sheet_name}'",
            details={"category": category, "amount": amount},
        )

    @staticmethod
    def expense_removed(sheet_name: str, index: int, category: str, amount: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_REMOVED,
            sheet_name=sheet_name,
            description=f"Expense #{index} removed from '{sheet_name}'",
            details={"index": index, "category": category, "amount": amount},
        )

    @staticmethod
    def command_failed(command: str, error_type: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COMMAND_FAILED,
            severity=AuditSeverity.ERROR,
            description=f"Command '{command}' failed",
            details={"error_type": error_type},
            error_message=error_message,
        )
