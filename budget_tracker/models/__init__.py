"""
Data Models Package

All data persisted or passed between tracker components is a pydantic model.
"""

from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from budget_tracker.models.expense import (
    CategoryStats,
    ExpenseCategory,
    ExpenseRecord,
    ExpenseSheet,
)
from budget_tracker.models.period import Period
from budget_tracker.models.state import TrackerState

__all__ = [
    # Sheet models
    "CategoryStats",
    "ExpenseCategory",
    "ExpenseRecord",
    "ExpenseSheet",
    "Period",
    "TrackerState",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
