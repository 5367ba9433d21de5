"""
Audit Logger

Every change to a sheet or to the active selection is logged as an
AuditEvent. Logging must never break a command: the logger only writes
to the structured log and does not touch the sheet files.

The structured log goes through the standard library logging module.
configure_logging() routes it to a file so the interactive console only
shows what the commands print.
"""

import logging
from pathlib import Path
from typing import Optional

import structlog

from budget_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(log_file: Optional[Path] = None, level: str = "INFO") -> None:
    """
    Send the structured log to log_file.

    Without a file, records go to stderr at WARNING and above only.
    """
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
        root.setLevel(level)
    else:
        handler = logging.StreamHandler()
        root.setLevel(logging.WARNING)

    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)


class AuditLogger:
    """Central audit logging service."""

    def __init__(self):
        self._logger = structlog.get_logger("budget_tracker.audit")

    def log(self, event: AuditEvent) -> None:
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

    def log_sheet_created(self, sheet_name: str, period: str, overwritten: bool = False) -> None:
        self.log(AuditEventBuilder.sheet_created(sheet_name, period, overwritten))

    def log_sheet_selected(self, sheet_name: str) -> None:
        self.log(AuditEventBuilder.sheet_selected(sheet_name))

    def log_sheet_deselected(self) -> None:
        self.log(AuditEventBuilder.sheet_deselected())

    def log_sheet_deleted(self, sheet_name: str) -> None:
        self.log(AuditEventBuilder.sheet_deleted(sheet_name))

    def log_stale_selection(self, path: str, error_message: str) -> None:
        self.log(AuditEventBuilder.stale_selection_dropped(path, error_message))

    def log_expense_added(self, sheet_name: str, category: str, amount: float) -> None:
        self.log(AuditEventBuilder.expense_added(sheet_name, category, amount))

    def log_expense_removed(
        self,
        sheet_name: str,
        index: int,
        category: str,
        amount: float,
    ) -> None:
        self.log(AuditEventBuilder.expense_removed(sheet_name, index, category, amount))

    def log_command_failed(self, command: str, error: BaseException) -> None:
        self.log(AuditEventBuilder.command_failed(command, type(error).__name__, str(error)))
