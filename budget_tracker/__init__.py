"""
Budget Tracker - Source Package

A personal budget tracker for the terminal. Expenses are logged into
named sheets, one JSON file per sheet, and one sheet at a time is active.

DESIGN PRINCIPLES:
1. Every change is written to disk before the command returns
2. Fail visibly, never crash the session
3. No silent overwrites: replacing a sheet requires confirmation
4. Storage layer is swappable
"""

# Importing the audit logger configures structlog for the whole package.
from budget_tracker.audit import logger as _audit_logger  # noqa: F401

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
