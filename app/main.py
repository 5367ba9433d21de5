"""
Terminal Frontend for Budget Tracker

Run with `python app/main.py` from a checkout, or use the installed
`budget-tracker` command.

Paths and settings come from BUDGET_TRACKER_* environment variables
(see budget_tracker.config.settings). Leave the prompt with Ctrl-D.
"""

from budget_tracker.console.loop import main


if __name__ == "__main__":
    raise SystemExit(main())
