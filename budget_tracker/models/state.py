"""Persisted interaction state: selected sheet and command history."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


DEFAULT_HISTORY_SIZE = 100


class TrackerState(BaseModel):
    """
    Small record rewritten in full after every change.

    Empty history and no selected sheet is the state of a fresh install.
    """

    selected_sheet: Optional[Path] = Field(
        default=None,
        description="Path of the sheet selected as active"
    )
    command_history: list[str] = Field(
        default_factory=list,
        description="Raw input lines, oldest first"
    )

    def record_command(self, line: str, limit: int = DEFAULT_HISTORY_SIZE) -> bool:
        """
        Append a line to the history.

        Blank lines and repeats of the immediately preceding entry are
        skipped. Returns True if the history changed.
        """
        line = line.strip()
        if not line:
            return False
        if self.command_history and self.command_history[-1] == line:
            return False

        self.command_history.append(line)
        overflow = len(self.command_history) - limit
        if overflow > 0:
            del self.command_history[:overflow]
        return True
