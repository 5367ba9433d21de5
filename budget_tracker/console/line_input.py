"""
Console line input with up/down history recall.

The history is seeded from the persisted command history, so lines from
previous sessions are available after a restart.
"""

from typing import Iterable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory


class PromptLineInput:
    """Reads finished lines from the terminal via prompt_toolkit."""

    def __init__(self, history: Optional[Iterable[str]] = None):
        self._history = InMemoryHistory()
        for line in history or ():
            self._history.append_string(line)
        self._session: PromptSession = PromptSession(history=self._history)

    def read_line(self, prompt: str) -> str:
        # Ctrl-D raises EOFError, Ctrl-C raises KeyboardInterrupt.
        return self._session.prompt(prompt)
