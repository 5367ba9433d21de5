"""
Interaction Loop

Reads a line, resolves it against the command tree and runs the handler
to completion before reading the next line. A failing command prints an
error and the loop carries on; only end of input or Ctrl-C stops it.
"""

import sys
from typing import Optional

import structlog

from budget_tracker.audit import AuditLogger, configure_logging
from budget_tracker.config import AppSettings, TrackerPaths
from budget_tracker.console.commands import CommandTree, build_command_tree, help_context
from budget_tracker.console.handlers import ConsoleContext, LineInput
from budget_tracker.errors import TrackerError
from budget_tracker.manager import TrackerManager, create_tracker_manager


PROMPT = "> "


class InteractionLoop:
    """Drives the command tree from a line input."""

    def __init__(
        self,
        manager: TrackerManager,
        line_input: LineInput,
        tree: Optional[CommandTree] = None,
        currency: str = "PLN",
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._manager = manager
        self._line_input = line_input
        self._tree = tree or build_command_tree()
        self._context = ConsoleContext(manager, line_input, currency)
        self._audit_logger = audit_logger or AuditLogger()
        self._logger = structlog.get_logger(__name__)

    def run(self) -> None:
        while True:
            try:
                line = self._line_input.read_line(PROMPT)
            except (EOFError, KeyboardInterrupt):
                print()
                return
            self.handle_line(line)

    def handle_line(self, line: str) -> None:
        tokens = line.split()
        if not tokens:
            return

        try:
            self._manager.record_command(line)
        except TrackerError as e:
            self._logger.warning("history_not_saved", error=str(e))

        # 'help' anywhere in the line replaces normal dispatch
        context = help_context(tokens)
        if context is not None:
            resolution = self._tree.resolve(context)
            if resolution is None:
                print(f"> FAILED: Unknown command: {' '.join(context)}", file=sys.stderr)
            else:
                print(self._tree.render_help(resolution))
            return

        resolution = self._tree.resolve(tokens)
        if resolution is None:
            print(f"> FAILED: Unknown command: {' '.join(tokens)}", file=sys.stderr)
            return

        handler = resolution.node.handler
        if handler is None:
            print(self._tree.render_help(resolution))
            return

        try:
            handler(self._context, list(resolution.tail))
        except TrackerError as e:
            self._audit_logger.log_command_failed(line.strip(), e)
            print(f"! ERROR: {e}", file=sys.stderr)
        except Exception as e:
            self._logger.exception("command_crashed", command=line.strip())
            self._audit_logger.log_command_failed(line.strip(), e)
            print(f"! ERROR: Unexpected failure: {e}", file=sys.stderr)


def main() -> int:
    """Console entry point."""
    settings = AppSettings()
    paths = TrackerPaths()
    configure_logging(paths.log_file, settings.log_level)

    try:
        manager = create_tracker_manager(paths, settings)
    except TrackerError as e:
        print(f"! ERROR. Unable to start application: {e}", file=sys.stderr)
        return 1

    # prompt_toolkit wants a real terminal.
    from budget_tracker.console.line_input import PromptLineInput

    line_input = PromptLineInput(manager.command_history)
    InteractionLoop(manager, line_input, currency=settings.currency).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
