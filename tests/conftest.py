"""
Shared fixtures.

Every test gets its own TrackerPaths rooted in tmp_path, so nothing ever
touches the real home directory.
"""

from pathlib import Path

import pytest

from budget_tracker.audit import AuditLogger
from budget_tracker.config import AppSettings, ConfigStore, TrackerPaths
from budget_tracker.console.handlers import ConsoleContext
from budget_tracker.manager import TrackerManager, create_tracker_manager
from budget_tracker.services.storage import JsonSheetStorage


class ScriptedInput:
    """Line input that replays prepared answers and records the prompts."""

    def __init__(self, lines=()):
        self.lines = list(lines)
        self.prompts: list[str] = []

    def feed(self, *lines: str) -> None:
        self.lines.extend(lines)

    def read_line(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise EOFError
        return self.lines.pop(0)


@pytest.fixture
def paths(tmp_path: Path) -> TrackerPaths:
    return TrackerPaths(
        home_dir=tmp_path / "home",
        config_dir=tmp_path / "home" / ".btr",
        data_dir=tmp_path / "home" / ".btr",
        state_dir=tmp_path / "state" / "btr",
    )


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings(currency="PLN", history_size=100, log_level="INFO")


@pytest.fixture
def storage(paths: TrackerPaths) -> JsonSheetStorage:
    return JsonSheetStorage(paths.sheets_dir)


@pytest.fixture
def config(paths: TrackerPaths) -> ConfigStore:
    return ConfigStore.load(paths)


@pytest.fixture
def manager(paths: TrackerPaths, settings: AppSettings) -> TrackerManager:
    return create_tracker_manager(paths, settings, AuditLogger())


@pytest.fixture
def line_input() -> ScriptedInput:
    return ScriptedInput()


@pytest.fixture
def ctx(manager: TrackerManager, line_input: ScriptedInput) -> ConsoleContext:
    return ConsoleContext(manager, line_input, currency="PLN")
