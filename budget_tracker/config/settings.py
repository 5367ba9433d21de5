"""
Configuration Management for Budget Tracker

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: Paths are resolved once, at startup, into a TrackerPaths
object which is handed to every store. Nothing below the entry point
looks up the home directory on its own, so tests can point the whole
tracker at a temporary directory.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_DIR_NAME = ".btr"
STATE_DIR_NAME = "btr"


class TrackerPaths(BaseSettings):
    """
    Filesystem roots used by the tracker.

    Every root can be overridden with a BUDGET_TRACKER_* environment
    variable; unset roots are derived from the home directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_",
        extra="ignore"
    )

    home_dir: Path = Field(
        default_factory=Path.home,
        description="Home directory used to expand '~/' prefixes"
    )
    config_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding cfg.toml (default: ~/.btr)"
    )
    state_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding the state file (default: $XDG_DATA_HOME/btr)"
    )
    data_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding the sheets directory (default: ~/.btr)"
    )

    @model_validator(mode="after")
    def fill_default_roots(self) -> "TrackerPaths":
        app_dir = self.home_dir / APP_DIR_NAME
        if self.config_dir is None:
            self.config_dir = app_dir
        if self.data_dir is None:
            self.data_dir = app_dir
        if self.state_dir is None:
            xdg_data = os.environ.get("XDG_DATA_HOME")
            base = Path(xdg_data) if xdg_data else self.home_dir / ".local" / "share"
            self.state_dir = base / STATE_DIR_NAME
        return self

    @property
    def cfg_file(self) -> Path:
        return self.config_dir / "cfg.toml"

    @property
    def state_file(self) -> Path:
        return self.state_dir / "state"

    @property
    def sheets_dir(self) -> Path:
        return self.data_dir / "sheets"

    @property
    def log_file(self) -> Path:
        return self.state_dir / "btr.log"

    def expand_home(self, path: Path) -> Path:
        """Resolve a leading '~/' against the configured home directory."""
        parts = path.parts
        if parts and parts[0] == "~":
            return self.home_dir.joinpath(*parts[1:])
        return path


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="BUDGET_TRACKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    currency: str = Field(
        default="PLN",
        min_length=1,
        max_length=8,
        description="Currency label printed next to amounts"
    )
    history_size: int = Field(
        default=100,
        ge=1,
        le=10000,
        description="Maximum number of remembered input lines"
    )
    log_level: str = Field(
        default="INFO",
        description="Level for the structured log file"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level
