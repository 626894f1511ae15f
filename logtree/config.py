"""Environment-driven settings for logtree.

Uses pydantic-settings, reading ``LOGTREE_*`` environment variables and an
optional ``.env`` file.  Only the level settings feed the dispatch builder
(``Dispatch.from_config``); the rest are defaults for the CLI demos.

Examples
--------
Override via environment::

    export LOGTREE_LEVEL=info
    export LOGTREE_LEVEL_FOR='{"noisy::dependency": "warn"}'
    export LOGTREE_LOG_FILE=/var/log/app.log
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logtree.models.levels import LevelFilter


class LogtreeConfig(BaseSettings):
    """logtree settings with environment variable overrides."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="LOGTREE_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Levels
    level: LevelFilter = LevelFilter.TRACE
    level_for: dict[str, LevelFilter] = {}

    # Output
    line_sep: str = "\n"
    log_file: Path | None = None

    # Rotating files
    utc_time: bool = False
    rotate_suffix: str = "%Y-%m-%d.log"

    @field_validator("level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return LevelFilter.parse(value)
        return value

    @field_validator("level_for", mode="before")
    @classmethod
    def _parse_level_for(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {
                target: LevelFilter.parse(level) if isinstance(level, str) else level
                for target, level in value.items()
            }
        return value


# Module-level singleton: import as `from logtree.config import config`
config = LogtreeConfig()
