"""Configuration model for date-based rotating log files."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

# Roll-over files get a zero-padded counter appended after the time suffix.
ROLL_INDEX_WIDTH = 9


class RotatingFileConfig(BaseModel):
    """Where and how a rotating file sink names its files.

    The active path is ``file_prefix`` immediately followed by the current
    time formatted with ``file_suffix`` (``strftime`` syntax).  No path
    separator is inserted between the two, so ``prefix="logs/app-"`` and
    ``suffix="%Y-%m-%d.log"`` yield ``logs/app-2026-10-18.log``.

    When ``size_limit`` is set, a file that has reached that many bytes is
    rolled over to ``<path>.000000001``, ``<path>.000000002`` and so on until
    the time suffix changes.
    """

    model_config = ConfigDict(frozen=True)

    file_prefix: Path
    file_suffix: str = "%Y-%m-%d.log"
    line_sep: str = "\n"
    utc_time: bool = False
    size_limit: int | None = Field(default=None, gt=0)

    def compute_current_suffix(self, now: datetime | None = None) -> str:
        if now is None:
            now = datetime.now(timezone.utc) if self.utc_time else datetime.now()
        return now.strftime(self.file_suffix)

    def compute_file_path(self, suffix: str, roll_index: int = 0) -> Path:
        path = f"{self.file_prefix}{suffix}"
        if roll_index:
            path = f"{path}.{roll_index:0{ROLL_INDEX_WIDTH}d}"
        return Path(path)
