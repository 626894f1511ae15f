"""Rotating file sink — one log file per time period, optional size roll-over.

Before every write the sink formats the current time with the configured
suffix.  When that differs from the suffix of the open file (or no file is
open) the old handle is flushed and closed and a new file is opened for
create + append.  If the open fails, the sink holds no file, the write is
reported through the fallback path, and the open is retried on the next
write.

State machine::

    NoFile --write--> Open(S)            suffix S computed, open succeeded
    Open(S) --write, suffix S'--> Open(S')
    Open(S) --write, size limit--> Open(S, n+1)
    any --open fails--> NoFile           retried on the next write
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from logtree.models.records import Metadata, Record
from logtree.models.rotation import RotatingFileConfig
from logtree.routing.fallback import fallback_on_error

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


class RotatingFileSink:
    """Date-based rotating file sink.

    Parameters
    ----------
    config:
        Naming, separator, timezone and size-limit settings.
    clock:
        Returns the current time.  Defaults to local or UTC ``now`` as the
        config dictates; tests inject a fixed clock.

    Internal diagnostics are never logged while ``_lock`` is held: a stdlib
    bridge can route them back into this same sink.
    """

    def __init__(self, config: RotatingFileConfig, clock: Clock | None = None) -> None:
        self._config = config
        self._clock = clock
        self._lock = threading.Lock()
        self._handle: BinaryIO | None = None
        self._current_suffix: str | None = None
        self._roll_index = 0
        self._size = 0

        suffix = self._compute_suffix()
        try:
            path = self._open(suffix, 0)
        except OSError as exc:
            # Retried on the first write.
            logger.debug(
                "RotatingFileSink: initial open of %s failed: %s",
                config.compute_file_path(suffix),
                exc,
            )
        else:
            logger.debug("RotatingFileSink: writing to %s", path)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> RotatingFileConfig:
        return self._config

    @property
    def current_suffix(self) -> str | None:
        return self._current_suffix

    @property
    def current_path(self) -> Path | None:
        """Path of the open file, or ``None`` when no file is open."""
        if self._handle is None or self._current_suffix is None:
            return None
        return self._config.compute_file_path(self._current_suffix, self._roll_index)

    @property
    def is_writable(self) -> bool:
        return self._handle is not None

    # ------------------------------------------------------------------
    # Sink protocol
    # ------------------------------------------------------------------

    def enabled(self, metadata: Metadata) -> bool:
        return True

    def log(self, record: Record) -> None:
        fallback_on_error(record, self._write)

    def flush(self) -> None:
        error: OSError | None = None
        with self._lock:
            if self._handle is not None:
                try:
                    self._handle.flush()
                except OSError as exc:
                    error = exc
        if error is not None:
            logger.debug("RotatingFileSink: flush failed: %s", error)

    def close(self) -> None:
        """Flush and close the open file, if any.

        Raises
        ------
        OSError
            If the final flush fails.  The handle is closed regardless.
        """
        with self._lock:
            self._close_handle()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _compute_suffix(self) -> str:
        now = self._clock() if self._clock is not None else None
        return self._config.compute_current_suffix(now)

    def _write(self, record: Record) -> None:
        data = (record.get_message() + self._config.line_sep).encode("utf-8")
        opened: Path | None = None
        with self._lock:
            suffix = self._compute_suffix()
            if suffix != self._current_suffix:
                opened = self._open(suffix, 0)
            elif self._handle is None:
                opened = self._open(suffix, self._roll_index)
            elif self._limit_reached():
                opened = self._open(suffix, self._roll_index + 1)

            if self._handle is None:
                raise OSError("RotatingFileSink: no log file is open")
            self._handle.write(data)
            self._handle.flush()
            self._size += len(data)
        if opened is not None:
            logger.debug("RotatingFileSink: writing to %s", opened)

    def _limit_reached(self) -> bool:
        limit = self._config.size_limit
        return limit is not None and self._size >= limit

    def _open(self, suffix: str, roll_index: int) -> Path:
        """Replace the open file and return its path.

        Must be called with the lock held (or in ``__init__``).  Does not log.
        """
        self._close_handle()
        self._current_suffix = suffix
        self._roll_index = roll_index
        while True:
            path = self._config.compute_file_path(suffix, self._roll_index)
            path.parent.mkdir(parents=True, exist_ok=True)
            handle = open(path, "ab")  # noqa: SIM115
            self._handle = handle
            self._size = handle.tell()
            if not self._limit_reached():
                break
            # Left over from an earlier run and already full.
            self._close_handle()
            self._roll_index += 1
        return path

    def _close_handle(self) -> None:
        """Flush and close the open handle.  A failed flush propagates."""
        handle, self._handle = self._handle, None
        self._size = 0
        if handle is None:
            return
        try:
            handle.flush()
        finally:
            handle.close()

    def __repr__(self) -> str:
        return f"RotatingFileSink(path={self.current_path!r})"


def date_based(
    file_prefix: Path | str,
    file_suffix: str = "%Y-%m-%d.log",
    *,
    line_sep: str = "\n",
    utc_time: bool = False,
    size_limit: int | None = None,
    clock: Clock | None = None,
) -> RotatingFileSink:
    """Create a rotating file sink writing to ``file_prefix + strftime(file_suffix)``."""
    config = RotatingFileConfig(
        file_prefix=Path(file_prefix),
        file_suffix=file_suffix,
        line_sep=line_sep,
        utc_time=utc_time,
        size_limit=size_limit,
    )
    return RotatingFileSink(config, clock=clock)
