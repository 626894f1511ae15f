"""Writer sink — appends each record's message plus a line separator to a stream.

Works with text streams (``str`` writes) and binary streams (UTF-8 encoded
``bytes`` writes).  Every record is written and flushed under the sink's
lock, so concurrent callers never interleave partial lines.

Factories
---------
``stdout()`` / ``stderr()``
    Resolve ``sys.stdout`` / ``sys.stderr`` at write time, so redirected or
    captured streams are honoured.
``file(path)``
    Opens *path* for create + append in binary mode.  Raises ``InitError``
    if the file cannot be opened.
``writer(stream)``
    Wraps any object with ``write`` and ``flush``.
"""

from __future__ import annotations

import io
import logging
import sys
import threading
from pathlib import Path
from typing import Any

from logtree.errors import InitError
from logtree.models.records import Metadata, Record
from logtree.routing.fallback import fallback_on_error

logger = logging.getLogger(__name__)

DEFAULT_LINE_SEP = "\n"


def _is_binary(stream: Any) -> bool:
    if isinstance(stream, io.TextIOBase):
        return False
    if isinstance(stream, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(stream, "mode", "")
    return isinstance(mode, str) and "b" in mode


class _StandardStream:
    """Late-bound proxy for ``sys.stdout`` or ``sys.stderr``."""

    def __init__(self, name: str) -> None:
        self.name = name

    def write(self, text: str) -> int:
        return getattr(sys, self.name).write(text)

    def flush(self) -> None:
        getattr(sys, self.name).flush()

    def __repr__(self) -> str:
        return f"<sys.{self.name}>"


class Writer:
    """Sink writing ``message + line_sep`` to a stream, one flush per record.

    Parameters
    ----------
    stream:
        Any text or binary stream.
    line_sep:
        Appended after every message.  Defaults to ``"\\n"``.
    """

    def __init__(self, stream: Any, line_sep: str = DEFAULT_LINE_SEP) -> None:
        self._stream = stream
        self._line_sep = line_sep
        self._binary = _is_binary(stream)
        self._lock = threading.Lock()

    @property
    def stream(self) -> Any:
        return self._stream

    @property
    def line_sep(self) -> str:
        return self._line_sep

    def enabled(self, metadata: Metadata) -> bool:
        return True

    def log(self, record: Record) -> None:
        fallback_on_error(record, self._write)

    def _write(self, record: Record) -> None:
        # Render before taking the lock: a message whose rendering logs
        # through this same sink must not deadlock.
        line = record.get_message() + self._line_sep
        data = line.encode("utf-8") if self._binary else line
        with self._lock:
            self._stream.write(data)
            self._stream.flush()

    def flush(self) -> None:
        failed = False
        with self._lock:
            try:
                self._stream.flush()
            except (OSError, ValueError):
                failed = True
        # Outside the lock: a stdlib bridge may route this back here.
        if failed:
            logger.debug("Writer: flush failed on %r", self._stream)

    def close(self) -> None:
        """Flush and close the underlying stream."""
        with self._lock:
            try:
                self._stream.flush()
            finally:
                self._stream.close()

    def __repr__(self) -> str:
        return f"Writer(stream={self._stream!r}, line_sep={self._line_sep!r})"


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def stdout(line_sep: str = DEFAULT_LINE_SEP) -> Writer:
    """Writer targeting whatever ``sys.stdout`` is at write time."""
    return Writer(_StandardStream("stdout"), line_sep)


def stderr(line_sep: str = DEFAULT_LINE_SEP) -> Writer:
    """Writer targeting whatever ``sys.stderr`` is at write time."""
    return Writer(_StandardStream("stderr"), line_sep)


def file(path: Path | str, line_sep: str = DEFAULT_LINE_SEP) -> Writer:
    """Open *path* for appending (creating it if needed) and wrap it.

    Raises
    ------
    InitError
        If the file cannot be opened.
    """
    try:
        handle = open(path, "ab")  # noqa: SIM115
    except OSError as exc:
        raise InitError(f"Failed to open log file {path}: {exc}", exc) from exc
    logger.debug("Opened log file %s", path)
    return Writer(handle, line_sep)


def writer(stream: Any, line_sep: str = DEFAULT_LINE_SEP) -> Writer:
    """Wrap an arbitrary stream with ``write`` and ``flush`` methods."""
    return Writer(stream, line_sep)
