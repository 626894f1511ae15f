"""Process-wide logger registration and the leveled logging façade.

A compiled tree is installed once with ``set_logger`` (usually through
``Dispatch.apply()``).  Call sites then log through ``get_logger(__name__)``:

>>> log = get_logger(__name__)
>>> log.info("connected to %s", "db-1")

Each call is cut short by the global max level before any record is built,
then checked against the installed tree's ``enabled``, and only then turned
into a ``Record`` carrying the caller's location.

Installing a second logger raises ``SetLoggerError``; the first one stays in
place.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any

from logtree.errors import SetLoggerError
from logtree.models.levels import Level, LevelFilter
from logtree.models.records import Location, Metadata, Record, module_target
from logtree.routing.sinks import BaseSink
from logtree.routing.sinks.callback import NullSink

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_installed: BaseSink | None = None
_max_level: LevelFilter = LevelFilter.OFF
_NULL = NullSink()


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def set_logger(log: BaseSink, max_level: LevelFilter | Level | str = LevelFilter.TRACE) -> None:
    """Install *log* as the global logger.

    Raises
    ------
    SetLoggerError
        If a global logger is already installed.
    """
    global _installed, _max_level
    level = LevelFilter.coerce(max_level)
    with _lock:
        if _installed is not None:
            raise SetLoggerError(
                f"A global logger is already installed: {_installed!r}"
            )
        _installed = log
        _max_level = level
    logger.info("Installed global logger %r (max_level=%s)", log, level)


def global_logger() -> BaseSink:
    """Return the installed logger, or a sink that discards everything."""
    return _installed if _installed is not None else _NULL


def max_level() -> LevelFilter:
    return _max_level


def set_max_level(level: LevelFilter | Level | str) -> None:
    """Change the global gate without replacing the installed logger."""
    global _max_level
    _max_level = LevelFilter.coerce(level)


def _reset() -> None:
    """Forget the installed logger.  Test suites only."""
    global _installed, _max_level
    with _lock:
        _installed = None
        _max_level = LevelFilter.OFF


# ---------------------------------------------------------------------------
# Façade
# ---------------------------------------------------------------------------


class Logger:
    """Leveled logging bound to one target, routed to the global logger."""

    __slots__ = ("_target",)

    def __init__(self, target: str) -> None:
        self._target = target

    @property
    def target(self) -> str:
        return self._target

    def is_enabled_for(self, level: Level) -> bool:
        if level < _max_level:
            return False
        return global_logger().enabled(Metadata(level=level, target=self._target))

    def log(self, level: Level | str, msg: str, *args: Any) -> None:
        if isinstance(level, str):
            level = Level.parse(level)
        self._emit(level, msg, args)

    def trace(self, msg: str, *args: Any) -> None:
        self._emit(Level.TRACE, msg, args)

    def debug(self, msg: str, *args: Any) -> None:
        self._emit(Level.DEBUG, msg, args)

    def info(self, msg: str, *args: Any) -> None:
        self._emit(Level.INFO, msg, args)

    def warn(self, msg: str, *args: Any) -> None:
        self._emit(Level.WARN, msg, args)

    warning = warn

    def error(self, msg: str, *args: Any) -> None:
        self._emit(Level.ERROR, msg, args)

    def _emit(self, level: Level, msg: str, args: tuple[Any, ...]) -> None:
        if level < _max_level:
            return
        sink = global_logger()
        if not sink.enabled(Metadata(level=level, target=self._target)):
            return
        # 0 is _emit, 1 the level method, 2 the call site.
        frame = sys._getframe(2)
        record = Record(
            level=level,
            target=self._target,
            msg=msg,
            args=args,
            location=Location(
                module_path=frame.f_globals.get("__name__"),
                file=frame.f_code.co_filename,
                line=frame.f_lineno,
            ),
        )
        sink.log(record)

    def __repr__(self) -> str:
        return f"Logger(target={self._target!r})"


def get_logger(name: str) -> Logger:
    """Return a façade logger for a dotted module *name* (``a.b`` -> ``a::b``)."""
    return Logger(module_target(name))
