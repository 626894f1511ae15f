"""Bridge from stdlib ``logging`` into a logtree dispatch tree.

Attach ``DispatchHandler`` to any stdlib logger (typically the root logger)
and every record that reaches it is converted with ``Record.from_stdlib`` and
fed to the tree.  Logger names become ``::`` targets, so
``logging.getLogger("app.db")`` is matched by ``level_for("app::db", ...)``.
Records from logtree's own ``logtree.*`` loggers are dropped, so a tree
never receives diagnostics about itself.

Usage
-----
>>> import logging
>>> from logtree import Dispatch, stderr
>>> tree = Dispatch().level("info").chain(stderr()).into_dispatch()
>>> logging.getLogger().addHandler(DispatchHandler(tree))
"""

from __future__ import annotations

import logging

from logtree.models.levels import Level
from logtree.models.records import Metadata, Record, module_target
from logtree.routing.sinks import BaseSink

# logtree's own diagnostics never re-enter a tree through the bridge.
_INTERNAL_LOGGER = "logtree"


def _is_internal(name: str) -> bool:
    return name == _INTERNAL_LOGGER or name.startswith(_INTERNAL_LOGGER + ".")


class DispatchHandler(logging.Handler):
    """``logging.Handler`` that routes records through a logtree sink."""

    def __init__(self, sink: BaseSink, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self._sink = sink

    @property
    def sink(self) -> BaseSink:
        return self._sink

    def filter(self, record: logging.LogRecord) -> bool:
        if not super().filter(record):
            return False
        if _is_internal(record.name):
            return False
        metadata = Metadata(
            level=Level.from_stdlib(record.levelno),
            target=module_target(record.name),
        )
        return self._sink.enabled(metadata)

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._sink.log(Record.from_stdlib(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)

    def flush(self) -> None:
        self._sink.flush()


def install(sink: BaseSink, logger: logging.Logger | None = None) -> DispatchHandler:
    """Attach a ``DispatchHandler`` for *sink* to *logger* (root by default)."""
    handler = DispatchHandler(sink)
    (logger or logging.getLogger()).addHandler(handler)
    return handler
