"""External logger sink — forwards records to a stdlib ``logging.Logger``.

This is the bridge in the outgoing direction: a dispatch tree can hand any
branch over to an existing ``logging`` setup (handlers, formatters, third
party integrations) without knowing anything about it.  Enablement is
delegated to ``Logger.isEnabledFor`` and delivery to ``Logger.handle``.
"""

from __future__ import annotations

import logging

from logtree.models.records import Metadata, Record


class StdlibLoggerSink:
    """Sink delegating to a ``logging.Logger``.

    Parameters
    ----------
    logger:
        The logger receiving records.  Its name is used only for routing
        inside ``logging``; the logtree target is kept on the stdlib record
        as the ``target`` attribute.
    """

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def enabled(self, metadata: Metadata) -> bool:
        return self._logger.isEnabledFor(int(metadata.level))

    def log(self, record: Record) -> None:
        location = record.location
        log_record = self._logger.makeRecord(
            self._logger.name,
            int(record.level),
            location.file or "(unknown file)",
            location.line or 0,
            record.get_message(),
            (),
            None,
            extra={"target": record.target},
        )
        self._logger.handle(log_record)

    def flush(self) -> None:
        for handler in self._logger.handlers:
            handler.flush()

    def __repr__(self) -> str:
        return f"StdlibLoggerSink(logger={self._logger.name!r})"


def stdlib_logger(logger: logging.Logger | str) -> StdlibLoggerSink:
    """Forward to *logger*, given as a ``Logger`` or a logger name."""
    if isinstance(logger, str):
        logger = logging.getLogger(logger)
    return StdlibLoggerSink(logger)
