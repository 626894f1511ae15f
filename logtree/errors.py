"""Exception types raised by logtree.

Configuration problems surface to the caller that builds a tree.  Failures
while writing an individual record never do: they go through the fallback
path in ``logtree.routing.fallback``.  The one exception to that rule is
``UnrecoverableLoggingError``, raised when the fallback itself cannot write.
"""

from __future__ import annotations

from typing import Any


class LogtreeError(RuntimeError):
    """Base class for recoverable logtree errors."""


class InitError(LogtreeError):
    """Raised when a sink cannot be set up, e.g. a log file fails to open.

    The underlying ``OSError`` is available as ``__cause__`` and as
    ``io_error``.
    """

    def __init__(self, message: str, io_error: OSError | None = None) -> None:
        super().__init__(message)
        self.io_error = io_error


class SetLoggerError(LogtreeError):
    """Raised when the global logger is installed a second time."""


class FormatCallbackError(LogtreeError):
    """Raised when a formatter calls ``FormatCallback.finish`` more than once."""


class LoggedPanic(LogtreeError):
    """Raised on purpose by ``PanicSink`` for every record it receives."""


class UnrecoverableLoggingError(BaseException):
    """The fallback diagnostic write failed after a sink write failed.

    Derives from ``BaseException`` so ordinary ``except Exception`` handlers
    in host code do not swallow it.  Carries every piece of context that
    was available when both writes failed.
    """

    def __init__(
        self,
        payload: str,
        location: Any,
        error: BaseException,
        fallback_error: BaseException,
    ) -> None:
        self.payload = payload
        self.location = location
        self.error = error
        self.fallback_error = fallback_error
        super().__init__(
            "Error performing stderr logging after error occurred during "
            "regular logging."
            f"\n\tattempted to log: {payload}"
            f"\n\torigin location: {location}"
            f"\n\tfirst logging error: {error!r}"
            f"\n\tstderr error: {fallback_error!r}"
        )
