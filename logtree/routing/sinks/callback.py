"""Small sinks: call a function, discard everything, or raise on every record."""

from __future__ import annotations

from collections.abc import Callable

from logtree.errors import LoggedPanic
from logtree.models.records import Metadata, Record
from logtree.routing.fallback import fallback_on_error


class CallSink:
    """Invokes ``func(record)`` for every record it receives.

    Exceptions raised by *func* go through the fallback path.
    """

    def __init__(self, func: Callable[[Record], None]) -> None:
        self._func = func

    def enabled(self, metadata: Metadata) -> bool:
        return True

    def log(self, record: Record) -> None:
        fallback_on_error(record, self._func)

    def flush(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"CallSink({self._func!r})"


class NullSink:
    """Accepts nothing.  Stands in for a tree whose minimum level is ``OFF``."""

    def enabled(self, metadata: Metadata) -> bool:
        return False

    def log(self, record: Record) -> None:
        pass

    def flush(self) -> None:
        pass

    def __repr__(self) -> str:
        return "NullSink()"


class PanicSink:
    """Raises ``LoggedPanic`` with the record's message.

    Meant to be chained behind a filter, e.g. to turn every ERROR from a
    particular target into a hard failure during tests.
    """

    def enabled(self, metadata: Metadata) -> bool:
        return True

    def log(self, record: Record) -> None:
        raise LoggedPanic(record.get_message())

    def flush(self) -> None:
        pass

    def __repr__(self) -> str:
        return "PanicSink()"


def call(func: Callable[[Record], None]) -> CallSink:
    """Wrap *func* as a sink."""
    return CallSink(func)
