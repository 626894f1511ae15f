"""Channel sink — hands each formatted line to a queue.

The receiving side reads complete lines (message plus separator) from the
queue, typically on another thread.  Delivery is best-effort: a full queue or
any other ``put`` failure is reported through the fallback path and the
record is dropped for this sink only.
"""

from __future__ import annotations

import queue
import threading
from typing import Any

from logtree.models.records import Metadata, Record
from logtree.routing.fallback import fallback_on_error
from logtree.routing.sinks.writer import DEFAULT_LINE_SEP


class ChannelSink:
    """Sink that sends ``message + line_sep`` as one item per record.

    Parameters
    ----------
    channel:
        A ``queue.Queue`` or any object with ``put_nowait``.
    line_sep:
        Appended to every message before it is sent.
    """

    def __init__(self, channel: Any, line_sep: str = DEFAULT_LINE_SEP) -> None:
        self._channel = channel
        self._line_sep = line_sep
        self._lock = threading.Lock()

    @property
    def channel(self) -> Any:
        return self._channel

    def enabled(self, metadata: Metadata) -> bool:
        return True

    def log(self, record: Record) -> None:
        fallback_on_error(record, self._send)

    def _send(self, record: Record) -> None:
        line = record.get_message() + self._line_sep
        with self._lock:
            self._channel.put_nowait(line)

    def flush(self) -> None:
        pass

    def __repr__(self) -> str:
        return f"ChannelSink(channel={self._channel!r}, line_sep={self._line_sep!r})"


def sender(
    channel: queue.Queue[str] | None = None, line_sep: str = DEFAULT_LINE_SEP
) -> ChannelSink:
    """Create a channel sink, allocating an unbounded queue if none is given."""
    if channel is None:
        channel = queue.Queue()
    return ChannelSink(channel, line_sep)
