"""Sink protocol for logtree dispatch trees.

Every child of a dispatch node implements ``BaseSink``: report whether it
would accept a record's metadata, accept a record, and flush buffered state.
Compiled dispatch nodes satisfy the same protocol, which is what lets trees
nest.  Host programs can chain any object with these three methods.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from logtree.models.records import Metadata, Record


@runtime_checkable
class BaseSink(Protocol):
    """Protocol that every logtree sink must implement."""

    def enabled(self, metadata: Metadata) -> bool:
        """Return ``True`` if a record with *metadata* would be accepted."""
        ...

    def log(self, record: Record) -> None:
        """Accept a record.

        Implementations must not raise for I/O failures; they report them
        through ``logtree.routing.fallback.fallback_on_error`` instead.
        """
        ...

    def flush(self) -> None:
        """Flush any buffered output."""
        ...
