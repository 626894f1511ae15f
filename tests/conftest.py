"""Shared test fixtures for logtree."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any

import pytest

from logtree import api
from logtree.models.levels import Level
from logtree.models.records import Location, Metadata, Record


class RecordingSink:
    """A sink that remembers every record it receives.

    When a shared *journal* list is given, ``(name, message)`` pairs are
    appended to it as well, so several sinks can record a common order.
    """

    def __init__(
        self,
        name: str = "recording",
        journal: list[tuple[str, str]] | None = None,
        accept: bool = True,
    ) -> None:
        self.name = name
        self.journal = journal
        self.accept = accept
        self.received: list[Record] = []
        self.flushes = 0

    @property
    def messages(self) -> list[str]:
        return [record.get_message() for record in self.received]

    def enabled(self, metadata: Metadata) -> bool:
        return self.accept

    def log(self, record: Record) -> None:
        self.received.append(record)
        if self.journal is not None:
            self.journal.append((self.name, record.get_message()))

    def flush(self) -> None:
        self.flushes += 1


@pytest.fixture(autouse=True)
def reset_global_logger() -> Iterator[None]:
    """Every test starts and ends without a global logger installed."""
    api._reset()
    yield
    api._reset()


@pytest.fixture
def recording_sink() -> Callable[..., RecordingSink]:
    """Factory fixture: build a ``RecordingSink``."""

    def _factory(name: str = "recording", **kwargs: Any) -> RecordingSink:
        return RecordingSink(name, **kwargs)

    return _factory


@pytest.fixture
def make_record() -> Callable[..., Record]:
    """Factory fixture: build a ``Record`` with sensible defaults."""

    def _factory(
        msg: str = "test message",
        level: Level = Level.INFO,
        target: str = "app::module",
        **overrides: Any,
    ) -> Record:
        defaults: dict[str, Any] = {
            "level": level,
            "target": target,
            "msg": msg,
            "location": Location(module_path="tests", file="conftest.py", line=1),
        }
        defaults.update(overrides)
        return Record(**defaults)

    return _factory
