"""Dispatch — builds and runs logtree routing trees.

``Dispatch`` is the mutable builder.  It collects a default level, per-target
overrides, filters, an optional formatter and an ordered list of children,
then compiles into an immutable ``DispatchImpl``.  A compiled node is itself a
sink, so nodes nest: each branch of a tree can have its own levels, filters
and format.

Evaluation of one record at one node::

    filters (in order) -> level floor for the target -> formatter -> children

Builder methods are position-insensitive: ``Dispatch().format(f).chain(c)``
compiles to the same node as ``Dispatch().chain(c).format(f)``.

Usage
-----
>>> import logtree
>>> min_level, log = (
...     logtree.Dispatch()
...     .level(logtree.LevelFilter.INFO)
...     .level_for("noisy::dependency", logtree.LevelFilter.WARN)
...     .format(lambda out, message, record: out.finish(f"[{record.level}] {message}"))
...     .chain(logtree.stdout())
...     .into_log()
... )
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any

from logtree import api
from logtree.errors import FormatCallbackError
from logtree.models.levels import Level, LevelFilter
from logtree.models.records import Metadata, Record
from logtree.routing.fallback import backup_logging
from logtree.routing.levels import LevelIndex
from logtree.routing.sinks import BaseSink
from logtree.routing.sinks.callback import NullSink
from logtree.routing.sinks.writer import Writer

if TYPE_CHECKING:
    from logtree.config import LogtreeConfig

logger = logging.getLogger(__name__)

Filter = Callable[[Metadata], bool]
Formatter = Callable[["FormatCallback", str, Record], None]


# ---------------------------------------------------------------------------
# Format callback
# ---------------------------------------------------------------------------


class FormatCallback:
    """Handed to a formatter; ``finish`` delivers the reformatted record.

    A formatter calls ``finish(new_message)`` at most once.  If it never
    does, the node forwards the original record unchanged.
    """

    __slots__ = ("_dispatch", "_record", "_finished", "_downstream_error")

    def __init__(self, dispatch: DispatchImpl, record: Record) -> None:
        self._dispatch = dispatch
        self._record = record
        self._finished = False
        self._downstream_error: BaseException | None = None

    @property
    def finished(self) -> bool:
        return self._finished

    def finish(self, formatted_message: Any) -> None:
        """Send *formatted_message* to every child of the node.

        Raises
        ------
        FormatCallbackError
            If called a second time for the same record.
        """
        if self._finished:
            raise FormatCallbackError(
                "FormatCallback.finish() called more than once for one record"
            )
        self._finished = True
        new_record = self._record.with_message(str(formatted_message))
        try:
            self._dispatch._finish_logging(new_record)
        except BaseException as exc:
            self._downstream_error = exc
            raise


# ---------------------------------------------------------------------------
# Compiled node
# ---------------------------------------------------------------------------


class DispatchImpl:
    """A compiled, immutable dispatch node.

    Built by ``Dispatch.into_dispatch()``; never constructed directly by host
    code.  Implements the ``BaseSink`` protocol.
    """

    __slots__ = (
        "_output",
        "_default_level",
        "_min_level",
        "_levels",
        "_format",
        "_filters",
    )

    def __init__(
        self,
        output: tuple[BaseSink, ...],
        default_level: LevelFilter,
        min_level: LevelFilter,
        levels: LevelIndex,
        format: Formatter | None,
        filters: tuple[Filter, ...],
    ) -> None:
        self._output = output
        self._default_level = default_level
        self._min_level = min_level
        self._levels = levels
        self._format = format
        self._filters = filters

    @property
    def output(self) -> tuple[BaseSink, ...]:
        return self._output

    @property
    def default_level(self) -> LevelFilter:
        return self._default_level

    @property
    def min_level(self) -> LevelFilter:
        """Least severe level that could produce output anywhere below this node."""
        return self._min_level

    @property
    def levels(self) -> LevelIndex:
        return self._levels

    # ------------------------------------------------------------------
    # Enablement
    # ------------------------------------------------------------------

    def shallow_enabled(self, metadata: Metadata) -> bool:
        """Filters and level floor of this node only."""
        for check in self._filters:
            if not check(metadata):
                return False
        return metadata.level >= self._levels.resolve(metadata.target)

    def deep_enabled(self, metadata: Metadata) -> bool:
        """``shallow_enabled`` and at least one child accepts."""
        return self.shallow_enabled(metadata) and any(
            child.enabled(metadata) for child in self._output
        )

    def would_accept(self, level: Level, target: str) -> bool:
        return self.shallow_enabled(Metadata(level=level, target=target))

    def accepts(self, level: Level, target: str) -> bool:
        return self.deep_enabled(Metadata(level=level, target=target))

    # ------------------------------------------------------------------
    # Sink protocol
    # ------------------------------------------------------------------

    def enabled(self, metadata: Metadata) -> bool:
        return self.deep_enabled(metadata)

    def log(self, record: Record) -> None:
        if not self.shallow_enabled(record.metadata):
            return
        if self._format is None:
            self._finish_logging(record)
            return

        callback = FormatCallback(self, record)
        try:
            self._format(callback, record.get_message(), record)
        except Exception as exc:  # noqa: BLE001
            if exc is callback._downstream_error:
                raise
            backup_logging(record, exc)
        if not callback.finished:
            self._finish_logging(record)

    def flush(self) -> None:
        for child in self._output:
            child.flush()

    def _finish_logging(self, record: Record) -> None:
        for child in self._output:
            child.log(record)

    def __repr__(self) -> str:
        return (
            f"DispatchImpl(min_level={self._min_level}, "
            f"default_level={self._default_level}, levels={self._levels!r}, "
            f"filters={len(self._filters)}, "
            f"format={'<formatter>' if self._format else None}, "
            f"output={list(self._output)!r})"
        )


class SharedDispatch:
    """Handle to a compiled node that several parents can chain at once.

    Created with ``Dispatch.into_shared()``.  All holders see the same
    immutable node and the same sink handles, so e.g. one open file can be
    written by two routing branches.
    """

    __slots__ = ("_inner",)

    def __init__(self, inner: DispatchImpl) -> None:
        self._inner = inner

    @property
    def inner(self) -> DispatchImpl:
        return self._inner

    @property
    def min_level(self) -> LevelFilter:
        return self._inner.min_level

    def enabled(self, metadata: Metadata) -> bool:
        return self._inner.enabled(metadata)

    def log(self, record: Record) -> None:
        self._inner.log(record)

    def flush(self) -> None:
        self._inner.flush()

    def __repr__(self) -> str:
        return f"SharedDispatch({self._inner!r})"


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


class OutputKind(str, Enum):
    """The closed set of child kinds a node can hold."""

    DISPATCH = "dispatch"
    SHARED = "shared"
    LOGGER = "logger"


class Output:
    """A child attached to a builder: a nested node, a shared node, or a sink."""

    __slots__ = ("kind", "value")

    def __init__(self, kind: OutputKind, value: Any) -> None:
        self.kind = kind
        self.value = value

    @classmethod
    def of(cls, value: Any) -> Output:
        """Classify *value*.

        Accepts a ``Dispatch`` builder (compiled now), a ``DispatchImpl``, a
        ``SharedDispatch``, anything implementing ``BaseSink``, or a bare
        stream with ``write``, which is wrapped in a ``Writer``.
        """
        if isinstance(value, Output):
            return value
        if isinstance(value, Dispatch):
            return cls(OutputKind.DISPATCH, value.into_dispatch())
        if isinstance(value, DispatchImpl):
            return cls(OutputKind.DISPATCH, value)
        if isinstance(value, SharedDispatch):
            return cls(OutputKind.SHARED, value)
        if isinstance(value, BaseSink):
            return cls(OutputKind.LOGGER, value)
        if callable(getattr(value, "write", None)):
            return cls(OutputKind.LOGGER, Writer(value))
        raise TypeError(f"Cannot chain {type(value).__name__!r} as a log output")

    def __repr__(self) -> str:
        return f"Output({self.kind.value}, {self.value!r})"


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class Dispatch:
    """Mutable builder for a dispatch node.

    A fresh builder lets everything through (default level ``TRACE``) and
    has no children, so it does nothing until something is chained.
    """

    def __init__(self) -> None:
        self._format: Formatter | None = None
        self._children: list[Output] = []
        self._default_level = LevelFilter.TRACE
        self._levels: list[tuple[str, LevelFilter]] = []
        self._filters: list[Filter] = []

    @classmethod
    def from_config(cls, config: LogtreeConfig | None = None) -> Dispatch:
        """Start a builder with the level settings from *config*.

        Uses the module-level ``logtree.config.config`` when none is given.
        """
        if config is None:
            from logtree.config import config as default_config

            config = default_config
        dispatch = cls().level(config.level)
        for target, level in config.level_for.items():
            dispatch.level_for(target, level)
        return dispatch

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def format(self, formatter: Formatter) -> Dispatch:
        """Set the formatter, called as ``formatter(out, message, record)``.

        The formatter should call ``out.finish(new_message)`` once.  Use the
        given *message* rather than ``record.get_message()`` so that chained
        formatters compose.
        """
        self._format = formatter
        return self

    def chain(self, output: Any) -> Dispatch:
        """Attach a child.  Children receive records in attachment order."""
        self._children.append(Output.of(output))
        return self

    def chain_logger(self, sink: BaseSink) -> Dispatch:
        """Attach any object implementing the sink protocol, unclassified."""
        self._children.append(Output(OutputKind.LOGGER, sink))
        return self

    def level(self, level: LevelFilter | Level | str) -> Dispatch:
        """Set the floor for targets without an override.  Default ``TRACE``."""
        self._default_level = LevelFilter.coerce(level)
        return self

    def level_for(self, target: str, level: LevelFilter | Level | str) -> Dispatch:
        """Set the floor for *target* and its ``::`` descendants.

        Replaces any earlier override for the same target.
        """
        self._levels = [entry for entry in self._levels if entry[0] != target]
        self._levels.append((target, LevelFilter.coerce(level)))
        return self

    def filter(self, predicate: Filter) -> Dispatch:
        """Add a predicate over record metadata; all must pass."""
        self._filters.append(predicate)
        return self

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def into_dispatch(self) -> DispatchImpl:
        """Compile into an immutable node, dropping children that can never log."""
        children_floor = LevelFilter.OFF
        output: list[BaseSink] = []

        for child in self._children:
            if child.kind is OutputKind.LOGGER:
                children_floor = LevelFilter.TRACE
                output.append(child.value)
                continue

            child_level = child.value.min_level
            if child_level is LevelFilter.OFF:
                logger.debug("Pruned disabled child dispatch %r", child.value)
                continue
            children_floor = min(children_floor, child_level)
            output.append(child.value)

        own_floor = min(
            [self._default_level, *(level for _, level in self._levels)]
        )
        min_level = max(own_floor, children_floor)
        levels = LevelIndex(self._levels, self._default_level)

        logger.debug(
            "Compiled dispatch: min_level=%s children=%d index=%s",
            min_level,
            len(output),
            levels.kind.value,
        )
        return DispatchImpl(
            output=tuple(output),
            default_level=self._default_level,
            min_level=min_level,
            levels=levels,
            format=self._format,
            filters=tuple(self._filters),
        )

    def into_shared(self) -> SharedDispatch:
        """Compile into a node that several parents can chain."""
        return SharedDispatch(self.into_dispatch())

    def into_log(self) -> tuple[LevelFilter, BaseSink]:
        """Compile and return ``(min_level, sink)``.

        The sink is a ``NullSink`` when nothing below this builder can ever
        produce output.
        """
        dispatch = self.into_dispatch()
        if dispatch.min_level is LevelFilter.OFF:
            return dispatch.min_level, NullSink()
        return dispatch.min_level, dispatch

    def apply(self) -> None:
        """Compile and install as the process-wide logger.

        Raises
        ------
        SetLoggerError
            If a global logger has already been installed.
        """
        min_level, log = self.into_log()
        api.set_logger(log, min_level)

    def __repr__(self) -> str:
        levels = ", ".join(f"{name!r}: {level}" for name, level in self._levels)
        filters = ", ".join("<filter>" for _ in self._filters)
        return (
            f"Dispatch(format={'<formatter>' if self._format else None}, "
            f"children_count={len(self._children)}, "
            f"default_level={self._default_level}, "
            f"levels={{{levels}}}, filters=[{filters}])"
        )
