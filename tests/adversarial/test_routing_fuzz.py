"""Adversarial tests — dispatch tree resilience under failure and contention.

These tests verify that:
1. A failing sink doesn't prevent delivery to its siblings
2. Sinks that throw various exception types are handled gracefully
3. Misbehaving formatters don't take the tree down; filter errors reach the caller
4. Concurrent logging through one tree never interleaves partial lines
5. Hostile targets and messages are routed like any other
"""

from __future__ import annotations

import io
import threading

import pytest

from logtree.models.levels import Level, LevelFilter
from logtree.models.records import Record
from logtree.routing.dispatcher import Dispatch
from logtree.routing.sinks.callback import call
from logtree.routing.sinks.writer import writer

# ---------------------------------------------------------------------------
# Test sinks
# ---------------------------------------------------------------------------


class ExplodingStream:
    """A stream whose every write throws."""

    def __init__(self, exc_type: type = OSError):
        self._exc_type = exc_type

    def write(self, data):
        raise self._exc_type("stream exploded!")

    def flush(self):
        pass


class SlowExplodingStream:
    """A stream that accepts N writes then explodes."""

    def __init__(self, fail_after: int = 2):
        self._fail_after = fail_after
        self.lines: list[str] = []

    def write(self, data):
        if len(self.lines) >= self._fail_after:
            raise OSError(f"failed on write {len(self.lines) + 1}")
        self.lines.append(data)

    def flush(self):
        pass


# ---------------------------------------------------------------------------
# Helper
# ---------------------------------------------------------------------------


def _record(msg: str = "fuzz", level: Level = Level.INFO, target: str = "fuzz") -> Record:
    return Record(level=level, target=target, msg=msg)


# ---------------------------------------------------------------------------
# Test: Failing sinks
# ---------------------------------------------------------------------------


class TestFailingSinks:
    def test_failing_sink_does_not_block_siblings(self, recording_sink, capsys):
        before, after = recording_sink("before"), recording_sink("after")
        tree = (
            Dispatch()
            .chain(before)
            .chain(ExplodingStream())
            .chain(after)
            .into_dispatch()
        )
        tree.log(_record("survives"))

        assert before.messages == ["survives"]
        assert after.messages == ["survives"]
        assert "stream exploded!" in capsys.readouterr().err

    @pytest.mark.parametrize(
        "exc_type",
        [OSError, ValueError, TypeError, RuntimeError, UnicodeError],
    )
    def test_various_exception_types_are_contained(self, exc_type, recording_sink, capsys):
        sink = recording_sink()
        tree = Dispatch().chain(ExplodingStream(exc_type)).chain(sink).into_dispatch()
        tree.log(_record())
        assert sink.messages == ["fuzz"]
        assert "Error performing logging." in capsys.readouterr().err

    def test_sink_failing_partway(self, recording_sink, capsys):
        stream = SlowExplodingStream(fail_after=2)
        sink = recording_sink()
        tree = Dispatch().chain(stream).chain(sink).into_dispatch()

        for i in range(5):
            tree.log(_record(f"r{i}"))

        assert stream.lines == ["r0\n", "r1\n"]
        assert len(sink.received) == 5
        assert capsys.readouterr().err.count("Error performing logging.") == 3

    def test_raising_callback_contained(self, recording_sink, capsys):
        def explode(record):
            raise KeyError("missing")

        sink = recording_sink()
        tree = Dispatch().chain(call(explode)).chain(sink).into_dispatch()
        tree.log(_record())
        assert sink.messages == ["fuzz"]

    def test_unrenderable_message(self, recording_sink, capsys):
        buf = io.StringIO()
        sink = recording_sink()
        tree = Dispatch().chain(buf).chain(sink).into_dispatch()

        tree.log(Record(level=Level.INFO, target="t", msg="%d items", args=("many",)))

        assert buf.getvalue() == ""
        assert len(sink.received) == 1
        assert "'%d items' % ('many',)" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Test: Misbehaving callables
# ---------------------------------------------------------------------------


class TestMisbehavingCallables:
    def test_formatter_returning_garbage(self, recording_sink):
        sink = recording_sink()
        tree = (
            Dispatch()
            .format(lambda out, msg, rec: out.finish(12345))
            .chain(sink)
            .into_dispatch()
        )
        tree.log(_record())
        assert sink.messages == ["12345"]

    def test_formatter_raising_after_finish(self, recording_sink, capsys):
        sink = recording_sink()

        def late_failure(out, msg, rec):
            out.finish("delivered")
            raise RuntimeError("after the fact")

        tree = Dispatch().format(late_failure).chain(sink).into_dispatch()
        tree.log(_record())

        assert sink.messages == ["delivered"]
        assert "after the fact" in capsys.readouterr().err

    def test_filter_raising_propagates(self, recording_sink):
        def broken(metadata):
            raise ZeroDivisionError

        tree = Dispatch().filter(broken).chain(recording_sink()).into_dispatch()
        with pytest.raises(ZeroDivisionError):
            tree.log(_record())


# ---------------------------------------------------------------------------
# Test: Hostile input
# ---------------------------------------------------------------------------


class TestHostileInput:
    @pytest.mark.parametrize(
        "target",
        ["", "::", ":::", "a::::b", "\x00", "ünï::cødé", "a" * 10_000, "::leading"],
    )
    def test_odd_targets_route(self, target, recording_sink):
        sink = recording_sink()
        tree = (
            Dispatch()
            .level(LevelFilter.INFO)
            .level_for("a", LevelFilter.ERROR)
            .chain(sink)
            .into_dispatch()
        )
        tree.log(_record(level=Level.ERROR, target=target))
        assert len(sink.received) == 1

    def test_message_with_separators(self):
        buf = io.StringIO()
        tree = Dispatch().chain(writer(buf, line_sep="\r\n")).into_dispatch()
        tree.log(_record("line one\nline two\r\n"))
        assert buf.getvalue() == "line one\nline two\r\n\r\n"

    def test_many_overrides(self, recording_sink):
        sink = recording_sink()
        builder = Dispatch().level(LevelFilter.OFF)
        for i in range(500):
            builder.level_for(f"mod{i}", LevelFilter.ERROR if i % 2 else LevelFilter.TRACE)
        tree = builder.chain(sink).into_dispatch()

        tree.log(_record("even", level=Level.DEBUG, target="mod42::x"))
        tree.log(_record("odd", level=Level.DEBUG, target="mod43::x"))
        assert sink.messages == ["even"]


# ---------------------------------------------------------------------------
# Test: Concurrency
# ---------------------------------------------------------------------------


class TestConcurrency:
    def test_no_interleaved_lines(self):
        buf = io.StringIO()
        tree = Dispatch().chain(writer(buf)).into_dispatch()
        threads_count, per_thread = 8, 200

        def worker(n: int) -> None:
            for i in range(per_thread):
                tree.log(_record(f"thread-{n}-record-{i}-" + "x" * 50))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(threads_count)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        lines = buf.getvalue().splitlines()
        assert len(lines) == threads_count * per_thread
        assert all(line.startswith("thread-") and line.endswith("x" * 50) for line in lines)

    def test_per_thread_order_preserved(self, recording_sink):
        sink = recording_sink()
        tree = Dispatch().chain(sink).into_dispatch()

        def worker(n: int) -> None:
            for i in range(100):
                tree.log(_record(f"{n}:{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for n in range(4):
            mine = [int(m.split(":")[1]) for m in sink.messages if m.startswith(f"{n}:")]
            assert mine == list(range(100))
