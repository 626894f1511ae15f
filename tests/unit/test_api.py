"""Unit tests for global logger registration and the logging façade."""

from __future__ import annotations

import inspect

import pytest

import logtree
from logtree import api
from logtree.errors import SetLoggerError
from logtree.models.levels import Level, LevelFilter
from logtree.routing.dispatcher import Dispatch
from logtree.routing.sinks.callback import NullSink


class TestRegistration:
    def test_nothing_installed(self):
        assert isinstance(api.global_logger(), NullSink)
        assert api.max_level() is LevelFilter.OFF

    def test_set_logger(self, recording_sink):
        sink = recording_sink()
        api.set_logger(sink, LevelFilter.INFO)
        assert api.global_logger() is sink
        assert api.max_level() is LevelFilter.INFO

    def test_second_install_fails(self, recording_sink):
        first = recording_sink("first")
        api.set_logger(first)
        with pytest.raises(SetLoggerError):
            api.set_logger(recording_sink("second"))
        assert api.global_logger() is first

    def test_apply_installs_tree(self, recording_sink):
        sink = recording_sink()
        Dispatch().level(LevelFilter.WARN).chain(sink).apply()

        assert api.max_level() is LevelFilter.WARN
        api.get_logger("app").warn("installed")
        assert sink.messages == ["installed"]

    def test_apply_twice_fails(self, recording_sink):
        Dispatch().chain(recording_sink()).apply()
        with pytest.raises(SetLoggerError):
            Dispatch().chain(recording_sink()).apply()

    def test_apply_off_tree_installs_null(self, recording_sink):
        Dispatch().level(LevelFilter.OFF).chain(recording_sink()).apply()
        assert isinstance(api.global_logger(), NullSink)
        assert api.max_level() is LevelFilter.OFF


class TestFacade:
    def test_dotted_name_becomes_target(self, recording_sink):
        sink = recording_sink()
        api.set_logger(sink)
        api.get_logger("pkg.sub.mod").info("hello %s", "there")

        (record,) = sink.received
        assert record.target == "pkg::sub::mod"
        assert record.get_message() == "hello there"
        assert record.level is Level.INFO

    def test_lone_mapping_argument(self, recording_sink):
        sink = recording_sink()
        api.set_logger(sink)
        log = api.get_logger("t")
        log.info("%(user)s logged in from %(host)s", {"user": "ann", "host": "db-1"})
        log.info("raw %s", {})
        assert sink.messages == ["ann logged in from db-1", "raw {}"]

    def test_location_is_the_call_site(self, recording_sink):
        sink = recording_sink()
        api.set_logger(sink)
        log = api.get_logger(__name__)

        expected_line = inspect.currentframe().f_lineno + 1
        log.error("here")

        location = sink.received[0].location
        assert location.file == __file__
        assert location.line == expected_line
        assert location.module_path == __name__

    def test_every_level_method(self, recording_sink):
        sink = recording_sink()
        api.set_logger(sink)
        log = api.get_logger("t")
        log.trace("t")
        log.debug("d")
        log.info("i")
        log.warn("w")
        log.warning("w2")
        log.error("e")
        log.log("info", "by name")
        assert [r.level for r in sink.received] == [
            Level.TRACE,
            Level.DEBUG,
            Level.INFO,
            Level.WARN,
            Level.WARN,
            Level.ERROR,
            Level.INFO,
        ]

    def test_max_level_gates_before_tree(self, recording_sink):
        sink = recording_sink()
        api.set_logger(sink, LevelFilter.WARN)
        log = api.get_logger("t")
        log.info("gated")
        log.error("passes")
        assert sink.messages == ["passes"]

        api.set_max_level("trace")
        log.info("now passes")
        assert sink.messages == ["passes", "now passes"]

    def test_disabled_sink_never_sees_record(self, recording_sink):
        sink = recording_sink(accept=False)
        api.set_logger(sink)
        api.get_logger("t").error("ignored")
        assert sink.received == []
        assert not api.get_logger("t").is_enabled_for(Level.ERROR)

    def test_arguments_not_rendered_when_disabled(self, recording_sink):
        class Explodes:
            def __str__(self):
                raise AssertionError("rendered a disabled record")

        api.set_logger(recording_sink(), LevelFilter.ERROR)
        api.get_logger("t").debug("%s", Explodes())

    def test_nothing_installed_is_silent(self):
        api.get_logger("t").error("goes nowhere")

    def test_package_reexports(self):
        assert logtree.get_logger is api.get_logger
        assert logtree.Dispatch is Dispatch

