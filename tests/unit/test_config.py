"""Tests for logtree config — env-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from logtree.config import LogtreeConfig
from logtree.models.levels import Level, LevelFilter
from logtree.routing.dispatcher import Dispatch


class TestLogtreeConfig:
    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        config = LogtreeConfig()
        assert config.level is LevelFilter.TRACE
        assert config.level_for == {}
        assert config.line_sep == "\n"
        assert config.log_file is None
        assert config.utc_time is False
        assert config.rotate_suffix == "%Y-%m-%d.log"

    def test_level_names_are_parsed(self):
        config = LogtreeConfig(level="warning", level_for={"noisy": "off"})
        assert config.level is LevelFilter.WARN
        assert config.level_for == {"noisy": LevelFilter.OFF}

    def test_unknown_level_rejected(self):
        with pytest.raises(ValidationError):
            LogtreeConfig(level="loud")

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("LOGTREE_LEVEL", "info")
        monkeypatch.setenv("LOGTREE_LEVEL_FOR", '{"noisy::dependency": "warn"}')
        monkeypatch.setenv("LOGTREE_LOG_FILE", "/var/log/app.log")
        monkeypatch.setenv("LOGTREE_UTC_TIME", "true")

        config = LogtreeConfig()
        assert config.level is LevelFilter.INFO
        assert config.level_for == {"noisy::dependency": LevelFilter.WARN}
        assert config.log_file == Path("/var/log/app.log")
        assert config.utc_time is True

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".env").write_text("LOGTREE_LEVEL=error\n")
        assert LogtreeConfig().level is LevelFilter.ERROR


class TestFromConfig:
    def test_builder_takes_levels(self, recording_sink):
        config = LogtreeConfig(level="info", level_for={"chatty": "debug"})
        node = Dispatch.from_config(config).chain(recording_sink()).into_dispatch()

        assert node.default_level is LevelFilter.INFO
        assert node.accepts(Level.DEBUG, "chatty::inner")
        assert not node.accepts(Level.DEBUG, "other")

    def test_builder_can_refine_config(self, recording_sink):
        config = LogtreeConfig(level="info", level_for={"chatty": "debug"})
        node = (
            Dispatch.from_config(config)
            .level_for("chatty", LevelFilter.ERROR)
            .chain(recording_sink())
            .into_dispatch()
        )
        assert not node.accepts(Level.WARN, "chatty")
