"""Tests for the logging configuration builders (no global logging state is touched)."""

from __future__ import annotations

import pytest
import structlog

from auditgate.core.logging import _logging_config, _renderer


class TestRenderer:
    def test_json(self):
        assert isinstance(_renderer("json"), structlog.processors.JSONRenderer)

    def test_console(self):
        assert isinstance(_renderer("console"), structlog.dev.ConsoleRenderer)

    def test_unknown(self):
        with pytest.raises(ValueError, match="unknown log format 'xml'"):
            _renderer("xml")


class TestLoggingConfig:
    def test_single_stderr_handler(self):
        config = _logging_config("INFO", _renderer("json"))
        assert config["handlers"]["stderr"]["stream"] == "ext://sys.stderr"
        assert config["root"]["handlers"] == ["stderr"]

    def test_level_applies_to_auditgate_only(self):
        config = _logging_config("DEBUG", _renderer("console"))
        assert config["loggers"]["auditgate"]["level"] == "DEBUG"
        assert config["root"]["level"] == "WARNING"

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="unknown log level 'LOUD'"):
            _logging_config("LOUD", _renderer("console"))
