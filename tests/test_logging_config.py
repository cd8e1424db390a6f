# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for pageaudit.logging_config: structlog + stdlib bridge."""

from __future__ import annotations

import json
import logging
import sys

import pytest
import structlog

from pageaudit.logging_config import configure, resolve_level


@pytest.fixture(autouse=True)
def _reset_logging(restore_logging):
    """Ensure clean logging state before/after each test."""
    yield
    structlog.contextvars.clear_contextvars()


class TestConsoleRenderer:
    """Terminal mode: ConsoleRenderer (human-readable)."""

    def test_configure_console_mode(self):
        configure(json_output=False)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr

    def test_console_output_is_human_readable(self, capsys):
        configure(json_output=False)
        logging.getLogger("test.console").info("hello world")
        captured = capsys.readouterr()
        assert "hello world" in captured.err
        assert not captured.err.strip().startswith("{")

    def test_console_includes_log_level(self, capsys):
        configure(json_output=False)
        logging.getLogger("test.level").warning("test warn")
        assert "warn" in capsys.readouterr().err.lower()


class TestJSONRenderer:
    """Machine mode: JSONRenderer."""

    def test_json_output_is_valid_json(self, capsys):
        configure(json_output=True)
        logging.getLogger("test.json").info("json test")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "json test"
        assert "timestamp" in parsed

    def test_library_logger_name(self, capsys):
        configure(json_output=True)
        logging.getLogger("pageaudit.pipeline").info("name test")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["logger"] == "pageaudit.pipeline"

    def test_stdout_untouched(self, capsys):
        configure(json_output=True)
        logging.getLogger("test.stdout").warning("to stderr")
        assert capsys.readouterr().out == ""


class TestRunContext:
    """Bound run fields appear on every line."""

    def test_context_in_json_output(self, capsys):
        configure(json_output=True, context={"command": "audit"})
        structlog.get_logger("test.ctx").info("ctx test")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["command"] == "audit"

    def test_context_replaced_on_reconfigure(self, capsys):
        configure(json_output=True, context={"command": "audit"})
        configure(json_output=True, context={"input": "index.html"})
        logging.getLogger("test.ctx").info("second")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["input"] == "index.html"
        assert "command" not in parsed


class TestLogLevel:
    def test_default_level_is_info(self):
        configure()
        assert logging.getLogger().level == logging.INFO

    def test_custom_level(self):
        configure(level="debug")
        assert logging.getLogger().level == logging.DEBUG

    @pytest.mark.parametrize(
        "level,expected",
        [
            ("WARNING", logging.WARNING),
            ("error", logging.ERROR),
            (logging.DEBUG, logging.DEBUG),
            ("NONEXISTENT", logging.INFO),
            ("BASIC_FORMAT", logging.INFO),
            (None, logging.INFO),
        ],
    )
    def test_resolve_level(self, level, expected):
        assert resolve_level(level) == expected

    def test_debug_records_suppressed_at_info(self, capsys):
        configure(json_output=True)
        logging.getLogger("test.quiet").debug("hidden")
        assert capsys.readouterr().err == ""


class TestMultipleConfigure:
    def test_no_handler_stacking(self):
        configure(json_output=False)
        configure(json_output=True)
        configure(json_output=False)
        assert len(logging.getLogger().handlers) == 1
