"""Tests for structured logging setup."""

from __future__ import annotations

import json
import logging

import structlog

from strategy_dashboard.config.schema import LoggingConfig
from strategy_dashboard.logging import get_logger, setup_logging, setup_logging_from_config


class TestSetupLogging:
    def test_json_format(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_json")
        logger.info("test message", symbol="/ES")

        captured = capsys.readouterr()
        line = json.loads(captured.err.strip())
        assert line["event"] == "test message"
        assert line["symbol"] == "/ES"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        logger = get_logger("test_console")
        logger.info("hello console", window="2024-01-01..2024-01-31")

        captured = capsys.readouterr()
        assert "hello console" in captured.err
        assert "2024-01-01..2024-01-31" in captured.err

    def test_log_level_filtering(self, capsys):
        setup_logging(level="WARNING", log_format="json")
        logger = get_logger("test_level")
        logger.info("should be hidden")
        logger.warning("should appear")

        captured = capsys.readouterr()
        assert "should be hidden" not in captured.err
        assert "should appear" in captured.err

    def test_get_logger_with_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        logger = get_logger("test_ctx", symbol="SPY", endpoint="metrics")
        logger.info("context test")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["symbol"] == "SPY"
        assert line["endpoint"] == "metrics"

    def test_contextvars_binding(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id="abc123")

        get_logger("test_ctxvars").info("with context var")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["request_id"] == "abc123"

        structlog.contextvars.clear_contextvars()

    def test_service_name_bound(self, capsys):
        setup_logging_from_config(LoggingConfig(level="INFO", format="json", service="dashboard-test"))
        get_logger("test_service").info("tagged")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["service"] == "dashboard-test"

    def test_stdlib_records_rendered(self, capsys):
        setup_logging(level="INFO", log_format="json", service="dashboard-test")
        logging.getLogger("uvicorn.error").info("plain stdlib record")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["event"] == "plain stdlib record"
        assert line["service"] == "dashboard-test"
