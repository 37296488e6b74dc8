"""
Unit Tests - Logging Configuration
"""
import io
import json
import logging

import pytest
import structlog

from showroom.config.logging import configure_logging


@pytest.fixture
def stream():
    """Captured log output; logging state is restored afterwards"""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    output = io.StringIO()
    yield output
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()
    root.handlers = handlers
    root.setLevel(level)


def lines(stream: io.StringIO) -> list:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestConfigureLogging:
    """Tests for configure_logging"""

    def test_bound_context_on_every_line(self, stream):
        """Context variables bound for a cycle appear in its records"""
        configure_logging(log_level="INFO", log_format="json", stream=stream)

        structlog.contextvars.bind_contextvars(cycle_id=3)
        structlog.get_logger("showroom.test").info("Refresh started", sources=6)

        record = lines(stream)[-1]
        assert record["event"] == "Refresh started"
        assert record["cycle_id"] == 3
        assert record["sources"] == 6
        assert record["level"] == "info"
        assert record["logger"] == "showroom.test"
        assert "timestamp" in record

    def test_stdlib_records_share_the_handler(self, stream):
        """Server and library loggers are rendered the same way"""
        configure_logging(log_level="INFO", log_format="json", stream=stream)

        logging.getLogger("uvicorn.error").info("Started server process")

        record = lines(stream)[-1]
        assert record["event"] == "Started server process"
        assert record["logger"] == "uvicorn.error"

    def test_level_filters(self, stream):
        configure_logging(log_level="WARNING", log_format="json", stream=stream)

        structlog.get_logger("showroom.test").info("hidden")
        structlog.get_logger("showroom.test").warning("shown")

        assert [record["event"] for record in lines(stream)] == ["shown"]

    def test_sqlalchemy_engine_capped(self, stream):
        configure_logging(log_level="DEBUG", log_format="json", stream=stream)

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
        assert logging.getLogger().level == logging.DEBUG
