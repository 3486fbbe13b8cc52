"""Tests for logging configuration.

Tests that uvicorn's stdlib loggers are routed into loguru sinks.
"""

import logging
from collections.abc import Generator

import pytest
from loguru import logger

from manga_slicer.logging import InterceptHandler, setup_logging


@pytest.fixture
def loguru_records() -> Generator[list[dict], None, None]:
    """Configure logging and capture loguru records in a list."""
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    setup_logging(level="DEBUG")
    records: list[dict] = []
    handler_id = logger.add(lambda m: records.append(m.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
    root.handlers = saved_handlers
    root.setLevel(saved_level)


class TestInterceptStdlibLogging:
    """Test stdlib records reach loguru."""

    def test_uvicorn_error_reaches_loguru(self, loguru_records):
        """Test a uvicorn.error record arrives at a loguru sink."""
        logging.getLogger("uvicorn.error").warning("Application startup failed")

        matching = [r for r in loguru_records if r["message"] == "Application startup failed"]
        assert len(matching) == 1
        assert matching[0]["level"].name == "WARNING"

    def test_uvicorn_access_reaches_loguru(self, loguru_records):
        """Test access log lines are formatted and forwarded."""
        logging.getLogger("uvicorn.access").info(
            '%s - "%s %s HTTP/%s" %d', "127.0.0.1:5000", "GET", "/slice", "1.1", 200
        )

        assert any(
            r["message"] == '127.0.0.1:5000 - "GET /slice HTTP/1.1" 200' for r in loguru_records
        )

    def test_uvicorn_handlers_are_cleared(self, loguru_records):
        """Test uvicorn loggers propagate to the intercepting root handler."""
        for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
            std_logger = logging.getLogger(name)
            assert std_logger.handlers == []
            assert std_logger.propagate is True

        assert any(isinstance(h, InterceptHandler) for h in logging.getLogger().handlers)

    def test_custom_level_number(self, loguru_records):
        """Test levels unknown to loguru are forwarded by number."""
        logging.getLogger("uvicorn").log(25, "between info and warning")

        matching = [r for r in loguru_records if r["message"] == "between info and warning"]
        assert len(matching) == 1
        assert matching[0]["level"].no == 25
