"""Logging configuration for the slicer service.

All output goes through loguru. Records that uvicorn and FastAPI emit on
stdlib loggers are intercepted and re-emitted through loguru, so access
and server logs share one format (console or JSON) with application logs.

Example:
    from manga_slicer.logging import setup_logging

    setup_logging(level="DEBUG")

    from loguru import logger
    logger.info("Slicer started")

"""

import inspect
import logging
import sys
from typing import Any

from loguru import logger

# Stdlib loggers that install their own handlers unless told otherwise
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module so loguru reports the right origin
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def intercept_stdlib_logging() -> None:
    """Route the root stdlib logger and the server loggers into loguru."""
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = []
        std_logger.propagate = True


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    log_file: str | None = None,
) -> Any:
    """Configure loguru sinks and capture uvicorn/FastAPI logging.

    Should be called once at startup, before uvicorn is started. Pass
    ``log_config=None`` to ``uvicorn.run`` so uvicorn does not reinstall its
    own handlers afterwards.

    Args:
        level: Minimum log level. One of: DEBUG, INFO, WARNING, ERROR, CRITICAL.
        json_output: Emit one JSON object per record for log collectors.
        log_file: Optional file to write logs to, rotated at 10 MB.

    Returns:
        The configured loguru logger instance.

    """
    logger.remove()

    console_format = (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )

    if json_output:
        logger.add(sys.stderr, format="{message}", serialize=True, level=level)
    else:
        logger.add(sys.stderr, format=console_format, level=level, colorize=True)

    if log_file:
        logger.add(
            log_file,
            format=console_format,
            level=level,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
        )

    intercept_stdlib_logging()

    return logger
