"""
Logging Configuration for the Showroom Dashboard

structlog renders every record, including those of the standard library
loggers used by uvicorn, gunicorn and SQLAlchemy, through one handler.
Refresh cycles bind ``cycle_id`` and requests bind ``request_id`` as
context variables; both appear on every line logged while they are bound.
"""

import logging
import sys
from typing import IO, Optional

import structlog

from showroom.config.settings import get_settings

# Server loggers rendered through the dashboard handler instead of their own
SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "gunicorn.error")

# Chatty libraries capped regardless of the configured level
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
    "asyncio": logging.WARNING,
    "faker": logging.WARNING,
}


def _renderer(log_format: str, stream: IO[str]):
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def configure_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Route structlog and standard library logging to one stream.

    Args:
        log_level: Override of LOG_LEVEL
        log_format: Override of LOG_FORMAT, ``json`` or ``text``
        stream: Output stream, stdout by default
    """
    monitoring = get_settings().monitoring
    level_name = (log_level or monitoring.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    log_format = (log_format or monitoring.log_format).lower()
    stream = stream or sys.stdout

    pre_chain = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if log_format == "json":
        # The console renderer prints tracebacks itself
        pre_chain.append(structlog.processors.format_exc_info)

    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processor=_renderer(log_format, stream),
        foreign_pre_chain=pre_chain,
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in SERVER_LOGGERS:
        server_logger = logging.getLogger(name)
        server_logger.handlers = []
        server_logger.propagate = True
        server_logger.setLevel(level)

    for name, ceiling in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, ceiling))

    structlog.get_logger(__name__).debug("Logging configured", level=level_name, format=log_format)
