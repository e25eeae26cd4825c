"""Structured logging for the comparison API.

Every record is one JSON line. Events are named (post_created,
rate_limit_exceeded) and carry keyword context; request_id, method and path
are merged in from contextvars bound by the request id middleware.
"""

import logging
import sys
from typing import Optional

import structlog

from compare_api.config import config

SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
]


def _route_stdlib_logging(level: int) -> None:
    # uvicorn and supabase-py log through the standard library
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[
                structlog.stdlib.add_logger_name,
                structlog.processors.add_log_level,
                structlog.processors.TimeStamper(fmt="iso", utc=True),
            ],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = []
        uvicorn_logger.propagate = True


def configure_logging(level: Optional[str] = None):
    """Configure structlog with JSON output and return the app logger.

    Args:
        level: Level name (defaults to LOG_LEVEL, then INFO)
    """
    numeric_level = logging.getLevelName((level or config.log_level()).upper())
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    structlog.configure(
        processors=SHARED_PROCESSORS + [structlog.processors.JSONRenderer()],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _route_stdlib_logging(numeric_level)

    return structlog.get_logger().bind(service="compare-api")


# Global logger instance
logger = configure_logging()
