"""structlog setup.

Learn: Every module does `logger = structlog.get_logger()` and logs
dotted event names with key/value context. This module decides how those
events are rendered: a readable console line in development, one JSON
object per line when WEBFORUM_LOG_JSON is set. Request ids bound by the
middleware are merged in from contextvars.
"""

import logging
import sys

import structlog

from webforum.config import Settings


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the stdlib root logger once at startup."""
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(message)s",
        stream=sys.stdout,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
