"""structlog setup shared by every module."""

import logging

import structlog

from app.config import LOG_FORMAT, LOG_LEVEL


def level_number(level: str) -> int:
    """Return the numeric level for a name, falling back to INFO when unknown."""
    number = logging.getLevelName(level.strip().upper())
    return number if isinstance(number, int) else logging.INFO


def configure_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
    """Configure structlog processors and the output renderer.

    Args:
        level: Minimum log level name, e.g. "INFO". Unknown names mean INFO.
        fmt: "json" for machine-readable lines, "console" for local development.
    """
    renderer = (
        structlog.dev.ConsoleRenderer()
        if fmt == "console"
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number(level)),
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger()
