"""
Structured logging setup shared by the application and CLI entry points.
"""
import logging

import structlog

from .config import settings


def configure_logging() -> None:
    """Configure structlog processors and the level filter from settings."""
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    use_console = settings.DEBUG or not settings.LOG_JSON

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer() if use_console else structlog.processors.JSONRenderer()
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.WriteLoggerFactory(),
        cache_logger_on_first_use=True,
    )
