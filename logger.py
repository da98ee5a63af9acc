"""
Centralized logging configuration.
All modules should use `get_logger(__name__)` to obtain a logger instance.
"""

import logging

import structlog

from config import LOG_FORMAT, LOG_LEVEL

_initialized = False


def _init_logging() -> None:
    """Configure structlog once."""
    global _initialized
    if _initialized:
        return
    if LOG_FORMAT == "json":
        tail = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        tail = [structlog.dev.ConsoleRenderer(colors=False)]
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            *tail,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(LOG_LEVEL.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _initialized = True


def get_logger(name: str):
    """
    Get a named structlog logger.

    Args:
        name: Usually ``__name__`` of the calling module.
    """
    _init_logging()
    return structlog.get_logger(name)
