"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Events are emitted through the standard logging root handler on stderr
so the run summary owns standard output.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from core.constants import DEFAULT_LOG_LEVEL

_CONFIGURED = False


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        level: Standard logging level name, e.g. ``INFO``.
    """
    global _CONFIGURED
    level_number = _level_number(level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level_number)
    logging.getLogger().setLevel(level_number)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level_number),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    if not _CONFIGURED:
        configure_logging()
    return structlog.get_logger(name)


def _level_number(level: str) -> int:
    """Map a level name onto its numeric value, defaulting to INFO."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO
