"""Structured logging configuration.

This module initializes structlog with a stable JSON event format.
Events are routed through stdlib logging, so the host application
decides handlers and levels; warnings reach stderr by default.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_CONFIGURED = False


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    _configure_once()
    return structlog.get_logger(name)


def set_log_level(level_name: str) -> None:
    """Send events at or above level_name to stderr.

    Args:
        level_name: Stdlib level name such as ``INFO`` or ``DEBUG``.
    """
    logging.basicConfig(stream=sys.stderr, format="%(message)s", force=True)
    logging.getLogger().setLevel(level_name.upper())


def _configure_once() -> None:
    """Apply the shared structlog processor chain on first use."""
    global _CONFIGURED
    if _CONFIGURED:
        return
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(sort_keys=True),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True
