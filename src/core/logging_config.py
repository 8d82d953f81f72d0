"""Structured logging configuration.

This module initializes structlog loggers with a stable JSON format.
Events are routed through stdlib logging so applications embedding the
store decide where, and at which level, they are written.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def get_logger(name: str) -> Any:
    """Return a module logger instance.

    Args:
        name: Logger name, usually __name__.

    Returns:
        A structlog logger with structured output.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    return structlog.get_logger(name)


def configure_cli_logging(level: str) -> None:
    """Send structured log lines to stderr for command-line runs.

    Args:
        level: Stdlib level name such as ``WARNING`` or ``INFO``.
    """
    logging.basicConfig(level=level.upper(), stream=sys.stderr, format="%(message)s")
