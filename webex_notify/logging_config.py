"""Structlog configuration helpers for structured logging."""

from __future__ import annotations

import logging
import sys

import structlog

_LEVELS = {0: logging.WARNING, 1: logging.INFO, 2: logging.DEBUG}


def level_for_verbosity(verbosity: int) -> int:
    """Map the ``-v`` level of the CLI onto a logging level."""

    if verbosity <= 0:
        return _LEVELS[0]
    return _LEVELS.get(verbosity, logging.DEBUG)


def configure_logging(verbosity: int = 0) -> None:
    """Configure structlog to emit JSON-formatted logs on stderr.

    Standard output is left alone; it carries the API response or the room table.
    """

    timestamper = structlog.processors.TimeStamper(fmt="iso")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            timestamper,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=level_for_verbosity(verbosity),
        stream=sys.stderr,
        format="%(message)s",
        force=True,
    )
