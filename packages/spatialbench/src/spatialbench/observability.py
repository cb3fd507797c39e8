"""Structured logging setup for spatialbench.

Modules log through ``structlog.get_logger(__name__)`` with snake_case event
names and key-value context. ``configure_logging`` selects JSON or
human-readable rendering and the minimum level.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Configure structured logging for spatialbench.

    Logs go to stderr so that data written to stdout stays clean.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_format: If True, output JSON format. If False, output human-readable.
        add_timestamp: If True, add ISO timestamp to log entries.

    Raises:
        ValueError: If ``log_level`` is not a known level name.

    Example:
        >>> configure_logging(log_level="DEBUG", json_format=False)
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{log_level}'")

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if add_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )
