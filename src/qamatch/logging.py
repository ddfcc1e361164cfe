# src/qamatch/logging.py
"""Structured logging setup based on structlog.

The library only emits events through ``structlog.get_logger``; it never
configures logging on import. Applications (and the CLI) call
``setup_logging`` once at startup.
"""

from __future__ import annotations

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure structlog for readable (or JSON) logs filtered by level.

    Args:
        level: Minimum level name, e.g. "DEBUG", "INFO", "WARNING".
        json: Render one JSON object per line instead of console output.
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'")

    processors: list[structlog.types.Processor] = [
        structlog.processors.TimeStamper(fmt="ISO"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
    ]
    if json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Not cached, so calling setup_logging again takes effect for existing loggers
        cache_logger_on_first_use=False,
    )
