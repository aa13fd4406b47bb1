"""Structured logging configuration for check_ciscoasa.

Standard output belongs to the plugin result line, so every log event
is written to standard error.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Literal

import structlog


def configure_logging(
    log_format: Literal["json", "text"] = "text",
    log_level: str = "WARNING",
) -> None:
    """Configure structlog for the plugin.

    Args:
        log_format: Output format - "json" for log shippers, "text" for humans.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    level = getattr(logging, log_level.upper(), logging.WARNING)

    shared_processors: List[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        processors: List[structlog.typing.Processor] = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # The poller captures stderr, no colors
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=False),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )

    # paramiko and tenacity log through the stdlib
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
        level=level,
        force=True,
    )


def get_logger() -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger instance."""
    return structlog.get_logger()
