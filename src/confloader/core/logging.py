"""Structured logging setup via structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

LOGGER_NAME = "confloader"


def get_logger(name: str = LOGGER_NAME) -> Any:
    """Return a structlog logger that writes through the stdlib logger *name*.

    Until :func:`setup_logging` runs, stdlib logging drops debug and info events
    and sends warnings to stderr, so library callers never see logs on stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name))


def setup_logging(*, json_output: bool = False, level: str = "INFO") -> None:
    """Configure structlog processors, stderr output and the minimum log level.

    Logs never go to stdout, which is reserved for printed configuration.
    """
    numeric_level = getattr(logging, level.upper())

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.handlers = [handler]
    package_logger.setLevel(numeric_level)
    package_logger.propagate = False

    logging.basicConfig(level=numeric_level, stream=sys.stderr)
