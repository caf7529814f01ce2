"""Structured logging configuration."""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structured logging for the application.

    Sets up structlog with JSON output by default and the processors used
    across the ranking pipeline: context variables (run and topic), log
    level, ISO timestamps, and exception formatting.

    Args:
        level: Logging level (default: INFO).
        output: Output stream (default: stderr).
        json_format: Whether to use JSON format (default: True).
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=output.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    # httpx logs through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=output,
        level=level,
    )


def bind_run_context(run_id: str, **context: str) -> None:
    """Bind request context to all subsequent log messages.

    Args:
        run_id: Unique request identifier.
        **context: Extra context such as the requested profile.
    """
    structlog.contextvars.bind_contextvars(run_id=run_id, **context)


def clear_run_context() -> None:
    """Clear request context from log messages."""
    structlog.contextvars.clear_contextvars()
