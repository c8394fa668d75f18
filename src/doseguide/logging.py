"""
Structured logging configuration using structlog.

Provides consistent, JSON-formatted logs for production
and human-readable logs for development.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import Processor

from doseguide.config import Settings, get_settings


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for the application."""
    settings = settings or get_settings()

    # Determine if we're in development
    is_dev = settings.is_development
    level = logging.getLevelName(settings.log_level.upper())

    # Shared processors for all environments
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if is_dev:
        # Development: colorful, human-readable output
        processors: list[Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        # Production: JSON output for log aggregation
        processors = [
            *shared_processors,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Also configure standard library logging for third-party libs.
    # Logs go to stderr: stdout is reserved for CLI output such as --json
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=level,
    )

    # Reduce noise from the SDKs and their HTTP transport
    for noisy in ("httpx", "httpcore", "openai", "anthropic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger instance with optional initial context.

    Args:
        name: Optional logger name (typically __name__)
        **initial_context: Key-value pairs to bind to all log messages

    Returns:
        Configured structlog logger

    Example:
        logger = get_logger(__name__, component="extractor")
        logger.info("evidence_extracted", quotes=3)
    """
    return structlog.get_logger(name, **initial_context)


def preview(text: str | None, limit: int = 60) -> str:
    """Shorten free text (questions, quotes) before it goes into a log event."""
    text = " ".join(str(text or "").split())
    return text if len(text) <= limit else text[:limit] + "..."
