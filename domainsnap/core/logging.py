"""Structured logging configuration for the domain snapshot tooling.

This module configures structlog for consistent, machine-readable logging
across the codec, store, diff engine and CLI.
"""

import logging
import sys
import time
from typing import Any

import structlog
from structlog.typing import EventDict


def add_app_context(
    _logger: Any, _method_name: str, event_dict: EventDict
) -> EventDict:
    """Add application-specific context to log events."""
    event_dict["service"] = "domainsnap"
    event_dict["component"] = event_dict.get("logger", "unknown")
    return event_dict


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structured logging for the application.

    Logs go to stderr so that command output on stdout (Markdown, JSON)
    stays machine-readable.

    Args:
        log_level: Logging level (DEBUG/INFO/WARNING/ERROR)
        json_logs: Whether to output JSON format logs
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
        force=True,
    )

    if json_logs:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context variables (e.g. domain name, command) to all log events."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()


class SnapshotOperationLogger:
    """Helper for logging snapshot file operation timing and context."""

    def __init__(
        self, logger: structlog.stdlib.BoundLogger, operation: str, **context: Any
    ):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.start_time: float | None = None

    def __enter__(self) -> "SnapshotOperationLogger":
        self.start_time = time.perf_counter()
        self.logger.debug(
            "Snapshot operation started",
            operation=self.operation,
            **self.context,
        )
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self.start_time is None:
            return

        duration_ms = round((time.perf_counter() - self.start_time) * 1000, 2)

        if exc_type is None:
            self.logger.info(
                "Snapshot operation completed",
                operation=self.operation,
                duration_ms=duration_ms,
                **self.context,
            )
        else:
            self.logger.error(
                "Snapshot operation failed",
                operation=self.operation,
                duration_ms=duration_ms,
                error=str(exc_val),
                error_type=exc_type.__name__,
                **self.context,
            )
