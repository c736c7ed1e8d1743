"""
Centralized logging and error handling utilities for the chat client.

This module provides the logging setup and the helpers used to keep log
output consistent across the codebase:
- Timestamped stdlib logging for the interactive loop
- Structured logging with contextual information for library code
- Error kind classification for failed turns
- Operation timing
"""

from __future__ import annotations

import functools
import logging
import time
from collections.abc import Callable
from typing import Any, ParamSpec, TypeVar

import structlog

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(colors=True),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

# Type variables for generic decorators
P = ParamSpec("P")
T = TypeVar("T")

logger = structlog.get_logger(__name__)


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure root logging with the timestamped console format."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # no per-request INFO lines in the middle of a streamed reply
    logging.getLogger("httpx").setLevel(logging.WARNING)


class ChatErrorHandler:
    """Classifies failures of a chat turn for logging."""

    @staticmethod
    def classify_error(error: BaseException) -> str:
        """
        Return the error kind for an exception.

        Args:
            error: The exception to classify

        Returns:
            One of the ``kind`` tags of the LLM error taxonomy, or
            ``"unknown-error"`` for anything else
        """
        return getattr(error, "kind", "unknown-error")

    @staticmethod
    def describe(error: BaseException) -> dict[str, Any]:
        """Build structured log fields for an exception."""
        fields: dict[str, Any] = {
            "error_kind": ChatErrorHandler.classify_error(error),
            "error_type": type(error).__name__,
            "error_message": str(error),
        }
        if model := getattr(error, "model", None):
            fields["model"] = model
        if (status_code := getattr(error, "status_code", None)) is not None:
            fields["status_code"] = status_code
        return fields


def log_operation(
    operation: str,
    *,
    log_args: bool = False,
    log_result: bool = False,
    log_timing: bool = True,
    level: int = logging.DEBUG,
    context: dict[str, Any] | None = None,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """
    Decorator for logging operations with structured context.

    Args:
        operation: Description of the operation being performed
        log_args: Whether to log function arguments
        log_result: Whether to log function result
        log_timing: Whether to log execution timing
        level: Log level for start, completion and failure records
        context: Additional context to include in logs

    Returns:
        Decorated function with logging
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            operation_logger = logger.bind(
                operation=operation,
                function=func.__name__,
                **(context or {}),
            )

            log_data = {}
            if log_args:
                log_data.update({
                    "args": args[1:] if args else [],  # Skip 'self' if present
                    "kwargs": kwargs,
                })

            operation_logger.log(level, "Operation started", **log_data)

            start_time = time.perf_counter() if log_timing else None

            try:
                result = func(*args, **kwargs)

                end_log_data: dict[str, Any] = {}
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    end_log_data["duration_ms"] = duration
                if log_result:
                    end_log_data["result"] = result

                operation_logger.log(
                    level, "Operation completed successfully", **end_log_data
                )
                return result

            except Exception as e:
                error_log_data: dict[str, Any] = ChatErrorHandler.describe(e)
                if log_timing and start_time is not None:
                    duration = round((time.perf_counter() - start_time) * 1000, 2)
                    error_log_data["duration_ms"] = duration

                operation_logger.log(level, "Operation failed", **error_log_data)
                raise

        return wrapper
    return decorator


class ContextualLogger:
    """Logger that maintains context across related operations."""

    def __init__(self, base_context: dict[str, Any] | None = None):
        self.base_context = base_context or {}
        self._logger = logger.bind(**self.base_context)

    def bind(self, **context: Any) -> ContextualLogger:
        """Create a new logger with additional context."""
        merged_context = {**self.base_context, **context}
        return ContextualLogger(merged_context)

    def debug(self, message: str, **context: Any) -> None:
        """Log debug message with context."""
        self._logger.debug(message, **context)
