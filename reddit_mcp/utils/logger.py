"""
Structured logging configuration using structlog.

JSON output in production, coloured console output when
ENVIRONMENT=development. Everything goes to stderr: with the stdio
transport, stdout carries the MCP protocol stream.
"""
import logging
import os
import sys
from typing import Any

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structured logging with structlog.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    # httpx logs every request at INFO through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    is_dev = os.getenv("ENVIRONMENT", "production") == "development"

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if is_dev:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = __name__) -> structlog.BoundLogger:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("tool_request", tool="search_posts", query="python")
    """
    return structlog.get_logger(name)


def log_tool_execution(
    tool_name: str,
    duration_ms: float,
    error: str | None = None,
    **extra: Any,
) -> None:
    """
    Log the outcome of one MCP tool call.

    Args:
        tool_name: Name of the MCP tool executed
        duration_ms: Execution time in milliseconds
        error: Error message if execution failed
        **extra: Additional context to log

    Example:
        >>> log_tool_execution(
        ...     tool_name="get_post_comments",
        ...     duration_ms=412.7,
        ...     result_count=58,
        ... )
    """
    logger = get_logger("tool_execution")

    log_data = {
        "tool": tool_name,
        "duration_ms": round(duration_ms, 2),
        "error": error,
        **extra,
    }

    if error:
        logger.error("tool_execution_failed", **log_data)
    else:
        logger.info("tool_execution_success", **log_data)
