"""Structured logging configuration using structlog.

Log lines are event names with key-value context, e.g.
``logger.info("payment_added", payment_id=..., due_date=...)``.
"""

import logging
import sys
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

SENSITIVE_KEYS = {"password", "confirm_password", "token", "secret"}


def filter_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Redact credentials so they never reach a log sink."""
    for key in SENSITIVE_KEYS:
        if key in event_dict:
            event_dict[key] = "***REDACTED***"
    return event_dict


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application name and version to every log entry."""
    from payminder import __version__

    event_dict["app"] = "payminder"
    event_dict["version"] = __version__
    return event_dict


def configure_logging(log_level: str = "WARNING", json_logs: bool = False) -> None:
    """Configure structured logging for the application.

    Logs go to stderr so they never mix with command output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to output JSON logs instead of console lines
    """
    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_app_context,
        filter_sensitive_data,
    ]

    if json_logs:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=False)]

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
        level=getattr(logging, log_level.upper(), logging.WARNING),
        force=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("payment_paid", payment_id="1")
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))
