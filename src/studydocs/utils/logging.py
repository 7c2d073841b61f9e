"""Logging utilities for studydocs."""

import logging
import sys
from pathlib import Path
from typing import Any

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(
    level: int = logging.INFO,
    log_file: Path | None = None,
    format_string: str | None = None,
) -> None:
    """Configure logging for the host application.

    The library itself never calls this; it only emits records on module
    loggers. Hosts that have no logging setup of their own can use it.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG)
        log_file: Optional path to log file
        format_string: Custom format string for log messages
    """
    if format_string is None:
        format_string = DEFAULT_FORMAT

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=level,
        format=format_string,
        handlers=handlers,
        force=True,
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def log_event(
    logger: logging.Logger,
    event: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """Emit a structured diagnostic event.

    The message reads ``"<event> key=value ..."`` for plain-text handlers,
    and the same fields are attached to the record under ``event_fields``
    (plus ``event``) for handlers that ship records to an observability
    backend.

    Args:
        logger: Logger to emit on
        event: Dotted event name, e.g. ``extraction.completed``
        level: Logging level for the record
        **fields: Event payload; ``None`` values are omitted from the message
    """
    rendered = " ".join(
        f"{key}={value}" for key, value in fields.items() if value is not None
    )
    message = f"{event} {rendered}" if rendered else event
    logger.log(level, message, extra={"event": event, "event_fields": dict(fields)})
