"""
Velero-UI Logging Configuration.

Provides structured logging using structlog.
"""

import io
import logging
from typing import Optional

import structlog


def setup_logging(
    level: str = "INFO",
    format: str = "console",
    log_file: Optional[str] = None,
    buffer: Optional[io.StringIO] = None,
) -> None:
    """
    Configure structured logging for the application.

    Log records go to the file and/or buffer when given and are dropped
    otherwise, leaving the terminal to the wizard.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format ('json' or 'console')
        log_file: Optional file path for log output
        buffer: Optional in-memory buffer collecting log output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    handlers: list[logging.Handler] = []
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    if buffer is not None:
        handlers.append(logging.StreamHandler(buffer))
    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        handler.setLevel(log_level)

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        level=log_level,
        handlers=handlers,
        force=True,
    )

    # Configure structlog processors
    shared_processors = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors + [renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return structlog.get_logger(name)
