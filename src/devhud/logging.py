"""Structured logging configuration for the dashboard.

Sets up structlog with JSON output when piped, pretty console output on a TTY.
Integrates with stdlib logging so Flask and werkzeug logs share the format.
"""

import logging
import sys
from typing import cast

import structlog

# werkzeug logs every request at INFO; keep the dev server quiet by default
DEFAULT_LOGGER_LEVELS = {"werkzeug": "WARNING"}


def configure_logging(
    service_name: str,
    level: str = "INFO",
    logger_levels: dict[str, str] | None = None,
) -> None:
    """Configure structured logging for a dashboard process.

    Args:
        service_name: Name of the process (e.g., 'devhud-api', 'devhud-cli')
        level: Root log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        logger_levels: Per-logger level overrides (default: DEFAULT_LOGGER_LEVELS)
    """
    log_level = getattr(logging, level.upper())
    is_tty = sys.stdout.isatty()

    # Shared processors for all log entries
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    # Configure structlog to integrate with stdlib logging
    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Choose renderer based on environment
    renderer: structlog.types.Processor = (
        structlog.dev.ConsoleRenderer()
        if is_tty
        else structlog.processors.JSONRenderer()
    )

    # Create formatter that processes logs from stdlib logging
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processor=renderer,
    )

    # Log to stderr so command output on stdout stays parseable
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    overrides = DEFAULT_LOGGER_LEVELS if logger_levels is None else logger_levels
    for name, name_level in overrides.items():
        logging.getLogger(name).setLevel(getattr(logging, name_level.upper()))

    # Add service name to all log entries
    structlog.contextvars.bind_contextvars(service=service_name)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name (usually __name__ from calling module)

    Returns:
        Configured structlog logger
    """
    return cast(structlog.BoundLogger, structlog.get_logger(name))
