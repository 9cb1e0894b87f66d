"""Logging configuration for acp_connect with structlog support."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog


LogLevel = int | str

ROOT_LOGGER_NAME = "acp_connect"


def _to_level(level: LogLevel) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper())
    return level


def configure_logging(
    level: LogLevel = "INFO",
    *,
    use_colors: bool | None = None,
    json_logs: bool = False,
) -> None:
    """Configure structlog and standard logging.

    Should be called once at process start. Components receive their logger
    via `get_logger` (or have one injected) and never configure logging
    themselves.

    Args:
        level: Minimum logging level
        use_colors: Whether to use colored output (auto-detected if None)
        json_logs: Force JSON output regardless of TTY detection
    """
    level = _to_level(level)

    # Configure standard logging as backend
    logging.basicConfig(
        level=level,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
        format="%(message)s",  # structlog handles formatting
    )

    if use_colors is None:
        use_colors = sys.stderr.isatty() and not json_logs

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs or (not use_colors and not sys.stderr.isatty()):
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=use_colors))

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, log_level: LogLevel | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger for the given name.

    Args:
        name: The name of the logger, will be prefixed with 'acp_connect.'
        log_level: The logging level to set for the logger

    Returns:
        A structlog BoundLogger instance
    """
    if not name.startswith(f"{ROOT_LOGGER_NAME}.") and name != ROOT_LOGGER_NAME:
        name = f"{ROOT_LOGGER_NAME}.{name}"
    logger = structlog.get_logger(name)
    if log_level is not None:
        # Set level on underlying stdlib logger
        logging.getLogger(name).setLevel(_to_level(log_level))
    return logger


def shutdown_logging() -> None:
    """Flush and close all stdlib handlers."""
    logging.shutdown()
