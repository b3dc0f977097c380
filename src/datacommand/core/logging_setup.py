"""Structured logging setup.

Commands receive a logger factory at construction time; ``get_logger`` is the
default one and hands out structlog loggers. ``configure_logging`` wires
structlog on top of the standard library so records from commands and from
SQLAlchemy end up in the same stream.
"""

import logging
import sys
from enum import IntEnum
from typing import Any, Optional

import structlog

from .config import get_settings


class CommandEventId(IntEnum):
    """Stable identifiers attached to command log records."""

    CONNECTION_ERROR = 1000
    COMMAND_EXECUTED = 1001
    COMMAND_FAILED = 1002


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Configure stdlib logging and structlog.

    Args:
        level: Log level name, defaults to the configured ``log_level``
        json_logs: Render JSON instead of console output, defaults to ``log_json``
    """
    settings = get_settings()
    level = (level or settings.log_level).upper()
    json_logs = settings.log_json if json_logs is None else json_logs

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Default logger factory for commands."""
    return structlog.get_logger(name)
