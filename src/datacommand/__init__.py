"""Retryable, timed execution skeleton for database commands."""

from .application.command import DataCommand
from .core.config import DataCommandSettings, get_settings
from .core.logging_setup import CommandEventId, configure_logging, get_logger
from .domain.exceptions import (
    DataCommandError,
    InvalidArgumentError,
    InvalidConnectionError,
    MissingArgumentError,
)
from .domain.protocols import ConnectionHandle
from .domain.statistics import CommandStatistics
from .domain.value_objects.options import CommandOptions
from .infrastructure.common.error_handling import (
    is_transient_error,
    retry_always,
    retry_never,
    retry_on,
)
from .infrastructure.database.connection import (
    SqlAlchemyConnection,
    SqlAlchemyConnectionFactory,
)

__version__ = "0.1.0"

__all__ = [
    "DataCommand",
    "CommandOptions",
    "CommandStatistics",
    "ConnectionHandle",
    "DataCommandSettings",
    "get_settings",
    "CommandEventId",
    "configure_logging",
    "get_logger",
    "DataCommandError",
    "InvalidArgumentError",
    "InvalidConnectionError",
    "MissingArgumentError",
    "is_transient_error",
    "retry_always",
    "retry_never",
    "retry_on",
    "SqlAlchemyConnection",
    "SqlAlchemyConnectionFactory",
]
