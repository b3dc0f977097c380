"""Command options value object.

Simple configuration object shared by every command that binds to it.
Retry orchestration lives in the command, not here.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from datacommand.domain.exceptions import InvalidArgumentError
from datacommand.domain.protocols import ConnectionFactory, ConnectionHandle, RetryPredicate
from datacommand.infrastructure.common.error_handling import is_transient_error

if TYPE_CHECKING:
    from datacommand.core.config import DataCommandSettings


@dataclass(frozen=True)
class CommandOptions:
    """Execution configuration for data commands.

    This immutable value object is safe to share between command instances
    and threads. A blank connection string is accepted here and rejected
    when a command binds to the options.
    """

    connection_string: str
    connection_factory: ConnectionFactory
    max_retries: int = 3
    retry_predicate: RetryPredicate = is_transient_error

    # Back-off between attempts (seconds); 0 retries immediately
    retry_backoff_seconds: float = 0.0
    retry_max_backoff_seconds: float = 30.0

    def __post_init__(self) -> None:
        """Validate option values."""
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise InvalidArgumentError(
                f"max_retries must be an integer, got {self.max_retries!r}"
            )
        if self.max_retries < 0:
            raise InvalidArgumentError(
                f"max_retries cannot be negative, got {self.max_retries}"
            )
        if not callable(self.connection_factory):
            raise InvalidArgumentError("connection_factory must be callable")
        if not callable(self.retry_predicate):
            raise InvalidArgumentError("retry_predicate must be callable")
        if self.retry_backoff_seconds < 0:
            raise InvalidArgumentError("retry_backoff_seconds cannot be negative")
        if self.retry_max_backoff_seconds <= 0:
            raise InvalidArgumentError("retry_max_backoff_seconds must be positive")

    @property
    def has_connection_string(self) -> bool:
        """Check if a non-blank connection string was supplied."""
        return bool(self.connection_string and self.connection_string.strip())

    def should_retry_on(self, error: BaseException) -> bool:
        """Check whether ``error`` should trigger another attempt."""
        return bool(self.retry_predicate(error))

    def create_connection(self) -> Optional[ConnectionHandle]:
        """Create a new, unopened connection handle."""
        return self.connection_factory(self)

    @classmethod
    def from_settings(
        cls,
        settings: Optional["DataCommandSettings"] = None,
        *,
        connection_factory: Optional[ConnectionFactory] = None,
        retry_predicate: Optional[RetryPredicate] = None,
    ) -> "CommandOptions":
        """Build options from settings.

        Args:
            settings: Settings to read, defaults to the cached settings
            connection_factory: Factory to use, defaults to a SQLAlchemy factory
                configured from the settings
            retry_predicate: Predicate to use, defaults to ``is_transient_error``

        Returns:
            CommandOptions built from the settings
        """
        from datacommand.core.config import get_settings
        from datacommand.infrastructure.database.connection import (
            SqlAlchemyConnectionFactory,
        )

        settings = settings or get_settings()
        if connection_factory is None:
            connection_factory = SqlAlchemyConnectionFactory(
                echo=settings.database_echo,
                pool_pre_ping=settings.database_pool_pre_ping,
            )

        return cls(
            connection_string=settings.connection_string,
            connection_factory=connection_factory,
            max_retries=settings.max_retries,
            retry_predicate=retry_predicate or is_transient_error,
            retry_backoff_seconds=settings.retry_backoff_seconds,
            retry_max_backoff_seconds=settings.retry_max_backoff_seconds,
        )
