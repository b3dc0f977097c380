"""Base class for data commands executed against the database.

A data command is a single unit of database work with a typed result.
Subclasses capture their parameters at construction and implement
``execute``; ``run`` supplies the connection, the retries and the timing.

Example:
    class GetUserName(DataCommand[Optional[str]]):
        def __init__(self, user_id: int, options: CommandOptions, logger_factory):
            super().__init__("GetUserName", options, logger_factory)
            self._user_id = user_id

        def execute(self, connection, options):
            row = connection.execute(
                "SELECT name FROM users WHERE id = :id", {"id": self._user_id}
            ).first()
            return row.name if row else None

    name = GetUserName(42, options, get_logger).run()
"""

import time
from abc import ABC, abstractmethod
from contextlib import closing
from datetime import timedelta
from typing import Any, Generic, TypeVar

from datacommand.domain.exceptions import (
    InvalidArgumentError,
    InvalidConnectionError,
    MissingArgumentError,
)
from datacommand.domain.protocols import ConnectionHandle, LoggerFactory
from datacommand.domain.statistics import CommandStatistics
from datacommand.domain.value_objects.options import CommandOptions
from datacommand.domain.value_objects.outcome import Outcome
from datacommand.core.logging_setup import CommandEventId
from datacommand.infrastructure.resilience.retry import RetryPolicy

T = TypeVar("T")

OPEN_PHASE = "open"
EXECUTE_PHASE = "execute"


class DataCommand(ABC, Generic[T]):
    """Retryable, timed unit of database work returning a ``T``.

    Each ``run`` opens a fresh connection from the options' factory, retries
    the open and the execution step independently, records timings in
    ``statistics`` and always closes the connection. Terminal errors are
    raised unchanged once the connection is released.
    """

    def __init__(
        self,
        name: str,
        options: CommandOptions,
        logger_factory: LoggerFactory,
    ):
        """Initialize the command.

        Args:
            name: Identifier for this command, found on logs and statistics
            options: Execution options to bind to
            logger_factory: Creates the logger for this command

        Raises:
            MissingArgumentError: If name, options or logger_factory is missing
            InvalidArgumentError: If options carry a blank connection string
        """
        if name is None or not str(name).strip():
            raise MissingArgumentError("name")
        if options is None:
            raise MissingArgumentError("options")
        if logger_factory is None:
            raise MissingArgumentError("logger_factory")

        if not options.has_connection_string:
            raise InvalidArgumentError(
                "A connection string must be supplied within options",
                context={"command": name},
            )

        self._name = name
        self._options = options
        self._logger = logger_factory(f"{type(self).__module__}.{type(self).__qualname__}")
        self._statistics = CommandStatistics(name=name)

    @property
    def name(self) -> str:
        """Get the name of this command."""
        return self._name

    @property
    def statistics(self) -> CommandStatistics:
        """Get this command's execution statistics."""
        return self._statistics

    @property
    def logger(self) -> Any:
        """Get the logger for this command, for use by subclasses."""
        return self._logger

    def run(self) -> T:
        """Run this command.

        Returns:
            The value produced by ``execute``

        Raises:
            InvalidConnectionError: If the factory produced no connection
            Exception: The terminal error of the open or execution phase
        """
        total_started = time.perf_counter()

        connection = self.create_connection()
        open_policy = self._build_policy(
            OPEN_PHASE,
            self.handle_open_connection_exception,
            "Error while trying to open the connection",
        )
        execute_policy = self._build_policy(
            EXECUTE_PHASE,
            self.handle_execution_exception,
            "Error while trying to execute this command",
        )

        with closing(connection):
            opened = open_policy.execute(connection.open)
            self._statistics.last_open_attempts = opened.attempts

            if not opened.succeeded:
                self._statistics.last_elapsed_time = _since(total_started)
                outcome: Outcome[Any] = opened
            else:
                exec_started = time.perf_counter()
                outcome = execute_policy.execute(
                    lambda: self.execute(connection, self._options)
                )
                exec_finished = time.perf_counter()
                total_finished = time.perf_counter()

                self._statistics.last_exec_elapsed_time = timedelta(
                    seconds=exec_finished - exec_started
                )
                self._statistics.last_elapsed_time = timedelta(
                    seconds=total_finished - total_started
                )
                self._statistics.last_exec_attempts = outcome.attempts

            # Outcome is logged while the connection is still held
            self._log_outcome(outcome)

        return outcome.unwrap()

    def handle_execution_exception(self, error: BaseException) -> bool:
        """Decide whether an execution error should be retried."""
        return self._options.should_retry_on(error)

    def handle_open_connection_exception(self, error: BaseException) -> bool:
        """Decide whether an error opening the connection should be retried."""
        return self._options.should_retry_on(error)

    def create_connection(self) -> ConnectionHandle:
        """Create a new, unopened connection from the options.

        Raises:
            InvalidConnectionError: If the options' factory returned ``None``
        """
        connection = self._options.create_connection()
        if connection is None:
            raise InvalidConnectionError(
                "An invalid connection (None) was supplied by the received options",
                context={"command": self._name},
            )
        return connection

    @abstractmethod
    def execute(self, connection: ConnectionHandle, options: CommandOptions) -> T:
        """Execute the command inside the provided, open connection.

        May be called several times on the same connection when retries
        happen, so it must tolerate repeated invocation.

        Args:
            connection: Open connection to the database
            options: Options for this command execution

        Returns:
            The command's result
        """
        ...

    def _build_policy(self, phase: str, predicate, message: str) -> RetryPolicy:
        return RetryPolicy(
            phase=phase,
            max_retries=self._options.max_retries,
            predicate=predicate,
            logger=self._logger,
            message=message,
            command_name=self._name,
            backoff_seconds=self._options.retry_backoff_seconds,
            max_backoff_seconds=self._options.retry_max_backoff_seconds,
        )

    def _log_outcome(self, outcome: Outcome[Any]) -> None:
        if outcome.succeeded:
            self._logger.debug(
                "Data command executed",
                event_id=CommandEventId.COMMAND_EXECUTED,
                command=self._name,
                statistics=self._statistics.to_dict(),
            )
        else:
            self._logger.error(
                "Data command failed",
                event_id=CommandEventId.COMMAND_FAILED,
                error=str(outcome.error),
                error_type=type(outcome.error).__name__,
                command=self._name,
                statistics=self._statistics.to_dict(),
            )


def _since(started: float) -> timedelta:
    return timedelta(seconds=time.perf_counter() - started)
