"""Retry predicates for command options.

A predicate receives the error raised by a connection open or by a command's
execution step and returns whether another attempt should be made. The
default, ``is_transient_error``, retries connectivity problems and leaves
application-level failures such as constraint violations alone.
"""

from typing import Tuple, Type

from sqlalchemy.exc import (
    DataError,
    DBAPIError,
    DisconnectionError,
    IntegrityError,
    OperationalError,
    ProgrammingError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from datacommand.domain.exceptions import InvalidArgumentError
from datacommand.domain.protocols import RetryPredicate


# Errors that indicate the link to the database, not the command, failed
TRANSIENT_ERROR_TYPES: Tuple[Type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    OperationalError,
    DisconnectionError,
    PoolTimeoutError,
)

# Errors caused by the statement or the data; retrying cannot fix them
PERMANENT_ERROR_TYPES: Tuple[Type[BaseException], ...] = (
    IntegrityError,
    ProgrammingError,
    DataError,
)

# Driver messages that mark an OperationalError as a statement or schema
# problem rather than a lost link (SQLite reports these as OperationalError)
STATEMENT_ERROR_MARKERS: Tuple[str, ...] = (
    "no such table",
    "no such column",
    "has no column named",
    "syntax error",
)


def is_transient_error(error: BaseException) -> bool:
    """Classify an error as transient (retryable) or not.

    An ``OperationalError`` counts as transient unless the driver message
    points at the statement itself, such as a missing table.

    Args:
        error: Exception raised by an attempt

    Returns:
        bool: True if the attempt should be retried
    """
    if not isinstance(error, Exception):
        return False

    if isinstance(error, PERMANENT_ERROR_TYPES):
        return False

    if isinstance(error, DBAPIError) and error.connection_invalidated:
        return True

    if isinstance(error, OperationalError) and _is_statement_error(error):
        return False

    return isinstance(error, TRANSIENT_ERROR_TYPES)


def _is_statement_error(error: OperationalError) -> bool:
    message = str(error.orig if error.orig is not None else error).lower()
    return any(marker in message for marker in STATEMENT_ERROR_MARKERS)


def retry_always(error: BaseException) -> bool:
    """Retry every ordinary exception."""
    return isinstance(error, Exception)


def retry_never(error: BaseException) -> bool:
    """Never retry."""
    return False


def retry_on(*exception_types: Type[Exception]) -> RetryPredicate:
    """Build a predicate that retries only the given exception types.

    Example:
        options = CommandOptions(
            connection_string=url,
            connection_factory=factory,
            retry_predicate=retry_on(OperationalError, ConnectionError),
        )
    """
    if not exception_types:
        raise InvalidArgumentError("retry_on() needs at least one exception type")

    def predicate(error: BaseException) -> bool:
        return isinstance(error, exception_types)

    predicate.__name__ = "retry_on_" + "_".join(t.__name__ for t in exception_types)
    return predicate
