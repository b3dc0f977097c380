"""Tests for retry predicates."""

import pytest
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
from datacommand.infrastructure.common.error_handling import (
    is_transient_error,
    retry_always,
    retry_never,
    retry_on,
)


def dbapi_error(cls, connection_invalidated=False):
    return cls("SELECT 1", {}, Exception("driver"), connection_invalidated=connection_invalidated)


class TestIsTransientError:
    """Default classification of errors."""

    @pytest.mark.parametrize(
        "error",
        [
            ConnectionError("reset by peer"),
            ConnectionRefusedError("refused"),
            TimeoutError("timed out"),
            DisconnectionError("gone"),
            PoolTimeoutError("pool exhausted"),
        ],
    )
    def test_connectivity_errors_are_transient(self, error):
        assert is_transient_error(error) is True

    def test_operational_error_is_transient(self):
        assert is_transient_error(dbapi_error(OperationalError)) is True

    @pytest.mark.parametrize(
        "message",
        [
            "no such table: users",
            "no such column: nickname",
            "table users has no column named nickname",
            "near \"SELEC\": syntax error",
        ],
    )
    def test_operational_statement_errors_are_permanent(self, message):
        error = OperationalError("SELECT 1", {}, Exception(message))

        assert is_transient_error(error) is False

    def test_operational_statement_error_on_invalidated_connection_is_transient(self):
        error = OperationalError(
            "SELECT 1", {}, Exception("no such table: users"), connection_invalidated=True
        )

        assert is_transient_error(error) is True

    def test_invalidated_connection_is_transient(self):
        assert is_transient_error(dbapi_error(DBAPIError, connection_invalidated=True)) is True

    def test_plain_dbapi_error_is_not_transient(self):
        assert is_transient_error(dbapi_error(DBAPIError)) is False

    @pytest.mark.parametrize("cls", [IntegrityError, ProgrammingError, DataError])
    def test_statement_errors_are_permanent(self, cls):
        assert is_transient_error(dbapi_error(cls)) is False

    def test_permanent_even_if_connection_invalidated(self):
        assert is_transient_error(dbapi_error(IntegrityError, connection_invalidated=True)) is False

    @pytest.mark.parametrize("error", [ValueError("bad"), KeyError("k"), RuntimeError("x")])
    def test_application_errors_are_not_transient(self, error):
        assert is_transient_error(error) is False

    def test_base_exceptions_are_not_transient(self):
        assert is_transient_error(KeyboardInterrupt()) is False


class TestPredicateHelpers:
    """Simple predicates and the predicate builder."""

    def test_retry_always(self):
        assert retry_always(ValueError()) is True
        assert retry_always(SystemExit()) is False

    def test_retry_never(self):
        assert retry_never(ConnectionError()) is False

    def test_retry_on_matches_types_and_subclasses(self):
        predicate = retry_on(ConnectionError, LookupError)

        assert predicate(ConnectionRefusedError()) is True
        assert predicate(KeyError("k")) is True
        assert predicate(ValueError()) is False
        assert predicate.__name__ == "retry_on_ConnectionError_LookupError"

    def test_retry_on_requires_types(self):
        with pytest.raises(InvalidArgumentError):
            retry_on()
