"""Pytest configuration and fixtures."""

from typing import Any, Callable, Iterable, List, Optional
from unittest.mock import Mock

import pytest
import structlog

from datacommand.application.command import DataCommand
from datacommand.core.config import get_settings
from datacommand.domain.value_objects.options import CommandOptions


class TransientError(Exception):
    """Error classified as retryable by the test predicate."""


class PermanentError(Exception):
    """Error classified as not retryable by the test predicate."""


def transient_only(error: BaseException) -> bool:
    return isinstance(error, TransientError)


class FakeConnection:
    """Connection handle recording open/close calls.

    ``open_errors`` are raised by successive ``open()`` calls, one per call,
    before opening succeeds.
    """

    def __init__(self, open_errors: Iterable[BaseException] = ()):
        self._open_errors: List[BaseException] = list(open_errors)
        self.open_calls = 0
        self.close_calls = 0
        self.is_open = False

    def open(self) -> None:
        self.open_calls += 1
        if self._open_errors:
            raise self._open_errors.pop(0)
        self.is_open = True

    def close(self) -> None:
        self.close_calls += 1
        self.is_open = False


class ScriptedCommand(DataCommand[Any]):
    """Command whose execution step raises ``errors`` in order, then returns ``result``."""

    def __init__(
        self,
        options: CommandOptions,
        logger_factory: Callable[[str], Any],
        errors: Iterable[BaseException] = (),
        result: Any = None,
        name: str = "ScriptedCommand",
    ):
        super().__init__(name, options, logger_factory)
        self._errors = list(errors)
        self._result = result
        self.calls: List[Any] = []

    def execute(self, connection, options):
        self.calls.append(connection)
        if self._errors:
            raise self._errors.pop(0)
        return self._result


@pytest.fixture
def connection() -> FakeConnection:
    return FakeConnection()


@pytest.fixture
def make_options(connection):
    """Build options around a fake connection factory."""

    def _make_options(
        max_retries: int = 2,
        retry_predicate: Callable[[BaseException], bool] = transient_only,
        connection_string: str = "sqlite://",
        handle: Optional[FakeConnection] = None,
        **kwargs: Any,
    ) -> CommandOptions:
        target = connection if handle is None else handle
        return CommandOptions(
            connection_string=connection_string,
            connection_factory=Mock(return_value=target),
            max_retries=max_retries,
            retry_predicate=retry_predicate,
            **kwargs,
        )

    return _make_options


@pytest.fixture
def mock_logger() -> Mock:
    return Mock()


@pytest.fixture
def logger_factory(mock_logger) -> Mock:
    return Mock(return_value=mock_logger)


@pytest.fixture(autouse=True)
def reset_logging_and_settings():
    """Keep structlog configuration and cached settings isolated per test."""
    get_settings.cache_clear()
    yield
    structlog.reset_defaults()
    get_settings.cache_clear()
