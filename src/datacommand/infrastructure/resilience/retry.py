"""Retry policy for command phases.

A ``RetryPolicy`` wraps a single fallible operation (opening a connection or
running a command's execution step) and captures its final outcome instead of
raising. Retries are driven by tenacity: at most ``max_retries`` extra attempts,
only while the predicate accepts the error, with one warning per retry.
"""

import time
from typing import Any, Callable, Optional, TypeVar

from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_none,
)

from datacommand.core.logging_setup import CommandEventId
from datacommand.domain.protocols import RetryPredicate
from datacommand.domain.value_objects.outcome import Failure, Outcome, Success

T = TypeVar("T")


class RetryPolicy:
    """Retry strategy guarding one phase of a command run."""

    def __init__(
        self,
        phase: str,
        max_retries: int,
        predicate: RetryPredicate,
        logger: Any,
        message: str,
        command_name: Optional[str] = None,
        backoff_seconds: float = 0.0,
        max_backoff_seconds: float = 30.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize retry policy.

        Args:
            phase: Phase label put on log records ("open" or "execute")
            max_retries: Attempts allowed after the first one
            predicate: Decides whether an error is worth another attempt
            logger: Structured logger receiving retry warnings
            message: Warning message emitted for every retry
            command_name: Name of the command owning this policy
            backoff_seconds: Base delay for exponential back-off, 0 disables it
            max_backoff_seconds: Upper bound for a single delay
            sleep: Function used to wait between attempts
        """
        self.phase = phase
        self.max_retries = max_retries
        self.predicate = predicate
        self.logger = logger
        self.message = message
        self.command_name = command_name
        self.backoff_seconds = backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds
        self.sleep = sleep

    @property
    def max_attempts(self) -> int:
        """Total attempts, the first one included."""
        return self.max_retries + 1

    def execute(self, operation: Callable[[], T]) -> Outcome[T]:
        """Run ``operation`` under this policy and capture the result.

        Args:
            operation: Zero-argument callable to attempt

        Returns:
            Success with the value, or Failure with the terminal error
        """
        retrying = self._build_retrying()
        try:
            value = retrying(operation)
        except Exception as error:
            return Failure(error, attempts=self._attempts(retrying))
        return Success(value, attempts=self._attempts(retrying))

    def _build_retrying(self) -> Retrying:
        if self.backoff_seconds > 0:
            wait = wait_exponential(
                multiplier=self.backoff_seconds, max=self.max_backoff_seconds
            )
        else:
            wait = wait_none()

        return Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait,
            retry=retry_if_exception(self._should_retry),
            before_sleep=self._log_retry,
            sleep=self.sleep,
            reraise=True,
        )

    def _should_retry(self, error: BaseException) -> bool:
        # KeyboardInterrupt and friends always propagate
        if not isinstance(error, Exception):
            return False
        try:
            return bool(self.predicate(error))
        except Exception as predicate_error:
            # The attempt's own error stays terminal
            self.logger.warning(
                "Retry predicate failed, not retrying",
                command=self.command_name,
                phase=self.phase,
                error=str(error),
                predicate_error=str(predicate_error),
                exc_info=True,
            )
            return False

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        self.logger.warning(
            f"{self.message}. Retry count is {retry_state.attempt_number}.",
            event_id=CommandEventId.CONNECTION_ERROR,
            command=self.command_name,
            phase=self.phase,
            retry_count=retry_state.attempt_number,
            error=str(error),
            exc_info=error,
        )

    @staticmethod
    def _attempts(retrying: Retrying) -> int:
        return int(retrying.statistics.get("attempt_number", 1))
