"""Command-specific exceptions.

Construction problems surface as ``ValueError`` subclasses, a connection
factory that hands back nothing surfaces as a ``RuntimeError`` subclass.
Errors raised while opening a connection or executing a command are never
wrapped in these types; they reach the caller unchanged.
"""

from typing import Any, Dict, Optional


class DataCommandError(Exception):
    """Base exception for all datacommand errors.

    Provides a message plus structured context for log records.
    """

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.context = dict(context or {})

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class MissingArgumentError(DataCommandError, ValueError):
    """A required constructor argument was missing or blank."""

    def __init__(self, argument: str, message: Optional[str] = None):
        super().__init__(
            message or f"Argument '{argument}' is required",
            context={"argument": argument},
        )
        self.argument = argument


class InvalidArgumentError(DataCommandError, ValueError):
    """An argument was supplied but its value is not acceptable."""

    pass


class InvalidConnectionError(DataCommandError, RuntimeError):
    """A connection handle could not be produced or used."""

    pass
