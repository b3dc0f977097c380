"""Domain protocols - interfaces for the collaborators a command consumes."""

from typing import TYPE_CHECKING, Any, Callable, Protocol, runtime_checkable

if TYPE_CHECKING:
    from .value_objects.options import CommandOptions


@runtime_checkable
class ConnectionHandle(Protocol):
    """A live or not-yet-open link to the database."""

    def open(self) -> None:
        """Open the link. May be called again after a failed attempt."""
        ...

    def close(self) -> None:
        """Release the link. Must be safe to call on an unopened handle."""
        ...


ConnectionFactory = Callable[["CommandOptions"], ConnectionHandle]
"""Produces a new, unopened handle bound to the options' connection string."""

RetryPredicate = Callable[[BaseException], bool]
"""Decides whether an error should trigger another attempt."""

LoggerFactory = Callable[[str], Any]
"""Returns a structured logger for the given name."""
