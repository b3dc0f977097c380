"""Outcome value objects.

A retry policy never lets an error escape mid-strategy; it reports either a
``Success`` carrying the value or a ``Failure`` carrying the terminal error.
The command turns a ``Failure`` back into a raised error at its boundary.
"""

from dataclasses import dataclass
from typing import Generic, NoReturn, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation completed and produced ``value``."""

    value: T
    attempts: int = 1

    @property
    def succeeded(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Operation gave up with ``error`` as the terminal error."""

    error: Exception
    attempts: int = 1

    @property
    def succeeded(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the terminal error unchanged, traceback included."""
        raise self.error


Outcome = Union[Success[T], Failure]
