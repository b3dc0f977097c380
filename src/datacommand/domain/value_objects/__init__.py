"""Value objects for command execution."""

from .options import CommandOptions
from .outcome import Failure, Outcome, Success

__all__ = [
    "CommandOptions",
    "Failure",
    "Outcome",
    "Success",
]
