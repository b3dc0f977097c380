"""Per-command execution statistics."""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Optional


@dataclass
class CommandStatistics:
    """Timing data for the last run of a command.

    ``last_elapsed_time`` covers the whole run including connection
    acquisition, ``last_exec_elapsed_time`` covers the execution step only.
    Both stay ``None`` until a run reaches the point where they are measured.
    """

    name: str
    last_elapsed_time: Optional[timedelta] = None
    last_exec_elapsed_time: Optional[timedelta] = None
    last_open_attempts: int = 0
    last_exec_attempts: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Get statistics as a plain dictionary for logging or monitoring."""
        return {
            "name": self.name,
            "last_elapsed_seconds": _seconds(self.last_elapsed_time),
            "last_exec_elapsed_seconds": _seconds(self.last_exec_elapsed_time),
            "last_open_attempts": self.last_open_attempts,
            "last_exec_attempts": self.last_exec_attempts,
        }


def _seconds(value: Optional[timedelta]) -> Optional[float]:
    return value.total_seconds() if value is not None else None
