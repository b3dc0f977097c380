"""Resilience infrastructure components.

This module provides the retry policy wrapped around each phase of a
command run.
"""

from .retry import RetryPolicy

__all__ = [
    "RetryPolicy",
]
