"""Custom exception hierarchy for the training load engine.

Callers decide whether to retry by exception type: only StorageError is
safe to retry with backoff.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base exception for all load_engine errors."""

    retryable: bool = False


class NotFoundError(EngineError):
    """A requested record (plan, macrocycle, landmark) does not exist."""


class ValidationError(EngineError, ValueError):
    """Input rejected before any state was touched (e.g. mev > mav, reps <= 0)."""


class StorageError(EngineError):
    """A repository could not be read or written."""

    retryable = True

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class ConflictError(EngineError):
    """The write conflicts with current state (e.g. a second active plan)."""
