"""Exceptions raised by the ADR store."""

from __future__ import annotations

from pathlib import Path


class AdrError(Exception):
    """Base exception for all store failures."""
    pass


class InvalidInputError(AdrError):
    pass


class NotFoundError(AdrError):
    def __init__(self, message: str, number: int | None = None):
        self.number = number
        super().__init__(message)


class StoreNotFoundError(NotFoundError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"ADR directory not found: {path}")


class StoreIOError(AdrError):
    """A filesystem operation failed. The originating OSError is chained."""

    def __init__(self, action: str, path: Path, error: OSError):
        self.path = path
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(f"Failed to {action} {path}: {reason}")


class ConcurrentModificationError(AdrError):
    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Could not reserve a record number after {attempts} attempts; "
            "another process is writing to the store, try again"
        )
