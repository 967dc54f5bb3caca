# src/taskique/core/errors.py

from __future__ import annotations


class TaskiqueError(Exception):
    """Base class for errors raised by taskique."""


class NetworkFailure(TaskiqueError):
    """A remote call was rejected or answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFound(TaskiqueError):
    """An operation referenced a local id absent from the store."""

    def __init__(self, kind: str, item_id: str) -> None:
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class ValidationSkipped(TaskiqueError):
    """Caller-side guard tripped (e.g. blank title); nothing was sent."""
