"""Custom persistence exceptions."""

from __future__ import annotations


class RepositoryError(RuntimeError):
    """Base class for persistence layer errors."""


class NotFoundError(RepositoryError):
    """Raised when a requested entity is missing."""


class DuplicateHolidayError(RepositoryError):
    """Raised when a holiday with the same date and name already exists."""
