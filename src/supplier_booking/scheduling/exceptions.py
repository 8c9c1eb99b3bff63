"""Scheduling-specific errors."""

from __future__ import annotations

from datetime import date


class SchedulingError(RuntimeError):
    """Raised when scheduling cannot compute a valid result."""


class InvalidArgumentError(SchedulingError, ValueError):
    """Raised when a caller supplies an argument the calendar cannot accept."""


class NoAvailabilityError(SchedulingError):
    """Raised when no available date exists inside the lookahead window."""

    def __init__(self, jurisdiction: str, start: date, end: date) -> None:
        self.jurisdiction = jurisdiction
        self.start = start
        self.end = end
        super().__init__(
            f"No available date for {jurisdiction} between {start.isoformat()} "
            f"and {end.isoformat()}"
        )


class NoBusinessDayError(SchedulingError):
    """Raised when stepping to a business day exceeds the search bound."""


__all__ = [
    "InvalidArgumentError",
    "NoAvailabilityError",
    "NoBusinessDayError",
    "SchedulingError",
]
