"""Availability result models."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import field_validator, model_validator

from .base import DomainModel
from .holidays import PublicHoliday, unique_holidays


class AvailabilityResult(DomainModel):
    """Outcome of a next-available-date query."""

    next_available_date: date
    affected_holidays: tuple[PublicHoliday, ...] = ()
    was_after_cutoff: bool = False
    cutoff_at: datetime | None = None

    @field_validator("affected_holidays")
    @classmethod
    def dedupe_holidays(cls, value: tuple[PublicHoliday, ...]) -> tuple[PublicHoliday, ...]:
        return unique_holidays(value)

    @field_validator("cutoff_at")
    @classmethod
    def ensure_aware(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.utcoffset() is None:
            msg = "cutoff_at must be timezone-aware"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def check_cutoff_consistency(self) -> AvailabilityResult:
        if self.was_after_cutoff and self.cutoff_at is None:
            msg = "cutoff_at is required when the cutoff was crossed"
            raise ValueError(msg)
        if not self.was_after_cutoff and self.cutoff_at is not None:
            msg = "cutoff_at is only reported when the cutoff was crossed"
            raise ValueError(msg)
        return self


__all__ = ["AvailabilityResult"]
