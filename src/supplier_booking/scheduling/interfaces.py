"""Protocols for the collaborators of the availability engine."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from typing import Protocol

from supplier_booking.domain import AvailabilityResult, HolidaySequence, PublicHoliday


class HolidayCalendarQuery(Protocol):
    """Read access to public holidays and holiday sequences."""

    def supports(self, jurisdiction: str) -> bool: ...

    async def get_holidays(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[PublicHoliday]:
        """Return holidays observed in ``jurisdiction`` within ``[start, end]``."""

    async def get_holiday_sequences(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[HolidaySequence]:
        """Return sequences whose members intersect ``[start, end]``."""


class BusinessDayOracle(Protocol):
    """Answers business-day questions for a jurisdiction."""

    async def is_business_day(self, target: date, jurisdiction: str) -> bool: ...

    async def next_business_day(self, target: date, jurisdiction: str) -> date: ...

    async def previous_business_day(self, target: date, jurisdiction: str) -> date: ...

    async def business_days_before(self, target: date, jurisdiction: str, count: int) -> date: ...


class AvailabilityService(Protocol):
    """Caller-facing availability operations."""

    async def compute_next_available(
        self,
        reference: datetime,
        jurisdiction: str,
    ) -> AvailabilityResult: ...

    async def is_available_on_date(
        self,
        check_date: date,
        reference: datetime,
        jurisdiction: str,
    ) -> bool: ...


__all__ = ["AvailabilityService", "BusinessDayOracle", "HolidayCalendarQuery"]
