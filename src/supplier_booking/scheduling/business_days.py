"""Business-day arithmetic over a holiday calendar."""

from __future__ import annotations

import logging
from datetime import date, timedelta

from .exceptions import InvalidArgumentError, NoBusinessDayError
from .interfaces import HolidayCalendarQuery

WEEKEND_DAYS = frozenset({5, 6})


def is_weekend(target: date) -> bool:
    return target.weekday() in WEEKEND_DAYS


class BusinessDayCalculator:
    """Weekend and holiday aware day stepping for a jurisdiction."""

    def __init__(
        self,
        calendar: HolidayCalendarQuery,
        *,
        max_search_days: int = 366,
        logger: logging.Logger | None = None,
    ) -> None:
        if max_search_days < 1:
            msg = "max_search_days must be positive"
            raise ValueError(msg)
        self._calendar = calendar
        self._max_search_days = max_search_days
        self._logger = logger or logging.getLogger(__name__)

    async def is_business_day(self, target: date, jurisdiction: str) -> bool:
        if not jurisdiction or not jurisdiction.strip():
            msg = "Jurisdiction code must be provided"
            raise InvalidArgumentError(msg)
        if is_weekend(target):
            return False
        holidays = await self._calendar.get_holidays(jurisdiction, target, target)
        business_day = not holidays
        self._logger.debug(
            "Date %s in %s is%s a business day",
            target,
            jurisdiction,
            "" if business_day else " not",
        )
        return business_day

    async def next_business_day(self, target: date, jurisdiction: str) -> date:
        return await self._step(target, jurisdiction, 1)

    async def previous_business_day(self, target: date, jurisdiction: str) -> date:
        return await self._step(target, jurisdiction, -1)

    async def business_days_before(self, target: date, jurisdiction: str, count: int) -> date:
        """Apply ``previous_business_day`` ``count`` times starting from ``target``."""

        if count < 1:
            msg = "count must be at least 1"
            raise InvalidArgumentError(msg)
        current = target
        for _ in range(count):
            current = await self.previous_business_day(current, jurisdiction)
        return current

    async def _step(self, target: date, jurisdiction: str, direction: int) -> date:
        candidate = target
        step = timedelta(days=direction)
        for _ in range(self._max_search_days):
            candidate = candidate + step
            if await self.is_business_day(candidate, jurisdiction):
                return candidate
        label = "after" if direction > 0 else "before"
        msg = (
            f"No business day in {jurisdiction} within {self._max_search_days} days "
            f"{label} {target.isoformat()}"
        )
        raise NoBusinessDayError(msg)


__all__ = ["WEEKEND_DAYS", "BusinessDayCalculator", "is_weekend"]
