"""Next-available-date calculation around public holidays.

A supplier cannot take a booking on a weekend or a public holiday. The first
business day after a holiday (or after the last day of a holiday sequence) is
additionally blocked once the request arrives at or after the holiday's
cutoff: a fixed time of day, a configured number of business days before the
holiday (or before the first day of the sequence). Requests made on or after
the cutoff date also lose the business days left between that date and the
holiday.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from supplier_booking.domain import (
    AvailabilityResult,
    HolidaySequence,
    PublicHoliday,
    normalize_jurisdiction,
)
from supplier_booking.utils import at_local_time, get_zone, is_aware

from .business_days import is_weekend
from .exceptions import InvalidArgumentError, NoAvailabilityError
from .interfaces import BusinessDayOracle, HolidayCalendarQuery


@dataclass(frozen=True, slots=True)
class AvailabilityOptions:
    """Tunable parameters of the availability calculation."""

    timezone: str = "Australia/Sydney"
    cutoff_time: time = time(12, 0)
    business_days_before_holiday: int = 2
    lookahead_days: int = 60
    lookbehind_days: int = 14

    def __post_init__(self) -> None:
        get_zone(self.timezone)
        if self.cutoff_time.tzinfo is not None:
            msg = "cutoff_time must be a naive wall-clock time"
            raise ValueError(msg)
        if self.business_days_before_holiday < 1:
            msg = "business_days_before_holiday must be at least 1"
            raise ValueError(msg)
        if self.lookahead_days < 1:
            msg = "lookahead_days must be at least 1"
            raise ValueError(msg)
        if self.lookbehind_days < 0:
            msg = "lookbehind_days must not be negative"
            raise ValueError(msg)

    @property
    def zone(self) -> ZoneInfo:
        return get_zone(self.timezone)


@dataclass(frozen=True, slots=True)
class BlackoutWindow:
    """Cutoff bookkeeping for one holiday or holiday sequence."""

    holidays: tuple[PublicHoliday, ...]
    first_date: date
    last_date: date
    blocked_day: date
    cutoff_date: date
    cutoff_at: datetime

    def blocks(self, candidate: date, reference: datetime) -> bool:
        return candidate == self.blocked_day and reference >= self.cutoff_at

    def in_lead_in(self, candidate: date, today: date) -> bool:
        return today >= self.cutoff_date and self.cutoff_date < candidate < self.first_date


class AvailabilityCalculator:
    """Computes the earliest date on which a supplier can accept a booking."""

    def __init__(
        self,
        calendar: HolidayCalendarQuery,
        business_days: BusinessDayOracle,
        options: AvailabilityOptions | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._calendar = calendar
        self._business_days = business_days
        self._options = options or AvailabilityOptions()
        self._zone = self._options.zone
        self._logger = logger or logging.getLogger(__name__)

    @property
    def options(self) -> AvailabilityOptions:
        return self._options

    async def compute_next_available(
        self,
        reference: datetime,
        jurisdiction: str,
    ) -> AvailabilityResult:
        """Return the next bookable date for a request made at ``reference``.

        ``reference`` must be timezone-aware; it is compared with cutoffs as an
        absolute instant. Raises ``NoAvailabilityError`` when every day up to
        the lookahead horizon is unavailable.
        """

        code = self._validate(reference, jurisdiction)
        today = reference.astimezone(self._zone).date()
        horizon = today + timedelta(days=self._options.lookahead_days)
        window_start = today - timedelta(days=self._options.lookbehind_days)

        holidays, sequences = await asyncio.gather(
            self._calendar.get_holidays(code, window_start, horizon),
            self._calendar.get_holiday_sequences(code, window_start, horizon),
        )
        holiday_dates = {holiday.date for holiday in holidays}
        for sequence in sequences:
            holiday_dates.update(sequence.dates)

        windows = [
            window
            for window in await self._build_windows(code, holidays, sequences)
            if window.blocked_day > today
        ]

        affected: list[PublicHoliday] = []
        earliest_cutoff: datetime | None = None
        candidate = today + timedelta(days=1)
        while candidate <= horizon:
            if is_weekend(candidate) or candidate in holiday_dates:
                candidate += timedelta(days=1)
                continue
            if not await self._business_days.is_business_day(candidate, code):
                candidate += timedelta(days=1)
                continue

            triggered = [window for window in windows if window.blocks(candidate, reference)]
            if triggered:
                for window in triggered:
                    affected.extend(window.holidays)
                cutoff = min(window.cutoff_at for window in triggered)
                if earliest_cutoff is None or cutoff < earliest_cutoff:
                    earliest_cutoff = cutoff
                self._logger.debug(
                    "%s blocked in %s: request at %s is past cutoff %s",
                    candidate,
                    code,
                    reference.isoformat(),
                    cutoff.isoformat(),
                )
                candidate += timedelta(days=1)
                continue

            if any(window.in_lead_in(candidate, today) for window in windows):
                self._logger.debug("%s blocked in %s: inside holiday lead-in", candidate, code)
                candidate += timedelta(days=1)
                continue
            break
        else:
            self._logger.warning(
                "No available date in %s between %s and %s", code, today, horizon
            )
            raise NoAvailabilityError(code, today, horizon)

        result = AvailabilityResult(
            next_available_date=candidate,
            affected_holidays=tuple(affected),
            was_after_cutoff=earliest_cutoff is not None,
            cutoff_at=earliest_cutoff,
        )
        self._logger.info(
            "Next available date in %s for request at %s is %s (after cutoff: %s)",
            code,
            reference.isoformat(),
            result.next_available_date,
            result.was_after_cutoff,
        )
        return result

    async def is_available_on_date(
        self,
        check_date: date,
        reference: datetime,
        jurisdiction: str,
    ) -> bool:
        """Return whether ``check_date`` is on or after the next available date."""

        result = await self.compute_next_available(reference, jurisdiction)
        return check_date >= result.next_available_date

    def cutoff_instant(self, cutoff_date: date) -> datetime:
        try:
            return at_local_time(cutoff_date, self._options.cutoff_time, self._zone)
        except ValueError as exc:
            raise InvalidArgumentError(str(exc)) from exc

    async def _build_windows(
        self,
        code: str,
        holidays: Sequence[PublicHoliday],
        sequences: Sequence[HolidaySequence],
    ) -> list[BlackoutWindow]:
        sequence_dates: set[date] = set()
        for sequence in sequences:
            sequence_dates.update(sequence.dates)
        spans: list[tuple[PublicHoliday, ...]] = [sequence.holidays for sequence in sequences]
        spans.extend((holiday,) for holiday in holidays if holiday.date not in sequence_dates)
        if not spans:
            return []
        return list(await asyncio.gather(*(self._build_window(code, span) for span in spans)))

    async def _build_window(self, code: str, span: tuple[PublicHoliday, ...]) -> BlackoutWindow:
        first_date = min(holiday.date for holiday in span)
        last_date = max(holiday.date for holiday in span)
        blocked_day, cutoff_date = await asyncio.gather(
            self._business_days.next_business_day(last_date, code),
            self._business_days.business_days_before(
                first_date, code, self._options.business_days_before_holiday
            ),
        )
        return BlackoutWindow(
            holidays=span,
            first_date=first_date,
            last_date=last_date,
            blocked_day=blocked_day,
            cutoff_date=cutoff_date,
            cutoff_at=self.cutoff_instant(cutoff_date),
        )

    def _validate(self, reference: datetime, jurisdiction: str) -> str:
        if not jurisdiction or not jurisdiction.strip():
            msg = "Jurisdiction code must be provided"
            raise InvalidArgumentError(msg)
        code = normalize_jurisdiction(jurisdiction)
        if not self._calendar.supports(code):
            msg = f"Unrecognized jurisdiction {jurisdiction!r}"
            raise InvalidArgumentError(msg)
        if not is_aware(reference):
            msg = "Reference instant must be timezone-aware"
            raise InvalidArgumentError(msg)
        return code


__all__ = ["AvailabilityCalculator", "AvailabilityOptions", "BlackoutWindow"]
