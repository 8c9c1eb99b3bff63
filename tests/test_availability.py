from __future__ import annotations

import asyncio
from collections.abc import Sequence
from datetime import UTC, date, datetime, time, timedelta
from zoneinfo import ZoneInfo

import pytest

from supplier_booking.domain import AvailabilityResult, HolidaySequence, PublicHoliday
from supplier_booking.holidays import HolidayProvider
from supplier_booking.persistence import (
    DEFAULT_SEQUENCES,
    InMemoryHolidayStore,
    InMemoryUnitOfWork,
    seed_default_holidays,
)
from supplier_booking.scheduling import (
    AvailabilityCalculator,
    AvailabilityOptions,
    BusinessDayCalculator,
    InvalidArgumentError,
    NoAvailabilityError,
)

SYDNEY = ZoneInfo("Australia/Sydney")
EASTER = DEFAULT_SEQUENCES[0].holidays


def _sydney(*parts: int) -> datetime:
    return datetime(*parts, tzinfo=SYDNEY)


def _store(
    *,
    seed: bool = True,
    holidays: Sequence[PublicHoliday] = (),
    sequences: Sequence[HolidaySequence] = (),
) -> InMemoryHolidayStore:
    store = InMemoryHolidayStore()

    async def _fill() -> None:
        if seed:
            await seed_default_holidays(lambda: InMemoryUnitOfWork(store=store))
        async with InMemoryUnitOfWork(store=store) as uow:
            for sequence in sequences:
                await uow.sequence_repository.upsert(sequence)
            for holiday in holidays:
                await uow.holiday_repository.add(holiday)

    asyncio.run(_fill())
    return store


def _calculator(
    store: InMemoryHolidayStore | None = None,
    options: AvailabilityOptions | None = None,
) -> AvailabilityCalculator:
    target = store if store is not None else _store()
    provider = HolidayProvider(lambda: InMemoryUnitOfWork(store=target))
    return AvailabilityCalculator(provider, BusinessDayCalculator(provider), options)


def _compute(
    calculator: AvailabilityCalculator,
    reference: datetime,
    jurisdiction: str = "NSW",
) -> AvailabilityResult:
    return asyncio.run(calculator.compute_next_available(reference, jurisdiction))


def _nsw(day: date, name: str) -> PublicHoliday:
    return PublicHoliday(date=day, name=name, jurisdictions=("NSW",))


def test_request_well_before_easter_books_next_day() -> None:
    result = _compute(_calculator(), _sydney(2025, 4, 15, 9, 0))

    assert result.next_available_date == date(2025, 4, 16)
    assert not result.was_after_cutoff
    assert result.affected_holidays == ()
    assert result.cutoff_at is None


def test_request_just_before_cutoff_books_day_after_easter() -> None:
    result = _compute(_calculator(), _sydney(2025, 4, 16, 11, 59))

    assert result.next_available_date == date(2025, 4, 22)
    assert not result.was_after_cutoff
    assert result.affected_holidays == ()


def test_request_exactly_at_cutoff_is_late() -> None:
    result = _compute(_calculator(), _sydney(2025, 4, 16, 12, 0))

    assert result.next_available_date == date(2025, 4, 23)
    assert result.was_after_cutoff
    assert result.affected_holidays == EASTER
    assert [holiday.date for holiday in result.affected_holidays] == [
        date(2025, 4, 18),
        date(2025, 4, 19),
        date(2025, 4, 20),
        date(2025, 4, 21),
    ]
    assert result.cutoff_at == _sydney(2025, 4, 16, 12, 0)


def test_request_after_cutoff_day() -> None:
    result = _compute(_calculator(), _sydney(2025, 4, 17, 9, 0))

    assert result.next_available_date == date(2025, 4, 23)
    assert result.was_after_cutoff
    assert result.affected_holidays == EASTER


def test_cutoff_is_compared_as_an_absolute_instant() -> None:
    calculator = _calculator()
    before = _compute(calculator, datetime(2025, 4, 16, 1, 59, 59, tzinfo=UTC))
    at_cutoff = _compute(calculator, datetime(2025, 4, 16, 2, 0, tzinfo=UTC))

    assert before.next_available_date == date(2025, 4, 22)
    assert not before.was_after_cutoff
    assert at_cutoff.next_available_date == date(2025, 4, 23)
    assert at_cutoff.was_after_cutoff


def test_request_during_sequence_still_blocks_following_day() -> None:
    result = _compute(_calculator(), _sydney(2025, 4, 19, 10, 0))

    assert result.next_available_date == date(2025, 4, 23)
    assert result.was_after_cutoff


def test_no_holidays_books_next_business_day() -> None:
    calculator = _calculator(_store(seed=False))

    tuesday = _compute(calculator, _sydney(2025, 6, 10, 15, 0))
    friday = _compute(calculator, _sydney(2025, 6, 13, 15, 0))

    assert tuesday.next_available_date == date(2025, 6, 11)
    assert friday.next_available_date == date(2025, 6, 16)
    for result in (tuesday, friday):
        assert not result.was_after_cutoff
        assert result.affected_holidays == ()


def test_jurisdiction_without_holiday_is_unaffected() -> None:
    easter_nsw_only = HolidaySequence(
        name="Easter NSW",
        holidays=tuple(
            holiday.model_copy(update={"jurisdictions": frozenset({"NSW"})})
            for holiday in EASTER
        ),
    )
    calculator = _calculator(_store(seed=False, sequences=(easter_nsw_only,)))

    nsw = _compute(calculator, _sydney(2025, 4, 17, 9, 0), "NSW")
    wa = _compute(calculator, _sydney(2025, 4, 17, 9, 0), "wa")

    assert nsw.next_available_date == date(2025, 4, 23)
    assert wa.next_available_date == date(2025, 4, 18)
    assert not wa.was_after_cutoff


def test_standalone_holiday_cutoff() -> None:
    calculator = _calculator()

    before = _compute(calculator, _sydney(2025, 4, 23, 11, 0))
    after = _compute(calculator, _sydney(2025, 4, 23, 12, 0))

    assert before.next_available_date == date(2025, 4, 28)
    assert not before.was_after_cutoff
    assert after.next_available_date == date(2025, 4, 29)
    assert after.was_after_cutoff
    assert [holiday.name for holiday in after.affected_holidays] == ["ANZAC Day"]
    assert after.cutoff_at == _sydney(2025, 4, 23, 12, 0)


def test_holiday_just_before_reference_date_is_considered() -> None:
    friday = _nsw(date(2025, 3, 7), "Regional Show Day")
    calculator = _calculator(_store(seed=False, holidays=(friday,)))

    result = _compute(calculator, _sydney(2025, 3, 8, 10, 0))

    assert result.next_available_date == date(2025, 3, 11)
    assert result.affected_holidays == (friday,)


def test_windows_ending_on_same_day_are_merged() -> None:
    sequence = HolidaySequence(
        name="Split Festival",
        holidays=(
            _nsw(date(2025, 3, 5), "Festival Opening"),
            _nsw(date(2025, 3, 7), "Festival Close"),
        ),
    )
    saturday = _nsw(date(2025, 3, 8), "Harbour Day")
    calculator = _calculator(_store(seed=False, holidays=(saturday,), sequences=(sequence,)))

    result = _compute(calculator, _sydney(2025, 3, 4, 12, 0))

    assert result.next_available_date == date(2025, 3, 11)
    assert result.was_after_cutoff
    assert [holiday.date for holiday in result.affected_holidays] == [
        date(2025, 3, 5),
        date(2025, 3, 7),
        date(2025, 3, 8),
    ]
    # The sequence's cutoff (2025-03-03) is earlier than the standalone one.
    assert result.cutoff_at == _sydney(2025, 3, 3, 12, 0)
    assert result.cutoff_at is not None
    assert result.cutoff_at.utcoffset() == timedelta(hours=11)


def test_custom_cutoff_options() -> None:
    options = AvailabilityOptions(cutoff_time=time(17, 0), business_days_before_holiday=1)
    calculator = _calculator(options=options)

    before = _compute(calculator, _sydney(2025, 4, 17, 16, 59))
    after = _compute(calculator, _sydney(2025, 4, 17, 17, 0))

    assert before.next_available_date == date(2025, 4, 22)
    assert after.next_available_date == date(2025, 4, 23)
    assert after.cutoff_at == _sydney(2025, 4, 17, 17, 0)


class _RecordingBusinessDays(BusinessDayCalculator):
    def __init__(self, calendar: HolidayProvider) -> None:
        super().__init__(calendar)
        self.counts: list[tuple[date, int]] = []

    async def business_days_before(self, target: date, jurisdiction: str, count: int) -> date:
        self.counts.append((target, count))
        return await super().business_days_before(target, jurisdiction, count)


def test_cutoff_day_comes_from_the_business_day_oracle() -> None:
    store = _store()
    provider = HolidayProvider(lambda: InMemoryUnitOfWork(store=store))
    business_days = _RecordingBusinessDays(provider)
    options = AvailabilityOptions(business_days_before_holiday=3)
    calculator = AvailabilityCalculator(provider, business_days, options)

    result = _compute(calculator, _sydney(2025, 4, 15, 12, 0))

    assert (date(2025, 4, 18), 3) in business_days.counts
    assert result.was_after_cutoff
    assert result.cutoff_at == _sydney(2025, 4, 15, 12, 0)
    assert result.next_available_date == date(2025, 4, 23)


def test_results_are_idempotent() -> None:
    calculator = _calculator()
    reference = _sydney(2025, 4, 16, 12, 0)

    assert _compute(calculator, reference) == _compute(calculator, reference)


def test_same_side_of_cutoff_gives_same_date() -> None:
    calculator = _calculator()
    morning = [_sydney(2025, 4, 16, hour, minute) for hour in (0, 6, 11) for minute in (0, 59)]
    afternoon = [_sydney(2025, 4, 16, hour, 0) for hour in (12, 15, 23)]

    assert {_compute(calculator, ref).next_available_date for ref in morning} == {
        date(2025, 4, 22)
    }
    assert {_compute(calculator, ref).next_available_date for ref in afternoon} == {
        date(2025, 4, 23)
    }


def test_is_available_on_date() -> None:
    calculator = _calculator()
    reference = _sydney(2025, 4, 16, 12, 0)

    async def _run() -> list[bool]:
        days = [date(2025, 4, 22), date(2025, 4, 23), date(2025, 4, 24)]
        return [await calculator.is_available_on_date(day, reference, "NSW") for day in days]

    assert asyncio.run(_run()) == [False, True, True]


def test_scan_beyond_horizon_raises() -> None:
    options = AvailabilityOptions(lookahead_days=1)
    calculator = _calculator(_store(seed=False), options)

    with pytest.raises(NoAvailabilityError) as excinfo:
        _compute(calculator, _sydney(2025, 6, 13, 9, 0))

    assert excinfo.value.jurisdiction == "NSW"
    assert excinfo.value.end == date(2025, 6, 14)


@pytest.mark.parametrize("jurisdiction", ["", "   ", "XX"])
def test_rejects_bad_jurisdiction(jurisdiction: str) -> None:
    with pytest.raises(InvalidArgumentError):
        _compute(_calculator(), _sydney(2025, 4, 15, 9, 0), jurisdiction)


def test_rejects_naive_reference() -> None:
    with pytest.raises(InvalidArgumentError):
        _compute(_calculator(), datetime(2025, 4, 15, 9, 0))


def test_options_validation() -> None:
    with pytest.raises(ValueError):
        AvailabilityOptions(timezone="Nowhere/Special")
    with pytest.raises(ValueError):
        AvailabilityOptions(business_days_before_holiday=0)
    with pytest.raises(ValueError):
        AvailabilityOptions(lookahead_days=0)
    with pytest.raises(ValueError):
        AvailabilityOptions(lookbehind_days=-1)


class _FailingCalendar:
    def supports(self, jurisdiction: str) -> bool:
        return True

    async def get_holidays(
        self, jurisdiction: str, start: date, end: date
    ) -> Sequence[PublicHoliday]:
        raise ConnectionError("holiday store unavailable")

    async def get_holiday_sequences(
        self, jurisdiction: str, start: date, end: date
    ) -> Sequence[HolidaySequence]:
        return ()


def test_calendar_failures_propagate() -> None:
    calendar = _FailingCalendar()
    calculator = AvailabilityCalculator(calendar, BusinessDayCalculator(calendar))

    with pytest.raises(ConnectionError):
        _compute(calculator, _sydney(2025, 4, 15, 9, 0))


class _StalledCalendar:
    def __init__(self) -> None:
        self.started = asyncio.Event()

    def supports(self, jurisdiction: str) -> bool:
        return True

    async def get_holidays(
        self, jurisdiction: str, start: date, end: date
    ) -> Sequence[PublicHoliday]:
        self.started.set()
        await asyncio.Event().wait()
        return ()

    async def get_holiday_sequences(
        self, jurisdiction: str, start: date, end: date
    ) -> Sequence[HolidaySequence]:
        return ()


def test_cancellation_propagates() -> None:
    async def _run() -> None:
        calendar = _StalledCalendar()
        calculator = AvailabilityCalculator(calendar, BusinessDayCalculator(calendar))
        task = asyncio.create_task(
            calculator.compute_next_available(_sydney(2025, 4, 15, 9, 0), "NSW")
        )
        await calendar.started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert task.cancelled()

    asyncio.run(_run())
