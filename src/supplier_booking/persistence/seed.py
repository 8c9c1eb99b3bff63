"""Default holiday data loaded into a fresh database."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from supplier_booking.domain import HolidaySequence, Jurisdiction, PublicHoliday

from .interfaces import UnitOfWork

ALL_JURISDICTIONS = frozenset(code.value for code in Jurisdiction)

logger = logging.getLogger(__name__)


def _holiday(day: date, name: str) -> PublicHoliday:
    return PublicHoliday(date=day, name=name, jurisdictions=ALL_JURISDICTIONS)


DEFAULT_SEQUENCES: tuple[HolidaySequence, ...] = (
    HolidaySequence(
        name="Easter 2025",
        holidays=(
            _holiday(date(2025, 4, 18), "Good Friday"),
            _holiday(date(2025, 4, 19), "Easter Saturday"),
            _holiday(date(2025, 4, 20), "Easter Sunday"),
            _holiday(date(2025, 4, 21), "Easter Monday"),
        ),
    ),
)

DEFAULT_HOLIDAYS: tuple[PublicHoliday, ...] = (_holiday(date(2025, 4, 25), "ANZAC Day"),)


async def seed_default_holidays(uow_factory: Callable[[], UnitOfWork]) -> int:
    """Insert the default holidays that are not stored yet; return how many were added."""

    added = 0
    async with uow_factory() as uow:
        existing = {holiday.key for holiday in await uow.holiday_repository.list_all()}
        for sequence in DEFAULT_SEQUENCES:
            missing = [holiday for holiday in sequence.holidays if holiday.key not in existing]
            if missing:
                await uow.sequence_repository.upsert(sequence)
                added += len(missing)
        for holiday in DEFAULT_HOLIDAYS:
            if holiday.key not in existing:
                await uow.holiday_repository.add(holiday)
                added += 1
        await uow.commit()
    if added:
        logger.info("Seeded %d default holidays", added)
    return added


__all__ = ["DEFAULT_HOLIDAYS", "DEFAULT_SEQUENCES", "seed_default_holidays"]
