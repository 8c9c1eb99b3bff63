from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime
from pathlib import Path

from supplier_booking.config import AppSettings
from supplier_booking.container import build_container
from supplier_booking.domain import PublicHoliday
from supplier_booking.utils import FixedClock


def test_build_container_seeds_and_wires_services(tmp_path: Path) -> None:
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'nested' / 'container.db'}"
    settings = AppSettings(environment="test", database_url=db_url, result_cache_size=5)
    clock = FixedClock(datetime(2025, 4, 16, 2, 0, tzinfo=UTC))

    container = build_container(settings, clock=clock)

    assert (tmp_path / "nested" / "container.db").exists()
    assert container.clock is clock
    assert container.availability.cache.capacity == 5
    assert container.availability.calculator is container.availability_calculator

    async def _run() -> tuple[int, date]:
        async with container.unit_of_work_factory() as uow:
            holidays = await uow.holiday_repository.list_all()
        zone = container.availability_calculator.options.zone
        result = await container.availability.compute_next_available(clock.now(zone), "NSW")
        return len(holidays), result.next_available_date

    assert asyncio.run(_run()) == (5, date(2025, 4, 23))


def test_build_container_without_seeding(tmp_path: Path) -> None:
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}"
    container = build_container(AppSettings(database_url=db_url, seed_on_startup=False))

    async def _count() -> int:
        async with container.unit_of_work_factory() as uow:
            return len(await uow.holiday_repository.list_all())

    assert asyncio.run(_count()) == 0


def test_zero_holiday_cache_ttl_sees_new_holidays(tmp_path: Path) -> None:
    db_url = f"sqlite+aiosqlite:///{tmp_path / 'ttl.db'}"
    settings = AppSettings(database_url=db_url, holiday_cache_ttl_seconds=0)
    container = build_container(settings)
    start, end = date(2025, 6, 1), date(2025, 6, 30)

    async def _run() -> tuple[int, int]:
        before = await container.holiday_provider.get_holidays("NSW", start, end)
        async with container.unit_of_work_factory() as uow:
            await uow.holiday_repository.add(
                PublicHoliday(date=date(2025, 6, 9), name="King's Birthday", jurisdictions=("NSW",))
            )
        after = await container.holiday_provider.get_holidays("NSW", start, end)
        return len(before), len(after)

    assert asyncio.run(_run()) == (0, 1)
