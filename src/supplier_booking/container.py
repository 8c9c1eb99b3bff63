"""Service container wiring application components."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from supplier_booking.config import AppSettings
from supplier_booking.holidays import HolidayProvider
from supplier_booking.persistence import UnitOfWork, seed_default_holidays
from supplier_booking.persistence.sqlite import create_sqlite_unit_of_work_factory
from supplier_booking.scheduling import (
    AvailabilityCalculator,
    BusinessDayCalculator,
    CachedAvailabilityCalculator,
)
from supplier_booking.utils import Clock, SystemClock

UnitOfWorkFactory = Callable[[], UnitOfWork]


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ServiceContainer:
    """Aggregates the availability services with shared configuration."""

    settings: AppSettings
    unit_of_work_factory: UnitOfWorkFactory
    clock: Clock
    holiday_provider: HolidayProvider
    business_days: BusinessDayCalculator
    availability_calculator: AvailabilityCalculator
    availability: CachedAvailabilityCalculator


def _ensure_sqlite_directory(database_url: str) -> None:
    if not database_url.startswith("sqlite"):
        return
    try:
        _, path = database_url.split(":///", maxsplit=1)
    except ValueError:
        return
    if not path or path.startswith(":memory:"):
        return
    db_path = Path(path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)


def build_container(
    settings: AppSettings | None = None,
    *,
    clock: Clock | None = None,
) -> ServiceContainer:
    """Construct the primary service container."""

    resolved_settings = settings or AppSettings.from_env()
    _ensure_sqlite_directory(resolved_settings.database_url)
    unit_of_work_factory = create_sqlite_unit_of_work_factory(resolved_settings.database_url)

    if resolved_settings.seed_on_startup:
        added = asyncio.run(seed_default_holidays(unit_of_work_factory))
        logger.debug("Startup seeding added %d holidays", added)

    holiday_provider = HolidayProvider(
        unit_of_work_factory,
        cache_ttl_seconds=resolved_settings.holiday_cache_ttl_seconds,
    )
    business_days = BusinessDayCalculator(holiday_provider)
    availability_calculator = AvailabilityCalculator(
        holiday_provider,
        business_days,
        resolved_settings.availability_options(),
    )
    availability = CachedAvailabilityCalculator(
        availability_calculator,
        capacity=resolved_settings.result_cache_size,
    )

    return ServiceContainer(
        settings=resolved_settings,
        unit_of_work_factory=unit_of_work_factory,
        clock=clock or SystemClock(),
        holiday_provider=holiday_provider,
        business_days=business_days,
        availability_calculator=availability_calculator,
        availability=availability,
    )


__all__ = ["ServiceContainer", "UnitOfWorkFactory", "build_container"]
