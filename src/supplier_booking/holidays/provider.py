"""Holiday calendar backed by the holiday store."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import date

from supplier_booking.domain import (
    HolidaySequence,
    Jurisdiction,
    PublicHoliday,
    normalize_jurisdiction,
)
from supplier_booking.persistence.interfaces import UnitOfWork
from supplier_booking.scheduling.cache import AsyncLruCache
from supplier_booking.scheduling.exceptions import InvalidArgumentError

RangeKey = tuple[str, date, date]


class HolidayProvider:
    """Serves holiday and holiday-sequence lookups for recognized jurisdictions.

    Range queries are memoized for ``cache_ttl_seconds`` (``None`` keeps entries
    until evicted, ``0`` disables memoization). Call ``invalidate`` after
    writing holidays so later lookups see the change.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        *,
        jurisdictions: Iterable[str] | None = None,
        cache_ttl_seconds: float | None = 86400,
        cache_capacity: int = 2048,
        logger: logging.Logger | None = None,
    ) -> None:
        self._uow_factory = uow_factory
        codes = jurisdictions if jurisdictions is not None else (j.value for j in Jurisdiction)
        self._jurisdictions = frozenset(normalize_jurisdiction(code) for code in codes)
        self._logger = logger or logging.getLogger(__name__)
        self._caching = cache_ttl_seconds is None or cache_ttl_seconds > 0
        ttl = cache_ttl_seconds if self._caching else None
        self._holiday_cache: AsyncLruCache[RangeKey, tuple[PublicHoliday, ...]] = AsyncLruCache(
            cache_capacity,
            ttl_seconds=ttl,
            name="holiday",
            logger=self._logger,
        )
        self._sequence_cache: AsyncLruCache[RangeKey, tuple[HolidaySequence, ...]] = (
            AsyncLruCache(
                cache_capacity,
                ttl_seconds=ttl,
                name="holiday sequence",
                logger=self._logger,
            )
        )

    @property
    def jurisdictions(self) -> frozenset[str]:
        return self._jurisdictions

    def supports(self, jurisdiction: str) -> bool:
        if not jurisdiction:
            return False
        return normalize_jurisdiction(jurisdiction) in self._jurisdictions

    async def get_holidays(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> tuple[PublicHoliday, ...]:
        key = self._validate(jurisdiction, start, end)
        if not self._caching:
            return await self._load_holidays(key)
        return await self._holiday_cache.get_or_create(key, lambda: self._load_holidays(key))

    async def get_holiday_sequences(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> tuple[HolidaySequence, ...]:
        key = self._validate(jurisdiction, start, end)
        if not self._caching:
            return await self._load_sequences(key)
        return await self._sequence_cache.get_or_create(key, lambda: self._load_sequences(key))

    def invalidate(self) -> None:
        self._holiday_cache.invalidate()
        self._sequence_cache.invalidate()
        self._logger.debug("Holiday caches cleared")

    async def _load_holidays(self, key: RangeKey) -> tuple[PublicHoliday, ...]:
        code, start, end = key
        async with self._uow_factory() as uow:
            holidays = await uow.holiday_repository.list_between(code, start, end)
        self._logger.debug(
            "Loaded %d holidays for %s between %s and %s", len(holidays), code, start, end
        )
        return tuple(holidays)

    async def _load_sequences(self, key: RangeKey) -> tuple[HolidaySequence, ...]:
        code, start, end = key
        async with self._uow_factory() as uow:
            sequences = await uow.sequence_repository.list_overlapping(code, start, end)
        self._logger.debug(
            "Loaded %d holiday sequences for %s between %s and %s",
            len(sequences),
            code,
            start,
            end,
        )
        return tuple(sequences)

    def _validate(self, jurisdiction: str, start: date, end: date) -> RangeKey:
        if not jurisdiction or not jurisdiction.strip():
            msg = "Jurisdiction code must be provided"
            raise InvalidArgumentError(msg)
        code = normalize_jurisdiction(jurisdiction)
        if code not in self._jurisdictions:
            msg = f"Unrecognized jurisdiction {jurisdiction!r}"
            raise InvalidArgumentError(msg)
        if start > end:
            msg = f"Start date {start.isoformat()} is after end date {end.isoformat()}"
            raise InvalidArgumentError(msg)
        return code, start, end


__all__ = ["HolidayProvider"]
