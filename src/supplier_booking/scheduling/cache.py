"""Bounded memoization for calendar and availability lookups."""

from __future__ import annotations

import asyncio
import logging
import time
from collections import OrderedDict
from collections.abc import Awaitable, Callable, Hashable
from datetime import date, datetime
from typing import Generic, TypeVar, cast

from supplier_booking.domain import AvailabilityResult, normalize_jurisdiction
from supplier_booking.utils import ensure_utc, is_aware

from .availability import AvailabilityCalculator
from .exceptions import InvalidArgumentError

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class AsyncLruCache(Generic[K, V]):
    """LRU cache with optional expiry and one in-flight computation per key.

    Concurrent ``get_or_create`` calls for the same key share a single
    computation. Failed or cancelled computations are never stored.
    """

    def __init__(
        self,
        capacity: int,
        *,
        ttl_seconds: float | None = None,
        timer: Callable[[], float] = time.monotonic,
        name: str = "lookup",
        logger: logging.Logger | None = None,
    ) -> None:
        if capacity < 1:
            msg = "Cache capacity must be positive"
            raise ValueError(msg)
        if ttl_seconds is not None and ttl_seconds <= 0:
            msg = "Cache TTL must be positive"
            raise ValueError(msg)
        self._capacity = capacity
        self._ttl = ttl_seconds
        self._timer = timer
        self._name = name
        self._logger = logger or logging.getLogger(__name__)
        self._entries: OrderedDict[K, tuple[float | None, V]] = OrderedDict()
        self._inflight: dict[K, asyncio.Future[V]] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: K) -> V | None:
        return self._lookup(key)[1]

    def _lookup(self, key: K) -> tuple[bool, V | None]:
        entry = self._entries.get(key)
        if entry is None:
            return False, None
        expires_at, value = entry
        if expires_at is not None and self._timer() >= expires_at:
            del self._entries[key]
            return False, None
        self._entries.move_to_end(key)
        return True, value

    def put(self, key: K, value: V) -> None:
        expires_at = None if self._ttl is None else self._timer() + self._ttl
        self._entries[key] = (expires_at, value)
        self._entries.move_to_end(key)
        while len(self._entries) > self._capacity:
            self._entries.popitem(last=False)

    def invalidate(self, key: K | None = None) -> None:
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    async def get_or_create(self, key: K, factory: Callable[[], Awaitable[V]]) -> V:
        while True:
            found, cached = self._lookup(key)
            if found:
                self.hits += 1
                self._logger.debug("%s cache hit for %r", self._name, key)
                return cast(V, cached)
            pending = self._inflight.get(key)
            if pending is None:
                self.misses += 1
                self._logger.debug("%s cache miss for %r", self._name, key)
                return await self._compute(key, factory)
            try:
                return await asyncio.shield(pending)
            except asyncio.CancelledError:
                task = asyncio.current_task()
                if pending.cancelled() and (task is None or not task.cancelling()):
                    # The computing caller was cancelled; take over.
                    continue
                raise

    async def _compute(self, key: K, factory: Callable[[], Awaitable[V]]) -> V:
        future: asyncio.Future[V] = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            value = await factory()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            future.exception()
            raise
        finally:
            self._inflight.pop(key, None)
        self.put(key, value)
        future.set_result(value)
        return value


CacheKey = tuple[datetime, str, str]


class CachedAvailabilityCalculator:
    """Memoizes availability results per (reference instant, jurisdiction)."""

    def __init__(
        self,
        calculator: AvailabilityCalculator,
        *,
        capacity: int = 50,
        logger: logging.Logger | None = None,
    ) -> None:
        self._calculator = calculator
        self._cache: AsyncLruCache[CacheKey, AvailabilityResult] = AsyncLruCache(
            capacity,
            name="availability",
            logger=logger,
        )

    @property
    def calculator(self) -> AvailabilityCalculator:
        return self._calculator

    @property
    def cache(self) -> AsyncLruCache[CacheKey, AvailabilityResult]:
        return self._cache

    async def compute_next_available(
        self,
        reference: datetime,
        jurisdiction: str,
    ) -> AvailabilityResult:
        if not is_aware(reference):
            msg = "Reference instant must be timezone-aware"
            raise InvalidArgumentError(msg)
        if not jurisdiction or not jurisdiction.strip():
            msg = "Jurisdiction code must be provided"
            raise InvalidArgumentError(msg)
        key: CacheKey = (
            ensure_utc(reference),
            self._calculator.options.timezone,
            normalize_jurisdiction(jurisdiction),
        )
        return await self._cache.get_or_create(
            key,
            lambda: self._calculator.compute_next_available(reference, jurisdiction),
        )

    async def is_available_on_date(
        self,
        check_date: date,
        reference: datetime,
        jurisdiction: str,
    ) -> bool:
        result = await self.compute_next_available(reference, jurisdiction)
        return check_date >= result.next_available_date

    def invalidate(self) -> None:
        self._cache.invalidate()


__all__ = ["AsyncLruCache", "CachedAvailabilityCalculator"]
