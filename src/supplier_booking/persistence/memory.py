"""In-memory repository implementations for unit testing."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date
from types import TracebackType

from supplier_booking.domain import HolidaySequence, PublicHoliday, normalize_jurisdiction
from supplier_booking.persistence.errors import DuplicateHolidayError, NotFoundError
from supplier_booking.persistence.interfaces import (
    HolidaySequenceRepository,
    PublicHolidayRepository,
    UnitOfWork,
)

HolidayKey = tuple[date, str]


@dataclass
class InMemoryHolidayStore:
    """Shared state behind the in-memory holiday repositories."""

    holidays: dict[HolidayKey, PublicHoliday] = field(default_factory=dict)
    membership: dict[HolidayKey, str] = field(default_factory=dict)
    sequences: set[str] = field(default_factory=set)
    _lock: asyncio.Lock | None = field(default=None, init=False, repr=False, compare=False)
    _lock_loop: asyncio.AbstractEventLoop | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def lock(self) -> asyncio.Lock:
        """Return the lock serializing units of work on this store in the running loop."""

        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def members_of(self, name: str) -> list[PublicHoliday]:
        return sorted(
            (self.holidays[key] for key, owner in self.membership.items() if owner == name),
            key=lambda holiday: holiday.key,
        )


def _in_range(holiday: PublicHoliday, jurisdiction: str, start: date, end: date) -> bool:
    return start <= holiday.date <= end and holiday.observed_in(jurisdiction)


@dataclass
class InMemoryPublicHolidayRepository(PublicHolidayRepository):
    _store: InMemoryHolidayStore = field(default_factory=InMemoryHolidayStore)

    async def list_between(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[PublicHoliday]:
        code = normalize_jurisdiction(jurisdiction)
        return sorted(
            (h for h in self._store.holidays.values() if _in_range(h, code, start, end)),
            key=lambda holiday: holiday.key,
        )

    async def list_all(self) -> Sequence[PublicHoliday]:
        return sorted(self._store.holidays.values(), key=lambda holiday: holiday.key)

    async def add(self, holiday: PublicHoliday, *, sequence_name: str | None = None) -> None:
        if holiday.key in self._store.holidays:
            msg = f"Holiday {holiday.name} on {holiday.date.isoformat()} already exists"
            raise DuplicateHolidayError(msg)
        if sequence_name is not None and sequence_name not in self._store.sequences:
            msg = f"Holiday sequence {sequence_name!r} not found"
            raise NotFoundError(msg)
        self._store.holidays[holiday.key] = holiday
        if sequence_name is not None:
            self._store.membership[holiday.key] = sequence_name

    async def delete(self, holiday_date: date, name: str) -> None:
        key = (holiday_date, name.strip())
        if self._store.holidays.pop(key, None) is None:
            msg = f"Holiday {name} on {holiday_date.isoformat()} not found"
            raise NotFoundError(msg)
        self._store.membership.pop(key, None)


@dataclass
class InMemoryHolidaySequenceRepository(HolidaySequenceRepository):
    _store: InMemoryHolidayStore = field(default_factory=InMemoryHolidayStore)

    async def get(self, name: str) -> HolidaySequence | None:
        members = self._store.members_of(name)
        if not members:
            return None
        return HolidaySequence(name=name, holidays=tuple(members))

    async def list_overlapping(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[HolidaySequence]:
        code = normalize_jurisdiction(jurisdiction)
        sequences: list[HolidaySequence] = []
        for name in sorted(self._store.sequences):
            members = [h for h in self._store.members_of(name) if _in_range(h, code, start, end)]
            if members:
                sequences.append(HolidaySequence(name=name, holidays=tuple(members)))
        return sequences

    async def upsert(self, sequence: HolidaySequence) -> None:
        self._store.sequences.add(sequence.name)
        wanted = {holiday.key for holiday in sequence.holidays}
        for key, owner in list(self._store.membership.items()):
            if owner == sequence.name and key not in wanted:
                del self._store.membership[key]
        for holiday in sequence.holidays:
            existing = self._store.holidays.get(holiday.key)
            if existing is not None:
                holiday = holiday.model_copy(
                    update={"jurisdictions": existing.jurisdictions | holiday.jurisdictions}
                )
            self._store.holidays[holiday.key] = holiday
            self._store.membership[holiday.key] = sequence.name


@dataclass
class InMemoryUnitOfWork(UnitOfWork):
    store: InMemoryHolidayStore = field(default_factory=InMemoryHolidayStore)
    holiday_repository: InMemoryPublicHolidayRepository = field(init=False)
    sequence_repository: InMemoryHolidaySequenceRepository = field(init=False)
    _lock: asyncio.Lock | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        self.holiday_repository = InMemoryPublicHolidayRepository(self.store)
        self.sequence_repository = InMemoryHolidaySequenceRepository(self.store)

    async def __aenter__(self) -> InMemoryUnitOfWork:
        lock = self.store.lock()
        await lock.acquire()
        self._lock = lock
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._lock is not None:
            self._lock.release()
            self._lock = None

    async def commit(self) -> None:
        return None

    async def rollback(self) -> None:
        return None


__all__ = [
    "InMemoryHolidaySequenceRepository",
    "InMemoryHolidayStore",
    "InMemoryPublicHolidayRepository",
    "InMemoryUnitOfWork",
]
