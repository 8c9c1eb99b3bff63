"""Persistence layer abstractions for repositories and unit of work."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from types import TracebackType
from typing import Protocol

from supplier_booking.domain import HolidaySequence, PublicHoliday


class PublicHolidayRepository(Protocol):
    """Read/write access to individual public holidays."""

    async def list_between(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[PublicHoliday]: ...

    async def list_all(self) -> Sequence[PublicHoliday]: ...

    async def add(self, holiday: PublicHoliday, *, sequence_name: str | None = None) -> None: ...

    async def delete(self, holiday_date: date, name: str) -> None: ...


class HolidaySequenceRepository(Protocol):
    """Storage for named groups of holidays."""

    async def get(self, name: str) -> HolidaySequence | None: ...

    async def list_overlapping(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[HolidaySequence]: ...

    async def upsert(self, sequence: HolidaySequence) -> None: ...


class UnitOfWork(Protocol):
    """Transactional boundary for repository operations."""

    holiday_repository: PublicHolidayRepository
    sequence_repository: HolidaySequenceRepository

    async def __aenter__(self) -> UnitOfWork: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...
