"""SQLite repository implementations."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from supplier_booking.domain import HolidaySequence, PublicHoliday, normalize_jurisdiction
from supplier_booking.persistence.errors import DuplicateHolidayError, NotFoundError
from supplier_booking.persistence.interfaces import (
    HolidaySequenceRepository,
    PublicHolidayRepository,
)

from .models import HolidayJurisdictionRecord, HolidaySequenceRecord, PublicHolidayRecord


async def _find_holiday(
    session: AsyncSession,
    holiday_date: date,
    name: str,
) -> PublicHolidayRecord | None:
    stmt: Select[tuple[PublicHolidayRecord]] = select(PublicHolidayRecord).where(
        PublicHolidayRecord.holiday_date == holiday_date,
        PublicHolidayRecord.name == name,
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _find_sequence(session: AsyncSession, name: str) -> HolidaySequenceRecord | None:
    stmt: Select[tuple[HolidaySequenceRecord]] = select(HolidaySequenceRecord).where(
        HolidaySequenceRecord.name == name
    )
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def _load_jurisdictions(
    session: AsyncSession,
    holiday_ids: Iterable[int],
) -> dict[int, set[str]]:
    ids = list(holiday_ids)
    codes: dict[int, set[str]] = defaultdict(set)
    if not ids:
        return codes
    stmt: Select[tuple[HolidayJurisdictionRecord]] = select(HolidayJurisdictionRecord).where(
        HolidayJurisdictionRecord.holiday_id.in_(ids)
    )
    result = await session.execute(stmt)
    for record in result.scalars():
        codes[record.holiday_id].add(record.code)
    return codes


async def _to_domain(
    session: AsyncSession,
    records: Sequence[PublicHolidayRecord],
) -> list[PublicHoliday]:
    codes = await _load_jurisdictions(session, (record.id for record in records))
    return [
        PublicHoliday(
            date=record.holiday_date,
            name=record.name,
            jurisdictions=frozenset(codes[record.id]),
        )
        for record in records
    ]


def _add_jurisdictions(session: AsyncSession, holiday_id: int, codes: Iterable[str]) -> None:
    session.add_all(
        HolidayJurisdictionRecord(holiday_id=holiday_id, code=code) for code in sorted(codes)
    )


class SQLitePublicHolidayRepository(PublicHolidayRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_between(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[PublicHoliday]:
        code = normalize_jurisdiction(jurisdiction)
        stmt: Select[tuple[PublicHolidayRecord]] = (
            select(PublicHolidayRecord)
            .join(
                HolidayJurisdictionRecord,
                HolidayJurisdictionRecord.holiday_id == PublicHolidayRecord.id,
            )
            .where(
                HolidayJurisdictionRecord.code == code,
                PublicHolidayRecord.holiday_date >= start,
                PublicHolidayRecord.holiday_date <= end,
            )
            .order_by(PublicHolidayRecord.holiday_date, PublicHolidayRecord.name)
        )
        result = await self._session.execute(stmt)
        return await _to_domain(self._session, result.scalars().all())

    async def list_all(self) -> Sequence[PublicHoliday]:
        stmt: Select[tuple[PublicHolidayRecord]] = select(PublicHolidayRecord).order_by(
            PublicHolidayRecord.holiday_date, PublicHolidayRecord.name
        )
        result = await self._session.execute(stmt)
        return await _to_domain(self._session, result.scalars().all())

    async def add(self, holiday: PublicHoliday, *, sequence_name: str | None = None) -> None:
        if await _find_holiday(self._session, holiday.date, holiday.name) is not None:
            msg = f"Holiday {holiday.name} on {holiday.date.isoformat()} already exists"
            raise DuplicateHolidayError(msg)
        sequence_id: int | None = None
        if sequence_name is not None:
            sequence = await _find_sequence(self._session, sequence_name)
            if sequence is None:
                msg = f"Holiday sequence {sequence_name!r} not found"
                raise NotFoundError(msg)
            sequence_id = sequence.id
        record = PublicHolidayRecord(
            holiday_date=holiday.date,
            name=holiday.name,
            sequence_id=sequence_id,
        )
        self._session.add(record)
        await self._session.flush()
        _add_jurisdictions(self._session, record.id, holiday.jurisdictions)
        await self._session.flush()

    async def delete(self, holiday_date: date, name: str) -> None:
        record = await _find_holiday(self._session, holiday_date, name.strip())
        if record is None:
            msg = f"Holiday {name} on {holiday_date.isoformat()} not found"
            raise NotFoundError(msg)
        await self._session.execute(
            delete(HolidayJurisdictionRecord).where(
                HolidayJurisdictionRecord.holiday_id == record.id
            )
        )
        await self._session.delete(record)
        await self._session.flush()


class SQLiteHolidaySequenceRepository(HolidaySequenceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, name: str) -> HolidaySequence | None:
        sequence = await _find_sequence(self._session, name)
        if sequence is None:
            return None
        stmt: Select[tuple[PublicHolidayRecord]] = (
            select(PublicHolidayRecord)
            .where(PublicHolidayRecord.sequence_id == sequence.id)
            .order_by(PublicHolidayRecord.holiday_date, PublicHolidayRecord.name)
        )
        result = await self._session.execute(stmt)
        members = await _to_domain(self._session, result.scalars().all())
        if not members:
            return None
        return HolidaySequence(name=sequence.name, holidays=tuple(members))

    async def list_overlapping(
        self,
        jurisdiction: str,
        start: date,
        end: date,
    ) -> Sequence[HolidaySequence]:
        code = normalize_jurisdiction(jurisdiction)
        stmt = (
            select(PublicHolidayRecord, HolidaySequenceRecord.name)
            .join(
                HolidaySequenceRecord,
                PublicHolidayRecord.sequence_id == HolidaySequenceRecord.id,
            )
            .join(
                HolidayJurisdictionRecord,
                HolidayJurisdictionRecord.holiday_id == PublicHolidayRecord.id,
            )
            .where(
                HolidayJurisdictionRecord.code == code,
                PublicHolidayRecord.holiday_date >= start,
                PublicHolidayRecord.holiday_date <= end,
            )
            .order_by(
                HolidaySequenceRecord.name,
                PublicHolidayRecord.holiday_date,
                PublicHolidayRecord.name,
            )
        )
        result = await self._session.execute(stmt)
        grouped: dict[str, list[PublicHolidayRecord]] = defaultdict(list)
        for record, sequence_name in result.all():
            grouped[sequence_name].append(record)
        sequences: list[HolidaySequence] = []
        for sequence_name, records in grouped.items():
            members = await _to_domain(self._session, records)
            sequences.append(HolidaySequence(name=sequence_name, holidays=tuple(members)))
        return sequences

    async def upsert(self, sequence: HolidaySequence) -> None:
        record = await _find_sequence(self._session, sequence.name)
        if record is None:
            record = HolidaySequenceRecord(name=sequence.name)
            self._session.add(record)
            await self._session.flush()

        wanted = {holiday.key for holiday in sequence.holidays}
        stmt: Select[tuple[PublicHolidayRecord]] = select(PublicHolidayRecord).where(
            PublicHolidayRecord.sequence_id == record.id
        )
        result = await self._session.execute(stmt)
        for member in result.scalars().all():
            if (member.holiday_date, member.name) not in wanted:
                member.sequence_id = None

        for holiday in sequence.holidays:
            existing = await _find_holiday(self._session, holiday.date, holiday.name)
            if existing is None:
                existing = PublicHolidayRecord(
                    holiday_date=holiday.date,
                    name=holiday.name,
                    sequence_id=record.id,
                )
                self._session.add(existing)
                await self._session.flush()
                _add_jurisdictions(self._session, existing.id, holiday.jurisdictions)
                continue
            existing.sequence_id = record.id
            known = (await _load_jurisdictions(self._session, [existing.id]))[existing.id]
            _add_jurisdictions(self._session, existing.id, holiday.jurisdictions - known)
        await self._session.flush()


__all__ = ["SQLiteHolidaySequenceRepository", "SQLitePublicHolidayRepository"]
