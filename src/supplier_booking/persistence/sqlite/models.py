"""SQLAlchemy ORM models for holiday persistence."""

from __future__ import annotations

import datetime as dt

from sqlalchemy import Date, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):  # type: ignore[misc]
    pass


class HolidaySequenceRecord(Base):
    __tablename__ = "holiday_sequences"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)


class PublicHolidayRecord(Base):
    __tablename__ = "public_holidays"
    __table_args__ = (UniqueConstraint("date", "name", name="uq_public_holiday_date_name"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    holiday_date: Mapped[dt.date] = mapped_column("date", Date, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    sequence_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("holiday_sequences.id", ondelete="SET NULL"),
    )


class HolidayJurisdictionRecord(Base):
    __tablename__ = "holiday_jurisdictions"
    __table_args__ = (
        UniqueConstraint("holiday_id", "code", name="uq_holiday_jurisdiction"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    holiday_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("public_holidays.id", ondelete="CASCADE"),
        nullable=False,
    )
    code: Mapped[str] = mapped_column(String(3), nullable=False, index=True)
