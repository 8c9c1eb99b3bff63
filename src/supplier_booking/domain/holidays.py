"""Public holiday domain models."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable
from typing import Annotated, Any

from pydantic import Field, field_validator

from .base import DomainModel
from .types import normalize_jurisdiction


class PublicHoliday(DomainModel):
    """A named holiday observed in one or more jurisdictions.

    Two holidays are the same holiday when they share a date and a name; the
    set of jurisdictions is descriptive only.
    """

    date: dt.date
    name: Annotated[str, Field(min_length=1)]
    jurisdictions: frozenset[str]

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            msg = "Holiday name must not be blank"
            raise ValueError(msg)
        return stripped

    @field_validator("jurisdictions", mode="before")
    @classmethod
    def normalize_jurisdictions(cls, value: Any) -> frozenset[str]:
        if isinstance(value, str):
            value = (value,)
        codes = frozenset(normalize_jurisdiction(code) for code in value if str(code).strip())
        if not codes:
            msg = "Holiday must be observed in at least one jurisdiction"
            raise ValueError(msg)
        return codes

    def observed_in(self, jurisdiction: str) -> bool:
        return normalize_jurisdiction(jurisdiction) in self.jurisdictions

    @property
    def key(self) -> tuple[dt.date, str]:
        return (self.date, self.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublicHoliday):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


def unique_holidays(holidays: Iterable[PublicHoliday]) -> tuple[PublicHoliday, ...]:
    """Drop duplicate holidays and order the remainder by date then name."""

    seen: dict[tuple[dt.date, str], PublicHoliday] = {}
    for holiday in holidays:
        seen.setdefault(holiday.key, holiday)
    return tuple(sorted(seen.values(), key=lambda holiday: holiday.key))


class HolidaySequence(DomainModel):
    """Group of holidays treated as one continuous blackout span.

    The span runs from ``first_date`` to ``last_date`` inclusive even when the
    member dates are not literally consecutive.
    """

    name: Annotated[str, Field(min_length=1)]
    holidays: tuple[PublicHoliday, ...]

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if not stripped:
            msg = "Sequence name must not be blank"
            raise ValueError(msg)
        return stripped

    @field_validator("holidays")
    @classmethod
    def ensure_holidays(cls, value: tuple[PublicHoliday, ...]) -> tuple[PublicHoliday, ...]:
        if not value:
            msg = "Holiday sequence must contain at least one holiday"
            raise ValueError(msg)
        return unique_holidays(value)

    @property
    def first_date(self) -> dt.date:
        return self.holidays[0].date

    @property
    def last_date(self) -> dt.date:
        return self.holidays[-1].date

    @property
    def dates(self) -> frozenset[dt.date]:
        return frozenset(holiday.date for holiday in self.holidays)

    def contains(self, target: dt.date) -> bool:
        return target in self.dates


__all__ = ["HolidaySequence", "PublicHoliday", "unique_holidays"]
