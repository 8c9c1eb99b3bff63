"""Time-related helpers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

_LOCAL_FORMATS = ("%Y-%m-%d %H:%M", "%Y-%m-%d %H:%M:%S")


class NonExistentTimeError(ValueError):
    """Raised when a wall-clock time falls inside a daylight-saving gap."""


class AmbiguousTimeError(ValueError):
    """Raised when a wall-clock time occurs twice because clocks went back."""


def ensure_utc(value: datetime) -> datetime:
    """Normalize a datetime to UTC."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def is_aware(value: datetime) -> bool:
    return value.tzinfo is not None and value.utcoffset() is not None


def get_zone(name: str | ZoneInfo) -> ZoneInfo:
    """Resolve an IANA time zone name."""

    if isinstance(name, ZoneInfo):
        return name
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"Unknown time zone {name!r}"
        raise ValueError(msg) from exc


def localize(local: datetime, zone: ZoneInfo) -> datetime:
    """Attach ``zone`` to a naive wall-clock time, rejecting gaps and overlaps."""

    if local.tzinfo is not None:
        msg = "localize expects a naive datetime"
        raise ValueError(msg)
    earlier = local.replace(tzinfo=zone, fold=0)
    later = local.replace(tzinfo=zone, fold=1)
    if earlier.utcoffset() == later.utcoffset():
        return earlier
    round_trip = earlier.astimezone(UTC).astimezone(zone).replace(tzinfo=None)
    if round_trip != local:
        msg = f"{local.isoformat()} does not exist in {zone.key}"
        raise NonExistentTimeError(msg)
    msg = f"{local.isoformat()} is ambiguous in {zone.key}"
    raise AmbiguousTimeError(msg)


def at_local_time(day: date, at: time, zone: ZoneInfo) -> datetime:
    """Return the instant at which ``day`` reads ``at`` on a wall clock in ``zone``."""

    return localize(datetime.combine(day, at), zone)


def parse_local_datetime(text: str, zone: ZoneInfo) -> datetime:
    """Parse ``YYYY-MM-DD HH:MM[:SS]`` in ``zone`` or an ISO 8601 timestamp with offset."""

    raw = text.strip()
    for fmt in _LOCAL_FORMATS:
        try:
            parsed = datetime.strptime(raw, fmt)
        except ValueError:
            continue
        return localize(parsed, zone)
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as exc:
        msg = f"Invalid date/time {text!r}; expected YYYY-MM-DD HH:MM"
        raise ValueError(msg) from exc
    if is_aware(parsed):
        return parsed
    return localize(parsed, zone)


def parse_time_of_day(text: str) -> time:
    """Parse ``HH:MM`` or ``HH:MM:SS``."""

    try:
        return time.fromisoformat(text.strip())
    except ValueError as exc:
        msg = f"Invalid time of day {text!r}; expected HH:MM"
        raise ValueError(msg) from exc


class Clock(Protocol):
    """Supplies the current instant in a given time zone."""

    def now(self, zone: ZoneInfo) -> datetime: ...


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Clock backed by the operating system."""

    def now(self, zone: ZoneInfo) -> datetime:
        return datetime.now(zone)


@dataclass(slots=True)
class FixedClock:
    """Clock pinned to an instant, advanced manually."""

    instant: datetime

    def __post_init__(self) -> None:
        if not is_aware(self.instant):
            msg = "FixedClock requires a timezone-aware instant"
            raise ValueError(msg)

    def now(self, zone: ZoneInfo) -> datetime:
        return self.instant.astimezone(zone)

    def advance(self, delta: timedelta) -> None:
        self.instant = self.instant + delta


__all__ = [
    "AmbiguousTimeError",
    "Clock",
    "FixedClock",
    "NonExistentTimeError",
    "SystemClock",
    "at_local_time",
    "ensure_utc",
    "get_zone",
    "is_aware",
    "localize",
    "parse_local_datetime",
    "parse_time_of_day",
]
