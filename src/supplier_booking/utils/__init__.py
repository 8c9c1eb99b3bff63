"""Utility helpers."""

from .time import (
    AmbiguousTimeError,
    Clock,
    FixedClock,
    NonExistentTimeError,
    SystemClock,
    at_local_time,
    ensure_utc,
    get_zone,
    is_aware,
    localize,
    parse_local_datetime,
    parse_time_of_day,
)

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
