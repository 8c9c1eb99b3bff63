"""Lightweight application configuration loader."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import time

from supplier_booking.domain import Jurisdiction, normalize_jurisdiction
from supplier_booking.scheduling import AvailabilityOptions
from supplier_booking.utils import parse_time_of_day


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        msg = f"{name} must be an integer, got {raw!r}"
        raise ValueError(msg) from exc


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    database_url: str = "sqlite+aiosqlite:///supplier_booking.db"
    timezone: str = "Australia/Sydney"
    cutoff_time: time = time(12, 0)
    business_days_before_holiday: int = 2
    holiday_lookahead_days: int = 60
    holiday_lookbehind_days: int = 14
    result_cache_size: int = 50
    holiday_cache_ttl_seconds: int = 86400
    default_jurisdiction: str = Jurisdiction.NSW.value
    seed_on_startup: bool = True
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.availability_options()
        code = normalize_jurisdiction(self.default_jurisdiction)
        if code not in {j.value for j in Jurisdiction}:
            msg = f"Unrecognized default jurisdiction {self.default_jurisdiction!r}"
            raise ValueError(msg)
        object.__setattr__(self, "default_jurisdiction", code)
        if self.result_cache_size < 1:
            msg = "result_cache_size must be at least 1"
            raise ValueError(msg)
        if self.holiday_cache_ttl_seconds < 0:
            msg = "holiday_cache_ttl_seconds must not be negative"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> AppSettings:
        cutoff_raw = os.getenv("SUPPLIER_BOOKING_CUTOFF_TIME")
        return cls(
            environment=os.getenv("SUPPLIER_BOOKING_ENV", cls.environment),
            database_url=os.getenv("SUPPLIER_BOOKING_DATABASE_URL", cls.database_url),
            timezone=os.getenv("SUPPLIER_BOOKING_TIMEZONE", cls.timezone),
            cutoff_time=parse_time_of_day(cutoff_raw) if cutoff_raw else cls.cutoff_time,
            business_days_before_holiday=_env_int(
                "SUPPLIER_BOOKING_BUSINESS_DAYS_BEFORE_HOLIDAY",
                cls.business_days_before_holiday,
            ),
            holiday_lookahead_days=_env_int(
                "SUPPLIER_BOOKING_LOOKAHEAD_DAYS", cls.holiday_lookahead_days
            ),
            holiday_lookbehind_days=_env_int(
                "SUPPLIER_BOOKING_LOOKBEHIND_DAYS", cls.holiday_lookbehind_days
            ),
            result_cache_size=_env_int("SUPPLIER_BOOKING_RESULT_CACHE_SIZE", cls.result_cache_size),
            holiday_cache_ttl_seconds=_env_int(
                "SUPPLIER_BOOKING_HOLIDAY_CACHE_TTL", cls.holiday_cache_ttl_seconds
            ),
            default_jurisdiction=os.getenv(
                "SUPPLIER_BOOKING_DEFAULT_JURISDICTION", cls.default_jurisdiction
            ),
            seed_on_startup=_env_bool("SUPPLIER_BOOKING_SEED", cls.seed_on_startup),
            log_level=os.getenv("SUPPLIER_BOOKING_LOG_LEVEL", cls.log_level).upper(),
        )

    def availability_options(self) -> AvailabilityOptions:
        return AvailabilityOptions(
            timezone=self.timezone,
            cutoff_time=self.cutoff_time,
            business_days_before_holiday=self.business_days_before_holiday,
            lookahead_days=self.holiday_lookahead_days,
            lookbehind_days=self.holiday_lookbehind_days,
        )


__all__ = ["AppSettings"]
