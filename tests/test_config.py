from __future__ import annotations

from datetime import time

import pytest

from supplier_booking.config import AppSettings


def test_defaults() -> None:
    settings = AppSettings()

    assert settings.timezone == "Australia/Sydney"
    assert settings.cutoff_time == time(12, 0)
    assert settings.business_days_before_holiday == 2
    assert settings.holiday_lookahead_days == 60
    assert settings.result_cache_size == 50
    assert settings.holiday_cache_ttl_seconds == 86400
    assert settings.default_jurisdiction == "NSW"
    assert settings.seed_on_startup


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SUPPLIER_BOOKING_ENV", "test")
    monkeypatch.setenv("SUPPLIER_BOOKING_DATABASE_URL", "sqlite+aiosqlite:///tmp/test.db")
    monkeypatch.setenv("SUPPLIER_BOOKING_TIMEZONE", "Australia/Perth")
    monkeypatch.setenv("SUPPLIER_BOOKING_CUTOFF_TIME", "15:30")
    monkeypatch.setenv("SUPPLIER_BOOKING_BUSINESS_DAYS_BEFORE_HOLIDAY", "3")
    monkeypatch.setenv("SUPPLIER_BOOKING_LOOKAHEAD_DAYS", "90")
    monkeypatch.setenv("SUPPLIER_BOOKING_LOOKBEHIND_DAYS", "7")
    monkeypatch.setenv("SUPPLIER_BOOKING_RESULT_CACHE_SIZE", "10")
    monkeypatch.setenv("SUPPLIER_BOOKING_HOLIDAY_CACHE_TTL", "60")
    monkeypatch.setenv("SUPPLIER_BOOKING_DEFAULT_JURISDICTION", "wa")
    monkeypatch.setenv("SUPPLIER_BOOKING_SEED", "no")
    monkeypatch.setenv("SUPPLIER_BOOKING_LOG_LEVEL", "debug")

    settings = AppSettings.from_env()

    assert settings.environment == "test"
    assert settings.database_url == "sqlite+aiosqlite:///tmp/test.db"
    assert settings.cutoff_time == time(15, 30)
    assert settings.default_jurisdiction == "WA"
    assert not settings.seed_on_startup
    assert settings.log_level == "DEBUG"
    assert settings.result_cache_size == 10
    assert settings.holiday_cache_ttl_seconds == 60

    options = settings.availability_options()
    assert options.timezone == "Australia/Perth"
    assert options.cutoff_time == time(15, 30)
    assert options.business_days_before_holiday == 3
    assert options.lookahead_days == 90
    assert options.lookbehind_days == 7


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("SUPPLIER_BOOKING_TIMEZONE", "Atlantis/Capital"),
        ("SUPPLIER_BOOKING_CUTOFF_TIME", "midday"),
        ("SUPPLIER_BOOKING_LOOKAHEAD_DAYS", "0"),
        ("SUPPLIER_BOOKING_LOOKAHEAD_DAYS", "sixty"),
        ("SUPPLIER_BOOKING_BUSINESS_DAYS_BEFORE_HOLIDAY", "0"),
        ("SUPPLIER_BOOKING_DEFAULT_JURISDICTION", "XX"),
        ("SUPPLIER_BOOKING_RESULT_CACHE_SIZE", "0"),
    ],
)
def test_invalid_environment_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str
) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError):
        AppSettings.from_env()
