"""Holiday-aware availability scheduling."""

from .availability import AvailabilityCalculator, AvailabilityOptions, BlackoutWindow
from .business_days import WEEKEND_DAYS, BusinessDayCalculator, is_weekend
from .cache import AsyncLruCache, CachedAvailabilityCalculator
from .exceptions import (
    InvalidArgumentError,
    NoAvailabilityError,
    NoBusinessDayError,
    SchedulingError,
)
from .interfaces import AvailabilityService, BusinessDayOracle, HolidayCalendarQuery

__all__ = [
    "WEEKEND_DAYS",
    "AsyncLruCache",
    "AvailabilityCalculator",
    "AvailabilityOptions",
    "AvailabilityService",
    "BlackoutWindow",
    "BusinessDayCalculator",
    "BusinessDayOracle",
    "CachedAvailabilityCalculator",
    "HolidayCalendarQuery",
    "InvalidArgumentError",
    "NoAvailabilityError",
    "NoBusinessDayError",
    "SchedulingError",
    "is_weekend",
]
