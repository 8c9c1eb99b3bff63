"""Domain models for supplier availability."""

from .availability import AvailabilityResult
from .base import DomainModel
from .enums import Jurisdiction
from .holidays import HolidaySequence, PublicHoliday, unique_holidays
from .types import JurisdictionCode, normalize_jurisdiction

__all__ = [
    "AvailabilityResult",
    "DomainModel",
    "HolidaySequence",
    "Jurisdiction",
    "JurisdictionCode",
    "PublicHoliday",
    "normalize_jurisdiction",
    "unique_holidays",
]
