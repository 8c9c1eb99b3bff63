"""Holiday calendar services."""

from .provider import HolidayProvider

__all__ = ["HolidayProvider"]
