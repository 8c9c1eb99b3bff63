"""Holiday persistence: repository protocols, in-memory and SQLite backends."""

from .errors import DuplicateHolidayError, NotFoundError, RepositoryError
from .interfaces import HolidaySequenceRepository, PublicHolidayRepository, UnitOfWork
from .memory import InMemoryHolidayStore, InMemoryUnitOfWork
from .seed import DEFAULT_HOLIDAYS, DEFAULT_SEQUENCES, seed_default_holidays

__all__ = [
    "DEFAULT_HOLIDAYS",
    "DEFAULT_SEQUENCES",
    "DuplicateHolidayError",
    "HolidaySequenceRepository",
    "InMemoryHolidayStore",
    "InMemoryUnitOfWork",
    "NotFoundError",
    "PublicHolidayRepository",
    "RepositoryError",
    "UnitOfWork",
    "seed_default_holidays",
]
