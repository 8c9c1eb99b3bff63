"""Root logger setup for command-line use."""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str | int = "WARNING") -> int:
    """Configure the root logger and return the numeric level applied."""

    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            msg = f"Unknown log level {level!r}"
            raise ValueError(msg)
    else:
        resolved = level
    logging.basicConfig(
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        stream=sys.stderr,
        level=resolved,
        force=True,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    return resolved


__all__ = ["configure_logging"]
