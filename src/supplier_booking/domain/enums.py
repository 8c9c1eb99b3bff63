"""Enumerations used across the supplier booking domain layer."""

from __future__ import annotations

from enum import StrEnum


class Jurisdiction(StrEnum):
    """Australian states and territories with their own holiday observance."""

    NSW = "NSW"
    VIC = "VIC"
    QLD = "QLD"
    WA = "WA"
    SA = "SA"
    TAS = "TAS"
    ACT = "ACT"
    NT = "NT"


__all__ = ["Jurisdiction"]
