"""Shared type aliases for the domain layer."""

from __future__ import annotations

from typing import NewType

JurisdictionCode = NewType("JurisdictionCode", str)


def normalize_jurisdiction(value: str) -> JurisdictionCode:
    """Strip and upper-case a jurisdiction code."""

    return JurisdictionCode(value.strip().upper())


__all__ = ["JurisdictionCode", "normalize_jurisdiction"]
