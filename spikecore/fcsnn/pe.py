"""Processing element: integrates one weight into one membrane potential."""

from __future__ import annotations


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def accumulate(current: int, weight: int) -> int:
    """Return current + weight as a signed 32-bit potential."""
    return _int32(_int32(current) + _int32(weight))