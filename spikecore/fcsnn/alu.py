"""Integer ALU of the fully connected core, with 32-bit signed results."""

from __future__ import annotations

from enum import IntEnum

_MASK32 = 0xFFFFFFFF


def _int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


class AluOp(IntEnum):
    """Function selector of the ALU."""

    ADD = 0
    MUL = 1
    SHIFT_LEFT = 2
    MOD = 3


def alu(argument1: int, argument2: int, op: int) -> int:
    """Apply op to two 32-bit operands and return a signed 32-bit result.

    Raises ValueError for an unknown op or a shift count outside 0..31,
    and ZeroDivisionError for a modulo by zero.
    """
    operation = AluOp(op)
    a = _int32(argument1)
    b = _int32(argument2)
    if operation is AluOp.ADD:
        return _int32(a + b)
    if operation is AluOp.MUL:
        return _int32(a * b)
    if operation is AluOp.SHIFT_LEFT:
        if not 0 <= b < 32:
            raise ValueError(f"shift count out of range: {b}")
        return _int32(a << b)
    if b == 0:
        raise ZeroDivisionError("modulo by zero")
    remainder = abs(a) % abs(b)
    return _int32(-remainder if a < 0 else remainder)