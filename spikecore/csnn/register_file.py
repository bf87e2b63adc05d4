"""General-purpose register file of the convolutional core."""

from __future__ import annotations

import logging
from typing import Iterable, Iterator, Optional

from .layout import DEPTH_REG_FILE, WIDTH_REG_FILE, WIDTH_REG_FILE_IDX

_log = logging.getLogger(__name__)

_VALUE_MASK = (1 << WIDTH_REG_FILE) - 1
_INDEX_MASK = (1 << WIDTH_REG_FILE_IDX) - 1


class RegisterFile:
    """Thirty-two 64-bit registers; register numbers wrap at five bits."""

    def __init__(self, values: Optional[Iterable[int]] = None) -> None:
        initial = [value & _VALUE_MASK for value in (values or ())]
        if len(initial) > DEPTH_REG_FILE:
            raise ValueError(f"{len(initial)} values given, the file holds {DEPTH_REG_FILE}")
        self._values = initial + [0] * (DEPTH_REG_FILE - len(initial))

    def read(self, index: int) -> int:
        """Return the value of register index."""
        value = self._values[index & _INDEX_MASK]
        _log.debug("read 0x%x from register %d", value, index & _INDEX_MASK)
        return value

    def write(self, index: int, value: int) -> None:
        """Store value, truncated to 64 bits, in register index."""
        register = index & _INDEX_MASK
        self._values[register] = value & _VALUE_MASK
        _log.debug("write 0x%x to register %d", self._values[register], register)

    def __len__(self) -> int:
        return DEPTH_REG_FILE

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._values))