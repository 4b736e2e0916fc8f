"""
SAP-1 Virtual Machine: 16-byte RAM

The SAP-1 address space is 4 bits wide. Every address is masked to
$0–$F before use, so out-of-range access cannot happen.
"""

import logging
from typing import Callable, Dict, Iterable, List

from ..cpu.regs import ADDRESS_MASK, WORD_MASK

log = logging.getLogger(__name__)

MEMORY_SIZE = 16


class Memory:
    """16 x 8-bit RAM with write watchpoints.

    Watchpoint callbacks are called as ``cb(addr, old, new)`` on every
    write to the watched address, before the new value is stored.
    """

    def __init__(self, image: Iterable[int] = ()):
        self._mem = bytearray(MEMORY_SIZE)
        self._watchpoints: Dict[int, List[Callable]] = {}
        self.load_image(image)

    def __len__(self) -> int:
        return MEMORY_SIZE

    def read8(self, addr: int) -> int:
        return self._mem[addr & ADDRESS_MASK]

    def write8(self, addr: int, value: int):
        addr &= ADDRESS_MASK
        value &= WORD_MASK
        for cb in self._watchpoints.get(addr, ()):
            cb(addr, self._mem[addr], value)
        self._mem[addr] = value

    def load_image(self, image: Iterable[int]):
        """Clear RAM then copy `image` in from address 0.

        Expects an already-validated image; extra cells are ignored.
        """
        self._mem[:] = bytes(MEMORY_SIZE)
        for addr, value in enumerate(image):
            if addr >= MEMORY_SIZE:
                break
            self._mem[addr] = value & WORD_MASK
        log.debug("RAM loaded: %s", self._mem.hex(' '))

    def dump(self) -> bytes:
        """Copy of RAM contents (index = address)."""
        return bytes(self._mem)

    # --- Watchpoints ---

    def add_watchpoint(self, addr: int, callback: Callable):
        self._watchpoints.setdefault(addr & ADDRESS_MASK, []).append(callback)

    def clear_watchpoints(self):
        self._watchpoints.clear()
