"""
SAP-1 Virtual Machine: Register Set + Flag Latches

Register model:
  A            8-bit accumulator (always visible to the ALU)
  B            8-bit operand register (always visible to the ALU)
  IR           8-bit instruction register: opcode (high nibble) + operand (low nibble)
  PC           4-bit program counter, held in an 8-bit cell, wraps 15 → 0
  MAR          4-bit memory address register
  OUT          8-bit output register (the SAP-1 display)
  bus          the shared 8-bit bus value; persists between micro-steps
  alu          last value the ALU put on the bus
  carry, zero  1-bit flag latches, written only on FI
"""

ADDRESS_MASK = 0x0F
WORD_MASK = 0xFF


class Registers:
    """SAP-1 register file. Stages write masked values; nothing here validates."""

    __slots__ = ('A', 'B', 'IR', 'PC', 'MAR', 'OUT', 'bus', 'alu',
                 'carry', 'zero')

    def __init__(self):
        self.reset()

    @property
    def opcode(self) -> int:
        """High nibble of IR."""
        return (self.IR >> 4) & 0x0F

    @property
    def operand(self) -> int:
        """Low nibble of IR."""
        return self.IR & 0x0F

    def display(self) -> str:
        """Format register state for the trace (one line)."""
        flags = ('C' if self.carry else '.') + ('Z' if self.zero else '.')
        return (f"PC={self.PC:X} MAR={self.MAR:X} IR={self.IR:02X} "
                f"A={self.A:02X} B={self.B:02X} BUS={self.bus:02X} "
                f"ALU={self.alu:02X} OUT={self.OUT:02X} [{flags}]")

    def reset(self):
        """Power-on state: everything zero, flags clear."""
        self.A = 0
        self.B = 0
        self.IR = 0
        self.PC = 0
        self.MAR = 0
        self.OUT = 0
        self.bus = 0
        self.alu = 0
        self.carry = False
        self.zero = False
