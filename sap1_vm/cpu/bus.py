"""
SAP-1 Virtual Machine: Bus Transfer + Program Counter Stages

One micro-step moves data in two halves, like the clocked hardware:

  1. drive:  the (single) asserted *out* signal puts a value on the bus
              CO: PC   RO: RAM[MAR]   AO: A   IO: IR & $0F   EO: ALU
  2. latch:  every asserted *in* signal copies the bus into its target
              MI: MAR  RI: RAM[MAR]   AI: A   BI: B   II: IR   OI: OUT

The PC stage runs after the latch half: CE counts (mod 16), JP loads the
PC from the bus. If both are asserted, JP wins.

If no driver is asserted the bus keeps its previous value.
"""

from .regs import ADDRESS_MASK, WORD_MASK
from .signals import Signal


def drive_bus(regs, mem, word: int, alu_result: int = 0) -> int:
    """Apply the bus-driver signals of `word`. Returns the bus value."""
    if word & Signal.CO:
        regs.bus = regs.PC & ADDRESS_MASK
    if word & Signal.RO:
        regs.bus = mem.read8(regs.MAR)
    if word & Signal.AO:
        regs.bus = regs.A
    if word & Signal.IO:
        regs.bus = regs.operand
    if word & Signal.EO:
        regs.alu = alu_result & WORD_MASK
        regs.bus = regs.alu
    return regs.bus


def latch_bus(regs, mem, word: int) -> bool:
    """Apply the bus-loader signals of `word`.

    RAM is written at the MAR value from before this step's MI, so MI|RI
    in one word (never emitted by the ROM) stores to the old address.
    Returns True if the output register was written.
    """
    bus = regs.bus & WORD_MASK
    if word & Signal.RI:
        mem.write8(regs.MAR, bus)
    if word & Signal.MI:
        regs.MAR = bus & ADDRESS_MASK
    if word & Signal.AI:
        regs.A = bus
    if word & Signal.BI:
        regs.B = bus
    if word & Signal.II:
        regs.IR = bus
    if word & Signal.OI:
        regs.OUT = bus
        return True
    return False


def transfer(regs, mem, word: int, alu_result: int = 0) -> bool:
    """Full transfer stage: drive then latch. Returns True on an OUT write."""
    drive_bus(regs, mem, word, alu_result)
    return latch_bus(regs, mem, word)


def update_pc(regs, word: int) -> int:
    """Program counter stage. Returns the new PC."""
    if word & Signal.CE:
        regs.PC = (regs.PC + 1) & ADDRESS_MASK
    if word & Signal.JP:
        regs.PC = regs.bus & ADDRESS_MASK
    return regs.PC
