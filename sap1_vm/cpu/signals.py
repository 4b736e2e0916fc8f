"""
SAP-1 Virtual Machine: Control Signals + Opcode Table

Control word layout (16 signals, LSB → MSB):
  bit  0  HLT  Halt clock
  bit  1  MI   Memory address register in
  bit  2  RO   RAM out
  bit  3  RI   RAM in
  bit  4  IO   Instruction register out (operand nibble only)
  bit  5  II   Instruction register in
  bit  6  AO   Register A out
  bit  7  AI   Register A in
  bit  8  EO   ALU (sum) out
  bit  9  SU   ALU subtract
  bit 10  BI   Register B in
  bit 11  OI   Output register in
  bit 12  CE   Program counter enable (count)
  bit 13  CO   Program counter out
  bit 14  JP   Program counter jump (load from bus)
  bit 15  FI   Flags register in

Instruction encoding: high nibble = opcode, low nibble = operand/address.
Opcodes 0x9–0xD are unused and behave as NOP.
"""

from enum import IntEnum, IntFlag


class Signal(IntFlag):
    """One bit per hardware control line. A control word is any OR of these."""
    NONE = 0x0000
    HLT = 0x0001
    MI = 0x0002
    RO = 0x0004
    RI = 0x0008
    IO = 0x0010
    II = 0x0020
    AO = 0x0040
    AI = 0x0080
    EO = 0x0100
    SU = 0x0200
    BI = 0x0400
    OI = 0x0800
    CE = 0x1000
    CO = 0x2000
    JP = 0x4000
    FI = 0x8000


# Signals that place a value on the bus. The ROM asserts at most one per step.
BUS_DRIVERS = Signal.CO | Signal.RO | Signal.AO | Signal.IO | Signal.EO


class Opcode(IntEnum):
    NOP = 0b0000
    LDA = 0b0001
    ADD = 0b0010
    SUB = 0b0011
    STA = 0b0100
    LDI = 0b0101
    JMP = 0b0110
    JC = 0b0111
    JZ = 0b1000
    OUT = 0b1110
    HLT = 0b1111


# Opcodes whose low nibble is meaningful
OPERAND_OPCODES = frozenset({
    Opcode.LDA, Opcode.ADD, Opcode.SUB, Opcode.STA,
    Opcode.LDI, Opcode.JMP, Opcode.JC, Opcode.JZ,
})


def to_opcode(nibble: int) -> Opcode:
    """Map a 4-bit value to its Opcode. Unused encodings resolve to NOP."""
    try:
        return Opcode(nibble & 0x0F)
    except ValueError:
        return Opcode.NOP


def signal_names(word: int) -> str:
    """Render a control word as 'CO|MI' style text (LSB first), '-' if empty."""
    names = [s.name for s in Signal if s and word & s]
    return '|'.join(names) if names else '-'
