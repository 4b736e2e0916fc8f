"""
SAP-1 Virtual Machine: Microcode ROM / Control-Word Decoder

The decoder is a lookup table, the way the real machine burns it into
an EEPROM: the address is (opcode, phase, carry, zero) and the data is
the 16-bit control word for that micro-step.

Every instruction starts with the same two fetch steps:
  FETCH0  CO|MI        PC → MAR
  FETCH1  RO|II|CE     RAM[MAR] → IR, PC += 1

Execute steps per opcode:
  LDA   IO|MI      RO|AI
  ADD   IO|MI      RO|BI      EO|AI|FI
  SUB   IO|MI      RO|BI      EO|BI|FI|SU
  STA   IO|MI      AO|RI
  LDI   IO|AI
  JMP   IO|JP
  JC    IO|JP if carry, else no signals
  JZ    IO|JP if zero,  else no signals
  OUT   AO|OI
  HLT   HLT
  NOP   no signals   (also 0x9–0xD)

After an opcode's last step the micro-step counter returns to FETCH0.
"""

from enum import IntEnum
from typing import Dict, Tuple

from .signals import Signal, Opcode, to_opcode


class Phase(IntEnum):
    FETCH0 = 0
    FETCH1 = 1
    EXEC2 = 2
    EXEC3 = 3
    EXEC4 = 4


FETCH: Tuple[Signal, ...] = (
    Signal.CO | Signal.MI,
    Signal.RO | Signal.II | Signal.CE,
)

_JUMP = Signal.IO | Signal.JP

# Execute steps for everything not flag-dependent
EXECUTE: Dict[Opcode, Tuple[Signal, ...]] = {
    Opcode.NOP: (Signal.NONE,),
    Opcode.LDA: (Signal.IO | Signal.MI,
                 Signal.RO | Signal.AI),
    Opcode.ADD: (Signal.IO | Signal.MI,
                 Signal.RO | Signal.BI,
                 Signal.EO | Signal.AI | Signal.FI),
    Opcode.SUB: (Signal.IO | Signal.MI,
                 Signal.RO | Signal.BI,
                 Signal.EO | Signal.BI | Signal.FI | Signal.SU),
    Opcode.STA: (Signal.IO | Signal.MI,
                 Signal.AO | Signal.RI),
    Opcode.LDI: (Signal.IO | Signal.AI,),
    Opcode.JMP: (_JUMP,),
    Opcode.OUT: (Signal.AO | Signal.OI,),
    Opcode.HLT: (Signal.HLT,),
}


def _execute_steps(opcode: Opcode, carry: bool, zero: bool) -> Tuple[Signal, ...]:
    if opcode == Opcode.JC:
        return (_JUMP if carry else Signal.NONE,)
    if opcode == Opcode.JZ:
        return (_JUMP if zero else Signal.NONE,)
    return EXECUTE[opcode]


def _build_rom():
    rom: Dict[Tuple[int, Phase, bool, bool], Signal] = {}
    last: Dict[int, Phase] = {}
    for nibble in range(16):
        opcode = to_opcode(nibble)
        for carry in (False, True):
            for zero in (False, True):
                steps = FETCH + _execute_steps(opcode, carry, zero)
                for phase, word in zip(Phase, steps):
                    rom[(nibble, phase, carry, zero)] = word
                last[nibble] = Phase(len(steps) - 1)
    return rom, last


# (opcode nibble, phase, carry, zero) -> control word
MICROCODE_ROM, LAST_PHASE = _build_rom()


def decode(opcode: int, phase: Phase, carry: bool = False, zero: bool = False) -> Signal:
    """Control word for one micro-step. Pure; addresses outside the ROM give NONE."""
    return MICROCODE_ROM.get((opcode & 0x0F, phase, bool(carry), bool(zero)),
                             Signal.NONE)


def last_phase(opcode: int) -> Phase:
    """Final phase of `opcode`'s sequence; the counter resets after it."""
    return LAST_PHASE[opcode & 0x0F]


def next_phase(opcode: int, phase: Phase) -> Phase:
    if phase >= last_phase(opcode):
        return Phase.FETCH0
    return Phase(phase + 1)
