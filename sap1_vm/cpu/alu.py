"""
SAP-1 Virtual Machine: ALU

8-bit adder/subtractor over registers A and B. Results wrap modulo 256;
overflow is not an error, it is the carry flag's input:

  add:  C = (A + B) > $FF        Z = result == 0
  sub:  C = A < B   (borrow)     Z = result == 0

The ALU is combinational: it always sees A and B as they stand at the
start of the micro-step. EO puts the result on the bus, FI latches the
flags, SU selects subtraction.
"""

from typing import NamedTuple

from .regs import WORD_MASK
from .signals import Signal


class AluOutput(NamedTuple):
    result: int
    carry: bool
    zero: bool


def add8(a: int, b: int) -> AluOutput:
    total = (a & WORD_MASK) + (b & WORD_MASK)
    result = total & WORD_MASK
    return AluOutput(result, total > WORD_MASK, result == 0)


def sub8(a: int, b: int) -> AluOutput:
    a &= WORD_MASK
    b &= WORD_MASK
    result = (a - b) & WORD_MASK
    return AluOutput(result, a < b, result == 0)


def evaluate(a: int, b: int, word: int) -> AluOutput:
    """Combinational ALU output for control word `word` (SU picks the operation)."""
    if word & Signal.SU:
        return sub8(a, b)
    return add8(a, b)


def latch_flags(regs, out: AluOutput, word: int) -> bool:
    """Flag register stage: copy carry/zero into the latches on FI.

    Returns True if the latches were written.
    """
    if not word & Signal.FI:
        return False
    regs.carry = out.carry
    regs.zero = out.zero
    return True
