"""
SAP-1 microcode-level virtual machine.

Emulates Ben Eater style SAP-1: 16 bytes of RAM, registers A/B, a shared
8-bit bus, an adder/subtractor with carry/zero flags and a microcode ROM
that turns (opcode, micro-step, flags) into a 16-bit control word.

    ┌─────────┐   ┌──────────┐   ┌─────┐   ┌───────────┐   ┌──────────┐
    │ decode  │──>│   ALU    │──>│ bus │──>│ PC stage  │──>│ flags in │
    │ (ROM)   │   │ (A ± B)  │   │     │   │ (CE / JP) │   │  (FI)    │
    └─────────┘   └──────────┘   └─────┘   └───────────┘   └──────────┘
"""

__version__ = "0.1.0"

from .cpu.signals import Signal, Opcode
from .cpu.microcode import Phase, decode, MICROCODE_ROM
from .emu import SAP1Emulator, StopReason, MachineState
from .program import (
    BUNDLED_PROGRAM, ProgramImageError, encode, disassemble, listing,
    validate_image,
)
