"""
SAP-1 Virtual Machine: Main Emulator Class (cycle driver)

This is the top-level class that integrates:
  - Register set + flag latches (cpu/regs.py)
  - 16-byte RAM (mem/memory.py)
  - Microcode ROM (cpu/microcode.py)
  - ALU (cpu/alu.py)
  - Bus transfer + PC stages (cpu/bus.py)

Execution model, one call to step() = one clock pulse:
  1. Decode (opcode, phase, flags) → control word
  2. ALU evaluates A ± B (combinational)
  3. Bus drivers, then bus loaders
  4. PC stage (count / jump)
  5. Flag latch
  6. Advance or reset the micro-step counter

Termination reasons:
  - HALT:     HLT control word executed
  - TIMEOUT:  max_cycles exceeded
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple

from .cpu.regs import Registers
from .cpu.microcode import Phase, decode, next_phase
from .cpu.signals import Signal, signal_names
from .cpu import alu
from .cpu.bus import transfer, update_pc
from .mem.memory import Memory
from .program import BUNDLED_PROGRAM, validate_image, disassemble

log = logging.getLogger(__name__)


class StopReason(Enum):
    HALT = 'HALT'
    TIMEOUT = 'TIMEOUT'


@dataclass(frozen=True)
class MachineState:
    """Read-only copy of everything the harness may show."""
    pc: int
    ir: int
    mar: int
    a: int
    b: int
    out: int
    bus: int
    alu_result: int
    control_word: int
    carry: bool
    zero: bool
    phase: Phase
    cycles: int
    halted: bool
    memory: bytes
    outputs: Tuple[int, ...]


class SAP1Emulator:
    """SAP-1 microcode-level emulator.

    Usage:
        emu = SAP1Emulator()            # bundled program
        while not emu.step():
            print(emu.regs.display())
        print(emu.regs.A)               # 0x01
    """

    DEFAULT_MAX_CYCLES = 10_000

    def __init__(self, image: Optional[Iterable[int]] = None):
        self.regs = Registers()
        self.mem = Memory()
        self.phase = Phase.FETCH0
        self.control_word = Signal.NONE
        self.cycles = 0
        self.halted = False
        self.outputs: List[int] = []

        self._trace = False
        self._trace_output: List[str] = []

        self._image = validate_image(BUNDLED_PROGRAM if image is None else image)
        self.mem.load_image(self._image)

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load_image(self, image: Iterable[int]):
        """Validate and load a 16-cell program image, then reset the CPU."""
        self._image = validate_image(image)
        self.reset()
        log.info("image loaded: %s", bytes(self._image).hex(" "))

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> bool:
        """Execute one micro-step. Returns True once the machine has halted.

        After HLT, further calls change nothing and keep returning True.
        """
        if self.halted:
            return True

        regs = self.regs
        phase = self.phase
        word = decode(regs.opcode, phase, regs.carry, regs.zero)
        self.control_word = word

        alu_out = alu.evaluate(regs.A, regs.B, word)
        if transfer(regs, self.mem, word, alu_out.result):
            self.outputs.append(regs.OUT)
            log.info("OUT %d ($%02X)", regs.OUT, regs.OUT)
        update_pc(regs, word)
        alu.latch_flags(regs, alu_out, word)

        self.cycles += 1
        self.phase = next_phase(regs.opcode, phase)

        if self._trace:
            self._trace_output.append(
                f"T{int(phase)} {disassemble(regs.IR):7s} "
                f"CW={int(word):04X} {signal_names(word):12s} {regs.display()}")
        log.debug("T%d CW=%04X %s", phase, word, signal_names(word))

        if word & Signal.HLT:
            self.halted = True
            log.info("halted after %d cycles, PC=$%X A=$%02X",
                     self.cycles, regs.PC, regs.A)
        return self.halted

    def run(self, max_cycles: int = None) -> StopReason:
        """Step until HLT or until `max_cycles` micro-steps have run."""
        if max_cycles is None:
            max_cycles = self.DEFAULT_MAX_CYCLES

        while self.cycles < max_cycles:
            if self.step():
                return StopReason.HALT
        if self.halted:
            return StopReason.HALT
        log.warning("no HLT within %d cycles", max_cycles)
        return StopReason.TIMEOUT

    # ══════════════════════════════════════════════
    # Inspection
    # ══════════════════════════════════════════════

    def snapshot(self) -> MachineState:
        """Copy of the machine state. Does not mutate anything."""
        r = self.regs
        return MachineState(
            pc=r.PC, ir=r.IR, mar=r.MAR, a=r.A, b=r.B, out=r.OUT,
            bus=r.bus, alu_result=r.alu, control_word=int(self.control_word),
            carry=r.carry, zero=r.zero, phase=self.phase, cycles=self.cycles,
            halted=self.halted, memory=self.mem.dump(),
            outputs=tuple(self.outputs),
        )

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Record one trace line per micro-step."""
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Power-on reset: registers, counters and RAM back to the loaded image."""
        self.regs.reset()
        self.mem.load_image(self._image)
        self.phase = Phase.FETCH0
        self.control_word = Signal.NONE
        self.cycles = 0
        self.halted = False
        self.outputs.clear()
        self._trace_output.clear()
        log.info("reset")
