"""
SAP-1 Virtual Machine: Program Images + Disassembler

A program image is 16 bytes, index = address. Each cell is either an
instruction (opcode << 4 | operand) or raw data.
"""

from typing import Iterable, List

from .cpu.signals import Opcode, OPERAND_OPCODES, to_opcode
from .mem.memory import MEMORY_SIZE


class ProgramImageError(ValueError):
    """Raised when an image is not 16 cells of 0..255."""


def encode(opcode: Opcode, operand: int = 0) -> int:
    """Pack one instruction cell."""
    return ((int(opcode) & 0x0F) << 4) | (operand & 0x0F)


# Adds the data byte at $F to A, then halts. Final A = $01.
BUNDLED_PROGRAM = [
    encode(Opcode.ADD, 0x0F),   # $0
    encode(Opcode.HLT),         # $1
] + [encode(Opcode.NOP)] * 13 + [
    0b00000001,                 # $F  data
]


def validate_image(image: Iterable[int]) -> List[int]:
    cells = list(image)
    if len(cells) != MEMORY_SIZE:
        raise ProgramImageError(
            f"program image must have {MEMORY_SIZE} cells, got {len(cells)}")
    for addr, value in enumerate(cells):
        if not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise ProgramImageError(
                f"cell ${addr:X} is not an 8-bit value: {value!r}")
    return cells


def disassemble(cell: int) -> str:
    """Mnemonic text for one cell, e.g. 'ADD $F'. Unused opcodes read as NOP."""
    opcode = to_opcode(cell >> 4)
    if opcode in OPERAND_OPCODES:
        return f"{opcode.name} ${cell & 0x0F:X}"
    return opcode.name


def listing(image: Iterable[int]) -> str:
    """One line per address: '$0: 2F  ADD $F'."""
    return '\n'.join(f"${addr:X}: {cell:02X}  {disassemble(cell)}"
                     for addr, cell in enumerate(image))
