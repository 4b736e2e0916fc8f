"""
SAP-1 VM: Microcode ROM Tests

Checks every row of the control-word table, including the flag-dependent
jumps and the unused opcodes, plus the bit layout of the signals.
"""

import pytest

from sap1_vm.cpu.signals import (
    Signal, Opcode, BUS_DRIVERS, to_opcode, signal_names,
)
from sap1_vm.cpu.microcode import (
    Phase, FETCH, MICROCODE_ROM, decode, last_phase, next_phase,
)

S = Signal


class TestSignalLayout:
    """Bit-exact control word layout."""

    def test_bit_values(self):
        expected = {
            'HLT': 0x0001, 'MI': 0x0002, 'RO': 0x0004, 'RI': 0x0008,
            'IO': 0x0010, 'II': 0x0020, 'AO': 0x0040, 'AI': 0x0080,
            'EO': 0x0100, 'SU': 0x0200, 'BI': 0x0400, 'OI': 0x0800,
            'CE': 0x1000, 'CO': 0x2000, 'JP': 0x4000, 'FI': 0x8000,
        }
        for name, value in expected.items():
            assert int(Signal[name]) == value, name

    def test_opcode_values(self):
        assert [int(o) for o in Opcode] == [0, 1, 2, 3, 4, 5, 6, 7, 8, 14, 15]

    def test_unused_opcodes_map_to_nop(self):
        for nibble in range(0x9, 0xE):
            assert to_opcode(nibble) is Opcode.NOP

    def test_signal_names(self):
        assert signal_names(S.CO | S.MI) == 'MI|CO'
        assert signal_names(0) == '-'


class TestFetch:
    """The two shared fetch steps are the same for every opcode and flag state."""

    @pytest.mark.parametrize("nibble", range(16))
    def test_fetch_steps(self, nibble):
        for carry in (False, True):
            for zero in (False, True):
                assert decode(nibble, Phase.FETCH0, carry, zero) == S.CO | S.MI
                assert decode(nibble, Phase.FETCH1, carry, zero) == S.RO | S.II | S.CE

    def test_fetch_tuple(self):
        assert FETCH == (S.CO | S.MI, S.RO | S.II | S.CE)


class TestExecuteRows:
    """Execute steps per opcode."""

    def _steps(self, opcode, carry=False, zero=False):
        return [decode(opcode, p, carry, zero)
                for p in Phase if Phase.EXEC2 <= p <= last_phase(opcode)]

    def test_lda(self):
        assert self._steps(Opcode.LDA) == [S.IO | S.MI, S.RO | S.AI]

    def test_add(self):
        assert self._steps(Opcode.ADD) == [
            S.IO | S.MI, S.RO | S.BI, S.EO | S.AI | S.FI]

    def test_sub(self):
        assert self._steps(Opcode.SUB) == [
            S.IO | S.MI, S.RO | S.BI, S.EO | S.BI | S.FI | S.SU]

    def test_add_and_sub_are_distinct(self):
        """ADD's last word must not be overwritten by SUB's."""
        assert decode(Opcode.ADD, Phase.EXEC4) != decode(Opcode.SUB, Phase.EXEC4)
        assert not decode(Opcode.ADD, Phase.EXEC4) & S.SU

    def test_sta(self):
        assert self._steps(Opcode.STA) == [S.IO | S.MI, S.AO | S.RI]

    def test_ldi(self):
        assert self._steps(Opcode.LDI) == [S.IO | S.AI]

    def test_jmp(self):
        assert self._steps(Opcode.JMP) == [S.IO | S.JP]

    def test_jc(self):
        assert self._steps(Opcode.JC, carry=True) == [S.IO | S.JP]
        assert self._steps(Opcode.JC, carry=False, zero=True) == [S.NONE]

    def test_jz(self):
        assert self._steps(Opcode.JZ, zero=True) == [S.IO | S.JP]
        assert self._steps(Opcode.JZ, carry=True, zero=False) == [S.NONE]

    def test_out(self):
        assert self._steps(Opcode.OUT) == [S.AO | S.OI]

    def test_hlt_is_only_the_halt_bit(self):
        assert self._steps(Opcode.HLT) == [S.HLT]
        assert int(decode(Opcode.HLT, Phase.EXEC2)) == 0x0001

    @pytest.mark.parametrize("nibble", [0x0, 0x9, 0xA, 0xB, 0xC, 0xD])
    def test_nop_and_unused(self, nibble):
        assert self._steps(nibble) == [S.NONE]


class TestSequencing:
    """Where the micro-step counter goes back to FETCH0."""

    def test_last_phase(self):
        expected = {
            Opcode.NOP: Phase.EXEC2, Opcode.LDA: Phase.EXEC3,
            Opcode.ADD: Phase.EXEC4, Opcode.SUB: Phase.EXEC4,
            Opcode.STA: Phase.EXEC3, Opcode.LDI: Phase.EXEC2,
            Opcode.JMP: Phase.EXEC2, Opcode.JC: Phase.EXEC2,
            Opcode.JZ: Phase.EXEC2, Opcode.OUT: Phase.EXEC2,
            Opcode.HLT: Phase.EXEC2,
        }
        for opcode, phase in expected.items():
            assert last_phase(opcode) is phase, opcode.name

    def test_next_phase_wraps(self):
        assert next_phase(Opcode.LDI, Phase.FETCH0) is Phase.FETCH1
        assert next_phase(Opcode.LDI, Phase.EXEC2) is Phase.FETCH0
        assert next_phase(Opcode.ADD, Phase.EXEC3) is Phase.EXEC4
        assert next_phase(Opcode.ADD, Phase.EXEC4) is Phase.FETCH0

    def test_steps_past_the_end_are_empty(self):
        assert decode(Opcode.LDI, Phase.EXEC3) == S.NONE
        assert decode(Opcode.LDA, Phase.EXEC4) == S.NONE

    def test_rom_size(self):
        # 16 opcodes x 4 flag combinations, each with its own sequence
        assert len(MICROCODE_ROM) == sum(
            (last_phase(n) + 1) * 4 for n in range(16))

    def test_decode_has_no_side_effects(self):
        before = dict(MICROCODE_ROM)
        decode(Opcode.ADD, Phase.EXEC4, True, True)
        assert MICROCODE_ROM == before

    def test_one_bus_driver_per_word(self):
        """No ROM word drives the bus twice or both counts and jumps the PC."""
        for key, word in MICROCODE_ROM.items():
            assert bin(int(word & BUS_DRIVERS)).count("1") <= 1, key
            assert (word & (S.CE | S.JP)) != S.CE | S.JP, key
