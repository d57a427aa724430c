"""Tests for Register and CPUState."""

import sys
from dataclasses import FrozenInstanceError
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from acc16_cpu.state import CPUState, Register, format_registers


class TestRegister:
    """Test the 16-bit register cell."""

    def test_default_zero(self):
        assert Register().read() == 0

    def test_write_read(self):
        reg = Register()
        reg.write(0xBEEF)
        assert reg.read() == 0xBEEF

    def test_any_16_bit_value(self):
        """Every 16-bit value is accepted unchanged."""
        reg = Register()
        for value in (0, 1, 0x7FFF, 0x8000, 0xFFFF):
            reg.write(value)
            assert reg.read() == value

    def test_stored_at_machine_width(self):
        """Values wider than 16 bits keep their low 16 bits."""
        reg = Register()
        reg.write(0x1FFFF)
        assert reg.read() == 0xFFFF

    def test_independent_instances(self):
        """Registers share no state."""
        a, b = Register(), Register()
        a.write(1)
        assert b.read() == 0

    def test_repr(self):
        assert repr(Register(0x2A)) == "Register(0x002A)"


class TestCPUState:
    """Test immutable state snapshots."""

    def test_default_state(self):
        state = CPUState()
        assert state.pc == 0
        assert state.ir == 0
        assert state.ac == 0
        assert state.cycle_count == 0

    def test_frozen(self):
        """Snapshots cannot be mutated."""
        state = CPUState()
        with pytest.raises(FrozenInstanceError):
            state.ac = 5

    def test_registers(self):
        state = CPUState(pc=4, ir=0x2003, ac=8)
        assert state.registers() == {"PC": 4, "IR": 0x2003, "AC": 8}

    def test_str(self):
        state = CPUState(pc=4, ir=0x2003, ac=8, cycle_count=2)
        assert str(state) == "[Cycle 2] PC=0004 IR=2003 AC=0008"


class TestFormatRegisters:
    """Test the diagnostic register view."""

    def test_four_digit_uppercase_hex(self):
        text = format_registers(CPUState(pc=4, ir=0xF00A, ac=0xab))
        lines = text.splitlines()
        assert "DEBUG" in lines[0]
        assert lines[1:4] == ["PC: 0004", "IR: F00A", "AC: 00AB"]
        assert set(lines[4]) == {"="}
