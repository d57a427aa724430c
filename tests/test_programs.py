"""Integration tests for complete programs."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from acc16_cpu import CPU, Memory, load_program
from acc16_cpu.errors import DivisionByZeroError, OutOfRangeError


@pytest.fixture
def memory():
    return Memory()


def run_steps(memory, source, steps):
    load_program(memory, source)
    cpu = CPU(memory)
    for _ in range(steps):
        cpu.step()
    return cpu


class TestAddProgram:
    """SEA 5; ADD 3."""

    def test_result(self, memory):
        cpu = run_steps(memory, "SEA 5\nADD 3", 2)
        assert cpu.ac.read() == 8
        assert cpu.pc.read() == 4
        assert cpu.ir.read() == 0x2003


class TestStoreLoadProgram:
    """SEA A; STA 100; LDA 100."""

    def test_result(self, memory):
        cpu = run_steps(memory, "SEA A\nSTA 100\nLDA 100", 3)
        assert cpu.ac.read() == 0xA
        assert memory.read_word(0x100) == 0xA
        assert cpu.pc.read() == 6

    def test_load_after_clear(self, memory):
        """LDA restores AC after it was overwritten."""
        cpu = run_steps(memory, "SEA A\nSTA 100\nSEA 0\nLDA 100", 4)
        assert cpu.ac.read() == 0xA


class TestDivideByZeroProgram:
    """SEA 0; DIV 0."""

    def test_second_step_fails(self, memory):
        load_program(memory, "SEA 0\nDIV 0")
        cpu = CPU(memory)
        cpu.step()
        with pytest.raises(DivisionByZeroError):
            cpu.step()
        assert cpu.ac.read() == 0
        assert cpu.pc.read() == 4


class TestArithmeticProgram:
    """Mixed arithmetic with a store."""

    def test_result(self, memory):
        source = """
            SEA 7      ; 7
            MUL 6      ; 42
            ADD 1      ; 43
            MOD A      ; 3
            STA 200
            DIV 2      ; 1
        """
        cpu = run_steps(memory, source, 6)
        assert cpu.ac.read() == 1
        assert memory.read_word(0x200) == 3

    def test_wraparound(self, memory):
        """0xFFF * 0x10 + 0x20 wraps to 0x10."""
        cpu = run_steps(memory, "SEA FFF\nMUL 10\nADD 20", 3)
        assert cpu.ac.read() == 0x10


class TestSelfModifyingProgram:
    """Programs live in the same memory they write."""

    def test_store_over_next_instruction(self, memory):
        """STA 004 replaces the third instruction with AC before it is fetched."""
        source = "SEA 9\nSTA 4\nSEA 1"
        load_program(memory, source)
        cpu = CPU(memory)
        cpu.run(stop_pc=6)
        # Word 0x0009 decodes as LDA 009, reading bytes 9-10 (zero)
        assert memory.read_word(4) == 0x0009
        assert cpu.ac.read() == 0


class TestStoreOutOfRange:
    """STA to the last byte of memory."""

    def test_fault(self, memory):
        load_program(memory, "SEA 1\nSTA FFF")
        cpu = CPU(memory)
        cpu.run()
        assert isinstance(cpu.fault, OutOfRangeError)
        assert cpu.pc.read() == 4
        assert cpu.ac.read() == 1
