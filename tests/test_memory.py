"""Tests for Memory."""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from acc16_cpu.errors import CPUError, OutOfRangeError
from acc16_cpu.memory import Memory, MEM_SIZE, MAX_WORD_ADDRESS


@pytest.fixture
def memory():
    return Memory()


class TestMemoryCreation:
    """Test Memory initialization."""

    def test_size(self, memory):
        """Memory holds 4096 byte cells."""
        assert MEM_SIZE == 4096
        assert memory.size == 4096
        assert len(memory) == 4096

    def test_zeroed(self, memory):
        """Every cell starts at zero."""
        assert memory.read_word(0) == 0
        assert memory.read_word(MAX_WORD_ADDRESS) == 0
        assert memory.dump(0, MEM_SIZE - 1).split() == ["00"] * MEM_SIZE


class TestWordAccess:
    """Test big-endian word reads and writes."""

    @pytest.mark.parametrize("address", [0, 1, 0x100, 2047, 4093, 4094])
    @pytest.mark.parametrize("value", [0, 1, 0xFF, 0x100, 0xABCD, 0xFFFF])
    def test_round_trip(self, memory, address, value):
        """write_word then read_word returns the value."""
        memory.write_word(address, value)
        assert memory.read_word(address) == value

    def test_big_endian_layout(self, memory):
        """High byte goes to the lower address."""
        memory.write_word(0x10, 0x1234)
        assert memory.read_byte(0x10) == 0x12
        assert memory.read_byte(0x11) == 0x34

    def test_read_combines_bytes(self, memory):
        """read_word combines two independently written bytes."""
        memory.write_byte(0x20, 0xBE)
        memory.write_byte(0x21, 0xEF)
        assert memory.read_word(0x20) == 0xBEEF

    def test_write_truncates_to_16_bits(self, memory):
        """Only the low 16 bits of a value are stored."""
        memory.write_word(0, 0x12345)
        assert memory.read_word(0) == 0x2345

    def test_overlapping_words(self, memory):
        """Words at odd addresses overlap their neighbours."""
        memory.write_word(0, 0x1122)
        memory.write_word(1, 0x3344)
        assert memory.read_word(0) == 0x1133
        assert memory.read_word(2) == 0x4400


class TestWordBounds:
    """Test word access bounds."""

    @pytest.mark.parametrize("address", [-1, -100, 4095, 4096, 10000])
    def test_read_out_of_range(self, memory, address):
        """read_word rejects addresses outside [0, 4094]."""
        with pytest.raises(OutOfRangeError) as excinfo:
            memory.read_word(address)
        assert excinfo.value.address == address

    @pytest.mark.parametrize("address", [-1, 4095, 4096])
    def test_write_out_of_range(self, memory, address):
        """write_word rejects addresses outside [0, 4094]."""
        with pytest.raises(OutOfRangeError):
            memory.write_word(address, 1)

    def test_failed_write_changes_nothing(self, memory):
        """A rejected write leaves the last cell untouched."""
        with pytest.raises(OutOfRangeError):
            memory.write_word(4095, 0xFFFF)
        assert memory.read_byte(4095) == 0

    @pytest.mark.parametrize("address", [0, 4094])
    def test_boundaries_accepted(self, memory, address):
        """0 and 4094 are valid word addresses."""
        memory.write_word(address, 0xCAFE)
        assert memory.read_word(address) == 0xCAFE

    def test_error_is_cpu_error(self, memory):
        """OutOfRangeError belongs to the CPUError family."""
        with pytest.raises(CPUError):
            memory.read_word(4095)

    def test_byte_bounds(self, memory):
        """Byte access allows 4095 but not 4096."""
        memory.write_byte(4095, 0x7F)
        assert memory.read_byte(4095) == 0x7F
        with pytest.raises(OutOfRangeError):
            memory.read_byte(4096)
        with pytest.raises(OutOfRangeError):
            memory.write_byte(-1, 0)


class TestDump:
    """Test the formatted dump view."""

    def test_hex_sixteen_zero_bytes(self, memory):
        """16 zero bytes in hex mode form a single line."""
        assert memory.dump(0, 15, 16) == " ".join(["00"] * 16) + "\n"

    def test_binary_eight_zero_bytes(self, memory):
        """8 zero bytes in binary mode form a single line."""
        assert memory.dump(0, 7, 2) == " ".join(["00000000"] * 8) + "\n"

    def test_hex_is_default(self, memory):
        """Hex mode is used when no format is given."""
        assert memory.dump(0, 3) == "00 00 00 00\n"

    def test_hex_uppercase(self, memory):
        """Hex bytes are two uppercase digits."""
        memory.write_word(0, 0xABCD)
        memory.write_byte(2, 0x5)
        assert memory.dump(0, 2, 16) == "AB CD 05\n"

    def test_hex_line_break_every_16(self, memory):
        """Hex mode breaks after 16 bytes and at the final byte."""
        lines = memory.dump(0, 16, 16).splitlines()
        assert len(lines) == 2
        assert len(lines[0].split()) == 16
        assert lines[1] == "00"

    def test_binary_line_break_every_8(self, memory):
        """Binary mode breaks after 8 bytes and at the final byte."""
        memory.write_byte(8, 5)
        text = memory.dump(0, 9, 2)
        assert text.endswith("\n")
        lines = text.splitlines()
        assert len(lines) == 2
        assert lines[1] == "00000101 00000000"

    def test_other_format_is_binary(self, memory):
        """Any non-hex format renders binary."""
        assert memory.dump(0, 0, 8) == "00000000\n"
        assert memory.dump(0, 0, 10) == "00000000\n"

    def test_lines_relative_to_start(self, memory):
        """Line breaks count from start, not from address 0."""
        lines = memory.dump(10, 41, 16).splitlines()
        assert [len(line.split()) for line in lines] == [16, 16]

    def test_single_byte_at_end(self, memory):
        """The last cell can be dumped on its own."""
        memory.write_byte(4095, 0xFF)
        assert memory.dump(4095, 4095, 16) == "FF\n"
        assert memory.dump(4095, 4095, 2) == "11111111\n"

    @pytest.mark.parametrize("start,end", [(-1, 0), (0, 4096), (5, 4), (4096, 4096)])
    def test_out_of_range(self, memory, start, end):
        """Invalid ranges raise OutOfRangeError."""
        with pytest.raises(OutOfRangeError) as excinfo:
            memory.dump(start, end)
        assert excinfo.value.start == start
        assert excinfo.value.end == end

    def test_full_range(self, memory):
        """The whole memory dumps as 256 hex lines."""
        assert len(memory.dump(0, 4095, 16).splitlines()) == 256

    def test_dump_has_no_side_effects(self, memory):
        """Dumping leaves memory contents unchanged."""
        memory.write_word(0, 0x1234)
        memory.dump(0, 4095, 16)
        memory.dump(0, 4095, 2)
        assert memory.read_word(0) == 0x1234
        assert memory.read_word(2) == 0

