"""Memory: byte-addressable store for the ACC16 machine.

4096 independently addressable 8-bit cells, zero at power-on. Words are
two consecutive cells, big-endian (high byte at the lower address).

The engine only borrows a Memory; it is created and owned by the driver
and never copied or resized.
"""

from typing import List

from .errors import OutOfRangeError


MEM_SIZE = 4096
MAX_WORD_ADDRESS = MEM_SIZE - 2  # address+1 must stay in range

# Dump format selectors
HEX_FORMAT = 16
BIN_FORMAT = 2


class Memory:
    """Fixed-size byte memory with word accessors and a dump view.

    Attributes:
        size: Number of byte cells (always MEM_SIZE)
    """

    def __init__(self):
        """Create a zeroed memory of MEM_SIZE bytes."""
        self._cells = bytearray(MEM_SIZE)

    @property
    def size(self) -> int:
        return MEM_SIZE

    def __len__(self) -> int:
        return MEM_SIZE

    # =========================================================================
    # Byte Access
    # =========================================================================

    def read_byte(self, address: int) -> int:
        """Read a single 8-bit cell.

        Raises:
            OutOfRangeError: If address is outside [0, 4095]
        """
        if address < 0 or address >= MEM_SIZE:
            raise OutOfRangeError(f"Address out of range: {address}", address=address)
        return self._cells[address]

    def write_byte(self, address: int, value: int) -> None:
        """Write a single 8-bit cell (value truncated to 8 bits).

        Raises:
            OutOfRangeError: If address is outside [0, 4095]
        """
        if address < 0 or address >= MEM_SIZE:
            raise OutOfRangeError(f"Address out of range: {address}", address=address)
        self._cells[address] = value & 0xFF

    # =========================================================================
    # Word Access
    # =========================================================================

    def read_word(self, address: int) -> int:
        """Read the big-endian word at address.

        Args:
            address: Address of the high byte

        Returns:
            16-bit value (mem[address] << 8) | mem[address + 1]

        Raises:
            OutOfRangeError: If address is outside [0, 4094]
        """
        self._check_word_address(address)
        return (self._cells[address] << 8) | self._cells[address + 1]

    def write_word(self, address: int, value: int) -> None:
        """Store value as a big-endian word at address.

        Args:
            address: Address of the high byte
            value: Value to store; only the low 16 bits are kept

        Raises:
            OutOfRangeError: If address is outside [0, 4094]
        """
        self._check_word_address(address)
        self._cells[address] = (value >> 8) & 0xFF
        self._cells[address + 1] = value & 0xFF

    def _check_word_address(self, address: int) -> None:
        if address < 0 or address > MAX_WORD_ADDRESS:
            raise OutOfRangeError(
                f"Word address out of range: {address} (valid 0-{MAX_WORD_ADDRESS})",
                address=address
            )

    # =========================================================================
    # Diagnostics
    # =========================================================================

    def dump(self, start: int, end: int, fmt: int = HEX_FORMAT) -> str:
        """Render cells [start, end] inclusive as text.

        Hexadecimal mode (fmt == 16) prints two uppercase hex digits per
        byte, 16 bytes per line. Any other fmt prints 8 binary digits per
        byte, 8 bytes per line. Bytes on a line are separated by single
        spaces and every line (including the last, partial one) ends with
        a newline. Memory contents are not modified.

        Args:
            start: First address to dump
            end: Last address to dump (inclusive)
            fmt: 16 for hexadecimal, anything else for binary

        Returns:
            The formatted dump

        Raises:
            OutOfRangeError: If start < 0, end >= 4096 or start > end
        """
        if start < 0 or end >= MEM_SIZE or start > end:
            raise OutOfRangeError(
                f"Dump range out of range: {start}-{end}",
                start=start,
                end=end
            )

        if fmt == HEX_FORMAT:
            per_line, render = 16, "{:02X}".format
        else:
            per_line, render = 8, "{:08b}".format

        lines: List[str] = []
        cells = self._cells[start:end + 1]
        for offset in range(0, len(cells), per_line):
            chunk = cells[offset:offset + per_line]
            lines.append(" ".join(render(b) for b in chunk))

        return "\n".join(lines) + "\n"
