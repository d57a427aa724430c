"""ProgramImage: instruction encoding and program loading for ACC16.

Encoding:
    A 16-bit instruction word packs a 4-bit opcode (bits 15-12) with a
    12-bit operand (bits 11-0):

        word = (opcode << 12) | (operand & 0xFFF)

    A program image is a run of such words written big-endian from
    address 0, two bytes per instruction, with no gaps.

Program text:
    One instruction per line, ``MNEMONIC HEX_OPERAND``, for example::

        SEA A
        STA 100
        LDA 100

    Blank lines are skipped and anything after ``;`` or ``#`` is a comment.
    Mnemonics are case insensitive and operands are hexadecimal with an
    optional ``0x`` prefix.
"""

import re
from dataclasses import dataclass, field
from typing import List, Tuple

from .errors import ProgramError
from .memory import Memory, MEM_SIZE
from .registry import get_registry


OPCODE_SHIFT = 12
OPCODE_MASK = 0xF
OPERAND_MASK = 0xFFF
INSTRUCTION_SIZE = 2
MAX_INSTRUCTIONS = MEM_SIZE // INSTRUCTION_SIZE

HEX_OPERAND = re.compile(r"(0[xX])?[0-9A-Fa-f]+")


def encode_instruction(opcode: int, operand: int) -> int:
    """Pack an opcode and operand into one instruction word.

    Args:
        opcode: 4-bit opcode (higher bits are dropped)
        operand: Operand value (truncated to 12 bits)

    Returns:
        16-bit instruction word
    """
    return ((opcode & OPCODE_MASK) << OPCODE_SHIFT) | (operand & OPERAND_MASK)


def decode_instruction(word: int) -> Tuple[int, int]:
    """Split an instruction word into (opcode, operand)."""
    return (word >> OPCODE_SHIFT) & OPCODE_MASK, word & OPERAND_MASK


def disassemble(word: int) -> str:
    """Render an instruction word as program text.

    Defined opcodes produce text that parse_program accepts again
    (e.g. ``"ADD 003"``). Undefined opcodes render as ``"??? F00D"``
    with the raw word.
    """
    opcode, operand = decode_instruction(word)
    spec = get_registry().lookup(opcode)
    if spec is None:
        return f"??? {word:04X}"
    return f"{spec.mnemonic} {operand:03X}"


@dataclass
class ProgramImage:
    """An assembled program, ready to be written into Memory.

    Attributes:
        words: Instruction words in program order
    """
    words: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.words)

    @property
    def size_bytes(self) -> int:
        return len(self.words) * INSTRUCTION_SIZE

    def load_into(self, memory: Memory, base: int = 0) -> int:
        """Write the image into memory.

        Args:
            memory: Target memory
            base: Address of the first instruction (0 for a normal run)

        Returns:
            Address one past the last written word

        Raises:
            OutOfRangeError: If the image does not fit above base
        """
        address = base
        for word in self.words:
            memory.write_word(address, word)
            address += INSTRUCTION_SIZE
        return address

    def listing(self, base: int = 0) -> List[str]:
        """Get an address/word/source listing, one line per instruction."""
        lines = []
        for index, word in enumerate(self.words):
            address = base + index * INSTRUCTION_SIZE
            lines.append(f"{address:04X}: {word:04X}  {disassemble(word)}")
        return lines


def parse_program(source: str, strict: bool = True) -> ProgramImage:
    """Parse program text into a ProgramImage.

    Args:
        source: Program text, one instruction per line
        strict: Reject unknown mnemonics (True) or encode them as
            opcode 0x0 / LDA like the legacy loader (False)

    Returns:
        The assembled ProgramImage

    Raises:
        ProgramError: On an unknown mnemonic (strict mode), a missing or
            non-hexadecimal operand, or a program too large for memory
    """
    registry = get_registry()
    image = ProgramImage()

    for line_number, raw_line in enumerate(source.splitlines(), start=1):
        # Remove comments
        line = re.sub(r'[;#].*$', '', raw_line).strip()

        if not line:
            continue

        parts = line.split()
        if len(parts) != 2:
            raise ProgramError(
                f"Expected 'MNEMONIC OPERAND', got: {line!r}",
                line_number
            )
        mnemonic, operand_text = parts

        spec = registry.lookup_mnemonic(mnemonic)
        if spec is not None:
            opcode = spec.opcode
        elif strict:
            raise ProgramError(f"Unknown mnemonic: {mnemonic}", line_number)
        else:
            opcode = 0x0

        if not HEX_OPERAND.fullmatch(operand_text):
            raise ProgramError(
                f"Operand is not hexadecimal: {operand_text!r}",
                line_number
            )
        operand = int(operand_text, 16)

        if len(image.words) >= MAX_INSTRUCTIONS:
            raise ProgramError(
                f"Program exceeds {MAX_INSTRUCTIONS} instructions",
                line_number
            )

        word = encode_instruction(opcode, operand)
        image.words.append(word)

    return image


def load_program(memory: Memory, source: str, strict: bool = True) -> ProgramImage:
    """Parse program text and write it into memory from address 0.

    Args:
        memory: Target memory
        source: Program text
        strict: See parse_program

    Returns:
        The loaded ProgramImage
    """
    image = parse_program(source, strict=strict)
    image.load_into(memory)
    return image
