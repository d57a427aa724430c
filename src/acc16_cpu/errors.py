"""Exception types raised by the ACC16 machine.

Execution faults derive from CPUError (a RuntimeError) so a driver can stop
a run with a single ``except CPUError``. Loader problems are ValueErrors,
since they come from bad program text rather than from execution.
"""

from typing import Optional


class CPUError(RuntimeError):
    """Base class for every fault raised while executing an instruction."""


class OutOfRangeError(CPUError):
    """Memory address or dump range outside the valid bounds.

    Attributes:
        address: Offending address (word access), if any
        start: Start of the offending dump range, if any
        end: End of the offending dump range, if any
    """

    def __init__(
        self,
        message: str,
        address: Optional[int] = None,
        start: Optional[int] = None,
        end: Optional[int] = None
    ):
        super().__init__(message)
        self.address = address
        self.start = start
        self.end = end


class DivisionByZeroError(CPUError):
    """DIV or MOD with a zero divisor."""


class UnknownOpcodeError(CPUError):
    """Instruction word whose high nibble is not a defined opcode.

    Attributes:
        opcode: The 4-bit opcode that failed to decode
        word: The full 16-bit instruction word
    """

    def __init__(self, opcode: int, word: int):
        super().__init__(f"Unknown opcode: 0x{opcode:X} (word 0x{word:04X})")
        self.opcode = opcode
        self.word = word


class ProgramError(ValueError):
    """Program text that cannot be encoded into a program image.

    Attributes:
        line_number: 1-based source line of the problem (None if not line-specific)
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
