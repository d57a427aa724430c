"""ALU: integer arithmetic at 16-bit machine width.

Addition and multiplication wrap modulo 2**16. Division and modulo are
unsigned and fail on a zero divisor. The unit keeps no state.
"""

from .errors import DivisionByZeroError
from .state import WORD_MASK


class ALU:
    """Stateless 16-bit arithmetic unit."""

    def add(self, a: int, b: int) -> int:
        return (a + b) & WORD_MASK

    def mul(self, a: int, b: int) -> int:
        return (a * b) & WORD_MASK

    def div(self, a: int, b: int) -> int:
        """Unsigned floor division.

        Raises:
            DivisionByZeroError: If b is zero
        """
        if b == 0:
            raise DivisionByZeroError(f"Division by zero: {a} / 0")
        return (a // b) & WORD_MASK

    def mod(self, a: int, b: int) -> int:
        """Unsigned remainder.

        Raises:
            DivisionByZeroError: If b is zero
        """
        if b == 0:
            raise DivisionByZeroError(f"Division by zero: {a} % 0")
        return (a % b) & WORD_MASK
