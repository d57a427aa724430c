"""Register storage and CPU state snapshots for ACC16.

State Components:
    - Register: a mutable 16-bit cell (PC, IR and AC are each one)
    - CPUState: immutable snapshot of PC, IR, AC and the cycle count,
      captured before and after every step for the execution trace

Snapshots never alias live registers, so a trace built from them stays
accurate after the machine moves on.
"""

from dataclasses import dataclass
from typing import Dict


WORD_MASK = 0xFFFF


class Register:
    """A single 16-bit register.

    Any 16-bit value is legal; writes are stored at machine width.
    """

    def __init__(self, value: int = 0):
        self._value = value & WORD_MASK

    def read(self) -> int:
        return self._value

    def write(self, value: int) -> None:
        self._value = value & WORD_MASK

    def __repr__(self) -> str:
        return f"Register(0x{self._value:04X})"


@dataclass(frozen=True)
class CPUState:
    """Immutable CPU state snapshot.

    Attributes:
        pc: Program counter (address of the next instruction)
        ir: Instruction register (last fetched word)
        ac: Accumulator
        cycle_count: Number of completed steps
    """
    pc: int = 0
    ir: int = 0
    ac: int = 0
    cycle_count: int = 0

    def registers(self) -> Dict[str, int]:
        """Get register values keyed by name.

        Returns:
            Dictionary with PC, IR and AC
        """
        return {"PC": self.pc, "IR": self.ir, "AC": self.ac}

    def __str__(self) -> str:
        """Human-readable state representation."""
        return (
            f"[Cycle {self.cycle_count}] "
            f"PC={self.pc:04X} IR={self.ir:04X} AC={self.ac:04X}"
        )


def format_registers(state: CPUState) -> str:
    """Render the diagnostic register view.

    Each register is shown as 4 uppercase hex digits between DEBUG banners.
    """
    lines = ["=" * 20 + " DEBUG " + "=" * 20]
    for name, value in state.registers().items():
        lines.append(f"{name}: {value:04X}")
    lines.append("=" * 47)
    return "\n".join(lines)
