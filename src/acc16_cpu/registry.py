"""ISARegistry: the single source of truth for the ACC16 instruction set.

Each opcode is described once, by an InstructionSpec carrying its
mnemonic, how its 12-bit operand is interpreted and the handler that
executes it. The loader, the disassembler and the engine all read this
table, so the ISA cannot drift between them.

Instruction Set:
    0x0 LDA addr: AC <- Memory[addr]
    0x1 STA addr: Memory[addr] <- AC
    0x2 ADD imm:  AC <- AC + imm
    0x3 MUL imm:  AC <- AC * imm
    0x4 DIV imm:  AC <- AC / imm  (fails on zero)
    0x5 MOD imm:  AC <- AC % imm  (fails on zero)
    0xF SEA imm:  AC <- imm

Every handler performs at most one register or memory mutation and does
so only after its inputs have been computed, so a failing instruction
leaves AC and Memory untouched.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from .errors import UnknownOpcodeError

if TYPE_CHECKING:
    from .cpu import CPU


Handler = Callable[["CPU", int], None]


class OperandKind(Enum):
    """How an instruction reads its 12-bit operand."""
    ADDRESS = "address"
    IMMEDIATE = "immediate"


@dataclass(frozen=True)
class InstructionSpec:
    """Metadata for one opcode.

    Attributes:
        opcode: 4-bit opcode value
        mnemonic: Assembly mnemonic (upper case)
        operand_kind: Whether the operand is an address or a literal
        handler: Function executing the instruction against a CPU
        description: One-line summary for listings and the demo
    """
    opcode: int
    mnemonic: str
    operand_kind: OperandKind
    handler: Handler
    description: str = ""


class ISARegistry:
    """Frozen registry of ACC16 instructions, keyed by opcode.

    Attributes:
        _by_opcode: Opcode -> InstructionSpec
        _by_mnemonic: Mnemonic -> InstructionSpec
        _frozen: Whether the registry is locked against modifications
    """

    def __init__(self):
        """Initialize registry with the full instruction set."""
        self._by_opcode: Dict[int, InstructionSpec] = {}
        self._by_mnemonic: Dict[str, InstructionSpec] = {}
        self._frozen = False
        self._register_all_instructions()
        self.freeze()

    def _register_all_instructions(self) -> None:
        """Register every ACC16 instruction."""
        address = OperandKind.ADDRESS
        immediate = OperandKind.IMMEDIATE

        # Memory
        self.register(InstructionSpec(0x0, "LDA", address, _op_lda, "Load AC from memory"))
        self.register(InstructionSpec(0x1, "STA", address, _op_sta, "Store AC to memory"))

        # Arithmetic
        self.register(InstructionSpec(0x2, "ADD", immediate, _op_add, "Add immediate to AC"))
        self.register(InstructionSpec(0x3, "MUL", immediate, _op_mul, "Multiply AC by immediate"))
        self.register(InstructionSpec(0x4, "DIV", immediate, _op_div, "Divide AC by immediate"))
        self.register(InstructionSpec(0x5, "MOD", immediate, _op_mod, "AC modulo immediate"))

        # Accumulator
        self.register(InstructionSpec(0xF, "SEA", immediate, _op_sea, "Set AC to immediate"))

    def register(self, spec: InstructionSpec) -> None:
        """Register an instruction.

        Args:
            spec: Instruction metadata

        Raises:
            RuntimeError: If registry is frozen
            ValueError: If opcode or mnemonic already registered, or the
                opcode does not fit in 4 bits
        """
        if self._frozen:
            raise RuntimeError("Cannot register instructions: registry is frozen")
        if not 0 <= spec.opcode <= 0xF:
            raise ValueError(f"Opcode does not fit in 4 bits: {spec.opcode}")
        if spec.opcode in self._by_opcode:
            raise ValueError(f"Opcode already registered: 0x{spec.opcode:X}")
        if spec.mnemonic in self._by_mnemonic:
            raise ValueError(f"Mnemonic already registered: {spec.mnemonic}")
        self._by_opcode[spec.opcode] = spec
        self._by_mnemonic[spec.mnemonic] = spec

    def freeze(self) -> None:
        """Freeze the registry to prevent further modifications."""
        self._frozen = True

    def is_frozen(self) -> bool:
        """Check if registry is frozen."""
        return self._frozen

    def get_valid_opcodes(self) -> set:
        """Get set of all defined opcodes."""
        return set(self._by_opcode.keys())

    def mnemonics(self) -> List[str]:
        """Get defined mnemonics in opcode order."""
        return [spec.mnemonic for spec in self.specs()]

    def specs(self) -> List[InstructionSpec]:
        """Get all instruction specs in opcode order."""
        return [self._by_opcode[op] for op in sorted(self._by_opcode)]

    def lookup(self, opcode: int) -> Optional[InstructionSpec]:
        """Find the spec for an opcode, or None if undefined."""
        return self._by_opcode.get(opcode)

    def lookup_mnemonic(self, mnemonic: str) -> Optional[InstructionSpec]:
        """Find the spec for a mnemonic (case insensitive), or None."""
        return self._by_mnemonic.get(mnemonic.upper())

    def execute(self, cpu: "CPU", opcode: int, operand: int) -> InstructionSpec:
        """Execute one decoded instruction against a CPU.

        Args:
            cpu: Engine whose registers and memory are acted on
            opcode: 4-bit opcode
            operand: 12-bit operand

        Returns:
            The spec of the executed instruction

        Raises:
            UnknownOpcodeError: If opcode is not defined
            OutOfRangeError: Propagated from memory access
            DivisionByZeroError: Propagated from the ALU
        """
        spec = self._by_opcode.get(opcode)
        if spec is None:
            raise UnknownOpcodeError(opcode, (opcode << 12) | operand)
        spec.handler(cpu, operand)
        return spec


# =============================================================================
# Instruction Handlers
# =============================================================================

def _op_lda(cpu: "CPU", operand: int) -> None:
    cpu.ac.write(cpu.memory.read_word(operand))


def _op_sta(cpu: "CPU", operand: int) -> None:
    cpu.memory.write_word(operand, cpu.ac.read())


def _op_add(cpu: "CPU", operand: int) -> None:
    cpu.ac.write(cpu.alu.add(cpu.ac.read(), operand))


def _op_mul(cpu: "CPU", operand: int) -> None:
    cpu.ac.write(cpu.alu.mul(cpu.ac.read(), operand))


def _op_div(cpu: "CPU", operand: int) -> None:
    cpu.ac.write(cpu.alu.div(cpu.ac.read(), operand))


def _op_mod(cpu: "CPU", operand: int) -> None:
    cpu.ac.write(cpu.alu.mod(cpu.ac.read(), operand))


def _op_sea(cpu: "CPU", operand: int) -> None:
    cpu.ac.write(operand)


# Singleton registry instance
_registry: Optional[ISARegistry] = None


def get_registry() -> ISARegistry:
    """Get the singleton ISA registry instance.

    Returns:
        The frozen ISARegistry instance
    """
    global _registry
    if _registry is None:
        _registry = ISARegistry()
    return _registry
