"""ACC16-CPU: a single-accumulator 16-bit instruction-set simulator.

A small pedagogical machine: 4096 bytes of memory, three 16-bit registers
(PC, IR, AC) and seven instructions, driven one fetch-decode-execute step
at a time.

Architecture:
    MEMORY -> FETCH -> IR -> DECODE -> REGISTRY -> EXECUTE -> (AC | MEMORY)
                |                        |
            [PC += 2]           [opcode -> handler, operand kind]

Modules:
    errors: Fault and loader exception types
    memory: Byte-addressable Memory with big-endian word access and dumps
    state: Register cells and immutable CPUState snapshots
    alu: 16-bit arithmetic unit
    registry: Frozen ISA table (opcode, mnemonic, operand kind, handler)
    program: Instruction encoding, program text parsing and loading
    cpu: Main CPU engine
"""

__version__ = "0.1.0"
__author__ = "ACC16 Project"

from .errors import (
    CPUError,
    OutOfRangeError,
    DivisionByZeroError,
    UnknownOpcodeError,
    ProgramError,
)
from .memory import Memory
from .state import CPUState, Register
from .alu import ALU
from .registry import ISARegistry, OperandKind
from .program import ProgramImage, parse_program, load_program
from .cpu import CPU

__all__ = [
    "CPUError",
    "OutOfRangeError",
    "DivisionByZeroError",
    "UnknownOpcodeError",
    "ProgramError",
    "Memory",
    "CPUState",
    "Register",
    "ALU",
    "ISARegistry",
    "OperandKind",
    "ProgramImage",
    "parse_program",
    "load_program",
    "CPU",
]
