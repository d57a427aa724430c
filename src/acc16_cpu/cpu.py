"""CPU: fetch-decode-execute engine for the ACC16 machine.

Pipeline for one step:
    MEMORY[PC] -> FETCH -> IR -> DECODE -> (opcode, operand) -> REGISTRY -> EXECUTE

fetch() advances PC by 2 before execute() runs, so a failing instruction
still leaves PC on the next one. There is no halt instruction: a run ends
when an instruction faults or when the driver stops issuing steps.

The engine owns its three registers and borrows the Memory it is
constructed with. Every step is recorded in an execution trace.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from .alu import ALU
from .errors import CPUError
from .memory import Memory
from .program import INSTRUCTION_SIZE, decode_instruction, disassemble
from .registry import get_registry
from .state import CPUState, Register


@dataclass
class ExecutionTraceEntry:
    """Single entry in the execution trace.

    Attributes:
        cycle: Cycle number (0-indexed)
        pc: Address the instruction was fetched from
        word: Fetched instruction word (None if the fetch itself failed)
        instruction: Disassembled instruction text
        pre_state: State before the step
        post_state: State after the step (or at the point of failure)
        error: Error message if the step failed
    """
    cycle: int
    pc: int
    word: Optional[int]
    instruction: str
    pre_state: CPUState
    post_state: CPUState
    error: Optional[str] = None


class CPU:
    """Single-accumulator 16-bit CPU.

    Attributes:
        memory: Borrowed Memory the program runs against
        pc: Program counter register
        ir: Instruction register
        ac: Accumulator register
        alu: Arithmetic unit
        registry: Frozen ISA registry used for dispatch
        trace: List of execution trace entries
        fault: The CPUError that ended the last run, if any
        max_cycles: Maximum cycles per run (safety limit)
    """

    DEFAULT_MAX_CYCLES = 10000

    def __init__(self, memory: Memory, max_cycles: int = DEFAULT_MAX_CYCLES):
        """Initialize the CPU.

        Args:
            memory: Memory to execute against (referenced, not copied)
            max_cycles: Maximum cycles before run() gives up
        """
        self.memory = memory
        self.pc = Register()
        self.ir = Register()
        self.ac = Register()
        self.alu = ALU()
        self.registry = get_registry()
        self.trace: List[ExecutionTraceEntry] = []
        self.fault: Optional[CPUError] = None
        self.max_cycles = max_cycles
        self._cycle_count = 0

    def reset(self) -> None:
        """Zero the registers and forget the trace. Memory is left alone."""
        for register in (self.pc, self.ir, self.ac):
            register.write(0)
        self.trace = []
        self.fault = None
        self._cycle_count = 0

    # =========================================================================
    # Fetch / Decode / Execute
    # =========================================================================

    def fetch(self) -> int:
        """Load the word at PC into IR and advance PC by one instruction.

        Returns:
            The fetched instruction word

        Raises:
            OutOfRangeError: If PC is not a valid word address
        """
        address = self.pc.read()
        instruction = self.memory.read_word(address)
        self.ir.write(instruction)
        self.pc.write(address + INSTRUCTION_SIZE)
        return instruction

    def execute(self) -> None:
        """Decode IR and execute it.

        Raises:
            UnknownOpcodeError: If IR holds an undefined opcode
            OutOfRangeError: If LDA/STA address an invalid word
            DivisionByZeroError: If DIV/MOD have a zero operand
        """
        opcode, operand = decode_instruction(self.ir.read())
        self.registry.execute(self, opcode, operand)

    def step(self) -> ExecutionTraceEntry:
        """Execute a single instruction cycle.

        Performs: FETCH -> DECODE -> EXECUTE

        Returns:
            ExecutionTraceEntry with full cycle information

        Raises:
            CPUError: Whatever fetch() or execute() raised, after the
                failed step has been appended to the trace
        """
        pre_state = self.snapshot()
        word: Optional[int] = None
        try:
            word = self.fetch()
            self.execute()
        except CPUError as e:
            self.trace.append(self._trace_entry(pre_state, word, str(e)))
            raise

        self._cycle_count += 1
        entry = self._trace_entry(pre_state, word)
        self.trace.append(entry)
        return entry

    def _trace_entry(
        self,
        pre_state: CPUState,
        word: Optional[int],
        error: Optional[str] = None
    ) -> ExecutionTraceEntry:
        return ExecutionTraceEntry(
            cycle=pre_state.cycle_count,
            pc=pre_state.pc,
            word=word,
            instruction=disassemble(word) if word is not None else "<FETCH FAILED>",
            pre_state=pre_state,
            post_state=self.snapshot(),
            error=error
        )

    def run(
        self,
        max_cycles: Optional[int] = None,
        stop_pc: Optional[int] = None,
        on_step: Optional[Callable[[ExecutionTraceEntry], None]] = None
    ) -> List[ExecutionTraceEntry]:
        """Step until a fault, until PC reaches stop_pc, or until max cycles.

        A fault ends the run and is stored in ``self.fault``; it is not
        re-raised.

        Args:
            max_cycles: Override maximum cycles (uses instance default if None)
            stop_pc: Stop once PC >= this address (e.g. the end of the
                loaded program). None runs until a fault.
            on_step: Called with the trace entry after every successful step

        Returns:
            Complete execution trace

        Raises:
            RuntimeError: If max cycles exceeded without a fault or stop
        """
        limit = max_cycles if max_cycles is not None else self.max_cycles
        self.fault = None
        executed = 0

        while executed < limit:
            if stop_pc is not None and self.pc.read() >= stop_pc:
                return self.trace
            try:
                entry = self.step()
            except CPUError as e:
                self.fault = e
                return self.trace
            executed += 1
            if on_step is not None:
                on_step(entry)

        if stop_pc is not None and self.pc.read() >= stop_pc:
            return self.trace
        raise RuntimeError(f"Max cycles ({limit}) exceeded")

    # =========================================================================
    # Inspection
    # =========================================================================

    def snapshot(self) -> CPUState:
        """Capture the current registers as an immutable CPUState."""
        return CPUState(
            pc=self.pc.read(),
            ir=self.ir.read(),
            ac=self.ac.read(),
            cycle_count=self._cycle_count
        )

    def dump_registers(self) -> Dict[str, int]:
        """Get all register values.

        Returns:
            Dictionary mapping PC, IR and AC to their values
        """
        return self.snapshot().registers()

    def get_cycle_count(self) -> int:
        """Get number of successfully executed cycles."""
        return self._cycle_count

    def print_trace(self) -> None:
        """Print execution trace in human-readable format."""
        print("=" * 70)
        print("ACC16 EXECUTION TRACE")
        print("=" * 70)

        for entry in self.trace:
            status = "OK" if not entry.error else f"ERROR: {entry.error}"
            print(f"\n[Cycle {entry.cycle}] {status}")
            word = f"{entry.word:04X}" if entry.word is not None else "----"
            print(f"  {entry.pc:04X}: {word}  {entry.instruction}")

            pre_regs = entry.pre_state.registers()
            post_regs = entry.post_state.registers()
            changes = []
            for reg in ("AC", "PC"):
                if pre_regs[reg] != post_regs[reg]:
                    changes.append(f"{reg}: {pre_regs[reg]:04X} → {post_regs[reg]:04X}")
            if changes:
                print(f"  Changes: {', '.join(changes)}")

        print("\n" + "=" * 70)
        print("FINAL STATE")
        print("=" * 70)
        regs = self.dump_registers()
        print("  Registers: " + " ".join(f"{k}={v:04X}" for k, v in regs.items()))
        print(f"  Cycles: {self.get_cycle_count()}")
        if self.fault is not None:
            print(f"  Fault: {self.fault}")

    def get_summary(self) -> Dict:
        """Get execution summary.

        Returns:
            Dictionary with execution statistics and final state
        """
        return {
            "cycles": self.get_cycle_count(),
            "registers": self.dump_registers(),
            "pc": self.pc.read(),
            "fault": str(self.fault) if self.fault is not None else None,
            "fault_type": type(self.fault).__name__ if self.fault is not None else None,
            "trace_length": len(self.trace),
            "errors": [e.error for e in self.trace if e.error],
        }
