#!/usr/bin/env python3
"""ACC16-CPU Command Line Interface.

Load a program into a fresh memory image and step the CPU through it,
printing the register view after every instruction.

Usage:
    python main.py --program prog.txt
    python main.py --inline "SEA 5; ADD 3" --trace
    python main.py --program prog.txt --interactive
"""

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from acc16_cpu import CPU, Memory, OutOfRangeError, ProgramError, parse_program
from acc16_cpu.state import format_registers


def show_dump(memory: Memory, start: int, end: int, fmt: int) -> None:
    """Print a memory dump; a bad range is reported and the run goes on."""
    try:
        text = memory.dump(start, end, fmt)
    except OutOfRangeError as e:
        print(f"Error: {e}")
        return
    print(f"Memory dump ({'hex' if fmt == 16 else 'binary'}):")
    print(text, end="")


def parse_number(text: str) -> int:
    """Parse a decimal number, or hexadecimal with a 0x prefix."""
    if text[:2].lower() == "0x":
        return int(text[2:], 16)
    return int(text, 10)


def prompt_dump(memory: Memory, input_fn: Callable[[str], str] = input) -> bool:
    """Ask whether to dump memory, and which range, after a step.

    Returns:
        False once input is exhausted, so the caller stops prompting
    """
    try:
        choice = input_fn("dump? (y/n): ").strip()
        if choice not in ("y", "Y"):
            return True
        reply = input_fn(
            "start address, end address, format (2: binary, 16: hex; "
            "addresses decimal or 0x-prefixed): "
        )
    except EOFError:
        print()
        return False

    try:
        start, end, fmt = (parse_number(part) for part in reply.split())
    except ValueError:
        print(f"Error: expected three numbers, got: {reply!r}")
        return True
    show_dump(memory, start, end, fmt)
    return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="ACC16-CPU: single-accumulator 16-bit CPU simulator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Run a program file
    python main.py --program prog.txt

    # Run inline program text with full trace output
    python main.py --inline "SEA A; STA 100; LDA 100" --trace

    # Dump the first 32 bytes after every step, in binary
    python main.py --program prog.txt --dump 0 31 --format 2

    # Prompt for a memory dump after every step
    python main.py --program prog.txt --interactive
        """
    )

    parser.add_argument(
        "--program", "-p",
        type=str,
        help="Path to program file (one 'MNEMONIC HEX_OPERAND' per line)"
    )
    parser.add_argument(
        "--inline", "-i",
        type=str,
        help="Inline program (separate instructions with ;)"
    )
    parser.add_argument(
        "--max-cycles",
        type=int,
        default=CPU.DEFAULT_MAX_CYCLES,
        help=f"Maximum execution cycles (safety limit). Default: {CPU.DEFAULT_MAX_CYCLES}"
    )
    parser.add_argument(
        "--run-on",
        action="store_true",
        help="Keep stepping past the end of the program until an instruction faults"
    )
    parser.add_argument(
        "--dump",
        nargs=2,
        metavar=("START", "END"),
        type=parse_number,
        help="Dump memory [START, END] after every step (decimal or 0x-prefixed)"
    )
    parser.add_argument(
        "--format",
        type=int,
        choices=[2, 16],
        default=16,
        help="Dump format: 2 (binary) or 16 (hex). Default: 16"
    )
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Ask for a memory dump after every step"
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Encode unknown mnemonics as LDA instead of rejecting the program"
    )
    parser.add_argument(
        "--trace", "-t",
        action="store_true",
        help="Print full execution trace"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Minimal output (final registers only)"
    )
    return parser


def main(argv: Optional[List[str]] = None, input_fn: Callable[[str], str] = input) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Validate arguments
    if not args.program and not args.inline:
        parser.error("Either --program or --inline is required")

    # Load program
    if args.program:
        program_path = Path(args.program)
        if not program_path.exists():
            print(f"Error: Program file not found: {args.program}")
            return 1
        source = program_path.read_text()
        if not args.quiet:
            print(f"Loading program: {args.program}")
    else:
        # Inline program
        source = args.inline.replace(";", "\n")
        if not args.quiet:
            print("Running inline program")

    try:
        image = parse_program(source, strict=not args.lenient)
    except ProgramError as e:
        print(f"Program error: {e}")
        return 1

    memory = Memory()
    end_address = image.load_into(memory)
    cpu = CPU(memory, max_cycles=args.max_cycles)

    if not args.quiet:
        for line in image.listing():
            print(f"  {line}")
        print("-" * 60)
        print("Executing...")
        print("-" * 60)

    prompting = args.interactive

    def after_step(entry) -> None:
        nonlocal prompting
        if not args.quiet:
            print(format_registers(entry.post_state))
        if args.dump:
            show_dump(memory, args.dump[0], args.dump[1], args.format)
        if prompting:
            prompting = prompt_dump(memory, input_fn)

    # Run
    limit_hit = False
    try:
        cpu.run(stop_pc=None if args.run_on else end_address, on_step=after_step)
    except RuntimeError as e:
        limit_hit = True
        print(f"Execution error: {e}")

    if cpu.fault is not None:
        print(f"Error: {cpu.fault}")

    # Output
    if args.trace:
        cpu.print_trace()
    elif not args.quiet:
        print()
        summary = cpu.get_summary()
        print(f"Cycles: {summary['cycles']}")
        print("Registers: " + " ".join(f"{k}={v:04X}" for k, v in summary['registers'].items()))
        if summary['fault']:
            print(f"Fault: {summary['fault_type']}: {summary['fault']}")
    else:
        # Quiet mode - just print final registers
        for reg, value in cpu.dump_registers().items():
            print(f"{reg}={value:04X}")

    # Return exit code based on fault state
    return 0 if cpu.fault is None and not limit_hit else 1


if __name__ == "__main__":
    sys.exit(main())
