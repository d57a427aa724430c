"""ACC16-CPU Interactive Demo.

A Gradio web interface for running and inspecting ACC16 programs.

Usage:
    cd /path/to/acc16-cpu
    python demo/gradio_app.py

Features:
    - Write or load example programs
    - See the assembled listing and step-by-step execution trace
    - Inspect final registers and a memory dump in hex or binary
"""

import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import gradio as gr
from acc16_cpu import CPU, Memory, OutOfRangeError, ProgramError, parse_program
from acc16_cpu.registry import get_registry
from acc16_cpu.state import format_registers


# =============================================================================
# Example Programs
# =============================================================================

EXAMPLE_PROGRAMS = {
    "Add": """SEA 5      ; AC = 5
ADD 3      ; AC = 8""",

    "Store and Load": """SEA A      ; AC = 0x000A
STA 100    ; mem[0x100] = AC
SEA 0      ; clear AC
LDA 100    ; AC = mem[0x100]""",

    "Arithmetic": """SEA 7
MUL 6      ; 42
ADD 1      ; 43
MOD A      ; 3
STA 200
DIV 2      ; 1""",

    "Divide by Zero": """SEA 0
DIV 0      ; faults: DivisionByZeroError""",

    "Custom": ""
}


# =============================================================================
# Execution Functions
# =============================================================================

def run_program(
    program: str,
    max_cycles: int,
    run_on: bool,
    dump_start: float,
    dump_end: float,
    dump_format: str
) -> tuple:
    """Execute a program and return results.

    Args:
        program: Program text
        max_cycles: Maximum execution cycles
        run_on: Keep stepping past the end of the program until a fault
        dump_start: First address of the memory dump
        dump_end: Last address of the memory dump
        dump_format: 'hex' or 'binary'

    Returns:
        Tuple of (summary_text, trace_text, registers_text, dump_text)
    """
    if not program.strip():
        return "Error: No program provided", "", "", ""

    try:
        image = parse_program(program)
    except ProgramError as e:
        return f"Program error: {e}", "", "", ""

    memory = Memory()
    end_address = image.load_into(memory)
    cpu = CPU(memory, max_cycles=int(max_cycles))

    try:
        trace = cpu.run(stop_pc=None if run_on else end_address)
    except RuntimeError as e:
        error_msg = str(e)
        trace = cpu.trace
    else:
        error_msg = None

    # Format summary
    summary = cpu.get_summary()
    summary_lines = [
        "EXECUTION SUMMARY",
        "=" * 40,
        f"Instructions: {len(image)} ({image.size_bytes} bytes)",
        f"Cycles: {summary['cycles']}",
    ]
    if summary['fault']:
        summary_lines.append(f"Fault: {summary['fault_type']}: {summary['fault']}")
    if error_msg:
        summary_lines.append(f"\nRuntime: {error_msg}")
    summary_lines.append("\nLISTING")
    summary_lines.extend(image.listing())
    summary_text = "\n".join(summary_lines)

    # Format trace
    trace_lines = [
        "EXECUTION TRACE",
        "=" * 60,
    ]
    for entry in trace[:100]:  # Limit to 100 entries
        trace_lines.append(f"\n--- Cycle {entry.cycle} (PC={entry.pc:04X}) ---")
        trace_lines.append(f"Instruction: {entry.instruction}")
        if entry.word is not None:
            trace_lines.append(f"Word:        {entry.word:04X}")
        if entry.pre_state.ac != entry.post_state.ac:
            trace_lines.append(
                f"Changes:     AC: {entry.pre_state.ac:04X} -> {entry.post_state.ac:04X}"
            )
        if entry.error:
            trace_lines.append(f"Error:       {entry.error}")

    if len(trace) > 100:
        trace_lines.append(f"\n... ({len(trace) - 100} more entries)")

    trace_text = "\n".join(trace_lines)

    registers_text = format_registers(cpu.snapshot())

    fmt = 16 if dump_format == "hex" else 2
    try:
        dump_text = memory.dump(int(dump_start), int(dump_end), fmt)
    except OutOfRangeError as e:
        dump_text = f"Error: {e}"

    return summary_text, trace_text, registers_text, dump_text


def load_example(example_name: str) -> str:
    """Load an example program."""
    return EXAMPLE_PROGRAMS.get(example_name, "")


def isa_reference() -> str:
    """Build the ISA reference table from the registry."""
    rows = [
        "| Opcode | Mnemonic | Operand | Description |",
        "|--------|----------|---------|-------------|",
    ]
    for spec in get_registry().specs():
        rows.append(
            f"| `0x{spec.opcode:X}` | `{spec.mnemonic}` | {spec.operand_kind.value} | {spec.description} |"
        )
    return "\n".join(rows)


# =============================================================================
# Gradio Interface
# =============================================================================

def create_demo():
    """Create and return the Gradio demo interface."""

    with gr.Blocks(title="ACC16-CPU Demo", theme=gr.themes.Soft()) as demo:
        gr.Markdown("""
        # ACC16-CPU: Single-Accumulator CPU Simulator

        A 16-bit machine with 4096 bytes of memory and one accumulator.
        Each instruction packs a 4-bit opcode and a 12-bit operand.

        **Cycle**: `fetch (PC += 2) -> decode -> execute`
        """)

        with gr.Row():
            with gr.Column(scale=2):
                # Program input
                gr.Markdown("### Program")

                example_dropdown = gr.Dropdown(
                    choices=list(EXAMPLE_PROGRAMS.keys()),
                    value="Store and Load",
                    label="Load Example"
                )

                program_input = gr.Textbox(
                    value=EXAMPLE_PROGRAMS["Store and Load"],
                    label="Source Code",
                    lines=15,
                    placeholder="MNEMONIC HEX_OPERAND, one per line..."
                )

                # Settings
                gr.Markdown("### Settings")

                with gr.Row():
                    max_cycles = gr.Slider(
                        minimum=1,
                        maximum=10000,
                        value=CPU.DEFAULT_MAX_CYCLES,
                        step=1,
                        label="Max Cycles"
                    )
                    run_on = gr.Checkbox(
                        value=False,
                        label="Run past end of program",
                        info="Keep stepping until an instruction faults"
                    )

                with gr.Row():
                    dump_start = gr.Number(value=0, precision=0, label="Dump Start")
                    dump_end = gr.Number(value=0x3F, precision=0, label="Dump End")
                    dump_format = gr.Radio(
                        choices=["hex", "binary"],
                        value="hex",
                        label="Dump Format"
                    )

                run_button = gr.Button("Run Program", variant="primary")

            with gr.Column(scale=3):
                # Results
                with gr.Row():
                    summary_output = gr.Textbox(
                        label="Summary",
                        lines=10,
                        interactive=False
                    )
                    registers_output = gr.Textbox(
                        label="Final Registers",
                        lines=10,
                        interactive=False
                    )

                trace_output = gr.Textbox(
                    label="Execution Trace",
                    lines=20,
                    interactive=False
                )

                dump_output = gr.Textbox(
                    label="Memory Dump",
                    lines=8,
                    interactive=False
                )

        # ISA Reference
        with gr.Accordion("ISA Reference", open=False):
            gr.Markdown(isa_reference())

        # Event handlers
        example_dropdown.change(
            fn=load_example,
            inputs=[example_dropdown],
            outputs=[program_input]
        )

        run_button.click(
            fn=run_program,
            inputs=[program_input, max_cycles, run_on, dump_start, dump_end, dump_format],
            outputs=[summary_output, trace_output, registers_output, dump_output]
        )

    return demo


# =============================================================================
# Main
# =============================================================================

if __name__ == "__main__":
    demo = create_demo()
    demo.launch(
        share=False,
        server_name="0.0.0.0",
        server_port=7861,
        show_error=True
    )
