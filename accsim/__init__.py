"""
accsim — Accumulator CPU Simulator
==================================
A minimal accumulator machine: seven opcodes, one accumulator, a 16-word
memory and an artificial per-instruction delay derived from the selected
bus speed and memory type.

Architecture:
    ┌──────────┐    ┌──────────┐    ┌──────────┐    ┌──────────┐
    │  Memory  │───>│ Decoder  │───>│   CPU    │───>│ Console  │
    │ (16 wd)  │    │ (op,addr)│    │ (loop)   │    │ (report) │
    └──────────┘    └──────────┘    └──────────┘    └──────────┘

    - mem/memory.py:   word array, seed program, bounds-checked access
    - cpu/decoder.py:  opcode*1000 + address packing, Opcode enum
    - cpu/regs.py:     PC / AC / IR / cycle counter
    - timing.py:       bus speed + memory type → delay per instruction
    - emu.py:          fetch-decode-execute state machine
    - console.py:      prompts, report, run-again loop
"""

__version__ = "1.0.0"

from .cpu.decoder import Opcode, Instruction, IllegalOpcode, decode_instruction, encode_instruction
from .mem.memory import Memory, MemoryAccessError, initialize, MEMORY_SIZE
from .timing import BusSpeed, MemoryType, SimConfig, delay_ms
from .emu import CPU, CPUState, RunResult


def simulate(inputs=(), bus_speed: int = BusSpeed.FAST,
             memory_type: int = MemoryType.SRAM, memory=None) -> RunResult:
    """Run one program with scripted READ inputs, no delay and no console output.

    Args:
        inputs: Lines fed to READ instructions, in order.
        bus_speed: BusSpeed value (only reported, delay is disabled).
        memory_type: MemoryType value.
        memory: Memory image to run (default: the seed program).

    Returns:
        RunResult with final memory, registers and trace.
    """
    feed = iter(inputs)

    def _next_input(prompt):
        try:
            return next(feed)
        except StopIteration:
            raise EOFError("no more scripted input") from None

    config = SimConfig(BusSpeed(bus_speed), MemoryType(memory_type), no_delay=True)
    cpu = CPU(memory=memory, config=config, input_fn=_next_input,
              output=lambda line: None, sleep=lambda seconds: None)
    return cpu.run()
