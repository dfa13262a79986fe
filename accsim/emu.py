"""
accsim — Main Emulator Class

This is the top-level class that integrates:
  - CPU registers (cpu/regs.py)
  - 16-word memory image (mem/memory.py)
  - Instruction decoder (cpu/decoder.py)
  - Per-instruction delay (timing.py)

Execution model, one cycle:
  1. Bounds-check PC (outside memory → HALTED_BOUNDS)
  2. Sleep for the configured per-instruction delay
  3. Fetch word at PC, decode opcode/address
  4. Execute handler → update AC / memory, emit one trace line
  5. PC += 1 (always, even for HALT and errors)

Stop states:
  - HALTED_NORMAL:  HALT instruction executed
  - HALTED_BOUNDS:  PC left memory before a fetch
  - HALTED_ERROR:   illegal opcode or operand address outside memory

The console is not touched directly. Input comes from an input-like
callable (prompt -> line), trace lines go to an output callable, and the
delay goes through an injectable sleep function, so tests can script a
whole run and execute it instantly.
"""

import logging
import re
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from .cpu.regs import Registers
from .cpu.decoder import (
    decode_instruction, disassemble, IllegalOpcode, Opcode,
)
from .mem.memory import Memory, MemoryAccessError, initialize
from .timing import SimConfig

logger = logging.getLogger(__name__)

MAX_INPUT_VALUE = 999

# Optional sign and ASCII digits only; no underscores, no other Unicode digits
INTEGER_RE = re.compile(r'\s*[+-]?[0-9]+\s*', re.ASCII)

READ_PROMPT = "Enter input value (0-999): "
INVALID_INPUT_MSG = "Invalid input! Please enter a value between 0 and 999."


class CPUState(Enum):
    RUNNING = 'RUNNING'
    HALTED_NORMAL = 'HALTED_NORMAL'
    HALTED_BOUNDS = 'HALTED_BOUNDS'
    HALTED_ERROR = 'HALTED_ERROR'


@dataclass
class RunResult:
    """Final machine state of one run, consumed by the report step."""
    state: CPUState
    memory: List[int]
    ac: int
    pc: int
    last_pc: Optional[int]
    cycles: int
    elapsed_ms: int
    error: Optional[str] = None
    trace: List[str] = field(default_factory=list)
    outputs: List[int] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state == CPUState.HALTED_NORMAL


class CPU:
    """Accumulator CPU with a fetch-decode-execute loop.

    Usage:
        cpu = CPU(config=SimConfig(BusSpeed.FAST, MemoryType.SRAM))
        result = cpu.run()          # prompts on stdin for READ
        print(result.ac, result.memory)
    """

    def __init__(self, memory: Optional[Memory] = None,
                 config: Optional[SimConfig] = None,
                 input_fn: Callable[[str], str] = input,
                 output: Callable[[str], None] = print,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.perf_counter):
        self.regs = Registers()
        self.mem = memory if memory is not None else initialize()
        self.config = config if config is not None else SimConfig()

        self._input = input_fn
        self._output = output
        self._sleep = sleep
        self._clock = clock

        self.state = CPUState.RUNNING
        self.error: Optional[str] = None
        self.last_pc: Optional[int] = None
        self.outputs: List[int] = []
        self._trace: List[str] = []

        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> Optional[CPUState]:
        """Execute one instruction. Returns the stop state if halted, else None."""
        if self.state != CPUState.RUNNING:
            return self.state

        pc = self.regs.PC
        if not self.mem.in_bounds(pc):
            self.state = CPUState.HALTED_BOUNDS
            self.error = f"PC {pc} outside memory bounds [0, {len(self.mem)})"
            logger.warning(f"Bounds halt: {self.error}")
            self._emit("Program Counter exceeds memory bounds, halting.")
            return self.state

        self._sleep(self.config.delay_seconds)

        word = self.mem.read(pc)
        self.regs.IR = word
        self.last_pc = pc
        logger.debug(f"{pc:02d}: {disassemble(word):10s} {self.regs.display()}")

        try:
            instr = decode_instruction(word)
            self._execute(instr.opcode, instr.address)
        except _HaltException:
            self.state = CPUState.HALTED_NORMAL
        except IllegalOpcode as e:
            self._halt_error(str(e), f"Error: Unknown instruction at PC = {pc}!")
        except MemoryAccessError as e:
            self._halt_error(str(e), f"Error: Address {e.address} out of range at PC = {pc}!")

        self.regs.advance()

        if self.state != CPUState.RUNNING:
            return self.state
        return None

    def run(self) -> RunResult:
        """Run until a halt state is reached and collect the result."""
        logger.info(f"Run started: {self.config.describe()}, "
                    f"delay {self.config.delay_ms} ms/instruction")
        start = self._clock()

        while self.step() is None:
            pass

        elapsed_ms = int((self._clock() - start) * 1000)
        logger.info(f"Run stopped: {self.state.value} after {self.regs.cycles} "
                    f"cycles, {elapsed_ms} ms")

        return RunResult(
            state=self.state,
            memory=self.mem.dump(),
            ac=self.regs.AC,
            pc=self.regs.PC,
            last_pc=self.last_pc,
            cycles=self.regs.cycles,
            elapsed_ms=elapsed_ms,
            error=self.error,
            trace=list(self._trace),
            outputs=list(self.outputs),
        )

    def _execute(self, opcode: Opcode, address: int):
        self._dispatch[opcode](address)

    def _halt_error(self, error: str, message: str):
        self.state = CPUState.HALTED_ERROR
        self.error = error
        logger.warning(f"Error halt at PC={self.regs.PC}: {error}")
        self._emit(message)

    def _emit(self, line: str):
        self._trace.append(line)
        self._output(line)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _build_dispatch(self) -> dict:
        """Build opcode → handler dispatch table."""
        return {
            Opcode.LOAD:  self._op_load,
            Opcode.ADD:   self._op_add,
            Opcode.STORE: self._op_store,
            Opcode.SUB:   self._op_sub,
            Opcode.READ:  self._op_read,
            Opcode.WRITE: self._op_write,
            Opcode.HALT:  self._op_halt,
        }

    def _op_load(self, address: int):
        self.regs.AC = self.mem.read(address)
        self._emit(f"LOAD from address {address}: AC = {self.regs.AC}")

    def _op_add(self, address: int):
        self.regs.AC += self.mem.read(address)
        self._emit(f"ADD from address {address}: AC = {self.regs.AC}")

    def _op_store(self, address: int):
        self.mem.write(address, self.regs.AC)
        self._emit(f"STORE to address {address}: memory[{address}] = {self.regs.AC}")

    def _op_sub(self, address: int):
        self.regs.AC -= self.mem.read(address)
        self._emit(f"SUB from address {address}: AC = {self.regs.AC}")

    def _op_read(self, address: int):
        """Read one line of input into memory.

        Bad input (not an integer, or outside 0..999) is reported and
        skipped; the cycle still counts.
        """
        if not self.mem.in_bounds(address):
            raise MemoryAccessError(address, len(self.mem))

        value = parse_input_value(self._read_line(READ_PROMPT))
        if value is None:
            logger.warning(f"Rejected READ input at PC={self.regs.PC}")
            self._emit(INVALID_INPUT_MSG)
            return

        self.mem.write(address, value)
        self._emit(f"READ to address {address}: input = {value}")

    def _op_write(self, address: int):
        value = self.mem.read(address)
        self.outputs.append(value)
        self._emit(f"WRITE from address {address}: output = {value}")

    def _op_halt(self, address: int):
        self._emit("HALT encountered. Stopping execution.")
        raise _HaltException("HALT")

    def _read_line(self, prompt: str) -> Optional[str]:
        try:
            return self._input(prompt)
        except EOFError:
            return None

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def get_trace(self) -> str:
        return '\n'.join(self._trace)

    def clear_trace(self):
        self._trace.clear()

    def reset(self, memory: Optional[Memory] = None):
        """Full emulator reset with a fresh memory image."""
        self.regs.reset()
        self.mem = memory if memory is not None else initialize()
        self.state = CPUState.RUNNING
        self.error = None
        self.last_pc = None
        self.outputs.clear()
        self._trace.clear()


def parse_int(text: Optional[str]) -> Optional[int]:
    """Parse a decimal integer line, or return None.

    Stricter than int(): digit-group underscores and non-ASCII digits
    are rejected.
    """
    if text is None or not INTEGER_RE.fullmatch(text):
        return None
    return int(text)


def parse_input_value(text: Optional[str]) -> Optional[int]:
    """Parse a READ input line. Returns None unless it is an int in 0..999."""
    value = parse_int(text)
    if value is None or not 0 <= value <= MAX_INPUT_VALUE:
        return None
    return value


# Internal exception for flow control
class _HaltException(Exception):
    pass
