"""
accsim — Console Front End

Menus, prompts and the final report around the CPU core:

    ┌───────────┐    ┌────────────┐    ┌─────────┐    ┌────────┐    ┌───────────┐
    │ Bus/Mem   │───>│ SimConfig  │───>│ CPU.run │───>│ Report │───>│ Run again?│──┐
    │ prompts   │    │ (delay ms) │    │ (trace) │    │        │    │  y / yes  │  │
    └───────────┘    └────────────┘    └─────────┘    └────────┘    └───────────┘  │
          ^                                                                         │
          └─────────────────────────────────────────────────────────────────────────┘

All console access goes through an input callable (prompt -> line) and an
output callable (line -> None); the defaults are the builtins input/print.
"""

import logging
import sys
import time
from typing import Callable, List, Optional

from .emu import CPU, RunResult, parse_int
from .mem.memory import initialize
from .timing import BusSpeed, MemoryType, SimConfig

logger = logging.getLogger(__name__)

BANNER = "Welcome to the CPU Simulation!"
BUS_SPEED_PROMPT = "Select Bus Speed: 1 (Fast), 2 (Medium), 3 (Slow)"
MEMORY_TYPE_PROMPT = "Select Memory Type: 1 (SRAM), 2 (DRAM)"
RUN_AGAIN_PROMPT = "Do you want to run the simulation again? (y/n)"

YES_ANSWERS = ("y", "yes")


def clear_screen():
    """Clear the terminal (ANSI), only when stdout is a terminal."""
    if sys.stdout.isatty():
        sys.stdout.write("\033[2J\033[H")
        sys.stdout.flush()


def prompt_choice(prompt: str, low: int, high: int,
                  input_fn: Callable[[str], str] = input,
                  output: Callable[[str], None] = print) -> int:
    """Ask until the answer is an integer in [low, high].

    EOFError from input_fn propagates; there is no sensible default.
    """
    while True:
        output(prompt)
        answer = input_fn("")
        choice = parse_int(answer)
        if choice is not None and low <= choice <= high:
            return choice
        logger.debug(f"Rejected menu answer {answer!r}")
        output(f"Invalid choice. Please enter a number between {low} and {high}.")


def read_config(input_fn: Callable[[str], str] = input,
                output: Callable[[str], None] = print,
                bus_speed: Optional[int] = None,
                memory_type: Optional[int] = None,
                no_delay: bool = False) -> SimConfig:
    """Collect bus speed and memory type, prompting for whatever is not preset."""
    if bus_speed is None:
        bus_speed = prompt_choice(BUS_SPEED_PROMPT, 1, 3, input_fn, output)
    if memory_type is None:
        memory_type = prompt_choice(MEMORY_TYPE_PROMPT, 1, 2, input_fn, output)
    return SimConfig(BusSpeed(bus_speed), MemoryType(memory_type), no_delay=no_delay)


def wants_another_run(answer: Optional[str]) -> bool:
    """True for exactly 'y' or 'yes' in any case; whitespace is not trimmed."""
    if answer is None:
        return False
    return answer.lower() in YES_ANSWERS


def ask_run_again(input_fn: Callable[[str], str] = input,
                  output: Callable[[str], None] = print) -> bool:
    output(RUN_AGAIN_PROMPT)
    try:
        answer = input_fn("")
    except EOFError:
        answer = None
    return wants_another_run(answer)


def format_report(result: RunResult) -> List[str]:
    """Final memory dump, registers and elapsed time as report lines."""
    lines = ["Final Memory State:"]
    for address, value in enumerate(result.memory):
        lines.append(f"memory[{address}] = {value}")
    lines.append(f"Accumulator (AC) = {result.ac}")
    lines.append(f"Program Counter (PC) = {result.pc}")
    lines.append(f"Total Execution Time: {result.elapsed_ms} ms")
    return lines


def run_once(config: SimConfig,
             input_fn: Callable[[str], str] = input,
             output: Callable[[str], None] = print,
             sleep: Callable[[float], None] = time.sleep) -> RunResult:
    """One full run: fresh memory, execute, print the report."""
    output(f"Starting CPU Simulation with {config.describe()}")
    cpu = CPU(memory=initialize(), config=config,
              input_fn=input_fn, output=output, sleep=sleep)
    result = cpu.run()
    for line in format_report(result):
        output(line)
    return result


def run_session(input_fn: Callable[[str], str] = input,
                output: Callable[[str], None] = print,
                sleep: Callable[[float], None] = time.sleep,
                clear: Callable[[], None] = clear_screen,
                bus_speed: Optional[int] = None,
                memory_type: Optional[int] = None,
                no_delay: bool = False,
                once: bool = False) -> List[RunResult]:
    """Run the simulation repeatedly until the user declines another run.

    Returns the results of every run, in order.
    """
    results = []
    while True:
        clear()
        output(BANNER)
        config = read_config(input_fn, output, bus_speed, memory_type, no_delay)
        results.append(run_once(config, input_fn, output, sleep))
        if once or not ask_run_again(input_fn, output):
            break
        logger.info(f"Restarting simulation (run {len(results) + 1})")
    return results
