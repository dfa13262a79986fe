"""
accsim — CPU Register Set

Register model:
  PC  — program counter, index of the next word to fetch
  AC  — accumulator, unbounded signed integer
  IR  — instruction register, the last word fetched
  cycles — number of instructions executed so far
"""


class Registers:
    """Accumulator machine register set."""

    __slots__ = ('PC', 'AC', 'IR', 'cycles')

    def __init__(self):
        self.PC: int = 0      # Program counter
        self.AC: int = 0      # Accumulator
        self.IR: int = 0      # Instruction register
        self.cycles: int = 0  # Executed instruction count

    def advance(self):
        """Move PC to the next word and count the cycle."""
        self.PC += 1
        self.cycles += 1

    def display(self) -> str:
        """Format register state for the debug log."""
        return f"PC={self.PC:02d} AC={self.AC} IR={self.IR:04d} CYC={self.cycles}"

    def reset(self):
        """Reset CPU to power-on state."""
        self.PC = 0
        self.AC = 0
        self.IR = 0
        self.cycles = 0
