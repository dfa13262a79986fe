"""
accsim — 16-Word Memory Image

Memory layout:
  0–5    Demonstration program (READ, LOAD, ADD, STORE, SUB, HALT)
  6–10   Zero
  11–14  Data cells used by the demonstration program
  15     Zero

Words are plain signed Python ints. Instructions and data share the same
cells; an instruction is just a word whose value is opcode*1000 + address.

Every access is bounds-checked. An address outside [0, 16) raises
MemoryAccessError, which the execution engine turns into a halted run.
"""

from typing import Iterable, List

from ..cpu.decoder import LOAD, ADD, STORE, SUB, READ, HALT, encode_instruction

MEMORY_SIZE = 16

# Data cells referenced by the seed program
INPUT_CELL = 11
ADDEND_CELL = 12
RESULT_CELL = 13
SUBTRAHEND_CELL = 14

SEED_PROGRAM = (
    encode_instruction(READ, INPUT_CELL),        # 5011
    encode_instruction(LOAD, INPUT_CELL),        # 1011
    encode_instruction(ADD, ADDEND_CELL),        # 2012
    encode_instruction(STORE, RESULT_CELL),      # 3013
    encode_instruction(SUB, SUBTRAHEND_CELL),    # 4014
    encode_instruction(HALT, 0),                 # 7000
)


class MemoryAccessError(Exception):
    """Raised when an address falls outside the memory array."""
    def __init__(self, address: int, size: int = MEMORY_SIZE):
        self.address = address
        self.size = size
        super().__init__(f"Address {address} outside memory bounds [0, {size})")


class Memory:
    """Fixed-size word-addressable memory.

    Usage:
        mem = initialize()
        mem.write(11, 5)
        mem.read(11)   # 5
    """

    def __init__(self, size: int = MEMORY_SIZE):
        self._words: List[int] = [0] * size

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self):
        return iter(self._words)

    def in_bounds(self, address: int) -> bool:
        if not isinstance(address, int):
            raise TypeError(f"Memory address must be an int, not {type(address).__name__}")
        return 0 <= address < len(self._words)

    # --- Core read/write ---

    def read(self, address: int) -> int:
        """Read the word at address. Raises MemoryAccessError if out of range."""
        if not self.in_bounds(address):
            raise MemoryAccessError(address, len(self._words))
        return self._words[address]

    def write(self, address: int, value: int):
        """Write a word at address. Raises MemoryAccessError if out of range."""
        if not self.in_bounds(address):
            raise MemoryAccessError(address, len(self._words))
        if not isinstance(value, int):
            raise TypeError(f"Memory word must be an int, not {type(value).__name__}")
        self._words[address] = value

    # --- Bulk load ---

    def load_program(self, words: Iterable[int], base: int = 0):
        """Copy a sequence of instruction/data words starting at base."""
        for offset, word in enumerate(words):
            self.write(base + offset, word)

    def reset(self):
        """Zero every word."""
        for i in range(len(self._words)):
            self._words[i] = 0

    def dump(self) -> List[int]:
        """Return a copy of all words (index = address)."""
        return list(self._words)


def initialize() -> Memory:
    """Build a fresh memory image holding the demonstration program.

    Always returns the same 16 words; nothing from a previous run leaks in.
    """
    mem = Memory()
    mem.load_program(SEED_PROGRAM)
    return mem
