"""
accsim — Instruction Decoder / Opcode Table

Instruction word format (decimal packing, one word per instruction):

    word = opcode * 1000 + address

    opcode   1..7     operation selector (top digits)
    address  0..999   operand cell (low three digits)

Opcode table:
  1  LOAD   AC = mem[addr]
  2  ADD    AC = AC + mem[addr]
  3  STORE  mem[addr] = AC
  4  SUB    AC = AC - mem[addr]
  5  READ   mem[addr] = <input 0..999>
  6  WRITE  output mem[addr]
  7  HALT   stop execution

Any other opcode value (0, 8, 9, negative words, ...) is illegal.
"""

from dataclasses import dataclass
from enum import IntEnum

WORD_RADIX = 1000
MAX_ADDRESS = WORD_RADIX - 1


class Opcode(IntEnum):
    LOAD = 1
    ADD = 2
    STORE = 3
    SUB = 4
    READ = 5
    WRITE = 6
    HALT = 7


LOAD = Opcode.LOAD
ADD = Opcode.ADD
STORE = Opcode.STORE
SUB = Opcode.SUB
READ = Opcode.READ
WRITE = Opcode.WRITE
HALT = Opcode.HALT

# Opcodes whose address field names a memory cell
MEMORY_OPERAND = frozenset({LOAD, ADD, STORE, SUB, READ, WRITE})


class IllegalOpcode(Exception):
    """Raised when a word does not decode to a known opcode."""
    def __init__(self, word: int, opcode: int):
        self.word = word
        self.opcode = opcode
        super().__init__(f"Illegal opcode {opcode} in word {word}")


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word."""
    opcode: Opcode
    address: int

    @property
    def mnemonic(self) -> str:
        return self.opcode.name

    def encode(self) -> int:
        return encode_instruction(self.opcode, self.address)

    def __str__(self) -> str:
        if self.opcode in MEMORY_OPERAND:
            return f"{self.mnemonic:5s} {self.address:03d}"
        return self.mnemonic


def split_word(word: int):
    """Split a word into (opcode_field, address_field) without validation."""
    return divmod(word, WORD_RADIX)


def decode_instruction(word: int) -> Instruction:
    """Decode an instruction word. Raises IllegalOpcode for unknown opcodes."""
    op, address = split_word(word)
    try:
        opcode = Opcode(op)
    except ValueError:
        raise IllegalOpcode(word, op) from None
    return Instruction(opcode, address)


def encode_instruction(opcode: int, address: int) -> int:
    """Pack opcode and address into a single instruction word."""
    opcode = Opcode(opcode)
    if not 0 <= address <= MAX_ADDRESS:
        raise ValueError(f"Address {address} does not fit in 3 digits")
    return int(opcode) * WORD_RADIX + address


def disassemble(word: int) -> str:
    """Render a word as assembly text, or as raw data if it is not an instruction."""
    try:
        return str(decode_instruction(word))
    except IllegalOpcode:
        return f".WORD {word}"
