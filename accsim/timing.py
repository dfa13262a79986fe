"""
accsim — Bus / Memory Timing Configuration
==========================================

The simulator has no cycle-accurate timing. Each instruction is preceded
by one artificial sleep whose length depends on the selected bus speed
and memory type:

    Bus speed      Base delay
    1  Fast          10 ms
    2  Medium        50 ms
    3  Slow         100 ms

    DRAM adds 20 ms per instruction (refresh penalty). SRAM adds nothing.

These values only change how long a run takes, never what it computes.
"""

from dataclasses import dataclass
from enum import IntEnum


class BusSpeed(IntEnum):
    FAST = 1
    MEDIUM = 2
    SLOW = 3


class MemoryType(IntEnum):
    SRAM = 1
    DRAM = 2


# =============================================================================
#  DELAY TABLE (milliseconds)
# =============================================================================
BASE_DELAY_MS = {
    BusSpeed.FAST: 10,
    BusSpeed.MEDIUM: 50,
    BusSpeed.SLOW: 100,
}

DRAM_PENALTY_MS = 20

BUS_SPEED_NAMES = {
    BusSpeed.FAST: "Fast",
    BusSpeed.MEDIUM: "Medium",
    BusSpeed.SLOW: "Slow",
}

MEMORY_TYPE_NAMES = {
    MemoryType.SRAM: "SRAM (Static RAM)",
    MemoryType.DRAM: "DRAM (Dynamic RAM)",
}


def delay_ms(bus_speed: BusSpeed, memory_type: MemoryType) -> int:
    """Per-instruction delay in milliseconds for a bus/memory combination."""
    delay = BASE_DELAY_MS[BusSpeed(bus_speed)]
    if MemoryType(memory_type) == MemoryType.DRAM:
        delay += DRAM_PENALTY_MS
    return delay


def describe_bus_speed(bus_speed: int) -> str:
    try:
        return BUS_SPEED_NAMES[BusSpeed(bus_speed)]
    except ValueError:
        return "Unknown"


def describe_memory_type(memory_type: int) -> str:
    try:
        return MEMORY_TYPE_NAMES[MemoryType(memory_type)]
    except ValueError:
        return "Unknown"


@dataclass(frozen=True)
class SimConfig:
    """Configuration chosen once per run."""
    bus_speed: BusSpeed = BusSpeed.FAST
    memory_type: MemoryType = MemoryType.SRAM
    no_delay: bool = False

    @property
    def delay_ms(self) -> int:
        if self.no_delay:
            return 0
        return delay_ms(self.bus_speed, self.memory_type)

    @property
    def delay_seconds(self) -> float:
        return self.delay_ms / 1000.0

    def describe(self) -> str:
        return (f"Bus Speed: {describe_bus_speed(self.bus_speed)} and "
                f"Memory Type: {describe_memory_type(self.memory_type)}")
