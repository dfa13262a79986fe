#!/usr/bin/env python3
"""
cpusim — Accumulator CPU Simulator CLI

Usage:
    python cpusim.py [--bus-speed 1|2|3] [--memory-type 1|2] [--no-delay]
                     [--once] [--no-clear] [--verbose]

Without flags, every run asks for bus speed and memory type. Flags
preselect them for all runs.

Examples:
    python cpusim.py                             # interactive
    python cpusim.py --bus-speed 3 --memory-type 2
    python cpusim.py --no-delay --once -v        # one fast run, debug log
"""

import argparse
import logging
import sys
import os

# Allow running from project root or as module
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from accsim import __version__
from accsim.console import run_session, clear_screen

logger = logging.getLogger("cpusim")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cpusim",
        description="Accumulator CPU simulator (7 opcodes, 16-word memory)",
        epilog="Bus speed: 1=Fast 2=Medium 3=Slow. Memory type: 1=SRAM 2=DRAM.",
    )
    parser.add_argument("--bus-speed", type=int, choices=[1, 2, 3], default=None,
                        help="Preselect bus speed (default: ask each run)")
    parser.add_argument("--memory-type", type=int, choices=[1, 2], default=None,
                        help="Preselect memory type (default: ask each run)")
    parser.add_argument("--no-delay", action="store_true",
                        help="Skip the artificial per-instruction delay")
    parser.add_argument("--once", action="store_true",
                        help="Do not offer to run again")
    parser.add_argument("--no-clear", action="store_true",
                        help="Do not clear the screen between runs")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Log fetch/decode details to stderr")
    parser.add_argument("--version", action="version",
                        version=f"cpusim {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )

    try:
        results = run_session(
            clear=(lambda: None) if args.no_clear else clear_screen,
            bus_speed=args.bus_speed,
            memory_type=args.memory_type,
            no_delay=args.no_delay,
            once=args.once,
        )
    except EOFError:
        print("\nInput closed, exiting.", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Internal simulator error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 2

    logger.info(f"Session finished after {len(results)} run(s)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
