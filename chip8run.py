#!/usr/bin/env python3
"""
chip8run — headless CHIP-8 runner

Usage:
    python chip8run.py <rom.ch8> [--steps N] [--seed S] [--screen]
                                 [--press KEY ...] [--verbose] [--log-dir DIR]

Loads the ROM at $200, runs it against an off-screen 64x32 frame buffer
for a fixed number of steps (one step = one host tick), then prints why
it stopped and the final register state.

Exit status:
    0  ran for the requested number of steps
    1  ROM unreadable / too large, or a stack or memory fault

Examples:
    python chip8run.py pong.ch8 --steps 5000 --screen
    python chip8run.py test.ch8 --seed 1 --verbose --log-dir logs
    python chip8run.py keypad.ch8 --press 5 --screen
"""

import argparse
import logging
import random
import sys

from chip8_emulator import (
    __version__, Chip8Emulator, FrameBuffer, ProgramTooLarge, StopReason,
    load_rom_file,
)
from chip8_emulator.log_setup import default_log_file, setup_logging

DEFAULT_STEPS = 1000


def parse_key_arg(value: str) -> int:
    """Parse a hex keypad index 0-F."""
    try:
        key = int(value, 16)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a hex key: {value!r}")
    if not 0 <= key <= 0xF:
        raise argparse.ArgumentTypeError(f"key must be 0-F, got {value!r}")
    return key


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8run",
        description="Run a CHIP-8 ROM headless and report the final machine state",
    )
    parser.add_argument("rom", help="CHIP-8 program image (.ch8)")
    parser.add_argument("--steps", type=int, default=DEFAULT_STEPS,
                        help=f"Number of steps to run (default: {DEFAULT_STEPS})")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the Cxkk random source")
    parser.add_argument("--press", type=parse_key_arg, action="append",
                        default=[], metavar="KEY",
                        help="Hold hex key 0-F down for the whole run (repeatable)")
    parser.add_argument("--screen", action="store_true",
                        help="Print the final screen as text")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Show INFO messages on the console")
    parser.add_argument("--log-dir", default=None,
                        help="Write a full DEBUG trace log into this directory")
    parser.add_argument("--version", action="version",
                        version=f"chip8run {__version__}")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    log_file = default_log_file(args.log_dir) if args.log_dir else None
    setup_logging(
        console_level=logging.INFO if args.verbose else logging.WARNING,
        log_file=log_file,
    )

    try:
        rom = load_rom_file(args.rom)
    except FileNotFoundError:
        print(f"Error: File not found: {args.rom}", file=sys.stderr)
        return 1
    except ProgramTooLarge as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error reading {args.rom}: {e}", file=sys.stderr)
        return 1

    fb = FrameBuffer()
    for key in args.press:
        fb.press(key)

    rng = random.Random(args.seed)
    emu = Chip8Emulator(fb, rom, rng=rng)
    reason = emu.run(max_steps=args.steps)

    print(f"Stopped: {reason.value} after {emu.steps} steps")
    print(emu.regs.display())
    if args.screen:
        print(fb.to_text())

    return 0 if reason is StopReason.TIMEOUT else 1


if __name__ == "__main__":
    sys.exit(main())
