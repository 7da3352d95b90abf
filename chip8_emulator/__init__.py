"""
CHIP-8 Emulator
===============
An interpreter for the base CHIP-8 instruction set: 4K memory, sixteen
8-bit registers, a 16-level call stack and two 60 Hz timers.

Architecture:
    ┌────────────┐    ┌──────────┐    ┌──────────┐    ┌──────────────────┐
    │ ROM (.ch8) │───>│  Memory  │───>│ Decoder  │───>│ Chip8Emulator    │
    │  at $200   │    │ (4K map) │    │ (fields) │    │ (dispatch table) │
    └────────────┘    └──────────┘    └──────────┘    └────────┬─────────┘
                                                               │
                                                      ┌────────▼─────────┐
                                                      │ DisplaySurface   │
                                                      │ (pixels + keys)  │
                                                      └──────────────────┘

    - mem/memory.py:      bounds-checked address space, font table, ROM load
    - cpu/regs.py:        V0-VF, I, PC, SP + call stack
    - cpu/decoder.py:     opcode fields, (group, sub-tag) -> mnemonic table
    - cpu/alu.py:         8xyN arithmetic with VF flag results
    - periph/timer.py:    delay / sound timers
    - periph/display.py:  display surface contract + headless FrameBuffer
    - emu.py:             step() / run() and the instruction handlers
"""

__version__ = "0.1.0"

from .emu import Chip8Emulator, StopReason
from .cpu.decoder import UnsupportedOpcode
from .cpu.regs import StackError, StackOverflow, StackUnderflow
from .mem.memory import MemoryAccessError, ProgramTooLarge, load_rom_file
from .periph.display import DisplaySurface, FrameBuffer
