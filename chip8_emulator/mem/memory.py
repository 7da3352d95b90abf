"""
CHIP-8 Emulator — 4K Memory Map

Memory map:
  $000–$04F  Font table (16 glyphs × 5 bytes, written at reset)
  $050–$1FF  Reserved (interpreter area, writable scratch)
  $200–$FFF  Program image + program work RAM

Every access is bounds-checked. Reads or writes outside $000–$FFF raise
MemoryAccessError; nothing wraps around. Writes into the font table
($000–$04F) are dropped so the glyphs stay intact.
"""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

MEMORY_SIZE = 0x1000
FONT_START = 0x000
FONT_END = FONT_START + 16 * 5
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

GLYPH_SIZE = 5

# Hex digit glyphs 0-F, 4 pixels wide (high nibble), 5 rows tall
FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])


class MemoryAccessError(Exception):
    """Raised when an access falls outside the 4K address space."""

    def __init__(self, addr: int, length: int = 1, write: bool = False):
        self.addr = addr
        self.length = length
        self.write = write
        kind = 'write' if write else 'read'
        super().__init__(
            f"Out-of-range {kind} of {length} byte(s) at ${addr:04X} "
            f"(memory ends at ${MEMORY_SIZE - 1:03X})")


class ProgramTooLarge(ValueError):
    """Raised when a program image does not fit above $200."""

    def __init__(self, size: int):
        self.size = size
        super().__init__(
            f"Program is {size} bytes, at most {MAX_PROGRAM_SIZE} fit "
            f"at ${PROGRAM_START:03X}")


class Memory:
    """4096-byte CHIP-8 address space.

    The font table is written by load_font() during reset and is never
    writable by programs afterwards.
    """

    def __init__(self):
        self._mem = bytearray(MEMORY_SIZE)

    def __len__(self) -> int:
        return MEMORY_SIZE

    # --- Bounds checks ---

    @staticmethod
    def _check(addr: int, length: int = 1, write: bool = False):
        if addr < 0 or length < 0 or addr + length > MEMORY_SIZE:
            raise MemoryAccessError(addr, length, write)

    # --- Core read/write ---

    def read8(self, addr: int) -> int:
        """Read one byte."""
        self._check(addr)
        return self._mem[addr]

    def write8(self, addr: int, value: int):
        """Write one byte. Writes into the font table are dropped."""
        self._check(addr, write=True)
        if FONT_START <= addr < FONT_END:
            logger.debug("Dropped write of $%02X to font table $%03X",
                         value & 0xFF, addr)
            return
        self._mem[addr] = value & 0xFF

    def read16(self, addr: int) -> int:
        """Read 16-bit value (big-endian, high byte at addr)."""
        self._check(addr, 2)
        return (self._mem[addr] << 8) | self._mem[addr + 1]

    def read_block(self, addr: int, length: int) -> bytes:
        """Read `length` consecutive bytes starting at addr."""
        self._check(addr, length)
        return bytes(self._mem[addr:addr + length])

    def write_block(self, addr: int, data: bytes):
        """Write consecutive bytes through write8 (font table dropped)."""
        self._check(addr, len(data), write=True)
        for i, byte in enumerate(data):
            self.write8(addr + i, byte)

    # --- Bulk load ---

    def load_font(self):
        """Write the built-in hex font at $000. Bypasses write protection."""
        self._mem[FONT_START:FONT_START + len(FONT_SET)] = FONT_SET

    def load_program(self, data: bytes):
        """Copy a program image verbatim to $200.

        Raises ProgramTooLarge if it would run past $FFF.
        """
        data = bytes(data)
        if len(data) > MAX_PROGRAM_SIZE:
            raise ProgramTooLarge(len(data))
        self._mem[PROGRAM_START:PROGRAM_START + len(data)] = data


def glyph_address(digit: int) -> int:
    """Font sprite address for a hex digit."""
    return FONT_START + digit * GLYPH_SIZE


def load_rom_file(path: Union[str, Path]) -> bytes:
    """Read a ROM image from disk, rejecting images that cannot fit."""
    data = Path(path).read_bytes()
    if len(data) > MAX_PROGRAM_SIZE:
        raise ProgramTooLarge(len(data))
    return data
