"""
CHIP-8 Emulator — Display Surface + Keypad

The interpreter never renders anything itself. It talks to a display
surface through four calls:

  clear()                        — turn every pixel off
  draw_sprite(x, y, rows)        — XOR 8-pixel-wide rows at (x, y),
                                   wrapping on both axes; returns True
                                   if any lit pixel was turned off
  key_pressed(index)             — is hex key 0-F held?
  any_key_pressed()              — lowest held key index, or None

DisplaySurface is the contract. FrameBuffer is the headless
implementation used by the test-suite and the chip8run CLI; a windowed
host supplies its own subclass and maps host keys onto indices 0-F.

Keypad layout (hex key indices):
  1 2 3 C
  4 5 6 D
  7 8 9 E
  A 0 B F
"""

from typing import List, Optional, Sequence

SCREEN_WIDTH = 64
SCREEN_HEIGHT = 32
KEY_COUNT = 16
SPRITE_WIDTH = 8


class DisplaySurface:
    """Capability interface between the interpreter and its host."""

    def clear(self):
        raise NotImplementedError

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        raise NotImplementedError

    def key_pressed(self, index: int) -> bool:
        raise NotImplementedError

    def any_key_pressed(self) -> Optional[int]:
        raise NotImplementedError


class FrameBuffer(DisplaySurface):
    """Headless 64×32 monochrome surface with a 16-key keypad.

    Pixels are stored row-major as a list of bytearrays (0 = off,
    1 = on). Key state is set by the host through press()/release().
    """

    def __init__(self, width: int = SCREEN_WIDTH, height: int = SCREEN_HEIGHT):
        self.width = width
        self.height = height
        self._pixels: List[bytearray] = [bytearray(width) for _ in range(height)]
        self._keys: List[bool] = [False] * KEY_COUNT

    # --- Pixels ---

    def clear(self):
        for row in self._pixels:
            row[:] = bytes(self.width)

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        collided = False
        for i, line in enumerate(rows):
            py = (y + i) % self.height
            row = self._pixels[py]
            for j in range(SPRITE_WIDTH):
                if not (line >> (7 - j)) & 1:
                    continue
                px = (x + j) % self.width
                if row[px]:
                    collided = True
                row[px] ^= 1
        return collided

    def pixel(self, x: int, y: int) -> bool:
        return bool(self._pixels[y % self.height][x % self.width])

    def lit_count(self) -> int:
        """Number of pixels currently on."""
        return sum(sum(row) for row in self._pixels)

    def to_text(self, on: str = '#', off: str = '.') -> str:
        """Dump the screen as text, one line per pixel row."""
        return '\n'.join(
            ''.join(on if p else off for p in row) for row in self._pixels
        )

    # --- Keypad ---

    @staticmethod
    def _check_key(index: int):
        if not 0 <= index < KEY_COUNT:
            raise ValueError(f"Key index {index} outside 0-F")

    def press(self, index: int):
        self._check_key(index)
        self._keys[index] = True

    def release(self, index: int):
        self._check_key(index)
        self._keys[index] = False

    def key_pressed(self, index: int) -> bool:
        # Programs can test any byte value; only 0-F exist on the pad
        if not 0 <= index < KEY_COUNT:
            return False
        return self._keys[index]

    def any_key_pressed(self) -> Optional[int]:
        for index, down in enumerate(self._keys):
            if down:
                return index
        return None
