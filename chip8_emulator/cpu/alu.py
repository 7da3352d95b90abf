"""
CHIP-8 Emulator — ALU Operations

The 8xyN group computes on (Vx, Vy) and some members report a side
bit through VF. Each function here returns a tuple (result_byte, vf)
and the caller writes VF first, then Vx. When x == F the result
therefore lands last and wins over the flag.

Flag conventions:
  add8   VF = 1 on unsigned carry out of bit 7 (sum > 0xFF)
  sub8   VF = 1 when NO borrow occurs (minuend >= subtrahend)
  shr8   VF = bit 0 shifted out
  shl8   VF = bit 7 shifted out
"""

from typing import Tuple


def add8(a: int, b: int) -> Tuple[int, int]:
    """8xy4: a + b truncated to 8 bits, VF = carry."""
    result = a + b
    return (result & 0xFF, 1 if result > 0xFF else 0)


def sub8(a: int, b: int) -> Tuple[int, int]:
    """8xy5 / 8xy7: a - b truncated to 8 bits, VF = not-borrow.

    8xy7 calls this with the operands reversed (Vy - Vx).
    """
    return ((a - b) & 0xFF, 1 if a >= b else 0)


def shr8(a: int) -> Tuple[int, int]:
    """8xy6: logical shift right by one, VF = old bit 0."""
    return (a >> 1, a & 0x01)


def shl8(a: int) -> Tuple[int, int]:
    """8xyE: shift left by one truncated to 8 bits, VF = old bit 7."""
    return ((a << 1) & 0xFF, (a >> 7) & 0x01)


def add8_nocarry(a: int, b: int) -> int:
    """7xkk: a + b truncated to 8 bits, VF untouched."""
    return (a + b) & 0xFF


def bcd(value: int) -> Tuple[int, int, int]:
    """Fx33: split a byte into (hundreds, tens, units)."""
    return (value // 100, (value // 10) % 10, value % 10)
