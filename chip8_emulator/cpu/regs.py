"""
CHIP-8 Emulator — CPU Register Set + Call Stack

Register model:
  V0–VF  — 16 general-purpose 8-bit registers
           VF doubles as the carry / not-borrow / collision flag and is
           overwritten as a side effect by 8xy4–8xyE and Dxyn
  I      — 16-bit index register (sprite source, BCD / dump / load base)
  PC     — 16-bit program counter, starts at $200
  SP     — stack pointer, index of the next free stack slot (0 = empty)
  stack  — 16 return addresses

Stack faults are fatal: push with SP=16 raises StackOverflow and pop with
SP=0 raises StackUnderflow, in both cases before anything is modified.
"""

from typing import List

from ..mem.memory import PROGRAM_START

STACK_DEPTH = 16
VF = 0xF


class StackError(Exception):
    """Base for call stack faults."""
    pass


class StackOverflow(StackError):
    """CALL with all 16 stack slots in use."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(
            f"Stack overflow: call at ${pc:03X} with {STACK_DEPTH} frames in use")


class StackUnderflow(StackError):
    """RET with an empty stack."""

    def __init__(self, pc: int):
        self.pc = pc
        super().__init__(f"Stack underflow: return at ${pc:03X} with empty stack")


class Registers:
    """CHIP-8 register file and call stack."""

    __slots__ = ('V', 'I', 'PC', 'SP', 'stack')

    def __init__(self):
        self.V: List[int] = [0] * 16
        self.I: int = 0
        self.PC: int = PROGRAM_START
        self.SP: int = 0
        self.stack: List[int] = [0] * STACK_DEPTH

    # --- Stack operations ---

    def push(self, addr: int):
        """Store a return address at SP, then increment SP."""
        if self.SP >= STACK_DEPTH:
            raise StackOverflow(self.PC)
        self.stack[self.SP] = addr & 0xFFFF
        self.SP += 1

    def pop(self) -> int:
        """Decrement SP, then return the address stored there."""
        if self.SP <= 0:
            raise StackUnderflow(self.PC)
        self.SP -= 1
        return self.stack[self.SP]

    # --- Display ---

    def display(self) -> str:
        """Format register state on one line for logs and the CLI."""
        v = ' '.join(f'V{i:X}={val:02X}' for i, val in enumerate(self.V))
        return f"PC={self.PC:03X} I={self.I:03X} SP={self.SP:X} {v}"

    def reset(self):
        """Reset to power-on state: PC at $200, empty stack, zeroed V."""
        self.V = [0] * 16
        self.I = 0
        self.PC = PROGRAM_START
        self.SP = 0
        self.stack = [0] * STACK_DEPTH
