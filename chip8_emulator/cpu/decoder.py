"""
CHIP-8 Emulator — Opcode Decoder / Dispatch Table

Every CHIP-8 instruction is one 16-bit big-endian word. Decoding
splits it into fixed bit-fields:

  op   opcode & 0xF000          primary instruction group
  nnn  opcode & 0x0FFF          12-bit address / immediate
  n    opcode & 0x000F          4-bit immediate (sprite height, ALU sub-op)
  x    (opcode & 0x0F00) >> 8   register operand 1
  y    (opcode & 0x00F0) >> 4   register operand 2
  kk   opcode & 0x00FF          8-bit immediate

An instruction is identified by its group (high nibble) plus, for groups
that multiplex several instructions, a sub-tag taken from one field:

  group 0      nnn   ($0E0 CLS, $0EE RET)
  groups 5, 9  n     (must be 0)
  group 8      n     (ALU sub-op)
  groups E, F  kk
  all others   none

Anything not in OPCODES is unsupported. The 0nnn "SYS addr" call into
host machine code is not part of the interpreted set.
"""

from dataclasses import dataclass
from typing import Optional, Tuple


# ──────────────────────────────────────────────
# Sub-tag field per instruction group
# ──────────────────────────────────────────────

SUBTAG_FIELD = {
    0x0: 'nnn',
    0x5: 'n',
    0x8: 'n',
    0x9: 'n',
    0xE: 'kk',
    0xF: 'kk',
}


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: (group, sub_tag) -> (mnemonic, pattern)

OPCODES = {
    # ── Flow control ──
    (0x0, 0x0E0): ('CLS',        '00E0'),
    (0x0, 0x0EE): ('RET',        '00EE'),
    (0x1, None):  ('JP',         '1nnn'),
    (0x2, None):  ('CALL',       '2nnn'),
    (0xB, None):  ('JP_V0',      'Bnnn'),

    # ── Conditional skips ──
    (0x3, None):  ('SE_BYTE',    '3xkk'),
    (0x4, None):  ('SNE_BYTE',   '4xkk'),
    (0x5, 0x0):   ('SE_REG',     '5xy0'),
    (0x9, 0x0):   ('SNE_REG',    '9xy0'),
    (0xE, 0x9E):  ('SKP',        'Ex9E'),
    (0xE, 0xA1):  ('SKNP',       'ExA1'),

    # ── Immediates ──
    (0x6, None):  ('LD_BYTE',    '6xkk'),
    (0x7, None):  ('ADD_BYTE',   '7xkk'),
    (0xA, None):  ('LD_I',       'Annn'),
    (0xC, None):  ('RND',        'Cxkk'),

    # ── ALU (8xyN) ──
    (0x8, 0x0):   ('LD_REG',     '8xy0'),
    (0x8, 0x1):   ('OR',         '8xy1'),
    (0x8, 0x2):   ('AND',        '8xy2'),
    (0x8, 0x3):   ('XOR',        '8xy3'),
    (0x8, 0x4):   ('ADD_REG',    '8xy4'),
    (0x8, 0x5):   ('SUB',        '8xy5'),
    (0x8, 0x6):   ('SHR',        '8xy6'),
    (0x8, 0x7):   ('SUBN',       '8xy7'),
    (0x8, 0xE):   ('SHL',        '8xyE'),

    # ── Display ──
    (0xD, None):  ('DRW',        'Dxyn'),

    # ── Timers / keys / memory (FxKK) ──
    (0xF, 0x07):  ('LD_VX_DT',   'Fx07'),
    (0xF, 0x0A):  ('LD_VX_K',    'Fx0A'),
    (0xF, 0x15):  ('LD_DT_VX',   'Fx15'),
    (0xF, 0x18):  ('LD_ST_VX',   'Fx18'),
    (0xF, 0x1E):  ('ADD_I_VX',   'Fx1E'),
    (0xF, 0x29):  ('LD_F_VX',    'Fx29'),
    (0xF, 0x33):  ('LD_B_VX',    'Fx33'),
    (0xF, 0x55):  ('LD_MEM_VX',  'Fx55'),
    (0xF, 0x65):  ('LD_VX_MEM',  'Fx65'),
}


class UnsupportedOpcode(Exception):
    """Raised when an opcode matches no entry in OPCODES."""

    def __init__(self, opcode: int, pc: Optional[int] = None):
        self.opcode = opcode
        self.pc = pc
        where = f" at ${pc:03X}" if pc is not None else ""
        super().__init__(f"Unsupported opcode ${opcode:04X}{where}")


@dataclass(frozen=True)
class Instruction:
    """A decoded instruction word with all bit-fields extracted."""
    opcode: int
    op: int
    nnn: int
    n: int
    x: int
    y: int
    kk: int

    @property
    def group(self) -> int:
        return self.op >> 12

    @property
    def key(self) -> Tuple[int, Optional[int]]:
        """(group, sub_tag) lookup key into OPCODES."""
        field = SUBTAG_FIELD.get(self.group)
        return (self.group, getattr(self, field) if field else None)


def decode(opcode: int) -> Instruction:
    """Split a 16-bit opcode into its fields."""
    opcode &= 0xFFFF
    return Instruction(
        opcode=opcode,
        op=opcode & 0xF000,
        nnn=opcode & 0x0FFF,
        n=opcode & 0x000F,
        x=(opcode & 0x0F00) >> 8,
        y=(opcode & 0x00F0) >> 4,
        kk=opcode & 0x00FF,
    )


def lookup(ins: Instruction, pc: Optional[int] = None) -> str:
    """Return the mnemonic for a decoded instruction.

    Raises UnsupportedOpcode if the (group, sub_tag) pair is undefined.
    """
    entry = OPCODES.get(ins.key)
    if entry is None:
        raise UnsupportedOpcode(ins.opcode, pc)
    return entry[0]


def decode_opcode(memory, pc: int) -> Tuple[str, Instruction]:
    """Fetch the word at PC and decode it.

    Returns: (mnemonic, instruction)

    Out-of-range PC propagates MemoryAccessError from the fetch;
    an unknown word raises UnsupportedOpcode.
    """
    ins = decode(memory.read16(pc))
    return lookup(ins, pc), ins
