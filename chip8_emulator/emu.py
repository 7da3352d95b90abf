"""
CHIP-8 Emulator — Main Interpreter Class

Integrates:
  - CPU registers + call stack (regs.py)
  - 4K memory map + font table (memory.py)
  - Opcode decoder (decoder.py)
  - ALU operations (alu.py)
  - Delay / sound timers (timer.py)
  - Display surface + keypad (display.py, supplied by the host)

Execution model (one call to step() per host tick):
  1. Decrement delay and sound timers (clamped at 0)
  2. Fetch the big-endian opcode word at PC
  3. Decode fields, look up the instruction
  4. Execute the handler: mutate registers/memory, call the display
  5. Advance PC by 2, unless the handler set PC itself

Fault policy:
  - Unsupported opcode: logged at WARNING, PC advances by 2, no stop
  - Stack overflow / underflow: StackError raised from step()
  - Memory access outside $000–$FFF: MemoryAccessError raised from step()

run() turns the fatal faults into a StopReason.
"""

import logging
import random
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional, Union

from .cpu import alu
from .cpu.decoder import Instruction, UnsupportedOpcode, decode_opcode
from .cpu.regs import Registers, StackError, VF
from .mem.memory import Memory, MemoryAccessError, glyph_address, load_rom_file
from .periph.display import DisplaySurface
from .periph.timer import Timers

logger = logging.getLogger(__name__)


class StopReason(Enum):
    TIMEOUT = 'TIMEOUT'
    STACK_FAULT = 'STACK_FAULT'
    MEMORY_FAULT = 'MEMORY_FAULT'


class Chip8Emulator:
    """CHIP-8 interpreter.

    Owns the whole machine state. The display surface is the only way
    out to the host: screen clears, sprite draws and key reads.

    Usage:
        fb = FrameBuffer()
        emu = Chip8Emulator(fb, Path('pong.ch8').read_bytes())
        reason = emu.run(max_steps=10_000)
        print(fb.to_text())
    """

    DEFAULT_MAX_STEPS = 1_000_000

    def __init__(self, display: DisplaySurface, program: bytes = b'',
                 rng: Optional[random.Random] = None):
        self.display = display
        self.rng = rng if rng is not None else random.Random()

        self.regs = Registers()
        self.mem = Memory()
        self.timers = Timers()

        self.steps = 0

        self._dispatch: Dict[str, Callable[[Instruction], bool]] = \
            self._build_dispatch()

        self.reset()
        if program:
            self.load_program(program)

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def reset(self):
        """Return to power-on state. Program bytes above $200 are kept."""
        self.mem.load_font()
        self.regs.reset()
        self.timers.reset()
        self.steps = 0

    def load_program(self, path_or_data: Union[str, Path, bytes]):
        """Copy a program image to $200 and point PC at it.

        Accepts a ROM file path or raw bytes. Raises ProgramTooLarge if
        the image does not fit.
        """
        if isinstance(path_or_data, (str, Path)):
            data = load_rom_file(path_or_data)
        else:
            data = bytes(path_or_data)
        self.mem.load_program(data)
        self.regs.reset()
        logger.info("Loaded %d byte program at $%03X", len(data), self.regs.PC)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self):
        """Execute exactly one instruction.

        Timers tick and the step counter advances before the fetch, so
        both have moved even when the instruction faults. Raises
        StackError or MemoryAccessError on a fatal fault; V, I, PC, SP
        and the stack are left as they were before that instruction.
        """
        self.timers.tick()
        self.steps += 1
        pc = self.regs.PC

        try:
            mnem, ins = decode_opcode(self.mem, pc)
        except UnsupportedOpcode as e:
            logger.warning("%s, skipping", e)
            self.regs.PC = pc + 2
            return

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%03X: %04X %s", pc, ins.opcode, mnem)

        jumped = self._dispatch[mnem](ins)
        if not jumped:
            self.regs.PC += 2

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Step until max_steps have run or a fatal fault occurs."""
        if max_steps is None:
            max_steps = self.DEFAULT_MAX_STEPS

        for _ in range(max_steps):
            try:
                self.step()
            except StackError as e:
                logger.error("%s | %s", e, self.regs.display())
                return StopReason.STACK_FAULT
            except MemoryAccessError as e:
                logger.error("%s | %s", e, self.regs.display())
                return StopReason.MEMORY_FAULT

        return StopReason.TIMEOUT

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(ins) -> bool
    # Return True when the handler has set PC itself (no +2 advance).

    def _build_dispatch(self) -> dict:
        """Build mnemonic → handler dispatch table."""
        return {
            # ── Flow control ──
            'CLS':       self._op_cls,
            'RET':       self._op_ret,
            'JP':        self._op_jp,
            'CALL':      self._op_call,
            'JP_V0':     self._op_jp_v0,

            # ── Skips ──
            'SE_BYTE':   self._op_se_byte,
            'SNE_BYTE':  self._op_sne_byte,
            'SE_REG':    self._op_se_reg,
            'SNE_REG':   self._op_sne_reg,
            'SKP':       self._op_skp,
            'SKNP':      self._op_sknp,

            # ── Immediates ──
            'LD_BYTE':   self._op_ld_byte,
            'ADD_BYTE':  self._op_add_byte,
            'LD_I':      self._op_ld_i,
            'RND':       self._op_rnd,

            # ── ALU ──
            'LD_REG':    self._op_ld_reg,
            'OR':        self._op_or,
            'AND':       self._op_and,
            'XOR':       self._op_xor,
            'ADD_REG':   self._op_add_reg,
            'SUB':       self._op_sub,
            'SHR':       self._op_shr,
            'SUBN':      self._op_subn,
            'SHL':       self._op_shl,

            # ── Display ──
            'DRW':       self._op_drw,

            # ── Fx group ──
            'LD_VX_DT':  self._op_ld_vx_dt,
            'LD_VX_K':   self._op_ld_vx_k,
            'LD_DT_VX':  self._op_ld_dt_vx,
            'LD_ST_VX':  self._op_ld_st_vx,
            'ADD_I_VX':  self._op_add_i_vx,
            'LD_F_VX':   self._op_ld_f_vx,
            'LD_B_VX':   self._op_ld_b_vx,
            'LD_MEM_VX': self._op_ld_mem_vx,
            'LD_VX_MEM': self._op_ld_vx_mem,
        }

    def _skip_if(self, condition: bool) -> bool:
        """Skip the next instruction: extra +2 on top of the normal advance."""
        if condition:
            self.regs.PC += 2
        return False

    def _set_alu(self, x: int, result_vf: tuple) -> bool:
        # VF first, then Vx
        result, vf = result_vf
        self.regs.V[VF] = vf
        self.regs.V[x] = result
        return False

    # ── Flow control ──

    def _op_cls(self, ins: Instruction) -> bool:
        self.display.clear()
        return False

    def _op_ret(self, ins: Instruction) -> bool:
        # Stack holds the CALL's own address; the +2 steps past it
        self.regs.PC = self.regs.pop()
        return False

    def _op_jp(self, ins: Instruction) -> bool:
        self.regs.PC = ins.nnn
        return True

    def _op_call(self, ins: Instruction) -> bool:
        self.regs.push(self.regs.PC)
        self.regs.PC = ins.nnn
        return True

    def _op_jp_v0(self, ins: Instruction) -> bool:
        self.regs.PC = ins.nnn + self.regs.V[0]
        return True

    # ── Skips ──

    def _op_se_byte(self, ins: Instruction) -> bool:
        return self._skip_if(self.regs.V[ins.x] == ins.kk)

    def _op_sne_byte(self, ins: Instruction) -> bool:
        return self._skip_if(self.regs.V[ins.x] != ins.kk)

    def _op_se_reg(self, ins: Instruction) -> bool:
        return self._skip_if(self.regs.V[ins.x] == self.regs.V[ins.y])

    def _op_sne_reg(self, ins: Instruction) -> bool:
        return self._skip_if(self.regs.V[ins.x] != self.regs.V[ins.y])

    def _op_skp(self, ins: Instruction) -> bool:
        return self._skip_if(self.display.key_pressed(self.regs.V[ins.x]))

    def _op_sknp(self, ins: Instruction) -> bool:
        return self._skip_if(not self.display.key_pressed(self.regs.V[ins.x]))

    # ── Immediates ──

    def _op_ld_byte(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] = ins.kk
        return False

    def _op_add_byte(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] = alu.add8_nocarry(self.regs.V[ins.x], ins.kk)
        return False

    def _op_ld_i(self, ins: Instruction) -> bool:
        self.regs.I = ins.nnn
        return False

    def _op_rnd(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] = self.rng.randrange(0x100) & ins.kk
        return False

    # ── ALU ──

    def _op_ld_reg(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] = self.regs.V[ins.y]
        return False

    def _op_or(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] |= self.regs.V[ins.y]
        return False

    def _op_and(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] &= self.regs.V[ins.y]
        return False

    def _op_xor(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] ^= self.regs.V[ins.y]
        return False

    def _op_add_reg(self, ins: Instruction) -> bool:
        v = self.regs.V
        return self._set_alu(ins.x, alu.add8(v[ins.x], v[ins.y]))

    def _op_sub(self, ins: Instruction) -> bool:
        v = self.regs.V
        return self._set_alu(ins.x, alu.sub8(v[ins.x], v[ins.y]))

    def _op_shr(self, ins: Instruction) -> bool:
        return self._set_alu(ins.x, alu.shr8(self.regs.V[ins.x]))

    def _op_subn(self, ins: Instruction) -> bool:
        v = self.regs.V
        return self._set_alu(ins.x, alu.sub8(v[ins.y], v[ins.x]))

    def _op_shl(self, ins: Instruction) -> bool:
        return self._set_alu(ins.x, alu.shl8(self.regs.V[ins.x]))

    # ── Display ──

    def _op_drw(self, ins: Instruction) -> bool:
        rows = self.mem.read_block(self.regs.I, ins.n)
        collided = self.display.draw_sprite(
            self.regs.V[ins.x], self.regs.V[ins.y], rows)
        self.regs.V[VF] = 1 if collided else 0
        return False

    # ── Fx group ──

    def _op_ld_vx_dt(self, ins: Instruction) -> bool:
        self.regs.V[ins.x] = self.timers.delay
        return False

    def _op_ld_vx_k(self, ins: Instruction) -> bool:
        key = self.display.any_key_pressed()
        if key is None:
            # Rewind so the normal +2 lands on this instruction again
            self.regs.PC -= 2
        else:
            self.regs.V[ins.x] = key & 0xFF
        return False

    def _op_ld_dt_vx(self, ins: Instruction) -> bool:
        self.timers.set_delay(self.regs.V[ins.x])
        return False

    def _op_ld_st_vx(self, ins: Instruction) -> bool:
        self.timers.set_sound(self.regs.V[ins.x])
        return False

    def _op_add_i_vx(self, ins: Instruction) -> bool:
        self.regs.I = (self.regs.I + self.regs.V[ins.x]) & 0xFFFF
        return False

    def _op_ld_f_vx(self, ins: Instruction) -> bool:
        self.regs.I = glyph_address(self.regs.V[ins.x])
        return False

    def _op_ld_b_vx(self, ins: Instruction) -> bool:
        self.mem.write_block(self.regs.I, bytes(alu.bcd(self.regs.V[ins.x])))
        return False

    def _op_ld_mem_vx(self, ins: Instruction) -> bool:
        count = ins.x + 1
        self.mem.write_block(self.regs.I, bytes(self.regs.V[:count]))
        self.regs.I = (self.regs.I + count) & 0xFFFF
        return False

    def _op_ld_vx_mem(self, ins: Instruction) -> bool:
        count = ins.x + 1
        data = self.mem.read_block(self.regs.I, count)
        self.regs.V[:count] = list(data)
        self.regs.I = (self.regs.I + count) & 0xFFFF
        return False
