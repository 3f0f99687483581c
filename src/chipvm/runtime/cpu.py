import random
import logging as lg
from dataclasses import dataclass
from typing import Callable, TypeAlias

import chipvm.common.ops as ops
from chipvm.common.hwconf import (
    PROGRAM_BASE, FONT_BASE, FONT_GLYPH_SIZE, REGISTER_COUNT, FLAG_REGISTER, STACK_DEPTH
)
from chipvm.runtime.memory import Memory, AddressError
from chipvm.runtime.display import Display, Framebuffer
from chipvm.runtime.keypad import KeyState, Keypad, first_down


class RuntimeFault(Exception):
    pc: int
    opcode: int | None

    def __init__(self, pc: int, opcode: int | None, message: str = ''):
        self.pc = pc
        self.opcode = opcode
        op_text = 'fetch' if opcode is None else f'opcode {opcode:04X}'
        detail = f': {message}' if message else ''
        super().__init__(f'{type(self).__name__} at {pc:#05x} ({op_text}){detail}')


class StackUnderflow(RuntimeFault):
    pass


class StackOverflow(RuntimeFault):
    pass


class MemoryOutOfBounds(RuntimeFault):
    address: int

    def __init__(self, pc: int, opcode: int | None, address: int):
        super().__init__(pc, opcode, f'address {address:#x}')
        self.address = address


@dataclass(frozen=True)
class Instruction:
    address: int    # Where the word was fetched from
    word: int

    @property
    def family(self) -> int:
        return self.word >> 12

    @property
    def x(self) -> int:
        return (self.word >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.word >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.word & 0xF

    @property
    def kk(self) -> int:
        return self.word & 0xFF

    @property
    def nnn(self) -> int:
        return self.word & 0xFFF


Handler: TypeAlias = Callable[['CPU', Instruction], None]


class CPU():
    pc: int             # Program counter
    i: int              # Index register
    v: list[int]        # V0..VF
    stack: list[int]    # Return addresses
    delay: int          # Delay timer
    sound: int          # Sound timer

    def __init__(
        self,
        keypad: KeyState | None = None,
        rng: random.Random | None = None,
        stack_depth: int = STACK_DEPTH
    ):
        self.memory = Memory()
        self.display = Display()
        self.keypad = keypad if keypad is not None else Keypad()
        self.rng = rng if rng is not None else random.Random()
        self.stack_depth = stack_depth

        self.pc = PROGRAM_BASE
        self.i = 0
        self.v = [0] * REGISTER_COUNT
        self.stack = []
        self.delay = 0
        self.sound = 0

    # - Public - #

    def load_font(self):
        self.memory.load_font()

    def load_program(self, program: bytes):
        self.memory.load_program(program)

    def tick_timers(self):
        if self.delay > 0:
            self.delay -= 1

        if self.sound > 0:
            self.sound -= 1

    def framebuffer(self) -> Framebuffer:
        return self.display.snapshot()

    def step(self):
        op = self.fetch()

        try:
            self.HANDLERS[op.family](self, op)

        except AddressError as e:
            self.pc = op.address
            raise MemoryOutOfBounds(op.address, op.word, e.address) from e

        except RuntimeFault:
            self.pc = op.address
            raise

    # - Helpers - #

    def debug_dump(self):
        state = [f'{k}:{v:X}' for k, v in {
            'PC': self.pc,
            'I': self.i,
            'SP': len(self.stack),
            'DT': self.delay,
            'ST': self.sound
        }.items()]

        state.extend([f'V{n:X}:{self.v[n]:02X}' for n in range(REGISTER_COUNT)])

        lg.debug(' '.join(state))

    def fetch(self) -> Instruction:
        addr = self.pc

        try:
            word = self.memory.fetch(addr)
        except AddressError as e:
            raise MemoryOutOfBounds(addr, None, e.address) from e

        self.pc = (addr + 2) & 0xFFFF
        return Instruction(addr, word)

    def skip_if(self, condition: bool):
        if condition:
            self.pc = (self.pc + 2) & 0xFFFF

    def set_flag(self, condition: bool):
        self.v[FLAG_REGISTER] = 1 if condition else 0

    def dispatch(self, table: dict[int, Handler], key: int, op: Instruction):
        handler = table.get(key)

        if handler is None:
            self.unknown(op)
        else:
            handler(self, op)

    # - Flow - #

    def unknown(self, op: Instruction):
        lg.debug(f'Ignoring opcode {op.word:04X} at {op.address:#05x}')

    def sys(self, op: Instruction):
        self.dispatch(self.SYS_HANDLERS, op.word, op)

    def cls(self, op: Instruction):
        self.display.clear()

    def ret(self, op: Instruction):
        if not self.stack:
            raise StackUnderflow(op.address, op.word)

        self.pc = self.stack.pop()

    def jp(self, op: Instruction):
        self.pc = op.nnn

    def call(self, op: Instruction):
        if len(self.stack) >= self.stack_depth:
            raise StackOverflow(op.address, op.word, f'depth {self.stack_depth}')

        # pc already points past the call
        self.stack.append(self.pc)
        self.pc = op.nnn

    def jpv(self, op: Instruction):
        self.pc = op.nnn + self.v[0]

    def se(self, op: Instruction):
        self.skip_if(self.v[op.x] == op.kk)

    def sne(self, op: Instruction):
        self.skip_if(self.v[op.x] != op.kk)

    def ser(self, op: Instruction):
        if op.n != 0:
            self.unknown(op)
            return

        self.skip_if(self.v[op.x] == self.v[op.y])

    def sner(self, op: Instruction):
        if op.n != 0:
            self.unknown(op)
            return

        self.skip_if(self.v[op.x] != self.v[op.y])

    # - Registers - #

    def ld(self, op: Instruction):
        self.v[op.x] = op.kk

    def add(self, op: Instruction):
        self.v[op.x] = (self.v[op.x] + op.kk) & 0xFF

    def ldi(self, op: Instruction):
        self.i = op.nnn

    def rnd(self, op: Instruction):
        self.v[op.x] = self.rng.randrange(256) & op.kk

    # - Arithmetic - #
    # VF is written before Vx, so with x == F the result wins

    def alu(self, op: Instruction):
        self.dispatch(self.ALU_HANDLERS, op.n, op)

    def alu_ld(self, op: Instruction):
        self.v[op.x] = self.v[op.y]

    def alu_or(self, op: Instruction):
        self.v[op.x] |= self.v[op.y]

    def alu_and(self, op: Instruction):
        self.v[op.x] &= self.v[op.y]

    def alu_xor(self, op: Instruction):
        self.v[op.x] ^= self.v[op.y]

    def alu_add(self, op: Instruction):
        total = self.v[op.x] + self.v[op.y]
        self.set_flag(total > 0xFF)
        self.v[op.x] = total & 0xFF

    def alu_sub(self, op: Instruction):
        a, b = self.v[op.x], self.v[op.y]
        self.set_flag(a > b)
        self.v[op.x] = (a - b) & 0xFF

    def alu_shr(self, op: Instruction):
        a = self.v[op.x]
        self.set_flag(bool(a & 0x01))
        self.v[op.x] = a >> 1

    def alu_subn(self, op: Instruction):
        a, b = self.v[op.x], self.v[op.y]
        self.set_flag(b > a)
        self.v[op.x] = (b - a) & 0xFF

    def alu_shl(self, op: Instruction):
        a = self.v[op.x]
        self.set_flag(bool(a & 0x80))
        self.v[op.x] = (a << 1) & 0xFF

    # - Display - #

    def drw(self, op: Instruction):
        x, y = self.v[op.x], self.v[op.y]
        sprite = self.memory.read(self.i, op.n)
        self.set_flag(self.display.draw(x, y, sprite))

    # - Input - #

    def skp(self, op: Instruction):
        self.dispatch(self.SKP_HANDLERS, op.kk, op)

    def skp_down(self, op: Instruction):
        self.skip_if(self.keypad.is_key_down(self.v[op.x] & 0xF))

    def skp_up(self, op: Instruction):
        self.skip_if(not self.keypad.is_key_down(self.v[op.x] & 0xF))

    def ld_vx_k(self, op: Instruction):
        key = first_down(self.keypad)

        if key is None:
            # Stall: fetch the same instruction on the next step
            self.pc = op.address
            return

        self.v[op.x] = key

    # - Misc - #

    def misc(self, op: Instruction):
        self.dispatch(self.MISC_HANDLERS, op.kk, op)

    def ld_vx_dt(self, op: Instruction):
        self.v[op.x] = self.delay

    def ld_dt_vx(self, op: Instruction):
        self.delay = self.v[op.x]

    def ld_st_vx(self, op: Instruction):
        self.sound = self.v[op.x]

    def add_i_vx(self, op: Instruction):
        self.i = (self.i + self.v[op.x]) & 0xFFFF

    def ld_f_vx(self, op: Instruction):
        self.i = FONT_BASE + self.v[op.x] * FONT_GLYPH_SIZE

    def ld_b_vx(self, op: Instruction):
        val = self.v[op.x]
        self.memory.write(self.i, bytes([val // 100, (val // 10) % 10, val % 10]))

    def ld_mi_vx(self, op: Instruction):
        self.memory.write(self.i, bytes(self.v[:op.x + 1]))

    def ld_vx_mi(self, op: Instruction):
        values = self.memory.read(self.i, op.x + 1)
        self.v[:op.x + 1] = list(values)

    SYS_HANDLERS: dict[int, Handler] = {
        ops.CLS: cls,
        ops.RET: ret,
    }

    ALU_HANDLERS: dict[int, Handler] = {
        ops.ALU_LD: alu_ld,
        ops.ALU_OR: alu_or,
        ops.ALU_AND: alu_and,
        ops.ALU_XOR: alu_xor,
        ops.ALU_ADD: alu_add,
        ops.ALU_SUB: alu_sub,
        ops.ALU_SHR: alu_shr,
        ops.ALU_SUBN: alu_subn,
        ops.ALU_SHL: alu_shl,
    }

    SKP_HANDLERS: dict[int, Handler] = {
        ops.SKP_DOWN: skp_down,
        ops.SKP_UP: skp_up,
    }

    MISC_HANDLERS: dict[int, Handler] = {
        ops.LD_VX_DT: ld_vx_dt,
        ops.LD_VX_K: ld_vx_k,
        ops.LD_DT_VX: ld_dt_vx,
        ops.LD_ST_VX: ld_st_vx,
        ops.ADD_I_VX: add_i_vx,
        ops.LD_F_VX: ld_f_vx,
        ops.LD_B_VX: ld_b_vx,
        ops.LD_MI_VX: ld_mi_vx,
        ops.LD_VX_MI: ld_vx_mi,
    }

    HANDLERS: dict[int, Handler] = {
        ops.SYS: sys,
        ops.JP: jp,
        ops.CALL: call,
        ops.SE: se,
        ops.SNE: sne,
        ops.SER: ser,
        ops.LD: ld,
        ops.ADD: add,
        ops.ALU: alu,
        ops.SNER: sner,
        ops.LDI: ldi,
        ops.JPV: jpv,
        ops.RND: rnd,
        ops.DRW: drw,
        ops.SKP: skp,
        ops.MISC: misc,
    }
