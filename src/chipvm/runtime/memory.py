import struct
import logging as lg

from chipvm.common.hwconf import MEMORY_SIZE, FONT_BASE, PROGRAM_BASE


FONT = bytes([
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


class ProgramTooLarge(Exception):
    def __init__(self, size: int):
        super().__init__(
            f'Program of {size} bytes does not fit at {PROGRAM_BASE:#05x} '
            f'({MEMORY_SIZE - PROGRAM_BASE} bytes available)'
        )
        self.size = size


class AddressError(Exception):
    def __init__(self, address: int):
        super().__init__(f'Address {address:#x} is outside memory')
        self.address = address


class Memory:
    data: bytearray

    def __init__(self, size: int = MEMORY_SIZE):
        self.data = bytearray(size)

    def __len__(self) -> int:
        return len(self.data)

    def check(self, address: int, length: int = 1):
        """Raises AddressError unless [address, address + length) is inside memory"""

        if address < 0:
            raise AddressError(address)

        # Nothing is dereferenced
        if length == 0:
            return

        end = address + length

        if end > len(self.data):
            raise AddressError(max(address, len(self.data)))

    def read(self, address: int, length: int = 1) -> bytes:
        self.check(address, length)
        return bytes(self.data[address:address + length])

    def write(self, address: int, values: bytes):
        self.check(address, len(values))
        self.data[address:address + len(values)] = values

    def fetch(self, address: int) -> int:
        self.check(address, 2)
        (word,) = struct.unpack('>H', self.data[address:address + 2])
        return word

    def load_font(self):
        self.data[FONT_BASE:FONT_BASE + len(FONT)] = FONT

    def load_program(self, program: bytes):
        size = len(program)

        if PROGRAM_BASE + size > len(self.data):
            raise ProgramTooLarge(size)

        self.data[PROGRAM_BASE:PROGRAM_BASE + size] = program
        lg.info(f'Loaded {size} bytes at {PROGRAM_BASE:#05x}')
