from typing import Protocol

from chipvm.common.hwconf import KEY_COUNT


KEYS = range(KEY_COUNT)     # Logical keys 0x0..0xF


class KeyState(Protocol):
    def is_key_down(self, index: int) -> bool:
        ...


class Keypad:
    """Key state held in memory. Hosts and tests press and release keys directly."""

    down: list[bool]

    def __init__(self):
        self.down = [False] * KEY_COUNT

    def is_key_down(self, index: int) -> bool:
        return self.down[index]

    def press(self, index: int):
        self.down[index] = True

    def release(self, index: int):
        self.down[index] = False

    def release_all(self):
        self.down = [False] * KEY_COUNT


def first_down(keypad: KeyState) -> int | None:
    for key in KEYS:
        if keypad.is_key_down(key):
            return key

    return None
