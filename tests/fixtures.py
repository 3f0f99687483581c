# type: ignore
import pytest

from chipvm.runtime.keypad import Keypad


@pytest.fixture
def with_keypad():
    yield Keypad()


@pytest.fixture
def with_rom(tmp_path):
    def write(data: bytes):
        path = tmp_path / 'program.ch8'
        path.write_bytes(data)
        return path

    yield write
