import random

from chipvm.common.hwconf import FONT_BASE
from unit_utils import make_cpu, run, after


def test_load_index():
    proc = run(make_cpu(0xA123), 1)

    assert proc.i == 0x123
    assert proc.pc == after(1)


def test_random_uses_injected_source():
    proc = run(make_cpu(0xC10F, 0xC2FF, seed=42), 2)
    rng = random.Random(42)

    assert proc.v[1] == rng.randrange(256) & 0x0F
    assert proc.v[2] == rng.randrange(256) & 0xFF


def test_random_with_zero_mask():
    proc = run(make_cpu(0x61AA, 0xC100), 2)
    assert proc.v[1] == 0


def test_delay_and_sound_timers_from_register():
    proc = run(make_cpu(0x6120, 0xF115, 0x6233, 0xF218, 0xF307), 5)

    assert proc.delay == 0x20
    assert proc.sound == 0x33
    assert proc.v[3] == 0x20


def test_add_to_index():
    proc = run(make_cpu(0xA0FF, 0x6102, 0xF11E), 3)

    assert proc.i == 0x101
    assert proc.v[0xF] == 0


def test_glyph_address():
    proc = run(make_cpu(0x610A, 0xF129), 2)
    assert proc.i == FONT_BASE + 0xA * 5


def test_bcd():
    proc = run(make_cpu(0x61FE, 0xA300, 0xF133), 3)

    assert proc.memory.read(0x300, 3) == bytes([2, 5, 4])
    assert proc.i == 0x300

    proc = run(make_cpu(0x6107, 0xA300, 0xF133), 3)
    assert proc.memory.read(0x300, 3) == bytes([0, 0, 7])


def test_store_registers():
    proc = run(make_cpu(0x6011, 0x6122, 0x6233, 0x6344, 0xA300, 0xF255), 6)

    assert proc.memory.read(0x300, 4) == bytes([0x11, 0x22, 0x33, 0x00])
    assert proc.i == 0x300


def test_load_registers():
    proc = make_cpu(0xA300, 0xF265)
    proc.memory.write(0x300, b'\x01\x02\x03\x04')
    run(proc, 2)

    assert proc.v[:4] == [1, 2, 3, 0]
    assert proc.i == 0x300


def test_store_all_registers_including_flag():
    proc = make_cpu(0x6F09, 0xA300, 0xFF55)
    run(proc, 3)

    assert proc.memory.read(0x30F) == b'\x09'
