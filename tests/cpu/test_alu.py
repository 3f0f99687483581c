import pytest

from unit_utils import make_cpu, run, after


def test_load_then_add_wraps_without_flag():
    proc = make_cpu(0x6FAA, 0x63F0, 0x7320)
    run(proc, 3)

    assert proc.v[3] == (0xF0 + 0x20) % 256
    assert proc.v[0xF] == 0xAA
    assert proc.pc == after(3)


@pytest.mark.parametrize('sub,expected', [
    (0x0, 0x0F),
    (0x1, 0x3F),
    (0x2, 0x00),
    (0x3, 0x3F),
])
def test_register_logic(sub, expected):
    # V1 = 0x30, V2 = 0x0F
    proc = make_cpu(0x6130, 0x620F, 0x8120 | sub)
    run(proc, 3)

    assert proc.v[1] == expected
    assert proc.v[2] == 0x0F


def test_add_with_carry():
    proc = run(make_cpu(0x61FF, 0x6201, 0x8124), 3)

    assert proc.v[1] == 0x00
    assert proc.v[0xF] == 1


def test_add_without_carry_clears_flag():
    proc = run(make_cpu(0x6F01, 0x6110, 0x6220, 0x8124), 4)

    assert proc.v[1] == 0x30
    assert proc.v[0xF] == 0


def test_sub_no_borrow():
    proc = run(make_cpu(0x6105, 0x6201, 0x8125), 3)

    assert proc.v[1] == 0x04
    assert proc.v[0xF] == 1


def test_sub_with_borrow():
    proc = run(make_cpu(0x6101, 0x6205, 0x8125), 3)

    assert proc.v[1] == 0xFC
    assert proc.v[0xF] == 0


def test_sub_equal_operands_reports_borrow():
    proc = run(make_cpu(0x6105, 0x6205, 0x8125), 3)

    assert proc.v[1] == 0
    assert proc.v[0xF] == 0


def test_subn():
    proc = run(make_cpu(0x6101, 0x6205, 0x8127), 3)

    assert proc.v[1] == 0x04
    assert proc.v[0xF] == 1

    proc = run(make_cpu(0x6105, 0x6201, 0x8127), 3)

    assert proc.v[1] == 0xFC
    assert proc.v[0xF] == 0


def test_shift_right():
    proc = run(make_cpu(0x6105, 0x8106), 2)

    assert proc.v[1] == 0x02
    assert proc.v[0xF] == 1


def test_shift_left():
    proc = run(make_cpu(0x6181, 0x810E), 2)

    assert proc.v[1] == 0x02
    assert proc.v[0xF] == 1

    proc = run(make_cpu(0x6141, 0x810E), 2)

    assert proc.v[1] == 0x82
    assert proc.v[0xF] == 0


def test_shift_ignores_vy():
    proc = run(make_cpu(0x6104, 0x62FF, 0x8126), 3)

    assert proc.v[1] == 0x02
    assert proc.v[2] == 0xFF


def test_result_overwrites_flag_when_target_is_vf():
    # VF = 0xFF, VE = 0x01: carry is written first, then the sum lands in VF
    proc = run(make_cpu(0x6FFF, 0x6E01, 0x8FE4), 3)
    assert proc.v[0xF] == 0x00

    proc = run(make_cpu(0x6F03, 0x8F06), 2)
    assert proc.v[0xF] == 0x01

    proc = run(make_cpu(0x6F10, 0x6E01, 0x8FE5), 3)
    assert proc.v[0xF] == 0x0F
