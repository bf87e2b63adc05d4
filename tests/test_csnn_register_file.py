import pytest

from spikecore.csnn.register_file import RegisterFile


def test_new_file_is_zero():
    registers = RegisterFile()
    assert list(registers) == [0] * 32
    assert len(registers) == 32


def test_write_then_read():
    registers = RegisterFile()
    registers.write(4, 0x1234_5678_9ABC)
    assert registers.read(4) == 0x1234_5678_9ABC
    assert registers.read(5) == 0


def test_values_truncate_to_64_bits():
    registers = RegisterFile()
    registers.write(1, 1 << 64)
    registers.write(2, -1)
    assert registers.read(1) == 0
    assert registers.read(2) == 0xFFFF_FFFF_FFFF_FFFF


def test_register_numbers_wrap():
    registers = RegisterFile()
    registers.write(33, 7)
    assert registers.read(1) == 7
    assert registers.read(-31) == 7


def test_initial_values():
    registers = RegisterFile([3, 4, 5])
    assert [registers.read(i) for i in range(4)] == [3, 4, 5, 0]


def test_too_many_initial_values_raise():
    with pytest.raises(ValueError):
        RegisterFile([0] * 33)


def test_iteration_is_a_copy():
    registers = RegisterFile([9])
    snapshot = list(registers)
    registers.write(0, 1)
    assert snapshot[0] == 9
    assert registers.read(0) == 1