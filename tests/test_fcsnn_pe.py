from spikecore.fcsnn.isa import FIRING_THRESHOLD
from spikecore.fcsnn.pe import accumulate


def test_zero_potential_takes_weight():
    assert accumulate(0, 4096) == 4096


def test_reaching_threshold():
    assert accumulate(FIRING_THRESHOLD - 1, 1) == FIRING_THRESHOLD


def test_negative_weight_from_unsigned_word():
    assert accumulate(10, 0xFFFFFFFF) == 9


def test_overflow_wraps():
    assert accumulate(0x7FFFFFFF, 1) == -0x80000000


def test_order_of_operands_does_not_matter():
    assert accumulate(123, -456) == accumulate(-456, 123)