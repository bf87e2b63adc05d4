import pytest

from spikecore.csnn.layout import DEPTH_SPIKE_MEM
from spikecore.csnn.spike_scheduler import SpikeMemory


def test_write_then_read_round_trip():
    memory = SpikeMemory()
    first = memory.write(3, 0x12345678)
    second = memory.write(3, 0xABCDEF01)
    assert (first, second) == (0, 1)
    assert memory.read(3, 0) == 0x12345678
    assert memory.read(3, 1) == 0xABCDEF01
    assert memory.indices[3] == 2


def test_write_only_touches_its_cluster():
    memory = SpikeMemory()
    memory.write(2, 42)
    assert memory.indices == [0, 0, 1, 0, 0, 0, 0]
    assert memory.read(1, 0) == 0


def test_write_truncates_to_32_bits():
    memory = SpikeMemory()
    memory.write(0, (1 << 32) + 5)
    assert memory.read(0, 0) == 5


def test_reset_clears_contents_but_keeps_indices():
    memory = SpikeMemory()
    for lane in range(7):
        memory.write(lane, lane + 1)
    memory.reset()
    assert all(memory.read(lane, 0) == 0 for lane in range(7))
    assert memory.indices == [1] * 7


def test_reset_partial_only_masked_lanes():
    memory = SpikeMemory()
    for lane in range(7):
        memory.write(lane, lane + 10)
    memory.reset_partial(0b0000101)
    assert memory.read(0, 0) == 0
    assert memory.read(2, 0) == 0
    assert memory.read(1, 0) == 11
    assert memory.read(6, 0) == 16


def test_reset_indices():
    memory = SpikeMemory()
    memory.write(4, 1)
    memory.write(5, 2)
    memory.reset_indices()
    assert memory.indices == [0] * 7
    assert memory.write(4, 9) == 0
    assert memory.read(4, 0) == 9


def test_reset_partial_indices():
    memory = SpikeMemory()
    for lane in range(7):
        memory.write(lane, 1)
    memory.reset_partial_indices(0b1000010)
    assert memory.indices == [1, 0, 1, 1, 1, 1, 0]


def test_unknown_cluster_raises():
    memory = SpikeMemory()
    with pytest.raises(IndexError):
        memory.write(7, 1)
    with pytest.raises(IndexError):
        memory.read(-1, 0)


def test_read_past_depth_raises():
    memory = SpikeMemory()
    with pytest.raises(IndexError):
        memory.read(0, DEPTH_SPIKE_MEM)


def test_full_memory_raises():
    memory = SpikeMemory()
    memory.indices[1] = DEPTH_SPIKE_MEM
    with pytest.raises(IndexError):
        memory.write(1, 1)