import pytest

from spikecore.fcsnn.isa import DEPTH_SPIKE_MEM, NUM_CLUSTERS, decode, pack_spike
from spikecore.fcsnn.spike_memory import SpikeMemoryBank


@pytest.fixture
def bank():
    return SpikeMemoryBank()


def test_highest_mask_bit_selects_lane_zero(bank):
    spike = pack_spike(5, 1)
    assert bank.broadcast(1 << 15, spike) == (0,)
    assert bank.lane(0)[0] == spike
    assert bank.current[0] == 1
    assert sum(bank.current) == 1


def test_ckf_mask_of_input_layer_feeds_lane_one(bank):
    mask = decode(0b11010010000001000000000000001111).cluster_mask
    assert bank.broadcast(mask, pack_spike(7, 2)) == (1,)


def test_full_mask_writes_every_lane(bank):
    spike = pack_spike(42, 3)
    assert bank.broadcast(0xFFFF, spike) == tuple(range(NUM_CLUSTERS))
    assert all(bank.lane(i)[0] == spike for i in range(NUM_CLUSTERS))
    assert bank.current == [1] * NUM_CLUSTERS


def test_spikes_are_queued_in_order(bank):
    spikes = [pack_spike(n, 1) for n in range(5)]
    for spike in spikes:
        bank.broadcast(1, spike)
    assert bank.lane(15)[:5] == spikes
    assert bank.current[15] == len(spikes)


def test_mask_bits_above_sixteen_are_ignored(bank):
    assert bank.broadcast(1 << 16, pack_spike(1, 1)) == ()
    assert bank.current == [0] * NUM_CLUSTERS


def test_write_pointer_wraps(bank):
    for n in range(DEPTH_SPIKE_MEM + 1):
        bank.broadcast(1 << 15, pack_spike(n, 1))
    assert bank.current[0] == 1
    assert bank.lane(0)[0] == pack_spike(DEPTH_SPIKE_MEM, 1)


def test_reset_pointers(bank):
    bank.broadcast(0xFFFF, pack_spike(1, 1))
    bank.broadcast(1 << 12, pack_spike(2, 1))
    before = list(bank.current)
    bank.reset_pointers()
    assert bank.last == before
    assert bank.current == [0] * NUM_CLUSTERS


def test_reset_memory_skips_lane_eleven(bank):
    spike = pack_spike(9, 4)
    bank.broadcast(0xFFFF, spike)
    bank.reset_memory()
    assert bank.lane(11)[0] == spike
    assert all(bank.lane(i)[0] == 0 for i in range(NUM_CLUSTERS) if i != 11)
    assert bank.current == [1] * NUM_CLUSTERS


@pytest.mark.parametrize("index", [-1, NUM_CLUSTERS])
def test_lane_out_of_range(bank, index):
    with pytest.raises(IndexError):
        bank.lane(index)