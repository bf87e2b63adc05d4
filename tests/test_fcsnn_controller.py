from collections.abc import Sequence

import pytest

from spikecore.fcsnn.controller import INPUT_DDR_BASE, AcceleratorResult, classify, run
from spikecore.fcsnn.isa import FIRING_THRESHOLD, pack_spike

HIDDEN_SHIFT = 940800
OUTPUT_SHIFT = 2380800


class SparseDDR(Sequence):
    """A large DDR image that stores only its non-zero words."""

    def __init__(self, words, size=2_600_000):
        self._words = dict(words)
        self._size = size

    def __len__(self):
        return self._size

    def __getitem__(self, key):
        if isinstance(key, slice):
            return [self._words.get(i, 0) for i in range(*key.indices(self._size))]
        if not -self._size <= key < self._size:
            raise IndexError(key)
        return self._words.get(key % self._size, 0)


def _network_ddr():
    return SparseDDR(
        {
            0: FIRING_THRESHOLD,
            1: 5,
            HIDDEN_SHIFT: FIRING_THRESHOLD,
            OUTPUT_SHIFT + 3: FIRING_THRESHOLD,
            INPUT_DDR_BASE: pack_spike(0, 1),
            INPUT_DDR_BASE + 1: pack_spike(0, 2),
        }
    )


@pytest.fixture(scope="module")
def ddr():
    return _network_ddr()


@pytest.fixture(scope="module")
def lane3_count(ddr):
    return run(ddr, 7, 0, 0, 0, 300)


def test_classify_picks_most_frequent_label():
    assert classify([pack_spike(3, 1), pack_spike(5, 1), pack_spike(3, 2)]) == 3


def test_classify_without_repeats_is_none():
    assert classify([pack_spike(1, 1), pack_spike(2, 1)]) is None
    assert classify([]) is None


def test_classify_tie_goes_to_first_seen():
    assert classify([1, 2, 2, 1]) == 1


def test_classify_ignores_upper_bits():
    assert classify([0x00FF0007, 0x00010007]) == 7


def test_full_network_classifies_output_neuron(lane3_count):
    assert isinstance(lane3_count, AcceleratorResult)
    assert lane3_count.classification == 3
    assert lane3_count.value == 2


def test_spike_counts_of_lanes(ddr):
    assert run(ddr, 1, 0, 0, 0, 300).value == 2
    assert run(ddr, 4, 0, 0, 0, 300).value == 2


def test_spike_words_of_lanes(ddr):
    assert run(ddr, 2, 0, 0, 0, 300).value == pack_spike(0, 1)
    assert run(ddr, 5, 1, 0, 0, 300).value == pack_spike(0, 2)
    assert run(ddr, 8, 0, 0, 0, 300).value == pack_spike(3, 1)


def test_potentials_read_back(ddr):
    fired = run(ddr, 0, 0, 0, 0, 300)
    integrated = run(ddr, 0, 0, 1, 0, 300)
    assert fired.value == 0
    assert integrated.value == 10


def test_unknown_selector_returns_default():
    result = run(SparseDDR({}), 99, 0, 0, 0, 0)
    assert result.value == 666
    assert result.classification is None


def test_no_input_means_no_spikes():
    assert run(SparseDDR({}), 7, 0, 0, 0, 0).value == 0


def test_negative_potential_index_raises():
    with pytest.raises(IndexError):
        run(SparseDDR({}), 0, 0, -1, 0, 0)


def test_spike_index_out_of_range_raises():
    with pytest.raises(IndexError):
        run(SparseDDR({}), 2, 5000, 0, 0, 0)


def test_short_ddr_for_input_raises():
    with pytest.raises(IndexError):
        run([], 7, 0, 0, 0, 300)