"""Top level of the fully connected core: runs three clusters over 35 time steps."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from operator import itemgetter
from typing import Optional, Sequence

from .cluster import Cluster, input_layer_config
from .hidden_layer import hidden_layer_config
from .isa import BASE_ADDR_DDR, DEPTH_INPUT_MEM, DEPTH_POTENTIAL_MEM, WIDTH_INPUT_MEM
from .output_layer import output_layer_config
from .spike_memory import SpikeMemoryBank

FIRST_TIME_STEP = 1
LAST_TIME_STEP = 35

INPUT_BLOCK_WORDS = 300
MAX_INPUT_BLOCKS = 10
INPUT_DDR_BASE = BASE_ADDR_DDR // 4 + 10_000_000 // 4

# Neurons per processing element as seen by the potential read-back selector.
_READBACK_NEURONS_PER_PE = 300
_OUTPUT_LANE = 3
_DEFAULT_VALUE = 666
_LABEL_MASK = 0xFFFF
_INPUT_WORD_MASK = (1 << WIDTH_INPUT_MEM) - 1


def _int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass(frozen=True)
class AcceleratorResult:
    """The selected read-back value and the classified label, if any."""

    value: int
    classification: Optional[int]


def classify(spikes: Sequence[int]) -> Optional[int]:
    """Return the neuron id (low 16 bits) that occurs most often among spikes.

    A label must occur at least twice to count; among equally frequent
    labels the one seen first wins. Returns None when no label repeats.
    """
    counts = Counter(word & _LABEL_MASK for word in spikes)
    if not counts:
        return None
    label, count = max(counts.items(), key=itemgetter(1))
    return label if count > 1 else None


def _load_input(ddr: Sequence[int], offset: int, length: int) -> list[int]:
    memory = [0] * DEPTH_INPUT_MEM
    blocks = min(MAX_INPUT_BLOCKS, length // INPUT_BLOCK_WORDS) if length > 0 else 0
    for block in range(blocks):
        start = INPUT_DDR_BASE + offset + INPUT_BLOCK_WORDS * block
        if start < 0:
            raise IndexError(f"input block starts before the DDR image: {start}")
        words = ddr[start:start + INPUT_BLOCK_WORDS]
        if len(words) != INPUT_BLOCK_WORDS:
            raise IndexError(
                f"input block of {INPUT_BLOCK_WORDS} words at {start} overruns the DDR image"
            )
        first = INPUT_BLOCK_WORDS * block
        memory[first:first + INPUT_BLOCK_WORDS] = [word & _INPUT_WORD_MASK for word in words]
    return memory


def _potential(cluster: Cluster, test: int) -> int:
    pe = min(max(test, 0) // _READBACK_NEURONS_PER_PE, len(cluster.potentials) - 1)
    offset = test - pe * _READBACK_NEURONS_PER_PE
    if not 0 <= offset < DEPTH_POTENTIAL_MEM:
        raise IndexError(f"no potential {offset} in processing element {pe}")
    return cluster.potentials[pe][offset]


def _spike_word(spikes: SpikeMemoryBank, lane: int, index: int) -> int:
    memory = spikes.lane(lane)
    if not 0 <= index < len(memory):
        raise IndexError(f"no spike {index} in lane {lane}")
    return _int32(memory[index])


def run(
    ddr: Sequence[int],
    idx_ret: int,
    idx_spkm: int,
    test: int,
    in_mem_offset: int,
    in_mem_length: int,
) -> AcceleratorResult:
    """Run one inference over the DDR image and return the selected value.

    idx_ret picks what is read back: 0, 3, 6 the potential numbered test of
    clusters 0, 1, 2; 1, 4, 7 the spike count of lanes 1, 2, 3; 2, 5, 8 the
    spike word idx_spkm of lanes 1, 2, 3; anything else yields 666.
    """
    input_memory = _load_input(ddr, in_mem_offset, in_mem_length)

    spikes = SpikeMemoryBank()
    spikes.reset_pointers()
    spikes.reset_memory()

    clusters = [
        Cluster(input_layer_config()),
        Cluster(hidden_layer_config()),
        Cluster(output_layer_config()),
    ]
    input_indices = [0] * len(clusters)

    for time_step in range(FIRST_TIME_STEP, LAST_TIME_STEP + 1):
        for number, cluster in enumerate(clusters):
            memory = input_memory if number == 0 else None
            input_indices[number] = cluster.run(
                ddr, spikes, time_step, input_indices[number], memory
            )

    spikes.reset_pointers()
    output_spikes = spikes.lane(_OUTPUT_LANE)[: spikes.last[_OUTPUT_LANE]]
    classification = classify(output_spikes)

    potential_clusters = {0: clusters[0], 3: clusters[1], 6: clusters[2]}
    count_lanes = {1: 1, 4: 2, 7: 3}
    word_lanes = {2: 1, 5: 2, 8: 3}

    if idx_ret in potential_clusters:
        value = _potential(potential_clusters[idx_ret], test)
    elif idx_ret in count_lanes:
        value = spikes.last[count_lanes[idx_ret]]
    elif idx_ret in word_lanes:
        value = _spike_word(spikes, word_lanes[idx_ret], idx_spkm)
    else:
        value = _DEFAULT_VALUE

    return AcceleratorResult(value=value, classification=classification)