"""Tags each potential memory word with the position of the neuron it belongs to."""

from __future__ import annotations

from typing import Iterator, MutableSequence, Sequence

from .layout import NUM_PE_PER_CLUSTER, WIDTH_POTENTIAL_MEM

_WORD_MASK = (1 << WIDTH_POTENTIAL_MEM) - 1
_SIGN_BIT = 1 << (WIDTH_POTENTIAL_MEM - 1)

# Bit fields (msb, lsb) of column, row and feature map.
_WIDE_LAYOUT = ((36, 32), (41, 37), (45, 42))
_NARROW_LAYOUT = ((35, 32), (39, 36), (46, 40))
_NEURON_ID_BITS = (63, 32)

# Neuron id of the single output neuron held by each PE of the output clusters.
_OUTPUT_NEURONS = {
    5: (0, 1, 2, 3),
    6: (4, 5, 6, 7),
    7: (8, 9, 0, 0),
}


def _set_field(word: int, bits: tuple[int, int], value: int) -> int:
    msb, lsb = bits
    field_mask = ((1 << (msb - lsb + 1)) - 1) << lsb
    raw = (word & _WORD_MASK & ~field_mask) | ((value << lsb) & field_mask)
    return raw - (1 << WIDTH_POTENTIAL_MEM) if raw & _SIGN_BIT else raw


def _conv1(pe: int) -> Iterator[tuple[int, int, int, int]]:
    for block in range(3):
        for row in range(24):
            for col in range(24):
                yield block * 576 + row * 24 + col, col, row, block + 3 * pe


def _pool1(pe: int) -> Iterator[tuple[int, int, int, int]]:
    for row in range(12):
        for col in range(12):
            for fmap in range(3):
                yield fmap * 144 + row * 12 + col, col, row, fmap + 3 * pe


def _conv2(base: int):
    def neurons(pe: int) -> Iterator[tuple[int, int, int, int]]:
        for row in range(8):
            for col in range(8):
                for fmap in range(8):
                    yield fmap * 64 + row * 8 + col, col, row, fmap + 8 * pe + base

    return neurons


def _pool2(pe: int) -> Iterator[tuple[int, int, int, int]]:
    for sub in range(16):
        for row in range(4):
            for col in range(4):
                yield sub * 16 + row * 4 + col, col, row, 16 * pe + sub


_GRID_LAYERS = {
    0: (_conv1, _WIDE_LAYOUT),
    1: (_pool1, _WIDE_LAYOUT),
    2: (_conv2(0), _NARROW_LAYOUT),
    3: (_conv2(32), _NARROW_LAYOUT),
    4: (_pool2, _NARROW_LAYOUT),
}


def init_potential_memory(
    memories: Sequence[MutableSequence[int]], cluster_id: int
) -> None:
    """Write the neuron position fields into the four PE memories of cluster_id, in place.

    Only the tag bits above bit 31 change; the potential values are kept.
    Clusters with no layout are left alone. Raises ValueError unless four
    memories are given.
    """
    if len(memories) != NUM_PE_PER_CLUSTER:
        raise ValueError(f"expected {NUM_PE_PER_CLUSTER} potential memories, got {len(memories)}")

    if cluster_id in _GRID_LAYERS:
        neurons, (col_bits, row_bits, fmap_bits) = _GRID_LAYERS[cluster_id]
        for pe, memory in enumerate(memories):
            for index, col, row, fmap in neurons(pe):
                word = _set_field(memory[index], col_bits, col)
                word = _set_field(word, row_bits, row)
                memory[index] = _set_field(word, fmap_bits, fmap)
    elif cluster_id in _OUTPUT_NEURONS:
        for memory, neuron in zip(memories, _OUTPUT_NEURONS[cluster_id]):
            memory[0] = _set_field(memory[0], _NEURON_ID_BITS, neuron)