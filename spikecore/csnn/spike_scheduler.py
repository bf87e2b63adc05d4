"""Spike memories of the convolutional core: one append-only queue per cluster."""

from __future__ import annotations

from .layout import DEPTH_SPIKE_MEM, NUM_TOTAL_CLUSTER, WIDTH_SPIKE_MEM, WIDTH_SPIKE_MEM_IDX

NUM_SPIKE_LANES = NUM_TOTAL_CLUSTER + 1

_WORD_MASK = (1 << WIDTH_SPIKE_MEM) - 1
_INDEX_MASK = (1 << WIDTH_SPIKE_MEM_IDX) - 1


class SpikeMemory:
    """Seven spike queues of 32-bit words, each with its own write index."""

    def __init__(self) -> None:
        self.memories: list[list[int]] = [[0] * DEPTH_SPIKE_MEM for _ in range(NUM_SPIKE_LANES)]
        self.indices: list[int] = [0] * NUM_SPIKE_LANES

    @staticmethod
    def _check_cluster(cluster_id: int) -> int:
        if not 0 <= cluster_id < NUM_SPIKE_LANES:
            raise IndexError(f"no spike memory for cluster {cluster_id}")
        return cluster_id

    @staticmethod
    def _selected(cluster_mask: int):
        return (lane for lane in range(NUM_SPIKE_LANES) if cluster_mask >> lane & 1)

    def read(self, cluster_id: int, index: int) -> int:
        """Return the word at index in the memory of cluster_id."""
        lane = self._check_cluster(cluster_id)
        position = index & _INDEX_MASK
        if position >= DEPTH_SPIKE_MEM:
            raise IndexError(f"spike index {position} is past the end of the memory")
        return self.memories[lane][position]

    def write(self, cluster_id: int, value: int) -> int:
        """Append value, truncated to 32 bits, to cluster_id's memory; return where it went."""
        lane = self._check_cluster(cluster_id)
        position = self.indices[lane]
        if position >= DEPTH_SPIKE_MEM:
            raise IndexError(f"spike memory of cluster {lane} is full")
        self.memories[lane][position] = value & _WORD_MASK
        self.indices[lane] = (position + 1) & _INDEX_MASK
        return position

    def reset(self) -> None:
        """Zero the contents of every memory; the write indices are kept."""
        for memory in self.memories:
            memory[:] = [0] * DEPTH_SPIKE_MEM

    def reset_partial(self, cluster_mask: int) -> None:
        """Zero the contents of the memories whose bit is set in cluster_mask."""
        for lane in self._selected(cluster_mask):
            self.memories[lane][:] = [0] * DEPTH_SPIKE_MEM

    def reset_indices(self) -> None:
        """Rewind every write index to zero."""
        self.indices = [0] * NUM_SPIKE_LANES

    def reset_partial_indices(self, cluster_mask: int) -> None:
        """Rewind the write indices whose bit is set in cluster_mask."""
        for lane in self._selected(cluster_mask):
            self.indices[lane] = 0