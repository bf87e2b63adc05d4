"""Per-cluster spike queues shared by all clusters of the fully connected core."""

from __future__ import annotations

from .isa import DEPTH_SPIKE_MEM, NUM_CLUSTERS, WIDTH_SPIKE_MEM, WIDTH_SPIKE_MEM_POINTER

_POINTER_MASK = (1 << WIDTH_SPIKE_MEM_POINTER) - 1
_WORD_MASK = (1 << WIDTH_SPIKE_MEM) - 1
_CLUSTER_MASK = (1 << NUM_CLUSTERS) - 1
# The memory reset leaves this lane untouched.
_LANE_SKIPPED_BY_RESET = 11


class SpikeMemoryBank:
    """Sixteen spike queues, each with a write pointer and the pointer of the last step."""

    def __init__(self) -> None:
        self.memories: list[list[int]] = [[0] * DEPTH_SPIKE_MEM for _ in range(NUM_CLUSTERS)]
        self.current: list[int] = [0] * NUM_CLUSTERS
        self.last: list[int] = [0] * NUM_CLUSTERS

    def broadcast(self, cluster_mask: int, spike: int) -> tuple[int, ...]:
        """Append spike to every lane selected by cluster_mask.

        Mask bit 15 selects lane 0 and bit 0 selects lane 15. Returns the
        lanes written, in ascending order.
        """
        cluster_mask &= _CLUSTER_MASK
        spike &= _WORD_MASK
        written = []
        for lane in range(NUM_CLUSTERS):
            if cluster_mask >> (NUM_CLUSTERS - 1 - lane) & 1:
                self.memories[lane][self.current[lane]] = spike
                self.current[lane] = (self.current[lane] + 1) & _POINTER_MASK
                written.append(lane)
        return tuple(written)

    def reset_memory(self) -> None:
        """Zero the contents of every lane except lane 11."""
        for lane, memory in enumerate(self.memories):
            if lane != _LANE_SKIPPED_BY_RESET:
                memory[:] = [0] * DEPTH_SPIKE_MEM

    def reset_pointers(self) -> None:
        """Save each write pointer as the last one and rewind it to zero."""
        self.last = list(self.current)
        self.current = [0] * NUM_CLUSTERS

    def lane(self, index: int) -> list[int]:
        """The spike memory of one lane."""
        if not 0 <= index < NUM_CLUSTERS:
            raise IndexError(f"no spike lane {index}")
        return self.memories[index]