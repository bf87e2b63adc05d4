# spikecore

`spikecore` simulates, at the instruction level, two small accelerators for
spiking neural networks. Each accelerator is built from clusters of processing
elements (PEs) that run a tiny instruction set against register files, weight
memories, membrane-potential memories and spike memories. It is a pure Python
library with no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Fully connected network (`spikecore.fcsnn`)

A three-layer fully connected network: an input layer, a hidden layer and an
output layer, each run by one cluster of four PEs.

- `spikecore.fcsnn.isa`: the 32-bit instruction format (`Opcode`,
  `Instruction`, `decode`), the memory geometry constants, and the spike word
  format (`pack_spike`, `unpack_spike`: neuron id in bits 15..0, time step in
  bits 23..16).
- `spikecore.fcsnn.alu`: the integer ALU (`AluOp`, `alu`) with signed 32-bit
  results. It raises `ValueError` for an unknown operation or a shift count
  outside 0..31, and `ZeroDivisionError` for a modulo by zero.
- `spikecore.fcsnn.pe`: the accumulate step of a processing element
  (`accumulate`), potential plus weight wrapped to 32 bits.
- `spikecore.fcsnn.spike_memory`: `SpikeMemoryBank`, sixteen spike lanes that
  carry spikes between clusters. `broadcast(cluster_mask, spike)` appends a
  spike to every selected lane (mask bit 15 selects lane 0, bit 0 selects
  lane 15) and returns the lanes written; `reset_pointers()` saves each write
  pointer in `last` and rewinds it; `reset_memory()` zeroes every lane except
  lane 11; `lane(index)` returns one lane's memory.
- `spikecore.fcsnn.cluster`: `ClusterConfig` (program, spike lane it reads,
  weight layout) and `Cluster`, which executes its program for one time step
  with `run(ddr, spikes, time_step, input_index, input_memory)` and returns
  the new input spike index. Membrane potentials persist across runs in
  `Cluster.potentials`. An optional `max_steps` turns a runaway program into a
  `RuntimeError`. `input_layer_config()` gives the input layer cluster.
- `spikecore.fcsnn.hidden_layer` and `spikecore.fcsnn.output_layer`: the
  programs and parameters of the other two clusters (`hidden_layer_config`,
  `output_layer_config`).
- `spikecore.fcsnn.controller`: `run(ddr, idx_ret, idx_spkm, test,
  in_mem_offset, in_mem_length)` loads the input spikes from the DDR image,
  runs the three clusters over time steps 1 to 35 and returns an
  `AcceleratorResult` with a read-back `value` and the `classification`.

`idx_ret` selects the read-back value: 0, 3 and 6 give potential number `test`
of clusters 0, 1 and 2; 1, 4 and 7 give the spike count of lanes 1, 2 and 3;
2, 5 and 8 give spike word `idx_spkm` of lanes 1, 2 and 3; any other value
gives 666.

```python
from spikecore.fcsnn import controller

ddr = [0] * 4_000_000        # weights and input spikes, one 32-bit word each
result = controller.run(ddr, idx_ret=7, idx_spkm=0, test=0,
                        in_mem_offset=0, in_mem_length=0)
print(result)   # AcceleratorResult(value=0, classification=None)
```

Input spikes are read from word 2,500,000 of the DDR image plus
`in_mem_offset`, in whole blocks of 300 words, at most ten blocks.

The output class is the neuron that fired most often in the output layer's
spike lane. `classify(spikes)` returns it from any list of spike words: a
label must occur at least twice, the first of equally frequent labels wins,
and `None` is returned when no label repeats.

## Convolutional network (`spikecore.csnn`)

Building blocks of a convolutional network accelerator:

- `spikecore.csnn.layout`: the geometry constants and the 64-bit instruction
  format (`Opcode`, `AluFunc`, `MessagePackage`, `decode_instruction`).
- `spikecore.csnn.register_file`: `RegisterFile`, 32 registers of 64 bits;
  `read(index)` and `write(index, value)` wrap the register number at five
  bits and log each access at debug level.
- `spikecore.csnn.spike_scheduler`: `SpikeMemory`, seven spike queues with
  write indices. `write(cluster_id, value)` appends and returns the position
  (raising `IndexError` when the queue is full), `read(cluster_id, index)`
  reads a word, and `reset`, `reset_partial(cluster_mask)`, `reset_indices`
  and `reset_partial_indices(cluster_mask)` clear contents or indices.
- `spikecore.csnn.potential_init`: `init_potential_memory(memories,
  cluster_id)` writes each neuron's column, row and feature-map coordinates
  (clusters 0 to 4) or output neuron id (clusters 5 to 7) into the upper 32
  bits of the four PE potential memories, in place.

```python
from spikecore.csnn.potential_init import init_potential_memory

memories = [[0] * 2048 for _ in range(4)]
init_potential_memory(memories, cluster_id=0)
```

## What the package does not do

- There is no command-line tool; everything is used from Python.
- The DDR image is any sequence of integers you build yourself; nothing reads
  weights or input spikes from files.
- The convolutional part offers building blocks only: it has no instruction
  executor, cluster or top-level run like `spikecore.fcsnn.controller`.