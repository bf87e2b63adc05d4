"""Configuration of the hidden layer cluster of the fully connected core."""

from __future__ import annotations

from .cluster import ClusterConfig

_HIDDEN_LAYER_PROGRAM = (
    0b00000000000010000000000000000000,  # mov done, #0
    0b00000000011111000000000011111111,  # mov r31, 0xFF
    0b00000000000011000000000000000000,  # mov src_id, #0
    0b00000000000101000000000100101100,  # mov num, d300
    0b10010001101010010010000000000000,  # rds src_id, spike_step, input_spike_idx
    0b01010101000000000000000000000111,  # beq spike_step, time_step, handle_init
    0b01100101000000000000000000010010,  # bneq spike_step, time_step, ckf_init
    0b00000000000110000000000000000000,  # mov potential_addr, #0
    0b00100011100011000000000100101100,  # mul weight_ddr_addr, src_id, d300
    0b00000000001000000000000000000000,  # mov weight_addr, #0
    0b10100100000111001010000000001111,  # ldw weight_addr, weight_ddr_addr, num, #1111
    0b10110100000110000000000000001111,  # rwp weight_addr, potential_addr, #1111
    0b11000011000000000000000000001111,  # acc potential_addr, #1111
    0b00010011000110000000000000000001,  # add potential_addr, potential_addr, #1
    0b00010100001000000000000000000001,  # add weight_addr, weight_addr, #1
    0b01100011000101000000000000001011,  # bneq potential_addr, num, handle
    0b00010100101001000000000000000001,  # add input_spike_idx, input_spike_idx, #1
    0b01110000000000000000000000000100,  # jmp read_spikes
    0b00000000000100000000000000000000,  # mov potential_idx, #0
    0b11010010000000100000000000001111,  # ckf potential_idx, lanes 0010.., #1111
    0b00010010000100000000000000000001,  # add potential_idx, potential_idx, #1
    0b01100010000101000000000000010011,  # bneq potential_idx, num, ckf
    0b00000000000010000000000000000001,  # mov done, #1
)


def hidden_layer_config() -> ClusterConfig:
    """Configuration of the hidden cluster: reads spike lane 1, fires into lane 2."""
    return ClusterConfig(
        cluster_id=1,
        program=_HIDDEN_LAYER_PROGRAM,
        prespike_lane=1,
        ddr_shift=940800,
        num_preneuron=1200,
    )