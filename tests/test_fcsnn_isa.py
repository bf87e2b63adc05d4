import pytest

from spikecore.fcsnn.isa import (
    INPUT_MEM_IDX,
    N_NEURONS_PER_PE,
    NUM_NEURONS_PERPE,
    Opcode,
    decode,
    pack_spike,
    unpack_spike,
)


def test_decode_mov_immediate():
    ins = decode(0b00000000000101000000000100101100)  # mov num, #00, d300
    assert ins.operation is Opcode.MOV
    assert ins.flag == 0
    assert ins.reg_b == NUM_NEURONS_PERPE
    assert ins.imm == N_NEURONS_PER_PE


def test_decode_rdi_uses_input_index_register():
    ins = decode(0b10000001101010010010000000000000)
    assert ins.operation is Opcode.RDI
    assert ins.reg_c == INPUT_MEM_IDX
    src_id = decode(0b00000000000011000000000000000000).reg_b
    assert ins.reg_a == src_id


def test_decode_ckf_masks():
    ins = decode(0b11010010000001000000000000001111)
    assert ins.operation is Opcode.CKF
    assert ins.cluster_mask == 0b0100000000000000
    assert ins.pe_mask == 0b1111
    assert ins.reg_a == decode(0b00000000000100000000000000000000).reg_b


def test_decode_ldw_and_jmp():
    ldw = decode(0b10100100000111001010000000001111)
    assert ldw.operation is Opcode.LDW
    assert ldw.reg_c == NUM_NEURONS_PERPE
    jmp = decode(0b01110000000000000000000000000100)
    assert jmp.operation is Opcode.JMP
    assert jmp.imm == decode(0b10000001101010010010000000000000 & 0).imm + 4


def test_decode_keeps_word_within_32_bits():
    word = 0b01010101000000000000000000000111
    assert decode(word | (1 << 40)) == decode(word)


def test_unassigned_opcode_raises():
    ins = decode(0xE0000000)
    assert ins.opcode == 14
    with pytest.raises(ValueError):
        ins.operation


@pytest.mark.parametrize("nid, step", [(0, 0), (299, 1), (65535, 255), (1200, 35)])
def test_spike_round_trip(nid, step):
    assert unpack_spike(pack_spike(nid, step)) == (nid, step)


def test_spike_fields_are_truncated():
    assert unpack_spike(pack_spike(65536 + 7, 256 + 3)) == (7, 3)


def test_unpack_ignores_upper_byte():
    word = pack_spike(12, 5)
    assert unpack_spike(word | 0xFF000000) == unpack_spike(word)