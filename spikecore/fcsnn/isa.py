"""Instruction set, memory geometry and spike word layout of the fully connected core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

BASE_ADDR_DDR = 0

NUM_CLUSTERS = 16
N_NEURONS_PER_PE = 300
FIRING_THRESHOLD = 4194304

# Registers with a fixed role.
REG_FILE_TIMESTEP = 0
NUM_NEURONS_PERPE = 5
DONE_EXECUTION = 2
EXIT_EXECUTION = 30
INPUT_MEM_IDX = 9

DEPTH_INSTR_MEM = 64
WIDTH_INSTR_MEM = 32
DEPTH_WEIGHT_MEM = 1024
WIDTH_WEIGHT_MEM = 32
DEPTH_POTENTIAL_MEM = 1024
WIDTH_POTENTIAL_MEM = 32
DEPTH_INPUT_MEM = 3072
WIDTH_INPUT_MEM = 32
DEPTH_SPIKE_MEM = 1024
WIDTH_SPIKE_MEM = 32
WIDTH_SPIKE_MEM_POINTER = 10
WIDTH_IN_MEM_POINTER = 10
WIDTH_INSTR_MEM_POINTER = 10
DEPTH_REG_FILE = 32
WIDTH_REG_FILE = 32

# Spike word layout: (msb, lsb).
NID_BITS = (15, 0)
TSTEP_BITS = (23, 16)

# Instruction word layout: (msb, lsb).
PEMASK_BITS = (3, 0)
CLUSTERMASK_BITS = (19, 4)
IMM_BITS = (15, 0)
REG_D_BITS = (15, 11)
FLAG_BITS = (17, 16)
REG_C_BITS = (17, 13)
REG_B_BITS = (22, 18)
REG_A_BITS = (27, 23)
OPCODE_BITS = (31, 28)


def _field(word: int, bits: tuple[int, int]) -> int:
    msb, lsb = bits
    return (word >> lsb) & ((1 << (msb - lsb + 1)) - 1)


class Opcode(IntEnum):
    """Operations understood by a cluster."""

    MOV = 0
    ADD = 1
    MUL = 2
    SFT = 3
    MOD = 4
    BEQ = 5
    BNEQ = 6
    JMP = 7
    RDI = 8
    RDS = 9
    LDW = 10
    RWP = 11
    ACC = 12
    CKF = 13


@dataclass(frozen=True)
class Instruction:
    """Every field of a 32-bit instruction word; fields overlap by design."""

    word: int
    opcode: int
    reg_a: int
    reg_b: int
    reg_c: int
    reg_d: int
    flag: int
    imm: int
    pe_mask: int
    cluster_mask: int

    @property
    def operation(self) -> Opcode:
        """The opcode as an Opcode; raises ValueError for an unassigned one."""
        return Opcode(self.opcode)


def decode(word: int) -> Instruction:
    """Split an instruction word into its fields."""
    word &= (1 << WIDTH_INSTR_MEM) - 1
    return Instruction(
        word=word,
        opcode=_field(word, OPCODE_BITS),
        reg_a=_field(word, REG_A_BITS),
        reg_b=_field(word, REG_B_BITS),
        reg_c=_field(word, REG_C_BITS),
        reg_d=_field(word, REG_D_BITS),
        flag=_field(word, FLAG_BITS),
        imm=_field(word, IMM_BITS),
        pe_mask=_field(word, PEMASK_BITS),
        cluster_mask=_field(word, CLUSTERMASK_BITS),
    )


def pack_spike(neuron_id: int, time_step: int) -> int:
    """Build a spike word; both fields are truncated to their widths."""
    nid_msb, nid_lsb = NID_BITS
    ts_msb, ts_lsb = TSTEP_BITS
    nid = neuron_id & ((1 << (nid_msb - nid_lsb + 1)) - 1)
    step = time_step & ((1 << (ts_msb - ts_lsb + 1)) - 1)
    return (nid << nid_lsb) | (step << ts_lsb)


def unpack_spike(word: int) -> tuple[int, int]:
    """Return (neuron_id, time_step) of a spike word."""
    return _field(word, NID_BITS), _field(word, TSTEP_BITS)