"""Geometry, opcodes and instruction layout of the convolutional core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

NUM_TOTAL_CLUSTER = 6
NUM_PE_PER_CLUSTER = 4
MASK_CLST_INIT_FLAG = 0b00111111
TIMESTEP_START_POINT = 1
CLST_ID_WIDTH = 32

BASE_ADDR_DDR = 0

# Instruction word layout: (msb, lsb).
IMM_CL_BITS = (21, 16)
IMM_CH_BITS = (27, 22)
IMM_BL_BITS = (33, 28)
IMM_BH_BITS = (39, 34)
IMM_B_BITS = (15, 0)
IMM_A_BITS = (31, 16)
REG_D_BITS = (36, 32)
REG_C_BITS = (41, 37)
REG_C_SC_BITS = (44, 40)
REG_B_SC_BITS = (49, 45)
REG_A_SC_BITS = (54, 50)
REG_B_BITS = (46, 42)
REG_A_BITS = (51, 47)
FLAG_FL_BITS = (53, 53)
FLAG_FH_BITS = (54, 54)
FLAG_I_BITS = (55, 55)
FLAG_C_BITS = (56, 56)
FLAG_P_BITS = (57, 57)
FLAG_S_BITS = (58, 58)
OPCODE_BITS = (63, 59)

DEPTH_INSTR_MEM = 1024
WIDTH_INSTR_MEM = 64
DEPTH_WEIGHT_MEM = 2624
WIDTH_WEIGHT_MEM = 32
DEPTH_POTENTIAL_MEM = 2048
WIDTH_POTENTIAL_MEM = 64
DEPTH_SPIKE_MEM = 4048
WIDTH_SPIKE_MEM = 32
DEPTH_OUTPUT_MEM = 1024
WIDTH_OUTPUT_MEM = 64

WIDTH_SPIKE_MEM_IDX = 12
WIDTH_INSTR_MEM_IDX = 12
WIDTH_OUTPUT_MEM_IDX = 12

WIDTH_TIME_STEP = 32

DEPTH_REG_FILE = 32
WIDTH_REG_FILE = 64
WIDTH_REG_FILE_IDX = 5

# Registers with a fixed role.
REG_ID_TIMESTEP = 1
PEREG_ID_TIMESTEP = 2


def _field(word: int, bits: tuple[int, int]) -> int:
    msb, lsb = bits
    return (word >> lsb) & ((1 << (msb - lsb + 1)) - 1)


class Opcode(IntEnum):
    """Operations of the convolutional core."""

    MOV = 0b00001
    AND = 0b00010
    OR = 0b00011
    XOR = 0b00100
    LFT = 0b00101
    RFT = 0b00110
    SGS = 0b00111
    CCT = 0b01000
    ADD = 0b01001
    SUB = 0b01010
    MUL = 0b01011
    DVD = 0b01100
    MOD = 0b01101
    JE = 0b01110
    JG = 0b01111
    JL = 0b10000
    JMP = 0b10001
    RDI = 0b10010
    LDW = 0b10011
    WDW = 0b10100
    RWM = 0b10101
    RPM = 0b10110
    WBW = 0b10111
    WBP = 0b11000
    OPT = 0b11001
    RDS = 0b11010
    SYN = 0b11110
    DONE = 0b11111


class AluFunc(IntEnum):
    """Function selector of the ALU of the convolutional core."""

    AND = 0b0000
    OR = 0b0001
    XOR = 0b0010
    ADD = 0b0011
    SUB = 0b0100
    MUL = 0b0101
    DVD = 0b0110
    MOD = 0b0111
    LFT = 0b1000
    RFT = 0b1001
    JE = 0b1010
    JN = 0b1011
    JG = 0b1100
    JNG = 0b1101
    JL = 0b1110
    JNL = 0b1111


@dataclass
class MessagePackage:
    """The decoded fields of one instruction, plus the value carried with it."""

    opcode: int = 0
    flag_s: int = 0
    flag_p: int = 0
    flag_c: int = 0
    flag_i: int = 0
    flag_fh: int = 0
    flag_fl: int = 0
    reg_a: int = 0
    reg_b: int = 0
    reg_c: int = 0
    reg_d: int = 0
    imm_a: int = 0
    imm_b: int = 0
    imm_bh: int = 0
    imm_bl: int = 0
    imm_ch: int = 0
    imm_cl: int = 0
    rcp_value: int = 0

    @property
    def operation(self) -> Opcode:
        """The opcode as an Opcode; raises ValueError for an unassigned one."""
        return Opcode(self.opcode)


def decode_instruction(word: int) -> MessagePackage:
    """Split a 64-bit instruction word into its fields; fields overlap by design."""
    word &= (1 << WIDTH_INSTR_MEM) - 1
    return MessagePackage(
        opcode=_field(word, OPCODE_BITS),
        flag_s=_field(word, FLAG_S_BITS),
        flag_p=_field(word, FLAG_P_BITS),
        flag_c=_field(word, FLAG_C_BITS),
        flag_i=_field(word, FLAG_I_BITS),
        flag_fh=_field(word, FLAG_FH_BITS),
        flag_fl=_field(word, FLAG_FL_BITS),
        reg_a=_field(word, REG_A_BITS),
        reg_b=_field(word, REG_B_BITS),
        reg_c=_field(word, REG_C_BITS),
        reg_d=_field(word, REG_D_BITS),
        imm_a=_field(word, IMM_A_BITS),
        imm_b=_field(word, IMM_B_BITS),
        imm_bh=_field(word, IMM_BH_BITS),
        imm_bl=_field(word, IMM_BL_BITS),
        imm_ch=_field(word, IMM_CH_BITS),
        imm_cl=_field(word, IMM_CL_BITS),
    )