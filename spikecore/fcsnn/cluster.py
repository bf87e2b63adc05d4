"""A cluster of four processing elements driven by a small instruction program."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from .alu import AluOp, alu
from .isa import (
    BASE_ADDR_DDR,
    DEPTH_INPUT_MEM,
    DEPTH_INSTR_MEM,
    DEPTH_POTENTIAL_MEM,
    DEPTH_REG_FILE,
    DEPTH_WEIGHT_MEM,
    DONE_EXECUTION,
    FIRING_THRESHOLD,
    INPUT_MEM_IDX,
    N_NEURONS_PER_PE,
    NUM_CLUSTERS,
    NUM_NEURONS_PERPE,
    REG_FILE_TIMESTEP,
    WIDTH_IN_MEM_POINTER,
    WIDTH_INSTR_MEM_POINTER,
    Instruction,
    Opcode,
    decode,
    pack_spike,
    unpack_spike,
)
from .pe import accumulate
from .spike_memory import SpikeMemoryBank

NUM_PES = 4

_MASK32 = 0xFFFFFFFF
_PC_MASK = (1 << WIDTH_INSTR_MEM_POINTER) - 1
_INPUT_INDEX_MASK = (1 << WIDTH_IN_MEM_POINTER) - 1
_EMPTY_INPUT = (0,) * DEPTH_INPUT_MEM


def _int32(value: int) -> int:
    value &= _MASK32
    return value - (1 << 32) if value & 0x80000000 else value


@dataclass(frozen=True)
class ClusterConfig:
    """What distinguishes one cluster from another: program, spike lane and weight layout."""

    cluster_id: int
    program: tuple[int, ...]
    prespike_lane: int
    ddr_shift: int
    num_preneuron: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "program", tuple(self.program))
        if len(self.program) > DEPTH_INSTR_MEM:
            raise ValueError(
                f"program has {len(self.program)} instructions, at most {DEPTH_INSTR_MEM} fit"
            )
        if not 0 <= self.prespike_lane < NUM_CLUSTERS:
            raise ValueError(f"no spike lane {self.prespike_lane}")


_INPUT_LAYER_PROGRAM = (
    0b00000000000010000000000000000000,  # mov done, #0
    0b00000000011111000000000011111111,  # mov r31, 0xFF
    0b00000000000011000000000000000000,  # mov src_id, #0
    0b00000000000101000000000100101100,  # mov num, d300
    0b10000001101010010010000000000000,  # rdi src_id, spike_step, input_spike_idx
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
    0b01110000000000000000000000000100,  # jmp read_input_spikes
    0b00000000000100000000000000000000,  # mov potential_idx, #0
    0b11010010000001000000000000001111,  # ckf potential_idx, lanes 0100.., #1111
    0b00010010000100000000000000000001,  # add potential_idx, potential_idx, #1
    0b01100010000101000000000000010011,  # bneq potential_idx, num, ckf
    0b00000000000010000000000000000001,  # mov done, #1
)


def input_layer_config() -> ClusterConfig:
    """Configuration of the cluster that reads the input spikes (784 inputs, 1200 outputs)."""
    return ClusterConfig(
        cluster_id=0,
        program=_INPUT_LAYER_PROGRAM,
        prespike_lane=0,
        ddr_shift=0,
        num_preneuron=784,
    )


@dataclass
class _ProcessingElement:
    weights: list[int] = field(default_factory=lambda: [0] * DEPTH_WEIGHT_MEM)
    next_potentials: list[int] = field(default_factory=lambda: [0] * N_NEURONS_PER_PE)
    weight: int = 0
    current: int = 0


class _Execution:
    """State of one call of a cluster program."""

    def __init__(
        self,
        cluster: "Cluster",
        ddr: Sequence[int],
        spikes: SpikeMemoryBank,
        time_step: int,
        input_index: int,
        input_memory: Sequence[int],
    ) -> None:
        self.config = cluster.config
        self.potentials = cluster.potentials
        self.ddr = ddr
        self.spikes = spikes
        self.input_memory = input_memory
        self.pes = [_ProcessingElement() for _ in range(NUM_PES)]
        self.regs = [0] * DEPTH_REG_FILE
        self.input_index = input_index & _INPUT_INDEX_MASK
        self.regs[REG_FILE_TIMESTEP] = time_step & _MASK32
        self.regs[INPUT_MEM_IDX] = self.input_index
        self.pc = 0
        self.done = False
        self.handlers: dict[int, Callable[[Instruction], None]] = {
            Opcode.MOV: self._mov,
            Opcode.ADD: self._add,
            Opcode.MUL: self._mul,
            Opcode.SFT: self._sft,
            Opcode.MOD: self._mod,
            Opcode.BEQ: self._beq,
            Opcode.BNEQ: self._bneq,
            Opcode.JMP: self._jmp,
            Opcode.RDI: self._rdi,
            Opcode.RDS: self._rds,
            Opcode.LDW: self._ldw,
            Opcode.RWP: self._rwp,
            Opcode.ACC: self._acc,
            Opcode.CKF: self._ckf,
        }

    def execute(self, max_steps: Optional[int]) -> int:
        program = self.config.program
        steps = 0
        while not self.done:
            if max_steps is not None and steps >= max_steps:
                raise RuntimeError(f"cluster program did not finish within {max_steps} steps")
            if self.pc >= len(program):
                raise IndexError(f"program counter {self.pc} is past the end of the program")
            instruction = decode(program[self.pc])
            handler = self.handlers.get(instruction.opcode)
            if handler is None:
                raise ValueError(
                    f"unknown opcode {instruction.opcode} at instruction {self.pc}"
                )
            handler(instruction)
            steps += 1
        return self.input_index

    def _next(self) -> None:
        self.pc = (self.pc + 1) & _PC_MASK

    def _operand(self, instruction: Instruction) -> int:
        return instruction.imm if instruction.flag == 0 else self.regs[instruction.reg_d]

    def _active_pes(self, instruction: Instruction):
        for index, pe in enumerate(self.pes):
            if instruction.pe_mask >> index & 1:
                yield index, pe

    def _mov(self, instruction: Instruction) -> None:
        self.regs[instruction.reg_b] = self._operand(instruction) & _MASK32
        if self.regs[DONE_EXECUTION] == 1:
            self.done = True
            self.input_index = self.regs[INPUT_MEM_IDX] & _INPUT_INDEX_MASK
        self._next()

    def _add(self, instruction: Instruction) -> None:
        result = alu(self.regs[instruction.reg_b], self._operand(instruction), AluOp.ADD)
        self.regs[instruction.reg_a] = result & _MASK32
        self.input_index = self.regs[INPUT_MEM_IDX] & _INPUT_INDEX_MASK
        self._next()

    def _mul(self, instruction: Instruction) -> None:
        result = alu(self.regs[instruction.reg_b], self._operand(instruction), AluOp.MUL)
        self.regs[instruction.reg_a] = result & _MASK32
        self._next()

    def _sft(self, instruction: Instruction) -> None:
        result = alu(self.regs[instruction.reg_a], instruction.imm, AluOp.SHIFT_LEFT)
        self.regs[instruction.reg_a] = result & _MASK32
        self._next()

    def _mod(self, instruction: Instruction) -> None:
        result = alu(self.regs[instruction.reg_a], instruction.imm, AluOp.MOD)
        self.regs[instruction.reg_a] = result & _MASK32
        self._next()

    def _beq(self, instruction: Instruction) -> None:
        if self.regs[instruction.reg_a] == self.regs[instruction.reg_b]:
            self.pc = instruction.imm & _PC_MASK
        else:
            self._next()

    def _bneq(self, instruction: Instruction) -> None:
        if self.regs[instruction.reg_a] != self.regs[instruction.reg_b]:
            self.pc = instruction.imm & _PC_MASK
        else:
            self._next()

    def _jmp(self, instruction: Instruction) -> None:
        self.pc = instruction.imm & _PC_MASK

    def _load_spike(self, instruction: Instruction, word: int) -> None:
        neuron_id, time_step = unpack_spike(word)
        self.regs[instruction.reg_a] = neuron_id
        self.regs[instruction.reg_b] = time_step
        self._next()

    def _rdi(self, instruction: Instruction) -> None:
        self._load_spike(instruction, self.input_memory[self.regs[instruction.reg_c]])

    def _rds(self, instruction: Instruction) -> None:
        lane = self.spikes.lane(self.config.prespike_lane)
        self._load_spike(instruction, lane[self.regs[instruction.reg_c]])

    def _ldw(self, instruction: Instruction) -> None:
        dest = self.regs[instruction.reg_a]
        src = self.regs[instruction.reg_b]
        size = self.regs[instruction.reg_c]
        if dest + size > DEPTH_WEIGHT_MEM:
            raise IndexError(
                f"weight load of {size} words at {dest} overruns the weight memory"
            )
        for index, pe in self._active_pes(instruction):
            start = (
                BASE_ADDR_DDR // 4
                + src
                + size * self.config.num_preneuron * index
                + self.config.ddr_shift
            )
            block = self.ddr[start:start + size]
            if len(block) != size:
                raise IndexError(f"weight load of {size} words at {start} overruns the DDR image")
            pe.weights[dest:dest + size] = [_int32(word) for word in block]
        self._next()

    def _rwp(self, instruction: Instruction) -> None:
        weight_addr = self.regs[instruction.reg_a]
        potential_addr = self.regs[instruction.reg_b]
        for index, pe in self._active_pes(instruction):
            pe.weight = pe.weights[weight_addr]
            pe.current = self.potentials[index][potential_addr]
        self._next()

    def _acc(self, instruction: Instruction) -> None:
        neuron = self.regs[instruction.reg_a]
        for index, pe in self._active_pes(instruction):
            pe.next_potentials[neuron] = accumulate(pe.current, pe.weight)
            self.potentials[index][neuron] = pe.next_potentials[neuron]
        self._next()

    def _ckf(self, instruction: Instruction) -> None:
        neuron = self.regs[instruction.reg_a]
        for index, pe in self._active_pes(instruction):
            if pe.next_potentials[neuron] >= FIRING_THRESHOLD:
                neuron_id = neuron + self.regs[NUM_NEURONS_PERPE] * index
                spike = pack_spike(neuron_id, self.regs[REG_FILE_TIMESTEP])
                self.spikes.broadcast(instruction.cluster_mask, spike)
                self.potentials[index][neuron] = 0
        self._next()


class Cluster:
    """Four processing elements with their membrane potentials, run one time step at a time.

    The potentials persist between runs; weights, registers and the
    per-step potentials of the processing elements start afresh each run.
    """

    def __init__(self, config: ClusterConfig, max_steps: Optional[int] = None) -> None:
        self.config = config
        self.max_steps = max_steps
        self.potentials: list[list[int]] = [
            [0] * DEPTH_POTENTIAL_MEM for _ in range(NUM_PES)
        ]

    def run(
        self,
        ddr: Sequence[int],
        spikes: SpikeMemoryBank,
        time_step: int,
        input_index: int,
        input_memory: Optional[Sequence[int]] = None,
    ) -> int:
        """Execute the program for one time step and return the new input spike index.

        Raises IndexError when the program counter or a memory address leaves
        its memory, ValueError on an unknown opcode, and RuntimeError when
        max_steps instructions pass without the program finishing.
        """
        memory = _EMPTY_INPUT if input_memory is None else input_memory
        execution = _Execution(self, ddr, spikes, time_step, input_index, memory)
        return execution.execute(self.max_steps)