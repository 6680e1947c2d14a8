from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from ..errors import UnimplementedOpcode
from ..isa.decoder import Instruction
from ..isa.opcode import Opcode, Funct
from .cache import AccessKind, CacheEvent, CacheHierarchy
from .state import MachineState, MEM_SIZE, WORD_MASK


@dataclass(frozen=True)
class StepResult:
    """Outcome of executing a single instruction."""
    halted: bool = False
    events: Tuple[CacheEvent, ...] = ()


_CONTINUE = StepResult()
_HALT = StepResult(halted=True)

# Three-register ALU operations: (a, b) -> result, before masking to 16 bits
_ALU_OPS: Dict[int, Callable[[int, int], int]] = {
    Funct.ADD: lambda a, b: a + b,
    Funct.SUB: lambda a, b: a - b,
    Funct.OR: lambda a, b: a | b,
    Funct.AND: lambda a, b: a & b,
    Funct.SLT: lambda a, b: 1 if a < b else 0,
}


def _next_pc(pc: int, offset: int = 1) -> int:
    return (pc + offset) & WORD_MASK


def _exec_reg(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    if instr.funct == Funct.JR:
        state.pc = state.read_reg(instr.reg_a)
        return _CONTINUE
    op = _ALU_OPS.get(instr.funct)
    if op is None:
        raise UnimplementedOpcode(state.pc, instr.word, instr.funct)
    state.write_reg(instr.reg_c, op(state.read_reg(instr.reg_a), state.read_reg(instr.reg_b)))
    state.pc = _next_pc(state.pc)
    return _CONTINUE


def _exec_addi(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    state.write_reg(instr.reg_b, state.read_reg(instr.reg_a) + instr.simm7)
    state.pc = _next_pc(state.pc)
    return _CONTINUE


def _exec_j(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    # A jump to itself is the E20 halt convention.
    halted = instr.imm13 == state.pc
    state.pc = instr.imm13
    return _HALT if halted else _CONTINUE


def _exec_jal(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    state.write_reg(7, _next_pc(state.pc))
    state.pc = instr.imm13
    return _CONTINUE


def _data_address(state: MachineState, instr: Instruction) -> int:
    return (state.read_reg(instr.reg_a) + instr.simm7) % MEM_SIZE


def _query(cache: Optional[CacheHierarchy], address: int, kind: AccessKind, pc: int) -> Tuple[CacheEvent, ...]:
    if cache is None:
        return ()
    # The log reports the memory index the instruction was fetched from
    return tuple(cache.query(address, kind, pc=pc % MEM_SIZE))


def _exec_lw(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    address = _data_address(state, instr)
    events = _query(cache, address, AccessKind.LOAD, state.pc)
    state.write_reg(instr.reg_b, state.load_word(address))
    state.pc = _next_pc(state.pc)
    return StepResult(events=events)


def _exec_sw(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    address = _data_address(state, instr)
    events = _query(cache, address, AccessKind.STORE, state.pc)
    state.store_word(address, state.read_reg(instr.reg_b))
    state.pc = _next_pc(state.pc)
    return StepResult(events=events)


def _exec_jeq(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    if state.read_reg(instr.reg_a) == state.read_reg(instr.reg_b):
        state.pc = _next_pc(state.pc, 1 + instr.simm7)
    else:
        state.pc = _next_pc(state.pc)
    return _CONTINUE


def _exec_slti(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy]) -> StepResult:
    # Unsigned compare against the sign-extended immediate
    state.write_reg(instr.reg_b, 1 if state.read_reg(instr.reg_a) < instr.simm7 else 0)
    state.pc = _next_pc(state.pc)
    return _CONTINUE


_DISPATCH: Dict[Opcode, Callable[[MachineState, Instruction, Optional[CacheHierarchy]], StepResult]] = {
    Opcode.REG: _exec_reg,
    Opcode.ADDI: _exec_addi,
    Opcode.J: _exec_j,
    Opcode.JAL: _exec_jal,
    Opcode.LW: _exec_lw,
    Opcode.SW: _exec_sw,
    Opcode.JEQ: _exec_jeq,
    Opcode.SLTI: _exec_slti,
}


def execute(state: MachineState, instr: Instruction, cache: Optional[CacheHierarchy] = None) -> StepResult:
    """Applies one decoded instruction to `state` and reports whether it halted.

    Loads and stores are reported to `cache` (if any) before memory is
    touched. Register $0 reads as zero again once the instruction completes.
    """
    try:
        return _DISPATCH[instr.opcode](state, instr, cache)
    finally:
        state.clear_zero_register()
