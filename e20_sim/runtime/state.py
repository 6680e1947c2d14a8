from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence

import numpy as np

from ..errors import LoadError

NUM_REGS = 8
MEM_SIZE = 1 << 13
WORD_MASK = 0xFFFF


@dataclass
class FinalState:
    """Snapshot of the architectural state once the program has halted."""
    pc: int
    registers: List[int]
    memory: List[int] = field(default_factory=list)

    def to_json(self) -> dict:
        return {"pc": self.pc, "registers": list(self.registers), "memory": list(self.memory)}


class MachineState:
    """Register file, program counter and main memory of the E20 machine.

    Memory is a fixed-size array; every access reduces its address modulo
    MEM_SIZE, so no index can fall outside it.
    """

    def __init__(self):
        self.pc = 0
        self.registers: List[int] = [0] * NUM_REGS
        self.memory = np.zeros(MEM_SIZE, dtype=np.uint16)

    def read_reg(self, index: int) -> int:
        return self.registers[index & 0x7]

    def write_reg(self, index: int, value: int):
        self.registers[index & 0x7] = value & WORD_MASK

    def clear_zero_register(self):
        """Register $0 is hardwired to zero."""
        self.registers[0] = 0

    def load_word(self, address: int) -> int:
        return int(self.memory[address % MEM_SIZE])

    def store_word(self, address: int, value: int):
        self.memory[address % MEM_SIZE] = value & WORD_MASK

    def fetch(self) -> int:
        """Returns the instruction word at the current PC."""
        return self.load_word(self.pc)

    def load_program(self, words: Sequence[int]):
        """Copies a contiguous memory image starting at address 0."""
        if len(words) > MEM_SIZE:
            raise LoadError(f"Program of {len(words)} words does not fit in {MEM_SIZE} words of memory")
        self.memory[:len(words)] = [w & WORD_MASK for w in words]

    def snapshot(self, memquantity: int = 128) -> FinalState:
        count = max(0, min(memquantity, MEM_SIZE))
        return FinalState(
            pc=self.pc,
            registers=list(self.registers),
            memory=[int(w) for w in self.memory[:count]],
        )
