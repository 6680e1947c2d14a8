import pytest

from e20_sim.isa.opcode import Opcode, Funct
from e20_sim.runtime.state import MachineState


class Asm:
    """Tiny E20 encoder used to build test programs."""

    @staticmethod
    def reg(funct, rd, ra, rb=0):
        return (Opcode.REG << 13) | (ra << 10) | (rb << 7) | (rd << 4) | funct

    @staticmethod
    def imm(opcode, rb, ra, imm):
        return (opcode << 13) | (ra << 10) | (rb << 7) | (imm & 0x7F)

    @classmethod
    def add(cls, rd, ra, rb): return cls.reg(Funct.ADD, rd, ra, rb)

    @classmethod
    def sub(cls, rd, ra, rb): return cls.reg(Funct.SUB, rd, ra, rb)

    @classmethod
    def jr(cls, ra): return cls.reg(Funct.JR, 0, ra)

    @classmethod
    def addi(cls, rt, rs, imm): return cls.imm(Opcode.ADDI, rt, rs, imm)

    @classmethod
    def lw(cls, rt, rs, imm): return cls.imm(Opcode.LW, rt, rs, imm)

    @classmethod
    def sw(cls, rt, rs, imm): return cls.imm(Opcode.SW, rt, rs, imm)

    @classmethod
    def jeq(cls, ra, rb, rel): return cls.imm(Opcode.JEQ, rb, ra, rel)

    @classmethod
    def slti(cls, rt, rs, imm): return cls.imm(Opcode.SLTI, rt, rs, imm)

    @staticmethod
    def j(target): return (Opcode.J << 13) | (target & 0x1FFF)

    @staticmethod
    def jal(target): return (Opcode.JAL << 13) | (target & 0x1FFF)

    @staticmethod
    def to_machine_code(words):
        return [f"ram[{i}] = 16'b{w:016b};" for i, w in enumerate(words)]


@pytest.fixture
def asm():
    return Asm


@pytest.fixture
def machine():
    """A fresh machine with all registers and memory cleared."""
    return MachineState()
