from __future__ import annotations
from dataclasses import dataclass

from .opcode import Opcode, Funct

WORD_MASK = 0xFFFF
IMM7_SIGN_BIT = 0x40
IMM7_EXTEND = 0xFF80


def sign_extend7(imm7: int) -> int:
    """Sign-extends a 7-bit immediate to a 16-bit word."""
    imm7 &= 0x7F
    if imm7 & IMM7_SIGN_BIT:
        return imm7 | IMM7_EXTEND
    return imm7


@dataclass(frozen=True)
class Instruction:
    """A decoded 16-bit E20 instruction word.

    Every field is extracted regardless of the opcode; the executor only
    looks at the ones its instruction format uses.
    """
    word: int
    opcode: Opcode
    reg_a: int   # bits 12-10
    reg_b: int   # bits 9-7
    reg_c: int   # bits 6-4
    funct: int   # bits 3-0
    imm7: int    # bits 6-0, raw
    simm7: int   # imm7 sign-extended to 16 bits
    imm13: int   # bits 12-0

    @property
    def mnemonic(self) -> str:
        if self.opcode != Opcode.REG:
            return str(self.opcode)
        try:
            return str(Funct(self.funct))
        except ValueError:
            return "?"

    @property
    def signed_imm7(self) -> int:
        return self.imm7 - 0x80 if self.imm7 & IMM7_SIGN_BIT else self.imm7

    def __str__(self) -> str:
        op = self.opcode
        if op == Opcode.REG:
            if self.funct == Funct.JR:
                return f"jr ${self.reg_a}"
            return f"{self.mnemonic} ${self.reg_c}, ${self.reg_a}, ${self.reg_b}"
        if op in (Opcode.J, Opcode.JAL):
            return f"{self.mnemonic} {self.imm13}"
        if op in (Opcode.LW, Opcode.SW):
            return f"{self.mnemonic} ${self.reg_b}, {self.signed_imm7}(${self.reg_a})"
        return f"{self.mnemonic} ${self.reg_b}, ${self.reg_a}, {self.signed_imm7}"


def decode(word: int) -> Instruction:
    """Splits an instruction word into its opcode and operand fields."""
    word &= WORD_MASK
    imm7 = word & 0x7F
    return Instruction(
        word=word,
        opcode=Opcode(word >> 13),
        reg_a=(word >> 10) & 0x7,
        reg_b=(word >> 7) & 0x7,
        reg_c=(word >> 4) & 0x7,
        funct=word & 0xF,
        imm7=imm7,
        simm7=sign_extend7(imm7),
        imm13=word & 0x1FFF,
    )
