from enum import IntEnum


class Opcode(IntEnum):
    """Defines the E20 operation codes (bits 15-13)."""

    # Three-register group, selected further by Funct
    REG = 0

    ADDI = 1

    # Control flow
    J = 2
    JAL = 3

    # Data movement
    LW = 4
    SW = 5

    JEQ = 6
    SLTI = 7

    def __str__(self) -> str:
        return self.name.lower()


class Funct(IntEnum):
    """Function selector (bits 3-0) for the three-register group."""

    ADD = 0
    SUB = 1
    OR = 2
    AND = 3
    SLT = 4
    JR = 8

    def __str__(self) -> str:
        return self.name.lower()
