from __future__ import annotations


class SimulatorError(Exception):
    """Base class for all errors raised by the E20 simulator."""


class LoadError(SimulatorError, ValueError):
    """Malformed or out-of-sequence machine code image."""


class ConfigError(SimulatorError, ValueError):
    """Invalid simulator or cache configuration."""


class UnimplementedOpcode(SimulatorError):
    """An opcode-0 instruction whose function selector has no defined behaviour."""

    def __init__(self, pc: int, word: int, funct: int):
        self.pc = pc
        self.word = word
        self.funct = funct
        super().__init__(
            f"Unimplemented instruction {word:#06x} (funct={funct}) at pc={pc}"
        )


class StepLimitExceeded(SimulatorError):
    """The program did not halt within the configured instruction budget."""

    def __init__(self, steps: int, pc: int):
        self.steps = steps
        self.pc = pc
        super().__init__(f"Program did not halt after {steps} instructions (pc={pc})")
