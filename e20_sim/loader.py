from __future__ import annotations
import re
from pathlib import Path
from typing import Iterable, List

from .errors import LoadError
from .runtime.state import MEM_SIZE, WORD_MASK

MACHINE_CODE_RE = re.compile(r"^ram\[(\d+)\] = 16'b(\d+);.*$")


def parse_machine_code(lines: Iterable[str]) -> List[int]:
    """Parses E20 machine code lines into a memory image starting at address 0.

    Each line looks like `ram[3] = 16'b0010000000000011;  // j 3`. Addresses
    must start at 0 and increase by one; blank lines are skipped.
    """
    words: List[int] = []
    for line in lines:
        line = line.rstrip("\r\n")
        if not line.strip():
            continue
        match = MACHINE_CODE_RE.match(line)
        if not match:
            raise LoadError(f"Can't parse line: {line}")
        addr = int(match.group(1), 10)
        if addr != len(words):
            raise LoadError(f"Memory addresses encountered out of sequence: {addr}")
        if addr >= MEM_SIZE:
            raise LoadError("Program too big for memory")
        try:
            instr = int(match.group(2), 2)
        except ValueError:
            raise LoadError(f"Can't parse line: {line}") from None
        if instr > WORD_MASK:
            raise LoadError(f"Value does not fit in 16 bits: {line}")
        words.append(instr)
    return words


def load_machine_code(path: str) -> List[int]:
    """Reads a machine code file from disk. See parse_machine_code."""
    p = Path(path)
    if not p.is_file():
        raise LoadError(f"Can't open file {path}")
    with open(p, "r") as f:
        return parse_machine_code(f)
