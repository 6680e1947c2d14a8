from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Tuple

from ..cache_config import CacheConfig, MAX_LEVELS
from ..errors import ConfigError

# Tag held by a slot that has never been filled. Real tags are never negative.
EMPTY = -1


class AccessKind(str, Enum):
    LOAD = "LOAD"
    STORE = "STORE"


class Outcome(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    STORE = "SW"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CacheEvent:
    """One line of the cache access log."""
    level: str
    outcome: Outcome
    pc: int
    address: int
    row: int

    def to_json(self) -> Dict[str, Any]:
        return {"level": self.level, "outcome": self.outcome.value, "pc": self.pc,
                "address": self.address, "row": self.row}


class CacheRow:
    """A recency-ordered set of tags; the front is LRU and the back is MRU."""

    def __init__(self, associativity: int):
        self.blocks = deque([EMPTY] * associativity, maxlen=associativity)

    def access(self, tag: int) -> bool:
        """Touches `tag` and returns whether it was already resident.

        A resident tag moves to the back. Otherwise the front slot is evicted,
        whether or not it is EMPTY, and the tag is appended.
        """
        if tag in self.blocks:
            self.blocks.remove(tag)
            self.blocks.append(tag)
            return True
        # deque(maxlen) drops the front slot on append
        self.blocks.append(tag)
        return False

    def tags(self) -> List[int]:
        return list(self.blocks)


class CacheLevel:
    """A single set-associative cache level tracking tags only."""

    def __init__(self, config: CacheConfig):
        self.config = config
        self.name = config.name
        self.rows = [CacheRow(config.associativity) for _ in range(config.num_rows)]
        self.hits = 0
        self.misses = 0
        self.stores = 0

    def locate(self, address: int) -> Tuple[int, int]:
        """Maps an address to (row, tag) for this level."""
        block_id = address // self.config.blocksize
        row = block_id % self.config.num_rows
        tag = block_id // self.config.num_rows
        return row, tag

    def access(self, address: int) -> Tuple[bool, int]:
        """Probes and updates the row for `address`. Returns (is_hit, row)."""
        row, tag = self.locate(address)
        return self.rows[row].access(tag), row

    def get_stats(self) -> Dict[str, Any]:
        """Returns a dictionary of cache statistics."""
        total_accesses = self.hits + self.misses
        hit_rate = self.hits / total_accesses if total_accesses else 0
        return {
            "size": self.config.size,
            "associativity": self.config.associativity,
            "blocksize": self.config.blocksize,
            "rows": self.config.num_rows,
            "hits": self.hits,
            "misses": self.misses,
            "stores": self.stores,
            "hit_rate": hit_rate,
        }


class CacheHierarchy:
    """L1 and an optional L2, write-through with allocate on every access.

    The hierarchy only classifies accesses; data always comes from main
    memory, so it never changes what a program computes.
    """

    def __init__(self, configs: Iterable[CacheConfig]):
        self.levels = [CacheLevel(c) for c in configs]
        if not self.levels:
            raise ConfigError("A cache hierarchy needs at least one level.")
        if len(self.levels) > MAX_LEVELS:
            raise ConfigError(f"At most {MAX_LEVELS} cache levels are supported.")

    def query(self, address: int, kind: AccessKind, pc: int = 0) -> List[CacheEvent]:
        """Runs one memory access through the hierarchy and returns its log events.

        Stores are written through to every level. A load goes on to the next
        level only when it missed in the current one.
        """
        events = []
        for level in self.levels:
            hit, row = level.access(address)
            if kind == AccessKind.STORE:
                level.stores += 1
                outcome = Outcome.STORE
            elif hit:
                level.hits += 1
                outcome = Outcome.HIT
            else:
                level.misses += 1
                outcome = Outcome.MISS
            events.append(CacheEvent(level.name, outcome, pc, address, row))

            if kind == AccessKind.LOAD and hit:
                break
        return events

    def get_stats(self) -> Dict[str, Dict[str, Any]]:
        return {level.name: level.get_stats() for level in self.levels}
