from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from .errors import ConfigError

MAX_LEVELS = 2
LEVEL_NAMES = ("L1", "L2")


@dataclass
class CacheConfig:
    """Geometry of one cache level, measured in memory words."""
    name: str = "L1"
    size: int = 16
    associativity: int = 2
    blocksize: int = 4

    # Derived properties
    num_rows: int = field(init=False)

    def __post_init__(self):
        for attr in ("size", "associativity", "blocksize"):
            value = getattr(self, attr)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{self.name} {attr} must be an integer, got {value!r}.")
            if value <= 0:
                raise ConfigError(f"{self.name} {attr} must be positive.")

        row_words = self.associativity * self.blocksize
        if self.size % row_words != 0:
            raise ConfigError(
                f"{self.name} size {self.size} is not a multiple of "
                f"associativity*blocksize ({self.associativity}*{self.blocksize})."
            )
        self.num_rows = self.size // row_words


def parse_cache_spec(spec: Union[str, Sequence[int], None]) -> List[CacheConfig]:
    """Parses `size,assoc,blocksize[,size,assoc,blocksize]` into per-level configs.

    Accepts the comma separated string given on the command line or an
    already-split sequence (as read from YAML). An empty spec disables caching.
    """
    if spec is None:
        return []
    if isinstance(spec, str):
        if not spec.strip():
            return []
        items = spec.split(",")
    elif isinstance(spec, (list, tuple)):
        items = list(spec)
    else:
        raise ConfigError(f"Invalid cache config: {spec!r} (expected a comma separated string or a list)")

    parts = []
    for item in items:
        try:
            parts.append(int(str(item).strip(), 10))
        except ValueError:
            raise ConfigError(f"Invalid cache config: {spec!r} ({item!r} is not an integer)") from None

    if len(parts) not in (3, 3 * MAX_LEVELS):
        raise ConfigError(f"Invalid cache config: expected 3 or 6 values, got {len(parts)}")

    return [
        CacheConfig(LEVEL_NAMES[i // 3], parts[i], parts[i + 1], parts[i + 2])
        for i in range(0, len(parts), 3)
    ]
