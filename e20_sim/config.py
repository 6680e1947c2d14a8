from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union
import yaml
from pathlib import Path

from .cache_config import CacheConfig, parse_cache_spec
from .errors import ConfigError
from .utils.logging import get_logger

logger = get_logger("e20-sim.config")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class SimConfig:
    """E20 simulator configuration."""
    # Machine code file to run
    program: str = ""

    # Config file
    config_file: str = ""

    # Cache geometry: "size,assoc,blocksize[,size,assoc,blocksize]" or a list
    cache: Union[str, Sequence[int], None] = None

    # Safety valve for programs that never halt; None runs forever
    max_steps: Optional[int] = None

    # Reporting
    memquantity: int = 128
    show_state: bool = False
    report_dir: str = ""
    log_level: str = "INFO"

    def __post_init__(self):
        if self.max_steps is not None and (not _is_int(self.max_steps) or self.max_steps <= 0):
            raise ConfigError(f"max_steps must be a positive integer, got {self.max_steps!r}.")
        if not _is_int(self.memquantity) or self.memquantity < 0:
            raise ConfigError(f"memquantity must be a non-negative integer, got {self.memquantity!r}.")
        if not isinstance(self.show_state, bool):
            raise ConfigError(f"show_state must be true or false, got {self.show_state!r}.")
        if not isinstance(self.log_level, str) or self.log_level.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {self.log_level!r}.")
        self.log_level = self.log_level.upper()
        for attr in ("program", "report_dir"):
            if not isinstance(getattr(self, attr), str):
                raise ConfigError(f"{attr} must be a string, got {getattr(self, attr)!r}.")

    def cache_levels(self) -> List[CacheConfig]:
        """Parses the cache field into per-level configurations (empty if caching is off)."""
        return parse_cache_spec(self.cache)

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        with open(yaml_path, 'r') as f:
            try:
                yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ConfigError(f"Config file {yaml_path} is not valid YAML: {e}") from e
        if not isinstance(yaml_config, dict):
            raise ConfigError(f"Config file {yaml_path} must contain a mapping.")
        for key, value in yaml_config.items():
            if hasattr(self, key):
                setattr(self, key, value)

    @classmethod
    def from_args(cls, args) -> SimConfig:
        """Factory method to create a SimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if hasattr(args, 'config') and args.config:
            config.config_file = args.config
            if Path(config.config_file).exists():
                config.update_from_yaml(config.config_file)
            else:
                logger.warning("Config file %s not found.", config.config_file)

        # 2. Override with command-line arguments
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and hasattr(config, key):
                setattr(config, key, value)

        config.__post_init__()
        return config
