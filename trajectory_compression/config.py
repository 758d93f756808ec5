"""
Run configuration for the compression pipeline.

Values come from the defaults below, then an optional YAML file, then
command-line flags (highest priority).
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml

from .coordinates import DEFAULT_SCALE
from .errors import ConfigError
from .serialization import COMPRESSIONS, DEFAULT_COMPRESSION

# 1000 units at scale 6 is 0.001 degrees, roughly 100 meters
DEFAULT_EPSILON = 1000
DEFAULT_INPUT_DIR = "geolife/"
DEFAULT_OUTPUT_DIR = "data/compression_stats"


@dataclass(frozen=True)
class CompressionConfig:
    input_dir: str = DEFAULT_INPUT_DIR
    epsilon: int = DEFAULT_EPSILON
    scale: int = DEFAULT_SCALE
    compression: str = DEFAULT_COMPRESSION
    output_dir: str = DEFAULT_OUTPUT_DIR
    plot: Optional[str] = None

    def validate(self) -> "CompressionConfig":
        for name in ("epsilon", "scale"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigError(f"{name} must be non-negative, got {value}")
        if self.compression not in COMPRESSIONS:
            raise ConfigError(f"compression must be one of {COMPRESSIONS}, got {self.compression!r}")
        return self

    def merged(self, overrides: Dict[str, Any]) -> "CompressionConfig":
        """Return a copy with every non-None override applied."""
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {sorted(unknown)}")
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values).validate()


def load_config(config_path: Optional[str] = None) -> CompressionConfig:
    """Load a YAML config file on top of the defaults. No path means defaults only."""
    config = CompressionConfig()
    if config_path is None:
        return config
    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Could not read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e
    if data is None:
        return config
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return config.merged(data)
