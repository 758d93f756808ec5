"""
Trajectory compression for GPS traces: fixed-point coordinates, Douglas-Peucker
simplification and delta encoding.
"""

from .coordinates import RawSample, FixedPointSample, build_sample, scale_coordinate, epoch_seconds
from .simplification import simplify
from .delta_encoding import encode, decode, encode_timestamps
from .trajectory import Trajectory, DeltaTrajectory
from .errors import InvalidArgument, PltParseError, ConfigError

__version__ = "0.1.0"
__all__ = [
    "RawSample",
    "FixedPointSample",
    "build_sample",
    "scale_coordinate",
    "epoch_seconds",
    "simplify",
    "encode",
    "decode",
    "encode_timestamps",
    "Trajectory",
    "DeltaTrajectory",
    "InvalidArgument",
    "PltParseError",
    "ConfigError",
]
