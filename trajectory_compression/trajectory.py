"""
Trajectory records.

A trajectory is three parallel integer columns held in one Polars DataFrame:
latitude and longitude in 10^-scale degrees and timestamp in Unix seconds.
The row index is the only link between the three; there is no per-sample object.
"""

import logging
from typing import Iterable, List, Sequence

import polars as pl

from .coordinates import DEFAULT_SCALE, RawSample, from_raw_sample
from .delta_encoding import decode, encode, encode_timestamps
from .errors import InvalidArgument
from .simplification import simplify

SCHEMA = {
    "latitude": pl.Int64,
    "longitude": pl.Int64,
    "timestamp": pl.UInt64,
}


def _check_lengths(latitudes: Sequence, longitudes: Sequence, timestamps: Sequence) -> None:
    lengths = {len(latitudes), len(longitudes), len(timestamps)}
    if len(lengths) != 1:
        raise InvalidArgument(
            f"latitudes, longitudes and timestamps differ in length "
            f"({len(latitudes)}, {len(longitudes)}, {len(timestamps)})"
        )


def _normalize(frame: pl.DataFrame) -> pl.DataFrame:
    missing = [col for col in SCHEMA if col not in frame.columns]
    if missing:
        raise InvalidArgument(f"Trajectory frame is missing columns: {missing}")
    return frame.select(list(SCHEMA)).cast(SCHEMA)


class Trajectory:
    """Absolute-valued trajectory: latitude/longitude (Int64) and timestamp (UInt64)."""

    def __init__(self, frame: pl.DataFrame, scale: int = DEFAULT_SCALE):
        self.frame = _normalize(frame)
        self.scale = scale

    @classmethod
    def from_sequences(
        cls,
        latitudes: Sequence[int],
        longitudes: Sequence[int],
        timestamps: Sequence[int],
        scale: int = DEFAULT_SCALE,
    ) -> "Trajectory":
        _check_lengths(latitudes, longitudes, timestamps)
        frame = pl.DataFrame(
            {
                "latitude": list(latitudes),
                "longitude": list(longitudes),
                "timestamp": list(timestamps),
            },
            schema=SCHEMA,
        )
        return cls(frame, scale=scale)

    @classmethod
    def from_samples(cls, samples: Iterable[RawSample], scale: int = DEFAULT_SCALE) -> "Trajectory":
        """
        Build a trajectory from raw samples, assumed already sorted by instant.

        Raises:
            ValueError: if any sample fails fixed-point conversion. No partial
                trajectory is returned.
        """
        latitudes: List[int] = []
        longitudes: List[int] = []
        timestamps: List[int] = []
        for sample in samples:
            point = from_raw_sample(sample, scale)
            latitudes.append(point.latitude)
            longitudes.append(point.longitude)
            timestamps.append(point.timestamp)
        logging.info(f"[BUILD] Converted {len(latitudes)} samples to fixed point (scale={scale})")
        return cls.from_sequences(latitudes, longitudes, timestamps, scale=scale)

    def __len__(self) -> int:
        return self.frame.height

    def __eq__(self, other) -> bool:
        if not isinstance(other, Trajectory):
            return NotImplemented
        return self.scale == other.scale and self.frame.equals(other.frame)

    def __repr__(self) -> str:
        return f"Trajectory(points={len(self)}, scale={self.scale})"

    @property
    def latitudes(self) -> List[int]:
        return self.frame["latitude"].to_list()

    @property
    def longitudes(self) -> List[int]:
        return self.frame["longitude"].to_list()

    @property
    def timestamps(self) -> List[int]:
        return self.frame["timestamp"].to_list()

    def simplification_mask(self, epsilon: int) -> List[bool]:
        """Keep-mask from Douglas-Peucker with latitude as x and longitude as y."""
        return simplify(self.latitudes, self.longitudes, epsilon)

    def filter(self, mask: Sequence[bool]) -> "Trajectory":
        """Return a new trajectory with the rows where `mask` is true, order preserved."""
        if len(mask) != len(self):
            raise InvalidArgument(f"mask length {len(mask)} does not match trajectory length {len(self)}")
        keep = pl.Series("keep", list(mask), dtype=pl.Boolean)
        return Trajectory(self.frame.filter(keep), scale=self.scale)

    def simplify(self, epsilon: int) -> "Trajectory":
        return self.filter(self.simplification_mask(epsilon))

    def to_delta(self) -> "DeltaTrajectory":
        """
        Delta view of this trajectory.

        Raises:
            InvalidArgument: if timestamps decrease anywhere.
        """
        return DeltaTrajectory.from_sequences(
            encode(self.latitudes),
            encode(self.longitudes),
            encode_timestamps(self.timestamps),
            scale=self.scale,
        )

    def to_frame(self) -> pl.DataFrame:
        return self.frame.clone()


class DeltaTrajectory:
    """Same shape as a Trajectory, but every column holds consecutive differences."""

    def __init__(self, frame: pl.DataFrame, scale: int = DEFAULT_SCALE):
        self.frame = _normalize(frame)
        self.scale = scale

    @classmethod
    def from_sequences(
        cls,
        latitudes: Sequence[int],
        longitudes: Sequence[int],
        timestamps: Sequence[int],
        scale: int = DEFAULT_SCALE,
    ) -> "DeltaTrajectory":
        _check_lengths(latitudes, longitudes, timestamps)
        frame = pl.DataFrame(
            {
                "latitude": list(latitudes),
                "longitude": list(longitudes),
                "timestamp": list(timestamps),
            },
            schema=SCHEMA,
        )
        return cls(frame, scale=scale)

    def __len__(self) -> int:
        return self.frame.height

    def __repr__(self) -> str:
        return f"DeltaTrajectory(points={len(self)}, scale={self.scale})"

    @property
    def latitudes(self) -> List[int]:
        return self.frame["latitude"].to_list()

    @property
    def longitudes(self) -> List[int]:
        return self.frame["longitude"].to_list()

    @property
    def timestamps(self) -> List[int]:
        return self.frame["timestamp"].to_list()

    def to_trajectory(self) -> Trajectory:
        return Trajectory.from_sequences(
            decode(self.latitudes),
            decode(self.longitudes),
            decode(self.timestamps),
            scale=self.scale,
        )

    def to_frame(self) -> pl.DataFrame:
        return self.frame.clone()
