"""
Fixed-point coordinate model.

Converts decimal latitude/longitude values and a UTC instant into integer samples:
coordinates become integer counts of 10^-scale degrees (microdegrees at the default
scale of 6) and the instant becomes whole seconds since the Unix epoch.

Rounding rule: values with more than `scale` fractional digits are rounded
half-to-even (banker's rounding), e.g. 0.0000005 -> 0 and 0.0000015 -> 2 at scale 6.
No bounds check is made on the geographic range of the coordinates.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_EVEN
from typing import Union

# --- Constants ---
DEFAULT_SCALE = 6
INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Wide enough for any coefficient that can still fit a signed 64-bit integer
_CONTEXT = Context(prec=64, rounding=ROUND_HALF_EVEN, traps=[InvalidOperation])

DecimalLike = Union[Decimal, int, str, float]


@dataclass(frozen=True)
class RawSample:
    """A GPS sample as produced by the source reader."""

    latitude: Decimal
    longitude: Decimal
    instant: datetime


@dataclass(frozen=True)
class FixedPointSample:
    latitude: int
    longitude: int
    timestamp: int


def _to_decimal(value: DecimalLike) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # Go through the shortest repr so 1.1 is read as written
        value = str(value)
    try:
        return Decimal(value)
    except (InvalidOperation, TypeError) as e:
        raise ValueError(f"Not a decimal coordinate: {value!r}") from e


def scale_coordinate(value: DecimalLike, scale: int = DEFAULT_SCALE) -> int:
    """
    Rescale a decimal coordinate to exactly `scale` fractional digits and return
    the integer numerator.

    Args:
        value: coordinate in degrees
        scale: number of fractional digits kept

    Returns:
        The coordinate in units of 10^-scale degrees.

    Raises:
        ValueError: if the value is not a finite decimal, cannot be rescaled, or
            does not fit a signed 64-bit integer.
    """
    if scale < 0:
        raise ValueError(f"scale must be non-negative, got {scale}")
    decimal_value = _to_decimal(value)
    if not decimal_value.is_finite():
        raise ValueError(f"Coordinate is not finite: {decimal_value}")
    try:
        quantized = _CONTEXT.quantize(decimal_value, Decimal(1).scaleb(-scale))
        scaled = int(_CONTEXT.scaleb(quantized, scale))
    except InvalidOperation as e:
        raise ValueError(f"Failed to rescale {decimal_value} to {scale} digits") from e
    if not INT64_MIN <= scaled <= INT64_MAX:
        raise ValueError(f"Scaled coordinate {scaled} does not fit in 64 bits")
    return scaled


def epoch_seconds(instant: datetime) -> int:
    """
    Whole seconds between the Unix epoch and `instant` (floored).
    Naive datetimes are taken to be UTC.
    """
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=timezone.utc)
    seconds = (instant - UNIX_EPOCH) // timedelta(seconds=1)
    if seconds < 0:
        raise ValueError(f"Timestamp {instant.isoformat()} is before the Unix epoch")
    if seconds > UINT64_MAX:
        raise ValueError(f"Timestamp {instant.isoformat()} does not fit in 64 bits")
    return seconds


def build_sample(
    latitude: DecimalLike,
    longitude: DecimalLike,
    instant: datetime,
    scale: int = DEFAULT_SCALE,
) -> FixedPointSample:
    """Convert one raw sample into its fixed-point form."""
    return FixedPointSample(
        latitude=scale_coordinate(latitude, scale),
        longitude=scale_coordinate(longitude, scale),
        timestamp=epoch_seconds(instant),
    )


def from_raw_sample(sample: RawSample, scale: int = DEFAULT_SCALE) -> FixedPointSample:
    return build_sample(sample.latitude, sample.longitude, sample.instant, scale)
