"""
Delta encoding of integer sequences.

deltas[0] is the first value (difference against an implicit zero) and every
following entry is the difference to its predecessor. Values are Python integers,
so encode/decode are exact inverses for any integer input.
"""

from itertools import accumulate
from typing import Iterable, List

from .errors import InvalidArgument


def encode(values: Iterable[int]) -> List[int]:
    """Return the first differences of `values`."""
    deltas = []
    previous = 0
    for value in values:
        value = int(value)
        deltas.append(value - previous)
        previous = value
    return deltas


def decode(deltas: Iterable[int]) -> List[int]:
    """Rebuild absolute values from first differences (running sum)."""
    return list(accumulate(int(d) for d in deltas))


def encode_timestamps(timestamps: Iterable[int]) -> List[int]:
    """
    Delta-encode unsigned timestamps.

    Raises:
        InvalidArgument: if any timestamp is negative or smaller than its predecessor.
    """
    values = [int(ts) for ts in timestamps]
    for i, value in enumerate(values):
        if value < 0:
            raise InvalidArgument(f"timestamp at index {i} is negative ({value})")
        if i > 0 and value < values[i - 1]:
            raise InvalidArgument(
                f"timestamps must be non-decreasing: index {i} ({value}) < index {i - 1} ({values[i - 1]})"
            )
    return encode(values)
