"""
Douglas-Peucker simplification over fixed-point coordinates.

The divide-and-conquer over index ranges runs on an explicit stack instead of
recursion. All distance arithmetic uses Python integers, so squared areas of
microdegree coordinates never overflow.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np

from .errors import InvalidArgument


def _as_int_list(values, name: str) -> List[int]:
    """Coerce a list, numpy array or polars Series of integers into Python ints."""
    array = np.asarray(values)
    if array.size == 0:
        return []
    if array.ndim != 1:
        raise InvalidArgument(f"{name} must be one-dimensional, got shape {array.shape}")
    if array.dtype == object:
        if not all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in array):
            raise InvalidArgument(f"{name} must contain integers only")
        return [int(v) for v in array]
    if not np.issubdtype(array.dtype, np.integer):
        raise InvalidArgument(f"{name} must contain integers, got dtype {array.dtype}")
    return array.tolist()


def perpendicular_distance_squared(
    x: int, y: int, x1: int, y1: int, x2: int, y2: int, chord_length_squared: int
) -> int:
    """
    Squared distance from (x, y) to the line through (x1, y1) and (x2, y2).

    `chord_length_squared` is (x2 - x1)^2 + (y2 - y1)^2, passed in so it is
    computed once per range. For a zero-length chord the squared Euclidean
    distance to (x1, y1) is returned.
    """
    if chord_length_squared == 0:
        dx = x - x1
        dy = y - y1
        return dx * dx + dy * dy
    # Twice the signed area of the triangle (start, end, point)
    area = (x2 - x1) * (y1 - y) - (x1 - x) * (y2 - y1)
    return (area * area) // chord_length_squared


def farthest_point(xs: Sequence[int], ys: Sequence[int], start: int, end: int) -> Tuple[int, int]:
    """
    Find the interior point of (start, end) farthest from the chord start-end.

    Returns (index, squared distance). Only strictly greater distances replace
    the current maximum, so ties go to the lowest index. If no interior point
    has a positive distance, (start, 0) is returned.
    """
    sx, sy = xs[start], ys[start]
    ex, ey = xs[end], ys[end]
    dx = ex - sx
    dy = ey - sy
    chord_length_squared = dx * dx + dy * dy

    max_distance = 0
    max_index = start
    for i in range(start + 1, end):
        d = perpendicular_distance_squared(xs[i], ys[i], sx, sy, ex, ey, chord_length_squared)
        if d > max_distance:
            max_distance = d
            max_index = i
    return max_index, max_distance


def simplify(x, y, epsilon: int) -> List[bool]:
    """
    Compute the Douglas-Peucker keep-mask for a polyline.

    Args:
        x: integer x coordinates (latitudes in microdegrees for trajectories)
        y: integer y coordinates, same length as x
        epsilon: tolerance in the same unit as the coordinates; a point is kept
            when its squared distance to the current chord is strictly greater
            than epsilon squared

    Returns:
        A list of booleans, one per point. The first and last points are always kept.

    Raises:
        InvalidArgument: if x and y differ in length, or epsilon is not a
            non-negative integer.
    """
    xs = _as_int_list(x, "x")
    ys = _as_int_list(y, "y")
    if len(xs) != len(ys):
        raise InvalidArgument(f"x and y must have the same length ({len(xs)} != {len(ys)})")
    if isinstance(epsilon, bool) or not isinstance(epsilon, (int, np.integer)):
        raise InvalidArgument(f"epsilon must be an integer, got {type(epsilon).__name__}")
    if epsilon < 0:
        raise InvalidArgument(f"epsilon must be non-negative, got {epsilon}")

    n = len(xs)
    if n <= 2:
        return [True] * n

    keep = [False] * n
    keep[0] = True
    keep[-1] = True
    epsilon_squared = int(epsilon) * int(epsilon)

    ranges_examined = 0
    stack = [(0, n - 1)]
    while stack:
        start, end = stack.pop()
        if end - start <= 1:
            continue
        ranges_examined += 1
        index, distance = farthest_point(xs, ys, start, end)
        if distance > epsilon_squared:
            keep[index] = True
            stack.append((start, index))
            stack.append((index, end))

    logging.debug(
        f"[SIMPLIFY] Kept {sum(keep)} of {n} points "
        f"(epsilon={epsilon}, ranges examined={ranges_examined})"
    )
    return keep
