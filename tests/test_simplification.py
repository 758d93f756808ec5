import numpy as np
import polars as pl
import pytest

from trajectory_compression.errors import InvalidArgument
from trajectory_compression.simplification import (
    farthest_point,
    perpendicular_distance_squared,
    simplify,
)


def wavy_polyline(n=200):
    xs = [i * 10 for i in range(n)]
    ys = [(i * 37 % 23) * 5 - (i % 7) * 11 for i in range(n)]
    return xs, ys


def test_simplify_empty():
    assert simplify([], [], 1) == []


def test_simplify_single_point():
    assert simplify([1], [1], 1) == [True]


def test_simplify_two_points():
    assert simplify([1, 2], [1, 2], 1) == [True, True]


def test_simplify_straight_line():
    x = [0, 1, 2, 3, 4]
    y = [0, 1, 2, 3, 4]
    assert simplify(x, y, 1) == [True, False, False, False, True]


def test_simplify_zigzag_keeps_everything():
    x = [0, 1, 2, 3, 4]
    y = [0, 5, 0, 5, 0]
    assert simplify(x, y, 1) == [True, True, True, True, True]


def test_collinear_points_with_zero_epsilon_drop_middle():
    # distance 0 is not strictly greater than 0
    assert simplify([0, 1, 2], [0, 1, 2], 0) == [True, False, True]


def test_zero_length_chord_uses_distance_to_start():
    # closed loop: start and end coincide, middle point is 5 units away (squared 25)
    assert simplify([0, 3, 0], [0, 4, 0], 4) == [True, True, True]
    assert simplify([0, 3, 0], [0, 4, 0], 5) == [True, False, True]


def test_threshold_is_strict():
    # squared distance of the middle point is exactly 4
    assert simplify([0, 1, 2], [0, 2, 0], 2) == [True, False, True]
    assert simplify([0, 1, 2], [0, 2, 0], 1) == [True, True, True]


def test_nested_split():
    x = [0, 1, 2, 3, 4]
    y = [0, 3, 0, -3, 0]
    assert simplify(x, y, 2) == [True, True, False, True, True]


def test_ties_go_to_lowest_index():
    xs = [0, 1, 2, 3, 4]
    ys = [0, 3, 0, 3, 0]
    assert farthest_point(xs, ys, 0, 4) == (1, 9)


def test_farthest_point_without_deviation_returns_start():
    assert farthest_point([0, 1, 2, 3], [0, 0, 0, 0], 0, 3) == (0, 0)


def test_perpendicular_distance_squared():
    # point (1, 1) against the x axis chord from (0, 0) to (2, 0)
    assert perpendicular_distance_squared(1, 1, 0, 0, 2, 0, 4) == 1
    # zero-length chord
    assert perpendicular_distance_squared(3, 4, 0, 0, 0, 0, 0) == 25


def test_large_microdegree_coordinates_are_exact():
    # area^2 = (180e9)^2 = 3.24e22, chord length^2 = 1.62e17 -> distance exactly 200000
    x = [-90_000_000, 0, 90_000_000]
    y = [-180_000_000, 1000, 180_000_000]
    assert simplify(x, y, 447) == [True, True, True]  # 447^2 = 199809
    assert simplify(x, y, 448) == [True, False, True]  # 448^2 = 200704


def test_accepts_numpy_and_polars_input():
    xs, ys = wavy_polyline()
    expected = simplify(xs, ys, 15)
    assert simplify(np.array(xs, dtype=np.int64), np.array(ys, dtype=np.int64), 15) == expected
    assert simplify(pl.Series(xs), pl.Series(ys), np.int64(15)) == expected


@pytest.mark.parametrize("epsilon", [0, 1, 15, 40, 1000])
def test_mask_shape_and_endpoints(epsilon):
    xs, ys = wavy_polyline()
    mask = simplify(xs, ys, epsilon)
    assert len(mask) == len(xs)
    assert mask[0] and mask[-1]


@pytest.mark.parametrize("epsilon", [0, 1, 15, 40])
def test_simplification_is_idempotent(epsilon):
    xs, ys = wavy_polyline()
    mask = simplify(xs, ys, epsilon)
    kept_x = [x for x, keep in zip(xs, mask) if keep]
    kept_y = [y for y, keep in zip(ys, mask) if keep]
    assert all(simplify(kept_x, kept_y, epsilon))


def test_larger_epsilon_keeps_fewer_points():
    xs, ys = wavy_polyline()
    assert sum(simplify(xs, ys, 5)) >= sum(simplify(xs, ys, 50))


def test_mismatched_lengths():
    with pytest.raises(InvalidArgument):
        simplify([1, 2], [1], 1)


def test_negative_epsilon():
    with pytest.raises(InvalidArgument):
        simplify([1, 2], [1, 2], -1)


def test_non_integer_epsilon():
    with pytest.raises(InvalidArgument):
        simplify([1, 2, 3], [1, 2, 3], 1.5)


def test_non_integer_coordinates():
    with pytest.raises(InvalidArgument):
        simplify([0.0, 1.5, 2.0], [0, 1, 2], 1)
