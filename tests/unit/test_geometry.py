"""Tests for flowchart_layout.layout.geometry — intervals, points, line crossings and boxes."""

import pytest

from flowchart_layout.errors import GeometryError
from flowchart_layout.layout.geometry import Box, Interval, Line, LineRelation, Point, relate_lines


# ─── Interval ────────────────────────────────────────────────────────────────


def test_interval_from_min_max():
    interval = Interval.from_min_max(3, 5)
    assert interval.size == 3
    assert interval.center == 4


def test_interval_singleton():
    interval = Interval.from_min_max(3, 3)
    assert interval.size == 1
    assert interval.center == 3


def test_interval_invalid():
    with pytest.raises(ValueError):
        Interval.from_min_max(5, 3)


def test_interval_from_center_size_odd():
    interval = Interval.from_center_size(10, 5)
    assert (interval.min_value, interval.max_value) == (8, 12)
    assert interval.center == 10


def test_interval_from_center_size_even_puts_extra_pixel_right():
    interval = Interval.from_center_size(150, 50)
    assert (interval.min_value, interval.max_value) == (125, 174)
    assert interval.center == 150


def test_interval_from_min_size():
    interval = Interval.from_min_size(10, 4)
    assert (interval.min_value, interval.max_value) == (10, 13)


def test_interval_from_values():
    assert Interval.from_values([4, 1, 3]) == Interval(1, 4)
    with pytest.raises(ValueError):
        Interval.from_values([])


def test_interval_before():
    assert Interval(1, 2).before(Interval(3, 4))
    assert not Interval(1, 3).before(Interval(3, 4))
    assert not Interval(3, 4).before(Interval(1, 2))


def test_interval_joined_and_intersected():
    assert Interval(1, 3).joined(Interval(5, 6)) == Interval(1, 6)
    assert Interval(1, 4).intersected(Interval(3, 6)) == Interval(3, 4)
    assert Interval(1, 2).intersected(Interval(3, 6)) is None


def test_interval_contains():
    assert Interval(1, 3).contains(1)
    assert Interval(1, 3).contains(2.5)
    assert not Interval(1, 3).contains(3.5)


# ─── Point ───────────────────────────────────────────────────────────────────


def test_point_subtract():
    actual = Point(4, 5).subtract(Point(3, 2))
    assert (actual.x, actual.y) == (1, 3)


def test_point_length():
    assert Point(3, 4).squared_vector_length() == 25


def test_rotate_vector_perpendicular_to_reference():
    reference = Point(3, 4)
    actual = reference.rotate_other_back_and_multiply_by_my_length(Point(-2 * 4, 2 * 3))
    assert (actual.x, actual.y) == (0, 2 * 5 * 5)


def test_rotate_vector_parallel_to_reference():
    reference = Point(3, 4)
    actual = reference.rotate_other_back_and_multiply_by_my_length(Point(2 * 3, 2 * 4))
    assert (actual.x, actual.y) == (2 * 5 * 5, 0)


# ─── Line ────────────────────────────────────────────────────────────────────


def test_line_subtract():
    actual = Line(Point(1, 2), Point(5, 4)).subtract(Point(-1, -2))
    assert actual == Line(Point(2, 4), Point(6, 6))


def test_line_squared_length():
    assert Line(Point(1, 2), Point(4, 6)).squared_length() == 25


RELATE_TO_HORIZONTAL_CASES = [
    ("left no cross", Line(Point(-1, -1), Point(-1, 1)), 1, LineRelation.UNRELATED),
    ("right no cross", Line(Point(2, -1), Point(2, 1)), 1, LineRelation.UNRELATED),
    ("perpendicular cross", Line(Point(2, -1), Point(2, 1)), 3, LineRelation.CROSS),
    ("perpendicular cross top-down", Line(Point(2, 1), Point(2, -1)), 3, LineRelation.CROSS),
]


@pytest.mark.parametrize(
    "line,ref_length,expected",
    [c[1:] for c in RELATE_TO_HORIZONTAL_CASES],
    ids=[c[0] for c in RELATE_TO_HORIZONTAL_CASES],
)
def test_relate_to_horizontal_line(line: Line, ref_length: float, expected: LineRelation):
    assert line.relate_to_horizontal_line(ref_length) == expected


@pytest.mark.parametrize(
    "line,ref_length,expected",
    [c[1:] for c in RELATE_TO_HORIZONTAL_CASES],
    ids=[c[0] for c in RELATE_TO_HORIZONTAL_CASES],
)
def test_relate_to_horizontal_line_not_perpendicular(line: Line, ref_length: float, expected: LineRelation):
    tilted = Line(line.start_point.subtract(Point(0.1, 0.1)), line.end_point)
    assert tilted.relate_to_horizontal_line(ref_length) == expected


def test_degenerate_line_is_rejected():
    with pytest.raises(GeometryError, match="Degenerate"):
        Line(Point(1, 1), Point(1, 1)).relate_to_horizontal_line(10)


HORIZONTAL_LINES = [
    Line(Point(-1, -1), Point(2, -1)),
    Line(Point(0, 0), Point(1, 0)),
    Line(Point(-3, 1), Point(1, 1)),
]

VERTICAL_LINES = [
    Line(Point(-2, 1.5), Point(-2, -1)),
    Line(Point(0.5, -1.5), Point(0.5, 1.5)),
]

RELATE_LINES_CASES = [
    (0, 0, LineRelation.UNRELATED),
    (0, 1, LineRelation.CROSS),
    (1, 0, LineRelation.UNRELATED),
    (1, 1, LineRelation.CROSS),
    (2, 0, LineRelation.CROSS),
    (2, 1, LineRelation.CROSS),
]


@pytest.mark.parametrize("h,v,expected", RELATE_LINES_CASES, ids=[f"{c[0]}-{c[1]}" for c in RELATE_LINES_CASES])
def test_relate_lines(h: int, v: int, expected: LineRelation):
    horizontal, vertical = HORIZONTAL_LINES[h], VERTICAL_LINES[v]
    assert relate_lines(horizontal, vertical) == expected
    assert relate_lines(vertical, horizontal) == expected


@pytest.mark.parametrize("h,v,expected", RELATE_LINES_CASES, ids=[f"{c[0]}-{c[1]}" for c in RELATE_LINES_CASES])
def test_relate_lines_without_equal_x_coordinates(h: int, v: int, expected: LineRelation):
    original = HORIZONTAL_LINES[h]
    horizontal = Line(original.start_point.subtract(Point(0, 0.1)), original.end_point)
    vertical = VERTICAL_LINES[v]
    assert relate_lines(horizontal, vertical) == expected
    assert relate_lines(vertical, horizontal) == expected


def test_integer_point_at_y_downward():
    result = Line(Point(10, 20), Point(20, 120)).integer_point_at_y(40)
    assert (result.x, result.y) == (12, 40)


def test_integer_point_at_y_upward():
    result = Line(Point(10, 20), Point(20, -80)).integer_point_at_y(0)
    assert (result.x, result.y) == (12, 0)


def test_integer_point_at_y_rounds():
    result = Line(Point(10, 20), Point(20, 50)).integer_point_at_y(30)
    assert (result.x, result.y) == (13, 30)


def test_integer_point_at_y_horizontal_line():
    with pytest.raises(GeometryError):
        Line(Point(0, 5), Point(10, 5)).integer_point_at_y(5)


# ─── Box ─────────────────────────────────────────────────────────────────────


def test_box_bounds():
    box = Box(Interval(10, 20), Interval(0, 5))
    assert box.left_bound == Line(Point(10, 0), Point(10, 5))
    assert box.right_bound == Line(Point(20, 0), Point(20, 5))


def test_box_intersects():
    box = Box(Interval(0, 10), Interval(0, 10))
    assert box.intersects(Box(Interval(10, 20), Interval(5, 15)))
    assert not box.intersects(Box(Interval(11, 20), Interval(5, 15)))
    assert not box.intersects(Box(Interval(5, 20), Interval(11, 15)))
