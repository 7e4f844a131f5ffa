"""Geometry primitives: integer intervals, points, lines and boxes.

Intervals are closed ranges of integer pixel coordinates. An interval of size
``s`` centered on ``c`` starts at ``c - s // 2``, so even sizes put one more
pixel right of the center than left of it.
"""

from __future__ import annotations

import json
import math
from dataclasses import asdict, dataclass
from enum import Enum

from flowchart_layout.errors import GeometryError

LINE_LENGTH_DEGENERATE_THRESHOLD = 0.01
EPS = 1e-3


# ─── Interval ────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Interval:
    min_value: int
    max_value: int

    def __post_init__(self) -> None:
        if self.min_value > self.max_value:
            raise ValueError(f"Invalid interval: {self.min_value} > {self.max_value}")

    @classmethod
    def from_min_max(cls, min_value: int, max_value: int) -> Interval:
        return cls(min_value, max_value)

    @classmethod
    def from_values(cls, values: list[int]) -> Interval:
        if not values:
            raise ValueError("Cannot create Interval from empty value list")
        return cls(min(values), max(values))

    @classmethod
    def from_min_size(cls, min_value: int, size: int) -> Interval:
        return cls(min_value, min_value + size - 1)

    @classmethod
    def from_center_size(cls, center: int, size: int) -> Interval:
        return cls.from_min_size(center - size // 2, size)

    @property
    def center(self) -> int:
        return self.min_value + self.size // 2

    @property
    def size(self) -> int:
        return self.max_value + 1 - self.min_value

    def before(self, other: Interval) -> bool:
        """True if every value of this interval is smaller than every value of other."""
        return self.max_value < other.min_value

    def joined(self, other: Interval) -> Interval:
        return Interval(min(self.min_value, other.min_value), max(self.max_value, other.max_value))

    def intersected(self, other: Interval) -> Interval | None:
        low = max(self.min_value, other.min_value)
        high = min(self.max_value, other.max_value)
        if low > high:
            return None
        return Interval(low, high)

    def contains(self, n: float) -> bool:
        return self.min_value <= n <= self.max_value


# ─── Points and lines ────────────────────────────────────────────────────────


class LineRelation(Enum):
    UNRELATED = "Unrelated"
    CROSS = "Cross"


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def subtract(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def rotate_other_back_and_multiply_by_my_length(self, other: Point) -> Point:
        """Rotate other by minus my angle and scale it by my length."""
        return Point(self.x * other.x + self.y * other.y, -self.y * other.x + self.x * other.y)

    def squared_vector_length(self) -> float:
        return self.x * self.x + self.y * self.y


@dataclass(frozen=True)
class Line:
    start_point: Point
    end_point: Point

    def subtract(self, other: Point) -> Line:
        return Line(self.start_point.subtract(other), self.end_point.subtract(other))

    def squared_length(self) -> float:
        return self.end_point.subtract(self.start_point).squared_vector_length()

    def relate_to_horizontal_line(self, ref_length: float) -> LineRelation:
        """Relate this line to the segment from (0, 0) to (ref_length, 0).

        Touching or coinciding lines are not supported.
        """
        if self.squared_length() < LINE_LENGTH_DEGENERATE_THRESHOLD:
            raise GeometryError(
                f"Degenerate line segment {json.dumps(asdict(self))}, squared length is {self.squared_length()}"
            )
        if self.start_point.x > self.end_point.x:
            first, second = self.end_point, self.start_point
        else:
            first, second = self.start_point, self.end_point
        if second.x < 0 or first.x > ref_length:
            return LineRelation.UNRELATED
        if abs(second.x - first.x) < EPS:
            if first.x >= 0 and second.x <= ref_length:
                return _compare_y_values(first.y, second.y)
            return LineRelation.UNRELATED
        start_x_window = max(0, first.x)
        end_x_window = min(ref_length, second.x)
        rel_distance_start = (start_x_window - first.x) / (second.x - first.x)
        rel_distance_end = (end_x_window - first.x) / (second.x - first.x)
        start_y = first.y + rel_distance_start * (second.y - first.y)
        end_y = first.y + rel_distance_end * (second.y - first.y)
        return _compare_y_values(start_y, end_y)

    def integer_point_at_y(self, y: int) -> Point:
        if self.end_point.y == self.start_point.y:
            raise GeometryError("Cannot use an y-coordinate to find a point on a horizontal line")
        ratio = (y - self.start_point.y) / (self.end_point.y - self.start_point.y)
        x = math.floor(self.start_point.x + ratio * (self.end_point.x - self.start_point.x) + 0.5)
        return Point(x, y)


def _compare_y_values(start_y: float, end_y: float) -> LineRelation:
    if start_y < 0 and end_y < 0:
        return LineRelation.UNRELATED
    if start_y > 0 and end_y > 0:
        return LineRelation.UNRELATED
    return LineRelation.CROSS


def relate_lines(line1: Line, line2: Line) -> LineRelation:
    """Test whether two line segments cross.

    Both lines are transformed so that the longest one becomes an interval on
    the x-axis starting at the origin. The shortest crosses it if its
    transformed end points are on different sides of the x-axis within that
    interval.
    """
    if line1.squared_length() < line2.squared_length():
        shortest, longest = line1, line2
    else:
        shortest, longest = line2, line1
    rotate_vector = longest.end_point.subtract(longest.start_point)
    translated = shortest.subtract(longest.start_point)
    rotated = Line(
        rotate_vector.rotate_other_back_and_multiply_by_my_length(translated.start_point),
        rotate_vector.rotate_other_back_and_multiply_by_my_length(translated.end_point),
    )
    return rotated.relate_to_horizontal_line(rotate_vector.squared_vector_length())


# ─── Box ─────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Box:
    horizontal_box: Interval
    vertical_box: Interval

    @property
    def left_bound(self) -> Line:
        return Line(
            Point(self.horizontal_box.min_value, self.vertical_box.min_value),
            Point(self.horizontal_box.min_value, self.vertical_box.max_value),
        )

    @property
    def right_bound(self) -> Line:
        return Line(
            Point(self.horizontal_box.max_value, self.vertical_box.min_value),
            Point(self.horizontal_box.max_value, self.vertical_box.max_value),
        )

    def intersects(self, other: Box) -> bool:
        return (
            self.horizontal_box.intersected(other.horizontal_box) is not None
            and self.vertical_box.intersected(other.vertical_box) is not None
        )
