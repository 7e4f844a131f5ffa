"""Line segments of one original edge, optionally straightened.

When intermediate nodes are drawn as vertical passages, an edge spanning
several layers becomes a zigzag. Straightening joins consecutive segments
into one straight line wherever that line still passes through the
intermediate nodes it replaces and does not cross a neighboring node.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from flowchart_layout.errors import GeometryError
from flowchart_layout.layout.geometry import Box, Interval, Line, Point
from flowchart_layout.layout.util import split_array
from flowchart_layout.types import PassDirection

LineAllowed = Callable[[str, Line], bool]


@dataclass(frozen=True)
class StraightenedLine:
    id_start: str
    id_end: str
    line: Line
    replaced_nodes: list[str] = field(default_factory=list)

    def is_layer_passage(self) -> bool:
        return self.id_start == self.id_end

    def is_joinable_with(self, other: StraightenedLine) -> bool:
        return self.id_end == other.id_start

    def joined_with(self, other: StraightenedLine) -> StraightenedLine:
        if not self.is_joinable_with(other):
            raise GeometryError(f"Cannot join line segments because {self.id_end} != {other.id_start}")
        return StraightenedLine(
            self.id_start,
            other.id_end,
            Line(self.line.start_point, other.line.end_point),
            [*self.replaced_nodes, self.id_end, *other.replaced_nodes],
        )

    def replace_layer_passage(self, pred: StraightenedLine, succ: StraightenedLine) -> list[StraightenedLine]:
        """Replace pred, this passage and succ by two lines meeting halfway the passage."""
        if not self.is_layer_passage():
            raise GeometryError("Cannot replace a line segment that is not a layer passage")
        if not pred.is_joinable_with(self) or not self.is_joinable_with(succ):
            raise GeometryError("Cannot replace layer passage because line segments are not joinable")
        min_y = min(self.line.start_point.y, self.line.end_point.y)
        max_y = max(self.line.start_point.y, self.line.end_point.y)
        join_point = Point(self.line.start_point.x, Interval.from_min_max(int(min_y), int(max_y)).center)
        return [
            StraightenedLine(pred.id_start, self.id_start, Line(pred.line.start_point, join_point), list(pred.replaced_nodes)),
            StraightenedLine(self.id_start, succ.id_end, Line(join_point, succ.line.end_point), list(succ.replaced_nodes)),
        ]

    def split(self, point_function: Callable[[str, Line], Point]) -> list[StraightenedLine]:
        """Cut this line at every replaced node, giving one segment per layer step."""
        if not self.replaced_nodes:
            return [self]
        new_points = [point_function(replaced, self.line) for replaced in self.replaced_nodes]
        start_points = [self.line.start_point, *new_points]
        end_points = [*new_points, self.line.end_point]
        start_ids = [self.id_start, *self.replaced_nodes]
        end_ids = [*self.replaced_nodes, self.id_end]
        return [
            StraightenedLine(start_ids[i], end_ids[i], Line(start_points[i], end_points[i]))
            for i in range(len(start_points))
        ]


@dataclass
class SegmentsBuilder:
    """Turn the chain of an original edge into groups of connected segments."""

    is_original: Callable[[str], bool]
    line_factory: Callable[[str, str], Line]
    direction_calculator: Callable[[str, str], PassDirection]
    layer_passage_factory: Callable[[str, PassDirection], Line] | None = None

    def run(self, edges: list[tuple[str, str]]) -> list[list[StraightenedLine]]:
        groups = split_array(edges, lambda curr, nxt: curr[1] == nxt[0])
        return [self._handle_group(group) for group in groups]

    def _handle_group(self, edges: list[tuple[str, str]]) -> list[StraightenedLine]:
        result: list[StraightenedLine] = []
        direction: PassDirection | None = None
        for from_id, to_id in edges:
            if self.layer_passage_factory is not None and direction is not None and not self.is_original(from_id):
                result.append(StraightenedLine(from_id, from_id, self.layer_passage_factory(from_id, direction)))
            direction = self.direction_calculator(from_id, to_id)
            result.append(StraightenedLine(from_id, to_id, self.line_factory(from_id, to_id)))
        return result


def straighten(segments: list[StraightenedLine], line_allowed: LineAllowed) -> list[StraightenedLine]:
    result: list[StraightenedLine] = []
    index = 0
    while index < len(segments):
        current = segments[index]
        if current.is_layer_passage():
            replacements = current.replace_layer_passage(result[-1], segments[index + 1])
            if all(line_allowed(current.id_start, r.line) for r in replacements):
                result.pop()
                for replacement in replacements:
                    _join_add(result, replacement, line_allowed)
                index += 2
                continue
        _join_add(result, current, line_allowed)
        index += 1
    return result


def _join_add(existing: list[StraightenedLine], new_segment: StraightenedLine, line_allowed: LineAllowed) -> None:
    if not existing:
        existing.append(new_segment)
        return
    joined = existing[-1].joined_with(new_segment)
    if all(line_allowed(node_id, joined.line) for node_id in [joined.id_start, joined.id_end, *joined.replaced_nodes]):
        existing[-1] = joined
    else:
        existing.append(new_segment)


class LineChecker:
    """Decides whether a line may pass through the layer of an intermediate node."""

    def __init__(
        self,
        node_box_function: Callable[[str], Box],
        node_width_function: Callable[[str], Interval],
        is_original: Callable[[str], bool],
    ) -> None:
        self.node_box_function = node_box_function
        self.node_width_function = node_width_function
        self.is_original = is_original

    def line_is_in_bounds_for_id(self, node_id: str, line: Line) -> bool:
        vertical_box = self.node_box_function(node_id).vertical_box
        line_min_y = min(line.start_point.y, line.end_point.y)
        line_max_y = max(line.start_point.y, line.end_point.y)
        if line_max_y < vertical_box.min_value or line_min_y > vertical_box.max_value:
            raise GeometryError(
                "Layer mismatch when checking whether a line passes through the bounds of an intermediate node"
            )
        x = line.integer_point_at_y(vertical_box.center).x
        return self.node_width_function(node_id).contains(x)

    def obstacles(self, left_ids: list[str], right_ids: list[str]) -> list[Line]:
        """Nearest original node boundaries, scanning outward from a position.

        ``left_ids`` and ``right_ids`` are ordered from near to far.
        """
        result: list[Line] = []
        left = next((i for i in left_ids if self.is_original(i)), None)
        if left is not None:
            result.append(self.node_box_function(left).right_bound)
        right = next((i for i in right_ids if self.is_original(i)), None)
        if right is not None:
            result.append(self.node_box_function(right).left_bound)
        return result
