"""Placement of edge labels near the start of their lines."""

from __future__ import annotations

from dataclasses import dataclass

from flowchart_layout.config import Dimensions, estimate_character_width, estimate_label_line_height
from flowchart_layout.layout.geometry import Box, Interval, Line, Point
from flowchart_layout.layout.util import numbers_around_zero


@dataclass(frozen=True)
class DerivedEdgeLabelDimensions:
    est_character_width: int
    est_label_line_height: int
    preferred_vert_distance_from_origin: int
    strictly_keep_label_out_of_box: bool


def get_derived_edge_label_dimensions(d: Dimensions) -> DerivedEdgeLabelDimensions:
    return DerivedEdgeLabelDimensions(
        est_character_width=estimate_character_width(d.edge_label_font_size),
        est_label_line_height=estimate_label_line_height(d.edge_label_font_size),
        preferred_vert_distance_from_origin=d.preferred_vert_distance_from_origin,
        strictly_keep_label_out_of_box=d.strictly_keep_label_out_of_box,
    )


class EdgeLabelLayouter:
    """Places label boxes for lines leaving one side of one node.

    Candidate distances from the line start are tried in the order
    preferred, preferred - h, preferred + h, preferred - 2h, ... where h is
    the label line height. The first box that does not overlap an earlier
    box is taken.
    """

    def __init__(self, derived_dimensions: DerivedEdgeLabelDimensions) -> None:
        self.derived_dimensions = derived_dimensions
        self._boxes: list[Box] = []

    def add(self, line: Line, num_characters_on_line: int, num_text_lines: int) -> Box:
        d = self.derived_dimensions
        for source in numbers_around_zero():
            vdist = d.preferred_vert_distance_from_origin + source * d.est_label_line_height
            if vdist <= 0:
                # The center would be inside the box the line starts from.
                continue
            center = self._point_at(vdist, line)
            candidate = Box(
                Interval.from_center_size(int(center.x), max(num_characters_on_line * d.est_character_width, 1)),
                Interval.from_center_size(int(center.y), max(num_text_lines * d.est_label_line_height, 1)),
            )
            if d.strictly_keep_label_out_of_box and candidate.vertical_box.contains(line.start_point.y):
                continue
            if any(candidate.intersects(existing) for existing in self._boxes):
                continue
            self._boxes.append(candidate)
            return candidate
        raise AssertionError("unreachable")

    @staticmethod
    def _point_at(vdist: int, line: Line) -> Point:
        if line.end_point.y > line.start_point.y:
            y = line.start_point.y + vdist
        else:
            y = line.start_point.y - vdist
        return line.integer_point_at_y(int(y))
