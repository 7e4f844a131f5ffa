"""Layout result types shared by the engine and the renderers."""

from __future__ import annotations

from dataclasses import dataclass, field

from flowchart_layout.ir.text import EdgeText, NodeText
from flowchart_layout.layout.geometry import Interval, Line
from flowchart_layout.types import ErrorStatus


@dataclass(frozen=True)
class PlacedNode:
    """An original node with its final box."""

    id: str
    text: NodeText
    error_status: ErrorStatus
    layer: int
    horizontal_box: Interval
    vertical_box: Interval


@dataclass(frozen=True)
class LayoutLineSegment:
    """One straight piece of the polyline of an original edge."""

    key: str
    line: Line
    min_layer_number: int
    max_layer_number: int
    error_status: ErrorStatus
    is_last_line_segment: bool


@dataclass(frozen=True)
class EdgeLabel:
    horizontal_box: Interval
    vertical_box: Interval
    text: EdgeText


@dataclass
class Layout:
    """Self-contained layout output: everything renderers need."""

    width: int
    height: int
    nodes: list[PlacedNode] = field(default_factory=list)
    layout_line_segments: list[LayoutLineSegment] = field(default_factory=list)
    edge_labels: list[EdgeLabel] = field(default_factory=list)
