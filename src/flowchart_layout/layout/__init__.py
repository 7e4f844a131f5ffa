"""Layered top-to-bottom layout and its public API."""

from __future__ import annotations

from flowchart_layout.layout.engine import LayoutBuilder, full_layout, get_num_crossing_lines, get_x_coords
from flowchart_layout.layout.geometry import Box, Interval, Line, LineRelation, Point, relate_lines
from flowchart_layout.layout.horizontal import AreaGroup, HorizontalConflictResolver, default_predecessor_decorator
from flowchart_layout.layout.labels import DerivedEdgeLabelDimensions, EdgeLabelLayouter, get_derived_edge_label_dimensions
from flowchart_layout.layout.layering import (
    EdgeForLayers,
    IntermediatesCreationResult,
    NodeForLayers,
    OriginalEdgeWithIntermediateEdges,
    calculate_layer_numbers,
    calculate_layer_numbers_first_occurring_path,
    calculate_layer_numbers_longest_path,
    introduce_intermediate_nodes_and_edges,
)
from flowchart_layout.layout.layout_base import (
    LayoutBase,
    NumCrossingsJudgement,
    align_from_layer,
    calculate_num_crossings_changes_from_aligning,
    get_num_crossings,
    minimize_num_crossings,
)
from flowchart_layout.layout.layout_model import LayoutConnection, LayoutConnector, LayoutModel, LayoutPosition
from flowchart_layout.layout.types import EdgeLabel, Layout, LayoutLineSegment, PlacedNode

__all__ = [
    "AreaGroup",
    "Box",
    "DerivedEdgeLabelDimensions",
    "EdgeForLayers",
    "EdgeLabel",
    "EdgeLabelLayouter",
    "HorizontalConflictResolver",
    "IntermediatesCreationResult",
    "Interval",
    "Layout",
    "LayoutBase",
    "LayoutBuilder",
    "LayoutConnection",
    "LayoutConnector",
    "LayoutLineSegment",
    "LayoutModel",
    "LayoutPosition",
    "Line",
    "LineRelation",
    "NodeForLayers",
    "NumCrossingsJudgement",
    "OriginalEdgeWithIntermediateEdges",
    "PlacedNode",
    "Point",
    "align_from_layer",
    "calculate_layer_numbers",
    "calculate_layer_numbers_first_occurring_path",
    "calculate_layer_numbers_longest_path",
    "calculate_num_crossings_changes_from_aligning",
    "default_predecessor_decorator",
    "full_layout",
    "get_derived_edge_label_dimensions",
    "get_num_crossing_lines",
    "get_num_crossings",
    "get_x_coords",
    "introduce_intermediate_nodes_and_edges",
    "minimize_num_crossings",
    "relate_lines",
]
