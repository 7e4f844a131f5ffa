"""Final coordinate assembly.

Phases:
  1. Node x: per group of connected layers, start from the widest layer and
     resolve horizontal conflicts layer by layer outward
  2. Layer y
  3. Connector coordinates on the top and bottom sides of every box
  4. Line segments per original edge, optionally straightened through
     intermediate nodes
  5. Edge labels near the start of every labeled edge
"""

from __future__ import annotations

from collections.abc import Callable

from flowchart_layout.config import Dimensions
from flowchart_layout.ir.error_flow import OriginalGraph
from flowchart_layout.ir.graph import EdgeKey, edge_key
from flowchart_layout.layout.geometry import Box, Interval, Line, LineRelation, Point, relate_lines
from flowchart_layout.layout.horizontal import HorizontalConflictResolver
from flowchart_layout.layout.labels import EdgeLabelLayouter, get_derived_edge_label_dimensions
from flowchart_layout.layout.layering import (
    IntermediatesCreationResult,
    OriginalEdgeWithIntermediateEdges,
    calculate_layer_numbers,
    introduce_intermediate_nodes_and_edges,
)
from flowchart_layout.layout.layout_base import LayoutBase, minimize_num_crossings
from flowchart_layout.layout.layout_model import (
    ConnectorKey,
    LayoutConnector,
    LayoutModel,
    LayoutPosition,
    layout_position_key,
)
from flowchart_layout.layout.straighten import LineChecker, SegmentsBuilder, StraightenedLine, straighten
from flowchart_layout.layout.types import EdgeLabel, Layout, LayoutLineSegment, PlacedNode
from flowchart_layout.layout.util import js_round, split_range
from flowchart_layout.types import LayerAlgorithm, PassDirection


def get_x_coords(to_divide: Interval, count: int, box_connector_area_perc: int) -> list[int]:
    """Spread ``count`` connectors evenly over the central part of a box side."""
    available_size = max(js_round(to_divide.size * box_connector_area_perc / 100), 1)
    available = Interval.from_center_size(to_divide.center, available_size)
    if count == 1:
        return [available.center]
    return [js_round(available.min_value + i * (available_size - 1) / (count - 1)) for i in range(count)]


class LayoutBuilder:
    def __init__(
        self,
        model: LayoutModel,
        intermediates: IntermediatesCreationResult,
        dimensions: Dimensions,
    ) -> None:
        self.model = model
        self.layers_graph = intermediates.intermediate
        self.original = intermediates.original
        self.d = dimensions
        self.label_dimensions = get_derived_edge_label_dimensions(dimensions)
        self._node_x_by_id: dict[str, int] = {}
        self._layer_y: list[int] = []
        self._connector_x: dict[ConnectorKey, int] = {}
        self._connector_y: dict[ConnectorKey, int] = {}
        self._segments_by_original_edge: dict[EdgeKey, list[LayoutLineSegment]] = {}
        self._original_edge_by_connector: dict[ConnectorKey, EdgeKey] = {}
        self._line_through_intermediate_allowance = max(
            js_round(dimensions.intermediate_width * dimensions.line_transgression_perc / 100), 1
        )

    def run(self) -> Layout:
        width = self._calculate_node_x()
        height = self.model.num_layers * self.d.layer_distance
        self._calculate_layer_y()
        self._calculate_connector_x()
        self._calculate_connector_y()
        self._calculate_layout_line_segments()
        edge_labels = self._calculate_edge_labels()
        return Layout(
            width=width,
            height=height,
            nodes=self._get_placed_nodes(),
            layout_line_segments=[
                s for e in self.original.edges for s in self._segments_by_original_edge[edge_key(e)]
            ],
            edge_labels=edge_labels,
        )

    # ─── Node sizes ──────────────────────────────────────────────────────

    def _is_original(self, node_id: str) -> bool:
        return not self.layers_graph.get_node_by_id(node_id).is_intermediate

    def _width_of_node(self, node_id: str) -> int:
        """Width reserved for the node when resolving horizontal conflicts."""
        if not self._is_original(node_id):
            return self.d.intermediate_width
        return self.layers_graph.get_node_by_id(node_id).text.outer_width + 2 * self.d.horizontal_node_border

    def _width_of_node_box(self, node_id: str) -> int:
        if not self._is_original(node_id):
            return 1
        return self.layers_graph.get_node_by_id(node_id).text.outer_width

    def _height_of_node_box(self, node_id: str) -> int:
        if self._is_original(node_id) or self.d.intermediate_layer_passed_by_vertical_line:
            return self.d.node_box_height
        return 1

    # ─── Node x ──────────────────────────────────────────────────────────

    def _calculate_node_x(self) -> int:
        # Omitted nodes can leave layers without any connection to the next
        # one, so every group of connected layers is aligned on its own.
        groups = split_range(
            self.model.num_layers,
            lambda layer: any(
                self.model.get_related_positions(p, layer + 1) for p in self.model.get_positions_of_layer(layer)
            ),
        )
        for group in groups:
            self._calculate_node_x_for_connected_layers(group)
        intervals = [
            Interval.from_center_size(self._node_x_by_id[p.id], self._width_of_node(p.id))
            for p in self.model.all_positions
        ]
        if not intervals:
            return 0
        min_x = min(i.min_value for i in intervals)
        max_x = max(i.max_value for i in intervals)
        for node_id in self._node_x_by_id:
            self._node_x_by_id[node_id] -= min_x
        return max_x - min_x + 1

    def _calculate_node_x_for_connected_layers(self, layers: Interval) -> None:
        widest = self._calculate_initial_node_x(layers)
        for layer in range(widest - 1, layers.min_value - 1, -1):
            self._initialize_x_from(layer, layer + 1)
        for layer in range(widest + 1, layers.max_value + 1):
            self._initialize_x_from(layer, layer - 1)

    def _calculate_initial_node_x(self, layers: Interval) -> int:
        widest_layer = layers.min_value
        max_width = -1
        for layer in range(layers.min_value, layers.max_value + 1):
            width = self._calculate_initial_node_x_of_single_layer(layer)
            if width >= max_width:
                max_width = width
                widest_layer = layer
        return widest_layer

    def _calculate_initial_node_x_of_single_layer(self, layer: int) -> int:
        cursor = 0
        for position in self.model.get_positions_of_layer(layer):
            width = self._width_of_node(position.id)
            self._node_x_by_id[position.id] = Interval.from_min_size(cursor, width).center
            cursor += width
        return cursor

    def _initialize_x_from(self, subject_layer: int, source_layer: int) -> None:
        positions = self.model.get_positions_of_layer(subject_layer)
        x_coords = HorizontalConflictResolver(
            len(positions),
            lambda p: self._width_of_node(positions[p].id),
            lambda p: self._predecessor_x(subject_layer, p, source_layer),
        ).run()
        for i, x in enumerate(x_coords):
            self._node_x_by_id[self.model.get_position(layout_position_key(subject_layer, i)).id] = x

    def _predecessor_x(self, subject_layer: int, subject_position: int, source_layer: int) -> list[int]:
        position = self.model.get_position(layout_position_key(subject_layer, subject_position))
        return [self._node_x_by_id[p.id] for p in self.model.get_related_positions(position, source_layer)]

    # ─── Layer y and connectors ──────────────────────────────────────────

    def _calculate_layer_y(self) -> None:
        self._layer_y = [
            Interval.from_min_size(layer * self.d.layer_distance, self.d.layer_height).center
            for layer in range(self.model.num_layers)
        ]

    def _position_and_adjacent_layer_pairs(self) -> list[tuple[LayoutPosition, int]]:
        return [(p, aj) for p in self.model.all_positions for aj in self.model.adjacent_layers(p.layer)]

    def _calculate_connector_x(self) -> None:
        for position, adjacent_layer in self._position_and_adjacent_layer_pairs():
            connectors = self.model.get_connectors_of_position(position, adjacent_layer)
            if not connectors:
                continue
            to_divide = Interval.from_center_size(
                self._node_x_by_id[position.id], self._width_of_node_box(position.id)
            )
            for connector, x in zip(
                connectors, get_x_coords(to_divide, len(connectors), self.d.box_connector_area_perc)
            ):
                self._connector_x[connector.key] = x

    def _calculate_connector_y(self) -> None:
        for position, adjacent_layer in self._position_and_adjacent_layer_pairs():
            vertical_box = Interval.from_center_size(
                self._layer_y[position.layer], self._height_of_node_box(position.id)
            )
            y = vertical_box.max_value if adjacent_layer > position.layer else vertical_box.min_value
            for connector in self.model.get_connectors_of_position(position, adjacent_layer):
                self._connector_y[connector.key] = y

    def _get_placed_nodes(self) -> list[PlacedNode]:
        result: list[PlacedNode] = []
        for position in self.model.all_positions:
            if not self._is_original(position.id):
                continue
            node = self.original.get_node_by_id(position.id)
            result.append(
                PlacedNode(
                    id=node.id,
                    text=node.text,
                    error_status=node.error_status,
                    layer=position.layer,
                    horizontal_box=Interval.from_center_size(
                        self._node_x_by_id[position.id], self._width_of_node_box(position.id)
                    ),
                    vertical_box=Interval.from_center_size(
                        self._layer_y[position.layer], self._height_of_node_box(position.id)
                    ),
                )
            )
        return result

    # ─── Line segments ───────────────────────────────────────────────────

    def _calculate_layout_line_segments(self) -> None:
        line_checker = LineChecker(
            node_box_function=self._get_cross_safe_box,
            node_width_function=lambda node_id: Interval.from_center_size(
                self._node_x_by_id[node_id], self._line_through_intermediate_allowance
            ),
            is_original=self._is_original,
        )
        for original_edge in self.original.edges:
            shown = [pair for pair in original_edge.intermediate_edges if self._is_shown(pair)]
            if shown and shown[0] == original_edge.intermediate_edges[0]:
                start_connector = self.model.get_connection(*shown[0]).from_
                self._original_edge_by_connector[start_connector.key] = edge_key(original_edge)
            self._segments_by_original_edge[edge_key(original_edge)] = self._get_segments_for(
                original_edge, shown, line_checker
            )

    def _is_shown(self, pair: tuple[str, str]) -> bool:
        return self.model.has_id(pair[0]) and self.model.has_id(pair[1])

    def _get_segments_for(
        self,
        original_edge: OriginalEdgeWithIntermediateEdges,
        shown: list[tuple[str, str]],
        line_checker: LineChecker,
    ) -> list[LayoutLineSegment]:
        vertical_passages = self.d.intermediate_layer_passed_by_vertical_line
        groups = SegmentsBuilder(
            is_original=self._is_original,
            line_factory=self._get_line,
            direction_calculator=self._get_direction_of,
            layer_passage_factory=self._get_layer_passage if vertical_passages else None,
        ).run(shown)
        if vertical_passages:
            line_allowed = self._line_allowed_function(line_checker)
            groups = [
                [piece for segment in straighten(group, line_allowed) for piece in segment.split(self._point_on_node)]
                for group in groups
            ]
        return [self._to_layout_line_segment(s, original_edge) for group in groups for s in group]

    def _get_line(self, from_id: str, to_id: str) -> Line:
        connection = self.model.get_connection(from_id, to_id)
        return Line(
            Point(self._connector_x[connection.from_.key], self._connector_y[connection.from_.key]),
            Point(self._connector_x[connection.to.key], self._connector_y[connection.to.key]),
        )

    def _get_direction_of(self, from_id: str, to_id: str) -> PassDirection:
        connection = self.model.get_connection(from_id, to_id)
        if connection.from_.reference_position.layer < connection.to.reference_position.layer:
            return PassDirection.DOWN
        return PassDirection.UP

    def _get_layer_passage(self, node_id: str, direction: PassDirection) -> Line:
        position = self._position_of(node_id)
        x = self._node_x_by_id[node_id]
        vertical_box = Interval.from_center_size(self._layer_y[position.layer], self._height_of_node_box(node_id))
        top = Point(x, vertical_box.min_value)
        bottom = Point(x, vertical_box.max_value)
        return Line(top, bottom) if direction == PassDirection.DOWN else Line(bottom, top)

    def _get_cross_safe_box(self, node_id: str) -> Box:
        if self._is_original(node_id):
            width = self._width_of_node(node_id) + 2 * self.d.box_cross_protection_margin
        else:
            width = 1
        layer = self._position_of(node_id).layer
        return Box(
            Interval.from_center_size(self._node_x_by_id[node_id], width),
            Interval.from_center_size(self._layer_y[layer], self._height_of_node_box(node_id)),
        )

    def _line_allowed_function(self, line_checker: LineChecker) -> Callable[[str, Line], bool]:
        def line_allowed(node_id: str, line: Line) -> bool:
            # Lines start and end at fixed connectors of original nodes.
            if self._is_original(node_id):
                return True
            position = self._position_of(node_id)
            layer_ids = [p.id for p in self.model.get_positions_of_layer(position.layer)]
            obstacles = line_checker.obstacles(
                list(reversed(layer_ids[: position.position])), layer_ids[position.position + 1 :]
            )
            return line_checker.line_is_in_bounds_for_id(node_id, line) and all(
                relate_lines(obstacle, line) == LineRelation.UNRELATED for obstacle in obstacles
            )

        return line_allowed

    def _point_on_node(self, node_id: str, line: Line) -> Point:
        return line.integer_point_at_y(self._layer_y[self._position_of(node_id).layer])

    def _position_of(self, node_id: str) -> LayoutPosition:
        position = self.model.get_position_of_id(node_id)
        if position is None:
            raise KeyError(f"Node {node_id} is not part of the layout")
        return position

    def _to_layout_line_segment(
        self, segment: StraightenedLine, original_edge: OriginalEdgeWithIntermediateEdges
    ) -> LayoutLineSegment:
        layer_start = self._position_of(segment.id_start).layer
        layer_end = self._position_of(segment.id_end).layer
        return LayoutLineSegment(
            key=f"{segment.id_start}-{segment.id_end}",
            line=segment.line,
            min_layer_number=min(layer_start, layer_end),
            max_layer_number=max(layer_start, layer_end),
            error_status=original_edge.error_status,
            is_last_line_segment=segment.id_end == original_edge.to_id,
        )

    # ─── Edge labels ─────────────────────────────────────────────────────

    def _calculate_edge_labels(self) -> list[EdgeLabel]:
        result: list[EdgeLabel] = []
        for position, adjacent_layer in self._position_and_adjacent_layer_pairs():
            layouter = EdgeLabelLayouter(self.label_dimensions)
            for connector in self.model.get_connectors_of_position(position, adjacent_layer):
                if connector.key not in self._original_edge_by_connector:
                    continue
                label = self._get_optional_edge_label(connector, layouter)
                if label is not None:
                    result.append(label)
        return result

    def _get_optional_edge_label(self, connector: LayoutConnector, layouter: EdgeLabelLayouter) -> EdgeLabel | None:
        key = self._original_edge_by_connector[connector.key]
        original_edge = self.original.get_edge_by_key(key)
        if original_edge.text.num_lines == 0:
            return None
        first_segment = self._segments_by_original_edge[key][0]
        box = layouter.add(first_segment.line, original_edge.text.max_line_length, original_edge.text.num_lines)
        return EdgeLabel(horizontal_box=box.horizontal_box, vertical_box=box.vertical_box, text=original_edge.text)


# ─── Diagnostics ─────────────────────────────────────────────────────────────


def get_num_crossing_lines(segments: list[LayoutLineSegment]) -> int:
    """Count pairs of segments that cross within a shared range of layers."""
    result = 0
    for i, first in enumerate(segments):
        span_first = Interval.from_min_max(first.min_layer_number, first.max_layer_number)
        for second in segments[i + 1 :]:
            span_second = Interval.from_min_max(second.min_layer_number, second.max_layer_number)
            intersection = span_first.intersected(span_second)
            if intersection is not None and intersection.size >= 2 and _segments_cross(first, second):
                result += 1
    return result


def _segments_cross(first: LayoutLineSegment, second: LayoutLineSegment) -> bool:
    first_points = {first.line.start_point, first.line.end_point}
    second_points = {second.line.start_point, second.line.end_point}
    if first_points & second_points:
        return False
    return relate_lines(first.line, second.line) == LineRelation.CROSS


# ─── Pipeline ────────────────────────────────────────────────────────────────


def full_layout(
    original: OriginalGraph,
    dimensions: Dimensions,
    algorithm: LayerAlgorithm = LayerAlgorithm.LONGEST_PATH,
    on_node_visited: Callable[[], None] | None = None,
) -> Layout:
    """Run the whole layout pipeline on a graph with error-flow status."""
    layers = calculate_layer_numbers(original, algorithm, on_node_visited)
    intermediates = introduce_intermediate_nodes_and_edges(original, layers)
    graph = intermediates.intermediate
    lb = minimize_num_crossings(LayoutBase.create([n.id for n in graph.nodes], graph))
    model = LayoutModel.create(lb, graph)
    return LayoutBuilder(model, intermediates, dimensions).run()
