"""Positions, connectors and connections derived from a LayoutBase.

A position is a slot (layer, index) holding one node. A connector is the
point where one edge touches a position, on the side facing an adjacent
layer. A connection pairs the two connectors of one edge.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from flowchart_layout.errors import ConnectorError
from flowchart_layout.ir.graph import EdgeKey, Graph, key_for
from flowchart_layout.layout.layout_base import LayoutBase
from flowchart_layout.types import ConnectorDirection


def layout_position_key(layer: int, position: int) -> str:
    return f"{layer}-{position}"


@dataclass(frozen=True)
class LayoutPosition:
    layer: int
    position: int
    id: str

    @property
    def key(self) -> str:
        return layout_position_key(self.layer, self.position)


ConnectorKey = tuple[str, ConnectorDirection, str]


@dataclass(frozen=True)
class LayoutConnector:
    reference_position: LayoutPosition
    connector_seq: int
    direction: ConnectorDirection
    related_id: str

    @property
    def key(self) -> ConnectorKey:
        # At most two edges connect two nodes, one per direction.
        return connector_key(self.reference_position.id, self.direction, self.related_id)


def connector_key(reference_id: str, direction: ConnectorDirection, related_id: str) -> ConnectorKey:
    return (reference_id, direction, related_id)


@dataclass(frozen=True)
class LayoutConnection:
    from_: LayoutConnector
    to: LayoutConnector


class LayoutModel:
    """Read-only lookup structure; build it with ``LayoutModel.create``."""

    def __init__(
        self,
        num_layers: int,
        positions_by_key: dict[str, LayoutPosition],
        connectors_by_key: dict[ConnectorKey, LayoutConnector],
        positions_of_layer: list[list[LayoutPosition]],
        position_of_id: dict[str, LayoutPosition],
        related_positions: dict[str, dict[int, list[LayoutPosition]]],
        connectors_of_position: dict[str, dict[int, list[LayoutConnector]]],
        connections_by_edge_key: dict[EdgeKey, LayoutConnection],
    ) -> None:
        self.num_layers = num_layers
        self._positions_by_key = positions_by_key
        self._connectors_by_key = connectors_by_key
        self._positions_of_layer = positions_of_layer
        self._position_of_id = position_of_id
        self._related_positions = related_positions
        self._connectors_of_position = connectors_of_position
        self._connections_by_edge_key = connections_by_edge_key

    @classmethod
    def create(cls, lb: LayoutBase, graph: Graph[Any, Any]) -> LayoutModel:
        return _LayoutModelBuilder(lb, graph).run()

    def get_position(self, position_key: str) -> LayoutPosition:
        if position_key not in self._positions_by_key:
            raise KeyError(f"No position available for key {position_key}")
        return self._positions_by_key[position_key]

    def get_connector(self, key: ConnectorKey) -> LayoutConnector:
        if key not in self._connectors_by_key:
            raise KeyError(f"No connector available for key {key}")
        return self._connectors_by_key[key]

    def get_positions_of_layer(self, layer: int) -> list[LayoutPosition]:
        if layer < 0 or layer >= self.num_layers:
            raise IndexError(f"Layer number out of bounds: {layer}")
        return list(self._positions_of_layer[layer])

    def get_position_of_id(self, node_id: str) -> LayoutPosition | None:
        return self._position_of_id.get(node_id)

    def has_id(self, node_id: str) -> bool:
        return node_id in self._position_of_id

    def get_related_positions(self, reference: LayoutPosition, to_layer: int) -> list[LayoutPosition]:
        return list(self._related_positions.get(reference.key, {}).get(to_layer, []))

    def get_connectors_of_position(self, reference: LayoutPosition, to_layer: int) -> list[LayoutConnector]:
        return list(self._connectors_of_position.get(reference.key, {}).get(to_layer, []))

    def get_connection(self, id_from: str, id_to: str) -> LayoutConnection:
        key = key_for(id_from, id_to)
        if key not in self._connections_by_edge_key:
            raise ConnectorError(f"No connection known for edge from {id_from} to {id_to}")
        return self._connections_by_edge_key[key]

    @property
    def all_positions(self) -> list[LayoutPosition]:
        return [p for layer in self._positions_of_layer for p in layer]

    def adjacent_layers(self, layer: int) -> list[int]:
        return [other for other in (layer - 1, layer + 1) if 0 <= other < self.num_layers]


class _LayoutModelBuilder:
    def __init__(self, lb: LayoutBase, graph: Graph[Any, Any]) -> None:
        self.lb = lb
        self.graph = graph
        self.positions_by_key: dict[str, LayoutPosition] = {}
        self.connectors_by_key: dict[ConnectorKey, LayoutConnector] = {}
        self.positions_of_layer: list[list[LayoutPosition]] = [[] for _ in range(lb.num_layers)]
        self.position_of_id: dict[str, LayoutPosition] = {}
        self.related_positions: dict[str, dict[int, list[LayoutPosition]]] = {}
        self.connectors_of_position: dict[str, dict[int, list[LayoutConnector]]] = {}
        self.connections_by_edge_key: dict[EdgeKey, LayoutConnection] = {}

    def run(self) -> LayoutModel:
        self._establish_positions()
        self._relate_positions()
        self._build_connectors()
        self._build_connections()
        return LayoutModel(
            self.lb.num_layers,
            self.positions_by_key,
            self.connectors_by_key,
            self.positions_of_layer,
            self.position_of_id,
            self.related_positions,
            self.connectors_of_position,
            self.connections_by_edge_key,
        )

    def _position_and_adjacent_layer_pairs(self) -> list[tuple[LayoutPosition, int]]:
        result: list[tuple[LayoutPosition, int]] = []
        for layer in range(self.lb.num_layers):
            others = [o for o in (layer - 1, layer + 1) if 0 <= o < self.lb.num_layers]
            for position in self.positions_of_layer[layer]:
                for other in others:
                    result.append((position, other))
        return result

    def _establish_positions(self) -> None:
        for layer in range(self.lb.num_layers):
            for index, node_id in enumerate(self.lb.get_ids_of_layer(layer)):
                position = LayoutPosition(layer, index, node_id)
                self.positions_by_key[position.key] = position
                self.positions_of_layer[layer].append(position)
                self.position_of_id[node_id] = position

    def _relate_positions(self) -> None:
        for reference, other_layer in self._position_and_adjacent_layer_pairs():
            for index in self.lb.get_connections(reference.id, other_layer):
                related = self.positions_by_key[layout_position_key(other_layer, index)]
                self.related_positions.setdefault(reference.key, {}).setdefault(other_layer, []).append(related)

    def _build_connectors(self) -> None:
        for reference, other_layer in self._position_and_adjacent_layer_pairs():
            seq = 0
            for related in self.related_positions.get(reference.key, {}).get(other_layer, []):
                edges = [
                    e
                    for e in (
                        self.graph.search_edge(related.id, reference.id),
                        self.graph.search_edge(reference.id, related.id),
                    )
                    if e is not None
                ]
                if reference.layer < related.layer:
                    # The reference is the top node.
                    edges.reverse()
                for edge in edges:
                    direction = ConnectorDirection.IN if edge.to_id == reference.id else ConnectorDirection.OUT
                    connector = LayoutConnector(reference, seq, direction, related.id)
                    seq += 1
                    self.connectors_by_key[connector.key] = connector
                    self.connectors_of_position.setdefault(reference.key, {}).setdefault(other_layer, []).append(
                        connector
                    )

    def _build_connections(self) -> None:
        # Every edge is seen from both ends; both produce the same connection.
        for reference, other_layer in self._position_and_adjacent_layer_pairs():
            for connector in self.connectors_of_position.get(reference.key, {}).get(other_layer, []):
                reversed_connector = self._reversed_connector(connector)
                if connector.direction == ConnectorDirection.IN:
                    key = key_for(connector.related_id, reference.id)
                    self.connections_by_edge_key[key] = LayoutConnection(reversed_connector, connector)
                else:
                    key = key_for(reference.id, connector.related_id)
                    self.connections_by_edge_key[key] = LayoutConnection(connector, reversed_connector)

    def _reversed_connector(self, connector: LayoutConnector) -> LayoutConnector:
        key = connector_key(connector.related_id, connector.direction.reversed(), connector.reference_position.id)
        if key not in self.connectors_by_key:
            p = connector.reference_position
            raise ConnectorError(
                f"Expected that there exists a reverse connector for connector (layer={p.layer}, "
                f"position={p.position}, id={p.id}, connectorSeq={connector.connector_seq}, "
                f"direction={connector.direction.name}, relatedId={connector.related_id})"
            )
        return self.connectors_by_key[key]
