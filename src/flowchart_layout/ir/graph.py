"""Generic graph store backed by a networkx DiGraph.

Nodes are any objects with an ``id``; edges are any objects with ``from_id``
and ``to_id``. Edges refer to their endpoints by id, never by object, and are
keyed by the ordered pair of ids, so at most one edge exists per direction
between two nodes. Ids may contain ``-``, so keys are tuples, not joined strings.
"""

from __future__ import annotations

from typing import Generic, Protocol, TypeVar

import networkx as nx

from flowchart_layout.errors import GraphStructureError


class WithId(Protocol):
    @property
    def id(self) -> str: ...


class WithEndpoints(Protocol):
    @property
    def from_id(self) -> str: ...

    @property
    def to_id(self) -> str: ...


N = TypeVar("N", bound=WithId)
E = TypeVar("E", bound=WithEndpoints)


EdgeKey = tuple[str, str]


def key_for(id_from: str, id_to: str) -> EdgeKey:
    return (id_from, id_to)


def edge_key(edge: WithEndpoints) -> EdgeKey:
    return key_for(edge.from_id, edge.to_id)


class Graph(Generic[N, E]):
    """Id-keyed node and edge repository preserving declaration order."""

    def __init__(self) -> None:
        self.digraph: nx.DiGraph = nx.DiGraph()
        self._nodes: list[N] = []
        self._edges: list[E] = []
        self._starting_from: dict[str, list[E]] | None = None
        self._leading_to: dict[str, list[E]] | None = None

    def add_node(self, node: N) -> None:
        if node.id in self.digraph:
            raise GraphStructureError(f"Cannot put node with id {node.id} because this id is already present")
        self._nodes.append(node)
        self.digraph.add_node(node.id, data=node)
        self._starting_from = self._leading_to = None

    def add_edge(self, edge: E) -> None:
        described = f"from {edge.from_id} to {edge.to_id}"
        if edge.from_id not in self.digraph:
            raise GraphStructureError(f"Illegal edge {described} because referred from node is not in this graph")
        if edge.to_id not in self.digraph:
            raise GraphStructureError(f"Illegal edge {described} because referred to node is not in this graph")
        if self.digraph.has_edge(edge.from_id, edge.to_id):
            raise GraphStructureError(
                f"Cannot add existing edge {described} because that connection is present already"
            )
        self._edges.append(edge)
        self.digraph.add_edge(edge.from_id, edge.to_id, data=edge)
        self._starting_from = self._leading_to = None

    @property
    def nodes(self) -> list[N]:
        return list(self._nodes)

    @property
    def edges(self) -> list[E]:
        return list(self._edges)

    def node_count(self) -> int:
        return self.digraph.number_of_nodes()

    def edge_count(self) -> int:
        return self.digraph.number_of_edges()

    def has_node(self, node_id: str) -> bool:
        return node_id in self.digraph

    def get_node_by_id(self, node_id: str) -> N:
        if node_id not in self.digraph:
            raise GraphStructureError(f"Graph does not have a node with id: {node_id}")
        return self.digraph.nodes[node_id]["data"]

    def has_edge_key(self, key: EdgeKey) -> bool:
        return self.digraph.has_edge(*key)

    def get_edge_by_key(self, key: EdgeKey) -> E:
        if not self.digraph.has_edge(*key):
            raise GraphStructureError(f"Graph does not have an edge from {key[0]} to {key[1]}")
        return self.digraph.edges[key]["data"]

    def search_edge(self, id_from: str, id_to: str) -> E | None:
        if not self.digraph.has_edge(id_from, id_to):
            return None
        return self.digraph.edges[id_from, id_to]["data"]

    def is_dag(self) -> bool:
        return nx.is_directed_acyclic_graph(self.digraph)

    def _init_if_needed(self) -> None:
        if self._starting_from is not None:
            return
        # DiGraph keeps adjacency in insertion order, which is edge declaration order.
        self._starting_from = {
            node_id: [data for _, _, data in self.digraph.out_edges(node_id, data="data")]
            for node_id in self.digraph.nodes
        }
        self._leading_to = {
            node_id: [data for _, _, data in self.digraph.in_edges(node_id, data="data")]
            for node_id in self.digraph.nodes
        }

    def get_ordered_edges_starting_from(self, node_id: str) -> list[E]:
        self._init_if_needed()
        return list(self._starting_from[node_id])

    def get_ordered_edges_leading_to(self, node_id: str) -> list[E]:
        self._init_if_needed()
        return list(self._leading_to[node_id])

    def get_successors(self, node_id: str) -> list[N]:
        return [self.get_node_by_id(edge.to_id) for edge in self.get_ordered_edges_starting_from(node_id)]

    def get_predecessors(self, node_id: str) -> list[N]:
        return [self.get_node_by_id(edge.from_id) for edge in self.get_ordered_edges_leading_to(node_id)]

    def roots(self) -> list[N]:
        """Nodes without incoming edges, in declaration order."""
        return [node for node in self._nodes if not self.get_ordered_edges_leading_to(node.id)]
