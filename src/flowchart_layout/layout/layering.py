"""Layer assignment and rank-span expansion.

Phases:
  1. Layer assignment (first-occurring path or longest path)
  2. Intermediate node insertion for edges that span more than one layer

Layer numbers need not be contiguous. LayoutBase compacts them later.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Callable
from dataclasses import dataclass, field

from flowchart_layout.errors import LayeringError
from flowchart_layout.ir.error_flow import OriginalEdge, OriginalGraph, OriginalNode
from flowchart_layout.ir.graph import EdgeKey, Graph
from flowchart_layout.ir.text import EdgeText, NodeText
from flowchart_layout.layout.util import get_range
from flowchart_layout.types import ErrorStatus, LayerAlgorithm

INTERMEDIATE_PREFIX = "intermediate"


# ─── Graph with layer numbers ───────────────────────────────────────────────


@dataclass(frozen=True)
class NodeForLayers:
    id: str
    text: NodeText
    error_status: ErrorStatus
    layer: int
    is_intermediate: bool = False


@dataclass(frozen=True)
class EdgeForLayers:
    from_id: str
    to_id: str
    text: EdgeText


GraphForLayers = Graph[NodeForLayers, EdgeForLayers]


@dataclass(frozen=True)
class OriginalEdgeWithIntermediateEdges:
    """An original edge together with the chain of edges that realizes it."""

    from_id: str
    to_id: str
    text: EdgeText
    error_status: ErrorStatus
    intermediate_edges: tuple[EdgeKey, ...] = field(default_factory=tuple)


OriginalGraphReferencingIntermediates = Graph[OriginalNode, OriginalEdgeWithIntermediateEdges]


@dataclass
class IntermediatesCreationResult:
    intermediate: GraphForLayers
    original: OriginalGraphReferencingIntermediates


# ─── Layer assignment ────────────────────────────────────────────────────────


def calculate_layer_numbers(
    graph: OriginalGraph, algorithm: LayerAlgorithm, on_node_visited: Callable[[], None] | None = None
) -> dict[str, int]:
    if algorithm == LayerAlgorithm.FIRST_OCCURRING_PATH:
        return calculate_layer_numbers_first_occurring_path(graph, on_node_visited)
    if algorithm == LayerAlgorithm.LONGEST_PATH:
        return calculate_layer_numbers_longest_path(graph, on_node_visited)
    raise ValueError(f"Invalid layer algorithm {algorithm}")


def calculate_layer_numbers_first_occurring_path(
    graph: OriginalGraph, on_node_visited: Callable[[], None] | None = None
) -> dict[str, int]:
    """Breadth-first layering following edge declaration order.

    A node goes one layer below its deepest placed predecessor, and further
    down while a placed successor already occupies that layer. A node queued
    more than once is placed again on every dequeue, so predecessors placed
    in the meantime push it further down.
    """
    layer_map: dict[str, int] = {}
    queue: deque[str] = deque(n.id for n in graph.roots())
    while queue:
        current = queue.popleft()
        if on_node_visited is not None:
            on_node_visited()
        incoming = graph.get_ordered_edges_leading_to(current)
        if not incoming:
            layer_map[current] = 0
        else:
            # Not empty: a non-root is only queued from a placed predecessor.
            preceding = [layer_map[e.from_id] for e in incoming if e.from_id in layer_map]
            candidate = max(preceding) + 1
            forbidden = {
                layer_map[e.to_id] for e in graph.get_ordered_edges_starting_from(current) if e.to_id in layer_map
            }
            while candidate in forbidden:
                candidate += 1
            layer_map[current] = candidate
        queue.extend(
            e.to_id for e in graph.get_ordered_edges_starting_from(current) if e.to_id not in layer_map
        )
    return layer_map


def calculate_layer_numbers_longest_path(
    graph: OriginalGraph, on_node_visited: Callable[[], None] | None = None
) -> dict[str, int]:
    """Assign each node the length of the longest path from any root.

    Each walk remembers the nodes on its own path and does not revisit them,
    so nodes that are only reachable through a cycle without a root stay
    unassigned. ``on_node_visited`` is called once per visit.
    """
    layer_map: dict[str, int] = {}
    for root in graph.roots():
        stack: list[tuple[str, int, frozenset[str]]] = [(root.id, 0, frozenset())]
        while stack:
            node_id, layer, path = stack.pop()
            if on_node_visited is not None:
                on_node_visited()
            registered = layer_map.get(node_id)
            if registered is not None and registered >= layer:
                continue
            layer_map[node_id] = layer
            new_path = path | {node_id}
            successors = [
                e.to_id for e in graph.get_ordered_edges_starting_from(node_id) if e.to_id not in new_path
            ]
            # Reversed so the first successor is walked first.
            for successor in reversed(successors):
                stack.append((successor, layer + 1, new_path))
    return layer_map


# ─── Intermediate nodes ──────────────────────────────────────────────────────


def introduce_intermediate_nodes_and_edges(
    original: OriginalGraph, node_id_to_layer: dict[str, int]
) -> IntermediatesCreationResult:
    """Replace every edge spanning more than one layer by a chain of unit edges.

    Raises LayeringError naming the nodes without a layer number.
    """
    omitted = [n.id for n in original.nodes if n.id not in node_id_to_layer]
    if omitted:
        raise LayeringError(f"Not all nodes could be grouped into horizontal layers: {', '.join(omitted)}")
    extended: OriginalGraphReferencingIntermediates = Graph()
    intermediate: GraphForLayers = Graph()
    for n in original.nodes:
        extended.add_node(n)
        intermediate.add_node(
            NodeForLayers(id=n.id, text=n.text, error_status=n.error_status, layer=node_id_to_layer[n.id])
        )
    seq = 1
    for edge in original.edges:
        seq = _handle_edge(edge, node_id_to_layer, extended, intermediate, seq)
    return IntermediatesCreationResult(intermediate=intermediate, original=extended)


def _handle_edge(
    edge: OriginalEdge,
    node_id_to_layer: dict[str, int],
    extended: OriginalGraphReferencingIntermediates,
    intermediate: GraphForLayers,
    seq: int,
) -> int:
    layer_from = node_id_to_layer[edge.from_id]
    layer_to = node_id_to_layer[edge.to_id]
    if abs(layer_to - layer_from) <= 1:
        # Edges within one layer are kept too; judging the layering is not done here.
        chain = [edge.from_id, edge.to_id]
    else:
        dummies: list[str] = []
        for layer in _intermediate_layers(layer_from, layer_to):
            dummy_id = f"{INTERMEDIATE_PREFIX}{seq}"
            seq += 1
            intermediate.add_node(
                NodeForLayers(
                    id=dummy_id,
                    text=NodeText.intermediate(),
                    error_status=edge.error_status,
                    layer=layer,
                    is_intermediate=True,
                )
            )
            dummies.append(dummy_id)
        chain = [edge.from_id, *dummies, edge.to_id]
    pairs = tuple(zip(chain, chain[1:]))
    for from_id, to_id in pairs:
        intermediate.add_edge(EdgeForLayers(from_id=from_id, to_id=to_id, text=edge.text))
    extended.add_edge(
        OriginalEdgeWithIntermediateEdges(
            from_id=edge.from_id,
            to_id=edge.to_id,
            text=edge.text,
            error_status=edge.error_status,
            intermediate_edges=pairs,
        )
    )
    return seq


def _intermediate_layers(layer_from: int, layer_to: int) -> list[int]:
    if layer_from < layer_to:
        return get_range(layer_from + 1, layer_to)
    return list(reversed(get_range(layer_to + 1, layer_from)))