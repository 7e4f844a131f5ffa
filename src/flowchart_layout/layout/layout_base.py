"""Node order per layer and global crossing minimization.

Layers are numbered from top to bottom; within a layer, ids are ordered from
left to right. A LayoutBase holds only the nodes that are drawn. The direction
of edges does not matter here: it decides where arrow heads go, not where
nodes go.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from flowchart_layout.errors import SequenceError
from flowchart_layout.ir.graph import Graph
from flowchart_layout.layout.crossings import LayerCalculation, LayerCalculationNode


class WithLayerNumber(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def layer(self) -> int: ...


class LayoutBase:
    """Ordered ids per layer plus a symmetric connectivity relation.

    The only mutator is ``put_new_sequence_in_layer``, which refuses to change
    the membership of a layer.
    """

    def __init__(
        self,
        nodes_by_layer: list[list[str]],
        connected_ids: dict[str, frozenset[str]],
        node_id_to_layer: dict[str, int],
    ) -> None:
        self._nodes_by_layer = nodes_by_layer
        self.connected_ids = connected_ids
        self.node_id_to_layer = node_id_to_layer

    @classmethod
    def create(cls, sequence: list[str], graph: Graph[Any, Any]) -> LayoutBase:
        """Build from the ids to draw, in their initial left-to-right order.

        Layer numbers that are used are compacted to 0..k-1.
        """
        node_id_to_layer = _assign_layer_numbers_to_shown_nodes(sequence, graph)
        num_layers = max(node_id_to_layer.values(), default=-1) + 1
        nodes_by_layer: list[list[str]] = [[] for _ in range(num_layers)]
        for node_id in sequence:
            nodes_by_layer[node_id_to_layer[node_id]].append(node_id)
        connected: dict[str, set[str]] = {node_id: set() for node_id in sequence}
        for edge in graph.edges:
            if edge.from_id in connected and edge.to_id in connected:
                connected[edge.from_id].add(edge.to_id)
                connected[edge.to_id].add(edge.from_id)
        return cls(nodes_by_layer, {k: frozenset(v) for k, v in connected.items()}, node_id_to_layer)

    def clone(self) -> LayoutBase:
        return LayoutBase([list(row) for row in self._nodes_by_layer], self.connected_ids, self.node_id_to_layer)

    @property
    def num_layers(self) -> int:
        return len(self._nodes_by_layer)

    def get_sequence(self) -> list[str]:
        return [node_id for row in self._nodes_by_layer for node_id in row]

    def get_ids_of_layer(self, layer_number: int) -> list[str]:
        return list(self._nodes_by_layer[layer_number])

    def put_new_sequence_in_layer(self, layer_number: int, new_sequence: list[str]) -> None:
        invalid_ids = [node_id for node_id in new_sequence if node_id not in self.node_id_to_layer]
        if invalid_ids:
            raise SequenceError(f"Putting new ids in layer {layer_number}: {', '.join(invalid_ids)}")
        old_sequence = self._nodes_by_layer[layer_number]
        if len(old_sequence) != len(new_sequence):
            raise SequenceError(
                f"Changing the number of nodes in layer {layer_number}: from {len(old_sequence)} to {len(new_sequence)}"
            )
        if set(old_sequence) != set(new_sequence):
            raise SequenceError(f"Changing the ids in layer {layer_number}: {old_sequence} versus {new_sequence}")
        self._nodes_by_layer[layer_number] = list(new_sequence)

    def positions_to_ids(self, layer_number: int, positions: list[int]) -> list[str]:
        return [self._nodes_by_layer[layer_number][p] for p in positions]

    def get_connections(self, node_id: str, to_layer: int) -> list[int]:
        """Indexes within ``to_layer`` of the nodes connected to ``node_id``."""
        connected = self.connected_ids[node_id]
        return [i for i, other in enumerate(self._nodes_by_layer[to_layer]) if other in connected]


def _assign_layer_numbers_to_shown_nodes(sequence: list[str], graph: Graph[Any, Any]) -> dict[str, int]:
    used = sorted({graph.get_node_by_id(node_id).layer for node_id in sequence})
    old_to_new = {old: new for new, old in enumerate(used)}
    return {node_id: old_to_new[graph.get_node_by_id(node_id).layer] for node_id in sequence}


# ─── Crossing minimization ───────────────────────────────────────────────────


def get_num_crossings(lb: LayoutBase) -> int:
    return sum(_get_layer_calculation(lb, layer, layer + 1).count() for layer in range(lb.num_layers - 1))


def _get_layer_calculation(lb: LayoutBase, target: int, ref: int) -> LayerCalculation:
    return LayerCalculation(
        [LayerCalculationNode(node_id, lb.get_connections(node_id, ref)) for node_id in lb.get_ids_of_layer(target)]
    )


def align_from_layer(lb: LayoutBase, fixed_layer_number: int) -> None:
    """Median-align every layer, working outward from the fixed layer."""
    for target in range(fixed_layer_number - 1, -1, -1):
        _align_from_layer_to(lb, target, target + 1)
    for target in range(fixed_layer_number + 1, lb.num_layers):
        _align_from_layer_to(lb, target, target - 1)


def _align_from_layer_to(lb: LayoutBase, target: int, ref: int) -> None:
    calculation = _get_layer_calculation(lb, target, ref)
    calculation.align_to_connections()
    lb.put_new_sequence_in_layer(target, calculation.get_sequence())


def calculate_num_crossings_changes_from_aligning(original: LayoutBase) -> list[int]:
    """Per fixed layer, the change in crossings if aligned from that layer."""
    original_num_crossings = get_num_crossings(original)
    result: list[int] = []
    for layer_number in range(original.num_layers):
        lb_new = original.clone()
        align_from_layer(lb_new, layer_number)
        result.append(get_num_crossings(lb_new) - original_num_crossings)
    return result


@dataclass(frozen=True)
class NumCrossingsJudgement:
    layer_number: int
    num_nodes: int
    num_crossings_reduction: int

    def compare_to(self, other: NumCrossingsJudgement) -> int:
        reduction_diff = self.num_crossings_reduction - other.num_crossings_reduction
        if reduction_diff != 0:
            return reduction_diff
        num_nodes_diff = self.num_nodes - other.num_nodes
        if num_nodes_diff != 0:
            return num_nodes_diff
        # Final tie goes to the higher layer number, intentionally not lowest-first.
        return self.layer_number - other.layer_number


def minimize_num_crossings(lb: LayoutBase) -> LayoutBase:
    """Apply the best alignment while it reduces crossings. Returns a new LayoutBase."""
    current = lb.clone()
    while True:
        changes = calculate_num_crossings_changes_from_aligning(current)
        judgements = [
            NumCrossingsJudgement(layer, len(current.get_ids_of_layer(layer)), -changes[layer])
            for layer in range(current.num_layers)
        ]
        if not judgements:
            return current
        best = judgements[0]
        for judgement in judgements[1:]:
            if judgement.compare_to(best) > 0:
                best = judgement
        if best.num_crossings_reduction <= 0:
            return current
        align_from_layer(current, best.layer_number)
