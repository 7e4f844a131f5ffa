"""Crossing counting between two adjacent layers and median alignment.

One layer is the target layer, the other the reference layer. For every
target node we keep the sorted indexes of the reference nodes it connects
to. Processing the target nodes from left to right, counter ``n[j]`` holds
the number of lines already drawn that end right of reference index ``j``.
Each new line to index ``r`` crosses exactly ``n[r]`` of them.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LayerCalculationNode:
    id: str
    connections: list[int]


@dataclass(frozen=True, order=True)
class Rank:
    new_rank: int
    original_rank: int

    def compare_to(self, other: Rank) -> int:
        result = self.new_rank - other.new_rank
        if result == 0:
            result = self.original_rank - other.original_rank
        return result


def rank_from_median(sorted_values: list[int]) -> int:
    """Twice the median, so that the result stays an integer."""
    if len(sorted_values) % 2 == 0:
        highest = len(sorted_values) // 2
        return sorted_values[highest - 1] + sorted_values[highest]
    return 2 * sorted_values[(len(sorted_values) - 1) // 2]


class LayerCalculation:
    def __init__(self, nodes: list[LayerCalculationNode]) -> None:
        self._nodes = list(nodes)
        self.num_reference_nodes = self._check_reference_nodes_and_get_their_number()
        self._n: list[int] = []

    def get_sequence(self) -> list[str]:
        return [node.id for node in self._nodes]

    def _check_reference_nodes_and_get_their_number(self) -> int:
        result = 0
        for node in self._nodes:
            if any(a > b for a, b in zip(node.connections, node.connections[1:])):
                raise ValueError(f"Ref indexes are not sorted, have {node.connections}")
            if node.connections:
                result = max(result, node.connections[-1] + 1)
        return result

    def count(self) -> int:
        return self._count_for(self._nodes)

    def _count_for(self, target_nodes: list[LayerCalculationNode]) -> int:
        self._n = [0] * self.num_reference_nodes
        total = 0
        for node in target_nodes:
            for ref_index in node.connections:
                total += self._n[ref_index]
                for j in range(ref_index):
                    self._n[j] += 1
        return total

    def swap_and_get_count_change(self, index_leftmost: int) -> int:
        """Swap two adjacent target nodes and return the change in crossings."""
        index_rightmost = index_leftmost + 1
        if index_leftmost < 0 or index_rightmost >= len(self._nodes):
            raise IndexError(f"Swapped nodes out of bounds: {index_leftmost} and {index_rightmost}")
        count_before = self._count_for([self._nodes[index_leftmost], self._nodes[index_rightmost]])
        self._nodes[index_leftmost], self._nodes[index_rightmost] = (
            self._nodes[index_rightmost],
            self._nodes[index_leftmost],
        )
        count_after = self._count_for([self._nodes[index_leftmost], self._nodes[index_rightmost]])
        return count_after - count_before

    def align_to_connections(self) -> None:
        """Order the connected nodes by the median of their connections.

        Nodes without connections keep their place. The connected nodes are
        sorted into the slots that connected nodes occupied before.
        """
        slots = [i for i, node in enumerate(self._nodes) if node.connections]
        ranked = sorted(
            slots,
            key=lambda i: Rank(rank_from_median(self._nodes[i].connections), i),
        )
        reordered = list(self._nodes)
        for slot, source in zip(slots, ranked):
            reordered[slot] = self._nodes[source]
        self._nodes = reordered
