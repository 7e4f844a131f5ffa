"""Horizontal placement of the positions of one layer.

Every position wants to be centered on the median x of its predecessors in
an already placed neighbor layer. Positions whose wanted areas overlap are
joined into area groups, which are centered on the median of all their
predecessors and filled left to right without gaps.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from flowchart_layout.errors import AreaGroupError
from flowchart_layout.layout.geometry import Interval
from flowchart_layout.layout.util import rounded_median, sorted_uniq_numbers

SizeFunction = Callable[[int], int]
PredecessorXFunction = Callable[[int], list[int]]


@dataclass(frozen=True)
class AreaGroup:
    area: Interval
    positions: list[int]

    @property
    def position_interval(self) -> Interval:
        return Interval.from_values(self.positions)


@dataclass(frozen=True)
class _Conflict:
    area_groups: list[AreaGroup]
    area: Interval
    position_interval: Interval

    @classmethod
    def from_area_group(cls, group: AreaGroup) -> _Conflict:
        return cls([group], group.area, group.position_interval)

    @property
    def positions(self) -> list[int]:
        return [p for g in self.area_groups for p in g.positions]

    def merged(self, other: _Conflict) -> _Conflict:
        if not _position_areas_conflict(self, other):
            raise AreaGroupError("Trying to join conflicts that are not related")
        if set(self.positions) & set(other.positions):
            raise AreaGroupError("Cannot duplicate positions when joining conflicts")
        return _Conflict(
            self.area_groups + other.area_groups,
            self.area.joined(other.area),
            self.position_interval.joined(other.position_interval),
        )


def _position_areas_conflict(first: AreaGroup | _Conflict, second: AreaGroup | _Conflict) -> bool:
    goes_before = first.area.before(second.area) and first.position_interval.before(second.position_interval)
    goes_after = second.area.before(first.area) and second.position_interval.before(first.position_interval)
    return not (goes_before or goes_after)


@dataclass
class HorizontalConflictResolver:
    """Compute x coordinates for ``num_positions`` positions of one layer.

    ``size_function(p)`` is the width of position p; ``predecessor_x_function(p)``
    lists the x coordinates of its predecessors, possibly none.
    """

    num_positions: int
    size_function: SizeFunction
    predecessor_x_function: PredecessorXFunction
    final_area_groups: list[AreaGroup] | None = field(default=None, init=False)

    def run(self) -> list[int]:
        area_groups = [self.get_area_group([p]) for p in range(self.num_positions)]
        while True:
            conflicts = [_Conflict.from_area_group(g) for g in area_groups]
            previous_num_conflicts = len(conflicts)
            conflicts.sort(key=lambda c: c.area.min_value)
            conflicts = _join_sorted_conflicts(conflicts)
            # Spatially disjoint now; next make them disjoint by position index.
            conflicts.sort(key=lambda c: c.position_interval.min_value)
            conflicts = _join_sorted_conflicts(conflicts)
            area_groups = [self.get_area_group(c.positions) for c in conflicts]
            if len(conflicts) >= previous_num_conflicts:
                break
        area_groups.sort(key=lambda g: g.area.min_value)
        self.final_area_groups = area_groups
        self._check_indexes_are_ordered_as_intended()
        return [x for g in area_groups for x in self.get_x_positions_of_area_group(g)]

    def get_area_group(self, positions: list[int]) -> AreaGroup:
        predecessors = [
            x
            for p in positions
            for x in default_predecessor_decorator(
                p, self.num_positions, self.predecessor_x_function, self.size_function
            )
        ]
        center = rounded_median(sorted_uniq_numbers(predecessors))
        size = sum(self.size_function(p) for p in positions)
        return AreaGroup(Interval.from_center_size(center, size), sorted(positions))

    def get_x_positions_of_area_group(self, group: AreaGroup) -> list[int]:
        result: list[int] = []
        offset = group.area.min_value
        for p in group.positions:
            size = self.size_function(p)
            result.append(Interval.from_min_size(offset, size).center)
            offset += size
        return result

    def _check_indexes_are_ordered_as_intended(self) -> None:
        groups_positions = [g.positions for g in self.final_area_groups or []]
        if sum(len(positions) for positions in groups_positions) != self.num_positions:
            raise AreaGroupError("Final area groups yield different positions than are in the layer")
        check_groups_positions_are_as_intended(groups_positions)


def check_groups_positions_are_as_intended(groups_positions: list[list[int]]) -> None:
    for index, positions in enumerate(groups_positions):
        if any(b - a != 1 for a, b in zip(positions, positions[1:])):
            raise AreaGroupError(f"Positions in final area group {index} are not consecutive: {positions}")
        if index > 0:
            previous = groups_positions[index - 1]
            if positions[0] - previous[-1] != 1:
                raise AreaGroupError(f"Adjacent final area groups have incompatible positions {previous} and {positions}")


def _join_sorted_conflicts(conflicts: list[_Conflict]) -> list[_Conflict]:
    result: list[_Conflict] = []
    for conflict in conflicts:
        current = conflict
        # A grown conflict can overlap with the one before it.
        while result and _position_areas_conflict(result[-1], current):
            current = result.pop().merged(current)
        result.append(current)
    return result


def default_predecessor_decorator(
    position: int,
    num_positions: int,
    delegate: PredecessorXFunction,
    size_function: SizeFunction,
) -> list[int]:
    """Predecessor x coordinates of a position, made up from its neighbors if it has none."""
    own = delegate(position)
    if own:
        return own
    left: list[int] = []
    for left_position in range(position - 1, -1, -1):
        left = delegate(left_position)
        if left:
            break
    right: list[int] = []
    for right_position in range(position + 1, num_positions):
        right = delegate(right_position)
        if right:
            break
    if not left and not right:
        raise AreaGroupError("Cannot make up predecessors if no node is connected")
    if not left:
        return [min(right) - size_function(position)]
    if not right:
        return [max(left) + size_function(position)]
    return [rounded_median([max(left), min(right)])]
