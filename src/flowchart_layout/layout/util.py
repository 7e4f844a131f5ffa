"""Small numeric helpers shared by the layout phases."""

from __future__ import annotations

import math
from collections.abc import Callable, Iterator
from typing import TypeVar

from flowchart_layout.layout.geometry import Interval

T = TypeVar("T")


def get_range(start: int, end_not_included: int) -> list[int]:
    if end_not_included < start:
        raise ValueError(f"Cannot generate range if end = {end_not_included} < start = {start}")
    return list(range(start, end_not_included))


def js_round(value: float) -> int:
    """Round half up, so -2.5 becomes -2 and 2.5 becomes 3."""
    return math.floor(value + 0.5)


def rounded_median(values: list[int]) -> int:
    if not values:
        raise ValueError("Cannot calculate median of empty list")
    ordered = sorted(values)
    if len(ordered) % 2 == 0:
        upper = len(ordered) // 2
        return math.floor((ordered[upper - 1] + ordered[upper]) / 2)
    return ordered[(len(ordered) - 1) // 2]


def sorted_uniq_numbers(values: list[int]) -> list[int]:
    return sorted(set(values))


def numbers_around_zero() -> Iterator[int]:
    """Yield 0, -1, 1, -2, 2, ... without end."""
    yield 0
    n = 1
    while True:
        yield -n
        yield n
        n += 1


def split_range(num_items: int, joined_with_next: Callable[[int], bool]) -> list[Interval]:
    """Split 0..num_items-1 into runs where each item is joined with the next."""
    result: list[Interval] = []
    start = 0
    for index in range(num_items):
        if index == num_items - 1 or not joined_with_next(index):
            result.append(Interval.from_min_max(start, index))
            start = index + 1
    return result


def split_array(items: list[T], joined_with_next: Callable[[T, T], bool]) -> list[list[T]]:
    """Split items into runs where each item is joined with the next."""
    result: list[list[T]] = []
    for item in items:
        if result and joined_with_next(result[-1][-1], item):
            result[-1].append(item)
        else:
            result.append([item])
    return result
