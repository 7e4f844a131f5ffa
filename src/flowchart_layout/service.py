"""Mermaid text to SVG, with a cache keyed by the hash of the input."""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass

from flowchart_layout.config import Dimensions
from flowchart_layout.ir.error_flow import find_error_flow
from flowchart_layout.layout.engine import full_layout
from flowchart_layout.layout.types import Layout
from flowchart_layout.parsers import parse
from flowchart_layout.renderers.svg import generate_svg
from flowchart_layout.types import LayerAlgorithm

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SvgResult:
    svg: str
    num_nodes: int
    num_edges: int
    num_node_visits_during_layer_calculation: int


def sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class Mermaid2SvgService:
    """Caller-owned converter. Identical inputs are calculated once."""

    def __init__(self, dimensions: Dimensions, layer_algorithm: LayerAlgorithm | None = None) -> None:
        self.dimensions = dimensions
        self.layer_algorithm = layer_algorithm or LayerAlgorithm.default()
        self._cache: dict[str, SvgResult] = {}
        self._num_svg_calculations = 0

    @property
    def num_svg_calculations(self) -> int:
        return self._num_svg_calculations

    def get_hashes(self) -> list[str]:
        return sorted(self._cache)

    def svg(self, mermaid: str) -> str:
        return self.statistics(mermaid).svg

    def statistics(self, mermaid: str) -> SvgResult:
        key = sha256(mermaid)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("cache hit for %s", key)
            return cached
        logger.debug("cache miss for %s", key)
        result = self._calculate(mermaid)
        self._cache[key] = result
        return result

    def layout(self, mermaid: str) -> Layout:
        """Lay out without rendering and without caching."""
        layout, _, _ = self._layout_with_counts(mermaid)
        return layout

    def _calculate(self, mermaid: str) -> SvgResult:
        self._num_svg_calculations += 1
        layout, num_visits, (num_nodes, num_edges) = self._layout_with_counts(mermaid)
        result = SvgResult(
            svg=generate_svg(layout, self.dimensions.edge_label_font_size),
            num_nodes=num_nodes,
            num_edges=num_edges,
            num_node_visits_during_layer_calculation=num_visits,
        )
        logger.debug(
            "calculated svg: %d nodes, %d edges, %d node visits during layer calculation",
            result.num_nodes,
            result.num_edges,
            result.num_node_visits_during_layer_calculation,
        )
        return result

    def _layout_with_counts(self, mermaid: str) -> tuple[Layout, int, tuple[int, int]]:
        original = find_error_flow(parse(mermaid), self.dimensions)
        visits = 0

        def count_visit() -> None:
            nonlocal visits
            visits += 1

        layout = full_layout(original, self.dimensions, self.layer_algorithm, count_visit)
        return layout, visits, (original.node_count(), original.edge_count())
