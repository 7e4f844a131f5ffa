"""Tests for service.py — cached Mermaid to SVG conversion."""

import logging

import pytest

from flowchart_layout import mermaid_to_svg
from flowchart_layout.config import factory_dimensions
from flowchart_layout.errors import LayeringError
from flowchart_layout.service import Mermaid2SvgService, sha256
from flowchart_layout.types import LayerAlgorithm

SIMPLE = 'flowchart\nA("A"):::normal\nB("B"):::normal\nA --> B\n'

DIAMOND = """flowchart
Start("Start"):::normal
Left("Left"):::normal
Right("Right"):::normal
End("End"):::normal
Start --> |success| Left
Start --> |failure| Right
Left --> End
Right --> End
"""


def _service(algorithm: LayerAlgorithm = LayerAlgorithm.LONGEST_PATH) -> Mermaid2SvgService:
    return Mermaid2SvgService(factory_dimensions(), algorithm)


class TestCaching:
    def test_identical_input_calculated_once(self):
        service = _service()
        first = service.svg(SIMPLE)
        second = service.svg(SIMPLE)
        assert first == second
        assert service.num_svg_calculations == 1
        assert service.get_hashes() == [sha256(SIMPLE)]

    def test_different_inputs_calculated_separately(self):
        service = _service()
        service.svg(SIMPLE)
        service.svg(DIAMOND)
        assert service.num_svg_calculations == 2
        assert service.get_hashes() == sorted([sha256(SIMPLE), sha256(DIAMOND)])

    def test_statistics_share_the_cache(self):
        service = _service()
        service.svg(DIAMOND)
        service.statistics(DIAMOND)
        assert service.num_svg_calculations == 1

    def test_layout_is_not_cached(self):
        service = _service()
        layout = service.layout(SIMPLE)
        assert [n.id for n in layout.nodes] == ["A", "B"]
        assert service.num_svg_calculations == 0
        assert service.get_hashes() == []

    def test_failure_is_not_cached(self):
        service = _service()
        with pytest.raises(LayeringError):
            service.svg('flowchart\nA("A"):::normal\nB("B"):::normal\nA --> B\nB --> A\n')
        assert service.get_hashes() == []

    def test_cache_logging(self, caplog):
        service = _service()
        with caplog.at_level(logging.DEBUG, logger="flowchart_layout.service"):
            service.svg(SIMPLE)
            service.svg(SIMPLE)
        assert "cache miss" in caplog.text
        assert "cache hit" in caplog.text


class TestStatistics:
    def test_counts(self):
        result = _service().statistics(DIAMOND)
        assert result.num_nodes == 4
        assert result.num_edges == 4
        assert result.svg.startswith("<svg")

    def test_node_visits_per_algorithm(self):
        longest = _service(LayerAlgorithm.LONGEST_PATH).statistics(DIAMOND)
        first = _service(LayerAlgorithm.FIRST_OCCURRING_PATH).statistics(DIAMOND)
        # End is walked once per path from Start, and queued once per predecessor.
        assert longest.num_node_visits_during_layer_calculation == 5
        assert first.num_node_visits_during_layer_calculation == 5


def test_sha256_is_hex_digest():
    assert sha256("") == "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_mermaid_to_svg_uses_factory_dimensions():
    svg = mermaid_to_svg(SIMPLE)
    assert 'class="frank-flowchart-node-A"' in svg
    assert 'class="frank-flowchart-edge-A-B"' in svg
