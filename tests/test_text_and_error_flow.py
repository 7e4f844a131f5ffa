"""Tests for flowchart_layout.ir.text and ir.error_flow — label lines and error status."""

from flowchart_layout.config import factory_dimensions
from flowchart_layout.ir.error_flow import OriginalGraph, find_error_flow
from flowchart_layout.ir.graph import edge_key
from flowchart_layout.ir.text import EdgeText, NodeText
from flowchart_layout.parsers import parse
from flowchart_layout.types import ErrorStatus


def _original(src: str) -> OriginalGraph:
    return find_error_flow(parse(src), factory_dimensions())


def _two_nodes(from_style: str, edge: str) -> str:
    return f'N1(""):::{from_style}\nN2(""):::normal\n{edge}\n'


class TestEdgeText:
    def test_empty(self):
        text = EdgeText.create("")
        assert text.html == ""
        assert text.lines == []
        assert text.num_lines == 0
        assert text.max_line_length == 0

    def test_none(self):
        assert EdgeText.create(None).num_lines == 0

    def test_single_line_trimmed(self):
        text = EdgeText.create("  exception   ")
        assert text.html == "exception"
        assert text.lines == ["exception"]
        assert text.max_line_length == 9

    def test_two_lines_joined_by_br(self):
        text = EdgeText.create("success<br/>  exception  ")
        assert text.num_lines == 2
        assert text.lines == ["success", "exception"]
        assert text.max_line_length == 9
        assert text.html == "success<br/>exception"


class TestNodeText:
    def test_short_text_gets_minimum_box_width(self):
        d = factory_dimensions()
        text = NodeText.create("a", d)
        assert text.outer_width == d.node_box_width

    def test_long_text_widens_box(self):
        d = factory_dimensions()
        text = NodeText.create("x" * 100, d)
        assert text.outer_width > d.node_box_width

    def test_intermediate_has_no_text(self):
        text = NodeText.intermediate()
        assert text.num_lines == 0
        assert text.outer_width == 0


class TestErrorFlow:
    def test_no_error_flow(self):
        g = _original(_two_nodes("normal", "N1 --> |success| N2"))
        assert [n.id for n in g.nodes] == ["N1", "N2"]
        assert [edge_key(e) for e in g.edges] == [("N1", "N2")]
        assert g.get_node_by_id("N1").error_status == ErrorStatus.SUCCESS
        assert g.get_node_by_id("N2").error_status == ErrorStatus.SUCCESS
        assert g.get_edge_by_key(("N1", "N2")).error_status == ErrorStatus.SUCCESS

    def test_edge_without_text(self):
        g = _original(_two_nodes("normal", "N1 --> N2"))
        assert g.get_edge_by_key(("N1", "N2")).error_status == ErrorStatus.SUCCESS

    def test_edge_from_error_node(self):
        g = _original(_two_nodes("errorOutline", "N1 --> |success| N2"))
        assert g.get_node_by_id("N1").error_status == ErrorStatus.ERROR
        assert g.get_node_by_id("N2").error_status == ErrorStatus.SUCCESS
        assert g.get_edge_by_key(("N1", "N2")).error_status == ErrorStatus.ERROR

    def test_error_forward_name(self):
        g = _original(_two_nodes("normal", "N1 --> |exception| N2"))
        edge = g.get_edge_by_key(("N1", "N2"))
        assert edge.error_status == ErrorStatus.ERROR
        assert edge.text.num_lines == 1

    def test_mixed_forward_names(self):
        g = _original(_two_nodes("normal", "N1 --> |exception<br/>success| N2"))
        edge = g.get_edge_by_key(("N1", "N2"))
        assert edge.error_status == ErrorStatus.MIXED
        assert edge.text.num_lines == 2

    def test_multi_line_text_trimmed(self):
        g = _original(_two_nodes("normal", "N1 --> |success<br/>  exception  | N2"))
        edge = g.get_edge_by_key(("N1", "N2"))
        assert edge.text.lines == ["success", "exception"]
        assert edge.text.max_line_length == 9
