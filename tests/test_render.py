"""Tests for renderers/svg.py — SVG document structure and styling classes."""

from flowchart_layout import mermaid_to_svg
from flowchart_layout.config import factory_dimensions
from flowchart_layout.ir.text import EdgeText, NodeText
from flowchart_layout.layout.geometry import Interval, Line, Point
from flowchart_layout.layout.types import EdgeLabel, Layout, LayoutLineSegment, PlacedNode
from flowchart_layout.renderers import Renderer, SvgRenderer, generate_svg
from flowchart_layout.types import ErrorStatus


def _node(node_id: str, status: ErrorStatus = ErrorStatus.SUCCESS, html: str = "Start") -> PlacedNode:
    return PlacedNode(
        id=node_id,
        text=NodeText(html=html, lines=[html], outer_width=160),
        error_status=status,
        layer=0,
        horizontal_box=Interval.from_min_size(10, 160),
        vertical_box=Interval.from_min_size(0, 50),
    )


def _segment(key: str, status: ErrorStatus = ErrorStatus.SUCCESS, last: bool = True) -> LayoutLineSegment:
    return LayoutLineSegment(
        key=key,
        line=Line(Point(90, 49), Point(90.5, 120)),
        min_layer_number=0,
        max_layer_number=1,
        error_status=status,
        is_last_line_segment=last,
    )


def _layout(**kwargs) -> Layout:
    return Layout(width=200, height=240, **kwargs)


class TestDocument:
    def test_svg_root_with_size(self):
        svg = generate_svg(_layout(), 10)
        assert svg.startswith('<svg class="svg" xmlns="http://www.w3.org/2000/svg"')
        assert 'width="200" height="240"' in svg
        assert svg.endswith("</svg>")

    def test_style_uses_label_font_size(self):
        assert "font-size: 13px;" in generate_svg(_layout(), 13)

    def test_arrow_marker_defined(self):
        svg = generate_svg(_layout(), 10)
        assert '<marker\n      id="arrow"' in svg

    def test_renderer_protocol(self):
        renderer: Renderer = SvgRenderer(10)
        assert renderer.render(_layout()).startswith("<svg")


class TestNodes:
    def test_node_group_and_rectangle(self):
        svg = generate_svg(_layout(nodes=[_node("Start")]), 10)
        assert '<g class="frank-flowchart-node-Start" transform="translate(10, 0)">' in svg
        assert '<rect class="rectangle"' in svg
        assert 'width="160"' in svg
        assert 'height="50"' in svg
        assert ">Start</text>" in svg

    def test_error_node_outline(self):
        svg = generate_svg(_layout(nodes=[_node("Bad", ErrorStatus.ERROR)]), 10)
        assert '<rect class="rectangle errorOutline"' in svg

    def test_html_text_kept_as_is(self):
        svg = generate_svg(_layout(nodes=[_node("N", html="first<br/>second")]), 10)
        assert ">first<br/>second</text>" in svg

    def test_link_text_uses_larger_font(self):
        svg = generate_svg(_layout(nodes=[_node("N", html='<a href="x">x</a>')]), 10)
        # Inner height 42, so the text baseline sits at 21 + 14.
        assert 'y="35"' in svg


class TestSegments:
    def test_last_segment_has_arrow(self):
        svg = generate_svg(_layout(layout_line_segments=[_segment("A-B")]), 10)
        assert '<g class="frank-flowchart-edge-A-B">' in svg
        assert 'points="90,49 90.5,120"' in svg
        assert 'marker-end="url(#arrow)"' in svg

    def test_inner_segment_has_no_arrow(self):
        svg = generate_svg(_layout(layout_line_segments=[_segment("A-intermediate1", last=False)]), 10)
        assert 'marker-end="url(#arrow)"' not in svg

    def test_line_classes_follow_error_status(self):
        segments = [
            _segment("A-B"),
            _segment("A-C", ErrorStatus.ERROR),
            _segment("A-D", ErrorStatus.MIXED),
        ]
        svg = generate_svg(_layout(layout_line_segments=segments), 10)
        assert 'class="line" ' in svg
        assert 'class="line error"' in svg
        assert 'class="line mixed"' in svg


class TestLabels:
    def test_label_in_foreign_object(self):
        label = EdgeLabel(
            horizontal_box=Interval.from_min_size(70, 42),
            vertical_box=Interval.from_min_size(73, 13),
            text=EdgeText.create("success"),
        )
        svg = generate_svg(_layout(edge_labels=[label]), 10)
        assert '<g transform="translate(70, 73)">' in svg
        assert '<foreignObject style="width:42px; height:13px">' in svg
        assert "success" in svg

    def test_labels_group_present_without_labels(self):
        assert '<g text-anchor="middle" dominant-baseline="middle">' in generate_svg(_layout(), 10)


class TestFullPipeline:
    def test_rendered_flowchart(self):
        svg = mermaid_to_svg(
            'flowchart\nStart("Start"):::normal\nEnd("End"):::errorOutline\nStart --> |exception| End\n',
            factory_dimensions(),
        )
        assert 'class="frank-flowchart-node-Start"' in svg
        assert 'class="frank-flowchart-node-End"' in svg
        assert 'class="frank-flowchart-edge-Start-End"' in svg
        assert "rectangle errorOutline" in svg
        assert 'class="line error"' in svg
        assert "exception" in svg
