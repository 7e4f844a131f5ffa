"""SVG renderer.

Node and label text is inserted as-is: it is HTML already, for example
``first<br/>second``.
"""

from __future__ import annotations

from flowchart_layout.layout.types import EdgeLabel, Layout, LayoutLineSegment, PlacedNode
from flowchart_layout.types import ErrorStatus

NODE_BORDER_WIDTH = 4
NODE_FONT_SIZE = 16
LINK_FONT_SIZE = 28

_STYLE = """      .rectangle {{
        fill: transparent;
        stroke: #8bc34a;
        stroke-width: 4;
      }}

      .rectangle.errorOutline {{
        stroke: #ec4758;
      }}

      .line {{
        stroke: #8bc34a;
        stroke-width: 3;
      }}

      .line.error {{
        stroke: #ec4758;
      }}

      .line.mixed {{
        stroke: #FFDE59;
      }}

      .rect-text {{
        font-family: "Inter", "trebuchet ms", serif;
      }}

      .label-text-wrapper {{
        overflow: hidden;
        text-align: center;
        white-space: nowrap;
        text-overflow: ellipsis;
        font-family: "Inter", "trebuchet ms", serif;
        font-size: {font_size}px;
      }}

      .label-text-box {{
        position: relative;
        display: flex;
        flex-direction: column;
        justify-content: center;
        width: 100%;
        height: 100%;
      }}
"""

_ARROW_MARKER = """    <marker
      id="arrow"
      viewBox="0 0 4 4"
      refX="4"
      refY="2"
      markerWidth="4"
      markerHeight="4"
      orient="auto-start-reverse">
      <path d="M 0 0 L 4 2 L 0 4 z" />
    </marker>
"""


class SvgRenderer:
    """Renders a Layout as a standalone SVG document."""

    def __init__(self, edge_label_font_size: int) -> None:
        self.edge_label_font_size = edge_label_font_size

    def render(self, layout: Layout) -> str:
        parts = [
            f'<svg class="svg" xmlns="http://www.w3.org/2000/svg"\n  width="{layout.width}" height="{layout.height}" >\n',
            self._render_defs(),
            *(self._render_node(n) for n in layout.nodes),
            *(self._render_segment(s) for s in layout.layout_line_segments),
            self._render_labels(layout.edge_labels),
            "</svg>",
        ]
        return "".join(parts)

    def _render_defs(self) -> str:
        return (
            "  <defs>\n    <style>\n"
            + _STYLE.format(font_size=self.edge_label_font_size)
            + "    </style>\n"
            + _ARROW_MARKER
            + "  </defs>\n"
        )

    def _render_node(self, node: PlacedNode) -> str:
        text = node.text.html
        font_size = LINK_FONT_SIZE if text.startswith("<a") else NODE_FONT_SIZE
        inner_height = node.vertical_box.size - 2 * NODE_BORDER_WIDTH
        text_y = inner_height / 2 + font_size / 2
        text_length = node.horizontal_box.size - 2 * NODE_BORDER_WIDTH
        rect_class = "rectangle errorOutline" if node.error_status == ErrorStatus.ERROR else "rectangle"
        return (
            f'  <g class="frank-flowchart-node-{node.id}" '
            f'transform="translate({node.horizontal_box.min_value}, {node.vertical_box.min_value})">\n'
            f'    <rect class="{rect_class}"\n'
            f'      width="{node.horizontal_box.size}"\n'
            f'      height="{node.vertical_box.size}"\n'
            f'      rx="5">\n'
            f"    </rect>\n"
            f'    <text x="{NODE_BORDER_WIDTH}" y="{_number(text_y)}" textLength="{text_length}" '
            f'class="rect-text">{text}</text>\n'
            f"  </g>\n"
        )

    def _render_segment(self, segment: LayoutLineSegment) -> str:
        start, end = segment.line.start_point, segment.line.end_point
        marker = 'marker-end="url(#arrow)"' if segment.is_last_line_segment else ""
        return (
            f'  <g class="frank-flowchart-edge-{segment.key}">\n'
            f"    <polyline {_line_class(segment.error_status)} "
            f'points="{_number(start.x)},{_number(start.y)} {_number(end.x)},{_number(end.y)}" {marker}/>\n'
            f"  </g>\n"
        )

    def _render_labels(self, labels: list[EdgeLabel]) -> str:
        rendered = "".join(self._render_label(label) for label in labels)
        return f'  <g text-anchor="middle" dominant-baseline="middle">\n{rendered}  </g>\n'

    @staticmethod
    def _render_label(label: EdgeLabel) -> str:
        h, v = label.horizontal_box, label.vertical_box
        return (
            f'    <g transform="translate({h.min_value}, {v.min_value})">\n'
            f'      <foreignObject style="width:{h.size}px; height:{v.size}px">\n'
            f'        <div xmlns="http://www.w3.org/1999/xhtml" class="label-text-wrapper">\n'
            f'          <div class="label-text-box" >\n'
            f"            {label.text.html}\n"
            f"          </div>\n"
            f"        </div>\n"
            f"      </foreignObject>\n"
            f"    </g>\n"
        )


def _line_class(status: ErrorStatus) -> str:
    if status == ErrorStatus.ERROR:
        return 'class="line error"'
    if status == ErrorStatus.SUCCESS:
        return 'class="line"'
    return 'class="line mixed"'


def _number(value: float) -> str:
    # Integral floats print without a trailing ".0".
    return str(int(value)) if float(value).is_integer() else str(value)


def generate_svg(layout: Layout, edge_label_font_size: int) -> str:
    return SvgRenderer(edge_label_font_size).render(layout)
