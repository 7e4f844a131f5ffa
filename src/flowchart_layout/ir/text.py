"""Text payloads of nodes and edges.

Labels arrive as HTML fragments in which ``<br/>`` separates lines. Layout
needs only the line structure and an estimate of the rendered size.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from flowchart_layout.config import Dimensions, estimate_character_width

LINE_SEPARATOR = "<br/>"


def _split_lines(html: str | None) -> list[str]:
    if not html:
        return []
    return [line.strip() for line in html.split(LINE_SEPARATOR)]


@dataclass(frozen=True)
class EdgeText:
    html: str = ""
    lines: list[str] = field(default_factory=list)

    @classmethod
    def create(cls, html: str | None = None) -> EdgeText:
        lines = _split_lines(html)
        return cls(html=LINE_SEPARATOR.join(lines), lines=lines)

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    @property
    def max_line_length(self) -> int:
        return max((len(line) for line in self.lines), default=0)


@dataclass(frozen=True)
class NodeText:
    html: str = ""
    lines: list[str] = field(default_factory=list)
    outer_width: int = 0

    @classmethod
    def create(cls, html: str | None, dimensions: Dimensions) -> NodeText:
        lines = _split_lines(html)
        max_len = max((len(line) for line in lines), default=0)
        char_width = estimate_character_width(dimensions.node_text_font_size)
        text_width = max_len * char_width + 2 * dimensions.node_text_border
        return cls(
            html=LINE_SEPARATOR.join(lines),
            lines=lines,
            outer_width=max(text_width, dimensions.node_box_width),
        )

    @classmethod
    def intermediate(cls) -> NodeText:
        return cls()

    @property
    def num_lines(self) -> int:
        return len(self.lines)

    @property
    def max_line_length(self) -> int:
        return max((len(line) for line in self.lines), default=0)
