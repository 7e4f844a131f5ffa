"""Flowchart parser for the Mermaid subset emitted by configuration tools.

Recognized lines, one statement per line:

    id("text"):::style          node declaration
    a --> b                     edge
    a --> |label| b             edge with label

The ``flowchart`` header, ``classDef`` and ``linkStyle`` lines and anything
else are ignored. Nodes must be declared before edges refer to them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from flowchart_layout.ir.graph import Graph
from flowchart_layout.ir.text import EdgeText

_NEWLINE_RE = re.compile(r"\r?\n")
_NODE_LINE_RE = re.compile(r"^[a-zA-Z0-9_-]+\(")
_EDGE_LINE_RE = re.compile(r"^[a-zA-Z0-9_-]+ ")
_HEADER_RE = re.compile(r"^(flowchart|graph)(\s|$)")
_IGNORED_PREFIXES = ("classDef", "linkStyle")


@dataclass(frozen=True)
class MermaidNode:
    id: str
    text: str
    style: str


@dataclass(frozen=True)
class MermaidEdge:
    from_id: str
    to_id: str
    text: EdgeText


MermaidGraph = Graph[MermaidNode, MermaidEdge]


class FlowchartParser:
    """Line-based parser producing a MermaidGraph."""

    def parse(self, src: str) -> MermaidGraph:
        result: MermaidGraph = Graph()
        lines = [line.strip() for line in _NEWLINE_RE.split(src)]
        for line in lines:
            if _NODE_LINE_RE.match(line):
                result.add_node(_parse_node(line))
        for line in lines:
            if line.startswith(_IGNORED_PREFIXES) or _HEADER_RE.match(line) or _NODE_LINE_RE.match(line):
                continue
            if _EDGE_LINE_RE.match(line):
                result.add_edge(_parse_edge(line, result))
        return result


def _parse_node(line: str) -> MermaidNode:
    open_paren = line.index("(")
    close_paren = line.rindex(")")
    # Text is quoted inside the parentheses: id("text")
    text = line[open_paren + 2 : close_paren - 1]
    style_start = line.rfind(":::")
    style = line[style_start + 3 :] if style_start >= 0 else ""
    return MermaidNode(id=line[:open_paren], text=text, style=style)


def _parse_edge(line: str, graph: MermaidGraph) -> MermaidEdge:
    from_id = line[: line.index(" ")]
    to_id = line[line.rindex(" ") + 1 :]
    first_pipe = line.find("|")
    raw_text = None if first_pipe < 0 else line[first_pipe + 1 : line.rindex("|")]
    if not graph.has_node(from_id):
        raise ValueError(f"Intended edge references unknown from node [{from_id}]")
    if not graph.has_node(to_id):
        raise ValueError(f"Intended edge references unknown to node [{to_id}]")
    return MermaidEdge(from_id=from_id, to_id=to_id, text=EdgeText.create(raw_text))
