"""Original graph with error-flow status.

Converts the parsed Mermaid graph into the graph that is laid out. Each node
and edge gets an ``ErrorStatus`` that renderers use to color the drawing:
nodes styled ``errorOutline`` are errors, and an edge is an error when it
leaves an error node or when all of its label lines name an error forward.
"""

from __future__ import annotations

from dataclasses import dataclass

from flowchart_layout.config import Dimensions
from flowchart_layout.ir.graph import Graph
from flowchart_layout.ir.text import EdgeText, NodeText
from flowchart_layout.parsers.flowchart import MermaidGraph
from flowchart_layout.types import ErrorStatus

NODE_ERROR_CLASS = "errorOutline"

ERROR_FORWARD_NAMES: frozenset[str] = frozenset(
    {
        "exception",
        "failure",
        "fail",
        "timeout",
        "illegalResult",
        "presumedTimeout",
        "interrupt",
        "parserError",
        "outputParserError",
        "outputFailure",
    }
)


@dataclass(frozen=True)
class OriginalNode:
    id: str
    text: NodeText
    error_status: ErrorStatus = ErrorStatus.SUCCESS


@dataclass(frozen=True)
class OriginalEdge:
    from_id: str
    to_id: str
    text: EdgeText
    error_status: ErrorStatus = ErrorStatus.SUCCESS


OriginalGraph = Graph[OriginalNode, OriginalEdge]


def find_error_flow(mermaid: MermaidGraph, dimensions: Dimensions) -> OriginalGraph:
    """Build the original graph from a parsed Mermaid graph."""
    result: OriginalGraph = Graph()
    for n in mermaid.nodes:
        status = ErrorStatus.ERROR if n.style == NODE_ERROR_CLASS else ErrorStatus.SUCCESS
        result.add_node(OriginalNode(id=n.id, text=NodeText.create(n.text, dimensions), error_status=status))
    for e in mermaid.edges:
        from_node = result.get_node_by_id(e.from_id)
        result.add_edge(
            OriginalEdge(
                from_id=e.from_id,
                to_id=e.to_id,
                text=e.text,
                error_status=_edge_status(from_node, e.text),
            )
        )
    return result


def _edge_status(from_node: OriginalNode, text: EdgeText) -> ErrorStatus:
    if from_node.error_status == ErrorStatus.ERROR:
        return ErrorStatus.ERROR
    if text.num_lines == 0:
        return ErrorStatus.SUCCESS
    if all(line in ERROR_FORWARD_NAMES for line in text.lines):
        return ErrorStatus.ERROR
    if not any(line in ERROR_FORWARD_NAMES for line in text.lines):
        return ErrorStatus.SUCCESS
    return ErrorStatus.MIXED
