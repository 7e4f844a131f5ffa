"""Parser entry point: Mermaid source text to a MermaidGraph."""

from __future__ import annotations

from flowchart_layout.parsers.flowchart import FlowchartParser, MermaidEdge, MermaidGraph, MermaidNode

__all__ = ["FlowchartParser", "MermaidEdge", "MermaidGraph", "MermaidNode", "parse"]


def parse(src: str) -> MermaidGraph:
    """Parse Mermaid flowchart source text."""
    return FlowchartParser().parse(src)
