"""Intermediate representation: the generic graph store and text payloads."""

from flowchart_layout.ir.graph import Graph, edge_key, key_for
from flowchart_layout.ir.text import EdgeText, NodeText

__all__ = [
    "EdgeText",
    "Graph",
    "NodeText",
    "edge_key",
    "key_for",
]
