"""Exception hierarchy for the layout pipeline.

Every inconsistency detected while laying out a graph is fatal for that
request. All errors derive from ``ValueError`` so that callers which already
treat bad input as a ``ValueError`` (the CLI does) handle them uniformly.
"""

from __future__ import annotations


class LayoutError(ValueError):
    """Base class for all layout failures."""


class GraphStructureError(LayoutError):
    """Duplicate node id, duplicate edge, or edge referencing an unknown node."""


class LayeringError(LayoutError):
    """One or more nodes could not be assigned to a layer."""


class SequenceError(LayoutError):
    """A layer was given a new node sequence that changes its membership."""


class AreaGroupError(LayoutError):
    """Horizontal conflict resolution produced or met an impossible state."""


class ConnectorError(LayoutError):
    """A connector has no counterpart on the other side of its edge."""


class GeometryError(LayoutError):
    """A line is degenerate or cannot be parameterized as requested."""
