"""Base renderer protocol."""

from __future__ import annotations

from typing import Protocol

from flowchart_layout.layout.types import Layout


class Renderer(Protocol):
    """Protocol that all renderers must implement."""

    def render(self, layout: Layout) -> str:
        """Render a finished layout to an output string."""
        ...
