"""flowchart-layout: Mermaid flowcharts to layered top-to-bottom SVG drawings."""

from flowchart_layout.config import Dimensions, factory_dimensions
from flowchart_layout.errors import LayoutError
from flowchart_layout.layout import Layout, full_layout
from flowchart_layout.service import Mermaid2SvgService, SvgResult
from flowchart_layout.types import ErrorStatus, LayerAlgorithm

__all__ = [
    "Dimensions",
    "ErrorStatus",
    "LayerAlgorithm",
    "Layout",
    "LayoutError",
    "Mermaid2SvgService",
    "SvgResult",
    "factory_dimensions",
    "full_layout",
    "mermaid_to_svg",
]


def mermaid_to_svg(src: str, dimensions: Dimensions | None = None) -> str:
    """Lay out a Mermaid flowchart and render it as SVG.

    Args:
        src: Mermaid flowchart source.
        dimensions: Sizes and spacing; factory defaults when None.

    Returns:
        The SVG document.

    Raises:
        ValueError: If the input cannot be parsed or laid out.
    """
    return Mermaid2SvgService(dimensions or factory_dimensions()).svg(src)
