"""Renderers turning a Layout into output text."""

from flowchart_layout.renderers.base import Renderer
from flowchart_layout.renderers.svg import SvgRenderer, generate_svg

__all__ = ["Renderer", "SvgRenderer", "generate_svg"]
