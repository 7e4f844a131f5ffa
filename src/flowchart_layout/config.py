"""Centralized configuration for flowchart-layout."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass


@dataclass(frozen=True)
class Dimensions:
    """Sizes and spacing used by the layout pipeline, in pixels."""

    layer_height: int = 50
    layer_distance: int = 120
    node_box_height: int = 50
    node_box_width: int = 160
    intermediate_width: int = 60
    horizontal_node_border: int = 8
    node_text_font_size: int = 16
    node_text_border: int = 4
    box_connector_area_perc: int = 50
    intermediate_layer_passed_by_vertical_line: bool = False
    box_cross_protection_margin: int = 10
    line_transgression_perc: int = 100
    edge_label_font_size: int = 10
    preferred_vert_distance_from_origin: int = 30
    strictly_keep_label_out_of_box: bool = False

    def replace(self, **changes: object) -> Dimensions:
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **changes)


def factory_dimensions() -> Dimensions:
    return Dimensions()


def estimate_character_width(font_size: int) -> int:
    """Average character width for a proportional font of the given size."""
    return max(1, int(0.6 * font_size + 0.5))


def estimate_label_line_height(font_size: int) -> int:
    # The extra pixels act as the margin between the lines of a label.
    return font_size + 3
