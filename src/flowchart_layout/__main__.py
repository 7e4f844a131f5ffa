"""CLI entry point for flowchart-layout."""

import dataclasses
import json
import logging
import sys

import click

from flowchart_layout.config import factory_dimensions
from flowchart_layout.service import Mermaid2SvgService
from flowchart_layout.types import LayerAlgorithm

logger = logging.getLogger(__name__)

_LAYERING_MAP: dict[str, LayerAlgorithm] = {
    "longest": LayerAlgorithm.LONGEST_PATH,
    "first": LayerAlgorithm.FIRST_OCCURRING_PATH,
}


@click.command()
@click.argument("input", required=False, type=click.Path(exists=True))
@click.option("--output", "-o", "output", type=str, default=None, help="Write output to this file instead of stdout")
@click.option(
    "--layering",
    "-l",
    "layering",
    type=click.Choice(sorted(_LAYERING_MAP)),
    default="longest",
    show_default=True,
    help="Layer assignment algorithm",
)
@click.option("--layer-distance", "layer_distance", type=int, default=None, help="Vertical distance between layers")
@click.option("--edge-label-font-size", "edge_label_font_size", type=int, default=None, help="Edge label font size")
@click.option("--strict-labels", "strict_labels", is_flag=True, help="Keep edge labels out of the origin box")
@click.option("--stats", "stats", is_flag=True, help="Print layout statistics as JSON instead of the SVG")
@click.option("--verbose", "-v", "verbose", is_flag=True, help="Log debug output to stderr")
def main(
    input: str | None,
    output: str | None,
    layering: str,
    layer_distance: int | None,
    edge_label_font_size: int | None,
    strict_labels: bool,
    stats: bool,
    verbose: bool,
) -> None:
    """Mermaid flowchart to layered SVG drawing."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if input:
        try:
            with open(input) as f:
                text = f.read()
        except OSError as e:
            click.echo(f"error: cannot read '{input}': {e}", err=True)
            sys.exit(1)
    else:
        text = sys.stdin.read()

    overrides: dict[str, object] = {}
    if layer_distance is not None:
        overrides["layer_distance"] = layer_distance
    if edge_label_font_size is not None:
        overrides["edge_label_font_size"] = edge_label_font_size
    if strict_labels:
        overrides["strictly_keep_label_out_of_box"] = True
    dimensions = factory_dimensions().replace(**overrides)
    logger.debug("dimensions: %s", dataclasses.asdict(dimensions))

    service = Mermaid2SvgService(dimensions, _LAYERING_MAP[layering])
    try:
        result = service.statistics(text)
    except ValueError as e:
        click.echo(f"error: {e}", err=True)
        sys.exit(1)

    if stats:
        rendered = json.dumps(
            {
                "numNodes": result.num_nodes,
                "numEdges": result.num_edges,
                "numNodeVisitsDuringLayerCalculation": result.num_node_visits_during_layer_calculation,
            },
            indent=2,
        )
        rendered += "\n"
    else:
        rendered = result.svg

    if output:
        try:
            with open(output, "w") as f:
                f.write(rendered)
        except OSError as e:
            click.echo(f"error: cannot write '{output}': {e}", err=True)
            sys.exit(1)
    else:
        click.echo(rendered, nl=False)


if __name__ == "__main__":
    main()
