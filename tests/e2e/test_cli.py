"""End-to-end CLI tests: input files, stdin, options and error exits."""

import json

from click.testing import CliRunner

from flowchart_layout.__main__ import main

SRC = """flowchart
Start("Start"):::normal
Work("Work"):::normal
End("End"):::errorOutline
Start --> |success| Work
Work --> End
Start --> |exception| End
"""


def _write(tmp_path, text: str = SRC):
    path = tmp_path / "chart.mmd"
    path.write_text(text)
    return str(path)


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Mermaid flowchart" in result.output
    assert "--layering" in result.output


def test_svg_from_file(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, [_write(tmp_path)])
    assert result.exit_code == 0
    assert result.output.startswith("<svg")
    assert 'class="frank-flowchart-node-Work"' in result.output
    assert 'class="frank-flowchart-edge-Start-End"' in result.output


def test_svg_from_stdin():
    runner = CliRunner()
    result = runner.invoke(main, [], input=SRC)
    assert result.exit_code == 0
    assert result.output.startswith("<svg")


def test_stats(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, [_write(tmp_path), "--stats"])
    assert result.exit_code == 0
    stats = json.loads(result.output)
    assert stats["numNodes"] == 3
    assert stats["numEdges"] == 3
    assert stats["numNodeVisitsDuringLayerCalculation"] > 0


def test_stats_with_first_occurring_layering(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, [_write(tmp_path), "--stats", "-l", "first"])
    assert result.exit_code == 0
    assert json.loads(result.output)["numNodeVisitsDuringLayerCalculation"] == 4


def test_output_file(tmp_path):
    out = tmp_path / "chart.svg"
    runner = CliRunner()
    result = runner.invoke(main, [_write(tmp_path), "-o", str(out)])
    assert result.exit_code == 0
    assert result.output == ""
    assert out.read_text().startswith("<svg")


def test_layer_distance_changes_height(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, [_write(tmp_path), "--layer-distance", "200"])
    assert result.exit_code == 0
    assert 'height="600"' in result.output


def test_unknown_node_fails(tmp_path):
    runner = CliRunner()
    result = runner.invoke(main, [_write(tmp_path, 'flowchart\nA("A"):::normal\nA --> B\n')])
    assert result.exit_code == 1
    assert "error: Intended edge references unknown to node [B]" in result.output


def test_cycle_without_root_fails(tmp_path):
    runner = CliRunner()
    src = 'flowchart\nA("A"):::normal\nB("B"):::normal\nA --> B\nB --> A\n'
    result = runner.invoke(main, [_write(tmp_path, src)])
    assert result.exit_code == 1
    assert "error: Not all nodes could be grouped into horizontal layers: A, B" in result.output


def test_missing_input_file():
    runner = CliRunner()
    result = runner.invoke(main, ["does-not-exist.mmd"])
    assert result.exit_code != 0
