"""Smoke tests: imports work, CLI --help works."""

from click.testing import CliRunner

from flowchart_layout.__main__ import main


def test_import():
    import flowchart_layout

    assert flowchart_layout.mermaid_to_svg is not None


def test_cli_help():
    runner = CliRunner()
    result = runner.invoke(main, ["--help"])
    assert result.exit_code == 0
    assert "Mermaid flowchart" in result.output
