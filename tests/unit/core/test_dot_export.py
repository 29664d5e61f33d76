"""Tests for DOT rendering and the DOT file exporter."""

from datetime import UTC, datetime, timedelta, timezone
from pathlib import Path

from clonegc.core.export import DotFileExporter, render_dot, run_prefix
from clonegc.core.graph import DependencyGraph
from clonegc.core.resources import Resource, ResourceKind
from tests.test_utils.builders import build, chain_storage


def test_run_prefix_strips_separators() -> None:
    """Test that the prefix is the RFC3339 UTC time without '-' and ':'."""
    now = datetime(2025, 3, 4, 5, 6, 7, tzinfo=UTC)

    assert run_prefix(now) == "graph-20250304T050607Z"


def test_run_prefix_converts_to_utc() -> None:
    """Test that non-UTC instants are normalized before formatting."""
    now = datetime(2025, 3, 4, 7, 6, 7, tzinfo=timezone(timedelta(hours=2)))

    assert run_prefix(now) == "graph-20250304T050607Z"


def test_render_dot_styles_alive_and_dead() -> None:
    """Test that alive and dead vertices use different colorschemes."""
    graph = DependencyGraph()
    graph.add_vertex(Resource(name="base", kind=ResourceKind.VOLUME, alive=True))
    graph.add_vertex(Resource(name="base@gold", kind=ResourceKind.SNAPSHOT, alive=False))
    graph.add_edge("base", "base@gold")

    dot = render_dot(graph)

    assert dot.startswith("strict digraph {\n")
    assert dot.endswith("}\n")
    assert '"base" [colorscheme="greens3", style="filled", color="2", fillcolor="1"];' in dot
    assert (
        '"base@gold" [colorscheme="reds3", style="filled", color="2", fillcolor="1", '
        'shape="box"];' in dot
    )
    assert '"base" -> "base@gold";' in dot


def test_render_dot_escapes_quotes() -> None:
    """Test that names with quotes stay valid DOT identifiers."""
    graph = DependencyGraph()
    graph.add_vertex(Resource(name='odd"name', kind=ResourceKind.VOLUME, alive=True))

    dot = render_dot(graph)

    assert '"odd\\"name"' in dot


def test_render_dot_lists_every_edge() -> None:
    """Test that every edge of the forest is exported."""
    forest = build(chain_storage(3))

    dot = render_dot(forest.graph)

    assert dot.count("->") == len(forest.graph.edges()) == 4


def test_dot_file_exporter_writes_stage_file(tmp_path: Path) -> None:
    """Test that the exporter writes <dir>/<prefix>-<stage>.gv, creating the directory."""
    forest = build(chain_storage(2))
    exporter = DotFileExporter(tmp_path / "graphs")

    path = exporter.export(forest.graph, "graph-20250101T000000Z", "before")

    assert path == tmp_path / "graphs" / "graph-20250101T000000Z-before.gv"
    assert path.read_text(encoding="utf-8") == render_dot(forest.graph)
