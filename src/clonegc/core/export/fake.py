"""Fake exporter for testing."""

from pathlib import Path

from clonegc.core.export.abc import GraphExporter
from clonegc.core.graph import DependencyGraph


class FakeGraphExporter(GraphExporter):
    """Records what would have been exported without touching the filesystem."""

    def __init__(self) -> None:
        self._exports: list[tuple[str, str, list[str], list[str]]] = []

    @property
    def exports(self) -> list[tuple[str, str, list[str], list[str]]]:
        """Exports as (prefix, stage, vertex names, edge strings) tuples.

        This property is for test assertions only.
        """
        return self._exports

    def export(self, graph: DependencyGraph, prefix: str, stage: str) -> Path | None:
        vertices = [resource.name for resource in graph.vertices()]
        edges = [str(edge) for edge in graph.edges()]
        self._exports.append((prefix, stage, vertices, edges))
        return None
