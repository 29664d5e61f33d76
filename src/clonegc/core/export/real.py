"""DOT file exporter."""

import logging
from pathlib import Path

from clonegc.core.export.abc import GraphExporter
from clonegc.core.export.dot import render_dot
from clonegc.core.graph import DependencyGraph

logger = logging.getLogger(__name__)


class DotFileExporter(GraphExporter):
    """Writes `<directory>/<prefix>-<stage>.gv` files."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory

    def export(self, graph: DependencyGraph, prefix: str, stage: str) -> Path | None:
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.directory / f"{prefix}-{stage}.gv"
        path.write_text(render_dot(graph), encoding="utf-8")
        logger.info("wrote %s graph to %s", stage, path)
        return path
