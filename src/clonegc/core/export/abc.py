"""Abstract interface for forest visualization exports."""

from abc import ABC, abstractmethod
from pathlib import Path

from clonegc.core.graph import DependencyGraph


class GraphExporter(ABC):
    """Dumps the forest so before/after states of a run can be compared."""

    @abstractmethod
    def export(self, graph: DependencyGraph, prefix: str, stage: str) -> Path | None:
        """Export the full graph.

        Args:
            graph: Graph to export
            prefix: Run-scoped identifier so runs never overwrite each other
            stage: Point in the run, e.g. "before" or "after"

        Returns:
            Path of the written file, or None if nothing was written
        """
        ...
