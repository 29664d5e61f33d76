"""Fake executor for testing."""

from clonegc.core.executor.abc import CleanupExecutor
from clonegc.core.resources import Edge, Resource


class FakeCleanupExecutor(CleanupExecutor):
    """In-memory executor that tracks calls.

    This class has NO public setup methods. All state is captured during execution.
    """

    def __init__(self) -> None:
        self._cut_edges: list[Edge] = []
        self._deleted: list[Resource] = []

    @property
    def cut_edges(self) -> list[Edge]:
        """Edges passed to cut_edge(), in call order."""
        return self._cut_edges

    @property
    def deleted(self) -> list[Resource]:
        """Resources passed to delete_resource(), in call order."""
        return self._deleted

    def cut_edge(self, edge: Edge) -> None:
        self._cut_edges.append(edge)

    def delete_resource(self, resource: Resource) -> None:
        self._deleted.append(resource)
