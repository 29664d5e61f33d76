"""Abstract interface for applying a cleanup plan to storage."""

from abc import ABC, abstractmethod

from clonegc.core.resources import Edge, Resource


class CleanupExecutor(ABC):
    """Receives the resources a run found safe to delete and the edges it cut.

    Calls arrive in the order the plan must be applied: edge cuts first
    (each one a flatten of the child), then deletions leaf-first.
    """

    @abstractmethod
    def cut_edge(self, edge: Edge) -> None:
        """Detach edge.target from edge.source."""
        ...

    @abstractmethod
    def delete_resource(self, resource: Resource) -> None:
        """Remove a volume or snapshot that nothing depends on anymore."""
        ...
