"""Abstract interface for the liveness oracle."""

from abc import ABC, abstractmethod

from clonegc.core.resources import ResourceKind


class LivenessOracle(ABC):
    """External authority deciding whether a resource is still needed.

    The predicate must be pure: the forest builder asks exactly once per
    resource and never re-asks during pruning.
    """

    @abstractmethod
    def is_logically_deleted(self, name: str, kind: ResourceKind) -> bool:
        """Check whether the application layer has released this resource.

        Args:
            name: Vertex name (volume name, or `volume@snapshot`)
            kind: Whether the resource is a volume or a snapshot

        Returns:
            True if the resource is logically deleted
        """
        ...
