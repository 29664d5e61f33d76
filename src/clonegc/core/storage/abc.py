"""Abstract interface for storage discovery.

Architecture:
- StorageDiscovery: Abstract base class defining the read-only fact queries
- RealRbdStorage: Production implementation shelling out to the rbd CLI
- FakeStorage: In-memory implementation for tests
"""

from abc import ABC, abstractmethod

from clonegc.core.resources import ParentSnapshot


class StorageDiscovery(ABC):
    """Read-only view of volumes, snapshots and clone relations in one pool.

    All implementations (real and fake) must implement this interface.
    Implementations raise RuntimeError when the backend cannot answer.
    """

    @abstractmethod
    def list_volumes(self) -> list[str]:
        """List every volume name in the pool."""
        ...

    @abstractmethod
    def get_parent_snapshot(self, volume: str) -> ParentSnapshot | None:
        """Get the snapshot a volume was cloned from.

        Returns:
            ParentSnapshot, or None if the volume is not a clone
        """
        ...

    @abstractmethod
    def list_snapshots(self, volume: str) -> list[str]:
        """List snapshot names of a volume (bare names, not `vol@snap`)."""
        ...

    @abstractmethod
    def list_clone_children(self, volume: str) -> list[str]:
        """List volumes cloned from any snapshot of this volume.

        Assumes children live in the same pool.
        """
        ...
