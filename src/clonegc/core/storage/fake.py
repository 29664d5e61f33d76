"""In-memory fake implementation of storage discovery for testing."""

from clonegc.core.resources import ParentSnapshot
from clonegc.core.storage.abc import StorageDiscovery


class FakeStorage(StorageDiscovery):
    """In-memory fake implementation for testing.

    All state is provided via constructor using keyword arguments. Clone
    children are derived from the parent references unless given explicitly,
    which lets tests describe inconsistent backends.
    """

    def __init__(
        self,
        *,
        volumes: list[str] | None = None,
        snapshots: dict[str, list[str]] | None = None,
        parents: dict[str, ParentSnapshot] | None = None,
        children: dict[str, list[str]] | None = None,
        unreadable: set[str] | None = None,
        pool_error: str | None = None,
    ) -> None:
        """Create FakeStorage with pre-configured state.

        Args:
            volumes: Volume names in listing order
            snapshots: Mapping of volume -> bare snapshot names
            parents: Mapping of cloned volume -> snapshot it was cloned from
            children: Mapping of volume -> clone children, overriding the
                children derived from `parents`
            unreadable: Volumes whose queries fail (simulates rbd errors)
            pool_error: If set, list_volumes() fails with this message
        """
        self._volumes = volumes or []
        self._snapshots = snapshots or {}
        self._parents = parents or {}
        self._children = children
        self._unreadable = unreadable or set()
        self._pool_error = pool_error
        self._queries: list[tuple[str, str]] = []

    @property
    def queries(self) -> list[tuple[str, str]]:
        """Read-only access to (operation, volume) queries for test assertions."""
        return self._queries

    def _check(self, operation: str, volume: str) -> None:
        self._queries.append((operation, volume))
        if volume in self._unreadable:
            raise RuntimeError(f"Failed to {operation} for image {volume}")

    def list_volumes(self) -> list[str]:
        self._queries.append(("list_volumes", ""))
        if self._pool_error is not None:
            raise RuntimeError(self._pool_error)
        return list(self._volumes)

    def get_parent_snapshot(self, volume: str) -> ParentSnapshot | None:
        self._check("get_parent_snapshot", volume)
        return self._parents.get(volume)

    def list_snapshots(self, volume: str) -> list[str]:
        self._check("list_snapshots", volume)
        return list(self._snapshots.get(volume, []))

    def list_clone_children(self, volume: str) -> list[str]:
        self._check("list_clone_children", volume)
        if self._children is not None:
            return list(self._children.get(volume, []))
        return [child for child, parent in self._parents.items() if parent.volume == volume]
