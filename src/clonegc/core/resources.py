"""Resource data types for the clone dependency forest."""

from dataclasses import dataclass
from enum import Enum


class ResourceKind(Enum):
    """Kind of storage entity a vertex represents."""

    VOLUME = "volume"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True)
class Resource:
    """A volume or snapshot in the storage pool.

    Frozen so the copy handed to callers can never drift from the one held by
    the graph. `alive` is decided once during forest construction.
    """

    name: str
    kind: ResourceKind
    alive: bool

    @property
    def is_snapshot(self) -> bool:
        return self.kind == ResourceKind.SNAPSHOT


@dataclass(frozen=True)
class Edge:
    """Clone dependency from a parent resource to the resource depending on it."""

    source: str
    target: str

    def __str__(self) -> str:
        return f"{self.source}->{self.target}"


@dataclass(frozen=True)
class ParentSnapshot:
    """Snapshot a cloned volume was created from."""

    volume: str
    snapshot: str


def snapshot_key(volume: str, snapshot: str) -> str:
    """Vertex name for a snapshot, in rbd `image@snap` notation.

    Snapshot names are only unique per volume, so the owning volume is part
    of the key.
    """
    return f"{volume}@{snapshot}"
