"""Builders for common pool layouts used across tests."""

from clonegc.core.forest import Forest, build_forest
from clonegc.core.oracle.fake import FakeOracle
from clonegc.core.resources import ParentSnapshot
from clonegc.core.storage.fake import FakeStorage


def chain_storage(count: int, prefix: str = "v") -> FakeStorage:
    """Linear lineage v1 -> v1@s1 -> v2 -> v2@s2 -> ... -> v<count>.

    Every volume but the last owns one snapshot, and the next volume is
    cloned from it.
    """
    volumes = [f"{prefix}{i}" for i in range(1, count + 1)]
    snapshots = {f"{prefix}{i}": [f"s{i}"] for i in range(1, count)}
    parents = {
        f"{prefix}{i + 1}": ParentSnapshot(volume=f"{prefix}{i}", snapshot=f"s{i}")
        for i in range(1, count)
    }
    return FakeStorage(volumes=volumes, snapshots=snapshots, parents=parents)


def build(storage: FakeStorage, deleted: set[str] | None = None) -> Forest:
    """Build a forest from fake storage and a fake oracle."""
    return build_forest(storage, FakeOracle(deleted=deleted or set()))
