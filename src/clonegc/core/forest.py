"""Forest construction from storage facts.

Builds the clone dependency graph for one pool and the initial root set.
Liveness is decided here, once, by combining the oracle's verdict with the
pinning rule: a volume that owns any snapshot is alive no matter what the
oracle says, since removing it would break the copy-on-write chain.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar

from clonegc.core.errors import DiscoveryError, Phase, graph_phase
from clonegc.core.graph import DependencyGraph
from clonegc.core.oracle.abc import LivenessOracle
from clonegc.core.resources import ParentSnapshot, Resource, ResourceKind, snapshot_key
from clonegc.core.storage.abc import StorageDiscovery

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Forest:
    """Dependency graph plus the ordered list of tree roots.

    The roots list grows while cleaning as flattening splits trees.
    """

    graph: DependencyGraph
    roots: list[Resource] = field(default_factory=list)


@dataclass(frozen=True)
class VolumeFacts:
    """Everything discovery reported about a single volume."""

    name: str
    parent: ParentSnapshot | None
    snapshots: list[str]
    children: list[str]


def _query(fn: Callable[[str], T], volume: str, what: str) -> T:
    try:
        return fn(volume)
    except RuntimeError as e:
        raise DiscoveryError(f"Cannot {what} of volume {volume}: {e}", resource=volume) from e


def discover_facts(storage: StorageDiscovery) -> list[VolumeFacts]:
    """Read all facts for every volume in the pool.

    Raises:
        DiscoveryError: If any storage query fails
    """
    try:
        volumes = storage.list_volumes()
    except RuntimeError as e:
        raise DiscoveryError(f"Cannot list volumes: {e}") from e

    facts: list[VolumeFacts] = []
    for volume in volumes:
        logger.debug("inspecting vertex %s", volume)
        facts.append(
            VolumeFacts(
                name=volume,
                parent=_query(storage.get_parent_snapshot, volume, "read parent"),
                snapshots=_query(storage.list_snapshots, volume, "list snapshots"),
                children=_query(storage.list_clone_children, volume, "list children"),
            )
        )
    return facts


def build_forest(storage: StorageDiscovery, oracle: LivenessOracle) -> Forest:
    """Discover the pool and build its dependency forest.

    Args:
        storage: Source of volume, snapshot and clone facts
        oracle: Decides which resources are logically deleted

    Returns:
        Forest with every volume and snapshot as a vertex and roots in
        discovery order

    Raises:
        DiscoveryError: If storage cannot be read or the facts are inconsistent
    """
    logger.info("building graph")
    return build_forest_from_facts(discover_facts(storage), oracle)


def build_forest_from_facts(facts: list[VolumeFacts], oracle: LivenessOracle) -> Forest:
    """Build the forest from already discovered facts.

    Raises:
        DiscoveryError: If the facts are inconsistent with each other
    """
    _check_unique_names(facts)
    graph = DependencyGraph()
    roots: list[Resource] = []
    by_name = {volume.name: volume for volume in facts}

    with graph_phase(Phase.FOREST_BUILD):
        for volume in facts:
            for snap in volume.snapshots:
                name = snapshot_key(volume.name, snap)
                deleted = oracle.is_logically_deleted(name, ResourceKind.SNAPSHOT)
                graph.add_vertex(Resource(name=name, kind=ResourceKind.SNAPSHOT, alive=not deleted))

            deleted = oracle.is_logically_deleted(volume.name, ResourceKind.VOLUME)
            if deleted and volume.snapshots:
                logger.info(
                    "volume %s is logically deleted but pinned by %d snapshot(s)",
                    volume.name,
                    len(volume.snapshots),
                )
            node = Resource(
                name=volume.name,
                kind=ResourceKind.VOLUME,
                alive=not deleted or bool(volume.snapshots),
            )
            graph.add_vertex(node)
            if volume.parent is None:
                roots.append(node)

        for volume in facts:
            logger.debug("adding edges for %s", volume.name)
            for snap in volume.snapshots:
                graph.add_edge(volume.name, snapshot_key(volume.name, snap))

            for child in volume.children:
                parent = _clone_parent(by_name, volume.name, child)
                parent_name = snapshot_key(parent.volume, parent.snapshot)
                if parent_name not in graph:
                    raise DiscoveryError(
                        f"Clone {child} reports parent {parent_name}, which was never discovered",
                        resource=child,
                        phase=Phase.FOREST_BUILD,
                    )
                logger.debug("adding parent-child %s-%s", parent_name, child)
                graph.add_edge(parent_name, child)

    _check_clones_attached(facts, graph)
    return Forest(graph=graph, roots=roots)


def _check_unique_names(facts: list[VolumeFacts]) -> None:
    seen: set[str] = set()
    for volume in facts:
        if volume.name in seen:
            raise DiscoveryError(
                f"Volume {volume.name} appears more than once in the listing",
                resource=volume.name,
                phase=Phase.FOREST_BUILD,
            )
        seen.add(volume.name)

        snapshots: set[str] = set()
        for snap in volume.snapshots:
            if snap in snapshots:
                raise DiscoveryError(
                    f"Snapshot {snap} listed twice for volume {volume.name}",
                    resource=snapshot_key(volume.name, snap),
                    phase=Phase.FOREST_BUILD,
                )
            snapshots.add(snap)


def _clone_parent(by_name: dict[str, VolumeFacts], volume: str, child: str) -> ParentSnapshot:
    if child not in by_name:
        raise DiscoveryError(
            f"Clone child {child} of {volume} is missing from the volume listing",
            resource=child,
            phase=Phase.FOREST_BUILD,
        )
    parent = by_name[child].parent
    if parent is None:
        raise DiscoveryError(
            f"Clone child {child} of {volume} has no parent snapshot",
            resource=child,
            phase=Phase.FOREST_BUILD,
        )
    if parent.volume != volume:
        raise DiscoveryError(
            f"Clone child {child} listed under {volume} but cloned from {parent.volume}",
            resource=child,
            phase=Phase.FOREST_BUILD,
        )
    return parent


def _check_clones_attached(facts: list[VolumeFacts], graph: DependencyGraph) -> None:
    """Every clone must hang off its parent snapshot, or it would never be visited."""
    for volume in facts:
        if volume.parent is None:
            continue
        parent_name = snapshot_key(volume.parent.volume, volume.parent.snapshot)
        if parent_name not in graph:
            raise DiscoveryError(
                f"Clone {volume.name} reports parent {parent_name}, which was never discovered",
                resource=volume.name,
                phase=Phase.FOREST_BUILD,
            )
        if not graph.has_edge(parent_name, volume.name):
            raise DiscoveryError(
                f"Clone {volume.name} is not listed among the children of {parent_name}",
                resource=volume.name,
                phase=Phase.FOREST_BUILD,
            )
