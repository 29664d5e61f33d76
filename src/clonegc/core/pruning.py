"""Bottom-up pruning and height-bounded flattening of the dependency forest.

Each root is cleaned in generations. A generation reads a fresh snapshot of
the structure, collects the dead leaves (and, with a height bound, the nodes
that become new roots), then mutates the graph. A node only becomes a leaf
once all its dependents were removed by an earlier generation, so deletions
always happen in topological order.
"""

import logging
from dataclasses import dataclass, field

from clonegc.core.errors import GraphInvariantError, MissingVertexError, Phase, graph_phase
from clonegc.core.forest import Forest
from clonegc.core.graph import DependencyGraph, EdgeMap
from clonegc.core.resources import Edge, Resource

logger = logging.getLogger(__name__)

DEFAULT_MAX_GENERATIONS = 5


@dataclass(frozen=True)
class GenerationResult:
    """Mutations performed by one generation over one tree."""

    deleted: list[Resource]
    new_roots: list[Resource]
    cuts: list[Edge]
    progress: bool


@dataclass(frozen=True)
class TreeOutcome:
    """Result of cleaning the tree under a single root."""

    root: Resource
    generations: int
    deleted: list[Resource]
    new_roots: list[Resource]
    complete: bool
    error: GraphInvariantError | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class CleanupReport:
    """Cumulative result of cleaning every tree in the forest."""

    deleted: list[Resource] = field(default_factory=list)
    cuts: list[Edge] = field(default_factory=list)
    trees: list[TreeOutcome] = field(default_factory=list)

    @property
    def incomplete(self) -> list[TreeOutcome]:
        """Trees that hit the generation cap while still making progress."""
        return [tree for tree in self.trees if not tree.complete and not tree.failed]

    @property
    def failed(self) -> list[TreeOutcome]:
        return [tree for tree in self.trees if tree.failed]

    @property
    def complete(self) -> bool:
        return not self.incomplete and not self.failed


def _children(adjacency: EdgeMap, name: str) -> dict[str, Edge]:
    if name not in adjacency:
        raise MissingVertexError(name)
    return adjacency[name]


def trim(root: Resource, adjacency: EdgeMap, graph: DependencyGraph) -> list[Resource]:
    """Collect the dead leaves of the tree under `root`.

    A node is deletable iff it has no outbound edges and is not alive. Pure
    read of the structure; nothing is mutated.

    Args:
        root: Root of the tree to inspect
        adjacency: Outbound edges, as returned by graph.adjacency()
        graph: Graph the adjacency map was taken from

    Returns:
        Deletable resources in traversal order
    """
    deletable: list[Resource] = []
    seen: set[str] = set()
    stack = [root]

    while stack:
        current = stack.pop()
        if current.name in seen:
            continue
        seen.add(current.name)

        children = _children(adjacency, current.name)
        for child in children:
            stack.append(graph.vertex(child))
        if not children and not current.alive:
            deletable.append(current)
    return deletable


def trim_with_flatten(
    root: Resource,
    adjacency: EdgeMap,
    graph: DependencyGraph,
    max_height: int,
) -> tuple[list[Resource], list[Resource]]:
    """Collect dead leaves and the nodes that must become new roots.

    The root has height 0 and every child is one deeper than its parent. A
    node deeper than `max_height` is not expanded and is returned as a new
    root instead of being inspected for deletion; its subtree is left alone.

    Returns:
        Tuple of (new_roots, deletable)
    """
    deletable: list[Resource] = []
    new_roots: list[Resource] = []
    seen: set[str] = set()
    stack = [(root, 0)]

    while stack:
        current, height = stack.pop()
        if current.name in seen:
            continue
        seen.add(current.name)

        if height > max_height:
            # becomes a separate tree, children stay attached to it
            new_roots.append(current)
            continue

        children = _children(adjacency, current.name)
        for child in children:
            stack.append((graph.vertex(child), height + 1))
        if not children and not current.alive:
            deletable.append(current)
    return new_roots, deletable


def run_generation(graph: DependencyGraph, root: Resource, max_height: int) -> GenerationResult:
    """Run one generation of cleanup over the tree under `root`.

    Recomputes the adjacency and predecessor maps, finds what to delete and
    what to split off, cuts the inbound edges of new roots, then removes
    every deletable vertex together with its edges.

    Args:
        graph: Graph to mutate
        root: Root of the tree to clean
        max_height: Height bound; 0 disables flattening

    Raises:
        GraphInvariantError: If a mutation is rejected, tagged with the phase
    """
    adjacency = graph.adjacency()
    predecessors = graph.predecessors()

    if max_height == 0:
        new_roots: list[Resource] = []
        with graph_phase(Phase.PRUNING):
            deleted = trim(root, adjacency, graph)
    else:
        with graph_phase(Phase.FLATTENING):
            new_roots, deleted = trim_with_flatten(root, adjacency, graph, max_height)

    cuts: list[Edge] = []
    with graph_phase(Phase.FLATTENING):
        for node in new_roots:
            for edge in predecessors[node.name].values():
                logger.info("deleting edge %s", edge)
                graph.remove_edge(edge.source, edge.target)
                cuts.append(edge)

    with graph_phase(Phase.PRUNING):
        for node in deleted:
            for edge in list(adjacency[node.name].values()) + list(
                predecessors[node.name].values()
            ):
                logger.info("deleting edge %s", edge)
                graph.remove_edge(edge.source, edge.target)
            graph.remove_vertex(node.name)

    only_root_deleted = len(deleted) == 1 and deleted[0].name == root.name
    progress = bool(new_roots) or (bool(deleted) and not only_root_deleted)
    return GenerationResult(deleted=deleted, new_roots=new_roots, cuts=cuts, progress=progress)


def clean_tree(
    forest: Forest,
    root: Resource,
    *,
    max_height: int = 0,
    max_generations: int = DEFAULT_MAX_GENERATIONS,
    continue_on_error: bool = False,
) -> tuple[TreeOutcome, list[Edge]]:
    """Repeat generations over one tree until it stops changing or the cap is hit.

    New roots produced by flattening are appended to `forest.roots`.

    Args:
        forest: Forest to mutate
        root: Root of the tree to clean
        max_height: Height bound; 0 disables flattening
        max_generations: Safety cap on the number of generations
        continue_on_error: Record invariant violations in the outcome instead
            of raising them

    Returns:
        Tuple of (outcome, edge cuts performed)
    """
    generations = 0
    dirty = True
    deleted: list[Resource] = []
    new_roots: list[Resource] = []
    cuts: list[Edge] = []

    while dirty and generations < max_generations:
        generations += 1
        try:
            result = run_generation(forest.graph, root, max_height)
        except GraphInvariantError as e:
            logger.error("cleanup of tree rooted at %s failed: %s", root.name, e)
            if not continue_on_error:
                raise
            outcome = TreeOutcome(
                root=root,
                generations=generations,
                deleted=deleted,
                new_roots=new_roots,
                complete=False,
                error=e,
            )
            return outcome, cuts

        forest.roots.extend(result.new_roots)
        deleted.extend(result.deleted)
        new_roots.extend(result.new_roots)
        cuts.extend(result.cuts)
        dirty = result.progress
        logger.info("deleted %s", [r.name for r in result.deleted])

    logger.info("took %d generations to clean tree rooted at %s", generations, root.name)
    if dirty:
        logger.warning(
            "tree rooted at %s still changing after %d generations", root.name, generations
        )
    outcome = TreeOutcome(
        root=root,
        generations=generations,
        deleted=deleted,
        new_roots=new_roots,
        complete=not dirty,
    )
    return outcome, cuts


def clean_forest(
    forest: Forest,
    *,
    max_height: int = 0,
    max_generations: int = DEFAULT_MAX_GENERATIONS,
    continue_on_error: bool = False,
) -> CleanupReport:
    """Clean every tree in the forest, including trees split off along the way.

    Roots are processed sequentially in discovery order; roots produced by
    flattening are appended and processed after the ones already queued.
    """
    report = CleanupReport()
    index = 0
    while index < len(forest.roots):
        root = forest.roots[index]
        index += 1
        logger.info("starting cleanup for tree rooted at %s", root.name)
        outcome, cuts = clean_tree(
            forest,
            root,
            max_height=max_height,
            max_generations=max_generations,
            continue_on_error=continue_on_error,
        )
        report.trees.append(outcome)
        report.deleted.extend(outcome.deleted)
        report.cuts.extend(cuts)

    logger.info("deleted the following resources: %s", [r.name for r in report.deleted])
    return report
