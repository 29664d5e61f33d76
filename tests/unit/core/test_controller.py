"""Tests for the iteration controller that repeats generations per tree.

Covers the end-to-end lineage scenarios: cascading deletion along one
lineage, height-bounded flattening into independent trees and the
convergence properties of the loop.
"""

import pytest

from clonegc.core.errors import MissingVertexError, Phase
from clonegc.core.forest import Forest
from clonegc.core.graph import DependencyGraph
from clonegc.core.pruning import clean_forest, clean_tree, run_generation
from clonegc.core.resources import Edge, ParentSnapshot, Resource, ResourceKind
from clonegc.core.storage.fake import FakeStorage
from tests.test_utils.builders import build, chain_storage


def _reachable(graph: DependencyGraph, root: str) -> set[str]:
    adjacency = graph.adjacency()
    seen = {root}
    stack = [root]
    while stack:
        for child in adjacency[stack.pop()]:
            if child not in seen:
                seen.add(child)
                stack.append(child)
    return seen


def _six_resource_chain() -> FakeStorage:
    """v1 -> v1@s1 -> v2 -> v2@s2 -> v3 -> v3@s3."""
    return FakeStorage(
        volumes=["v1", "v2", "v3"],
        snapshots={"v1": ["s1"], "v2": ["s2"], "v3": ["s3"]},
        parents={
            "v2": ParentSnapshot(volume="v1", snapshot="s1"),
            "v3": ParentSnapshot(volume="v2", snapshot="s2"),
        },
    )


# ===========================
# Lineage scenarios
# ===========================


def test_dead_tail_of_long_lineage_is_removed_leaf_first() -> None:
    """Test a five-volume lineage whose last clone and its parent snapshot are dead.

    Generation 1 deletes v5, generation 2 deletes v4@s4, generation 3 finds
    nothing because v4 owns a snapshot and stays alive.
    """
    forest = build(chain_storage(5), deleted={"v5", "v4@s4"})

    outcome, cuts = clean_tree(forest, forest.roots[0])

    assert [r.name for r in outcome.deleted] == ["v5", "v4@s4"]
    assert outcome.generations == 3
    assert outcome.complete is True
    assert cuts == []
    assert "v4" in forest.graph
    assert forest.graph.vertex("v4").alive is True
    assert forest.graph.adjacency()["v4"] == {}


def test_dead_tail_with_low_cap_is_incomplete() -> None:
    """Test that stopping while the tree is still changing is reported as incomplete."""
    forest = build(chain_storage(5), deleted={"v5", "v4@s4"})

    report = clean_forest(forest, max_generations=2)

    assert [r.name for r in report.deleted] == ["v5", "v4@s4"]
    assert report.complete is False
    assert [t.root.name for t in report.incomplete] == ["v1"]
    assert report.incomplete[0].generations == 2
    assert report.failed == []


def test_cap_reached_on_no_progress_generation_is_complete() -> None:
    """Test that using the last allowed generation to confirm a fixpoint is complete."""
    forest = build(chain_storage(5), deleted={"v5", "v4@s4"})

    report = clean_forest(forest, max_generations=3)

    assert report.complete is True
    assert report.trees[0].generations == 3


def test_flatten_splits_chain_into_independent_trees() -> None:
    """Test a six-resource chain with max_height 2.

    Exactly one new root appears at depth 3, its inbound edge from the depth-2
    predecessor is cut and the two trees share no edges.
    """
    forest = build(_six_resource_chain())

    report = clean_forest(forest, max_height=2)

    assert [r.name for r in forest.roots] == ["v1", "v2@s2"]
    assert report.cuts == [Edge(source="v2", target="v2@s2")]
    assert report.deleted == []

    upper = _reachable(forest.graph, "v1")
    lower = _reachable(forest.graph, "v2@s2")
    assert upper == {"v1", "v1@s1", "v2"}
    assert lower == {"v2@s2", "v3", "v3@s3"}
    for edge in forest.graph.edges():
        assert (edge.source in upper) == (edge.target in upper)


def test_flatten_preserves_subtree_under_new_root() -> None:
    """Test that everything below the cut stays attached to the new root."""
    forest = build(_six_resource_chain())
    edges_before = set(forest.graph.edges())

    clean_forest(forest, max_height=2)

    assert set(forest.graph.edges()) == edges_before - {Edge(source="v2", target="v2@s2")}
    assert forest.graph.adjacency()["v2@s2"] == {"v3": Edge(source="v2@s2", target="v3")}
    assert forest.graph.adjacency()["v3"] == {"v3@s3": Edge(source="v3", target="v3@s3")}


def test_split_off_trees_are_cleaned_in_the_same_run() -> None:
    """Test that a tree produced by flattening is processed after the queued roots."""
    # v1(0) v1@s1(1) v2(2) | v2@s2(0) v3(1) v3@s3(2) | v4(0)
    forest = build(chain_storage(4), deleted={"v4"})

    report = clean_forest(forest, max_height=2)

    assert [r.name for r in forest.roots] == ["v1", "v2@s2", "v4"]
    assert report.cuts == [
        Edge(source="v2", target="v2@s2"),
        Edge(source="v3@s3", target="v4"),
    ]
    assert [r.name for r in report.deleted] == ["v4"]
    assert [t.root.name for t in report.trees] == ["v1", "v2@s2", "v4"]
    assert report.complete is True


def test_dead_snapshot_cascades_after_its_clone() -> None:
    """Test that a dead snapshot is only deleted once its dead clone is gone."""
    storage = FakeStorage(
        volumes=["base", "vm"],
        snapshots={"base": ["gold"]},
        parents={"vm": ParentSnapshot(volume="base", snapshot="gold")},
    )
    forest = build(storage, deleted={"base", "base@gold", "vm"})

    outcome, _ = clean_tree(forest, forest.roots[0])

    assert [r.name for r in outcome.deleted] == ["vm", "base@gold"]
    assert "base" in forest.graph
    assert outcome.complete is True


def test_lone_dead_root_is_deleted_in_one_generation() -> None:
    """Test that an unreferenced dead volume is removed and ends its tree."""
    forest = build(FakeStorage(volumes=["orphan", "keep"]), deleted={"orphan"})

    report = clean_forest(forest)

    assert [r.name for r in report.deleted] == ["orphan"]
    assert [t.generations for t in report.trees] == [1, 1]
    assert report.complete is True
    assert [r.name for r in forest.graph.vertices()] == ["keep"]


# ===========================
# Convergence properties
# ===========================


def test_one_more_generation_after_fixpoint_makes_no_progress() -> None:
    """Test that the loop stops at a fixpoint."""
    forest = build(chain_storage(5), deleted={"v5", "v4@s4", "v2@s2"})
    root = forest.roots[0]
    clean_tree(forest, root, max_height=3)

    result = run_generation(forest.graph, root, max_height=3)

    assert result.progress is False
    assert result.deleted == []
    assert result.new_roots == []


def test_deleted_resources_are_never_readded() -> None:
    """Test that the deleted set only grows and deleted names stay gone."""
    forest = build(chain_storage(5), deleted={"v5", "v4@s4", "v3@s3"})
    root = forest.roots[0]
    deleted: list[str] = []

    for _ in range(5):
        result = run_generation(forest.graph, root, max_height=0)
        deleted.extend(r.name for r in result.deleted)
        for name in deleted:
            assert name not in forest.graph

    assert deleted == ["v5", "v4@s4"]
    assert len(deleted) == len(set(deleted))


def test_liveness_is_not_recomputed_while_pruning() -> None:
    """Test that a pinned volume stays alive after its snapshots are deleted."""
    storage = FakeStorage(volumes=["base"], snapshots={"base": ["gold"]})
    forest = build(storage, deleted={"base", "base@gold"})

    outcome, _ = clean_tree(forest, forest.roots[0])

    assert [r.name for r in outcome.deleted] == ["base@gold"]
    assert forest.graph.vertex("base").alive is True


# ===========================
# Errors
# ===========================


def _forest_with_ghost_root() -> Forest:
    forest = build(FakeStorage(volumes=["orphan"]), deleted={"orphan"})
    forest.roots.insert(0, Resource(name="ghost", kind=ResourceKind.VOLUME, alive=False))
    return forest


def test_invariant_violation_aborts_by_default() -> None:
    """Test that a graph error propagates with its phase."""
    forest = _forest_with_ghost_root()

    with pytest.raises(MissingVertexError) as exc_info:
        clean_forest(forest)

    assert exc_info.value.phase == Phase.PRUNING
    assert "orphan" in forest.graph


def test_continue_on_error_records_failed_tree() -> None:
    """Test that a failed tree is reported and the remaining roots still run."""
    forest = _forest_with_ghost_root()

    report = clean_forest(forest, continue_on_error=True)

    assert [t.root.name for t in report.failed] == ["ghost"]
    assert isinstance(report.failed[0].error, MissingVertexError)
    assert [r.name for r in report.deleted] == ["orphan"]
    assert report.incomplete == []
    assert report.complete is False
