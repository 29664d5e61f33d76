"""End-to-end cleanup run: discover, export, clean, hand off the plan."""

import logging
from dataclasses import dataclass

from clonegc.core.context import CleanupContext
from clonegc.core.executor import CleanupExecutor
from clonegc.core.export import run_prefix
from clonegc.core.forest import Forest, build_forest
from clonegc.core.pruning import CleanupReport, clean_forest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CleanupRun:
    """Outcome of one invocation.

    `report` is None when cleaning was disabled and only discovery (and the
    optional export) ran.
    """

    prefix: str
    forest: Forest
    discovered: int
    report: CleanupReport | None


def apply_plan(executor: CleanupExecutor, report: CleanupReport) -> None:
    """Hand the computed plan to the executor: edge cuts first, then deletions leaf-first."""
    for edge in report.cuts:
        executor.cut_edge(edge)
    for resource in report.deleted:
        executor.delete_resource(resource)


def run_cleanup(ctx: CleanupContext) -> CleanupRun:
    """Run discovery and, when enabled, cleanup for the configured pool.

    Raises:
        DiscoveryError: If the pool cannot be discovered consistently
        GraphInvariantError: If cleanup hits an invariant violation and
            continue_on_error is off
    """
    config = ctx.config
    prefix = run_prefix(ctx.time.now())
    logger.info("run %s on pool %s", prefix, config.pool)

    forest = build_forest(ctx.storage, ctx.oracle)
    discovered = len(forest.graph)
    if config.graph:
        ctx.exporter.export(forest.graph, prefix, "before")
    if not config.clean:
        return CleanupRun(prefix=prefix, forest=forest, discovered=discovered, report=None)

    report = clean_forest(
        forest,
        max_height=config.max_height,
        max_generations=config.max_generations,
        continue_on_error=config.continue_on_error,
    )
    apply_plan(ctx.executor, report)

    if config.graph:
        ctx.exporter.export(forest.graph, prefix, "after")
    return CleanupRun(prefix=prefix, forest=forest, discovered=discovered, report=report)
