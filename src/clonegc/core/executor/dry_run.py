"""No-op executor for dry-run mode."""

import logging

from clonegc.core.executor.abc import CleanupExecutor
from clonegc.core.resources import Edge, Resource

logger = logging.getLogger(__name__)


class DryRunExecutor(CleanupExecutor):
    """No-op executor that logs what would be done instead of doing it.

    Usage:
        executor = DryRunExecutor()
        apply_plan(executor, report)  # logs "would flatten ..." / "would delete ..."
    """

    def cut_edge(self, edge: Edge) -> None:
        """Log the flatten instead of executing it."""
        logger.info("would flatten %s away from %s", edge.target, edge.source)

    def delete_resource(self, resource: Resource) -> None:
        """Log the deletion instead of executing it."""
        logger.info("would delete %s %s", resource.kind.value, resource.name)
