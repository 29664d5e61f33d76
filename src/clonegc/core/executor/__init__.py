"""Cleanup plan execution subpackage.

Only dry-run execution exists: the plan is logged, never applied to storage.
"""

from clonegc.core.executor.abc import CleanupExecutor
from clonegc.core.executor.dry_run import DryRunExecutor
from clonegc.core.executor.fake import FakeCleanupExecutor

__all__ = [
    "CleanupExecutor",
    "DryRunExecutor",
    "FakeCleanupExecutor",
]
