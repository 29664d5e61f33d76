"""Tests for the dry-run executor."""

import logging

from clonegc.core.executor import DryRunExecutor
from clonegc.core.resources import Edge, Resource, ResourceKind


def test_dry_run_executor_logs_plan(caplog) -> None:
    """Test that the dry-run executor only logs the flatten and the deletion."""
    executor = DryRunExecutor()

    with caplog.at_level(logging.INFO, logger="clonegc.core.executor.dry_run"):
        executor.cut_edge(Edge(source="v3@s3", target="v4"))
        executor.delete_resource(Resource(name="v4", kind=ResourceKind.VOLUME, alive=False))

    assert caplog.messages == [
        "would flatten v4 away from v3@s3",
        "would delete volume v4",
    ]
