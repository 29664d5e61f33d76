"""Fake liveness oracle for testing."""

from clonegc.core.oracle.abc import LivenessOracle
from clonegc.core.resources import ResourceKind


class FakeOracle(LivenessOracle):
    """In-memory oracle answering from a fixed set of deleted names.

    This class has NO public setup methods. All state is provided via constructor
    or captured during execution.
    """

    def __init__(self, deleted: set[str] | None = None) -> None:
        """Create FakeOracle.

        Args:
            deleted: Names reported as logically deleted
        """
        self._deleted = deleted or set()
        self._queries: list[str] = []

    @property
    def queries(self) -> list[str]:
        """Names queried so far, in order.

        This property is for test assertions only.
        """
        return self._queries

    def is_logically_deleted(self, name: str, kind: ResourceKind) -> bool:
        self._queries.append(name)
        return name in self._deleted
