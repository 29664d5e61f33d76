"""Fake Time implementation for testing."""

from datetime import UTC, datetime

from clonegc.core.time.abc import Time


class FakeTime(Time):
    """Clock frozen at a fixed instant.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, current: datetime | None = None) -> None:
        """Create FakeTime.

        Args:
            current: Instant to report (default: 2025-01-01T00:00:00Z)
        """
        self._current = current or datetime(2025, 1, 1, tzinfo=UTC)

    def now(self) -> datetime:
        return self._current
