"""Clock abstraction for testing.

This module provides an ABC for reading the current time so run identifiers
and export file names are deterministic in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time as a timezone-aware UTC datetime."""
        ...
