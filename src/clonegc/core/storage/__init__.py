"""Storage discovery subpackage.

This subpackage provides the read-only fact queries the forest is built from,
with a real rbd-backed implementation and an in-memory fake for tests.
"""

from clonegc.core.storage.abc import StorageDiscovery
from clonegc.core.storage.fake import FakeStorage
from clonegc.core.storage.real import RealRbdStorage

__all__ = [
    "StorageDiscovery",
    "RealRbdStorage",
    "FakeStorage",
]
