"""Liveness oracle subpackage."""

from clonegc.core.oracle.abc import LivenessOracle
from clonegc.core.oracle.fake import FakeOracle
from clonegc.core.oracle.real import DeletionListOracle, parse_deletion_list

__all__ = [
    "LivenessOracle",
    "DeletionListOracle",
    "FakeOracle",
    "parse_deletion_list",
]
