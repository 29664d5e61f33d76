from clonegc.core.time.abc import Time
from clonegc.core.time.fake import FakeTime
from clonegc.core.time.real import RealTime

__all__ = [
    "FakeTime",
    "RealTime",
    "Time",
]
