"""Forest visualization subpackage."""

from clonegc.core.export.abc import GraphExporter
from clonegc.core.export.dot import render_dot, run_prefix
from clonegc.core.export.fake import FakeGraphExporter
from clonegc.core.export.real import DotFileExporter

__all__ = [
    "GraphExporter",
    "DotFileExporter",
    "FakeGraphExporter",
    "render_dot",
    "run_prefix",
]
