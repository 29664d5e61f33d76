"""Graphviz DOT rendering of the dependency forest."""

from datetime import UTC, datetime

from clonegc.core.graph import DependencyGraph
from clonegc.core.resources import Resource

ALIVE_COLORSCHEME = "greens3"
DEAD_COLORSCHEME = "reds3"


def run_prefix(now: datetime) -> str:
    """Run-scoped file prefix derived from an RFC3339 UTC timestamp.

    Example:
        >>> run_prefix(datetime(2025, 3, 4, 5, 6, 7, tzinfo=UTC))
        'graph-20250304T050607Z'
    """
    stamp = now.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    return "graph-" + stamp.replace(":", "").replace("-", "")


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _vertex_line(resource: Resource) -> str:
    scheme = ALIVE_COLORSCHEME if resource.alive else DEAD_COLORSCHEME
    attributes = [
        f'colorscheme="{scheme}"',
        'style="filled"',
        'color="2"',
        'fillcolor="1"',
    ]
    if resource.is_snapshot:
        attributes.append('shape="box"')
    return f"  {_quote(resource.name)} [{', '.join(attributes)}];"


def render_dot(graph: DependencyGraph) -> str:
    """Render every vertex and edge, styling alive and dead resources apart."""
    lines = ["strict digraph {"]
    for resource in graph.vertices():
        lines.append(_vertex_line(resource))
    for edge in graph.edges():
        lines.append(f"  {_quote(edge.source)} -> {_quote(edge.target)};")
    lines.append("}")
    return "\n".join(lines) + "\n"
