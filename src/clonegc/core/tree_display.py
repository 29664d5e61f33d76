"""Tree visualization utilities for the dependency forest.

This module contains pure logic for rendering the forest as indented trees.
These functions are used by the `clonegc show` command.
"""

import click

from clonegc.core.graph import DependencyGraph, EdgeMap
from clonegc.core.resources import Resource


def format_resource(resource: Resource) -> str:
    """Format a single resource line with kind and liveness markers."""
    kind = "snap" if resource.is_snapshot else "vol"
    if resource.alive:
        status = click.style("alive", fg="green")
    else:
        status = click.style("dead", fg="red")
    return f"{resource.name} [{kind}] {status}"


def format_forest_as_tree(
    graph: DependencyGraph,
    roots: list[Resource],
    *,
    root_name: str | None,
) -> str:
    """Format the forest as hierarchical trees.

    Args:
        graph: Dependency graph
        roots: Tree roots in display order
        root_name: Optional root to show alone (only this resource and its descendants)

    Returns:
        Multi-line string with tree visualization
    """
    if root_name is not None:
        if root_name not in graph:
            return f"Error: Resource '{root_name}' not found"
        roots = [graph.vertex(root_name)]

    if not roots:
        return "No volumes found"

    adjacency = graph.adjacency()
    lines: list[str] = []
    for root in roots:
        format_resource_recursive(
            name=root.name,
            graph=graph,
            adjacency=adjacency,
            lines=lines,
            prefix="",
            is_last=True,
            is_root=True,
        )

    return "\n".join(lines)


def format_resource_recursive(
    name: str,
    graph: DependencyGraph,
    adjacency: EdgeMap,
    lines: list[str],
    prefix: str,
    is_last: bool,
    is_root: bool,
) -> None:
    """Recursively format a resource and its dependents.

    Args:
        name: Name of current resource to format
        graph: Dependency graph
        adjacency: Outbound edges of every vertex
        lines: List to append formatted lines to
        prefix: Prefix string for indentation
        is_last: True if this is the last child of its parent
        is_root: True if this is a root node
    """
    info = format_resource(graph.vertex(name))
    if is_root:
        lines.append(info)
    else:
        connector = "└─" if is_last else "├─"
        lines.append(f"{prefix}{connector} {info}")

    children = sorted(adjacency[name])
    if not children:
        return

    if is_root:
        child_prefix = ""
    else:
        child_prefix = prefix + ("   " if is_last else "│  ")

    for i, child in enumerate(children):
        format_resource_recursive(
            name=child,
            graph=graph,
            adjacency=adjacency,
            lines=lines,
            prefix=child_prefix,
            is_last=i == len(children) - 1,
            is_root=False,
        )
