"""Directed acyclic vertex/edge store keyed by resource name.

Every mutation validates its preconditions before touching state, so a
rejected call leaves the graph exactly as it was. Pruning inspects the graph
between mutations and relies on it being acyclic at every step.
"""

from clonegc.core.errors import (
    CycleError,
    DuplicateEdgeError,
    DuplicateVertexError,
    MissingEdgeError,
    MissingVertexError,
    VertexHasEdgesError,
)
from clonegc.core.resources import Edge, Resource

# Map of vertex name -> (neighbor name -> edge)
EdgeMap = dict[str, dict[str, Edge]]


class DependencyGraph:
    """Clone dependency graph over Resources."""

    def __init__(self) -> None:
        self._vertices: dict[str, Resource] = {}
        self._outbound: EdgeMap = {}
        self._inbound: EdgeMap = {}

    def __len__(self) -> int:
        return len(self._vertices)

    def __contains__(self, name: object) -> bool:
        return name in self._vertices

    # Vertices

    def add_vertex(self, resource: Resource) -> None:
        """Insert a vertex.

        Raises:
            DuplicateVertexError: If a vertex with the same name exists
        """
        if resource.name in self._vertices:
            raise DuplicateVertexError(resource.name)
        self._vertices[resource.name] = resource
        self._outbound[resource.name] = {}
        self._inbound[resource.name] = {}

    def vertex(self, name: str) -> Resource:
        """Look up a vertex by name.

        Raises:
            MissingVertexError: If no vertex has that name
        """
        if name not in self._vertices:
            raise MissingVertexError(name)
        return self._vertices[name]

    def vertices(self) -> list[Resource]:
        """All vertices in insertion order."""
        return list(self._vertices.values())

    def remove_vertex(self, name: str) -> None:
        """Remove a vertex that no longer has any incident edges.

        Raises:
            MissingVertexError: If no vertex has that name
            VertexHasEdgesError: If inbound or outbound edges remain
        """
        if name not in self._vertices:
            raise MissingVertexError(name)
        inbound = len(self._inbound[name])
        outbound = len(self._outbound[name])
        if inbound or outbound:
            raise VertexHasEdgesError(name, inbound=inbound, outbound=outbound)
        del self._vertices[name]
        del self._outbound[name]
        del self._inbound[name]

    # Edges

    def add_edge(self, source: str, target: str) -> None:
        """Insert the edge source->target.

        Raises:
            MissingVertexError: If either endpoint is absent
            DuplicateEdgeError: If the edge already exists
            CycleError: If target can already reach source
        """
        for name in (source, target):
            if name not in self._vertices:
                raise MissingVertexError(name)
        if target in self._outbound[source]:
            raise DuplicateEdgeError(source, target)
        if self._reaches(target, source):
            raise CycleError(source, target)

        edge = Edge(source=source, target=target)
        self._outbound[source][target] = edge
        self._inbound[target][source] = edge

    def has_edge(self, source: str, target: str) -> bool:
        return source in self._outbound and target in self._outbound[source]

    def remove_edge(self, source: str, target: str) -> None:
        """Remove the edge source->target.

        Raises:
            MissingEdgeError: If the edge does not exist
        """
        if not self.has_edge(source, target):
            raise MissingEdgeError(source, target)
        del self._outbound[source][target]
        del self._inbound[target][source]

    def edges(self) -> list[Edge]:
        return [edge for targets in self._outbound.values() for edge in targets.values()]

    # Views

    def adjacency(self) -> EdgeMap:
        """Outbound edges for every vertex, as a fresh copy."""
        return {name: dict(targets) for name, targets in self._outbound.items()}

    def predecessors(self) -> EdgeMap:
        """Inbound edges for every vertex, as a fresh copy."""
        return {name: dict(sources) for name, sources in self._inbound.items()}

    def _reaches(self, start: str, goal: str) -> bool:
        if start == goal:
            return True
        seen = {start}
        stack = [start]
        while stack:
            current = stack.pop()
            for child in self._outbound[current]:
                if child == goal:
                    return True
                if child not in seen:
                    seen.add(child)
                    stack.append(child)
        return False
