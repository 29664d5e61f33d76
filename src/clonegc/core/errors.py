"""Exception hierarchy for clonegc.

Two failure domains exist and are kept apart:

- DiscoveryError: the storage backend could not be read, or the facts it
  returned are inconsistent. The run cannot continue without complete facts.
- GraphInvariantError: a graph mutation was rejected. These indicate a logic
  defect in pruning or flattening, never a transient condition.

Usage:
    from clonegc.core.errors import CloneGCError, DiscoveryError

    try:
        forest = build_forest(storage, oracle)
    except DiscoveryError as e:
        user_output(f"Discovery failed: {e}")
"""

from collections.abc import Generator
from contextlib import contextmanager
from enum import Enum


class Phase(Enum):
    """Stage of a cleanup run in which an error surfaced."""

    DISCOVERY = "discovery"
    FOREST_BUILD = "forest-build"
    PRUNING = "pruning"
    FLATTENING = "flattening"


class CloneGCError(Exception):
    """Base exception for all clonegc errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} ({self.details})"
        return self.message


class ConfigurationError(CloneGCError):
    """Invalid configuration value or malformed config file."""

    pass


# =============================================================================
# Discovery Errors
# =============================================================================


class DiscoveryError(CloneGCError):
    """Storage facts could not be read or do not agree with each other."""

    def __init__(
        self,
        message: str,
        resource: str | None = None,
        phase: Phase = Phase.DISCOVERY,
    ):
        details: dict = {"phase": phase.value}
        if resource is not None:
            details["resource"] = resource
        super().__init__(message, details)
        self.resource = resource
        self.phase = phase


# =============================================================================
# Graph Invariant Errors
# =============================================================================


class GraphInvariantError(CloneGCError):
    """A graph mutation violated a structural invariant.

    The phase is unknown where the graph raises it and gets filled in by the
    caller that owns the mutation (see with_phase).
    """

    def __init__(self, message: str, **details: str):
        super().__init__(message, dict(details))
        self.phase: Phase | None = None

    def with_phase(self, phase: Phase) -> "GraphInvariantError":
        """Tag the error with the phase it occurred in and return it for re-raising."""
        self.phase = phase
        self.details["phase"] = phase.value
        return self


class DuplicateVertexError(GraphInvariantError):
    """Vertex with the same name is already present."""

    def __init__(self, name: str):
        super().__init__(f"Vertex '{name}' already exists", vertex=name)
        self.name = name


class MissingVertexError(GraphInvariantError):
    """Vertex referenced by an operation does not exist."""

    def __init__(self, name: str):
        super().__init__(f"Vertex '{name}' does not exist", vertex=name)
        self.name = name


class DuplicateEdgeError(GraphInvariantError):
    """Edge between the two vertices is already present."""

    def __init__(self, source: str, target: str):
        super().__init__(f"Edge {source}->{target} already exists", edge=f"{source}->{target}")
        self.source = source
        self.target = target


class MissingEdgeError(GraphInvariantError):
    """Edge referenced by an operation does not exist."""

    def __init__(self, source: str, target: str):
        super().__init__(f"Edge {source}->{target} does not exist", edge=f"{source}->{target}")
        self.source = source
        self.target = target


class CycleError(GraphInvariantError):
    """Inserting the edge would close a cycle."""

    def __init__(self, source: str, target: str):
        super().__init__(
            f"Edge {source}->{target} would create a cycle", edge=f"{source}->{target}"
        )
        self.source = source
        self.target = target


class VertexHasEdgesError(GraphInvariantError):
    """Vertex still has incident edges and cannot be removed."""

    def __init__(self, name: str, inbound: int, outbound: int):
        super().__init__(
            f"Vertex '{name}' still has {inbound} inbound and {outbound} outbound edges",
            vertex=name,
        )
        self.name = name
        self.inbound = inbound
        self.outbound = outbound


@contextmanager
def graph_phase(phase: Phase) -> Generator[None, None, None]:
    """Tag any GraphInvariantError raised inside the block with `phase`.

    Example:
        >>> with graph_phase(Phase.PRUNING):
        ...     graph.remove_vertex(name)
    """
    try:
        yield
    except GraphInvariantError as e:
        if e.phase is None:
            e.with_phase(phase)
        raise
