"""Exceptions raised by graph construction and sorting."""

from enum import StrEnum, auto


class EdgeEndpoint(StrEnum):
    """Which side of an edge a key was given for."""

    SOURCE = auto()  # The dependent vertex, where the edge starts
    DESTINATION = auto()  # The dependency, where the edge ends


class GraphError(Exception):
    """Base class for all graph errors."""


class DuplicateVertexError(GraphError):
    """A vertex was registered under a key that is already in use."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Vertex '{key}' is already registered")


class UnregisteredVertexError(GraphError, KeyError):
    """A key was used that no registered vertex carries."""

    def __init__(self, key: str, endpoint: EdgeEndpoint | None = None) -> None:
        self.key = key
        self.endpoint = endpoint
        if endpoint is None:
            msg = f"Vertex '{key}' is not registered"
        else:
            msg = f"Cannot add edge: {endpoint} vertex '{key}' is not registered"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class DuplicateEdgeError(GraphError):
    """An edge between the same ordered pair of vertices already exists."""

    def __init__(self, source: str, dest: str) -> None:
        self.source = source
        self.dest = dest
        super().__init__(f"Edge '{source}' -> '{dest}' already exists")


class CycleError(GraphError):
    """The graph contains a cycle, so no topological order exists.

    Attributes:
        source: The vertex whose outgoing edge closed the cycle.
        dest: The vertex on the current traversal path that the edge points back to.
        cycle: The vertices along the cycle, starting and ending with ``dest``.
            Empty when the path is not known.

    """

    def __init__(self, source: str, dest: str, cycle: tuple[str, ...] = ()) -> None:
        self.source = source
        self.dest = dest
        self.cycle = cycle
        msg = f"Cycle detected: edge '{source}' -> '{dest}' points back to a vertex that is still being explored"
        if cycle:
            msg += f" ({' -> '.join(cycle)})"
        super().__init__(msg)

    @property
    def edge(self) -> tuple[str, str]:
        """The closing edge as a ``(source, dest)`` pair."""
        return (self.source, self.dest)


class NotSortedError(GraphError):
    """A sorted result was requested before any successful sort."""
