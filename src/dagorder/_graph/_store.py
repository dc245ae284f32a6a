"""Vertex arena and adjacency relation of a dependency graph."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dagorder._errors import (
    DuplicateEdgeError,
    DuplicateVertexError,
    EdgeEndpoint,
    UnregisteredVertexError,
)

if TYPE_CHECKING:
    from ._sort import SortResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Vertex[T]:
    """A registered vertex: a unique key and the payload stored under it.

    Attributes:
        key: Unique identifier of the vertex within its graph.
        data: Caller-supplied payload.

    """

    key: str
    data: T

    def __hash__(self) -> int:
        """Hash based on the key, so unhashable payloads are allowed."""
        return hash(self.key)


type VertexLike[T] = Vertex[T] | tuple[str, T]


@dataclass(slots=True)
class Graph[T]:
    """A directed graph whose edges point from a vertex to its dependencies.

    Vertices live in a single arena keyed by their string key. The adjacency
    relation is kept separately as a mapping from key to the ordered list of
    neighbor keys, so vertices never reference each other directly.

    An edge ``source -> dest`` means "source depends on dest": ``dest`` comes
    before ``source`` in a topological order.

    Both mappings are insertion ordered, which makes every query and the
    topological sort deterministic for a given construction sequence.

    Example:
        >>> graph = Graph[str]()
        >>> graph.register_vertex("libc", "C library")
        >>> graph.register_vertex("gcc", "compiler")
        >>> graph.add_edge("gcc", "libc")
        >>> graph.topological_sort().keys
        ('libc', 'gcc')

    """

    _vertices: dict[str, Vertex[T]] = field(default_factory=dict, init=False, repr=False)
    _adjacency: dict[str, list[str]] = field(default_factory=dict, init=False, repr=False)

    @classmethod
    def from_dependencies(
        cls,
        dependencies: Mapping[VertexLike[T], Iterable[str]] | Iterable[tuple[VertexLike[T], Iterable[str]]],
    ) -> Graph[T]:
        """Build a graph from vertices and the keys each of them depends on.

        All vertices are registered before any edge is added, so a vertex may
        name a dependency that is declared later in the input.

        Args:
            dependencies: Mapping (or iterable of pairs) from a vertex, given as
                a ``Vertex`` or a ``(key, data)`` tuple, to its dependency keys.

        Returns:
            A new, fully populated Graph.

        Raises:
            DuplicateVertexError: If two vertices share a key.
            UnregisteredVertexError: If a dependency key is never declared.
            DuplicateEdgeError: If a vertex lists the same dependency twice.

        Example:
            >>> graph = Graph.from_dependencies({("gcc", None): ["libc"], ("libc", None): []})
            >>> graph.topological_sort().keys
            ('libc', 'gcc')

        """
        items = dependencies.items() if isinstance(dependencies, Mapping) else dependencies
        pairs = [(_as_vertex(vertex), list(deps)) for vertex, deps in items]

        graph = cls()
        for vertex, _ in pairs:
            graph.register_vertex(vertex.key, vertex.data)
        for vertex, deps in pairs:
            for dep in deps:
                graph.add_edge(vertex.key, dep)
        return graph

    def register_vertex(self, key: str, data: T) -> None:
        """Register a new, unconnected vertex.

        Raises:
            DuplicateVertexError: If ``key`` is already registered. The existing
                vertex is left untouched.

        """
        if key in self._vertices:
            raise DuplicateVertexError(key)
        self._vertices[key] = Vertex(key=key, data=data)
        self._adjacency[key] = []
        logger.debug(f"Registered vertex '{key}'")

    def add_edge(self, source: str, dest: str) -> None:
        """Add the edge ``source -> dest`` ("source depends on dest").

        Both vertices must already be registered; edges never create vertices.

        Raises:
            UnregisteredVertexError: If either endpoint is unknown. The source
                side is checked first.
            DuplicateEdgeError: If the edge already exists.

        """
        if source not in self._vertices:
            raise UnregisteredVertexError(source, EdgeEndpoint.SOURCE)
        if dest not in self._vertices:
            raise UnregisteredVertexError(dest, EdgeEndpoint.DESTINATION)

        neighbors = self._adjacency[source]
        if dest in neighbors:
            raise DuplicateEdgeError(source, dest)
        neighbors.append(dest)
        logger.debug(f"Added edge '{source}' -> '{dest}'")

    def vertices(self) -> tuple[str, ...]:
        """Keys of all registered vertices, in registration order."""
        return tuple(self._vertices)

    def neighbors(self, key: str) -> tuple[str, ...]:
        """Keys the vertex ``key`` has an edge to, in the order the edges were added."""
        self._require(key)
        return tuple(self._adjacency[key])

    def vertex(self, key: str) -> Vertex[T]:
        """Get the vertex registered under ``key``."""
        self._require(key)
        return self._vertices[key]

    def data(self, key: str) -> T:
        """Get the payload registered under ``key``."""
        return self.vertex(key).data

    def edges(self) -> list[tuple[str, str]]:
        """All edges as ``(source, dest)`` pairs, grouped by source in registration order."""
        return [(source, dest) for source, neighbors in self._adjacency.items() for dest in neighbors]

    def dependents(self, key: str) -> tuple[str, ...]:
        """Keys of the vertices that have an edge to ``key``."""
        self._require(key)
        return tuple(source for source, neighbors in self._adjacency.items() if key in neighbors)

    def roots(self) -> tuple[str, ...]:
        """Vertices without dependencies (no outgoing edges)."""
        return tuple(key for key, neighbors in self._adjacency.items() if not neighbors)

    def leaves(self) -> tuple[str, ...]:
        """Vertices nothing depends on (no incoming edges)."""
        targets = {dest for neighbors in self._adjacency.values() for dest in neighbors}
        return tuple(key for key in self._vertices if key not in targets)

    def ancestors(self, key: str) -> frozenset[str]:
        """All vertices ``key`` transitively depends on."""
        self._require(key)
        return self._reachable(key, self.neighbors)

    def descendants(self, key: str) -> frozenset[str]:
        """All vertices that transitively depend on ``key``."""
        self._require(key)
        return self._reachable(key, self.dependents)

    def topological_sort(self) -> SortResult[T]:
        """Return the vertices ordered so that dependencies come first.

        Raises:
            CycleError: If the graph contains a cycle.

        """
        from ._sort import topological_sort  # noqa: PLC0415

        return topological_sort(self)

    def has_cycle(self) -> bool:
        """Check if the graph contains a cycle."""
        from ._sort import find_cycle  # noqa: PLC0415

        return find_cycle(self) is not None

    def _require(self, key: str) -> None:
        if key not in self._vertices:
            raise UnregisteredVertexError(key)

    @staticmethod
    def _reachable(start: str, step: Callable[[str], Iterable[str]]) -> frozenset[str]:
        visited: set[str] = set()
        stack = list(step(start))
        while stack:
            current = stack.pop()
            if current not in visited:
                visited.add(current)
                stack.extend(step(current))
        return frozenset(visited)

    def __len__(self) -> int:
        """Return the number of vertices in the graph."""
        return len(self._vertices)

    def __contains__(self, key: object) -> bool:
        """Check if a vertex is registered under ``key``."""
        return key in self._vertices

    def __iter__(self) -> Iterator[Vertex[T]]:
        """Iterate over the vertices in registration order."""
        return iter(self._vertices.values())


def _as_vertex[T](vertex: VertexLike[T]) -> Vertex[T]:
    if isinstance(vertex, Vertex):
        return vertex
    key, data = vertex
    return Vertex(key=key, data=data)
