"""Topological sort driver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dagorder._errors import CycleError, NotSortedError

from ._traversal import TraversalState, VisitStatus, depth_first_visit

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._store import Graph, Vertex

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SortResult[T]:
    """One valid topological order of a graph.

    ``keys[i]`` is a vertex key and ``data[i]`` is the payload registered
    under it. Every key appears after all keys it depends on.

    Attributes:
        keys: Vertex keys, dependencies first.
        data: Payloads aligned with ``keys``.

    """

    keys: tuple[str, ...] = ()
    data: tuple[T, ...] = ()

    def items(self) -> Iterator[tuple[str, T]]:
        """Iterate over ``(key, data)`` pairs in sorted order."""
        return zip(self.keys, self.data, strict=True)

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)


def topological_sort[T](graph: Graph[T]) -> SortResult[T]:
    """Sort a graph topologically (dependencies before dependents).

    A depth-first traversal is started from every vertex that has not been
    reached yet, in registration order, so disconnected parts of the graph
    are included. The result is the finish order of those traversals.

    When several valid orders exist, the one returned is determined by the
    vertex registration order and the order in which edges were added.

    Args:
        graph: The graph to sort. It is only read.

    Returns:
        The sorted keys and their payloads.

    Raises:
        CycleError: If the graph contains a cycle. No partial order is returned.

    Example:
        >>> graph = Graph.from_dependencies({("b", 2): ["a"], ("a", 1): []})
        >>> result = topological_sort(graph)
        >>> result.keys, result.data
        (('a', 'b'), (1, 2))

    """
    state = TraversalState()
    for key in graph.vertices():
        if state.status(key) is VisitStatus.UNVISITED:
            depth_first_visit(graph, key, state)

    logger.debug(f"Sorted {len(state.order)} vertices")
    return SortResult(
        keys=tuple(state.order),
        data=tuple(graph.data(key) for key in state.order),
    )


def find_cycle[T](graph: Graph[T]) -> CycleError | None:
    """Return the error a sort of ``graph`` would raise, or None if it is acyclic."""
    try:
        topological_sort(graph)
    except CycleError as e:
        return e
    return None


@dataclass(slots=True)
class TopologicalSorter[T]:
    """Sort a graph on request and keep the last result for later reads.

    The result lives on the sorter, never on the graph. Reading it does not
    sort again: call :meth:`sort` after mutating the graph to refresh it.

    Example:
        >>> sorter = TopologicalSorter(Graph.from_dependencies({("a", 1): []}))
        >>> sorter.sort().keys
        ('a',)
        >>> sorter.sorted_keys()
        ('a',)

    """

    graph: Graph[T]
    _result: SortResult[T] | None = field(default=None, init=False, repr=False)

    def sort(self) -> SortResult[T]:
        """Sort the graph and store the result.

        Raises:
            CycleError: If the graph contains a cycle. Any stored result is
                cleared first.

        """
        self._result = None
        self._result = topological_sort(self.graph)
        return self._result

    @property
    def result(self) -> SortResult[T]:
        """The result of the last successful :meth:`sort`."""
        if self._result is None:
            msg = "No sorted result available; call sort() first"
            raise NotSortedError(msg)
        return self._result

    def sorted_keys(self) -> tuple[str, ...]:
        """Keys of the last sort, dependencies first."""
        return self.result.keys

    def sorted_data(self) -> tuple[T, ...]:
        """Payloads of the last sort, aligned with :meth:`sorted_keys`."""
        return self.result.data

    def sorted_vertices(self) -> list[Vertex[T]]:
        """Vertices of the last sort, in order."""
        return [self.graph.vertex(key) for key in self.result.keys]
