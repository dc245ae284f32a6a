"""Depth-first traversal with three-coloring for cycle detection."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING

from dagorder._errors import CycleError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from ._store import Graph

logger = logging.getLogger(__name__)


class VisitStatus(StrEnum):
    """Where a vertex stands in the current traversal."""

    UNVISITED = auto()  # Not reached yet
    IN_PROGRESS = auto()  # On the active path; reaching it again closes a cycle
    FINISHED = auto()  # Explored together with everything it depends on


@dataclass(slots=True)
class TraversalState:
    """Mutable context shared by every traversal of a single sort.

    Attributes:
        in_progress: Keys on the active path, in the order they were entered.
        finished: Keys that are fully explored.
        order: Finished keys in the order they finished (post-order).

    """

    in_progress: dict[str, None] = field(default_factory=dict)
    finished: set[str] = field(default_factory=set)
    order: list[str] = field(default_factory=list)

    def status(self, key: str) -> VisitStatus:
        """Get the visit status of ``key``."""
        if key in self.finished:
            return VisitStatus.FINISHED
        if key in self.in_progress:
            return VisitStatus.IN_PROGRESS
        return VisitStatus.UNVISITED

    def path_from(self, key: str) -> tuple[str, ...]:
        """The active path from ``key`` to the current vertex, closed back to ``key``."""
        path = list(self.in_progress)
        return (*path[path.index(key) :], key)

    def enter(self, key: str) -> None:
        self.in_progress[key] = None

    def finish(self, key: str) -> None:
        del self.in_progress[key]
        self.finished.add(key)
        self.order.append(key)


def depth_first_visit[T](graph: Graph[T], start: str, state: TraversalState) -> None:
    """Explore every vertex reachable from ``start`` and record the finish order.

    Each vertex is marked in progress when entered and finished once all of
    its neighbors are finished, at which point it is appended to
    ``state.order``. A vertex therefore always lands in ``state.order`` after
    every vertex it depends on.

    The walk keeps its own stack of ``(key, remaining neighbors)`` frames, so
    long dependency chains are not limited by the interpreter's recursion
    limit. Neighbors are visited in the order their edges were added.

    Args:
        graph: The graph to walk.
        start: Key of an unvisited vertex to start from.
        state: Traversal context, updated in place.

    Raises:
        CycleError: If an edge leads back to a vertex that is still in
            progress. ``state`` is left mid-traversal and must be discarded.

    """
    logger.debug(f"Starting traversal at '{start}'")
    state.enter(start)
    stack: list[tuple[str, Iterator[str]]] = [(start, iter(graph.neighbors(start)))]

    while stack:
        key, remaining = stack[-1]
        for neighbor in remaining:
            status = state.status(neighbor)
            if status is VisitStatus.IN_PROGRESS:
                raise CycleError(key, neighbor, cycle=state.path_from(neighbor))
            if status is VisitStatus.UNVISITED:
                state.enter(neighbor)
                stack.append((neighbor, iter(graph.neighbors(neighbor))))
                break
        else:
            stack.pop()
            state.finish(key)
            logger.debug(f"Finished '{key}'")
