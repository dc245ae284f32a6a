"""Graph query functions for CLI commands.

This module provides pure functions over a loaded dependency graph.
No I/O, no Rich rendering.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from dagorder._graph import Graph, SortResult
    from dagorder._loader import UnitSpec


@dataclass(frozen=True, slots=True)
class OrderEntry:
    """One unit at its position in the install order."""

    position: int
    name: str
    depends_on: tuple[str, ...]
    description: str | None
    data: dict[str, Any]


@dataclass(frozen=True, slots=True)
class GraphSummary:
    """Counts describing a loaded dependency graph."""

    unit_count: int
    edge_count: int
    roots: tuple[str, ...]
    leaves: tuple[str, ...]


@dataclass(slots=True)
class TreeNode:
    """A node in a dependency tree for rendering."""

    name: str
    children: list[TreeNode] = field(default_factory=list)


def get_order_entries(result: SortResult[UnitSpec]) -> list[OrderEntry]:
    """Pair each sorted unit with its position and declaration."""
    return [
        OrderEntry(
            position=position,
            name=name,
            depends_on=unit.depends_on,
            description=unit.description,
            data=unit.data,
        )
        for position, (name, unit) in enumerate(result.items(), start=1)
    ]


def get_graph_summary(graph: Graph[UnitSpec]) -> GraphSummary:
    return GraphSummary(
        unit_count=len(graph),
        edge_count=len(graph.edges()),
        roots=graph.roots(),
        leaves=graph.leaves(),
    )


def get_dependency_tree(
    graph: Graph[UnitSpec],
    name: str,
    *,
    invert: bool = False,
    max_depth: int | None = None,
) -> TreeNode:
    """Build a dependency tree for visualization.

    The tree is built breadth-first, so every unit appears at most once, at
    its shortest distance from the root, under the first parent that reaches
    it there. Children keep the order the edges were added in.

    Args:
        graph: The loaded dependency graph.
        name: The unit at the root of the tree.
        invert: If False, show what the unit depends on.
                If True, show what depends on the unit.
        max_depth: Maximum depth to traverse (None for unlimited).

    Raises:
        UnregisteredVertexError: If the unit is not declared.

    """
    step = graph.dependents if invert else graph.neighbors
    root = TreeNode(name=name)
    visited = {name}
    queue: deque[tuple[TreeNode, int]] = deque([(root, 0)])

    while queue:
        node, depth = queue.popleft()
        if max_depth is not None and depth >= max_depth:
            continue
        for neighbor in step(node.name):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            child = TreeNode(name=neighbor)
            node.children.append(child)
            queue.append((child, depth + 1))

    return root
