"""Graph module providing the dependency graph and its topological sort.

This module contains:
- Graph[T]: vertex arena plus adjacency relation, with edge validation
- depth_first_visit: three-coloring depth-first traversal
- topological_sort / TopologicalSorter: ordering of vertices by dependencies
"""

from ._sort import SortResult, TopologicalSorter, find_cycle, topological_sort
from ._store import Graph, Vertex
from ._traversal import TraversalState, VisitStatus, depth_first_visit

__all__ = [
    "Graph",
    "SortResult",
    "TopologicalSorter",
    "TraversalState",
    "Vertex",
    "VisitStatus",
    "depth_first_visit",
    "find_cycle",
    "topological_sort",
]
