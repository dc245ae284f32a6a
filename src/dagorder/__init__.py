"""Dependency ordering: topological sort with cycle detection."""

__all__ = [
    "CycleError",
    "DependencyCycleError",
    "DependencyDocument",
    "DependencyFileError",
    "DuplicateEdgeError",
    "DuplicateVertexError",
    "EdgeEndpoint",
    "Graph",
    "GraphError",
    "NotSortedError",
    "SortResult",
    "TopologicalSorter",
    "TraversalState",
    "UnitSpec",
    "UnknownDependencyError",
    "UnregisteredVertexError",
    "Vertex",
    "VisitStatus",
    "depth_first_visit",
    "find_cycle",
    "load_dependency_file",
    "parse_dependency_document",
    "resolve_order",
    "topological_sort",
]

from ._errors import (
    CycleError,
    DuplicateEdgeError,
    DuplicateVertexError,
    EdgeEndpoint,
    GraphError,
    NotSortedError,
    UnregisteredVertexError,
)
from ._graph import (
    Graph,
    SortResult,
    TopologicalSorter,
    TraversalState,
    Vertex,
    VisitStatus,
    depth_first_visit,
    find_cycle,
    topological_sort,
)
from ._loader import (
    DependencyCycleError,
    DependencyDocument,
    DependencyFileError,
    UnitSpec,
    UnknownDependencyError,
    load_dependency_file,
    parse_dependency_document,
    resolve_order,
)
