"""Tests for Graph registration, edge validation and queries."""

import pytest

from dagorder import (
    DuplicateEdgeError,
    DuplicateVertexError,
    EdgeEndpoint,
    Graph,
    UnregisteredVertexError,
    Vertex,
)


@pytest.fixture
def toolchain() -> Graph[str]:
    """build-essential -> make, gcc; make -> gcc; gcc -> libc."""
    return Graph.from_dependencies(
        {
            ("build-essential", "meta package"): ["make", "gcc"],
            ("make", "build tool"): ["gcc"],
            ("gcc", "compiler"): ["libc"],
            ("libc", "C library"): [],
        },
    )


class TestRegisterVertex:
    """Tests for vertex registration."""

    def test_empty_graph(self) -> None:
        graph = Graph[str]()
        assert len(graph) == 0
        assert graph.vertices() == ()
        assert graph.edges() == []

    def test_register_single_vertex(self) -> None:
        graph = Graph[str]()
        graph.register_vertex("a", "payload")
        assert "a" in graph
        assert graph.vertices() == ("a",)
        assert graph.neighbors("a") == ()
        assert graph.data("a") == "payload"
        assert graph.vertex("a") == Vertex(key="a", data="payload")

    def test_vertices_keep_registration_order(self) -> None:
        graph = Graph[int]()
        for i, key in enumerate(["c", "a", "b"]):
            graph.register_vertex(key, i)
        assert graph.vertices() == ("c", "a", "b")
        assert [vertex.key for vertex in graph] == ["c", "a", "b"]

    def test_duplicate_vertex_is_rejected(self) -> None:
        graph = Graph[int]()
        graph.register_vertex("a", 1)
        with pytest.raises(DuplicateVertexError, match="'a' is already registered") as excinfo:
            graph.register_vertex("a", 2)
        assert excinfo.value.key == "a"

    def test_duplicate_vertex_keeps_first_registration(self) -> None:
        graph = Graph[int]()
        graph.register_vertex("a", 1)
        graph.register_vertex("b", 2)
        graph.add_edge("a", "b")
        with pytest.raises(DuplicateVertexError):
            graph.register_vertex("a", 3)
        assert len(graph) == 2
        assert graph.data("a") == 1
        assert graph.neighbors("a") == ("b",)

    def test_unhashable_payload(self) -> None:
        graph = Graph[dict[str, int]]()
        graph.register_vertex("a", {"x": 1})
        assert graph.data("a") == {"x": 1}
        assert hash(graph.vertex("a")) == hash("a")


class TestAddEdge:
    """Tests for edge validation."""

    def test_edge_is_added_to_source_adjacency(self) -> None:
        graph = Graph[None]()
        graph.register_vertex("a", None)
        graph.register_vertex("b", None)
        graph.add_edge("a", "b")
        assert graph.neighbors("a") == ("b",)
        assert graph.neighbors("b") == ()
        assert graph.edges() == [("a", "b")]

    def test_neighbors_keep_insertion_order(self) -> None:
        graph = Graph[None]()
        for key in ["a", "b", "c", "d"]:
            graph.register_vertex(key, None)
        graph.add_edge("a", "d")
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        assert graph.neighbors("a") == ("d", "b", "c")

    def test_unregistered_destination(self) -> None:
        graph = Graph[None]()
        graph.register_vertex("a", None)
        with pytest.raises(UnregisteredVertexError, match="destination vertex 'missing'") as excinfo:
            graph.add_edge("a", "missing")
        assert excinfo.value.key == "missing"
        assert excinfo.value.endpoint is EdgeEndpoint.DESTINATION
        assert graph.neighbors("a") == ()
        assert "missing" not in graph

    def test_unregistered_source(self) -> None:
        graph = Graph[None]()
        graph.register_vertex("a", None)
        with pytest.raises(UnregisteredVertexError, match="source vertex 'missing'") as excinfo:
            graph.add_edge("missing", "a")
        assert excinfo.value.key == "missing"
        assert excinfo.value.endpoint is EdgeEndpoint.SOURCE
        assert graph.edges() == []
        assert len(graph) == 1

    def test_both_endpoints_unregistered_reports_source(self) -> None:
        graph = Graph[None]()
        with pytest.raises(UnregisteredVertexError) as excinfo:
            graph.add_edge("x", "y")
        assert excinfo.value.key == "x"
        assert excinfo.value.endpoint is EdgeEndpoint.SOURCE
        assert len(graph) == 0

    def test_duplicate_edge_is_rejected(self) -> None:
        graph = Graph[None]()
        graph.register_vertex("a", None)
        graph.register_vertex("b", None)
        graph.add_edge("a", "b")
        with pytest.raises(DuplicateEdgeError, match="'a' -> 'b' already exists") as excinfo:
            graph.add_edge("a", "b")
        assert (excinfo.value.source, excinfo.value.dest) == ("a", "b")
        assert graph.neighbors("a") == ("b",)

    def test_reverse_edge_is_not_a_duplicate(self) -> None:
        graph = Graph[None]()
        graph.register_vertex("a", None)
        graph.register_vertex("b", None)
        graph.add_edge("a", "b")
        graph.add_edge("b", "a")
        assert graph.edges() == [("a", "b"), ("b", "a")]

    def test_self_loop_is_accepted(self) -> None:
        graph = Graph[None]()
        graph.register_vertex("a", None)
        graph.add_edge("a", "a")
        assert graph.neighbors("a") == ("a",)

    def test_lookup_of_unknown_key(self) -> None:
        graph = Graph[None]()
        with pytest.raises(UnregisteredVertexError, match="Vertex 'nope' is not registered") as excinfo:
            graph.neighbors("nope")
        assert excinfo.value.endpoint is None
        with pytest.raises(KeyError):
            graph.data("nope")


class TestFromDependencies:
    """Tests for bulk construction."""

    def test_forward_references(self) -> None:
        graph = Graph.from_dependencies({("b", 2): ["a"], ("a", 1): []})
        assert graph.vertices() == ("b", "a")
        assert graph.neighbors("b") == ("a",)
        assert graph.data("a") == 1

    def test_accepts_vertices_and_pairs(self) -> None:
        graph = Graph.from_dependencies(
            [
                (Vertex(key="app", data={"port": 80}), ["db"]),
                (("db", {"port": 5432}), []),
            ],
        )
        assert graph.data("app") == {"port": 80}
        assert graph.edges() == [("app", "db")]

    def test_unknown_dependency_aborts(self) -> None:
        with pytest.raises(UnregisteredVertexError) as excinfo:
            Graph.from_dependencies({("a", None): ["typo"]})
        assert excinfo.value.key == "typo"
        assert excinfo.value.endpoint is EdgeEndpoint.DESTINATION

    def test_duplicate_dependency_aborts(self) -> None:
        with pytest.raises(DuplicateEdgeError):
            Graph.from_dependencies({("a", None): ["b", "b"], ("b", None): []})

    def test_duplicate_vertex_aborts(self) -> None:
        with pytest.raises(DuplicateVertexError):
            Graph.from_dependencies([(("a", 1), []), (("a", 2), [])])


class TestGraphQueries:
    """Tests for read-only graph queries."""

    def test_edges(self, toolchain: Graph[str]) -> None:
        assert toolchain.edges() == [
            ("build-essential", "make"),
            ("build-essential", "gcc"),
            ("make", "gcc"),
            ("gcc", "libc"),
        ]

    def test_dependents(self, toolchain: Graph[str]) -> None:
        assert toolchain.dependents("gcc") == ("build-essential", "make")
        assert toolchain.dependents("build-essential") == ()

    def test_roots_and_leaves(self, toolchain: Graph[str]) -> None:
        assert toolchain.roots() == ("libc",)
        assert toolchain.leaves() == ("build-essential",)

    def test_ancestors(self, toolchain: Graph[str]) -> None:
        assert toolchain.ancestors("build-essential") == frozenset({"make", "gcc", "libc"})
        assert toolchain.ancestors("gcc") == frozenset({"libc"})
        assert toolchain.ancestors("libc") == frozenset()

    def test_descendants(self, toolchain: Graph[str]) -> None:
        assert toolchain.descendants("libc") == frozenset({"gcc", "make", "build-essential"})
        assert toolchain.descendants("build-essential") == frozenset()

    def test_transitive_queries_terminate_on_cycles(self) -> None:
        graph = Graph.from_dependencies({("a", None): ["b"], ("b", None): ["a"]})
        assert graph.ancestors("a") == frozenset({"a", "b"})
        assert graph.descendants("b") == frozenset({"a", "b"})

    def test_contains(self, toolchain: Graph[str]) -> None:
        assert "gcc" in toolchain
        assert "clang" not in toolchain
        assert len(toolchain) == 4


def test_mutations_are_logged_at_debug(caplog: pytest.LogCaptureFixture) -> None:
    graph: Graph[None] = Graph()

    with caplog.at_level("DEBUG", logger="dagorder"):
        graph.register_vertex("gcc", None)
        graph.register_vertex("libc", None)
        graph.add_edge("gcc", "libc")

    assert caplog.messages == [
        "Registered vertex 'gcc'",
        "Registered vertex 'libc'",
        "Added edge 'gcc' -> 'libc'",
    ]
