"""Tests for depth-first search and DFS forests."""

import pytest

from sccgraph import DfsColor, DfsProps, Graph, UnknownNodeError
from sccgraph._algorithms import dfs, dfs_visit, init_dfs_map


@pytest.fixture
def diamond() -> Graph[str]:
    # a -> b -> d, a -> c -> d
    return Graph.from_edges("abcd", [("a", "b"), ("a", "c"), ("b", "d"), ("c", "d")])


class TestInitDfsMap:
    def test_all_white(self) -> None:
        props = init_dfs_map(["a", "b"])
        assert props == {"a": DfsProps(), "b": DfsProps()}
        assert props["a"].color is DfsColor.WHITE
        assert props["a"].parent is None
        assert props["a"].discovery_time == -1
        assert props["a"].finish_time == -1
        assert props["a"].is_root

    def test_entries_are_independent(self) -> None:
        props = init_dfs_map(["a", "b"])
        props["a"].color = DfsColor.BLACK
        assert props["b"].color is DfsColor.WHITE


class TestDfsVisit:
    def test_times_and_parents(self, diamond: Graph[str]) -> None:
        props = init_dfs_map(diamond.nodes)
        time, visited = diamond.dfs_visit("a", props)

        assert time == 8
        assert visited == ["a", "b", "d", "c"]
        assert [(props[n].discovery_time, props[n].finish_time) for n in "abcd"] == [
            (1, 8),
            (2, 5),
            (6, 7),
            (3, 4),
        ]
        assert props["a"].parent is None
        assert props["b"].parent == "a"
        assert props["c"].parent == "a"
        assert props["d"].parent == "b"
        assert all(p.color is DfsColor.BLACK for p in props.values())

    def test_continues_clock(self, diamond: Graph[str]) -> None:
        time, visited = diamond.dfs_visit("d", time=10)
        assert time == 12
        assert visited == ["d"]

    def test_only_reachable_nodes_are_visited(self, diamond: Graph[str]) -> None:
        props = init_dfs_map(diamond.nodes)
        _, visited = diamond.dfs_visit("b", props)
        assert visited == ["b", "d"]
        assert props["a"].color is DfsColor.WHITE
        assert props["c"].color is DfsColor.WHITE

    def test_start_node_must_be_white(self, diamond: Graph[str]) -> None:
        props = diamond.dfs()
        with pytest.raises(ValueError, match="unvisited"):
            diamond.dfs_visit("a", props)
        assert props["a"].discovery_time == 1
        assert props["a"].finish_time == 8

    def test_skips_non_white_successors(self) -> None:
        graph = Graph.from_edges("abc", [("a", "b"), ("a", "c")])
        props = init_dfs_map(graph.nodes)
        props["b"].color = DfsColor.BLACK
        _, visited = graph.dfs_visit("a", props)
        assert visited == ["a", "c"]
        assert props["b"].parent is None

    def test_cycle(self) -> None:
        graph = Graph.from_edges("abc", [("a", "b"), ("b", "c"), ("c", "a")])
        time, visited = graph.dfs_visit("b")
        assert time == 6
        assert visited == ["b", "c", "a"]

    def test_pre_order_concatenates_subtrees(self) -> None:
        # a -> b -> (c, d), a -> e -> f
        graph = Graph.from_edges(
            "abcdef",
            [("a", "b"), ("b", "c"), ("b", "d"), ("a", "e"), ("e", "f")],
        )
        _, visited = graph.dfs_visit("a")
        assert visited == ["a", "b", "c", "d", "e", "f"]

    def test_unknown_node(self, diamond: Graph[str]) -> None:
        with pytest.raises(UnknownNodeError):
            diamond.dfs_visit("z")

    def test_works_on_plain_mappings(self) -> None:
        props = init_dfs_map([1, 2, 3])
        time, visited = dfs_visit({1: [2, 3], 2: [], 3: [1]}, 1, props)
        assert time == 6
        assert visited == [1, 2, 3]

    def test_deep_chain_does_not_hit_recursion_limit(self) -> None:
        size = 20_000
        successors = {n: [n + 1] for n in range(size - 1)}
        successors[size - 1] = []
        props = init_dfs_map(successors)
        time, visited = dfs_visit(successors, 0, props)
        assert time == 2 * size
        assert visited == list(range(size))
        assert props[size - 1].discovery_time == size
        assert props[size - 1].finish_time == size + 1
        assert props[0].finish_time == 2 * size


class TestDfs:
    def test_natural_order(self) -> None:
        graph = Graph.from_edges("abc", [("b", "a")])
        props = graph.dfs()
        assert (props["a"].discovery_time, props["a"].finish_time) == (1, 2)
        assert (props["b"].discovery_time, props["b"].finish_time) == (3, 4)
        assert (props["c"].discovery_time, props["c"].finish_time) == (5, 6)
        assert all(p.is_root for p in props.values())

    def test_key_changes_root_order(self) -> None:
        graph = Graph.from_edges("abc", [("b", "a")])
        props = graph.dfs(key=lambda node: -ord(node))
        assert props["c"].discovery_time == 1
        assert props["b"].discovery_time == 3
        assert props["a"].parent == "b"
        assert (props["a"].discovery_time, props["a"].finish_time) == (4, 5)

    def test_key_ties_fall_back_to_natural_order(self) -> None:
        graph = Graph.from_edges(["delta", "alpha", "gamma", "beta"])
        props = graph.dfs(key=lambda node: 0)
        assert [props[node].discovery_time for node in ("alpha", "beta", "delta", "gamma")] == [1, 3, 5, 7]

    def test_partial_key_ties(self) -> None:
        graph = Graph.from_edges("dcba")
        props = graph.dfs(key=lambda node: node in "cd")
        assert [props[node].discovery_time for node in "abcd"] == [1, 3, 5, 7]

    def test_every_node_finished(self, diamond: Graph[str]) -> None:
        props = diamond.dfs()
        assert set(props) == set(diamond.nodes)
        assert all(p.color is DfsColor.BLACK for p in props.values())

    def test_times_are_a_permutation(self, diamond: Graph[str]) -> None:
        props = diamond.dfs()
        times = [p.discovery_time for p in props.values()] + [p.finish_time for p in props.values()]
        assert sorted(times) == list(range(1, 2 * len(diamond) + 1))

    def test_empty_graph(self) -> None:
        assert Graph().dfs() == {}

    def test_does_not_mutate_graph(self, diamond: Graph[str]) -> None:
        before = list(diamond.edges())
        diamond.dfs()
        assert list(diamond.edges()) == before

    def test_plain_mapping(self) -> None:
        props = dfs({"x": ["y"], "y": []}, ["y", "x"])
        assert props["x"].discovery_time == 1
        assert props["y"].parent == "x"
        assert props["y"].finish_time == 3


class TestDfsForest:
    def test_tree_edges(self, diamond: Graph[str]) -> None:
        forest = diamond.dfs_forest()
        assert forest == Graph.from_edges("abcd", [("a", "b"), ("a", "c"), ("b", "d")])

    def test_one_tree_per_root(self) -> None:
        graph = Graph.from_edges("abcd", [("a", "b"), ("c", "d"), ("d", "a")])
        forest = graph.dfs_forest()
        # a reaches b; c then reaches d, whose successor a is already finished
        assert list(forest.edges()) == [("a", "b"), ("c", "d")]

    def test_key_changes_forest(self) -> None:
        graph = Graph.from_edges("abcd", [("a", "b"), ("c", "d"), ("d", "a")])
        forest = graph.dfs_forest(key=lambda node: -ord(node))
        # d is visited first and pulls in a and b
        assert list(forest.edges()) == [("a", "b"), ("d", "a")]

    def test_keeps_nodes_and_labeler(self) -> None:
        graph = Graph.from_edges("ab", [], labeler=str.upper)
        forest = graph.dfs_forest()
        assert forest.nodes == graph.nodes
        assert list(forest.edges()) == []
        assert forest.labeler("a") == "A"

    def test_forest_has_no_cycles(self) -> None:
        graph = Graph.from_edges("abc", [("a", "b"), ("b", "c"), ("c", "a"), ("a", "a")])
        forest = graph.dfs_forest()
        assert list(forest.edges()) == [("a", "b"), ("b", "c")]
        assert all(len(forest.predecessors(node)) <= 1 for node in forest)
