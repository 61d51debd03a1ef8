import logging

import numpy as np
import pytest

from netpaths.algorithms.floyd_warshall import FloydWarshall
from netpaths.config import ShortestPathConfig
from netpaths.exceptions import (
    CostOverflowError,
    GraphTooLargeError,
    NegativeCycleError,
    NodeNotFoundError,
)
from netpaths.graph.strict_multidigraph import StrictMultiDiGraph
from netpaths.measure import Wrapping

# (source, transit, target, cost)
UNIFORM_EXPECTED = [
    ("A", "", "A", 0),
    ("A", "", "B", 1),
    ("A", "B", "C", 2),
    ("A", "BC", "D", 3),
    ("A", "B", "E", 2),
    ("A", "BE", "F", 3),
    ("A", "BEF", "G", 4),
    ("A", "BEFG", "H", 5),
    ("B", "CD", "A", 3),
    ("B", "", "B", 0),
    ("B", "", "C", 1),
    ("B", "C", "D", 2),
    ("B", "", "E", 1),
    ("B", "E", "F", 2),
    ("B", "EF", "G", 3),
    ("B", "EFG", "H", 4),
    ("C", "D", "A", 2),
    ("C", "DA", "B", 3),
    ("C", "", "C", 0),
    ("C", "", "D", 1),
    ("C", "DAB", "E", 4),
    ("C", "DABE", "F", 5),
    ("C", "DABEF", "G", 6),
    ("C", "DABEFG", "H", 7),
    ("D", "", "A", 1),
    ("D", "A", "B", 2),
    ("D", "AB", "C", 3),
    ("D", "", "D", 0),
    ("D", "AB", "E", 3),
    ("D", "ABE", "F", 4),
    ("D", "ABEF", "G", 5),
    ("D", "ABEFG", "H", 6),
    ("E", "", "E", 0),
    ("E", "", "F", 1),
    ("E", "F", "G", 2),
    ("E", "FG", "H", 3),
    ("F", "GH", "E", 3),
    ("F", "", "F", 0),
    ("F", "", "G", 1),
    ("F", "G", "H", 2),
    ("G", "H", "E", 2),
    ("G", "HE", "F", 3),
    ("G", "", "G", 0),
    ("G", "", "H", 1),
    ("H", "", "E", 1),
    ("H", "E", "F", 2),
    ("H", "EF", "G", 3),
    ("H", "", "H", 0),
]

WEIGHTED_DIRECTED_EXPECTED = [
    ("A", "", "A", 0),
    ("A", "", "B", 1),
    ("A", "B", "C", 3),
    ("A", "B", "D", 3),
    ("B", "", "B", 0),
    ("B", "", "C", 2),
    ("B", "", "D", 2),
    ("C", "", "C", 0),
    ("C", "", "D", 2),
    ("D", "", "D", 0),
]

WEIGHTED_UNDIRECTED_EXPECTED = [
    ("A", "", "A", 0),
    ("A", "", "B", 1),
    ("A", "B", "C", 3),
    ("A", "B", "D", 3),
    ("B", "", "A", 1),
    ("B", "", "B", 0),
    ("B", "", "C", 2),
    ("B", "", "D", 2),
    ("C", "B", "A", 3),
    ("C", "", "B", 2),
    ("C", "", "C", 0),
    ("C", "", "D", 2),
    ("D", "B", "A", 3),
    ("D", "", "B", 2),
    ("D", "", "C", 2),
    ("D", "", "D", 0),
]


def assert_every_path(routes, expected):
    received = {(route.source, route.target): route for route in routes}
    for source, transit, target, cost in expected:
        route = received.pop((source, target))
        path, received_cost = route.into_parts()
        assert received_cost == cost, f"cost of {source} -> {target}"
        assert path.source == source, f"source of {source} -> {target}"
        assert path.target == target, f"target of {source} -> {target}"
        assert path.transit == tuple(transit), f"transit of {source} -> {target}"
    assert not received


def assert_every_distance(routes, expected):
    received = {(route.source, route.target): route.cost for route in routes}
    for source, _, target, cost in expected:
        assert received.pop((source, target)) == cost, f"cost of {source} -> {target}"
    assert not received


class TestFloydWarshallTables:
    def test_uniform_directed_path(self, uniform):
        assert_every_path(FloydWarshall.directed().every_path(uniform), UNIFORM_EXPECTED)

    def test_uniform_directed_distance(self, uniform):
        assert_every_distance(
            FloydWarshall.directed().every_distance(uniform), UNIFORM_EXPECTED
        )

    def test_weighted_directed_path(self, weighted):
        assert_every_path(
            FloydWarshall.directed().every_path(weighted), WEIGHTED_DIRECTED_EXPECTED
        )

    def test_weighted_directed_distance(self, weighted):
        assert_every_distance(
            FloydWarshall.directed().every_distance(weighted), WEIGHTED_DIRECTED_EXPECTED
        )

    def test_weighted_undirected_path(self, weighted):
        assert_every_path(
            FloydWarshall.undirected().every_path(weighted), WEIGHTED_UNDIRECTED_EXPECTED
        )

    def test_weighted_undirected_distance(self, weighted):
        assert_every_distance(
            FloydWarshall.undirected().every_distance(weighted),
            WEIGHTED_UNDIRECTED_EXPECTED,
        )


class TestFloydWarshallQueries:
    @pytest.mark.parametrize("engine", [FloydWarshall.directed(), FloydWarshall.undirected()])
    def test_path_between(self, weighted, engine):
        route = engine.path_between(weighted, "A", "C")
        path, cost = route.into_parts()
        assert cost == 3
        assert path.to_list() == ["A", "B", "C"]

    def test_directed_path_from_filter(self, weighted):
        routes = list(FloydWarshall.directed().path_from(weighted, "A"))
        assert all(route.source == "A" for route in routes)
        assert {route.target for route in routes} == {"A", "B", "C", "D"}

    def test_directed_path_to_filter(self, weighted):
        routes = list(FloydWarshall.directed().path_to(weighted, "C"))
        assert all(route.target == "C" for route in routes)
        assert {route.source for route in routes} == {"A", "B", "C"}

    def test_undirected_path_to_filter(self, weighted):
        routes = list(FloydWarshall.undirected().path_to(weighted, "C"))
        assert {route.source for route in routes} == {"A", "B", "C", "D"}

    def test_distance_from_and_to(self, weighted):
        fw = FloydWarshall.directed()
        assert {r.target: r.cost for r in fw.distance_from(weighted, "A")} == {
            "A": 0,
            "B": 1,
            "C": 3,
            "D": 3,
        }
        assert {r.source: r.cost for r in fw.distance_to(weighted, "D")} == {
            "A": 3,
            "B": 2,
            "C": 2,
            "D": 0,
        }

    def test_unreachable_pairs_absent(self, disconnected):
        fw = FloydWarshall.directed()
        pairs = {(r.source, r.target) for r in fw.every_distance(disconnected)}
        assert pairs == {("A", "A"), ("A", "B"), ("B", "B"), ("C", "C"), ("C", "D"), ("D", "D")}
        assert fw.path_between(disconnected, "A", "D") is None
        assert fw.distance_between(disconnected, "B", "A") is None

    def test_negative_edges_without_cycle(self, negative_dag):
        fw = FloydWarshall.directed()
        route = fw.path_between(negative_dag, "A", "D")
        assert route.cost == 2
        assert route.path.transit == ("B",)
        assert fw.distance_between(negative_dag, "B", "D") == -2

    def test_parallel_edges_reduced_by_minimum(self, line1):
        assert FloydWarshall.directed().distance_between(line1, "C", "A") == 2

    def test_wrapping_costs(self):
        g = StrictMultiDiGraph.from_edges(
            [("A", "B", Wrapping(3, "uint8")), ("B", "C", Wrapping(4, "uint8"))]
        )
        assert FloydWarshall.directed().distance_between(g, "A", "C") == Wrapping(7, "uint8")

    def test_fixed_width_detour_that_would_overflow(self):
        g = StrictMultiDiGraph.from_edges(
            [
                ("A", "B", np.uint8(200)),
                ("B", "C", np.uint8(100)),
                ("A", "C", np.uint8(5)),
            ]
        )
        received = {
            (r.source, r.target): r.cost for r in FloydWarshall.directed().every_distance(g)
        }
        assert received[("A", "C")] == 5
        assert received[("A", "B")] == 200
        assert all(cost.dtype == np.uint8 for cost in received.values())


class TestFloydWarshallFailures:
    def test_directed_negative_cycle(self, negative_cycle):
        with pytest.raises(NegativeCycleError) as exc_info:
            FloydWarshall.directed().every_path(negative_cycle)
        assert exc_info.value.participants == frozenset({"A", "B", "C"})
        assert exc_info.value.context() == {"participants": frozenset({"A", "B", "C"})}

    def test_negative_cycle_reports_every_participant(self):
        # two disjoint negative cycles plus an innocent bystander
        g = StrictMultiDiGraph.from_edges(
            [
                ("A", "B", -1),
                ("B", "A", 0),
                ("C", "D", 2),
                ("D", "C", -5),
                ("E", "A", 1),
            ]
        )
        with pytest.raises(NegativeCycleError) as exc_info:
            FloydWarshall.directed().every_distance(g)
        assert exc_info.value.participants == {"A", "B", "C", "D"}

    def test_negative_self_loop(self):
        g = StrictMultiDiGraph.from_edges([("A", "A", -1), ("A", "B", 1)])
        with pytest.raises(NegativeCycleError) as exc_info:
            FloydWarshall.directed().distance_between(g, "A", "B")
        assert exc_info.value.participants == {"A"}

    def test_fixed_width_negative_cycle_is_not_an_overflow(self):
        # the cycle sums to -200, outside int8
        g = StrictMultiDiGraph.from_edges(
            [("A", "B", np.int8(-100)), ("B", "A", np.int8(-100))]
        )
        with pytest.raises(NegativeCycleError) as exc_info:
            FloydWarshall.directed().every_distance(g)
        assert exc_info.value.participants == {"A", "B"}

    def test_overflowing_distance_raises_before_iteration(self):
        g = StrictMultiDiGraph.from_edges(
            [("A", "B", np.uint8(200)), ("B", "C", np.uint8(100))]
        )
        fw = FloydWarshall.directed()
        with pytest.raises(CostOverflowError):
            fw.every_distance(g)
        with pytest.raises(CostOverflowError):
            fw.path_from(g, "B")

    def test_undirected_negative_edge_is_a_cycle(self, negative_dag):
        with pytest.raises(NegativeCycleError) as exc_info:
            FloydWarshall.undirected().every_path(negative_dag)
        assert {"B", "D"} <= exc_info.value.participants

    def test_negative_cycle_is_logged(self, negative_cycle, caplog):
        with caplog.at_level(logging.WARNING, logger="netpaths"):
            with pytest.raises(NegativeCycleError):
                FloydWarshall.directed().path_from(negative_cycle, "A")
        assert "negative cycle" in caplog.text

    def test_negative_cycle_is_deterministic(self, negative_cycle):
        fw = FloydWarshall.directed()
        seen = []
        for _ in range(2):
            with pytest.raises(NegativeCycleError) as exc_info:
                fw.every_distance(negative_cycle)
            seen.append(exc_info.value.participants)
        assert seen[0] == seen[1]

    def test_missing_node(self, weighted):
        fw = FloydWarshall.directed()
        with pytest.raises(NodeNotFoundError):
            fw.path_from(weighted, "Z")
        with pytest.raises(NodeNotFoundError):
            fw.distance_to(weighted, "Z")
        with pytest.raises(NodeNotFoundError):
            fw.distance_between(weighted, "Z", "A")

    def test_missing_node_checked_before_negative_cycle(self, negative_cycle):
        with pytest.raises(NodeNotFoundError):
            FloydWarshall.directed().path_from(negative_cycle, "Z")

    def test_node_bound(self, weighted):
        fw = FloydWarshall.directed(config=ShortestPathConfig(floyd_warshall_max_nodes=3))
        with pytest.raises(GraphTooLargeError) as exc_info:
            fw.every_distance(weighted)
        assert exc_info.value.node_count == 4
        assert exc_info.value.limit == 3

    def test_node_bound_allows_small_graph(self, weighted):
        fw = FloydWarshall.directed(config=ShortestPathConfig(floyd_warshall_max_nodes=4))
        assert len(list(fw.every_distance(weighted))) == 10
