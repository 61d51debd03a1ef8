"""Dijkstra shortest paths.

Single-source search over a priority frontier. The frontier is a binary heap
(``heapq``) of tentative costs; instead of decrease-key, an improved cost pushes
a fresh entry and the outdated one is skipped when popped (lazy deletion).
Nodes are finalized in non-decreasing cost order and each finalized node is
yielded immediately, so abandoning a result iterator also abandons the rest of
the search.

Ties between equal-cost candidates are broken by push order; callers should
not rely on which of several equal-cost paths is reported.

Costs are accumulated in ``Measure.exact()`` and narrowed back into the
query's measure when reported, so a fixed-width integer cost only fails when a
reported shortest cost does not fit. When the snapshot cannot rule that out,
the whole result is computed before the query returns, and
``CostOverflowError`` is raised by the call rather than mid-iteration.

Notes:
    Edge costs are not checked for negativity. With negative edges the search
    still terminates but may report non-optimal costs; this is the caller's
    responsibility. Use ``FloydWarshall`` when costs can be negative: it
    detects negative cycles and reports them as ``NegativeCycleError``.
"""

from __future__ import annotations

from heapq import heappop, heappush
from itertools import count
from typing import Dict, Iterator, List, Optional, Set, Tuple, TypeVar

from netpaths.algorithms.base import (
    Adjacency,
    Cost,
    GraphLike,
    GraphSnapshot,
    ShortestDistance,
    ShortestPath,
    ShortestPathEngine,
)
from netpaths.graph.strict_multidigraph import NodeID
from netpaths.graph.view import GraphView
from netpaths.logging import get_logger, log_duration
from netpaths.measure import Measure
from netpaths.paths.path import DirectRoute, Path, Route

logger = get_logger(__name__)

Predecessors = Dict[NodeID, Optional[NodeID]]
R = TypeVar("R")


class _FrontierEntry:
    """Heap entry ordered by cost under a measure, then by push order."""

    __slots__ = ("cost", "seq", "node", "measure")

    def __init__(self, cost: Cost, seq: int, node: NodeID, measure: Measure) -> None:
        self.cost = cost
        self.seq = seq
        self.node = node
        self.measure = measure

    def __lt__(self, other: _FrontierEntry) -> bool:
        if self.measure.less(self.cost, other.cost):
            return True
        if self.measure.less(other.cost, self.cost):
            return False
        return self.seq < other.seq


def _settle(
    adjacency: Adjacency,
    origin: NodeID,
    measure: Measure,
    predecessors: Predecessors,
) -> Iterator[Tuple[NodeID, Cost]]:
    """Yield ``(node, cost)`` for each node as it is finalized.

    ``predecessors`` is filled in place; a node's entry is final once the node
    has been yielded.
    """
    zero = measure.zero()
    tentative: Dict[NodeID, Cost] = {origin: zero}
    settled: Set[NodeID] = set()
    seq = count()
    frontier: List[_FrontierEntry] = [_FrontierEntry(zero, next(seq), origin, measure)]
    predecessors[origin] = None

    while frontier:
        entry = heappop(frontier)
        node = entry.node
        if node in settled:
            continue
        settled.add(node)
        yield node, entry.cost

        for neighbor, edge_cost in adjacency.get(node, ()):
            if neighbor in settled:
                continue
            candidate = measure.add(entry.cost, edge_cost)
            known = tentative.get(neighbor)
            if known is None or measure.less(candidate, known):
                tentative[neighbor] = candidate
                predecessors[neighbor] = node
                heappush(
                    frontier, _FrontierEntry(candidate, next(seq), neighbor, measure)
                )

    logger.debug("Dijkstra from %r settled %d node(s)", origin, len(settled))


def _walk(predecessors: Predecessors, node: NodeID) -> List[NodeID]:
    """Follow predecessor links from ``node`` back to the search origin."""
    chain = [node]
    step = predecessors[node]
    while step is not None:
        chain.append(step)
        step = predecessors[step]
    return chain


class Dijkstra(ShortestPathEngine, ShortestPath, ShortestDistance):
    """Dijkstra engine implementing both query contracts.

    Example:
        >>> dijkstra = Dijkstra.directed()
        >>> route = dijkstra.path_between(graph, "A", "C")
        >>> route.cost, route.path.to_list()
        (3, ['A', 'B', 'C'])
    """

    name = "Dijkstra"

    __slots__ = ()

    #
    # Search drivers
    #
    # Searches run in ``measure.exact()`` over an exact adjacency; only the
    # costs handed to callers are narrowed back into ``measure``.
    #
    def _routes_from(
        self, adjacency: Adjacency, measure: Measure, source: NodeID
    ) -> Iterator[Route]:
        predecessors: Predecessors = {}
        for node, cost in _settle(adjacency, source, measure.exact(), predecessors):
            chain = _walk(predecessors, node)
            chain.reverse()
            yield Route(Path.from_nodes(chain), measure.narrow(cost))

    def _routes_to(
        self, adjacency: Adjacency, measure: Measure, target: NodeID
    ) -> Iterator[Route]:
        # adjacency is reversed: predecessors point one hop closer to target
        predecessors: Predecessors = {}
        for node, cost in _settle(adjacency, target, measure.exact(), predecessors):
            chain = _walk(predecessors, node)
            yield Route(Path.from_nodes(chain), measure.narrow(cost))

    @staticmethod
    def _distances_from(
        adjacency: Adjacency, measure: Measure, source: NodeID
    ) -> Iterator[DirectRoute]:
        for node, cost in _settle(adjacency, source, measure.exact(), {}):
            yield DirectRoute(source, node, measure.narrow(cost))

    @staticmethod
    def _distances_to(
        adjacency: Adjacency, measure: Measure, target: NodeID
    ) -> Iterator[DirectRoute]:
        for node, cost in _settle(adjacency, target, measure.exact(), {}):
            yield DirectRoute(node, target, measure.narrow(cost))

    @staticmethod
    def _deliver(snapshot: GraphSnapshot, results: Iterator[R]) -> Iterator[R]:
        """Hand back ``results`` lazily unless a cost sum could fail.

        A reported cost that does not fit the measure would otherwise raise in
        the middle of iteration, so such searches are run to completion here.
        """
        if snapshot.sums_are_safe():
            return results
        logger.debug(
            "Dijkstra cost sums may not fit %r; computing results eagerly",
            snapshot.measure,
        )
        return iter(list(results))

    def _search_pair(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Tuple[Cost, Predecessors]]:
        view = GraphView.of(graph)
        self._require_node(view, source, "Source node")
        self._require_node(view, target, "Target node")
        snapshot = self._snapshot(view)
        adjacency = snapshot.exact().adjacency()
        predecessors: Predecessors = {}
        measure = snapshot.measure
        with log_duration(logger, f"Dijkstra {source!r} -> {target!r}"):
            for node, cost in _settle(adjacency, source, measure.exact(), predecessors):
                if node == target:
                    return measure.narrow(cost), predecessors
        return None

    #
    # ShortestPath
    #
    def path_between(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Route]:
        """Return the shortest route, or None if ``target`` is unreachable.

        The search stops as soon as ``target`` is finalized.

        Raises:
            NodeNotFoundError: If either endpoint is not in the graph.
            UnsupportedCostError: If an edge cost has no usable measure.
            CostOverflowError: If the shortest cost does not fit a fixed-width
                cost type.
        """
        found = self._search_pair(graph, source, target)
        if found is None:
            return None
        cost, predecessors = found
        chain = _walk(predecessors, target)
        chain.reverse()
        return Route(Path.from_nodes(chain), cost)

    def path_from(self, graph: GraphLike, source: NodeID) -> Iterator[Route]:
        """Lazily yield routes from ``source`` in non-decreasing cost order.

        Raises:
            NodeNotFoundError: If ``source`` is not in the graph.
            UnsupportedCostError: If an edge cost has no usable measure.
            CostOverflowError: If a reported cost does not fit a fixed-width
                cost type. Raised here, never during iteration.
        """
        view = GraphView.of(graph)
        self._require_node(view, source, "Source node")
        snapshot = self._snapshot(view)
        adjacency = snapshot.exact().adjacency()
        routes = self._routes_from(adjacency, snapshot.measure, source)
        return self._deliver(snapshot, routes)

    def path_to(self, graph: GraphLike, target: NodeID) -> Iterator[Route]:
        """Lazily yield routes into ``target``, searching edges backwards.

        Raises:
            NodeNotFoundError: If ``target`` is not in the graph.
            UnsupportedCostError: If an edge cost has no usable measure.
            CostOverflowError: As for ``path_from``.
        """
        view = GraphView.of(graph)
        self._require_node(view, target, "Target node")
        snapshot = self._snapshot(view)
        reverse = snapshot.exact().adjacency(reverse=True)
        routes = self._routes_to(reverse, snapshot.measure, target)
        return self._deliver(snapshot, routes)

    def every_path(self, graph: GraphLike) -> Iterator[Route]:
        """Lazily run one search per node and yield all their routes."""
        snapshot = self._snapshot(GraphView.of(graph))
        adjacency = snapshot.exact().adjacency()
        routes = (
            route
            for source in snapshot.nodes
            for route in self._routes_from(adjacency, snapshot.measure, source)
        )
        return self._deliver(snapshot, routes)

    #
    # ShortestDistance
    #
    def distance_between(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Cost]:
        """Return the shortest cost, or None if ``target`` is unreachable."""
        found = self._search_pair(graph, source, target)
        return None if found is None else found[0]

    def distance_from(self, graph: GraphLike, source: NodeID) -> Iterator[DirectRoute]:
        """Lazily yield costs from ``source``; no paths are reconstructed."""
        view = GraphView.of(graph)
        self._require_node(view, source, "Source node")
        snapshot = self._snapshot(view)
        adjacency = snapshot.exact().adjacency()
        routes = self._distances_from(adjacency, snapshot.measure, source)
        return self._deliver(snapshot, routes)

    def distance_to(self, graph: GraphLike, target: NodeID) -> Iterator[DirectRoute]:
        """Lazily yield costs into ``target``; no paths are reconstructed."""
        view = GraphView.of(graph)
        self._require_node(view, target, "Target node")
        snapshot = self._snapshot(view)
        reverse = snapshot.exact().adjacency(reverse=True)
        routes = self._distances_to(reverse, snapshot.measure, target)
        return self._deliver(snapshot, routes)

    def every_distance(self, graph: GraphLike) -> Iterator[DirectRoute]:
        """Lazily yield costs for every reachable ordered pair."""
        snapshot = self._snapshot(GraphView.of(graph))
        adjacency = snapshot.exact().adjacency()
        routes = (
            route
            for source in snapshot.nodes
            for route in self._distances_from(adjacency, snapshot.measure, source)
        )
        return self._deliver(snapshot, routes)
