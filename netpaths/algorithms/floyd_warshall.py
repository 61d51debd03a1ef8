"""Floyd-Warshall all-pairs shortest paths with negative-cycle detection.

The engine fills a |V| x |V| table of ``(cost, predecessor)`` entries:

1. The diagonal starts at the measure's zero, each edge ``u -> v`` sets entry
   ``(u, v)`` to the minimum of its current value and the edge cost (parallel
   edges reduce to the cheapest one), everything else is absent. Undirected
   engines seed both orientations of every edge.
2. For every intermediate node ``k`` and pair ``(i, j)``, a known ``i -> k -> j``
   cheaper than ``i -> j`` replaces it, and ``j``'s predecessor on ``i -> j``
   becomes its predecessor on ``k -> j``.
3. Any node whose self-distance ends below zero lies on a negative cycle. The
   query then fails with ``NegativeCycleError`` listing all such nodes.

Relaxation runs in ``Measure.exact()``, so with fixed-width integer costs the
negative-cycle check never trips over an intermediate overflow. The solved
distances are then narrowed back into the query's measure, and
``CostOverflowError`` is raised if any of them does not fit.

Paths are rebuilt by walking predecessors from the target back to the source
and reversing the result.

The whole table is computed before a query returns, so consuming only part of
a result iterator does not save any of the O(V^3) work. Memory is O(V^2).
``ShortestPathConfig.floyd_warshall_max_nodes`` can bound the accepted graph
size.

Notes:
    With an undirected engine, any negative edge is itself a negative cycle
    (walk it there and back).
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional, Tuple

from netpaths.algorithms.base import (
    Cost,
    GraphLike,
    GraphSnapshot,
    ShortestDistance,
    ShortestPath,
    ShortestPathEngine,
)
from netpaths.exceptions import GraphTooLargeError, NegativeCycleError
from netpaths.graph.strict_multidigraph import NodeID
from netpaths.graph.view import GraphView
from netpaths.logging import get_logger, log_duration
from netpaths.measure import Measure
from netpaths.paths.path import DirectRoute, Path, Route

logger = get_logger(__name__)


class _DistanceTable:
    """Solved all-pairs table. Lives as long as the iterators built from it."""

    __slots__ = ("nodes", "index", "dist", "pred")

    def __init__(
        self,
        nodes: Tuple[NodeID, ...],
        dist: List[List[Optional[Cost]]],
        pred: List[List[Optional[int]]],
    ) -> None:
        self.nodes = nodes
        self.index: Dict[NodeID, int] = {node: i for i, node in enumerate(nodes)}
        self.dist = dist
        self.pred = pred

    def path(self, i: int, j: int) -> Path:
        if i == j:
            return Path(self.nodes[i], self.nodes[i])
        row = self.pred[i]
        chain = [j]
        step = j
        while step != i:
            step = row[step]
            chain.append(step)
        chain.reverse()
        return Path.from_nodes([self.nodes[k] for k in chain])

    def route(self, i: int, j: int) -> Optional[Route]:
        cost = self.dist[i][j]
        if cost is None:
            return None
        return Route(self.path(i, j), cost)

    def direct(self, i: int, j: int) -> Optional[DirectRoute]:
        cost = self.dist[i][j]
        if cost is None:
            return None
        return DirectRoute(self.nodes[i], self.nodes[j], cost)

    def pairs(
        self, sources: Optional[List[int]] = None, targets: Optional[List[int]] = None
    ) -> Iterator[Tuple[int, int]]:
        """Iterate reachable ``(i, j)`` index pairs, row by row."""
        every = range(len(self.nodes))
        rows = every if sources is None else sources
        cols = every if targets is None else targets
        for i in rows:
            row = self.dist[i]
            for j in cols:
                if row[j] is not None:
                    yield i, j

    def narrowed(self, convert: Callable[[Cost], Cost]) -> _DistanceTable:
        """Return a table with every known distance passed through ``convert``."""
        dist = [[None if d is None else convert(d) for d in row] for row in self.dist]
        return _DistanceTable(self.nodes, dist, self.pred)


def _solve(snapshot: GraphSnapshot) -> _DistanceTable:
    """Solve ``snapshot`` in exact arithmetic, then narrow to its measure.

    Raises:
        NegativeCycleError: If any node lies on a negative cycle.
        CostOverflowError: If a shortest distance does not fit the measure.
    """
    exact = snapshot.exact()
    table = _relax(exact)
    if exact is snapshot:
        return table
    return table.narrowed(snapshot.measure.narrow)


def _relax(snapshot: GraphSnapshot) -> _DistanceTable:
    """Run the relaxation and negative-cycle check over ``snapshot``."""
    measure: Measure = snapshot.measure
    less = measure.less
    add = measure.add
    zero = measure.zero()

    nodes = snapshot.nodes
    index = {node: i for i, node in enumerate(nodes)}
    n = len(nodes)

    dist: List[List[Optional[Cost]]] = [[None] * n for _ in range(n)]
    pred: List[List[Optional[int]]] = [[None] * n for _ in range(n)]

    for i in range(n):
        dist[i][i] = zero

    for src, dst, cost in snapshot.edges:
        u, v = index[src], index[dst]
        orientations = ((u, v),) if snapshot.directed else ((u, v), (v, u))
        for i, j in orientations:
            current = dist[i][j]
            if current is None or less(cost, current):
                dist[i][j] = cost
                pred[i][j] = i

    for k in range(n):
        dist_k = dist[k]
        pred_k = pred[k]
        for i in range(n):
            via = dist[i][k]
            if via is None:
                continue
            dist_i = dist[i]
            pred_i = pred[i]
            for j in range(n):
                tail = dist_k[j]
                if tail is None:
                    continue
                candidate = add(via, tail)
                current = dist_i[j]
                if current is None or less(candidate, current):
                    dist_i[j] = candidate
                    pred_i[j] = pred_k[j]

    participants = [nodes[i] for i in range(n) if measure.is_negative(dist[i][i])]
    if participants:
        logger.warning(
            "Floyd-Warshall found negative cycle(s) through %d node(s)",
            len(participants),
        )
        raise NegativeCycleError(participants)

    return _DistanceTable(nodes, dist, pred)


class FloydWarshall(ShortestPathEngine, ShortestPath, ShortestDistance):
    """Floyd-Warshall engine implementing both query contracts.

    Example:
        >>> fw = FloydWarshall.directed()
        >>> {(r.source, r.target): r.cost for r in fw.every_distance(graph)}
        {('A', 'A'): 0, ('A', 'B'): 1, ...}
    """

    name = "Floyd-Warshall"

    __slots__ = ()

    def _table(
        self, graph: GraphLike, *endpoints: Tuple[NodeID, str]
    ) -> _DistanceTable:
        view = GraphView.of(graph)
        for node, role in endpoints:
            self._require_node(view, node, role)

        limit = self.config.floyd_warshall_max_nodes
        if limit is not None and len(view) > limit:
            raise GraphTooLargeError(len(view), limit, self.name)

        snapshot = self._snapshot(view)
        with log_duration(logger, f"Floyd-Warshall over {len(snapshot.nodes)} node(s)"):
            return _solve(snapshot)

    #
    # ShortestPath
    #
    def path_between(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Route]:
        """Return the shortest route, or None if ``target`` is unreachable.

        Raises:
            NodeNotFoundError: If either endpoint is not in the graph.
            NegativeCycleError: If the graph has a negative cycle.
        """
        table = self._table(graph, (source, "Source node"), (target, "Target node"))
        return table.route(table.index[source], table.index[target])

    def path_from(self, graph: GraphLike, source: NodeID) -> Iterator[Route]:
        """Yield routes from ``source`` to every node it reaches.

        Raises:
            NodeNotFoundError: If ``source`` is not in the graph.
            NegativeCycleError: If the graph has a negative cycle.
        """
        table = self._table(graph, (source, "Source node"))
        pairs = table.pairs(sources=[table.index[source]])
        return (table.route(i, j) for i, j in pairs)

    def path_to(self, graph: GraphLike, target: NodeID) -> Iterator[Route]:
        """Yield routes into ``target`` from every node that reaches it.

        Raises:
            NodeNotFoundError: If ``target`` is not in the graph.
            NegativeCycleError: If the graph has a negative cycle.
        """
        table = self._table(graph, (target, "Target node"))
        pairs = table.pairs(targets=[table.index[target]])
        return (table.route(i, j) for i, j in pairs)

    def every_path(self, graph: GraphLike) -> Iterator[Route]:
        """Yield a route for every reachable ordered pair.

        Raises:
            NegativeCycleError: If the graph has a negative cycle; the error's
                ``participants`` holds every node on one.
            GraphTooLargeError: If the graph exceeds the configured bound.
        """
        table = self._table(graph)
        return (table.route(i, j) for i, j in table.pairs())

    #
    # ShortestDistance
    #
    def distance_between(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Cost]:
        table = self._table(graph, (source, "Source node"), (target, "Target node"))
        return table.dist[table.index[source]][table.index[target]]

    def distance_from(self, graph: GraphLike, source: NodeID) -> Iterator[DirectRoute]:
        table = self._table(graph, (source, "Source node"))
        pairs = table.pairs(sources=[table.index[source]])
        return (table.direct(i, j) for i, j in pairs)

    def distance_to(self, graph: GraphLike, target: NodeID) -> Iterator[DirectRoute]:
        table = self._table(graph, (target, "Target node"))
        pairs = table.pairs(targets=[table.index[target]])
        return (table.direct(i, j) for i, j in pairs)

    def every_distance(self, graph: GraphLike) -> Iterator[DirectRoute]:
        table = self._table(graph)
        return (table.direct(i, j) for i, j in table.pairs())
