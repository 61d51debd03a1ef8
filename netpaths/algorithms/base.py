"""Query contract shared by all shortest-path engines.

Two capability interfaces are defined here:

- ``ShortestPath``: queries returning full ``Route`` objects.
- ``ShortestDistance``: the same four query shapes returning costs only
  (``DirectRoute`` objects, or a bare cost for single pairs).

Each offers a single-pair, single-source (fan-out), single-target (fan-in) and
all-pairs query. Multi-result queries return a finite, single-pass iterator
with exactly one item per reachable ordered pair, the trivial pair ``(s, s)``
included; unreachable pairs are simply absent.

Every query validates its input and takes a snapshot of node ids, edges and
projected edge costs before returning. Errors (missing endpoint, unsupported
cost type, cost overflow, negative cycle, graph too large) are therefore raised
by the call itself and never while iterating the result. Lazy engines that
cannot rule out a failing cost sum up front (``GraphSnapshot.sums_are_safe``)
compute the whole result before returning it.

``ShortestPathEngine`` holds the configuration every engine shares: whether
edges are followed only in their stored direction, how an edge's cost is
obtained, and which cost measure to use.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections import defaultdict
from dataclasses import dataclass, replace
from typing import (
    Any,
    Callable,
    DefaultDict,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
    Union,
)

import networkx as nx

from netpaths.config import SHORTEST_PATH_CONFIG, ShortestPathConfig
from netpaths.exceptions import ConfigurationError, NodeNotFoundError
from netpaths.graph.strict_multidigraph import NodeID
from netpaths.graph.view import EdgeRef, GraphView
from netpaths.logging import get_logger
from netpaths.measure import IntegerMeasure, Measure, measure_for
from netpaths.paths.path import DirectRoute, Route

logger = get_logger(__name__)

Cost = Any
GraphLike = Union[GraphView, nx.Graph]
EdgeCostFunc = Callable[[EdgeRef, Mapping[str, Any]], Cost]
EdgeCost = Union[str, EdgeCostFunc]
Adjacency = Dict[NodeID, List[Tuple[NodeID, Cost]]]


@dataclass(frozen=True)
class GraphSnapshot:
    """Nodes and costed edges of a graph, captured at query time.

    Attributes:
        nodes: Node identifiers in graph order.
        edges: ``(source, target, cost)`` per edge, costs already validated.
        measure: Measure all costs belong to.
        directed: False when edges may be walked both ways, either because the
            engine is undirected or because the graph itself is.
    """

    nodes: Tuple[NodeID, ...]
    edges: Tuple[Tuple[NodeID, NodeID, Cost], ...]
    measure: Measure
    directed: bool

    def adjacency(self, reverse: bool = False) -> Adjacency:
        """Build ``node -> [(neighbor, cost), ...]``.

        Args:
            reverse: Follow edges against their direction (fan-in searches).
                Ignored for undirected snapshots.
        """
        adj: DefaultDict[NodeID, List[Tuple[NodeID, Cost]]] = defaultdict(list)
        for src, dst, cost in self.edges:
            if not self.directed:
                adj[src].append((dst, cost))
                if src != dst:
                    adj[dst].append((src, cost))
            elif reverse:
                adj[dst].append((src, cost))
            else:
                adj[src].append((dst, cost))
        return dict(adj)

    def exact(self) -> GraphSnapshot:
        """Return the snapshot with costs widened into ``measure.exact()``."""
        exact = self.measure.exact()
        if exact is self.measure:
            return self
        widen = self.measure.widen
        return replace(
            self,
            edges=tuple((src, dst, widen(cost)) for src, dst, cost in self.edges),
            measure=exact,
        )

    def sums_are_safe(self) -> bool:
        """True when no path cost in this snapshot can fail to add or narrow."""
        return self.measure.sums_are_safe(cost for _, _, cost in self.edges)


class ShortestPath(ABC):
    """Engines that can report full shortest paths."""

    @abstractmethod
    def path_between(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Route]:
        """Return the shortest route from ``source`` to ``target``, or None."""

    @abstractmethod
    def path_from(self, graph: GraphLike, source: NodeID) -> Iterator[Route]:
        """Yield a route from ``source`` to every node it reaches."""

    @abstractmethod
    def path_to(self, graph: GraphLike, target: NodeID) -> Iterator[Route]:
        """Yield a route to ``target`` from every node that reaches it."""

    @abstractmethod
    def every_path(self, graph: GraphLike) -> Iterator[Route]:
        """Yield a route for every reachable ordered pair of nodes."""


class ShortestDistance(ABC):
    """Engines that can report shortest-path costs."""

    @abstractmethod
    def distance_between(
        self, graph: GraphLike, source: NodeID, target: NodeID
    ) -> Optional[Cost]:
        """Return the shortest cost from ``source`` to ``target``, or None."""

    @abstractmethod
    def distance_from(self, graph: GraphLike, source: NodeID) -> Iterator[DirectRoute]:
        """Yield the cost from ``source`` to every node it reaches."""

    @abstractmethod
    def distance_to(self, graph: GraphLike, target: NodeID) -> Iterator[DirectRoute]:
        """Yield the cost to ``target`` from every node that reaches it."""

    @abstractmethod
    def every_distance(self, graph: GraphLike) -> Iterator[DirectRoute]:
        """Yield the cost for every reachable ordered pair of nodes."""


class ShortestPathEngine:
    """Immutable configuration common to every engine.

    Engines hold no per-query state, so one instance can be reused across
    graphs and shared between threads.

    Args:
        directed: Follow edges only from source to target when True.
        edge_cost: Attribute name or ``(edge, attrs) -> cost`` callable.
            Defaults to ``config.cost_attr``; edges lacking the attribute cost
            ``config.default_edge_cost``.
        measure: Cost measure. Inferred from the first edge cost when None.
        config: Engine defaults. Defaults to ``SHORTEST_PATH_CONFIG``.
    """

    name = "engine"

    __slots__ = ("_directed", "_edge_cost", "_measure", "_config")

    def __init__(
        self,
        directed: bool = True,
        edge_cost: Optional[EdgeCost] = None,
        measure: Optional[Measure] = None,
        config: Optional[ShortestPathConfig] = None,
    ) -> None:
        config = config if config is not None else SHORTEST_PATH_CONFIG
        if not isinstance(config, ShortestPathConfig):
            raise ConfigurationError(
                f"config must be a ShortestPathConfig, got {type(config).__name__}"
            )
        if edge_cost is None:
            edge_cost = config.cost_attr
        if not (isinstance(edge_cost, str) or callable(edge_cost)):
            raise ConfigurationError(
                "edge_cost must be an attribute name or a callable, "
                f"got {type(edge_cost).__name__}"
            )
        if measure is not None and not isinstance(measure, Measure):
            raise ConfigurationError(
                f"measure must be a Measure, got {type(measure).__name__}"
            )
        self._directed = bool(directed)
        self._edge_cost = edge_cost
        self._measure = measure
        self._config = config

    @classmethod
    def directed(cls, **kwargs: Any):
        """Engine following edges from source to target only."""
        return cls(directed=True, **kwargs)

    @classmethod
    def undirected(cls, **kwargs: Any):
        """Engine following every edge in both directions."""
        return cls(directed=False, **kwargs)

    @property
    def is_directed(self) -> bool:
        return self._directed

    @property
    def config(self) -> ShortestPathConfig:
        return self._config

    def __setattr__(self, name: str, value: Any) -> None:
        if hasattr(self, "_config"):
            raise AttributeError(f"{type(self).__name__} is immutable")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        kind = "directed" if self._directed else "undirected"
        return f"{type(self).__name__}.{kind}()"

    #
    # Helpers for subclasses
    #
    def _project_cost(self, edge: EdgeRef, attrs: Mapping[str, Any]) -> Cost:
        if isinstance(self._edge_cost, str):
            return attrs.get(self._edge_cost, self._config.default_edge_cost)
        return self._edge_cost(edge, attrs)

    def _snapshot(self, view: GraphView) -> GraphSnapshot:
        """Project and validate every edge cost of ``view``."""
        raw: List[Tuple[NodeID, NodeID, Cost]] = []
        for edge in view.edges():
            src, dst = view.endpoints(edge)
            raw.append((src, dst, self._project_cost(edge, view.edge_attr(edge))))

        measure = self._measure
        if measure is None:
            measure = measure_for(raw[0][2]) if raw else IntegerMeasure()

        edges = tuple((src, dst, measure.validate(cost)) for src, dst, cost in raw)
        snapshot = GraphSnapshot(
            nodes=tuple(view.nodes()),
            edges=edges,
            measure=measure,
            directed=self._directed and view.is_directed,
        )
        logger.debug(
            "%s snapshot: %d nodes, %d edges, measure=%r, directed=%s",
            self.name,
            len(snapshot.nodes),
            len(snapshot.edges),
            measure,
            snapshot.directed,
        )
        return snapshot

    @staticmethod
    def _require_node(view: GraphView, node: NodeID, role: str) -> None:
        if node not in view:
            raise NodeNotFoundError(node, role)
