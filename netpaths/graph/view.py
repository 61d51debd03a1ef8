"""Read-only view over a networkx graph.

Shortest-path engines never touch graph storage directly. They read nodes,
edges, endpoints and edge attributes through ``GraphView``, which wraps any
``networkx`` graph class (simple or multi, directed or undirected) and exposes
no mutating operation.

A view does not copy the graph. Results produced from a view hold node
identifiers of the wrapped graph and are only meaningful while that graph is
left unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass
from itertools import chain
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

import networkx as nx

from netpaths.graph.strict_multidigraph import EdgeID, NodeID


@dataclass(frozen=True)
class EdgeRef:
    """Identifier of one edge in a view.

    Attributes:
        source: Source endpoint (first endpoint for undirected graphs).
        target: Target endpoint.
        key: Multigraph edge key; None for simple graphs.
    """

    source: NodeID
    target: NodeID
    key: Optional[EdgeID] = None


class GraphView:
    """Read-only adapter exposing the queries shortest-path engines need."""

    __slots__ = ("_graph",)

    def __init__(self, graph: nx.Graph) -> None:
        if not isinstance(graph, nx.Graph):
            raise TypeError(
                f"GraphView wraps networkx graphs, got {type(graph).__name__}."
            )
        self._graph = graph

    @classmethod
    def of(cls, graph: Union[GraphView, nx.Graph]) -> GraphView:
        """Return ``graph`` if it already is a view, otherwise wrap it."""
        if isinstance(graph, GraphView):
            return graph
        return cls(graph)

    @property
    def graph(self) -> nx.Graph:
        return self._graph

    @property
    def is_directed(self) -> bool:
        return self._graph.is_directed()

    @property
    def is_multigraph(self) -> bool:
        return self._graph.is_multigraph()

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, node: Any) -> bool:
        return node in self._graph

    def has_node(self, node: Any) -> bool:
        return node in self

    def nodes(self) -> Iterator[NodeID]:
        """Iterate node identifiers in graph insertion order."""
        return iter(self._graph.nodes)

    def edges(self) -> Iterator[EdgeRef]:
        """Iterate every edge once, in graph insertion order."""
        if self.is_multigraph:
            for u, v, key in self._graph.edges(keys=True):
                yield EdgeRef(u, v, key)
        else:
            for u, v in self._graph.edges():
                yield EdgeRef(u, v)

    @staticmethod
    def _refs(triples: Iterator[Tuple[Any, ...]]) -> Iterator[EdgeRef]:
        for triple in triples:
            yield EdgeRef(*triple)

    def out_edges(self, node: NodeID) -> Iterator[EdgeRef]:
        """Edges leaving ``node``; every incident edge for undirected graphs.

        Raises:
            KeyError: If ``node`` is not in the graph.
        """
        if node not in self._graph:
            raise KeyError(node)
        g = self._graph
        if not self.is_directed:
            return self.incident_edges(node)
        if self.is_multigraph:
            return self._refs(g.out_edges(node, keys=True))
        return self._refs(g.out_edges(node))

    def in_edges(self, node: NodeID) -> Iterator[EdgeRef]:
        """Edges entering ``node``; every incident edge for undirected graphs.

        Raises:
            KeyError: If ``node`` is not in the graph.
        """
        if node not in self._graph:
            raise KeyError(node)
        g = self._graph
        if not self.is_directed:
            return self.incident_edges(node)
        if self.is_multigraph:
            return self._refs(g.in_edges(node, keys=True))
        return self._refs(g.in_edges(node))

    def incident_edges(self, node: NodeID) -> Iterator[EdgeRef]:
        """Edges touching ``node`` in either direction, self-loops once.

        Undirected edges are oriented so that ``source`` is ``node``.

        Raises:
            KeyError: If ``node`` is not in the graph.
        """
        if node not in self._graph:
            raise KeyError(node)
        g = self._graph
        if not self.is_directed:
            if self.is_multigraph:
                return self._refs(g.edges(node, keys=True))
            return self._refs(g.edges(node))
        loops_once = (ref for ref in self.in_edges(node) if ref.source != ref.target)
        return chain(self.out_edges(node), loops_once)

    def endpoints(self, edge: EdgeRef) -> Tuple[NodeID, NodeID]:
        """Return ``(source, target)`` of an edge."""
        return edge.source, edge.target

    def edge_attr(self, edge: EdgeRef) -> Mapping[str, Any]:
        """Return a read-only mapping of the edge's attributes.

        Raises:
            KeyError: If the edge is not in the graph.
        """
        if self.is_multigraph:
            data = self._graph.edges[edge.source, edge.target, edge.key]
        else:
            data = self._graph.edges[edge.source, edge.target]
        return MappingProxyType(data)

    def __repr__(self) -> str:
        return (
            f"GraphView({type(self._graph).__name__}, nodes={len(self)}, "
            f"edges={self._graph.number_of_edges()})"
        )
