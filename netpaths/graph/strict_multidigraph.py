"""Strict multi-directed graph used as shortest-path input.

`StrictMultiDiGraph` extends `networkx.MultiDiGraph` so that building a test or
caller graph fails loudly instead of guessing: nodes must be added before the
edges that reference them, and edge keys are unique across the whole graph.
Parallel edges are allowed, which is what the all-pairs engine reduces by
minimum cost.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, List, Optional, Set, Tuple

import networkx as nx

NodeID = Hashable
EdgeID = Hashable


class StrictMultiDiGraph(nx.MultiDiGraph):
    """A multi-directed graph with explicit nodes and graph-wide unique edge keys.

    Rules:
      - Adding an edge never creates its endpoints.
      - Adding an existing node or an existing edge key raises ValueError.
      - Edge keys default to a monotonically increasing integer.

    Inherits from:
        networkx.MultiDiGraph
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._keys: Set[EdgeID] = set()
        # Only ever advances; keys are never reused.
        self._next_edge_id: int = 0

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[Tuple[NodeID, NodeID, Any]],
        nodes: Optional[Iterable[NodeID]] = None,
        cost_attr: str = "cost",
    ) -> StrictMultiDiGraph:
        """Build a graph from ``(source, target, cost)`` triples.

        Nodes are taken from ``nodes`` first (keeping isolated ones), then from
        edge endpoints in order of appearance. Edge keys are ``0, 1, 2, ...``.

        Args:
            edges: Iterable of ``(source, target, cost)``.
            nodes: Optional explicit node list.
            cost_attr: Attribute name under which each cost is stored.

        Returns:
            StrictMultiDiGraph: The new graph.
        """
        edge_list = list(edges)
        graph = cls()
        for node in nodes or ():
            graph.add_node(node)
        for src, dst, _ in edge_list:
            for node in (src, dst):
                if node not in graph:
                    graph.add_node(node)
        for src, dst, cost in edge_list:
            graph.add_edge(src, dst, **{cost_attr: cost})
        return graph

    def new_edge_key(self, u: NodeID, v: NodeID, key: Optional[int] = None) -> int:  # type: ignore[override]
        """Return the next unused integer edge key (``u``, ``v``, ``key`` ignored)."""
        edge_id = self._next_edge_id
        self._next_edge_id += 1
        return edge_id

    #
    # Node management
    #
    def add_node(self, node_for_adding: NodeID, **attr: Any) -> None:
        """Add a node; raises ValueError if it already exists."""
        if node_for_adding in self:
            raise ValueError(f"Node '{node_for_adding}' already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    #
    # Edge management
    #
    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self,
        u_for_edge: NodeID,
        v_for_edge: NodeID,
        key: Optional[EdgeID] = None,
        **attr: Any,
    ) -> EdgeID:
        """Add a directed edge between two existing nodes.

        Args:
            u_for_edge: Source node. Must exist.
            v_for_edge: Target node. Must exist.
            key: Unique edge key; generated when None. An explicit integer key
                pushes the generator past it.
            **attr: Edge attributes, e.g. ``cost=3``.

        Returns:
            EdgeID: The key of the new edge.

        Raises:
            ValueError: If an endpoint is missing or the key is taken.
        """
        if u_for_edge not in self:
            raise ValueError(f"Source node '{u_for_edge}' does not exist.")
        if v_for_edge not in self:
            raise ValueError(f"Target node '{v_for_edge}' does not exist.")

        if key is None:
            key = self.new_edge_key(u_for_edge, v_for_edge)
        elif key in self._keys:
            raise ValueError(f"Edge with id '{key}' already exists.")
        elif isinstance(key, int) and key >= self._next_edge_id:
            self._next_edge_id = key + 1

        super().add_edge(u_for_edge, v_for_edge, key=key, **attr)
        self._keys.add(key)
        return key

    #
    # Lookups
    #
    def edges_between(self, u: NodeID, v: NodeID) -> List[EdgeID]:
        """List the keys of all edges from ``u`` to ``v`` (possibly empty)."""
        if u not in self.succ or v not in self.succ[u]:
            return []
        return list(self.succ[u][v].keys())
