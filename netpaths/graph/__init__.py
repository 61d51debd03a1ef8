"""Graph primitives consumed by the shortest-path engines.

This package provides the strict multi-directed graph type `StrictMultiDiGraph`
and the read-only `GraphView` adapter through which engines read any networkx
graph.
"""

from netpaths.graph.strict_multidigraph import (
    EdgeID,
    NodeID,
    StrictMultiDiGraph,
)
from netpaths.graph.view import EdgeRef, GraphView

__all__ = [
    "EdgeID",
    "EdgeRef",
    "GraphView",
    "NodeID",
    "StrictMultiDiGraph",
]
