"""netpaths: shortest paths over networkx graphs.

netpaths computes single-pair, single-source, single-target and all-pairs
shortest paths and distances with a pluggable cost measure.

Primary API:
    Dijkstra - single-source engine (non-negative costs)
    FloydWarshall - all-pairs engine with negative-cycle detection
    Path, Route, DirectRoute - query results
    NotNan, Wrapping, Saturating - cost wrappers with a total order

Example:
    from netpaths import Dijkstra, StrictMultiDiGraph

    graph = StrictMultiDiGraph.from_edges([("A", "B", 1), ("B", "C", 2)])
    route = Dijkstra.directed().path_between(graph, "A", "C")
    assert route.cost == 3
"""

from __future__ import annotations

from netpaths import logging
from netpaths._version import __version__
from netpaths.algorithms import (
    Dijkstra,
    FloydWarshall,
    ShortestDistance,
    ShortestPath,
)
from netpaths.config import SHORTEST_PATH_CONFIG, ShortestPathConfig
from netpaths.exceptions import (
    ConfigurationError,
    CostOverflowError,
    GraphTooLargeError,
    NegativeCycleError,
    NodeNotFoundError,
    ShortestPathError,
    UnsupportedCostError,
)
from netpaths.graph import EdgeRef, GraphView, StrictMultiDiGraph
from netpaths.measure import (
    Measure,
    NotNan,
    Saturating,
    Wrapping,
    measure_for,
    register_measure,
)
from netpaths.paths import DirectRoute, Path, Route

__all__ = [
    "__version__",
    "logging",
    "Dijkstra",
    "FloydWarshall",
    "ShortestDistance",
    "ShortestPath",
    "SHORTEST_PATH_CONFIG",
    "ShortestPathConfig",
    "ConfigurationError",
    "CostOverflowError",
    "GraphTooLargeError",
    "NegativeCycleError",
    "NodeNotFoundError",
    "ShortestPathError",
    "UnsupportedCostError",
    "EdgeRef",
    "GraphView",
    "StrictMultiDiGraph",
    "Measure",
    "NotNan",
    "Saturating",
    "Wrapping",
    "measure_for",
    "register_measure",
    "DirectRoute",
    "Path",
    "Route",
]
