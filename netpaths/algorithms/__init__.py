"""Shortest-path engines.

- ``Dijkstra``: single-source search over a priority frontier; non-negative
  costs are the caller's responsibility.
- ``FloydWarshall``: all-pairs dynamic programming with negative-cycle
  detection.

Both implement the ``ShortestPath`` and ``ShortestDistance`` query contracts.
"""

from netpaths.algorithms.base import (
    GraphSnapshot,
    ShortestDistance,
    ShortestPath,
    ShortestPathEngine,
)
from netpaths.algorithms.dijkstra import Dijkstra
from netpaths.algorithms.floyd_warshall import FloydWarshall

__all__ = [
    "Dijkstra",
    "FloydWarshall",
    "GraphSnapshot",
    "ShortestDistance",
    "ShortestPath",
    "ShortestPathEngine",
]
