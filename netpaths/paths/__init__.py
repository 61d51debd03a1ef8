"""Path primitives for shortest-path results.

This package defines the immutable result structures shared by every engine:
- ``Path`` models a source, a target and the transit nodes between them.
- ``Route`` pairs a ``Path`` with its total cost.
- ``DirectRoute`` keeps only endpoints and cost.
"""

from netpaths.paths.path import DirectRoute, Path, Route

__all__ = ["DirectRoute", "Path", "Route"]
