"""Configuration for netpaths shortest-path engines."""

from dataclasses import dataclass
from typing import Any, Optional

from netpaths.exceptions import ConfigurationError


@dataclass(frozen=True)
class ShortestPathConfig:
    """Defaults shared by all shortest-path engines."""

    # Edge attribute read when no explicit cost projection is given
    cost_attr: str = "cost"

    # Cost used for edges that do not carry ``cost_attr``
    default_edge_cost: Any = 1

    # Upper bound on node count for the O(V^3) all-pairs engine (None = unbounded)
    floyd_warshall_max_nodes: Optional[int] = None

    def __post_init__(self) -> None:
        if not isinstance(self.cost_attr, str) or not self.cost_attr:
            raise ConfigurationError("cost_attr must be a non-empty string")
        limit = self.floyd_warshall_max_nodes
        if limit is not None and (
            isinstance(limit, bool) or not isinstance(limit, int) or limit < 0
        ):
            raise ConfigurationError(
                "floyd_warshall_max_nodes must be a non-negative int or None, "
                f"got {limit!r}"
            )


# Global configuration instance
SHORTEST_PATH_CONFIG = ShortestPathConfig()
