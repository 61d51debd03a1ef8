"""Exceptions raised by netpaths.

Every error derives from ``ShortestPathError``. Where a built-in exception has
the same meaning (a missing key, a bad value, an unusable type) the error also
derives from it, so existing ``except KeyError`` style handlers keep working.

Errors are raised before a query hands back its result iterator; iterating a
returned sequence never raises any of these.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, Hashable, Iterable, Optional


class ShortestPathError(Exception):
    """Base class for all shortest-path failures."""


class NodeNotFoundError(ShortestPathError, KeyError):
    """A requested source or target node is absent from the graph.

    Attributes:
        node: The identifier that was looked up.
    """

    def __init__(self, node: Hashable, role: str = "Node") -> None:
        self.node = node
        self.role = role
        super().__init__(node)

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the argument
        return f"{self.role} '{self.node}' is not in the graph."


class NegativeCycleError(ShortestPathError):
    """The graph contains at least one cycle with negative total cost.

    The error carries every node whose shortest self-distance dropped below
    the cost identity, not only the members of the first cycle found.

    Attributes:
        participants: Frozen set of node identifiers on negative cycles.

    Example:
        >>> try:
        ...     list(FloydWarshall.directed().every_distance(graph))
        ... except NegativeCycleError as exc:
        ...     bad_nodes = exc.participants
    """

    def __init__(self, participants: Iterable[Hashable]) -> None:
        self.participants: FrozenSet[Hashable] = frozenset(participants)
        super().__init__(
            f"Negative cycle detected involving {len(self.participants)} node(s): "
            f"{sorted(map(str, self.participants))}"
        )

    def context(self) -> Dict[str, Any]:
        """Return the structured diagnostic payload of this error."""
        return {"participants": self.participants}


class ConfigurationError(ShortestPathError, ValueError):
    """An engine or configuration object was built with invalid settings."""


class GraphTooLargeError(ConfigurationError):
    """The graph exceeds the node bound configured for an engine.

    Attributes:
        node_count: Number of nodes in the rejected graph.
        limit: Configured maximum.
    """

    def __init__(self, node_count: int, limit: int, engine: str = "engine") -> None:
        self.node_count = node_count
        self.limit = limit
        super().__init__(
            f"{engine} is limited to {limit} nodes, graph has {node_count}."
        )


class UnsupportedCostError(ShortestPathError, TypeError):
    """A cost value has no usable measure (e.g. a raw float).

    Attributes:
        value: The offending cost value, if known.
    """

    def __init__(self, message: str, value: Optional[Any] = None) -> None:
        self.value = value
        super().__init__(message)


class CostOverflowError(ShortestPathError, OverflowError):
    """A fixed-width cost left the range of its type.

    Queries raise it when a shortest cost they compute does not fit; detours
    that are never chosen are not checked.
    """
