"""Result types returned by shortest-path queries.

- ``Path``: source, target and the interior (transit) nodes between them.
- ``Route``: a ``Path`` plus its total cost.
- ``DirectRoute``: source, target and cost without transit detail; produced by
  distance queries, which skip path reconstruction.

All three are immutable and hold node identifiers of the graph they were
computed from. They stay meaningful only while that graph is unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Tuple

from netpaths.graph.strict_multidigraph import NodeID


@dataclass(frozen=True)
class Path:
    """A node sequence from ``source`` to ``target``.

    Attributes:
        source: First node of the path.
        target: Last node of the path.
        transit: Interior nodes in traversal order, endpoints excluded.

    A path with ``source == target`` and no transit is the trivial path; its
    node sequence is ``[source]``.
    """

    source: NodeID
    target: NodeID
    transit: Tuple[NodeID, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "transit", tuple(self.transit))

    @classmethod
    def from_nodes(cls, nodes: List[NodeID]) -> Path:
        """Build a path from a full node sequence (at least one node)."""
        if not nodes:
            raise ValueError("A path needs at least one node")
        if len(nodes) == 1:
            return cls(nodes[0], nodes[0])
        return cls(nodes[0], nodes[-1], tuple(nodes[1:-1]))

    @property
    def is_trivial(self) -> bool:
        return not self.transit and self.source == self.target

    def to_list(self) -> List[NodeID]:
        """Return the full ordered node sequence, endpoints included."""
        if self.is_trivial:
            return [self.source]
        return [self.source, *self.transit, self.target]

    def reversed(self) -> Path:
        """Return the same node sequence walked from target to source."""
        return Path(self.target, self.source, tuple(reversed(self.transit)))

    def __iter__(self) -> Iterator[NodeID]:
        return iter(self.to_list())

    def __len__(self) -> int:
        """Number of nodes in the sequence."""
        return 1 if self.is_trivial else len(self.transit) + 2


@dataclass(frozen=True)
class Route:
    """A path together with its total cost."""

    path: Path
    cost: Any

    @property
    def source(self) -> NodeID:
        return self.path.source

    @property
    def target(self) -> NodeID:
        return self.path.target

    def into_parts(self) -> Tuple[Path, Any]:
        """Return ``(path, cost)``."""
        return self.path, self.cost

    def to_direct(self) -> DirectRoute:
        """Drop the transit detail."""
        return DirectRoute(self.path.source, self.path.target, self.cost)


@dataclass(frozen=True)
class DirectRoute:
    """Endpoints and cost of a shortest path, without the nodes in between."""

    source: NodeID
    target: NodeID
    cost: Any

    def into_parts(self) -> Tuple[NodeID, NodeID, Any]:
        """Return ``(source, target, cost)``."""
        return self.source, self.target, self.cost
