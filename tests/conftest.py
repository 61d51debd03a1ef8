"""Shared graph fixtures for the shortest-path tests.

Every fixture returns a fresh ``StrictMultiDiGraph`` whose edges carry a
``cost`` attribute. Expected-result tables live next to the tests that use
them.
"""

from __future__ import annotations

import pytest

from netpaths.graph.strict_multidigraph import StrictMultiDiGraph


@pytest.fixture
def weighted():
    # Metric:
    #        [1]
    #   A ────────► B
    #   │ ╲         │ ╲
    #   │  ╲[4]  [2]│  ╲[2]
    #   │   ╲       ▼   ╲
    #   │    ╰────► C    │
    #   │           │[2] │
    #   │   [10]    ▼    │
    #   └─────────► D ◄──╯
    g = StrictMultiDiGraph()
    for node in ("A", "B", "C", "D"):
        g.add_node(node)

    g.add_edge("A", "B", key=0, cost=1)
    g.add_edge("A", "C", key=1, cost=4)
    g.add_edge("A", "D", key=2, cost=10)
    g.add_edge("B", "C", key=3, cost=2)
    g.add_edge("B", "D", key=4, cost=2)
    g.add_edge("C", "D", key=5, cost=2)
    return g


@pytest.fixture
def uniform():
    # Metric: all edges [1]
    #
    #  A → B → E → F
    #  ↑   ↓   ↑   ↓
    #  D ← C   H ← G
    g = StrictMultiDiGraph()
    for node in ("A", "B", "C", "D", "E", "F", "G", "H"):
        g.add_node(node)

    for key, (src, dst) in enumerate(
        [
            ("A", "B"),
            ("B", "C"),
            ("C", "D"),
            ("D", "A"),
            ("E", "F"),
            ("B", "E"),
            ("F", "G"),
            ("G", "H"),
            ("H", "E"),
        ]
    ):
        g.add_edge(src, dst, key=key, cost=1)
    return g


@pytest.fixture
def negative_cycle():
    # Metric:
    #      [1]       [-3]
    #  A ───────► B ───────► C
    #  ▲                     │
    #  └─────────────────────┘
    #            [1]
    g = StrictMultiDiGraph()
    for node in ("A", "B", "C"):
        g.add_node(node)

    g.add_edge("A", "B", key=0, cost=1)
    g.add_edge("B", "C", key=1, cost=-3)
    g.add_edge("C", "A", key=2, cost=1)
    return g


@pytest.fixture
def line1():
    # Metric:
    #      [1]      [1,1,2]
    #  A◄───────►B◄───────►C
    g = StrictMultiDiGraph()
    g.add_node("A")
    g.add_node("B")
    g.add_node("C")

    g.add_edge("A", "B", key=0, cost=1)
    g.add_edge("B", "A", key=1, cost=1)
    g.add_edge("B", "C", key=2, cost=1)
    g.add_edge("C", "B", key=3, cost=1)
    g.add_edge("B", "C", key=4, cost=1)
    g.add_edge("C", "B", key=5, cost=1)
    g.add_edge("B", "C", key=6, cost=2)
    g.add_edge("C", "B", key=7, cost=2)
    return g


@pytest.fixture
def negative_dag():
    # Metric (no cycles, some negative edges):
    #      [4]       [-2]
    #  A ───────► B ───────► D
    #  │                     ▲
    #  │   [1]        [3]    │
    #  └───────► C ──────────┘
    #
    #  E is isolated.
    g = StrictMultiDiGraph()
    for node in ("A", "B", "C", "D", "E"):
        g.add_node(node)

    g.add_edge("A", "B", key=0, cost=4)
    g.add_edge("B", "D", key=1, cost=-2)
    g.add_edge("A", "C", key=2, cost=1)
    g.add_edge("C", "D", key=3, cost=3)
    return g


@pytest.fixture
def disconnected():
    # Metric:
    #      [2]              [5]
    #  A ───────► B     C ───────► D
    g = StrictMultiDiGraph.from_edges([("A", "B", 2), ("C", "D", 5)])
    return g
