"""Shared fixtures for the graph core tests."""
import pytest

from topoedit.model.arena import GraphArena


@pytest.fixture
def arena():
    """Small arena so growth paths are exercised quickly."""
    return GraphArena(initial_node_capacity=4, initial_edge_capacity=4)


@pytest.fixture
def path_arena(arena):
    """Path 0 - 1 - 2 along the x axis."""
    for x in (0.0, 1.0, 2.0):
        arena.add_node(x, 0.0)
    arena.add_edge(0, 1)
    arena.add_edge(1, 2)
    return arena


@pytest.fixture
def two_triangles():
    """Two disjoint triangles: {0, 1, 2} and {3, 4, 5}."""
    graph = GraphArena(initial_node_capacity=8, initial_edge_capacity=8)
    for i in range(6):
        graph.add_node(float(i), float(i % 3))
    for a, b in ((0, 1), (1, 2), (0, 2), (3, 4), (4, 5), (3, 5)):
        graph.add_edge(a, b)
    return graph


@pytest.fixture
def edge_set():
    """Unordered endpoint pairs of all stored edges."""
    def _edge_set(graph):
        return {frozenset(pair) for pair in graph.edges().tolist()}
    return _edge_set
