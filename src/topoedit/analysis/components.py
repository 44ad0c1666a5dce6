"""
Connectivity Analysis
=====================
Connected components, degree statistics and the clean-up helpers built on them.

Why is this file needed?
------------------------
1. Analysis: The UI shows how fragmented the network is (component count,
   giant component share, isolated nodes).
2. Clean-up: Removing isolated nodes or everything outside the giant
   component are bulk mutations that depend on those results.

The adjacency list is rebuilt from the edge arrays on every call and never
cached, so results are always consistent with the arena at call time.

Classes:
    ComponentResult: Per-node labels plus component sizes.
    GraphStatistics: Snapshot shown by the analysis panel.
"""
from __future__ import annotations

from collections import deque
from dataclasses import dataclass, asdict, field
import logging
from typing import Any, Dict, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import numpy.typing as npt
    from topoedit.model.arena import GraphArena

logger = logging.getLogger(__name__)


@dataclass
class ComponentResult:
    """
    Labels of a breadth-first component sweep.

    Component ids are assigned in discovery order, i.e. by the lowest node
    index of each component.
    """
    component_ids: npt.NDArray[np.int32]
    component_sizes: list[int] = field(default_factory=list)
    num_components: int = 0


@dataclass
class GraphStatistics:
    node_count: int = 0
    edge_count: int = 0
    num_components: int = 0
    giant_component_size: int = 0
    giant_component_percent: float = 0.0
    avg_degree: float = 0.0
    isolated_nodes: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_adjacency_list(arena: GraphArena) -> list[list[int]]:
    """One neighbour list per node, built from a single pass over the edges."""
    adjacency: list[list[int]] = [[] for _ in range(arena.node_count)]
    m = arena.edge_count
    for s, t in zip(arena.edge_source[:m].tolist(), arena.edge_target[:m].tolist()):
        adjacency[s].append(t)
        adjacency[t].append(s)
    return adjacency


def compute_connected_components(arena: GraphArena) -> ComponentResult:
    """Label every node with the id of its connected component (BFS)."""
    n = arena.node_count
    adjacency = build_adjacency_list(arena)
    labels = [-1] * n
    component_sizes: list[int] = []

    for start in range(n):
        if labels[start] != -1:
            continue

        current = len(component_sizes)
        labels[start] = current
        size = 1
        queue = deque([start])
        while queue:
            node = queue.popleft()
            for neighbor in adjacency[node]:
                if labels[neighbor] == -1:
                    labels[neighbor] = current
                    size += 1
                    queue.append(neighbor)
        component_sizes.append(size)

    return ComponentResult(
        component_ids=np.array(labels, dtype=np.int32),
        component_sizes=component_sizes,
        num_components=len(component_sizes),
    )


def _giant_of(result: ComponentResult) -> tuple[int, int]:
    giant_id = -1
    giant_size = 0
    # Strict comparison keeps the earliest discovered component on ties
    for component_id, size in enumerate(result.component_sizes):
        if size > giant_size:
            giant_id = component_id
            giant_size = size
    return giant_id, giant_size


def find_giant_component(arena: GraphArena) -> tuple[int, int]:
    """
    Returns:
        (component id, size) of the largest component, (-1, 0) for an empty graph.
    """
    return _giant_of(compute_connected_components(arena))


def get_giant_component_nodes(arena: GraphArena) -> list[int]:
    """Ascending indices of the nodes in the giant component."""
    result = compute_connected_components(arena)
    giant_id, _ = _giant_of(result)
    if giant_id < 0:
        return []
    return [int(i) for i in np.flatnonzero(result.component_ids == giant_id)]


def compute_degrees(arena: GraphArena) -> npt.NDArray[np.int64]:
    """Number of incident edges per node."""
    n = arena.node_count
    m = arena.edge_count
    degrees = np.bincount(arena.edge_source[:m], minlength=n)
    degrees += np.bincount(arena.edge_target[:m], minlength=n)
    return degrees.astype(np.int64)


def compute_statistics(arena: GraphArena) -> GraphStatistics:
    """Snapshot of size, degree and connectivity figures; valid until the next mutation."""
    n = arena.node_count
    m = arena.edge_count
    if n == 0:
        return GraphStatistics(edge_count=m)

    degrees = compute_degrees(arena)
    result = compute_connected_components(arena)
    _, giant_size = _giant_of(result)

    stats = GraphStatistics(
        node_count=n,
        edge_count=m,
        num_components=result.num_components,
        giant_component_size=giant_size,
        giant_component_percent=100.0 * giant_size / n,
        avg_degree=float(degrees.sum()) / n,
        isolated_nodes=int(np.count_nonzero(degrees == 0)),
    )
    logger.debug(f"Statistics at version {arena.version}: {stats}")
    return stats


# ------------------------------------------------------------------------------
# Mutating helpers
# ------------------------------------------------------------------------------
def auto_connect_nearby(arena: GraphArena, max_distance: float) -> int:
    """
    Connect every pair of nodes lying within `max_distance` of each other.

    Existing connections are tracked in a local set while scanning, so the
    O(n^2) pair sweep never falls back to the arena's O(E) edge lookup.

    Returns:
        Number of edges added.
    """
    n = arena.node_count
    m = arena.edge_count
    connected = set()
    for s, t in zip(arena.edge_source[:m].tolist(), arena.edge_target[:m].tolist()):
        connected.add((min(s, t), max(s, t)))

    xs = arena.node_x[:n].astype(np.float64)
    ys = arena.node_y[:n].astype(np.float64)
    max_d2 = max_distance * max_distance

    added = 0
    for i in range(n - 1):
        d2 = (xs[i + 1:] - xs[i]) ** 2 + (ys[i + 1:] - ys[i]) ** 2
        for offset in np.flatnonzero(d2 <= max_d2):
            j = i + 1 + int(offset)
            if (i, j) in connected:
                continue
            if arena.append_edge(i, j) >= 0:
                connected.add((i, j))
                added += 1

    logger.info(f"Auto-connect within {max_distance}: added {added} edges")
    return added


def _remove_descending(arena: GraphArena, indices) -> int:
    # Descending order: compaction only relocates the last node, which has
    # already been handled
    removed = 0
    for index in sorted((int(i) for i in indices), reverse=True):
        if arena.remove_node(index):
            removed += 1
    return removed


def remove_isolated_nodes(arena: GraphArena) -> int:
    """Remove every node without incident edges. Returns the number removed."""
    isolated = np.flatnonzero(compute_degrees(arena) == 0)
    removed = _remove_descending(arena, isolated)
    logger.info(f"Removed {removed} isolated nodes")
    return removed


def keep_only_giant_component(arena: GraphArena) -> int:
    """Remove every node outside the giant component. Returns the number removed."""
    result = compute_connected_components(arena)
    giant_id, _ = _giant_of(result)
    if giant_id < 0:
        return 0
    outside = np.flatnonzero(result.component_ids != giant_id)
    removed = _remove_descending(arena, outside)
    logger.info(f"Removed {removed} nodes outside the giant component")
    return removed
