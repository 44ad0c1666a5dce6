"""
Spatial Queries
===============
Hit-testing over the raw arena arrays.

Every query is a linear numpy scan of the occupied prefix; there is no
spatial index to keep in sync with the arena. Results are plain Python ints
and are only meaningful until the next mutation of the arena.

Ties between equally distant candidates resolve to the lowest index.
"""
from __future__ import annotations

import math
from typing import Sequence, TYPE_CHECKING

import numpy as np

from topoedit.config import INVALID_INDEX
from topoedit.model.geometry_utils import points_in_polygon, points_segments_distance_sq

if TYPE_CHECKING:
    import numpy.typing as npt
    from topoedit.model.arena import GraphArena


def _node_coords(arena: GraphArena) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    n = arena.node_count
    return arena.node_x[:n].astype(np.float64), arena.node_y[:n].astype(np.float64)


def find_nearest_node(
    arena: GraphArena,
    x: float,
    y: float,
    max_dist: float = math.inf,
) -> int:
    """
    Index of the node closest to (x, y), or INVALID_INDEX.

    Args:
        arena: The graph to search.
        x, y: Query point in world coordinates.
        max_dist: Only nodes strictly closer than this are considered.
    """
    if arena.node_count == 0:
        return INVALID_INDEX

    xs, ys = _node_coords(arena)
    d2 = (xs - x) ** 2 + (ys - y) ** 2
    best = int(np.argmin(d2))
    # Squared comparison, no sqrt per candidate
    if d2[best] < max_dist * max_dist:
        return best
    return INVALID_INDEX


def find_nodes_in_radius(arena: GraphArena, x: float, y: float, radius: float) -> list[int]:
    """Nodes within `radius` of (x, y), boundary included, ascending."""
    if arena.node_count == 0:
        return []
    xs, ys = _node_coords(arena)
    d2 = (xs - x) ** 2 + (ys - y) ** 2
    return [int(i) for i in np.flatnonzero(d2 <= radius * radius)]


def find_nodes_in_box(
    arena: GraphArena,
    min_x: float,
    min_y: float,
    max_x: float,
    max_y: float,
) -> list[int]:
    """Nodes inside the axis-aligned box, boundary included, ascending."""
    if arena.node_count == 0:
        return []
    xs, ys = _node_coords(arena)
    mask = (xs >= min_x) & (xs <= max_x) & (ys >= min_y) & (ys <= max_y)
    return [int(i) for i in np.flatnonzero(mask)]


def find_nodes_in_polygon(
    arena: GraphArena,
    polygon: Sequence[tuple[float, float]],
) -> list[int]:
    """Nodes inside a polygon or lasso outline (even-odd rule), ascending."""
    if arena.node_count == 0:
        return []
    xs, ys = _node_coords(arena)
    return [int(i) for i in np.flatnonzero(points_in_polygon(xs, ys, polygon))]


def find_nearest_edge(
    arena: GraphArena,
    x: float,
    y: float,
    max_dist: float = math.inf,
) -> int:
    """
    Index of the edge whose segment passes closest to (x, y), or INVALID_INDEX.

    The distance to an edge is the distance to the closest point of the
    segment between its endpoint positions, not to the infinite line.
    """
    m = arena.edge_count
    if m == 0:
        return INVALID_INDEX

    source = arena.edge_source[:m]
    target = arena.edge_target[:m]
    ax = arena.node_x[source].astype(np.float64)
    ay = arena.node_y[source].astype(np.float64)
    bx = arena.node_x[target].astype(np.float64)
    by = arena.node_y[target].astype(np.float64)

    d2 = points_segments_distance_sq(x, y, ax, ay, bx, by)
    best = int(np.argmin(d2))
    if d2[best] < max_dist * max_dist:
        return best
    return INVALID_INDEX
