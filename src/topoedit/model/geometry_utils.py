from __future__ import annotations

from typing import Sequence, TYPE_CHECKING

from math import hypot
import numpy as np

if TYPE_CHECKING:
    from numpy import typing as npt


def point_segment_distance_sq(
    px: float,
    py: float,
    ax: float,
    ay: float,
    bx: float,
    by: float,
) -> float:
    """
    Squared distance from point P to the segment AB.

    The point is projected onto the supporting line, the projection parameter
    is clamped to [0, 1] and the squared distance to the clamped point is
    returned. A degenerate segment (A == B) measures to A.
    """
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return (px - ax) ** 2 + (py - ay) ** 2

    t = ((px - ax) * dx + (py - ay) * dy) / length_sq
    t = max(0.0, min(1.0, t))
    cx = ax + t * dx
    cy = ay + t * dy
    return (px - cx) ** 2 + (py - cy) ** 2


def points_segments_distance_sq(
    px: float,
    py: float,
    ax: npt.NDArray[np.float64],
    ay: npt.NDArray[np.float64],
    bx: npt.NDArray[np.float64],
    by: npt.NDArray[np.float64],
) -> npt.NDArray[np.float64]:
    """
    Vectorized form of `point_segment_distance_sq` for one point against
    many segments.

    Args:
        px, py: The query point.
        ax, ay, bx, by: Arrays of shape (m,) with the segment endpoints.

    Returns:
        Array of shape (m,) with the squared distances.
    """
    dx = bx - ax
    dy = by - ay
    length_sq = dx * dx + dy * dy

    # t stays 0 for degenerate segments, measuring to the first endpoint
    t = np.zeros_like(length_sq)
    nonzero = length_sq > 0.0
    t[nonzero] = ((px - ax[nonzero]) * dx[nonzero] + (py - ay[nonzero]) * dy[nonzero]) / length_sq[nonzero]
    np.clip(t, 0.0, 1.0, out=t)

    cx = ax + t * dx
    cy = ay + t * dy
    return (px - cx) ** 2 + (py - cy) ** 2


def points_in_polygon(
    xs: npt.NDArray[np.float64],
    ys: npt.NDArray[np.float64],
    polygon: Sequence[tuple[float, float]] | npt.NDArray[np.float64],
) -> npt.NDArray[np.bool_]:
    """
    Even-odd (ray casting) containment test of many points against one polygon.

    Args:
        xs, ys: Arrays of shape (n,) with the point coordinates.
        polygon: Sequence of (x, y) vertices. Closing the ring is optional.

    Returns:
        Boolean mask of shape (n,). Fewer than 3 vertices select nothing.
    """
    poly = np.asarray(polygon, dtype=np.float64).reshape(-1, 2)
    inside = np.zeros(len(xs), dtype=bool)
    if len(poly) < 3:
        return inside

    j = len(poly) - 1
    for i in range(len(poly)):
        xi, yi = poly[i]
        xj, yj = poly[j]
        # Edges crossing the horizontal ray through each point
        crosses = (yi > ys) != (yj > ys)
        if yj != yi:
            x_at_y = (xj - xi) * (ys - yi) / (yj - yi) + xi
            inside ^= crosses & (xs < x_at_y)
        j = i
    return inside


def simplify_path(
    points: Sequence[tuple[float, float]],
    min_dist: float,
) -> list[tuple[float, float]]:
    """
    Thin out a freehand (lasso) path.

    Consecutive points closer than `min_dist` to the last kept point are
    dropped. The first and the last point are always kept.
    """
    if len(points) <= 2:
        return [tuple(p) for p in points]

    kept = [tuple(points[0])]
    for x, y in points[1:-1]:
        last_x, last_y = kept[-1]
        if hypot(x - last_x, y - last_y) >= min_dist:
            kept.append((x, y))
    kept.append(tuple(points[-1]))
    return kept
