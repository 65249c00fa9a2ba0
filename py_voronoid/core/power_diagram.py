"""
Power diagram (weighted Voronoi) construction.

Each cell starts as the bounding rectangle and is clipped against the
power bisector of every other site. This is O(N^2) per build, which is
fine for the dataset sizes the engine targets (about 50 items at most).
"""

import numpy as np
import structlog
from typing import List, Optional

from .constants import COINCIDENT_DISTANCE
from .polygon import as_polygon, clip_half_plane

logger = structlog.get_logger()


def get_bounds(width: float, height: float, pad: float) -> np.ndarray:
    """
    Rectangle used to clip every cell.

    Args:
        width: Canvas width
        height: Canvas height
        pad: Padding from each edge

    Returns:
        4x2 array of rectangle vertices
    """
    return np.array([
        [pad, pad],
        [width - pad, pad],
        [width - pad, height - pad],
        [pad, height - pad],
    ], dtype=float)


def calculate_total_area(width: float, height: float, pad: float) -> float:
    """Drawable area inside the padding."""
    return float((width - 2 * pad) * (height - 2 * pad))


def compute_power_diagram(seeds, weights, bounds) -> List[Optional[np.ndarray]]:
    """
    Compute one convex cell per site.

    The bisector between sites i and j passes through
    midpoint(i, j) + (w_i - w_j) / (2 |d|^2) * d, with d = site_j - site_i,
    and its normal points toward site i. A larger weight therefore pushes
    the boundary away from its own site.

    Args:
        seeds: (N, 2) site positions
        weights: (N,) site weights (larger = bigger cell)
        bounds: Clip rectangle vertices

    Returns:
        List of cell polygons, None for cells that collapsed
    """
    seeds = np.asarray(seeds, dtype=float).reshape(-1, 2)
    weights = np.asarray(weights, dtype=float)
    bounds = as_polygon(bounds)

    cells = []
    for i in range(len(seeds)):
        cell = bounds.copy()
        si = seeds[i]
        wi = weights[i]

        for j in range(len(seeds)):
            if i == j:
                continue

            d = seeds[j] - si
            dist = np.hypot(d[0], d[1])
            if dist < COINCIDENT_DISTANCE:
                continue  # coincident sites have no bisector

            shift = (wi - weights[j]) / (2 * dist * dist)
            mid = (si + seeds[j]) / 2 + shift * d

            cell = clip_half_plane(cell, mid, -d / dist)
            if len(cell) < 3:
                break

        cells.append(cell if len(cell) >= 3 else None)

    return cells
