"""
Polygon math for the layout engine.

Polygons are numpy arrays of shape (k, 2) holding [x, y] vertices in order.
All functions are pure: inputs are never modified in place.
"""

import numpy as np
from typing import NamedTuple, Optional, Sequence, Tuple

from .constants import (
    DEGENERATE_AREA, MIN_EDGE_LENGTH, PARALLEL_EPSILON, MIN_INSET_AREA
)

EMPTY_POLYGON = np.empty((0, 2), dtype=float)


class BoundingBox(NamedTuple):
    """Axis-aligned bounding box of a polygon."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def as_polygon(points) -> np.ndarray:
    """Coerce a sequence of [x, y] pairs to a float (k, 2) array."""
    poly = np.asarray(points, dtype=float)
    if poly.size == 0:
        return EMPTY_POLYGON.copy()
    return poly.reshape(-1, 2)


def signed_area(polygon) -> float:
    """
    Signed area of a polygon using the shoelace formula.

    Positive for counter-clockwise winding in a y-up frame, negative
    for clockwise.
    """
    poly = as_polygon(polygon)
    if len(poly) < 3:
        return 0.0
    x = poly[:, 0]
    y = poly[:, 1]
    return float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y) / 2.0)


def polygon_area(polygon) -> float:
    """
    Calculate the area of a polygon.

    Args:
        polygon: Array of [x, y] vertices

    Returns:
        Absolute area, independent of winding direction
    """
    return abs(signed_area(polygon))


def polygon_centroid(polygon) -> np.ndarray:
    """Compute the centroid of a polygon.

    Degenerate polygons (near-zero area) fall back to the mean of their
    vertices, which is an approximation rather than a true centroid.

    Args:
        polygon: Array of [x, y] vertex coordinates

    Returns:
        [x, y] centroid coordinates
    """
    poly = as_polygon(polygon)

    n = len(poly)
    area = 0.0
    cx = 0.0
    cy = 0.0

    for i in range(n):
        j = (i + 1) % n
        a = poly[i][0] * poly[j][1] - poly[j][0] * poly[i][1]
        area += a
        cx += (poly[i][0] + poly[j][0]) * a
        cy += (poly[i][1] + poly[j][1]) * a

    area *= 0.5
    if abs(area) < DEGENERATE_AREA:
        return np.mean(poly, axis=0)

    return np.array([cx / (6.0 * area), cy / (6.0 * area)])


def clip_half_plane(polygon, point: Sequence[float], normal: Sequence[float]) -> np.ndarray:
    """
    Clip a polygon against a half-plane (Sutherland-Hodgman).

    The kept side is every v with (v - point) . normal >= 0. Exact
    intersection points are inserted on edges crossing the line.

    Args:
        polygon: Input polygon vertices
        point: Any point on the clipping line
        normal: Normal of the line, pointing into the kept side

    Returns:
        Clipped polygon; empty when the polygon lies entirely outside
    """
    poly = as_polygon(polygon)
    px, py = point
    nx, ny = normal

    out = []
    n = len(poly)
    for i in range(n):
        cur = poly[i]
        nxt = poly[(i + 1) % n]

        cur_d = (cur[0] - px) * nx + (cur[1] - py) * ny
        nxt_d = (nxt[0] - px) * nx + (nxt[1] - py) * ny

        if cur_d >= 0:
            out.append((cur[0], cur[1]))

        if (cur_d >= 0) != (nxt_d >= 0):
            t = cur_d / (cur_d - nxt_d)
            out.append((cur[0] + t * (nxt[0] - cur[0]),
                        cur[1] + t * (nxt[1] - cur[1])))

    if not out:
        return EMPTY_POLYGON.copy()
    return np.array(out, dtype=float)


def _offset_edges(poly: np.ndarray, amount: float):
    """Shift every non-degenerate edge inward by amount."""
    wind = -1.0 if signed_area(poly) > 0 else 1.0

    edges = []
    n = len(poly)
    for i in range(n):
        p1 = poly[i]
        p2 = poly[(i + 1) % n]
        dx = p2[0] - p1[0]
        dy = p2[1] - p1[1]
        length = np.hypot(dx, dy)
        if length < MIN_EDGE_LENGTH:
            continue

        nx = wind * dy / length
        ny = wind * -dx / length
        edges.append((p1 + np.array([nx, ny]) * amount,
                      p2 + np.array([nx, ny]) * amount))
    return edges


def inset_polygon(polygon: Optional[np.ndarray], amount: float) -> Optional[np.ndarray]:
    """
    Shrink a polygon inward by a fixed distance.

    Each edge is offset along its inward normal and consecutive offset
    lines are intersected. Near-parallel neighbours use the midpoint of
    their offset endpoints. If the inset collapses or inverts the shape (fewer
    than 3 vertices, almost no area, or an edge turned backwards), the
    original polygon is returned.

    Args:
        polygon: Polygon vertices, or None for a collapsed cell
        amount: Inset distance

    Returns:
        Inset polygon, or the input unchanged if the inset failed
    """
    if polygon is None or len(polygon) < 3 or amount <= 0:
        return polygon

    poly = as_polygon(polygon)
    edges = _offset_edges(poly, amount)
    if len(edges) < 3:
        return polygon

    result = []
    for i in range(len(edges)):
        a1, a2 = edges[i]
        b1, b2 = edges[(i + 1) % len(edges)]
        d1 = a2 - a1
        d2 = b2 - b1

        denom = d1[0] * d2[1] - d1[1] * d2[0]
        if abs(denom) < PARALLEL_EPSILON:
            result.append((a2 + b1) / 2.0)
        else:
            t = ((b1[0] - a1[0]) * d2[1] - (b1[1] - a1[1]) * d2[0]) / denom
            result.append(a1 + t * d1)

    result = np.array(result, dtype=float)
    if len(result) < 3 or abs(signed_area(result)) < MIN_INSET_AREA:
        return polygon

    # An edge running backwards means the inset overshot and turned inside out
    for i, (a1, a2) in enumerate(edges):
        if np.dot(result[i] - result[i - 1], a2 - a1) < -DEGENERATE_AREA:
            return polygon

    return result


def point_in_polygon(point: Sequence[float], polygon) -> bool:
    """Ray casting parity test. False for polygons with fewer than 3 vertices."""
    if polygon is None or len(polygon) < 3:
        return False

    poly = as_polygon(polygon)
    x, y = point
    inside = False
    j = len(poly) - 1
    for i in range(len(poly)):
        xi, yi = poly[i]
        xj, yj = poly[j]
        if ((yi > y) != (yj > y)) and (x < (xj - xi) * (y - yi) / (yj - yi) + xi):
            inside = not inside
        j = i
    return inside


def bounding_box(polygon) -> BoundingBox:
    """Bounding box of a non-empty polygon."""
    poly = as_polygon(polygon)
    if len(poly) == 0:
        raise ValueError("Cannot compute the bounding box of an empty polygon")
    mins = poly.min(axis=0)
    maxs = poly.max(axis=0)
    return BoundingBox(float(mins[0]), float(mins[1]), float(maxs[0]), float(maxs[1]))


def polygon_to_list(polygon: Optional[np.ndarray]) -> Optional[list]:
    """Plain [[x, y], ...] list for serialization; None stays None."""
    if polygon is None:
        return None
    return [[float(x), float(y)] for x, y in polygon]


def cell_areas(cells: Sequence[Optional[np.ndarray]]) -> Tuple[float, ...]:
    """Area of every cell, 0 for collapsed ones."""
    return tuple(0.0 if c is None else polygon_area(c) for c in cells)
