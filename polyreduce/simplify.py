"""Vertex cleanup and winding normalization.

These functions back :meth:`PlanarGeometry.normalize`: they remove
consecutive duplicate vertices and exactly collinear vertices from every
ring, then orient the exterior counter-clockwise and holes clockwise.
"""

from typing import Union

import numpy as np
from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry
from shapely.geometry.polygon import orient
from simplification.cutil import simplify_coords as _rdp_simplify


# ============================================================================
# Private processing functions (work with numpy arrays)
# ============================================================================

def _remove_duplicate_vertices(
    vertices: np.ndarray,
    tolerance: float = 1e-10
) -> np.ndarray:
    """Internal function: Remove consecutive duplicate vertices within tolerance.

    Args:
        vertices: Numpy array of 2D vertices (Nx2)
        tolerance: Distance tolerance for considering vertices as duplicates

    Returns:
        Numpy array of vertices with duplicates removed
    """
    if len(vertices) < 2:
        return vertices.copy()

    is_closed = np.allclose(vertices[0], vertices[-1])

    result = [vertices[0]]
    for i in range(1, len(vertices)):
        distance = np.linalg.norm(vertices[i] - result[-1])
        if distance > tolerance:
            result.append(vertices[i])

    # Closing vertex may have been dropped as a duplicate of its predecessor
    if is_closed and len(result) > 1:
        if not np.allclose(result[0], result[-1]):
            result.append(result[0].copy())

    if len(result) < 2:
        return vertices[:2].copy()

    return np.array(result)


def _collinear_epsilon(vertices: np.ndarray) -> float:
    extent = float(np.ptp(vertices, axis=0).max()) if len(vertices) else 0.0
    return 1e-12 * max(extent, 1.0)


def _remove_collinear_vertices(vertices: np.ndarray) -> np.ndarray:
    """Internal function: Drop vertices lying on the segment between neighbours.

    Ramer-Douglas-Peucker with a tolerance at floating point noise level of the
    ring's extent. RDP never drops the endpoints, so the start vertex of a
    closed ring is checked against its wrap-around neighbours afterwards.
    """
    if len(vertices) < 3:
        return vertices.copy()

    epsilon = _collinear_epsilon(vertices)
    result = np.asarray(
        _rdp_simplify(np.ascontiguousarray(vertices, dtype=float), epsilon),
        dtype=float,
    )

    is_closed = len(result) >= 4 and np.allclose(result[0], result[-1])
    if is_closed:
        prev_pt, start, next_pt = result[-2], result[0], result[1]
        seg = next_pt - prev_pt
        seg_len = float(np.hypot(seg[0], seg[1]))
        if seg_len > 0:
            offset = start - prev_pt
            deviation = abs(seg[0] * offset[1] - seg[1] * offset[0]) / seg_len
            if deviation <= epsilon:
                result = np.vstack([result[1:-1], result[1:2]])

    return result


def _clean_ring(ring) -> np.ndarray:
    vertices = np.asarray(ring.coords, dtype=float)[:, :2]
    vertices = _remove_duplicate_vertices(vertices)
    vertices = _remove_collinear_vertices(vertices)
    if len(vertices) < 4:
        raise ValueError(f"Ring degenerates to {len(vertices)} vertices")
    return vertices


def _clean_polygon(polygon: Polygon) -> Polygon:
    if polygon.is_empty:
        raise ValueError("Cannot normalize an empty polygon")
    shell = _clean_ring(polygon.exterior)
    holes = [_clean_ring(interior) for interior in polygon.interiors]
    return orient(Polygon(shell, holes=holes), sign=1.0)


# ============================================================================
# Public API functions (work with Shapely geometries)
# ============================================================================

def normalize_polygon(geometry: Union[Polygon, MultiPolygon]) -> BaseGeometry:
    """Remove redundant vertices and fix winding of a polygonal geometry.

    The exterior of every part ends up counter-clockwise and holes clockwise.

    Args:
        geometry: Polygon or MultiPolygon

    Returns:
        Cleaned geometry of the same type

    Raises:
        TypeError: For non-polygonal input
        ValueError: If a ring collapses below four coordinates

    Examples:
        >>> cw = Polygon([(0, 0), (0, 1), (1, 1), (1, 0)])
        >>> normalize_polygon(cw).exterior.is_ccw
        True
    """
    if isinstance(geometry, Polygon):
        return _clean_polygon(geometry)
    elif isinstance(geometry, MultiPolygon):
        return MultiPolygon([_clean_polygon(part) for part in geometry.geoms])

    raise TypeError("Input geometry must be a Polygon or MultiPolygon.")


__all__ = [
    'normalize_polygon',
]
