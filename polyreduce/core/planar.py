"""Planar geometry capability bound to Shapely.

The reduction never calls Shapely's set operations directly; it goes through
a :class:`PlanarGeometry` instance so that the operations can be swapped for
instrumented or deliberately failing ones. Every library error is re-raised
as :class:`GeometryOperationFailed`.
"""

from typing import Union

from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry

from .errors import GeometryOperationFailed
from ..simplify import normalize_polygon

Polygonal = Union[Polygon, MultiPolygon]


class PlanarGeometry:
    """Offset, intersection test, union and normalization of planar polygons.

    Args:
        quad_segs: Segments per quarter circle for round buffer joins
    """

    def __init__(self, quad_segs: int = 8):
        self.quad_segs = quad_segs

    def offset(self, geometry: Polygonal, distance: float) -> BaseGeometry:
        """Expand ``geometry`` outward by ``distance`` coordinate units."""
        try:
            result = geometry.buffer(distance, quad_segs=self.quad_segs)
        except Exception as e:
            raise GeometryOperationFailed('offset', str(e)) from e
        if result.is_empty:
            raise GeometryOperationFailed('offset', 'result is empty')
        return result

    def intersects(self, a: Polygonal, b: Polygonal) -> bool:
        """Exact test for a non-empty intersection."""
        try:
            return bool(a.intersects(b))
        except Exception as e:
            raise GeometryOperationFailed('intersects', str(e)) from e

    def union(self, a: Polygonal, b: Polygonal) -> BaseGeometry:
        """Planar union of two polygonal geometries."""
        try:
            return a.union(b)
        except Exception as e:
            raise GeometryOperationFailed('union', str(e)) from e

    def normalize(self, geometry: Polygonal) -> BaseGeometry:
        """Fix winding and drop duplicate or collinear vertices."""
        try:
            return normalize_polygon(geometry)
        except (TypeError, ValueError) as e:
            raise GeometryOperationFailed('normalize', str(e)) from e

    def __repr__(self) -> str:
        return f"PlanarGeometry(quad_segs={self.quad_segs})"


__all__ = ['PlanarGeometry', 'Polygonal']
