"""Axis-aligned bounding boxes used as a fast-reject filter.

A box is only ever used to skip an exact intersection test: disjoint boxes
guarantee disjoint polygons, overlapping boxes guarantee nothing.
"""

from dataclasses import dataclass

import numpy as np
from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box over a polygon's exterior ring(s)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def from_geometry(cls, geometry: BaseGeometry) -> "BoundingBox":
        """Compute the box of a Polygon or MultiPolygon exterior.

        Holes are ignored; they can only lie inside the exterior.

        Examples:
            >>> BoundingBox.from_geometry(Polygon([(0, 0), (2, 0), (2, 1), (0, 1)]))
            BoundingBox(min_x=0.0, min_y=0.0, max_x=2.0, max_y=1.0)
        """
        if isinstance(geometry, Polygon):
            exteriors = [geometry.exterior]
        elif isinstance(geometry, MultiPolygon):
            exteriors = [part.exterior for part in geometry.geoms]
        else:
            raise TypeError(f"Expected Polygon or MultiPolygon, got {geometry.geom_type}")

        coords = [np.asarray(ring.coords)[:, :2] for ring in exteriors if not ring.is_empty]
        if not coords:
            raise ValueError("Cannot compute bounding box of an empty geometry")

        stacked = np.vstack(coords)
        min_x, min_y = stacked.min(axis=0)
        max_x, max_y = stacked.max(axis=0)
        return cls(float(min_x), float(min_y), float(max_x), float(max_y))

    def overlaps(self, other: "BoundingBox") -> bool:
        """Separating-axis test on x and y; touching edges count as overlap."""
        if self.max_x < other.min_x:
            return False  # left of other
        if self.min_x > other.max_x:
            return False  # right of other
        if self.max_y < other.min_y:
            return False  # below other
        if self.min_y > other.max_y:
            return False  # above other
        return True


__all__ = ['BoundingBox']
