"""Tests for bounding boxes."""

from dataclasses import astuple

import pytest
from shapely.geometry import Polygon, MultiPolygon, LineString, box

from polyreduce.bbox import BoundingBox


class TestBoundingBoxFromGeometry:
    """Tests for BoundingBox.from_geometry()."""

    def test_polygon_box(self):
        bbox = BoundingBox.from_geometry(Polygon([(0, 0), (4, 1), (2, 3)]))
        assert astuple(bbox) == (0.0, 0.0, 4.0, 3.0)

    def test_holes_ignored(self):
        poly = Polygon(
            [(0, 0), (10, 0), (10, 10), (0, 10)],
            holes=[[(2, 2), (4, 2), (4, 4), (2, 4)]],
        )
        assert astuple(BoundingBox.from_geometry(poly)) == (0.0, 0.0, 10.0, 10.0)

    def test_multipolygon_covers_all_parts(self):
        multi = MultiPolygon([box(0, 0, 1, 1), box(5, -2, 6, 3)])
        assert astuple(BoundingBox.from_geometry(multi)) == (0.0, -2.0, 6.0, 3.0)

    def test_matches_shapely_bounds(self):
        poly = Polygon([(1.5, -3), (7, 2), (0.25, 9), (-4, 1)])
        assert astuple(BoundingBox.from_geometry(poly)) == pytest.approx(poly.bounds)

    def test_empty_polygon_rejected(self):
        with pytest.raises(ValueError):
            BoundingBox.from_geometry(Polygon())

    def test_non_polygon_rejected(self):
        with pytest.raises(TypeError):
            BoundingBox.from_geometry(LineString([(0, 0), (1, 1)]))


class TestOverlaps:
    """Tests for the separating-axis box test."""

    def test_overlapping(self):
        a = BoundingBox(0, 0, 2, 2)
        b = BoundingBox(1, 1, 3, 3)
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_contained(self):
        assert BoundingBox(0, 0, 10, 10).overlaps(BoundingBox(2, 2, 3, 3))

    @pytest.mark.parametrize("other", [
        BoundingBox(3, 0, 4, 2),    # right
        BoundingBox(-4, 0, -3, 2),  # left
        BoundingBox(0, 3, 2, 4),    # above
        BoundingBox(0, -4, 2, -3),  # below
    ])
    def test_separated(self, other):
        a = BoundingBox(0, 0, 2, 2)
        assert not a.overlaps(other)
        assert not other.overlaps(a)

    def test_touching_edges_overlap(self):
        assert BoundingBox(0, 0, 1, 1).overlaps(BoundingBox(1, 0, 2, 1))

    def test_diagonal_polygons_with_overlapping_boxes(self):
        """Overlapping boxes do not imply intersecting polygons."""
        a = Polygon([(0, 0), (2, 0), (0, 2)])
        b = Polygon([(2, 2), (2, 1.5), (1.5, 2)])
        assert BoundingBox.from_geometry(a).overlaps(BoundingBox.from_geometry(b))
        assert not a.intersects(b)
