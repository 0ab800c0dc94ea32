"""Tests for the cluster merge engine."""

import pytest
from shapely.geometry import MultiPolygon, Polygon, box

from polyreduce import (
    GeometryOperationFailed,
    MergeRegistry,
    PlanarGeometry,
    PolygonRecord,
    ReductionStats,
    UnionShapePolicy,
    join_names,
    merge_into_registry,
)
from polyreduce.core.geometry_utils import content_id
from polyreduce.merge import find_intersecting, fold_union


def _record(x, y=0.0, name=None, size=1.0):
    return PolygonRecord.from_geometry(box(x, y, x + size, y + size), name=name)


class CountingGeometry(PlanarGeometry):
    """PlanarGeometry that records every exact intersection test."""

    def __init__(self):
        super().__init__()
        self.intersect_calls = 0
        self.union_calls = 0

    def intersects(self, a, b):
        self.intersect_calls += 1
        return super().intersects(a, b)

    def union(self, a, b):
        self.union_calls += 1
        return super().union(a, b)


class FailingUnion(PlanarGeometry):
    """PlanarGeometry whose n-th union calls fail."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = set(fail_on)
        self.calls = 0

    def union(self, a, b):
        self.calls += 1
        if self.calls in self.fail_on:
            raise GeometryOperationFailed('union', 'injected')
        return super().union(a, b)


class FailingIntersects(PlanarGeometry):
    def intersects(self, a, b):
        raise GeometryOperationFailed('intersects', 'injected')


class TestJoinNames:
    """Tests for join_names()."""

    def test_both_named(self):
        assert join_names('a', 'b') == 'a | b'

    def test_custom_separator(self):
        assert join_names('a', 'b', separator=' + ') == 'a + b'

    def test_anonymous_sides(self):
        assert join_names(None, 'b') == 'b'
        assert join_names('a', None) == 'a'
        assert join_names(None, None) is None


class TestMergeIntoRegistry:
    """Tests for merge_into_registry()."""

    def test_empty_registry_insert(self):
        registry = MergeRegistry()
        record = _record(0, name='a')

        assert merge_into_registry(registry, record)
        assert registry.values() == [record]
        assert registry.values()[0].merge_count == 1

    def test_disjoint_polygon_inserted_unchanged(self):
        registry = MergeRegistry([_record(0, name='a')])
        record = _record(5, name='b')

        assert merge_into_registry(registry, record)
        assert len(registry) == 2
        assert registry.get(record.id) is record

    def test_overlapping_polygons_merged(self):
        a, b = _record(0, name='a'), _record(0.5, name='b')
        registry = MergeRegistry([a])

        assert merge_into_registry(registry, b)

        [merged] = registry.values()
        assert merged.name == 'b | a'
        assert merged.merge_count == 2
        assert merged.geometry.area == pytest.approx(1.5)
        assert merged.id == content_id(merged.geometry)
        assert a.id not in registry

    def test_bridge_polygon_merges_whole_cluster(self):
        """A polygon overlapping two disjoint records folds both into one."""
        a, c = _record(0, name='a'), _record(2, name='c')
        bridge = PolygonRecord.from_geometry(box(0.5, 0, 2.5, 1), name='b')
        registry = MergeRegistry([a, c])

        assert merge_into_registry(registry, bridge)

        [merged] = registry.values()
        assert merged.merge_count == 3
        assert merged.name == 'b | a | c'
        assert merged.geometry.area == pytest.approx(3.0)

    def test_merge_counts_accumulate(self):
        registry = MergeRegistry()
        for x in (0, 0.5, 0.9):
            merge_into_registry(registry, _record(x))
        [merged] = registry.values()
        assert merged.merge_count == 3

    def test_merged_geometry_is_normalized(self):
        registry = MergeRegistry([_record(0)])
        merge_into_registry(registry, _record(1))  # shares an edge
        [merged] = registry.values()
        assert isinstance(merged.geometry, Polygon)
        assert merged.geometry.exterior.is_ccw
        assert merged.geometry.area == pytest.approx(2.0)
        assert len(merged.geometry.exterior.coords) == 5  # seam vertices dropped

    def test_box_filter_skips_exact_test(self):
        ops = CountingGeometry()
        stats = ReductionStats()
        registry = MergeRegistry([_record(0), _record(10), _record(20)])

        merge_into_registry(registry, _record(30), ops=ops, stats=stats)

        assert ops.intersect_calls == 0
        assert stats.bbox_rejections == 3
        assert stats.intersect_calls == 0

    def test_overlapping_boxes_run_exact_test(self):
        ops = CountingGeometry()
        stats = ReductionStats()
        triangle = PolygonRecord.from_geometry(Polygon([(0, 0), (2, 0), (0, 2)]))
        corner = PolygonRecord.from_geometry(Polygon([(2, 2), (2, 1.5), (1.5, 2)]))
        registry = MergeRegistry([triangle])

        merge_into_registry(registry, corner, ops=ops, stats=stats)

        assert ops.intersect_calls == 1
        assert ops.union_calls == 0
        assert len(registry) == 2

    def test_intersect_failure_treated_as_disjoint(self):
        stats = ReductionStats()
        registry = MergeRegistry([_record(0)])

        ok = merge_into_registry(registry, _record(0.5), ops=FailingIntersects(), stats=stats)

        assert not ok
        assert len(registry) == 2
        assert stats.failures == 1

    def test_union_failure_keeps_unfolded_members(self):
        """Members after a failing union stay live; nothing is dropped."""
        a, c = _record(0, name='a'), _record(2, name='c')
        bridge = PolygonRecord.from_geometry(box(0.5, 0, 2.5, 1), name='b')
        registry = MergeRegistry([a, c])
        stats = ReductionStats()

        ok = merge_into_registry(registry, bridge, ops=FailingUnion(fail_on={2}), stats=stats)

        assert not ok
        assert stats.failures == 1
        assert len(registry) == 2
        assert c.id in registry
        assert a.id not in registry
        names = sorted(r.name for r in registry.values())
        assert names == ['b | a', 'c']
        assert sum(r.merge_count for r in registry.values()) == 3

    def test_first_union_failure_inserts_arrival_alone(self):
        a = _record(0, name='a')
        b = _record(0.5, name='b')
        registry = MergeRegistry([a])

        ok = merge_into_registry(registry, b, ops=FailingUnion(fail_on={1}))

        assert not ok
        assert registry.get(a.id) is a
        assert registry.get(b.id) is b

    def test_corner_touch_rejected_by_default(self):
        a = _record(0, name='a')
        b = _record(1, y=1, name='b')  # touches a at (1, 1)
        registry = MergeRegistry([a])
        stats = ReductionStats()

        ok = merge_into_registry(registry, b, stats=stats)

        assert not ok
        assert len(registry) == 2
        assert stats.failures == 1

    def test_corner_touch_accepted_as_multipolygon(self):
        a = _record(0, name='a')
        b = _record(1, y=1, name='b')
        registry = MergeRegistry([a])

        ok = merge_into_registry(registry, b, union_shape_policy='accept')

        assert ok
        [merged] = registry.values()
        assert isinstance(merged.geometry, MultiPolygon)
        assert merged.merge_count == 2
        assert merged.id == content_id(merged.geometry)

    def test_invalid_policy_string(self):
        with pytest.raises(ValueError):
            merge_into_registry(MergeRegistry(), _record(0), union_shape_policy='sometimes')


class TestHelpers:
    """Tests for find_intersecting() and fold_union()."""

    def test_find_intersecting(self):
        members = [_record(0), _record(5), _record(0.5, y=0.5)]
        registry = MergeRegistry(members)
        found = find_intersecting(registry, _record(0.2), PlanarGeometry(), ReductionStats())
        assert {r.id for r in found} == {members[0].id, members[2].id}

    def test_fold_union_returns_folded_members(self):
        test = _record(0.5, name='t')
        members = [_record(0, name='m1'), _record(1, name='m2')]
        merged, folded = fold_union(test, members, PlanarGeometry(), ReductionStats())
        assert folded == members
        assert merged.name == 't | m1 | m2'
        assert merged.merge_count == 3
        assert merged.geometry.area == pytest.approx(2.0)
