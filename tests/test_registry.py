"""Tests for the merge registry."""

import pytest
from shapely.geometry import box

from polyreduce import MergeRegistry, PolygonRecord


def _record(x, name=None):
    return PolygonRecord.from_geometry(box(x, 0, x + 1, 1), name=name)


class TestMergeRegistry:
    """Tests for MergeRegistry."""

    def test_starts_empty(self):
        registry = MergeRegistry()
        assert len(registry) == 0
        assert registry.values() == []

    def test_insert_and_lookup(self):
        registry = MergeRegistry()
        record = _record(0, 'a')
        registry.insert(record)

        assert record.id in registry
        assert registry.get(record.id) is record
        assert registry.get('missing') is None

    def test_identical_geometry_deduplicated(self):
        registry = MergeRegistry([_record(0, 'a'), _record(0, 'b')])
        assert len(registry) == 1
        assert registry.values()[0].name == 'b'

    def test_replace_removes_and_inserts(self):
        a, b, c = _record(0), _record(5), _record(10)
        registry = MergeRegistry([a, b, c])
        merged = PolygonRecord.from_geometry(box(0, 0, 6, 1), merge_count=2)

        registry.replace([a.id, b.id], merged)

        assert len(registry) == 2
        assert a.id not in registry
        assert b.id not in registry
        assert merged.id in registry
        assert c.id in registry

    def test_replace_with_nothing_removed_inserts(self):
        a, b = _record(0), _record(5)
        registry = MergeRegistry([a])
        registry.replace([], b)
        assert len(registry) == 2

    def test_replace_unknown_id_leaves_registry_untouched(self):
        a, b = _record(0), _record(5)
        registry = MergeRegistry([a])

        with pytest.raises(KeyError):
            registry.replace([a.id, 'missing'], b)

        assert registry.values() == [a]

    def test_values_is_snapshot(self):
        registry = MergeRegistry([_record(0)])
        snapshot = registry.values()
        snapshot.clear()
        assert len(registry) == 1

    def test_iteration(self):
        records = [_record(0), _record(5)]
        registry = MergeRegistry(records)
        assert {r.id for r in registry} == {r.id for r in records}
