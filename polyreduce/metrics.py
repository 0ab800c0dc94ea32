"""Instrumentation and overlap measurement for reductions.

:class:`ReductionStats` replaces ambient counters: every reduction builds
its own instance and hands it back to the caller (or to a caller-supplied
sink). The overlap helpers are used to check that a reduced set really is
free of overlaps.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Dict, Iterable

from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union
from shapely.strtree import STRtree


@dataclass
class ReductionStats:
    """Counters and timings collected during one reduction pass."""

    input_count: int = 0
    output_count: int = 0
    intersect_calls: int = 0
    bbox_rejections: int = 0
    union_calls: int = 0
    failures: int = 0
    skipped_features: int = 0
    intersect_seconds: float = 0.0
    union_seconds: float = 0.0
    buffer_seconds: float = 0.0

    @property
    def reduction_ratio(self) -> float:
        """Output count over input count (1.0 for an empty input)."""
        if self.input_count == 0:
            return 1.0
        return self.output_count / self.input_count

    def as_dict(self) -> Dict[str, object]:
        return asdict(self)

    def summary(self) -> str:
        return (
            f"{self.input_count} -> {self.output_count} polygons, "
            f"intersect {self.intersect_seconds * 1000:.1f} ms "
            f"({self.intersect_calls} calls, {self.bbox_rejections} bbox rejections), "
            f"union {self.union_seconds * 1000:.1f} ms ({self.union_calls} calls), "
            f"{self.failures} failure(s)"
        )


StatsSink = Callable[[ReductionStats], None]


def total_overlap_area(geometries: Iterable[BaseGeometry]) -> float:
    """Compute the total overlapping area within ``geometries``."""
    geometries = [geom for geom in geometries if geom and not geom.is_empty]
    if len(geometries) < 2:
        return 0.0
    union = unary_union(geometries)
    combined_area = sum(getattr(geom, "area", 0.0) for geom in geometries)
    return combined_area - getattr(union, "area", 0.0)


def count_overlapping_pairs(geometries: Iterable[BaseGeometry], tolerance: float = 1e-10) -> int:
    """Count pairs whose shared area exceeds ``tolerance``.

    Uses spatial indexing so only candidate pairs are intersected.
    """
    geometries = [geom for geom in geometries if geom and not geom.is_empty]
    if len(geometries) < 2:
        return 0

    tree = STRtree(geometries)
    count = 0
    for i, geom_i in enumerate(geometries):
        for j in tree.query(geom_i, predicate='intersects'):
            if j > i and geom_i.intersection(geometries[j]).area > tolerance:
                count += 1
    return count


__all__ = [
    "ReductionStats",
    "StatsSink",
    "total_overlap_area",
    "count_overlapping_pairs",
]
