"""Incremental cluster merging of overlapping polygons.

Each arriving polygon is tested against every live registry record (cheap
bounding-box rejection first, exact intersection second). All records it
intersects are folded into it with successive unions and replaced in the
registry by the single result.

The algorithm is single-pass: the outcome depends on input order, and
records that were finalized earlier are only revisited when a later
arrival overlaps them.
"""

import logging
import time
from collections import deque
from typing import List, Optional, Tuple, Union

from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry

from .core.errors import GeometryOperationFailed, UnexpectedUnionShape
from .core.planar import PlanarGeometry
from .core.types import PolygonRecord, UnionShapePolicy, coerce_enum
from .metrics import ReductionStats
from .registry import MergeRegistry

logger = logging.getLogger(__name__)

DEFAULT_NAME_SEPARATOR = ' | '


def join_names(
    first: Optional[str],
    second: Optional[str],
    separator: str = DEFAULT_NAME_SEPARATOR,
) -> Optional[str]:
    """Concatenate provenance labels; anonymous sides contribute nothing.

    Examples:
        >>> join_names('Dolores Park', 'Mission Playground')
        'Dolores Park | Mission Playground'
        >>> join_names(None, 'Mission Playground')
        'Mission Playground'
    """
    if first is None:
        return second
    if second is None:
        return first
    return f"{first}{separator}{second}"


def _label(record: PolygonRecord) -> str:
    return record.name if record.name is not None else record.id[:10]


def _check_union_shape(geometry: BaseGeometry, policy: UnionShapePolicy) -> None:
    if geometry.is_empty:
        raise UnexpectedUnionShape('empty ' + geometry.geom_type)
    if isinstance(geometry, Polygon):
        return
    if isinstance(geometry, MultiPolygon) and policy == UnionShapePolicy.ACCEPT:
        return
    raise UnexpectedUnionShape(geometry.geom_type)


def find_intersecting(
    registry: MergeRegistry,
    test: PolygonRecord,
    ops: PlanarGeometry,
    stats: ReductionStats,
) -> List[PolygonRecord]:
    """Return the live records whose geometry intersects ``test``.

    A failing exact test is logged and the pair treated as disjoint.
    """
    intersects = []

    for member in registry.values():
        if not test.bbox.overlaps(member.bbox):
            stats.bbox_rejections += 1
            continue

        start = time.perf_counter()
        try:
            hit = ops.intersects(test.geometry, member.geometry)
        except GeometryOperationFailed as e:
            stats.failures += 1
            logger.warning("Intersection test %s / %s skipped: %s", _label(test), _label(member), e)
            continue
        finally:
            stats.intersect_calls += 1
            stats.intersect_seconds += time.perf_counter() - start

        if hit:
            intersects.append(member)

    return intersects


def fold_union(
    test: PolygonRecord,
    intersects: List[PolygonRecord],
    ops: PlanarGeometry,
    stats: ReductionStats,
    name_separator: str = DEFAULT_NAME_SEPARATOR,
    union_shape_policy: UnionShapePolicy = UnionShapePolicy.REJECT,
) -> Tuple[PolygonRecord, List[PolygonRecord]]:
    """Union ``test`` with each intersecting record in turn.

    The accumulator starts as ``test`` itself, so its ``merge_count`` counts
    the arriving polygon once and each fold adds the member's count.
    Folding stops at the first failing union; that member and every member
    still queued are not part of the result.

    Returns:
        Tuple of (accumulated record, members folded into it)
    """
    accumulator = test
    folded: List[PolygonRecord] = []
    queue = deque(intersects)

    while queue:
        member = queue.popleft()

        start = time.perf_counter()
        try:
            merged = ops.union(accumulator.geometry, member.geometry)
        except GeometryOperationFailed as e:
            stats.failures += 1
            logger.warning(
                "Union %s / %s failed, %d member(s) left unmerged: %s",
                _label(accumulator), _label(member), len(queue) + 1, e,
            )
            break
        finally:
            stats.union_calls += 1
            stats.union_seconds += time.perf_counter() - start

        try:
            _check_union_shape(merged, union_shape_policy)
            merged = ops.normalize(merged)
        except GeometryOperationFailed as e:
            stats.failures += 1
            logger.warning(
                "Union %s / %s rejected, %d member(s) left unmerged: %s",
                _label(accumulator), _label(member), len(queue) + 1, e,
            )
            break

        accumulator = PolygonRecord.from_geometry(
            merged,
            name=join_names(accumulator.name, member.name, name_separator),
            merge_count=accumulator.merge_count + member.merge_count,
        )
        folded.append(member)

    return accumulator, folded


def merge_into_registry(
    registry: MergeRegistry,
    test: PolygonRecord,
    ops: Optional[PlanarGeometry] = None,
    name_separator: str = DEFAULT_NAME_SEPARATOR,
    union_shape_policy: Union[UnionShapePolicy, str] = UnionShapePolicy.REJECT,
    stats: Optional[ReductionStats] = None,
) -> bool:
    """Insert ``test`` into ``registry``, merging every record it overlaps.

    Args:
        registry: Live records of the current reduction (mutated in place)
        test: Arriving polygon record
        ops: Planar geometry capability (default: Shapely-backed)
        name_separator: Separator for composite names
        union_shape_policy: Whether multi-part unions are accepted
            (enum or string literal, e.g. ``"accept"``)
        stats: Counters to update (a throwaway instance if omitted)

    Returns:
        True if every geometry operation of this step succeeded. On False
        the registry is still consistent: members that could not be merged
        remain live records.

    Examples:
        >>> registry = MergeRegistry()
        >>> merge_into_registry(registry, square_a)
        True
        >>> merge_into_registry(registry, overlapping_square_b)
        True
        >>> len(registry)
        1
    """
    ops = ops or PlanarGeometry()
    stats = stats if stats is not None else ReductionStats()
    policy = coerce_enum(union_shape_policy, UnionShapePolicy)
    failures_before = stats.failures

    if len(registry) == 0:
        registry.insert(test)
        return True

    intersects = find_intersecting(registry, test, ops, stats)

    if not intersects:
        logger.debug("%s is isolated", _label(test))
        registry.insert(test)
        return stats.failures == failures_before

    merged, folded = fold_union(test, intersects, ops, stats, name_separator, policy)
    registry.replace([member.id for member in folded], merged)
    logger.debug(
        "%s merged with %d of %d intersecting record(s)",
        _label(test), len(folded), len(intersects),
    )
    return stats.failures == failures_before


__all__ = [
    'DEFAULT_NAME_SEPARATOR',
    'join_names',
    'find_intersecting',
    'fold_union',
    'merge_into_registry',
]
