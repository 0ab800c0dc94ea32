"""Reduction driver: feed every polygon through the cluster merge once.

The driver owns the registry for the duration of one pass; nothing is
shared between passes. Independent reductions (for example of separate
regions) are combined with :func:`combine_reductions`, which runs the same
algorithm again over their concatenated results.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

from .core.errors import ReductionCancelled
from .core.planar import PlanarGeometry
from .core.types import PolygonRecord, UnionShapePolicy, coerce_enum
from .merge import DEFAULT_NAME_SEPARATOR, merge_into_registry
from .metrics import ReductionStats, StatsSink
from .registry import MergeRegistry

logger = logging.getLogger(__name__)


def reduce_polygons(
    records: Iterable[PolygonRecord],
    ops: Optional[PlanarGeometry] = None,
    name_separator: str = DEFAULT_NAME_SEPARATOR,
    union_shape_policy: Union[UnionShapePolicy, str] = UnionShapePolicy.REJECT,
    should_cancel: Optional[Callable[[], bool]] = None,
    stats_sink: Optional[StatsSink] = None,
    return_stats: bool = False,
) -> Union[List[PolygonRecord], Tuple[List[PolygonRecord], ReductionStats]]:
    """Merge every cluster of overlapping polygons into a single polygon.

    Polygons are processed in input order. Each one is compared against the
    polygons kept so far; everything it overlaps is unioned into it.

    Args:
        records: Polygon records, usually from the normalizer or buffer stage
        ops: Planar geometry capability (default: Shapely-backed)
        name_separator: Separator for composite names of merged polygons
        union_shape_policy: Policy for multi-part union results
            (enum or string literal, e.g. ``"reject"``)
        should_cancel: Optional callable checked once before each polygon;
            returning True aborts the pass with :class:`ReductionCancelled`
        stats_sink: Optional callable receiving the final statistics
        return_stats: If True, return (records, stats)

    Returns:
        Reduced records, or (records, stats) if return_stats=True

    Examples:
        >>> reduced = reduce_polygons(records)
        >>> sum(r.merge_count for r in reduced) == len(records)
        True
    """
    records = list(records)
    ops = ops or PlanarGeometry()
    policy = coerce_enum(union_shape_policy, UnionShapePolicy)
    stats = ReductionStats(input_count=len(records))
    registry = MergeRegistry()

    for processed, record in enumerate(records):
        if should_cancel is not None and should_cancel():
            raise ReductionCancelled(processed, len(records))
        merge_into_registry(
            registry,
            record,
            ops=ops,
            name_separator=name_separator,
            union_shape_policy=policy,
            stats=stats,
        )

    result = registry.values()
    stats.output_count = len(result)

    logger.info("Input polygon count: %d", stats.input_count)
    logger.info("Output polygon count: %d", stats.output_count)
    logger.info(
        "Intersect test time: %.1f ms, union processing time: %.1f ms",
        stats.intersect_seconds * 1000, stats.union_seconds * 1000,
    )

    if stats_sink is not None:
        stats_sink(stats)

    return (result, stats) if return_stats else result


def combine_reductions(
    reductions: Sequence[Iterable[PolygonRecord]],
    **kwargs,
) -> Union[List[PolygonRecord], Tuple[List[PolygonRecord], ReductionStats]]:
    """Merge the outputs of independent reductions in one sequential pass.

    Accumulated ``merge_count`` values and names carry over, so counts still
    sum to the number of original source polygons.

    Args:
        reductions: Reduced record sequences, in the order to combine them
        **kwargs: Passed through to :func:`reduce_polygons`
    """
    combined: List[PolygonRecord] = []
    for reduced in reductions:
        combined.extend(reduced)
    return reduce_polygons(combined, **kwargs)



__all__ = [
    'reduce_polygons',
    'combine_reductions',
]
