"""End-to-end reduction of a feature collection.

Flatten the collection, buffer every polygon by the configured radius
(skipped for a zero radius), merge overlapping polygons and wrap the result
as a feature collection again.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple, Union

from .buffer import buffer_polygons
from .core.errors import ConfigurationError
from .core.planar import PlanarGeometry
from .core.types import BufferUnits, UnionShapePolicy, coerce_enum
from .io import FeatureCollection, records_to_feature_collection
from .merge import DEFAULT_NAME_SEPARATOR
from .metrics import ReductionStats, StatsSink
from .normalize import DEFAULT_NAME_KEY, flatten_feature_collection
from .reduce import reduce_polygons

logger = logging.getLogger(__name__)


@dataclass
class ReduceConfig:
    """Settings for :func:`reduce_feature_collection`.

    Enum fields accept either the enum or its string value.
    """

    buffer_distance: float = 0.0
    buffer_units: Union[BufferUnits, str] = BufferUnits.METERS
    quad_segs: int = 8
    name_key: str = DEFAULT_NAME_KEY
    name_separator: str = DEFAULT_NAME_SEPARATOR
    union_shape_policy: Union[UnionShapePolicy, str] = UnionShapePolicy.REJECT

    def __post_init__(self):
        try:
            self.buffer_units = coerce_enum(self.buffer_units, BufferUnits)
            self.union_shape_policy = coerce_enum(self.union_shape_policy, UnionShapePolicy)
        except ValueError as e:
            raise ConfigurationError(str(e)) from None
        if self.buffer_distance < 0:
            raise ConfigurationError(
                f"buffer_distance must be non-negative, got {self.buffer_distance}"
            )
        if self.quad_segs < 1:
            raise ConfigurationError(f"quad_segs must be at least 1, got {self.quad_segs}")
        if not self.name_separator:
            raise ConfigurationError("name_separator must not be empty")


def config_from_mapping(values: Mapping[str, Any]) -> ReduceConfig:
    """Build a :class:`ReduceConfig` from a plain mapping (e.g. parsed JSON).

    Raises:
        ConfigurationError: For unknown keys or invalid values
    """
    known = {f.name for f in fields(ReduceConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")
    return ReduceConfig(**dict(values))


def reduce_feature_collection(
    fc: Mapping[str, Any],
    config: Optional[ReduceConfig] = None,
    ops: Optional[PlanarGeometry] = None,
    stats_sink: Optional[StatsSink] = None,
    return_stats: bool = False,
) -> Union[FeatureCollection, Tuple[FeatureCollection, ReductionStats]]:
    """Buffer and merge a polygon feature collection.

    Args:
        fc: GeoJSON FeatureCollection of Polygon/MultiPolygon features
        config: Reduction settings (defaults: no buffer, reject multi-part unions)
        ops: Planar geometry capability (default: Shapely-backed, using
            ``config.quad_segs``)
        stats_sink: Optional callable receiving the final statistics
        return_stats: If True, return (feature_collection, stats)

    Returns:
        Feature collection of merged polygons with ``id``, ``name`` and
        ``mergeCount`` properties, or (collection, stats)

    Raises:
        InvalidFeatureCollection: If ``fc`` is not a feature collection

    Examples:
        >>> config = ReduceConfig(buffer_distance=200)
        >>> merged = reduce_feature_collection(parks, config)
    """
    config = config or ReduceConfig()
    ops = ops or PlanarGeometry(quad_segs=config.quad_segs)

    records, errors = flatten_feature_collection(fc, name_key=config.name_key)

    buffer_seconds = 0.0
    buffer_failures = 0
    if config.buffer_distance > 0:
        start = time.perf_counter()
        source_count = len(records)
        records = buffer_polygons(records, config.buffer_distance, config.buffer_units, ops)
        buffer_failures = source_count - len(records)
        buffer_seconds = time.perf_counter() - start
        logger.info("Buffer computation: %.1f ms", buffer_seconds * 1000)

    reduced, stats = reduce_polygons(
        records,
        ops=ops,
        name_separator=config.name_separator,
        union_shape_policy=config.union_shape_policy,
        return_stats=True,
    )
    stats.skipped_features = len(errors)
    stats.buffer_seconds = buffer_seconds
    stats.failures += buffer_failures

    if stats_sink is not None:
        stats_sink(stats)

    result = records_to_feature_collection(reduced)
    return (result, stats) if return_stats else result


__all__ = [
    "ReduceConfig",
    "config_from_mapping",
    "reduce_feature_collection",
]
