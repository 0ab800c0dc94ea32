"""Polyreduce - Reduce polygon collections by merging overlapping polygons.

This library flattens polygon feature collections, optionally buffers every
polygon by a fixed radius, and merges each cluster of overlapping polygons
into a single polygon using Shapely.
"""


# Normalization
from .normalize import (
    to_polygon_records,
    flatten_feature_collection,
    multi_to_records,
    records_from_geometries,
)

# Buffering
from .buffer import buffer_polygons

# Bounding boxes
from .bbox import BoundingBox

# Registry and merging
from .registry import MergeRegistry
from .merge import merge_into_registry, join_names

# Reduction
from .reduce import reduce_polygons, combine_reductions
from .pipeline import ReduceConfig, config_from_mapping, reduce_feature_collection

# Feature collection I/O
from .io import (
    load_feature_collection,
    dump_feature_collection,
    records_to_feature_collection,
)

# Instrumentation
from .metrics import ReductionStats, total_overlap_area, count_overlapping_pairs

# Core types
from .core import (
    PolygonRecord,
    UnionShapePolicy,
    BufferUnits,
    PlanarGeometry,
    content_id,
)

# Core exceptions
from .core import (
    PolyreduceError,
    UnsupportedGeometryKind,
    MalformedGeometry,
    GeometryOperationFailed,
    UnexpectedUnionShape,
    InvalidFeatureCollection,
    ConfigurationError,
    ReductionCancelled,
)

__all__ = [

    # Normalization
    'to_polygon_records',
    'flatten_feature_collection',
    'multi_to_records',
    'records_from_geometries',

    # Buffering
    'buffer_polygons',

    # Bounding boxes
    'BoundingBox',

    # Registry and merging
    'MergeRegistry',
    'merge_into_registry',
    'join_names',

    # Reduction
    'reduce_polygons',
    'combine_reductions',
    'ReduceConfig',
    'config_from_mapping',
    'reduce_feature_collection',

    # Feature collection I/O
    'load_feature_collection',
    'dump_feature_collection',
    'records_to_feature_collection',

    # Instrumentation
    'ReductionStats',
    'total_overlap_area',
    'count_overlapping_pairs',

    # Core types
    'PolygonRecord',
    'UnionShapePolicy',
    'BufferUnits',
    'PlanarGeometry',
    'content_id',

    # Core exceptions
    'PolyreduceError',
    'UnsupportedGeometryKind',
    'MalformedGeometry',
    'GeometryOperationFailed',
    'UnexpectedUnionShape',
    'InvalidFeatureCollection',
    'ConfigurationError',
    'ReductionCancelled',
]
