"""Core types and utilities for polyreduce.

This module provides the polygon record, policy enums, exceptions, content
identifiers and the planar geometry capability used throughout the library.
"""

from .types import (
    UnionShapePolicy,
    BufferUnits,
    PolygonRecord,
    coerce_enum,
)

from .errors import (
    PolyreduceError,
    UnsupportedGeometryKind,
    MalformedGeometry,
    GeometryOperationFailed,
    UnexpectedUnionShape,
    InvalidFeatureCollection,
    ConfigurationError,
    ReductionCancelled,
)

from .geometry_utils import ring_structure, content_id
from .planar import PlanarGeometry

__all__ = [
    # Records and policy enums
    'UnionShapePolicy',
    'BufferUnits',
    'PolygonRecord',
    'coerce_enum',

    # Exceptions
    'PolyreduceError',
    'UnsupportedGeometryKind',
    'MalformedGeometry',
    'GeometryOperationFailed',
    'UnexpectedUnionShape',
    'InvalidFeatureCollection',
    'ConfigurationError',
    'ReductionCancelled',

    # Identity and geometry capability
    'ring_structure',
    'content_id',
    'PlanarGeometry',
]
