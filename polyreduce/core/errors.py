"""Exception hierarchy for polyreduce.

Per-item failures (one feature, one polygon, one pair) are raised as one of
these and recovered by the caller that owns the batch. Only
:class:`InvalidFeatureCollection` and :class:`ConfigurationError` are meant
to reach the user.
"""

from typing import Optional


class PolyreduceError(Exception):
    """Base class for all polyreduce errors."""
    pass


class UnsupportedGeometryKind(PolyreduceError):
    """Raised when a feature geometry is neither Polygon nor MultiPolygon."""

    def __init__(self, kind: Optional[str], index: Optional[int] = None):
        self.kind = kind
        self.index = index
        where = f" (feature {index})" if index is not None else ""
        super().__init__(f"Unsupported geometry kind {kind!r}{where}")


class MalformedGeometry(PolyreduceError):
    """Raised when feature coordinates cannot be turned into a polygon."""

    def __init__(self, message: str, index: Optional[int] = None):
        self.index = index
        where = f" (feature {index})" if index is not None else ""
        super().__init__(f"{message}{where}")


class GeometryOperationFailed(PolyreduceError):
    """Raised when an offset, intersects, union or normalize call fails."""

    def __init__(self, operation: str, detail: str = ""):
        self.operation = operation
        self.detail = detail
        message = f"{operation} failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnexpectedUnionShape(GeometryOperationFailed):
    """Raised when a union result is not an acceptable polygonal shape."""

    def __init__(self, geom_type: str):
        self.geom_type = geom_type
        super().__init__("union", f"expected Polygon, got {geom_type}")


class InvalidFeatureCollection(PolyreduceError, ValueError):
    """Raised when the top-level input is not a feature collection."""
    pass


class ConfigurationError(PolyreduceError, ValueError):
    """Raised for invalid configuration values."""
    pass


class ReductionCancelled(PolyreduceError):
    """Raised when a reduction is cancelled between input polygons."""

    def __init__(self, processed: int, total: int):
        self.processed = processed
        self.total = total
        super().__init__(f"Reduction cancelled after {processed} of {total} polygons")


__all__ = [
    'PolyreduceError',
    'UnsupportedGeometryKind',
    'MalformedGeometry',
    'GeometryOperationFailed',
    'UnexpectedUnionShape',
    'InvalidFeatureCollection',
    'ConfigurationError',
    'ReductionCancelled',
]
