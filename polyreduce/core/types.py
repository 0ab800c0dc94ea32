"""Type definitions for polyreduce operations.

This module defines the polygon record that flows through the reduction and
the enums for policy parameters throughout the library.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Type, TypeVar, Union

from shapely.geometry import Polygon, MultiPolygon

from ..bbox import BoundingBox
from .geometry_utils import content_id

E = TypeVar('E', bound=Enum)


class UnionShapePolicy(Enum):
    """What to do when a union of two polygons is not a single polygon.

    Attributes:
        REJECT: Treat the union step as failed (default). The member stays in
            the registry as its own polygon.
        ACCEPT: Keep the MultiPolygon result as a merged record.

    Examples:
        >>> from polyreduce import reduce_polygons, UnionShapePolicy
        >>> result = reduce_polygons(records, union_shape_policy=UnionShapePolicy.ACCEPT)
    """
    REJECT = 'reject'
    ACCEPT = 'accept'


class BufferUnits(Enum):
    """Units of a buffer distance.

    Attributes:
        METERS: Distance in meters; input coordinates are WGS84 lon/lat and
            each polygon is buffered in a local projection (default)
        PLANAR: Distance in coordinate units, no projection
    """
    METERS = 'meters'
    PLANAR = 'planar'


def coerce_enum(value: Union[E, str], enum_type: Type[E]) -> E:
    """Accept either an enum member or its string value.

    Raises:
        ValueError: If ``value`` names no member of ``enum_type``
    """
    if isinstance(value, enum_type):
        return value
    try:
        return enum_type(value)
    except ValueError:
        valid = ', '.join(repr(member.value) for member in enum_type)
        raise ValueError(
            f"Invalid {enum_type.__name__}: {value!r} (expected one of {valid})"
        ) from None


@dataclass(frozen=True)
class PolygonRecord:
    """One polygon of the reduction with its identity and provenance.

    Attributes:
        geometry: Polygon (or MultiPolygon when multi-part unions are accepted)
        id: Content hash of ``geometry``'s ring structure
        name: Provenance label; composite for merged records, None if anonymous
        merge_count: Number of source polygons folded into this record
        bbox: Cached bounding box of the exterior ring(s)
    """

    geometry: Union[Polygon, MultiPolygon]
    id: str
    name: Optional[str] = None
    merge_count: int = 1
    bbox: BoundingBox = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, 'bbox', BoundingBox.from_geometry(self.geometry))

    @classmethod
    def from_geometry(
        cls,
        geometry: Union[Polygon, MultiPolygon],
        name: Optional[str] = None,
        merge_count: int = 1,
    ) -> "PolygonRecord":
        """Build a record, deriving its id from the geometry."""
        return cls(geometry=geometry, id=content_id(geometry), name=name, merge_count=merge_count)

    def with_geometry(self, geometry: Union[Polygon, MultiPolygon]) -> "PolygonRecord":
        """Return a copy carrying ``geometry`` and a freshly derived id."""
        return replace(self, geometry=geometry, id=content_id(geometry))


__all__ = [
    'UnionShapePolicy',
    'BufferUnits',
    'coerce_enum',
    'PolygonRecord',
]
