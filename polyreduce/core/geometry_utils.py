"""Ring structure serialization and content identifiers.

A polygon's identity is derived from its coordinates alone: the ring
structure (exterior followed by holes, each a closed list of ``[x, y]``
pairs) is serialized to compact JSON and hashed with SHA-1. Byte-identical
ring structures always share an identifier.
"""

import hashlib
import json
from typing import List, Union

from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry

Ring = List[List[float]]
RingStructure = List[Ring]


def _ring_coords(ring) -> Ring:
    return [[float(x), float(y)] for x, y, *_ in ring.coords]


def ring_structure(geometry: BaseGeometry) -> Union[RingStructure, List[RingStructure]]:
    """Return the GeoJSON-style coordinate nesting of a polygonal geometry.

    Args:
        geometry: Polygon or MultiPolygon

    Returns:
        For a Polygon, a list of rings (exterior first). For a MultiPolygon,
        a list of such ring structures, one per part.

    Examples:
        >>> poly = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> ring_structure(poly)
        [[[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]]
    """
    if isinstance(geometry, Polygon):
        if geometry.is_empty:
            return []
        rings = [_ring_coords(geometry.exterior)]
        rings.extend(_ring_coords(interior) for interior in geometry.interiors)
        return rings
    elif isinstance(geometry, MultiPolygon):
        return [ring_structure(part) for part in geometry.geoms]

    raise TypeError(f"Expected Polygon or MultiPolygon, got {geometry.geom_type}")


def serialize_rings(rings) -> str:
    """Compact JSON serialization of a ring structure."""
    return json.dumps(rings, separators=(',', ':'))


def content_id(geometry: BaseGeometry) -> str:
    """Deterministic content hash of a geometry's ring structure.

    Examples:
        >>> a = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> b = Polygon([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> content_id(a) == content_id(b)
        True
    """
    payload = serialize_rings(ring_structure(geometry))
    return hashlib.sha1(payload.encode('utf-8')).hexdigest()


__all__ = [
    'Ring',
    'RingStructure',
    'ring_structure',
    'serialize_rings',
    'content_id',
]
