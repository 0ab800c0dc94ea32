"""Flatten feature collections into simple-polygon records.

Polygon features become one record carrying the feature's name. Every part
of a MultiPolygon becomes its own anonymous record. Anything else is
reported and skipped; a single bad feature never aborts the batch.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from shapely.errors import GEOSException
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from .core.errors import MalformedGeometry, PolyreduceError, UnsupportedGeometryKind
from .core.types import PolygonRecord
from .io import validate_feature_collection

logger = logging.getLogger(__name__)

DEFAULT_NAME_KEY = 'map_park_n'


def _polygon_from_rings(rings: Sequence, index: Optional[int]) -> Polygon:
    try:
        if not rings:
            raise ValueError("no rings")
        polygon = Polygon(rings[0], holes=list(rings[1:]))
        if polygon.is_empty:
            raise ValueError("empty polygon")
        return polygon
    except (ValueError, TypeError, IndexError, GEOSException) as e:
        raise MalformedGeometry(f"Invalid polygon coordinates: {e}", index) from e


def polygon_to_record(
    rings: Sequence,
    name: Optional[str] = None,
    index: Optional[int] = None,
) -> PolygonRecord:
    """Build a record from a GeoJSON Polygon ``coordinates`` value."""
    return PolygonRecord.from_geometry(_polygon_from_rings(rings, index), name=name)


def multi_to_records(coordinates: Sequence, index: Optional[int] = None) -> List[PolygonRecord]:
    """Split GeoJSON MultiPolygon ``coordinates`` into anonymous records.

    Examples:
        >>> square = [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]
        >>> moved = [[[5, 5], [6, 5], [6, 6], [5, 6], [5, 5]]]
        >>> [r.name for r in multi_to_records([square, moved])]
        [None, None]
    """
    return [polygon_to_record(rings, name=None, index=index) for rings in coordinates]


def feature_to_records(
    feature: Mapping[str, Any],
    name_key: str = DEFAULT_NAME_KEY,
    index: Optional[int] = None,
) -> List[PolygonRecord]:
    """Convert one GeoJSON feature into polygon records.

    Raises:
        UnsupportedGeometryKind: For missing or non-polygonal geometry
        MalformedGeometry: For coordinates that do not form a polygon
    """
    geometry = feature.get('geometry') if isinstance(feature, Mapping) else None
    kind = geometry.get('type') if isinstance(geometry, Mapping) else None
    coordinates = geometry.get('coordinates') if kind else None

    kind_lower = kind.lower() if isinstance(kind, str) else None
    if kind_lower == 'polygon':
        properties = feature.get('properties') or {}
        return [polygon_to_record(coordinates, name=properties.get(name_key), index=index)]
    elif kind_lower == 'multipolygon':
        if not coordinates:
            raise MalformedGeometry("MultiPolygon has no parts", index)
        return multi_to_records(coordinates, index=index)

    raise UnsupportedGeometryKind(kind, index)


def flatten_feature_collection(
    fc: Mapping[str, Any],
    name_key: str = DEFAULT_NAME_KEY,
) -> Tuple[List[PolygonRecord], List[PolyreduceError]]:
    """Flatten a feature collection, collecting per-feature errors.

    Args:
        fc: GeoJSON FeatureCollection mapping
        name_key: Property holding each feature's name

    Returns:
        Tuple of (records, errors) where records preserve feature order and
        errors hold one exception per skipped feature

    Raises:
        InvalidFeatureCollection: If ``fc`` is not a feature collection
    """
    validate_feature_collection(fc)

    records: List[PolygonRecord] = []
    errors: List[PolyreduceError] = []

    for index, feature in enumerate(fc['features']):
        try:
            records.extend(feature_to_records(feature, name_key=name_key, index=index))
        except (UnsupportedGeometryKind, MalformedGeometry) as e:
            logger.warning("Skipping feature: %s", e)
            errors.append(e)

    logger.debug("Flattened %d features into %d polygons", len(fc['features']), len(records))
    return records, errors


def to_polygon_records(
    fc: Mapping[str, Any],
    name_key: str = DEFAULT_NAME_KEY,
) -> List[PolygonRecord]:
    """Flatten a feature collection into an ordered list of polygon records.

    Examples:
        >>> records = to_polygon_records(parks)
        >>> records[0].merge_count
        1
    """
    records, _ = flatten_feature_collection(fc, name_key=name_key)
    return records


def records_from_geometries(
    geometries: Iterable[BaseGeometry],
    names: Optional[Iterable[Optional[str]]] = None,
) -> List[PolygonRecord]:
    """Build records from Shapely geometries, flattening MultiPolygons.

    Names are attached to Polygon inputs only, matching feature flattening.

    Raises:
        UnsupportedGeometryKind: For any non-polygonal geometry
    """
    geometries = list(geometries)
    names = list(names) if names is not None else [None] * len(geometries)
    if len(names) != len(geometries):
        raise ValueError("names must match geometries in length")

    records: List[PolygonRecord] = []
    for index, (geometry, name) in enumerate(zip(geometries, names)):
        if geometry.geom_type == 'Polygon':
            records.append(PolygonRecord.from_geometry(geometry, name=name))
        elif geometry.geom_type == 'MultiPolygon':
            records.extend(PolygonRecord.from_geometry(part) for part in geometry.geoms)
        else:
            raise UnsupportedGeometryKind(geometry.geom_type, index)
    return records


__all__ = [
    'DEFAULT_NAME_KEY',
    'polygon_to_record',
    'multi_to_records',
    'feature_to_records',
    'flatten_feature_collection',
    'to_polygon_records',
    'records_from_geometries',
]
