"""Feature collection boundary: validation, GeoJSON files and re-wrapping.

Feature collections are plain GeoJSON-shaped mappings. Records leave the
library as Polygon features carrying ``id``, ``name`` and ``mergeCount``.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Union

from shapely.geometry import mapping

from .core.errors import InvalidFeatureCollection
from .core.types import PolygonRecord

logger = logging.getLogger(__name__)

FeatureCollection = Dict[str, Any]


def validate_feature_collection(obj: Any) -> Mapping[str, Any]:
    """Check the top-level shape of a feature collection.

    Only the envelope is checked here; individual bad features are skipped
    later by the normalizer.

    Raises:
        InvalidFeatureCollection: If ``obj`` is not a mapping of type
            ``FeatureCollection`` with a ``features`` list
    """
    if not isinstance(obj, Mapping):
        raise InvalidFeatureCollection(
            f"Expected a FeatureCollection mapping, got {type(obj).__name__}"
        )
    if obj.get('type') != 'FeatureCollection':
        raise InvalidFeatureCollection(
            f"Expected type 'FeatureCollection', got {obj.get('type')!r}"
        )
    features = obj.get('features')
    if not isinstance(features, (list, tuple)):
        raise InvalidFeatureCollection("FeatureCollection has no 'features' list")
    return obj


def load_feature_collection(path: Union[str, Path]) -> Mapping[str, Any]:
    """Read and validate a GeoJSON feature collection file."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidFeatureCollection(f"{path}: not valid JSON ({e})") from e
    logger.debug("Loaded %s", path)
    return validate_feature_collection(data)


def record_to_feature(record: PolygonRecord) -> Dict[str, Any]:
    return {
        'type': 'Feature',
        'geometry': mapping(record.geometry),
        'properties': {
            'id': record.id,
            'name': record.name,
            'mergeCount': record.merge_count,
        },
    }


def records_to_feature_collection(records: Iterable[PolygonRecord]) -> FeatureCollection:
    """Wrap records as a GeoJSON feature collection.

    Examples:
        >>> fc = records_to_feature_collection(reduced)
        >>> fc['features'][0]['properties']['mergeCount']
        3
    """
    return {
        'type': 'FeatureCollection',
        'features': [record_to_feature(record) for record in records],
    }


def dump_feature_collection(fc: Mapping[str, Any], path: Union[str, Path]) -> None:
    """Write a feature collection as GeoJSON."""
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(fc, f)
    logger.debug("Wrote %d features to %s", len(fc.get('features', [])), path)


__all__ = [
    'FeatureCollection',
    'validate_feature_collection',
    'load_feature_collection',
    'record_to_feature',
    'records_to_feature_collection',
    'dump_feature_collection',
]
