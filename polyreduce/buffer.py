"""Uniform outward buffering of polygon records.

Each polygon is offset by the same distance, re-normalized and given a new
content id; its name is kept. A polygon that cannot be buffered is logged
and dropped, the rest of the batch continues.

Distances in meters are applied in a local azimuthal equidistant
projection centred on each polygon, so lon/lat input can be buffered by a
metric radius without a global projection.
"""

import logging
from typing import Iterable, List, Optional, Tuple, Union

import shapely
from pyproj import CRS, Transformer
from shapely.geometry import Polygon, MultiPolygon
from shapely.geometry.base import BaseGeometry

from .core.errors import GeometryOperationFailed
from .core.planar import PlanarGeometry
from .core.types import BufferUnits, PolygonRecord, coerce_enum

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"


def make_local_aeqd_crs(center_lon: float, center_lat: float) -> CRS:
    proj4 = (
        f"+proj=aeqd +lat_0={center_lat} +lon_0={center_lon} +x_0=0 +y_0=0 "
        "+datum=WGS84 +units=m +no_defs"
    )
    return CRS.from_proj4(proj4)


def local_transformers(geometry: BaseGeometry) -> Tuple[Transformer, Transformer]:
    """Return (to_local, to_wgs84) transformers centred on ``geometry``."""
    center = geometry.centroid
    aeqd = make_local_aeqd_crs(center.x, center.y)
    to_local = Transformer.from_crs(WGS84, aeqd, always_xy=True)
    to_wgs = Transformer.from_crs(aeqd, WGS84, always_xy=True)
    return to_local, to_wgs


def offset_in_meters(
    geometry: BaseGeometry,
    distance: float,
    ops: PlanarGeometry,
) -> BaseGeometry:
    """Buffer lon/lat ``geometry`` by ``distance`` meters."""
    try:
        to_local, to_wgs = local_transformers(geometry)
        projected = shapely.transform(geometry, to_local.transform, interleaved=False)
    except Exception as e:
        raise GeometryOperationFailed('offset', f"projection failed: {e}") from e

    buffered = ops.offset(projected, distance)

    try:
        return shapely.transform(buffered, to_wgs.transform, interleaved=False)
    except Exception as e:
        raise GeometryOperationFailed('offset', f"projection failed: {e}") from e


def buffer_record(
    record: PolygonRecord,
    distance: float,
    units: BufferUnits = BufferUnits.METERS,
    ops: Optional[PlanarGeometry] = None,
) -> PolygonRecord:
    """Buffer one record and re-derive its id.

    A zero distance only normalizes the geometry.

    Raises:
        GeometryOperationFailed: If offsetting or normalization fails, or the
            buffered shape is not a single polygon
    """
    ops = ops or PlanarGeometry()

    if distance == 0:
        geometry = record.geometry
    elif units == BufferUnits.METERS:
        geometry = offset_in_meters(record.geometry, distance, ops)
    else:
        geometry = ops.offset(record.geometry, distance)

    if not isinstance(geometry, (Polygon, MultiPolygon)):
        raise GeometryOperationFailed('offset', f"expected Polygon, got {geometry.geom_type}")
    if isinstance(geometry, MultiPolygon) and not isinstance(record.geometry, MultiPolygon):
        raise GeometryOperationFailed(
            'offset', f"buffer split polygon into {len(geometry.geoms)} parts"
        )

    return record.with_geometry(ops.normalize(geometry))


def buffer_polygons(
    records: Iterable[PolygonRecord],
    distance: float,
    units: Union[BufferUnits, str] = BufferUnits.METERS,
    ops: Optional[PlanarGeometry] = None,
) -> List[PolygonRecord]:
    """Buffer every record by the same non-negative distance.

    Args:
        records: Input polygon records
        distance: Buffer distance (>= 0)
        units: BufferUnits.METERS for lon/lat input (default) or
            BufferUnits.PLANAR for coordinate units (enum or string literal)
        ops: Planar geometry capability (default: Shapely-backed)

    Returns:
        Buffered records in input order; records that failed are left out

    Raises:
        ValueError: If ``distance`` is negative

    Examples:
        >>> buffered = buffer_polygons(parks, 200)
        >>> buffered = buffer_polygons(squares, 0.5, units='planar')
    """
    if distance < 0:
        raise ValueError(f"Buffer distance must be non-negative, got {distance}")

    units = coerce_enum(units, BufferUnits)
    ops = ops or PlanarGeometry()
    buffered: List[PolygonRecord] = []

    for record in records:
        try:
            buffered.append(buffer_record(record, distance, units, ops))
        except GeometryOperationFailed as e:
            label = record.name if record.name is not None else record.id
            logger.warning("Could not buffer %s: %s", label, e)

    logger.debug("Buffered %d polygons by %s %s", len(buffered), distance, units.value)
    return buffered


__all__ = [
    'make_local_aeqd_crs',
    'local_transformers',
    'offset_in_meters',
    'buffer_record',
    'buffer_polygons',
]
