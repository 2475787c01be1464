"""Geometry Bounded Context - Coordinate Transform.

Converts between SWEREF99 TM (EPSG:3006) and WGS84 (EPSG:4326).

The projected definition is only accurate over Swedish territory, so the
WGS84 -> SWEREF99 TM direction validates input against a fixed envelope and
fails fast instead of returning a silently wrong projection.
"""

from __future__ import annotations

from pyproj import CRS, Transformer

from domain.errors import ValidationError
from domain.geometry.value_objects import (
    ProjectedBbox,
    ProjectedPoint,
    Wgs84Bbox,
    Wgs84Point,
)
from shared.crs import CRS_WGS84, SWEREF99TM_PROJ4, WGS84_ENVELOPE

# ---------------------------------------------------------------------------
# Transformers (built once, immutable after import)
# ---------------------------------------------------------------------------
# always_xy: (lon, lat) / (easting, northing) order regardless of CRS axis order
_SWEREF99TM = CRS.from_proj4(SWEREF99TM_PROJ4)
_to_wgs84 = Transformer.from_crs(_SWEREF99TM, CRS_WGS84, always_xy=True)
_to_sweref = Transformer.from_crs(CRS_WGS84, _SWEREF99TM, always_xy=True)


def is_within_envelope(latitude: float, longitude: float) -> bool:
    """Check if a WGS84 coordinate lies inside the national envelope (inclusive)."""
    return (
        WGS84_ENVELOPE["min_lat"] <= latitude <= WGS84_ENVELOPE["max_lat"]
        and WGS84_ENVELOPE["min_lon"] <= longitude <= WGS84_ENVELOPE["max_lon"]
    )


def _envelope_error(latitude: float, longitude: float, field: str) -> ValidationError:
    return ValidationError(
        f"WGS84 coordinates ({latitude}, {longitude}) are outside valid range "
        f"for Sweden ({WGS84_ENVELOPE['min_lat']:g}-{WGS84_ENVELOPE['max_lat']:g}°N, "
        f"{WGS84_ENVELOPE['min_lon']:g}-{WGS84_ENVELOPE['max_lon']:g}°E)",
        field=field,
        values={"latitude": latitude, "longitude": longitude},
    )


def to_wgs84(point: ProjectedPoint) -> Wgs84Point:
    """Convert a SWEREF99 TM point to WGS84.

    No validation: projected space has no natural bound check here.
    """
    lon, lat = _to_wgs84.transform(point.x, point.y)
    return Wgs84Point(latitude=float(lat), longitude=float(lon))


def to_projected(point: Wgs84Point) -> ProjectedPoint:
    """Convert a WGS84 point to SWEREF99 TM.

    Raises:
        ValidationError: (field="coordinates") if the point is outside the
            national envelope
    """
    if not is_within_envelope(point.latitude, point.longitude):
        raise _envelope_error(point.latitude, point.longitude, "coordinates")

    x, y = _to_sweref.transform(point.longitude, point.latitude)
    return ProjectedPoint(x=float(x), y=float(y))


def bbox_to_projected(bbox: Wgs84Bbox) -> ProjectedBbox:
    """Convert a WGS84 search region to SWEREF99 TM.

    Both corners are converted independently (no edge re-sampling). Close
    enough at this scale, but an approximation for very large boxes.

    Raises:
        ValidationError: (field="bbox") if either corner is outside the
            envelope, or the box is degenerate / inverted
    """
    if not is_within_envelope(bbox.min_lat, bbox.min_lon):
        raise _envelope_error(bbox.min_lat, bbox.min_lon, "bbox")
    if not is_within_envelope(bbox.max_lat, bbox.max_lon):
        raise _envelope_error(bbox.max_lat, bbox.max_lon, "bbox")

    # Strict: a zero-height or zero-width box is not a search region
    if bbox.min_lat >= bbox.max_lat:
        raise ValidationError(
            "min_lat must be less than max_lat",
            field="bbox",
            values={"min_lat": bbox.min_lat, "max_lat": bbox.max_lat},
        )
    if bbox.min_lon >= bbox.max_lon:
        raise ValidationError(
            "min_lon must be less than max_lon",
            field="bbox",
            values={"min_lon": bbox.min_lon, "max_lon": bbox.max_lon},
        )

    min_corner = to_projected(Wgs84Point(latitude=bbox.min_lat, longitude=bbox.min_lon))
    max_corner = to_projected(Wgs84Point(latitude=bbox.max_lat, longitude=bbox.max_lon))

    return ProjectedBbox(
        min_x=min_corner.x,
        min_y=min_corner.y,
        max_x=max_corner.x,
        max_y=max_corner.y,
    )
