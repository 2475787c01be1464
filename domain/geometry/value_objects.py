"""Geometry Bounded Context - Value Objects.

Immutable data structures representing coordinates and extents.
All validation occurs at construction time via Pydantic.

Points and boxes are tagged by CRS through their type: a ProjectedPoint is
always SWEREF99 TM metres, a Wgs84Point is always degrees. Converting between
them goes through ``domain.geometry.coordinates``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

# (x, y) pair as it appears in WKT. For WGS84 geometry x is longitude.
Coordinate = tuple[float, float]
Ring = list[Coordinate]


# ---------------------------------------------------------------------------
# Points
# ---------------------------------------------------------------------------
class ProjectedPoint(BaseModel):
    """SWEREF99 TM coordinate (Value Object)."""

    x: float  # Easting (m)
    y: float  # Northing (m)

    model_config = ConfigDict(frozen=True)


class Wgs84Point(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Invariants:
        latitude in [-90, 90]
        longitude in [-180, 180]

    The national envelope is narrower and is enforced by the coordinate
    transform, not here.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Boxes
# ---------------------------------------------------------------------------
class ProjectedBbox(BaseModel):
    """Bounding box in SWEREF99 TM (Value Object)."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    model_config = ConfigDict(frozen=True)


class Wgs84Bbox(BaseModel):
    """Search region in WGS84 degrees (Value Object).

    Ordering is not checked here: ``bbox_to_projected`` reports bad ordering
    as a ValidationError tagged "bbox" so callers get one error type.
    """

    min_lat: float = Field(ge=-90, le=90)
    min_lon: float = Field(ge=-180, le=180)
    max_lat: float = Field(ge=-90, le=90)
    max_lon: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)


class BoundingBox(BaseModel):
    """Axis-aligned extent of a WKT geometry in its own CRS (Value Object).

    Invariants:
        BB-1: min_x <= max_x
        BB-2: min_y <= max_y

    Equal bounds are allowed: a single-point geometry has a degenerate box.
    """

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_ordering(self) -> "BoundingBox":
        if self.min_x > self.max_x:
            raise ValueError(
                f"Invalid x ordering: min_x={self.min_x} > max_x={self.max_x}"
            )
        if self.min_y > self.max_y:
            raise ValueError(
                f"Invalid y ordering: min_y={self.min_y} > max_y={self.max_y}"
            )
        return self
