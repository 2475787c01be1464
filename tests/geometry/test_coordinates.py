"""Tests for the SWEREF99 TM <-> WGS84 coordinate transform.

Reference points:
- Stockholm (59.3N, 18.0E): well inside the national envelope
- (62N, 15E): on the SWEREF99 TM central meridian, so easting == 500000 m
- (40N, 5E): Mediterranean, outside the envelope
"""

from __future__ import annotations

import pytest

from domain.errors import ValidationError
from domain.geometry.value_objects import ProjectedPoint, Wgs84Bbox, Wgs84Point


# ===========================================================================
# TC-001: Stockholm converts
# ===========================================================================
def test_to_projected_stockholm():
    """TC-001: A point in Stockholm lands in the expected SWEREF99 TM range."""
    from domain.geometry.coordinates import to_projected

    point = to_projected(Wgs84Point(latitude=59.3, longitude=18.0))

    assert 600_000 < point.x < 750_000
    assert 6_500_000 < point.y < 6_650_000


# ===========================================================================
# TC-002: Central meridian
# ===========================================================================
def test_to_projected_central_meridian_false_easting():
    """TC-002: 15E is the projection's central meridian (false easting 500 km)."""
    from domain.geometry.coordinates import to_projected

    point = to_projected(Wgs84Point(latitude=62.0, longitude=15.0))

    assert point.x == pytest.approx(500_000.0, abs=1e-6)


# ===========================================================================
# TC-003: Round trip
# ===========================================================================
@pytest.mark.parametrize(
    "latitude,longitude",
    [(59.3, 18.0), (55.4, 13.0), (68.4, 22.5), (63.8, 20.3)],
)
def test_round_trip_projection(latitude, longitude):
    """TC-003: projected -> WGS84 -> projected reproduces the point within 1e-6 m."""
    from domain.geometry.coordinates import to_projected, to_wgs84

    projected = to_projected(Wgs84Point(latitude=latitude, longitude=longitude))
    back = to_wgs84(projected)
    again = to_projected(back)

    assert back.latitude == pytest.approx(latitude, abs=1e-8)
    assert back.longitude == pytest.approx(longitude, abs=1e-8)
    assert again.x == pytest.approx(projected.x, abs=1e-6)
    assert again.y == pytest.approx(projected.y, abs=1e-6)


# ===========================================================================
# TC-004: to_wgs84 does not validate
# ===========================================================================
def test_to_wgs84_returns_wgs84_point():
    """TC-004: SWEREF99 TM -> WGS84 yields a Wgs84Point near the input's region."""
    from domain.geometry.coordinates import to_wgs84

    point = to_wgs84(ProjectedPoint(x=674_000.0, y=6_580_000.0))

    assert isinstance(point, Wgs84Point)
    assert 59.0 < point.latitude < 60.0
    assert 17.5 < point.longitude < 18.5


# ===========================================================================
# TC-005: Envelope rejection
# ===========================================================================
def test_to_projected_outside_envelope_raises():
    """TC-005: (40N, 5E) is rejected with field 'coordinates' before projecting."""
    from domain.geometry.coordinates import to_projected

    with pytest.raises(ValidationError, match="outside valid range") as exc_info:
        to_projected(Wgs84Point(latitude=40.0, longitude=5.0))

    assert exc_info.value.field == "coordinates"
    assert exc_info.value.values == {"latitude": 40.0, "longitude": 5.0}


@pytest.mark.parametrize(
    "latitude,longitude,inside",
    [
        (55.0, 11.0, True),  # corner, inclusive
        (69.0, 24.0, True),
        (54.999, 15.0, False),
        (62.0, 24.001, False),
    ],
)
def test_envelope_is_inclusive(latitude, longitude, inside):
    """TC-006: Envelope bounds are inclusive on every side."""
    from domain.geometry.coordinates import is_within_envelope

    assert is_within_envelope(latitude, longitude) is inside


# ===========================================================================
# TC-007: Bounding box conversion
# ===========================================================================
def test_bbox_to_projected_preserves_ordering():
    """TC-007: A valid WGS84 box converts corner by corner, min below max."""
    from domain.geometry.coordinates import bbox_to_projected, to_projected

    bbox = Wgs84Bbox(min_lat=59.2, min_lon=17.9, max_lat=59.4, max_lon=18.2)
    projected = bbox_to_projected(bbox)

    lower = to_projected(Wgs84Point(latitude=59.2, longitude=17.9))
    assert projected.min_x == pytest.approx(lower.x)
    assert projected.min_y == pytest.approx(lower.y)
    assert projected.min_x < projected.max_x
    assert projected.min_y < projected.max_y


@pytest.mark.parametrize(
    "bbox,message",
    [
        (
            Wgs84Bbox(min_lat=40.0, min_lon=5.0, max_lat=59.4, max_lon=18.2),
            "outside valid range",
        ),
        (
            Wgs84Bbox(min_lat=59.2, min_lon=17.9, max_lat=70.0, max_lon=18.2),
            "outside valid range",
        ),
        (
            Wgs84Bbox(min_lat=59.4, min_lon=17.9, max_lat=59.2, max_lon=18.2),
            "min_lat must be less than max_lat",
        ),
        (
            Wgs84Bbox(min_lat=59.2, min_lon=17.9, max_lat=59.2, max_lon=18.2),
            "min_lat must be less than max_lat",
        ),
        (
            Wgs84Bbox(min_lat=59.2, min_lon=18.2, max_lat=59.4, max_lon=17.9),
            "min_lon must be less than max_lon",
        ),
    ],
)
def test_bbox_to_projected_rejects_invalid(bbox, message):
    """TC-008: Out-of-envelope, inverted and degenerate boxes fail with field 'bbox'."""
    from domain.geometry.coordinates import bbox_to_projected

    with pytest.raises(ValidationError, match=message) as exc_info:
        bbox_to_projected(bbox)

    assert exc_info.value.field == "bbox"


# ===========================================================================
# TC-009: Value object bounds
# ===========================================================================
def test_wgs84_point_rejects_impossible_latitude():
    """TC-009: Latitude beyond +/-90 is rejected at construction."""
    with pytest.raises(ValueError):
        Wgs84Point(latitude=91.0, longitude=18.0)


def test_points_are_immutable():
    """TC-010: Points are frozen value objects."""
    point = Wgs84Point(latitude=59.3, longitude=18.0)

    with pytest.raises(ValueError):
        point.latitude = 60.0
