"""Geometry Bounded Context - Polygon Simplifier.

Douglas-Peucker line simplification applied per ring of a WKT geometry.

Large protected areas can carry thousands of boundary coordinates; at the
default tolerance (~100 m) this typically keeps a few percent of them while
bounding the deviation of every discarded point by the tolerance.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np
from numpy.typing import NDArray

from domain.errors import ValidationError
from domain.geometry.value_objects import Coordinate, Ring
from domain.geometry.wkt import format_ring, rewrite_rings

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_TOLERANCE = 0.001  # degrees, ~100 m at Swedish latitudes
MIN_RING_POINTS = 4  # 3 distinct vertices + closing point


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------
def perpendicular_distance(
    point: Coordinate, line_start: Coordinate, line_end: Coordinate
) -> float:
    """Distance from ``point`` to the infinite line through start and end.

    Zero-length baseline (start == end) falls back to point-to-point distance.
    """
    x, y = point
    x1, y1 = line_start
    x2, y2 = line_end

    length = math.hypot(x2 - x1, y2 - y1)
    if length == 0:
        return math.hypot(x - x1, y - y1)

    return abs((y2 - y1) * x - (x2 - x1) * y + x2 * y1 - y2 * x1) / length


def _interior_distances(segment: NDArray[np.float64]) -> NDArray[np.float64]:
    """Vectorized ``perpendicular_distance`` for every interior point of a segment."""
    (x1, y1), (x2, y2) = segment[0], segment[-1]
    interior = segment[1:-1]

    length = math.hypot(x2 - x1, y2 - y1)
    if length == 0:
        return np.hypot(interior[:, 0] - x1, interior[:, 1] - y1)

    return (
        np.abs((y2 - y1) * interior[:, 0] - (x2 - x1) * interior[:, 1] + x2 * y1 - y2 * x1)
        / length
    )


# ---------------------------------------------------------------------------
# Douglas-Peucker
# ---------------------------------------------------------------------------
def douglas_peucker(points: Sequence[Coordinate], tolerance: float) -> Ring:
    """Simplify a polyline.

    The recursion (split at the farthest interior point while it exceeds the
    tolerance, otherwise collapse to the two endpoints) is unrolled onto an
    explicit stack so rings with thousands of vertices cannot hit the
    interpreter recursion limit. The retained points are the same as the
    recursive formulation's ``left[:-1] + right`` concatenation.

    Args:
        points: Ordered coordinates
        tolerance: Maximum allowed perpendicular deviation (same units as
            the coordinates)

    Returns:
        Retained points in original order. First and last are always kept.
    """
    if len(points) <= 2:
        return list(points)

    coords = np.asarray(points, dtype=np.float64)
    keep = np.zeros(len(coords), dtype=bool)
    keep[0] = keep[-1] = True

    stack = [(0, len(coords) - 1)]
    while stack:
        first, last = stack.pop()
        if last - first < 2:
            continue

        distances = _interior_distances(coords[first : last + 1])
        # argmax returns the first occurrence, matching a strict '>' scan
        offset = int(np.argmax(distances))
        if distances[offset] > tolerance:
            split = first + 1 + offset
            keep[split] = True
            stack.append((first, split))
            stack.append((split, last))

    return [points[i] for i in np.flatnonzero(keep)]


def _reduce_ring(ring: Sequence[Coordinate], tolerance: float) -> Ring | None:
    """Closed Douglas-Peucker result, or None when the ring must be kept as is."""
    if len(ring) < MIN_RING_POINTS:
        return None

    simplified = douglas_peucker(ring, tolerance)
    if len(simplified) < MIN_RING_POINTS:
        return None

    if simplified[0] != simplified[-1]:
        simplified.append(simplified[0])
    return simplified


def simplify_ring(ring: Sequence[Coordinate], tolerance: float = DEFAULT_TOLERANCE) -> Ring:
    """Simplify one polygon ring while keeping it a valid ring.

    - Rings under MIN_RING_POINTS are returned unchanged
    - If simplification leaves fewer than MIN_RING_POINTS, the original ring
      is returned (a 3-point "ring" encloses no area)
    - The result is re-closed if its first and last points differ
    """
    simplified = _reduce_ring(ring, tolerance)
    return list(ring) if simplified is None else simplified


def simplify(wkt: str, tolerance: float = DEFAULT_TOLERANCE) -> str:
    """Simplify every ring of a POLYGON or MULTIPOLYGON WKT string.

    Structural text is preserved. Groups with fewer than MIN_RING_POINTS
    points, or that would collapse below it, keep their original text. Every
    other group is re-emitted as canonical ``"x y"`` pairs, so malformed and
    non-finite pairs are dropped from it.

    Args:
        wkt: WKT geometry text
        tolerance: Maximum deviation in coordinate units (default ~100 m)

    Returns:
        Simplified WKT text

    Raises:
        ValidationError: (field="tolerance") if tolerance is negative or not
            finite

    Example:
        >>> simplify("POLYGON ((0 0, 0 5, 0.0001 10, 0 20, 20 20, 20 0, 0 0))", 0.01)
        'POLYGON ((0 0, 0 20, 20 20, 20 0, 0 0))'
    """
    if not math.isfinite(tolerance) or tolerance < 0:
        raise ValidationError(
            f"tolerance must be a non-negative number, got {tolerance}",
            field="tolerance",
            values=tolerance,
        )

    def _simplify_group(_raw: str, ring: Ring) -> str | None:
        simplified = _reduce_ring(ring, tolerance)
        return None if simplified is None else format_ring(simplified)

    return rewrite_rings(wkt, _simplify_group)
