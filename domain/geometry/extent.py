"""Geometry Bounded Context - Bounding-Box Engine.

Client-side extent calculation for WKT geometries.

The national registry's multi-area extent endpoint fails (Oracle ORA-28579
inside its aggregate-union function) when asked for several areas at once, and
no registry offers a cross-source extent. Extents are therefore fetched per
source and merged here.

``extract_bounding_box`` deliberately ignores ring/parenthesis structure and
picks up any "number number" pair. It tolerates slightly malformed upstream
text, and for the same reason must not be used as a general WKT parser.
"""

from __future__ import annotations

import re
from typing import Iterable

from domain.geometry.errors import EmptyBoundingBoxListError, NoCoordinatesError
from domain.geometry.value_objects import BoundingBox
from domain.geometry.wkt import format_number

_NUMBER = r"-?\d+(?:\.\d*)?(?:[eE][-+]?\d+)?"
_COORDINATE_PAIR = re.compile(rf"({_NUMBER})\s+({_NUMBER})")


def extract_bounding_box(wkt: str) -> BoundingBox:
    """Compute the axis-aligned bounds of every coordinate pair in ``wkt``.

    Raises:
        NoCoordinatesError: if the text contains no numeric pairs
    """
    min_x = min_y = float("inf")
    max_x = max_y = float("-inf")
    found = 0

    for match in _COORDINATE_PAIR.finditer(wkt):
        x = float(match.group(1))
        y = float(match.group(2))
        min_x = min(min_x, x)
        max_x = max(max_x, x)
        min_y = min(min_y, y)
        max_y = max(max_y, y)
        found += 1

    if found == 0:
        raise NoCoordinatesError("No coordinates found in WKT string")

    return BoundingBox(min_x=min_x, min_y=min_y, max_x=max_x, max_y=max_y)


def combine_bounding_boxes(boxes: Iterable[BoundingBox]) -> BoundingBox:
    """Smallest box enclosing all ``boxes``. Order does not matter.

    Raises:
        EmptyBoundingBoxListError: if no boxes are given
    """
    boxes = list(boxes)
    if not boxes:
        raise EmptyBoundingBoxListError("Cannot combine empty list of bounding boxes")

    return BoundingBox(
        min_x=min(b.min_x for b in boxes),
        min_y=min(b.min_y for b in boxes),
        max_x=max(b.max_x for b in boxes),
        max_y=max(b.max_y for b in boxes),
    )


def bounding_box_to_wkt(box: BoundingBox) -> str:
    """Serialize a box as a closed rectangular POLYGON.

    Corner order starts at (min_x, min_y) and matches the registry's own
    extent output: ``POLYGON (( x1 y1, x2 y1, x2 y2, x1 y2, x1 y1))``.
    """
    x1, y1 = format_number(box.min_x), format_number(box.min_y)
    x2, y2 = format_number(box.max_x), format_number(box.max_y)
    return f"POLYGON (( {x1} {y1}, {x2} {y1}, {x2} {y2}, {x1} {y2}, {x1} {y1}))"
