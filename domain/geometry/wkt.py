"""Geometry Bounded Context - WKT Codec.

Parses POLYGON / MULTIPOLYGON Well-Known Text into coordinate rings and back.

Only innermost parenthesized groups (groups containing no nested parentheses)
carry coordinates. Everything outside them (geometry keyword, polygon and
multipolygon framing) is structural text and is never rewritten, which lets
single polygons and multipolygons go through the same code path.
"""

from __future__ import annotations

import math
from typing import Callable, Sequence

from domain.geometry.errors import RingCountMismatchError
from domain.geometry.value_objects import Coordinate, Ring


def format_number(value: float) -> str:
    """Format a coordinate for WKT output.

    Integral values drop the trailing ".0" (``10.0`` -> ``"10"``); everything
    else uses the shortest round-tripping repr.
    """
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def find_coordinate_groups(wkt: str) -> list[tuple[int, int]]:
    """Locate every innermost parenthesized group.

    Balanced-parenthesis scan: an opening paren starts a candidate, and the
    next closing paren ends it only if no other paren opened in between.

    Returns:
        List of (start, end) slices of the group contents, excluding the
        parentheses themselves, in text order.
    """
    groups: list[tuple[int, int]] = []
    open_at: int | None = None
    for i, char in enumerate(wkt):
        if char == "(":
            open_at = i
        elif char == ")":
            if open_at is not None:
                groups.append((open_at + 1, i))
            open_at = None
    return groups


def parse_coordinates(text: str) -> Ring:
    """Parse ``"x y, x y, ..."`` into coordinate pairs.

    Pairs that do not parse as two finite numbers are dropped, so the result
    may be shorter than the number of comma-separated tokens.
    """
    ring: Ring = []
    for pair in text.split(","):
        parts = pair.split()
        if len(parts) < 2:
            continue
        try:
            x = float(parts[0])
            y = float(parts[1])
        except ValueError:
            continue
        if not (math.isfinite(x) and math.isfinite(y)):
            continue
        ring.append((x, y))
    return ring


def format_ring(ring: Sequence[Coordinate]) -> str:
    """Serialize a ring as ``"x y, x y, ..."`` (no surrounding parentheses)."""
    return ", ".join(f"{format_number(x)} {format_number(y)}" for x, y in ring)


def parse_rings(wkt: str) -> list[Ring]:
    """Return one ring per innermost coordinate group, in text order."""
    return [parse_coordinates(wkt[start:end]) for start, end in find_coordinate_groups(wkt)]


def rewrite_rings(wkt: str, transform: Callable[[str, Ring], str | None]) -> str:
    """Rebuild ``wkt`` with each coordinate group passed through ``transform``.

    ``transform`` receives the raw group text and its parsed ring and returns
    the replacement group text, or None to keep the original text verbatim.
    """
    pieces: list[str] = []
    cursor = 0
    for start, end in find_coordinate_groups(wkt):
        raw = wkt[start:end]
        replacement = transform(raw, parse_coordinates(raw))
        pieces.append(wkt[cursor:start])
        pieces.append(raw if replacement is None else replacement)
        cursor = end
    pieces.append(wkt[cursor:])
    return "".join(pieces)


def serialize_rings(wkt: str, rings: Sequence[Sequence[Coordinate]]) -> str:
    """Inverse of ``parse_rings``: write ``rings`` back into the template ``wkt``.

    Structural text of the template is kept; coordinate groups are replaced in
    order and always re-emitted as ``"x y"`` pairs joined by ``", "``.

    Raises:
        RingCountMismatchError: if len(rings) differs from the template's
            coordinate group count
    """
    expected = len(find_coordinate_groups(wkt))
    if expected != len(rings):
        raise RingCountMismatchError(expected, len(rings))

    remaining = iter(rings)
    return rewrite_rings(wkt, lambda _raw, _ring: format_ring(next(remaining)))
