"""Geometry Bounded Context - Error Hierarchy.

Custom exceptions for WKT and bounding-box operations.
Coordinate range failures raise ``domain.errors.ValidationError`` instead.
"""

from __future__ import annotations

from domain.errors import DomainError


class GeometryError(DomainError):
    """Base error for malformed or empty geometry input."""


class NoCoordinatesError(GeometryError):
    """WKT text contains no numeric coordinate pairs."""


class EmptyBoundingBoxListError(GeometryError):
    """Cannot combine an empty list of bounding boxes."""


class RingCountMismatchError(GeometryError):
    """Number of rings does not match the coordinate groups in the template.

    Attributes:
        expected: Coordinate groups found in the WKT template
        actual: Rings supplied for serialization
    """

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"WKT template has {expected} coordinate groups, got {actual} rings"
        )
