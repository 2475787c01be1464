"""Domain Error Hierarchy.

Errors shared by every bounded context. Context-specific subclasses live in
``domain/<context>/errors.py``.
"""

from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base error for all domain operations."""


class ValidationError(DomainError):
    """Caller-supplied input violates a precondition.

    Attributes:
        field: Which argument failed (e.g. "coordinates", "bbox", "limit")
        values: The offending values, kept for diagnostics
    """

    def __init__(self, message: str, field: str, values: Any = None) -> None:
        self.field = field
        self.values = values
        super().__init__(message)
