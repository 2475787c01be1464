"""Protected Area Atlas Domain Layer.

This package contains the core business logic organized by bounded contexts:
- geometry: CRS conversion, WKT codec, simplification, bounding boxes
- protected_areas: Sources, multi-source aggregation, search/detail/extent
"""

# Imports alphabetized per project style (isort)
from domain import geometry, protected_areas

__all__ = ["geometry", "protected_areas"]
