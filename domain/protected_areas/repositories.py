"""Domain Port(s) for Protected Area I/O.

Defines interfaces (Protocols) that infrastructure adapters must implement.
No concrete I/O here.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from domain.geometry.value_objects import ProjectedBbox

from .value_objects import AreaRecord, SearchQuery, Source


class ProtectedAreaRepository(Protocol):
    """Port for one registry's REST API.

    Implementations live in infrastructure (one adapter per source). Section
    methods a source does not offer raise ValidationError(field="include");
    the detail service never calls them because the include matrix is
    validated first.
    """

    source: Source

    async def list_areas(self, query: SearchQuery) -> list[AreaRecord]:
        """Search areas by municipality/county/name. Records keep the native id field."""
        ...

    async def get_area(self, area_id: str) -> AreaRecord:
        """Fetch the summary record for one area."""
        ...

    async def get_area_wkt(self, area_id: str) -> str:
        """Fetch the boundary of one area as WGS84 WKT."""
        ...

    async def get_areas_extent(self, area_ids: Sequence[str]) -> str:
        """Fetch the extent of the given areas as WGS84 WKT."""
        ...

    async def get_section(self, area_id: str, section: str) -> list[dict[str, Any]]:
        """Fetch a list-valued detail section (land_cover, species, ...)."""
        ...


class BboxSearchRepository(Protocol):
    """Port for a registry's WFS GetFeature endpoint."""

    source: Source

    async def search_bbox(self, bbox: ProjectedBbox, limit: int) -> list[AreaRecord]:
        """Search areas intersecting a SWEREF99 TM box."""
        ...
