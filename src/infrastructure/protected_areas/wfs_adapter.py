"""WFS adapter implementing BboxSearchRepository.

Only the national and Natura 2000 registries publish WFS layers, so only they
take part in bounding-box searches.

GeoServer quirks baked in here:
- ``GEOJSON`` is a GeoServer-specific output alias; ``application/json`` is
  rejected by this deployment.
- ``propertyName`` (to drop geometry) produces malformed JSON, so full
  features are requested and geometry is ignored.
- WFS 2.0 with EPSG:3006 uses northing-first axis order in ``bbox``.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from domain.geometry.value_objects import ProjectedBbox
from domain.protected_areas.errors import UpstreamError
from domain.protected_areas.value_objects import AreaRecord, Source
from infrastructure.http import HttpClient
from shared.crs import CRS_SWEREF99TM

from .registry_adapter import FieldMap, rename_fields

logger = logging.getLogger(__name__)

WFS_VERSION = "2.0.0"
WFS_OUTPUT_FORMAT = "GEOJSON"

# typeName and property map per source
_LAYERS: Mapping[Source, tuple[str, FieldMap]] = {
    Source.NATIONAL: (
        "SkyddadeOmraden",
        {
            "NVRID": "id",
            "NAMN": "name",
            "SKYDDSTYP": "type",
            "AREA_HA": "area_ha",
            "KOMMUN": "municipalities",
            "LAN": "county",
        },
    ),
    Source.N2000: (
        "N2000_WFS:N2000",
        {
            "OMRADESKOD": "kod",
            "OMRADESNAMN": "name",
            "OMRADESTYP": "type",
            "AREA_HA": "area_ha",
            "KOMMUN": "municipalities",
            "LAN": "county",
        },
    ),
}


def build_bbox_param(bbox: ProjectedBbox) -> str:
    """Format a SWEREF99 TM box for WFS 2.0 (Y,X order, CRS suffix)."""
    return f"{bbox.min_y},{bbox.min_x},{bbox.max_y},{bbox.max_x},{CRS_SWEREF99TM}"


class WfsBboxAdapter:
    """GetFeature bbox search against one registry layer."""

    def __init__(self, http: HttpClient, source: Source) -> None:
        if source not in _LAYERS:
            raise ValueError(f"No WFS layer for source {source.value}")
        self._http = http
        self.source = source
        self.type_name, self._fields = _LAYERS[source]

    async def close(self) -> None:
        await self._http.close()

    async def search_bbox(self, bbox: ProjectedBbox, limit: int) -> list[AreaRecord]:
        data: Any = await self._http.request(
            "",
            params={
                "service": "WFS",
                "version": WFS_VERSION,
                "request": "GetFeature",
                "typeNames": self.type_name,
                "bbox": build_bbox_param(bbox),
                "count": limit,
                "outputFormat": WFS_OUTPUT_FORMAT,
            },
        )

        features = data.get("features") if isinstance(data, Mapping) else None
        if not isinstance(features, list):
            raise UpstreamError(
                f"{self.source.value} WFS search returned an unexpected response. "
                "Try again or search by kommun/lan codes instead.",
                status=0,
                origin=self._http.base_url,
            )

        areas = [
            rename_fields(feature.get("properties") or {}, self._fields)
            for feature in features
        ]
        logger.debug("%s WFS: %d features in bbox", self.source.value, len(areas))
        return areas
