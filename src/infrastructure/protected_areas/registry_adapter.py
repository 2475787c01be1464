"""REST adapters implementing ProtectedAreaRepository.

One adapter per registry. All three registries share the same REST layout
(``/omrade/...``), so the common request logic lives in ``RegistryAdapter``
and subclasses only declare paths and field maps.

Raw responses use Swedish field names; they are renamed to the project's
English record keys here so the domain never sees registry-specific schemas.
Records keep the registry's native id field (``kod`` for Natura 2000); the
aggregator renames it to ``id`` when tagging.
"""

from __future__ import annotations

import logging
from typing import Any, ClassVar, Mapping, Sequence
from urllib.parse import quote

from domain.errors import ValidationError
from domain.protected_areas.errors import UpstreamError
from domain.protected_areas.value_objects import (
    DEFAULT_DECISION_STATUS,
    AreaRecord,
    SearchQuery,
    Source,
)
from infrastructure.http import HttpClient

logger = logging.getLogger(__name__)

FieldMap = Mapping[str, str]  # raw key -> record key

# ---------------------------------------------------------------------------
# Section field maps (shared by every registry that publishes the section)
# ---------------------------------------------------------------------------
_LAND_COVER_FIELDS: FieldMap = {"kod": "code", "namn": "name", "areaHa": "area_ha"}
_DOCUMENT_FIELDS: FieldMap = {
    "id": "id",
    "namn": "name",
    "filtyp": "file_type",
    "mimetyp": "mime_type",
    "fileUrl": "file_url",
}
_PURPOSE_FIELDS: FieldMap = {"namn": "name", "beskrivning": "description"}
_REGULATION_FIELDS: FieldMap = {
    "foreskriftstyp": "type",
    "foreskriftssubtyp": "subtype",
    "areaHa": "area_ha",
}
_ENV_GOAL_FIELDS: FieldMap = {"namn": "name"}
_SPECIES_FIELDS: FieldMap = {"namn": "name", "grupp": "group"}
_HABITAT_FIELDS: FieldMap = {"kod": "code", "namn": "name", "areaHa": "area_ha"}


def rename_fields(raw: Mapping[str, Any], fields: FieldMap) -> dict[str, Any]:
    """Project ``raw`` onto ``fields``; missing keys become None."""
    return {target: raw.get(key) for key, target in fields.items()}


class RegistryAdapter:
    """Shared REST logic for the three registries.

    Subclasses set:
        source: Which registry this adapter serves
        area_fields: Raw -> record map for area summaries
        sections: section name -> (endpoint suffix, field map)
    """

    source: ClassVar[Source]
    area_fields: ClassVar[FieldMap]
    sections: ClassVar[Mapping[str, tuple[str, FieldMap]]]

    def __init__(self, http: HttpClient) -> None:
        self._http = http

    async def close(self) -> None:
        await self._http.close()

    # -- Paths ---------------------------------------------------------------

    def area_path(self, area_id: str) -> str:
        return f"omrade/{quote(area_id, safe='')}"

    # -- Port implementation -------------------------------------------------

    async def list_areas(self, query: SearchQuery) -> list[AreaRecord]:
        raw = await self._http.request(
            "omrade/nolinks",
            params={
                "kommun": query.kommun,
                "lan": query.lan,
                "namn": query.namn,
                "limit": query.limit,
            },
        )
        areas = [rename_fields(a, self.area_fields) for a in self._expect_list(raw, "area list")]
        logger.debug("%s: listed %d areas", self.source.value, len(areas))
        return areas

    async def get_area(self, area_id: str) -> AreaRecord:
        raw = await self._http.request(self.area_path(area_id))
        # Some endpoints wrap a single object in a list
        if isinstance(raw, list):
            if not raw:
                raise UpstreamError(
                    f"{self.source.value} area '{area_id}' not found",
                    status=404,
                    origin=self._http.base_url,
                )
            raw = raw[0]
        if not isinstance(raw, Mapping):
            raise self._unexpected("area")
        return rename_fields(raw, self.area_fields)

    async def get_area_wkt(self, area_id: str) -> str:
        wkt = await self._http.request(f"{self.area_path(area_id)}/wkt")
        if not isinstance(wkt, str):
            raise self._unexpected("geometry")
        return wkt

    async def get_areas_extent(self, area_ids: Sequence[str]) -> str:
        wkt = await self._http.request(
            "omrade/extentAsWkt", params={"id": ",".join(area_ids)}
        )
        if not isinstance(wkt, str):
            raise self._unexpected("extent")
        return wkt

    async def get_section(self, area_id: str, section: str) -> list[dict[str, Any]]:
        if section not in self.sections:
            raise ValidationError(
                f"{self.source.value} registry does not publish '{section}'",
                field="include",
                values={"include": section, "source": self.source.value},
            )
        suffix, fields = self.sections[section]
        raw = await self._http.request(f"{self.area_path(area_id)}/{suffix}")
        return [rename_fields(item, fields) for item in self._expect_list(raw, section)]

    # -- Helpers -------------------------------------------------------------

    def _expect_list(self, raw: Any, what: str) -> list[Mapping[str, Any]]:
        if not isinstance(raw, list):
            raise self._unexpected(what)
        return raw

    def _unexpected(self, what: str) -> UpstreamError:
        return UpstreamError(
            f"{self.source.value} registry returned an unexpected {what} response",
            status=0,
            origin=self._http.base_url,
        )


# ---------------------------------------------------------------------------
# Registries
# ---------------------------------------------------------------------------
class NationalAreaAdapter(RegistryAdapter):
    """Naturvårdsregistret: nature reserves, national parks, etc.

    Every area path carries the decision status (default: in force).
    """

    source = Source.NATIONAL
    area_fields = {
        "id": "id",
        "namn": "name",
        "skyddstyp": "type",
        "beslutsstatus": "decision_status",
        "areaHa": "area_ha",
        "landareaHa": "land_area_ha",
        "vattenareaHa": "water_area_ha",
        "skogAreaHa": "forest_area_ha",
        "beslutsdatum": "decision_date",
        "gallandedatum": "valid_date",
        "ursprBeslutsdatum": "original_decision_date",
        "ikrafttradandedatumForeskrifter": "regulation_effective_date",
        "lanAsText": "county",
        "kommunerAsText": "municipalities",
        "forvaltare": "manager",
        "beslutsmyndighet": "decision_authority",
        "tillsynsmyndighet": "supervisory_authority",
        "provningsmyndighetTillstand": "permit_authority",
        "provningsmyndighetDispens": "exemption_authority",
        "iucnKategori": "iucn_category",
        "beslutstyp": "decision_type",
        "beskrivning": "description",
    }
    sections = {
        "land_cover": ("nmdklasser", _LAND_COVER_FIELDS),
        "documents": ("dokument", _DOCUMENT_FIELDS),
        "purposes": ("syften", _PURPOSE_FIELDS),
        "regulations": ("foreskriftsomraden", _REGULATION_FIELDS),
        "env_goals": ("miljomal", _ENV_GOAL_FIELDS),
    }

    def __init__(self, http: HttpClient, status: str = DEFAULT_DECISION_STATUS) -> None:
        super().__init__(http)
        self.status = status

    def area_path(self, area_id: str) -> str:
        return f"{super().area_path(area_id)}/{quote(self.status, safe='')}"


class N2000AreaAdapter(RegistryAdapter):
    """Natura 2000: EU Birds (SPA) and Habitats (SCI) directive sites."""

    source = Source.N2000
    area_fields = {
        "kod": "kod",
        "namn": "name",
        "omradestypkod": "area_type",
        "lan": "county",
        "kommun": "municipalities",
        "areaHa": "area_ha",
        "landareaHa": "land_area_ha",
        "vattenareaHa": "water_area_ha",
        "skogAreaHa": "forest_area_ha",
        "beslutsdatum": "decision_date",
        "kvalitet": "quality",
        "karaktar": "character",
    }
    sections = {
        "land_cover": ("nmdklasser", _LAND_COVER_FIELDS),
        "documents": ("dokument", _DOCUMENT_FIELDS),
        "species": ("arter", _SPECIES_FIELDS),
        "habitats": ("naturtyper", _HABITAT_FIELDS),
    }


class RamsarAreaAdapter(RegistryAdapter):
    """Ramsar convention wetlands (no documents endpoint)."""

    source = Source.RAMSAR
    area_fields = {
        "id": "id",
        "namn": "name",
        "skyddstyp": "protection_type",
        "nation": "nation",
        "lanAsText": "county",
        "kommunerAsText": "municipalities",
        "totalArealHA": "total_area_ha",
        "shapeAreaHA": "shape_area_ha",
        "landHA": "land_area_ha",
        "skogHA": "forest_area_ha",
        "vattenHA": "water_area_ha",
        "ursprungligtBeslut": "original_decision",
        "senastBeslut": "latest_decision",
        "legalAct": "legal_act",
    }
    sections = {
        "land_cover": ("nmdklasser", _LAND_COVER_FIELDS),
    }
