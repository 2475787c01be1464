"""Protected Areas Bounded Context - Value Objects.

Request and result types for searching the three registries. Every instance
lives for a single request; nothing here is persisted.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field

from domain.errors import ValidationError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
DEFAULT_LIMIT = 100
MAX_LIMIT = 500
MAX_EXTENT_IDS = 100
DEFAULT_DECISION_STATUS = "Gällande"  # national registry: decision in force

AreaRecord = Mapping[str, Any]


class Source(str, Enum):
    """Upstream registry a record comes from."""

    NATIONAL = "national"  # Naturvårdsregistret: reserves, national parks
    N2000 = "n2000"  # EU Natura 2000 network
    RAMSAR = "ramsar"  # International wetlands convention


# Native identifier field per source; renamed to "id" when records are tagged
SOURCE_ID_FIELDS: Mapping[Source, str] = {
    Source.NATIONAL: "id",
    Source.N2000: "kod",
    Source.RAMSAR: "id",
}


class DetailInclude(str, Enum):
    """Sections that can be requested for a single area."""

    GEOMETRY = "geometry"
    LAND_COVER = "land_cover"
    DOCUMENTS = "documents"
    PURPOSES = "purposes"
    REGULATIONS = "regulations"
    ENV_GOALS = "env_goals"
    SPECIES = "species"
    HABITATS = "habitats"
    ALL = "all"


# Sections each source can serve ("all" expands to exactly these)
SOURCE_SECTIONS: Mapping[Source, tuple[DetailInclude, ...]] = {
    Source.NATIONAL: (
        DetailInclude.GEOMETRY,
        DetailInclude.PURPOSES,
        DetailInclude.LAND_COVER,
        DetailInclude.REGULATIONS,
        DetailInclude.ENV_GOALS,
        DetailInclude.DOCUMENTS,
    ),
    Source.N2000: (
        DetailInclude.SPECIES,
        DetailInclude.HABITATS,
        DetailInclude.LAND_COVER,
        DetailInclude.GEOMETRY,
        DetailInclude.DOCUMENTS,
    ),
    Source.RAMSAR: (
        DetailInclude.GEOMETRY,
        DetailInclude.LAND_COVER,
    ),
}


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class SearchQuery(BaseModel):
    """Name/code search sent to every registry's list endpoint."""

    kommun: str | None = None  # 4-digit municipality code, e.g. "0180"
    lan: str | None = None  # 1-2 letter county code, e.g. "AB"
    namn: str | None = None  # Area name, partial match
    limit: int = DEFAULT_LIMIT

    model_config = ConfigDict(frozen=True)

    def validate_for_search(self) -> None:
        """Check the preconditions of the unified search.

        Raises:
            ValidationError: (field="query") if neither kommun nor lan is
                given, (field="limit") if limit is outside 1..MAX_LIMIT
        """
        if not self.kommun and not self.lan:
            raise ValidationError(
                "At least one search parameter must be provided: kommun or lan",
                field="query",
                values={"kommun": self.kommun, "lan": self.lan},
            )
        if not (1 <= self.limit <= MAX_LIMIT):
            raise ValidationError(
                f"limit must be between 1 and {MAX_LIMIT}, got {self.limit}",
                field="limit",
                values=self.limit,
            )


# ---------------------------------------------------------------------------
# Per-source outcomes (tagged union)
# ---------------------------------------------------------------------------
class SourceSuccess(BaseModel):
    """A source call that returned records."""

    status: Literal["success"] = "success"
    source: Source
    records: tuple[dict[str, Any], ...]

    model_config = ConfigDict(frozen=True)


class SourceFailure(BaseModel):
    """A source call that raised; the reason is kept as data."""

    status: Literal["failure"] = "failure"
    source: Source
    reason: str

    model_config = ConfigDict(frozen=True)


SourceResult = Union[SourceSuccess, SourceFailure]


class SourceError(BaseModel):
    """Error entry reported to callers for a failed source."""

    source: Source
    message: str

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# AggregatedResult
# ---------------------------------------------------------------------------
class AggregatedResult(BaseModel):
    """Merged, source-tagged records from a fan-out query (Value Object).

    Invariants:
        AR-1: total_count == len(areas) == sum(counts.values())
        AR-2: failed sources have count 0 and exactly one entry in errors
    """

    areas: tuple[dict[str, Any], ...]
    counts: dict[Source, int] = Field(default_factory=dict)
    total_count: int = Field(ge=0)
    errors: tuple[SourceError, ...] = ()

    model_config = ConfigDict(frozen=True)

    def count_for(self, source: Source) -> int:
        """Records returned by ``source`` (0 if it failed or was not queried)."""
        return self.counts.get(source, 0)

    def to_response(self) -> dict[str, Any]:
        """Flatten into the response shape used by the search tools."""
        response: dict[str, Any] = {"total_count": self.total_count}
        for source, count in self.counts.items():
            response[f"{source.value}_count"] = count
        response["errors"] = [e.model_dump(mode="json") for e in self.errors]
        response["areas"] = list(self.areas)
        return response


# ---------------------------------------------------------------------------
# ExtentResult
# ---------------------------------------------------------------------------
class ExtentResult(BaseModel):
    """Combined extent of areas drawn from one or more sources (Value Object)."""

    ids: dict[Source, tuple[str, ...]]
    total_areas: int = Field(gt=0)
    extent: str  # WKT POLYGON
    coordinate_system: str

    model_config = ConfigDict(frozen=True)

    def to_response(self) -> dict[str, Any]:
        response: dict[str, Any] = {
            f"{source.value}_ids": list(self.ids.get(source, ())) for source in Source
        }
        response["total_areas"] = self.total_areas
        response["extent"] = self.extent
        response["coordinate_system"] = self.coordinate_system
        return response
