"""Root pytest configuration for all tests.

Provides in-memory fakes of the domain ports so service tests run without
network access. Adapter tests use ``httpx.MockTransport`` instead (see
tests/infrastructure/).
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

import pytest

from domain.geometry.value_objects import ProjectedBbox
from domain.protected_areas.errors import UpstreamError
from domain.protected_areas.value_objects import AreaRecord, SearchQuery, Source

# Small square near Stockholm, WGS84 (lon lat)
SQUARE_WKT = "POLYGON ((18.0 59.0, 18.1 59.0, 18.1 59.1, 18.0 59.1, 18.0 59.0))"


class FakeRepository:
    """In-memory ProtectedAreaRepository.

    Parameters
    ----------
    source:
        Registry this fake stands in for.
    areas:
        Records returned by list_areas (native id field included).
    error:
        If set, every call raises it.
    delay:
        Seconds to sleep before answering (exercises concurrency).
    """

    def __init__(
        self,
        source: Source,
        areas: Sequence[AreaRecord] = (),
        *,
        error: Exception | None = None,
        delay: float = 0.0,
        wkt: str = SQUARE_WKT,
        extent: str = SQUARE_WKT,
        sections: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.source = source
        self.areas = list(areas)
        self.error = error
        self.delay = delay
        self.wkt = wkt
        self.extent = extent
        self.sections = sections or {}
        self.calls: list[tuple[str, Any]] = []

    async def _answer(self, name: str, arg: Any, value: Any) -> Any:
        self.calls.append((name, arg))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return value

    async def list_areas(self, query: SearchQuery) -> list[AreaRecord]:
        return await self._answer("list_areas", query, self.areas[: query.limit])

    async def get_area(self, area_id: str) -> AreaRecord:
        match = next((a for a in self.areas if area_id in a.values()), {"name": "Unknown"})
        return await self._answer("get_area", area_id, match)

    async def get_area_wkt(self, area_id: str) -> str:
        return await self._answer("get_area_wkt", area_id, self.wkt)

    async def get_areas_extent(self, area_ids: Sequence[str]) -> str:
        return await self._answer("get_areas_extent", list(area_ids), self.extent)

    async def get_section(self, area_id: str, section: str) -> list[dict[str, Any]]:
        return await self._answer(
            "get_section", (area_id, section), self.sections.get(section, [])
        )


class FakeBboxRepository:
    """In-memory BboxSearchRepository."""

    def __init__(
        self,
        source: Source,
        areas: Sequence[AreaRecord] = (),
        *,
        error: Exception | None = None,
    ) -> None:
        self.source = source
        self.areas = list(areas)
        self.error = error
        self.calls: list[tuple[ProjectedBbox, int]] = []

    async def search_bbox(self, bbox: ProjectedBbox, limit: int) -> list[AreaRecord]:
        self.calls.append((bbox, limit))
        if self.error is not None:
            raise self.error
        return self.areas[:limit]


@pytest.fixture
def national_areas() -> list[AreaRecord]:
    return [
        {"id": "2000019", "name": "Tyresta", "type": "Nationalpark"},
        {"id": "2000140", "name": "Nackareservatet", "type": "Naturreservat"},
    ]


@pytest.fixture
def n2000_areas() -> list[AreaRecord]:
    return [{"kod": "SE0110001", "name": "Tyresta", "area_type": "SPA/SCI"}]


@pytest.fixture
def ramsar_areas() -> list[AreaRecord]:
    return [
        {"id": "15", "name": "Hornborgasjön"},
        {"id": "16", "name": "Getterön"},
        {"id": "17", "name": "Tåkern"},
    ]


@pytest.fixture
def repositories(national_areas, n2000_areas, ramsar_areas) -> dict[Source, FakeRepository]:
    return {
        Source.NATIONAL: FakeRepository(Source.NATIONAL, national_areas),
        Source.N2000: FakeRepository(Source.N2000, n2000_areas),
        Source.RAMSAR: FakeRepository(Source.RAMSAR, ramsar_areas),
    }


@pytest.fixture
def upstream_timeout() -> UpstreamError:
    return UpstreamError("Request timeout after 30000ms", status=0, origin="n2000")


@pytest.fixture
def fake_repository() -> type[FakeRepository]:
    """FakeRepository class, for tests that build their own source set."""
    return FakeRepository


@pytest.fixture
def fake_bbox_repository() -> type[FakeBboxRepository]:
    return FakeBboxRepository


@pytest.fixture
def square_wkt() -> str:
    return SQUARE_WKT
