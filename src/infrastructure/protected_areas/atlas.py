"""Wired entry point over all registries.

Builds the REST and WFS adapters from ``Settings`` and exposes the four
domain operations with configured defaults (limit, simplification tolerance).

Usage::

    async with ProtectedAreaAtlas() as atlas:
        result = await atlas.search(kommun="0180")
        print(result.to_response())
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping, Sequence

from domain.geometry.value_objects import Wgs84Bbox
from domain.protected_areas import services
from domain.protected_areas.repositories import (
    BboxSearchRepository,
    ProtectedAreaRepository,
)
from domain.protected_areas.value_objects import (
    AggregatedResult,
    DetailInclude,
    ExtentResult,
    SearchQuery,
    Source,
)
from infrastructure.settings import Settings

from .factories import build_bbox_repositories, build_repositories


class ProtectedAreaAtlas:
    """Search, detail and extent across the national, Natura 2000 and Ramsar registries.

    Repositories default to the HTTP adapters built from ``settings``; tests
    and callers with their own transports may pass them explicitly.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        repositories: Mapping[Source, ProtectedAreaRepository] | None = None,
        bbox_repositories: Mapping[Source, BboxSearchRepository] | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.repositories = (
            dict(repositories) if repositories is not None else build_repositories(self.settings)
        )
        self.bbox_repositories = (
            dict(bbox_repositories)
            if bbox_repositories is not None
            else build_bbox_repositories(self.settings)
        )

    async def close(self) -> None:
        """Close every adapter that owns a transport."""
        adapters = [*self.repositories.values(), *self.bbox_repositories.values()]
        await asyncio.gather(
            *(a.close() for a in adapters if hasattr(a, "close"))
        )

    async def __aenter__(self) -> ProtectedAreaAtlas:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    async def search(
        self,
        *,
        kommun: str | None = None,
        lan: str | None = None,
        namn: str | None = None,
        limit: int | None = None,
    ) -> AggregatedResult:
        query = SearchQuery(
            kommun=kommun,
            lan=lan,
            namn=namn,
            limit=self.settings.default_limit if limit is None else limit,
        )
        return await services.search_areas(self.repositories, query)

    async def search_bbox(
        self,
        min_lat: float,
        min_lon: float,
        max_lat: float,
        max_lon: float,
        *,
        limit: int | None = None,
    ) -> AggregatedResult:
        bbox = Wgs84Bbox(min_lat=min_lat, min_lon=min_lon, max_lat=max_lat, max_lon=max_lon)
        return await services.search_areas_by_bbox(
            self.bbox_repositories,
            bbox,
            self.settings.default_limit if limit is None else limit,
        )

    async def detail(
        self,
        area_id: str,
        source: Source | str,
        include: DetailInclude | str = DetailInclude.ALL,
        *,
        tolerance: float | None = None,
    ) -> dict[str, Any]:
        return await services.area_detail(
            self.repositories,
            area_id,
            source,
            include,
            self.settings.simplify_tolerance if tolerance is None else tolerance,
        )

    async def extent(
        self,
        *,
        national_ids: Sequence[str] = (),
        n2000_ids: Sequence[str] = (),
        ramsar_ids: Sequence[str] = (),
    ) -> ExtentResult:
        return await services.combined_extent(
            self.repositories,
            {
                Source.NATIONAL: national_ids,
                Source.N2000: n2000_ids,
                Source.RAMSAR: ramsar_ids,
            },
        )
