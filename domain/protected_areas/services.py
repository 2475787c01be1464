"""Protected Areas Bounded Context - Domain Services.

Multi-source aggregation and the search/detail/extent operations built on it.
NO transport code here: registries are reached through the ports in
``domain/protected_areas/repositories.py``, implemented by adapters under
``src/infrastructure/protected_areas/``.

Concurrency model:
    Network calls are the only suspension points. A fan-out launches every
    applicable source call at once and joins them with a settle-all gather:
    one source failing is recorded as data and never cancels or hides the
    others. Single-source operations (detail, per-source extent) use a plain
    gather and let the first upstream failure propagate.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Awaitable, Callable, Mapping, Sequence, TypeVar

from domain.errors import DomainError, ValidationError
from domain.geometry.coordinates import bbox_to_projected
from domain.geometry.extent import (
    bounding_box_to_wkt,
    combine_bounding_boxes,
    extract_bounding_box,
)
from domain.geometry.simplification import DEFAULT_TOLERANCE, simplify
from domain.geometry.value_objects import ProjectedBbox, Wgs84Bbox
from domain.protected_areas.errors import UpstreamError
from domain.protected_areas.repositories import (
    BboxSearchRepository,
    ProtectedAreaRepository,
)
from domain.protected_areas.value_objects import (
    DEFAULT_LIMIT,
    MAX_EXTENT_IDS,
    MAX_LIMIT,
    SOURCE_ID_FIELDS,
    SOURCE_SECTIONS,
    AggregatedResult,
    AreaRecord,
    DetailInclude,
    ExtentResult,
    SearchQuery,
    Source,
    SourceError,
    SourceFailure,
    SourceResult,
    SourceSuccess,
)
from shared.crs import OUTPUT_CRS_LABEL

logger = logging.getLogger(__name__)

R = TypeVar("R")
T = TypeVar("T")

SourceCall = Callable[[R], Awaitable[Sequence[AreaRecord]]]

# Detail sections are fetched two at a time to stay gentle on the registries
DETAIL_BATCH_SIZE = 2


# ---------------------------------------------------------------------------
# Tagging
# ---------------------------------------------------------------------------
def tag_record(source: Source, record: AreaRecord) -> dict[str, Any]:
    """Copy a record, adding the ``source`` discriminator and a canonical ``id``.

    The source's native identifier field (``kod`` for Natura 2000) is renamed
    to ``id``. Key order: source, id, then the remaining fields.
    """
    fields = dict(record)
    fields.pop("source", None)
    area_id = fields.pop(SOURCE_ID_FIELDS[source], None)
    return {"source": source.value, "id": area_id, **fields}


def _failure_message(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------
async def _invoke(
    source: Source, call: SourceCall[R], request: R
) -> tuple[dict[str, Any], ...]:
    # Synchronous raises and malformed records both fail inside the gathered task
    records = await call(request)
    return tuple(tag_record(source, r) for r in records)


async def settle_sources(
    request: R, applicable_sources: Mapping[Source, SourceCall[R]]
) -> list[SourceResult]:
    """Run every source call concurrently and wait for all of them to settle.

    Returns:
        One SourceSuccess or SourceFailure per source, in mapping order.
        Exceptions are captured per source; only non-Exception BaseExceptions
        (e.g. cancellation of the aggregate itself) propagate.
    """
    sources = list(applicable_sources)
    outcomes = await asyncio.gather(
        *(_invoke(s, applicable_sources[s], request) for s in sources),
        return_exceptions=True,
    )

    settled: list[SourceResult] = []
    for source, outcome in zip(sources, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            logger.warning(
                "Source %s failed: %s", source.value, _failure_message(outcome)
            )
            settled.append(
                SourceFailure(source=source, reason=_failure_message(outcome))
            )
        else:
            settled.append(
                SourceSuccess(source=source, records=outcome)
            )
    return settled


def merge_results(results: Sequence[SourceResult]) -> AggregatedResult:
    """Concatenate successful records and collect one error per failed source.

    Records of the same place under several sources are kept: overlapping
    protection regimes are legitimate.
    """
    areas: list[dict[str, Any]] = []
    counts: dict[Source, int] = {}
    errors: list[SourceError] = []

    for result in results:
        if isinstance(result, SourceSuccess):
            areas.extend(result.records)
            counts[result.source] = len(result.records)
        else:
            counts[result.source] = 0
            errors.append(SourceError(source=result.source, message=result.reason))

    return AggregatedResult(
        areas=tuple(areas),
        counts=counts,
        total_count=len(areas),
        errors=tuple(errors),
    )


async def aggregate(
    request: R, applicable_sources: Mapping[Source, SourceCall[R]]
) -> AggregatedResult:
    """Issue ``request`` to every applicable source and merge the outcomes.

    Never raises because of a source failure: failures become entries in
    ``AggregatedResult.errors``.

    Example:
        >>> result = await aggregate(query, {
        ...     Source.NATIONAL: national.list_areas,
        ...     Source.N2000: n2000.list_areas,
        ... })
        >>> result.total_count, [e.source for e in result.errors]
    """
    return merge_results(await settle_sources(request, applicable_sources))


# ---------------------------------------------------------------------------
# Single-source helpers
# ---------------------------------------------------------------------------
async def _from_upstream(source: Source, awaitable: Awaitable[T]) -> T:
    """Await a collaborator call, re-typing generic failures as UpstreamError."""
    try:
        return await awaitable
    except DomainError:
        raise
    except Exception as exc:
        raise UpstreamError(
            f"{source.value} request failed: {_failure_message(exc)}",
            status=0,
            origin=source.value,
        ) from exc


def _coerce_source(source: Source | str) -> Source:
    try:
        return Source(source)
    except ValueError:
        raise ValidationError(
            f"Unknown source '{source}'. Use one of: "
            + ", ".join(s.value for s in Source),
            field="source",
            values=source,
        ) from None


def _validate_limit(limit: int) -> None:
    if not (1 <= limit <= MAX_LIMIT):
        raise ValidationError(
            f"limit must be between 1 and {MAX_LIMIT}, got {limit}",
            field="limit",
            values=limit,
        )


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
async def search_areas(
    repositories: Mapping[Source, ProtectedAreaRepository], query: SearchQuery
) -> AggregatedResult:
    """Search every registry by municipality / county code.

    Raises:
        ValidationError: before any I/O if the query lacks kommun and lan, or
            the limit is out of range
    """
    query.validate_for_search()

    result = await aggregate(
        query, {source: repo.list_areas for source, repo in repositories.items()}
    )
    logger.info(
        "Search kommun=%s lan=%s: %d areas, %d source errors",
        query.kommun,
        query.lan,
        result.total_count,
        len(result.errors),
    )
    return result


def _bbox_caller(
    repository: BboxSearchRepository, limit: int
) -> SourceCall[ProjectedBbox]:
    async def call(bbox: ProjectedBbox) -> Sequence[AreaRecord]:
        return await repository.search_bbox(bbox, limit)

    return call


async def search_areas_by_bbox(
    bbox_repositories: Mapping[Source, BboxSearchRepository],
    bbox: Wgs84Bbox,
    limit: int = DEFAULT_LIMIT,
) -> AggregatedResult:
    """Search the registries that have a geographic query endpoint.

    Only national and Natura 2000 expose WFS; Ramsar is never part of this
    fan-out.

    Raises:
        ValidationError: before any I/O if the box is outside the national
            envelope, degenerate, or the limit is out of range
    """
    _validate_limit(limit)
    projected = bbox_to_projected(bbox)

    result = await aggregate(
        projected,
        {
            source: _bbox_caller(repo, limit)
            for source, repo in bbox_repositories.items()
        },
    )
    logger.info(
        "Bbox search (%.4f,%.4f)-(%.4f,%.4f): %d areas, %d source errors",
        bbox.min_lat,
        bbox.min_lon,
        bbox.max_lat,
        bbox.max_lon,
        result.total_count,
        len(result.errors),
    )
    return result


# ---------------------------------------------------------------------------
# Detail
# ---------------------------------------------------------------------------
def validate_include_for_source(include: DetailInclude, source: Source) -> None:
    """Reject sections the source does not publish.

    Raises:
        ValidationError: (field="include") naming the sections that are
            available for ``source``
    """
    available = SOURCE_SECTIONS[source]
    if include is DetailInclude.ALL or include in available:
        return

    options = ", ".join([s.value for s in available] + [DetailInclude.ALL.value])
    if include in SOURCE_SECTIONS[Source.NATIONAL] and include not in SOURCE_SECTIONS[Source.N2000]:
        scope = "only available for national areas"
    elif include in SOURCE_SECTIONS[Source.N2000] and include not in SOURCE_SECTIONS[Source.NATIONAL]:
        scope = "only available for Natura 2000 areas"
    else:
        scope = f"not available for {source.value} areas"
    raise ValidationError(
        f"'{include.value}' is {scope}. For {source.value} areas use: {options}",
        field="include",
        values={"include": include.value, "source": source.value},
    )


async def _fetch_section(
    repository: ProtectedAreaRepository,
    area_id: str,
    section: DetailInclude,
    tolerance: float,
) -> Any:
    source = repository.source
    if section is DetailInclude.GEOMETRY:
        wkt = await _from_upstream(source, repository.get_area_wkt(area_id))
        return simplify(wkt, tolerance)
    return await _from_upstream(source, repository.get_section(area_id, section.value))


async def area_detail(
    repositories: Mapping[Source, ProtectedAreaRepository],
    area_id: str,
    source: Source | str,
    include: DetailInclude | str = DetailInclude.ALL,
    tolerance: float = DEFAULT_TOLERANCE,
) -> dict[str, Any]:
    """Fetch one area's summary plus the requested detail sections.

    Geometry is simplified before it is returned. Upstream failures propagate
    (as UpstreamError) since there is no partial answer worth returning.

    Raises:
        ValidationError: unknown source/include, or include not offered by
            the source; raised before any I/O
        UpstreamError: the registry call failed
    """
    source = _coerce_source(source)
    try:
        include = DetailInclude(include)
    except ValueError:
        raise ValidationError(
            f"Unknown include '{include}'. Use one of: "
            + ", ".join(i.value for i in DetailInclude),
            field="include",
            values=include,
        ) from None
    validate_include_for_source(include, source)
    if not math.isfinite(tolerance) or tolerance < 0:
        raise ValidationError(
            f"tolerance must be a non-negative number, got {tolerance}",
            field="tolerance",
            values=tolerance,
        )

    repository = repositories[source]
    summary = await _from_upstream(source, repository.get_area(area_id))

    detail = tag_record(source, summary)
    if detail["id"] is None:
        detail["id"] = area_id
    detail["coordinate_system"] = OUTPUT_CRS_LABEL

    sections = SOURCE_SECTIONS[source] if include is DetailInclude.ALL else (include,)
    for start in range(0, len(sections), DETAIL_BATCH_SIZE):
        batch = sections[start : start + DETAIL_BATCH_SIZE]
        values = await asyncio.gather(
            *(_fetch_section(repository, area_id, s, tolerance) for s in batch)
        )
        for section, value in zip(batch, values):
            detail[section.value] = value

    logger.debug(
        "Detail %s/%s: sections=%s", source.value, area_id, [s.value for s in sections]
    )
    return detail


# ---------------------------------------------------------------------------
# Extent
# ---------------------------------------------------------------------------
async def combined_extent(
    repositories: Mapping[Source, ProtectedAreaRepository],
    ids_by_source: Mapping[Source, Sequence[str]],
) -> ExtentResult:
    """Bounding box covering the given areas across all sources.

    Each source with ids is asked for its own extent (concurrently). A single
    source's WKT is returned unchanged; several are merged client-side via
    the bounding-box engine.

    Raises:
        ValidationError: (field="ids") if no ids, or more than MAX_EXTENT_IDS
        UpstreamError: a registry call failed
    """
    ids = {
        _coerce_source(source): tuple(area_ids)
        for source, area_ids in ids_by_source.items()
        if area_ids
    }
    total = sum(len(area_ids) for area_ids in ids.values())

    if total == 0:
        raise ValidationError(
            "At least one ID list must be non-empty: "
            + ", ".join(f"{s.value}_ids" for s in Source),
            field="ids",
            values=0,
        )
    if total > MAX_EXTENT_IDS:
        raise ValidationError(
            f"Too many IDs ({total}). Maximum {MAX_EXTENT_IDS} total IDs across all sources.",
            field="ids",
            values=total,
        )

    wkts = await asyncio.gather(
        *(
            _from_upstream(source, repositories[source].get_areas_extent(area_ids))
            for source, area_ids in ids.items()
        )
    )

    if len(wkts) == 1:
        extent = wkts[0]
    else:
        combined = combine_bounding_boxes(extract_bounding_box(w) for w in wkts)
        extent = bounding_box_to_wkt(combined)
        logger.info("Combined extent of %d sources (%d areas)", len(wkts), total)

    return ExtentResult(
        ids=ids,
        total_areas=total,
        extent=extent,
        coordinate_system=OUTPUT_CRS_LABEL,
    )
