"""Protected Areas Bounded Context.

Responsible for combining the three registries into one view:
- Value Objects: Source, SearchQuery, SourceResult, AggregatedResult
- Ports: ProtectedAreaRepository, BboxSearchRepository
- Services: aggregate, search_areas, search_areas_by_bbox, area_detail,
  combined_extent
"""
