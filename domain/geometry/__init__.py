"""Geometry Bounded Context.

Responsible for coordinate and shape handling:
- Value Objects: ProjectedPoint, Wgs84Point, ProjectedBbox, Wgs84Bbox, BoundingBox
- Services: coordinate transform, WKT codec, polygon simplifier, extent engine
"""
