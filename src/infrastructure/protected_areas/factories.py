"""Factories that wire the registry adapters from Settings."""

from __future__ import annotations

from domain.protected_areas.value_objects import Source
from infrastructure.http import HttpClient
from infrastructure.settings import Settings

from .registry_adapter import (
    N2000AreaAdapter,
    NationalAreaAdapter,
    RamsarAreaAdapter,
    RegistryAdapter,
)
from .wfs_adapter import WfsBboxAdapter


def build_repositories(settings: Settings | None = None) -> dict[Source, RegistryAdapter]:
    """One REST adapter per registry, keyed by source (search fan-out order)."""
    settings = settings or Settings()
    timeout = settings.timeout_seconds
    return {
        Source.NATIONAL: NationalAreaAdapter(
            HttpClient(settings.national_base_url, timeout=timeout)
        ),
        Source.N2000: N2000AreaAdapter(HttpClient(settings.n2000_base_url, timeout=timeout)),
        Source.RAMSAR: RamsarAreaAdapter(HttpClient(settings.ramsar_base_url, timeout=timeout)),
    }


def build_bbox_repositories(settings: Settings | None = None) -> dict[Source, WfsBboxAdapter]:
    """WFS adapters for the registries that support bounding-box search."""
    settings = settings or Settings()
    timeout = settings.timeout_seconds
    return {
        Source.NATIONAL: WfsBboxAdapter(
            HttpClient(settings.national_wfs_url, timeout=timeout), Source.NATIONAL
        ),
        Source.N2000: WfsBboxAdapter(
            HttpClient(settings.n2000_wfs_url, timeout=timeout), Source.N2000
        ),
    }
