"""Infrastructure adapters for the protected_areas bounded context.

Provides REST and WFS clients for the three registries and factories that
wire them from Settings.
"""

from __future__ import annotations

from .atlas import ProtectedAreaAtlas
from .factories import build_bbox_repositories, build_repositories
from .registry_adapter import (
    N2000AreaAdapter,
    NationalAreaAdapter,
    RamsarAreaAdapter,
    RegistryAdapter,
)
from .wfs_adapter import WfsBboxAdapter

__all__ = [
    "N2000AreaAdapter",
    "NationalAreaAdapter",
    "ProtectedAreaAtlas",
    "RamsarAreaAdapter",
    "RegistryAdapter",
    "WfsBboxAdapter",
    "build_bbox_repositories",
    "build_repositories",
]
