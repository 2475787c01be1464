"""Coordinate reference system table.

Process-wide, immutable definitions for the two coordinate systems this
project works in. Nothing here is ever mutated after import.

- SWEREF99 TM (EPSG:3006): national projected CRS, easting/northing in metres
- WGS84 (EPSG:4326): geographic latitude/longitude in degrees
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, Mapping

CRS_SWEREF99TM: Final[str] = "EPSG:3006"
CRS_WGS84: Final[str] = "EPSG:4326"

# Official Lantmäteriet definition (UTM zone 33 on GRS80)
SWEREF99TM_PROJ4: Final[str] = (
    "+proj=utm +zone=33 +ellps=GRS80 +towgs84=0,0,0,0,0,0,0 +units=m +no_defs +type=crs"
)

# Rectangle approximating Swedish territory. Includes some area outside the
# border; corners may clip a few valid edge points.
WGS84_ENVELOPE: Final[Mapping[str, float]] = MappingProxyType(
    {
        "min_lat": 55.0,
        "max_lat": 69.0,
        "min_lon": 11.0,
        "max_lon": 24.0,
    }
)

# Label attached to every geometry returned to callers
OUTPUT_CRS_LABEL: Final[str] = "EPSG:4326 (WGS84)"
