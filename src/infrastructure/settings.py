"""Runtime configuration.

Loaded from environment variables (prefix ``NATURE_``) via pydantic-settings,
e.g. ``NATURE_TIMEOUT_SECONDS=10``. Defaults point at the public
Naturvårdsverket geodata services.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_GEODATA = "https://geodata.naturvardsverket.se"


class Settings(BaseSettings):
    national_base_url: str = f"{_GEODATA}/naturvardsregistret/rest/v3"
    n2000_base_url: str = f"{_GEODATA}/n2000/rest/v3"
    ramsar_base_url: str = f"{_GEODATA}/internationellakonventioner/rest/v3"

    national_wfs_url: str = f"{_GEODATA}/naturvardsregistret/wfs"
    n2000_wfs_url: str = f"{_GEODATA}/n2000/wfs"

    timeout_seconds: float = Field(default=30.0, gt=0)
    default_limit: int = Field(default=100, ge=1, le=500)
    simplify_tolerance: float = Field(default=0.001, ge=0)  # degrees, ~100 m

    model_config = SettingsConfigDict(env_prefix="NATURE_", env_nested_delimiter="__")
