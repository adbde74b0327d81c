"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (FACILITYDIR__CACHE__FRESHNESS_MINUTES=10)
  2. facilitydir.yaml       (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional — all fields have sensible defaults.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("facilitydir")


def _find_config_file() -> str | None:
    """Return the path of the first facilitydir.yaml found, or None."""
    candidates = [
        Path("facilitydir.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "facilitydir.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class SourceSettings(BaseModel):
    url: str = "https://dekontaminasi.com/api/id/covid19/hospitals"
    timeout_seconds: float = Field(default=30.0, gt=0)


class CacheSettings(BaseModel):
    freshness_minutes: float = Field(default=5.0, ge=0)

    @property
    def freshness_window(self) -> timedelta:
        return timedelta(minutes=self.freshness_minutes)


class PaginationSettings(BaseModel):
    initial_page_size: int = Field(default=10, ge=1)
    page_size: int = Field(default=20, ge=1)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: FACILITYDIR__PAGINATION__PAGE_SIZE=50
        env_prefix="FACILITYDIR__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    source: SourceSettings = SourceSettings()
    cache: CacheSettings = CacheSettings()
    pagination: PaginationSettings = PaginationSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
