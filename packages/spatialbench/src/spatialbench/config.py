"""Configuration loading for spatialbench.

This module provides:
- SpiderConfigFile: YAML file with optional ``trip``, ``building`` and ``zone``
  sections (a full SpiderConfig or the name of a preset)
- load_spider_configs: resolve the effective Spider config per spatial table
- GenerationSettings: runtime settings from SPATIALBENCH_* environment variables

Resolution order for Spider configs:
    1. Explicit path (CLI --config or API argument)
    2. ./spatialbench.yaml in the working directory
    3. Built-in defaults

Tables a file does not mention keep their built-in default.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from spatialbench.cardinality import DEFAULT_FIXED_ZONE_COUNT
from spatialbench.errors import ConfigurationError
from spatialbench.spider.config import SpiderConfig
from spatialbench.spider.defaults import PRESETS, default_configs

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_FILENAME = "spatialbench.yaml"


class SpiderConfigFile(BaseModel):
    """Spider overrides read from a YAML file.

    Each section is either a full Spider config mapping or a preset name.

    Example:
        >>> config_file = SpiderConfigFile.from_yaml("spatialbench.yaml")
        >>> config_file.trip.dist_type
        <DistributionType.NORMAL: 'normal'>

    Example YAML::

        trip:
          dist_type: normal
          geom_type: point
          seed: 42
          affine: [360, 0, -180, 0, 180, -90]
          params: {type: normal, mu: 0.5, sigma: 0.1}
        building: building-box
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    trip: SpiderConfig | None = Field(
        default=None,
        description="Spider config for trip pickup points",
    )
    building: SpiderConfig | None = Field(
        default=None,
        description="Spider config for building footprints",
    )
    zone: SpiderConfig | None = Field(
        default=None,
        description="Spider config for zone boundaries",
    )

    @field_validator("trip", "building", "zone", mode="before")
    @classmethod
    def resolve_preset(cls, value: Any) -> Any:
        """Replace a preset name with the preset's config."""
        if isinstance(value, str):
            try:
                return PRESETS[value]
            except KeyError:
                available = ", ".join(sorted(PRESETS))
                raise ValueError(f"Unknown preset '{value}'. Available: {available}") from None
        return value

    @classmethod
    def from_yaml(cls, path: str | Path) -> SpiderConfigFile:
        """Load a Spider config file.

        Args:
            path: Path to the YAML file.

        Returns:
            Validated SpiderConfigFile.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If YAML syntax is invalid.
            pydantic.ValidationError: If the content is invalid.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        with path.open() as f:
            data: dict[str, Any] | None = yaml.safe_load(f)

        return cls.model_validate(data or {})

    def overrides(self) -> dict[str, SpiderConfig]:
        """Sections present in the file, keyed by table name."""
        return {
            name: config
            for name, config in (
                ("trip", self.trip),
                ("building", self.building),
                ("zone", self.zone),
            )
            if config is not None
        }


def resolve_config_path(path: str | Path | None = None, cwd: Path | None = None) -> Path | None:
    """Return the config file to use, or None for built-in defaults.

    Raises:
        ConfigurationError: If an explicit path does not exist.
    """
    if path is not None:
        explicit = Path(path)
        if not explicit.exists():
            raise ConfigurationError("Config file not found", file_path=str(explicit))
        return explicit
    local = (cwd or Path.cwd()) / DEFAULT_CONFIG_FILENAME
    return local if local.exists() else None


def _field_path(loc: tuple[int | str, ...]) -> str:
    return ".".join(str(part) for part in loc)


def load_spider_configs(
    path: str | Path | None = None,
    cwd: Path | None = None,
) -> dict[str, SpiderConfig]:
    """Resolve the effective Spider config of every spatial table.

    Args:
        path: Explicit config file (optional).
        cwd: Directory searched for ``spatialbench.yaml`` (defaults to the
            working directory).

    Returns:
        Mapping of table name (trip, building, zone) to SpiderConfig.

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid.
    """
    configs = default_configs()
    config_path = resolve_config_path(path, cwd)
    if config_path is None:
        logger.debug("spider_config_defaults")
        return configs

    file_path = str(config_path)
    try:
        config_file = SpiderConfigFile.from_yaml(config_path)
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        raise ConfigurationError(
            "Invalid YAML",
            file_path=file_path,
            line_number=mark.line + 1 if mark is not None else None,
            internal_details=str(exc),
        ) from exc
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        raise ConfigurationError(
            f"Invalid Spider config: {first['msg']}",
            file_path=file_path,
            field_path=_field_path(first["loc"]) or None,
            internal_details=str(exc),
        ) from exc
    except OSError as exc:
        raise ConfigurationError(
            "Cannot read config file",
            file_path=file_path,
            internal_details=str(exc),
        ) from exc

    overrides = config_file.overrides()
    logger.info("spider_config_loaded", path=file_path, tables=sorted(overrides))
    configs.update(overrides)
    return configs


def spider_config_from_dict(data: dict[str, Any], field_path: str | None = None) -> SpiderConfig:
    """Validate a Spider config mapping.

    Raises:
        ConfigurationError: If the mapping is invalid.
    """
    try:
        return SpiderConfig.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        loc = _field_path(first["loc"])
        raise ConfigurationError(
            f"Invalid Spider config: {first['msg']}",
            field_path=".".join(part for part in (field_path, loc) if part) or None,
            internal_details=str(exc),
        ) from exc


class GenerationSettings(BaseSettings):
    """Runtime settings for table generation.

    Loaded from environment variables with the SPATIALBENCH_ prefix; CLI
    options take precedence.

    Example:
        >>> # SPATIALBENCH_NUM_THREADS=8 SPATIALBENCH_LOG_FORMAT=json
        >>> settings = GenerationSettings()
        >>> settings.num_threads
        8
    """

    model_config = SettingsConfigDict(
        env_prefix="SPATIALBENCH_",
        env_file=".env",
        extra="ignore",
    )

    num_threads: int = Field(
        default_factory=lambda: os.cpu_count() or 1,
        ge=1,
        description="Worker threads per pipeline",
    )
    batch_size: int = Field(
        default=4096,
        ge=1,
        description="Rows per claimed batch",
    )
    log_level: str = Field(
        default="WARNING",
        description="Minimum log level",
    )
    log_format: Literal["console", "json"] = Field(
        default="console",
        description="Log renderer",
    )
    zone_policy: Literal["tiered", "fixed"] = Field(
        default="tiered",
        description="Zone cardinality policy",
    )
    fixed_zone_count: int = Field(
        default=DEFAULT_FIXED_ZONE_COUNT,
        ge=1,
        description="Zone rows under the fixed policy",
    )
    parquet_compression: str = Field(
        default="snappy",
        description="Parquet codec, optionally with a level, e.g. zstd(3)",
    )
    config_file: Path | None = Field(
        default=None,
        description="Spider config file",
    )
