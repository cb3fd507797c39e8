"""Spider: deterministic spatial geometry sampling.

Key Components:
- config: SpiderConfig and distribution parameter models
- prf: counter-based pseudo-random function keyed by (seed, ordinal, stream)
- sampler: unit-square coordinate distributions
- affine: affine mapping and weighted region selection
- geometry: Point/Box/Polygon values and the geometry builder
- generator: SpiderGenerator composing all of the above
- defaults: built-in table configs and named presets

Example:
    >>> from spatialbench.spider import SpiderGenerator, default_trip_config
    >>> generator = SpiderGenerator(default_trip_config())
    >>> generator.generate(0)
"""

from __future__ import annotations

from spatialbench.spider.affine import AffineMapper, apply_affine
from spatialbench.spider.config import (
    BitParams,
    DiagonalParams,
    DistributionType,
    GeometryType,
    NoParams,
    NormalParams,
    ParcelParams,
    SpiderConfig,
)
from spatialbench.spider.defaults import (
    CONTINENT_AFFINES,
    FULL_WORLD_AFFINE,
    PRESETS,
    default_building_config,
    default_configs,
    default_trip_config,
    default_zone_config,
)
from spatialbench.spider.generator import SpiderGenerator
from spatialbench.spider.geometry import Box, GeneratedGeometry, Point, Polygon
from spatialbench.spider.sampler import CoordinateSampler, sample

__all__ = [
    "AffineMapper",
    "BitParams",
    "Box",
    "CONTINENT_AFFINES",
    "CoordinateSampler",
    "DiagonalParams",
    "DistributionType",
    "FULL_WORLD_AFFINE",
    "GeneratedGeometry",
    "GeometryType",
    "NoParams",
    "NormalParams",
    "PRESETS",
    "ParcelParams",
    "Point",
    "Polygon",
    "SpiderConfig",
    "SpiderGenerator",
    "apply_affine",
    "default_building_config",
    "default_configs",
    "default_trip_config",
    "default_zone_config",
    "sample",
]
