"""Built-in Spider configurations.

Default configs are used for any table a config file does not override.
Presets are named alternatives selectable from the CLI or API.
"""

from __future__ import annotations

from spatialbench.spider.config import (
    AffineMatrix,
    BitParams,
    DiagonalParams,
    DistributionType,
    GeometryType,
    NoParams,
    NormalParams,
    SpiderConfig,
)

FULL_WORLD_AFFINE: AffineMatrix = (360.0, 0.0, -180.0, 0.0, 180.0, -90.0)
"""Maps the unit square onto longitude [-180, 180] and latitude [-90, 90]."""

CONTINENT_AFFINES: dict[str, AffineMatrix] = {
    "africa": (84.194319, 0.0, -20.062752, 0.0, -77.623846, 37.579421),
    "europe": (76.108853, 0.0, -11.964479, 0.0, 33.901968, 37.926872),
    "south_asia": (80.942556, 0.0, 64.583540, 0.0, -61.381606, 51.672557),
    "north_asia": (114.339049, 0.0, 64.495655, 0.0, 25.952988, 51.944267),
    "oceania": (68.287041, 0.0, 112.481901, 0.0, -38.751779, -10.228433),
    "south_america": (49.92948, 0.0, -83.833822, 0.0, -68.381204, 12.211188),
    "south_north_america": (55.379532, 0.0, -124.890724, 0.0, -30.170149, 42.55308),
    "north_north_america": (114.424763, 0.0, -166.478008, 0.0, -29.9779543, 72.659041),
}
"""Continental bounding boxes; rows are spread across them by spherical area."""


def default_trip_config() -> SpiderConfig:
    """Trip pickup points: clustered bit distribution over the continents."""
    return SpiderConfig(
        dist_type=DistributionType.BIT,
        geom_type=GeometryType.POINT,
        seed=56789,
        continent_affines=CONTINENT_AFFINES,
        params=BitParams(probability=0.35, digits=30),
    )


def default_building_config() -> SpiderConfig:
    """Building footprints: small Sierpinski-placed polygons over the continents."""
    return SpiderConfig(
        dist_type=DistributionType.SIERPINSKI,
        geom_type=GeometryType.POLYGON,
        seed=12345,
        continent_affines=CONTINENT_AFFINES,
        maxseg=5,
        polysize=0.000039,
        params=NoParams(),
    )


def default_zone_config() -> SpiderConfig:
    """Zone boundaries: uniform polygons over the continents.

    ``polysize`` is the size of the smallest subtype; larger subtypes scale it.
    """
    return SpiderConfig(
        dist_type=DistributionType.UNIFORM,
        geom_type=GeometryType.POLYGON,
        seed=24680,
        continent_affines=CONTINENT_AFFINES,
        maxseg=8,
        polysize=0.0005,
        params=NoParams(),
    )


def default_configs() -> dict[str, SpiderConfig]:
    """Default Spider config per spatial table."""
    return {
        "trip": default_trip_config(),
        "building": default_building_config(),
        "zone": default_zone_config(),
    }


def _trip_preset(
    dist_type: DistributionType,
    params: NoParams | NormalParams | DiagonalParams | BitParams,
) -> SpiderConfig:
    return SpiderConfig(
        dist_type=dist_type,
        geom_type=GeometryType.POINT,
        seed=42,
        affine=FULL_WORLD_AFFINE,
        params=params,
    )


PRESETS: dict[str, SpiderConfig] = {
    "trip-uniform": _trip_preset(DistributionType.UNIFORM, NoParams()),
    "trip-diagonal": _trip_preset(
        DistributionType.DIAGONAL, DiagonalParams(percentage=0.5, buffer=0.5)
    ),
    "trip-sierpinski": _trip_preset(DistributionType.SIERPINSKI, NoParams()),
    "trip-bit": _trip_preset(DistributionType.BIT, BitParams(probability=0.2, digits=10)),
    "trip-normal": _trip_preset(DistributionType.NORMAL, NormalParams(mu=0.5, sigma=0.1)),
    "building-box": SpiderConfig(
        dist_type=DistributionType.BIT,
        geom_type=GeometryType.BOX,
        seed=12345,
        affine=FULL_WORLD_AFFINE,
        width=0.00005,
        height=0.0001,
        params=BitParams(probability=0.5, digits=20),
    ),
}
"""Named configurations; ``trip-*`` apply to trip, ``building-*`` to building."""
