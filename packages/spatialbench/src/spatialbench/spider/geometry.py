"""Geometry values and the geometry builder.

Generated geometries are small immutable values (Point, Box, Polygon) that
convert to shapely objects for WKT/WKB encoding. ``build_geometry`` turns a
unit-square center into the configured shape, maps it through an affine
matrix and rounds coordinates to ``COORDINATE_DECIMALS`` places.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Union

import shapely

from spatialbench.errors import GenerationError
from spatialbench.spider import prf
from spatialbench.spider.affine import apply_affine
from spatialbench.spider.config import AffineMatrix, GeometryType, SpiderConfig
from spatialbench.spider.sampler import SAMPLER_STREAM_LIMIT

COORDINATE_DECIMALS = 8

POLYGON_ATTEMPTS = 3
"""Random vertex layouts tried before falling back to evenly spaced angles."""

_BOX_SIZE_STREAM = SAMPLER_STREAM_LIMIT
_POLYGON_STREAM_BASE = SAMPLER_STREAM_LIMIT + 16
_POLYGON_ATTEMPT_STRIDE = 1 << 12


@dataclass(frozen=True, slots=True)
class Point:
    """A single coordinate."""

    geom_type: ClassVar[GeometryType] = GeometryType.POINT

    x: float
    y: float

    def to_shapely(self) -> shapely.Point:
        return shapely.Point(self.x, self.y)


@dataclass(frozen=True, slots=True)
class Box:
    """Axis-aligned box with strictly positive extent on both axes."""

    geom_type: ClassVar[GeometryType] = GeometryType.BOX

    minx: float
    miny: float
    maxx: float
    maxy: float

    def __post_init__(self) -> None:
        if not (self.minx < self.maxx and self.miny < self.maxy):
            raise ValueError(f"Degenerate box {self!r}")

    @property
    def ring(self) -> tuple[tuple[float, float], ...]:
        """Closed counter-clockwise ring of the box corners."""
        return (
            (self.minx, self.miny),
            (self.maxx, self.miny),
            (self.maxx, self.maxy),
            (self.minx, self.maxy),
            (self.minx, self.miny),
        )

    def to_shapely(self) -> shapely.Polygon:
        return shapely.Polygon(self.ring)


@dataclass(frozen=True, slots=True)
class Polygon:
    """Simple polygon; ``ring`` is closed (first vertex repeated at the end)."""

    geom_type: ClassVar[GeometryType] = GeometryType.POLYGON

    ring: tuple[tuple[float, float], ...]

    @property
    def vertices(self) -> tuple[tuple[float, float], ...]:
        """Distinct vertices, without the closing repeat."""
        return self.ring[:-1]

    def to_shapely(self) -> shapely.Polygon:
        return shapely.Polygon(self.ring)


GeneratedGeometry = Union[Point, Box, Polygon]


def to_wkt(geometries: Sequence[GeneratedGeometry]) -> list[str]:
    """Encode geometries as WKT with full coordinate precision."""
    if not geometries:
        return []
    shapes = [geometry.to_shapely() for geometry in geometries]
    return list(shapely.to_wkt(shapes, rounding_precision=-1))


def to_wkb(geometries: Sequence[GeneratedGeometry]) -> list[bytes]:
    """Encode geometries as little-endian 2D WKB."""
    if not geometries:
        return []
    shapes = [geometry.to_shapely() for geometry in geometries]
    return list(shapely.to_wkb(shapes, output_dimension=2, byte_order=1))


def _round(value: float) -> float:
    return round(value, COORDINATE_DECIMALS)


def _clamp(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _map(x: float, y: float, matrix: AffineMatrix) -> tuple[float, float]:
    mx, my = apply_affine(x, y, matrix)
    return _round(mx), _round(my)


def _build_point(center: tuple[float, float], matrix: AffineMatrix) -> Point:
    return Point(*_map(center[0], center[1], matrix))


def _build_box(
    center: tuple[float, float],
    config: SpiderConfig,
    ordinal: int,
    matrix: AffineMatrix,
) -> Box:
    # Size factor in (0.5, 1] keeps both half extents strictly positive.
    scale = 1.0 - 0.5 * prf.unit(config.seed, ordinal, _BOX_SIZE_STREAM)
    half_w = config.width * scale / 2.0
    half_h = config.height * scale / 2.0
    cx, cy = center
    corners = [
        _map(cx + dx, cy + dy, matrix)
        for dx, dy in ((-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h))
    ]
    xs = [x for x, _ in corners]
    ys = [y for _, y in corners]
    minx, maxx, miny, maxy = min(xs), max(xs), min(ys), max(ys)
    if not (minx < maxx and miny < maxy):
        raise GenerationError(
            "Box collapsed to zero extent after rounding",
            ordinal=ordinal,
            internal_details=f"corners={corners} width={config.width} height={config.height}",
        )
    return Box(minx, miny, maxx, maxy)


def _vertex_count(config: SpiderConfig, ordinal: int, base: int) -> int:
    if config.maxseg <= 3:
        return 3
    return 3 + min(
        int(prf.unit(config.seed, ordinal, base) * (config.maxseg - 2)),
        config.maxseg - 3,
    )


def _normalize_ring(points: list[tuple[float, float]]) -> list[tuple[float, float]]:
    ring: list[tuple[float, float]] = []
    for point in points:
        if not ring or ring[-1] != point:
            ring.append(point)
    while len(ring) > 1 and ring[0] == ring[-1]:
        ring.pop()
    return ring


def _signed_area(ring: list[tuple[float, float]]) -> float:
    area = 0.0
    for (x1, y1), (x2, y2) in zip(ring, ring[1:] + ring[:1]):
        area += x1 * y2 - x2 * y1
    return area / 2.0


def _polygon_from_angles(
    center: tuple[float, float],
    matrix: AffineMatrix,
    angles: list[float],
    radii: list[float],
) -> list[tuple[float, float]]:
    cx, cy = center
    points = [
        _map(
            _clamp(cx + radius * math.cos(angle)),
            _clamp(cy + radius * math.sin(angle)),
            matrix,
        )
        for angle, radius in zip(angles, radii)
    ]
    return _normalize_ring(points)


def _build_polygon(
    center: tuple[float, float],
    config: SpiderConfig,
    ordinal: int,
    matrix: AffineMatrix,
) -> Polygon:
    seed = config.seed
    for attempt in range(POLYGON_ATTEMPTS):
        base = _POLYGON_STREAM_BASE + attempt * _POLYGON_ATTEMPT_STRIDE
        count = _vertex_count(config, ordinal, base)
        # One vertex per angular sector, jittered within its first half;
        # neighbouring vertices stay less than pi apart around the center.
        angles = [
            2.0 * math.pi * (k + 0.5 * prf.unit(seed, ordinal, base + 1 + 2 * k)) / count
            for k in range(count)
        ]
        radii = [
            config.polysize * (1.0 - 0.25 * prf.unit(seed, ordinal, base + 2 + 2 * k))
            for k in range(count)
        ]
        ring = _polygon_from_angles(center, matrix, angles, radii)
        if len(ring) >= 3 and _signed_area(ring) != 0.0:
            return Polygon(tuple(ring + ring[:1]))

    # Evenly spaced fallback
    count = _vertex_count(config, ordinal, _POLYGON_STREAM_BASE)
    ring = _polygon_from_angles(
        center,
        matrix,
        [2.0 * math.pi * k / count for k in range(count)],
        [config.polysize] * count,
    )
    if len(ring) >= 3 and _signed_area(ring) != 0.0:
        return Polygon(tuple(ring + ring[:1]))

    raise GenerationError(
        "Polygon has fewer than 3 distinct vertices",
        ordinal=ordinal,
        internal_details=f"center={center} polysize={config.polysize} ring={ring}",
    )


def build_geometry(
    config: SpiderConfig,
    center: tuple[float, float],
    ordinal: int,
    matrix: AffineMatrix,
) -> GeneratedGeometry:
    """Build the configured geometry around a unit-square center.

    Args:
        config: Validated Spider configuration (geometry type and shape parameters).
        center: Sampled center in ``[0, 1]^2``.
        ordinal: Zero-based row ordinal; keys the shape draws.
        matrix: Affine matrix for this row.

    Returns:
        Point, Box or Polygon in mapped coordinates.

    Raises:
        GenerationError: If a box or polygon degenerates after rounding.
    """
    if config.geom_type == GeometryType.POINT:
        return _build_point(center, matrix)
    if config.geom_type == GeometryType.BOX:
        return _build_box(center, config, ordinal, matrix)
    return _build_polygon(center, config, ordinal, matrix)
