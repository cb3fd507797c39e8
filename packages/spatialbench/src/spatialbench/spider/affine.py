"""Affine mapping from the unit square to real-world coordinates.

A matrix ``(a, b, c, d, e, f)`` maps ``(x, y)`` to
``(a*x + b*y + c, d*x + e*y + f)``. Configs either carry one matrix or a
set of named regions; with regions, each row picks one region with
probability proportional to the spherical area of its bounding box.
"""

from __future__ import annotations

import math

from spatialbench.distributions import WeightedChoice
from spatialbench.spider import prf
from spatialbench.spider.config import AffineMatrix, SpiderConfig

IDENTITY: AffineMatrix = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)

# Draw index used for region selection, disjoint from sampler and builder streams.
REGION_STREAM = 0x5245_4749

_DEG2RAD = math.pi / 180.0


def apply_affine(x: float, y: float, matrix: AffineMatrix) -> tuple[float, float]:
    """Map a unit-square coordinate through ``matrix``."""
    a, b, c, d, e, f = matrix
    return a * x + b * y + c, d * x + e * y + f


def affine_bbox(matrix: AffineMatrix) -> tuple[float, float, float, float]:
    """Return ``(west, east, south, north)`` of the image of the unit square."""
    corners = [apply_affine(x, y, matrix) for x, y in ((0, 0), (1, 0), (0, 1), (1, 1))]
    xs = [cx for cx, _ in corners]
    ys = [cy for _, cy in corners]
    return min(xs), max(xs), min(ys), max(ys)


def spherical_bbox_weight(west: float, east: float, south: float, north: float) -> float:
    """Area of a lon/lat bounding box on the unit sphere.

    Degrees in, steradians out. Inverted latitude bands weigh zero.
    """
    width = abs(east - west) * _DEG2RAD
    band = max(math.sin(north * _DEG2RAD) - math.sin(south * _DEG2RAD), 0.0)
    return max(width * band, 0.0)


class AffineMapper:
    """Resolve and apply the affine matrix for each row of a Spider config.

    Example:
        >>> mapper = AffineMapper.from_config(config)
        >>> matrix = mapper.matrix_for(ordinal=17)
        >>> apply_affine(0.5, 0.5, matrix)
    """

    def __init__(
        self,
        matrix: AffineMatrix | None = None,
        regions: dict[str, AffineMatrix] | None = None,
        seed: int = 0,
    ) -> None:
        self.seed = seed
        self.matrix = matrix if matrix is not None else IDENTITY
        self.regions: WeightedChoice[str] | None = None
        self._region_matrices: dict[str, AffineMatrix] = dict(regions or {})
        if regions:
            weights = {
                name: spherical_bbox_weight(*affine_bbox(m)) for name, m in regions.items()
            }
            self.regions = WeightedChoice(weights)

    @classmethod
    def from_config(cls, config: SpiderConfig) -> AffineMapper:
        """Build a mapper from a validated Spider config."""
        return cls(
            matrix=config.affine,
            regions=config.continent_affines,
            seed=config.seed,
        )

    def region_for(self, ordinal: int) -> str | None:
        """Name of the region row ``ordinal`` falls into, or None for a single matrix."""
        if self.regions is None:
            return None
        return self.regions.choose(prf.unit(self.seed, ordinal, REGION_STREAM))

    def matrix_for(self, ordinal: int) -> AffineMatrix:
        """Affine matrix applied to row ``ordinal``."""
        region = self.region_for(ordinal)
        if region is None:
            return self.matrix
        return self._region_matrices[region]

    def apply(self, x: float, y: float, ordinal: int) -> tuple[float, float]:
        return apply_affine(x, y, self.matrix_for(ordinal))
