"""Spider configuration models for spatialbench.

This module defines the configuration of the Spider geometry sampler:
- DistributionType: Coordinate distribution (uniform, normal, diagonal, bit, sierpinski)
- GeometryType: Output geometry (point, box, polygon)
- DistributionParams: Discriminated union of per-distribution parameters
- SpiderConfig: Complete, validated sampler configuration

Models are frozen and validated once, before any row is generated.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Discriminator, Field, model_validator
from typing_extensions import Self

MAX_SEED = (1 << 64) - 1
"""Seeds are unsigned 64-bit integers."""

AffineMatrix = tuple[float, float, float, float, float, float]
"""Affine coefficients ``(a, b, c, d, e, f)``: X = a*x + b*y + c, Y = d*x + e*y + f."""


class DistributionType(str, Enum):
    """Coordinate distribution used to place geometry centers."""

    UNIFORM = "uniform"
    NORMAL = "normal"
    DIAGONAL = "diagonal"
    BIT = "bit"
    SIERPINSKI = "sierpinski"
    PARCEL = "parcel"


class GeometryType(str, Enum):
    """Shape produced around each sampled center."""

    POINT = "point"
    BOX = "box"
    POLYGON = "polygon"


class NoParams(BaseModel):
    """Parameters for distributions that take none (uniform, sierpinski)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["none"] = Field(
        default="none",
        description="Params type discriminator",
    )


class NormalParams(BaseModel):
    """Gaussian distribution parameters (per axis, unit-square space).

    Example:
        >>> params = NormalParams(mu=0.5, sigma=0.1)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["normal"] = Field(
        default="normal",
        description="Params type discriminator",
    )
    mu: float = Field(
        default=0.5,
        description="Mean of both coordinates",
    )
    sigma: float = Field(
        default=0.1,
        gt=0,
        description="Standard deviation of both coordinates",
    )


class DiagonalParams(BaseModel):
    """Diagonal distribution parameters.

    Attributes:
        percentage: Fraction of points placed exactly on the diagonal.
        buffer: Maximum perpendicular offset for the remaining points.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["diagonal"] = Field(
        default="diagonal",
        description="Params type discriminator",
    )
    percentage: float = Field(
        default=0.5,
        ge=0,
        le=1,
        description="Fraction of points exactly on the diagonal",
    )
    buffer: float = Field(
        default=0.5,
        ge=0,
        description="Maximum perpendicular offset from the diagonal",
    )


class BitParams(BaseModel):
    """Bit (recursive quadrant) distribution parameters.

    Attributes:
        probability: Probability that an axis bit is set at each level.
        digits: Number of subdivision levels.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["bit"] = Field(
        default="bit",
        description="Params type discriminator",
    )
    probability: float = Field(
        default=0.2,
        ge=0,
        le=1,
        description="Probability that an axis bit is set at each level",
    )
    digits: int = Field(
        default=10,
        ge=1,
        le=52,
        description="Number of subdivision levels",
    )


class ParcelParams(BaseModel):
    """Parcel distribution parameters.

    Accepted by the schema so that config files written for other tools
    parse, but the parcel distribution itself is not implemented.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Literal["parcel"] = Field(
        default="parcel",
        description="Params type discriminator",
    )
    srange: float = Field(
        default=0.5,
        description="Split range",
    )
    dither: float = Field(
        default=0.5,
        description="Dither factor",
    )


DistributionParams = Annotated[
    NoParams | NormalParams | DiagonalParams | BitParams | ParcelParams,
    Discriminator("type"),
]
"""Distribution parameters, discriminated on the ``type`` field."""


_PARAMS_FOR_DISTRIBUTION: dict[DistributionType, str] = {
    DistributionType.UNIFORM: "none",
    DistributionType.SIERPINSKI: "none",
    DistributionType.NORMAL: "normal",
    DistributionType.DIAGONAL: "diagonal",
    DistributionType.BIT: "bit",
    DistributionType.PARCEL: "parcel",
}


def is_singular(matrix: AffineMatrix) -> bool:
    """Return True if the linear part of ``matrix`` is not invertible."""
    a, b, _, d, e, _ = matrix
    return a * e - b * d == 0


class SpiderConfig(BaseModel):
    """Configuration of the Spider geometry sampler for one table.

    Attributes:
        dist_type: Coordinate distribution.
        geom_type: Output geometry type.
        dim: Number of dimensions (only 2 is supported).
        seed: Seed keying every random draw.
        affine: Single affine mapping from the unit square (identity if None).
        continent_affines: Named affine regions chosen per row by area weight.
        width: Box width in unit-square space.
        height: Box height in unit-square space.
        maxseg: Maximum polygon vertex count.
        polysize: Polygon radius in unit-square space.
        params: Distribution parameters matching ``dist_type``.

    Example:
        >>> config = SpiderConfig(
        ...     dist_type="bit",
        ...     geom_type="point",
        ...     seed=42,
        ...     params={"type": "bit", "probability": 0.35, "digits": 30},
        ... )
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    dist_type: DistributionType = Field(
        default=DistributionType.UNIFORM,
        description="Coordinate distribution",
    )
    geom_type: GeometryType = Field(
        default=GeometryType.POINT,
        description="Output geometry type",
    )
    dim: int = Field(
        default=2,
        description="Number of dimensions (only 2 is supported)",
    )
    seed: int = Field(
        default=0,
        ge=0,
        le=MAX_SEED,
        description="Seed keying every random draw",
    )
    affine: AffineMatrix | None = Field(
        default=None,
        description="Affine coefficients [a, b, c, d, e, f] (identity if omitted)",
    )
    continent_affines: dict[str, AffineMatrix] | None = Field(
        default=None,
        description="Named affine regions, one chosen per row weighted by area",
    )
    width: float = Field(
        default=0.0,
        ge=0,
        description="Box width in unit-square space",
    )
    height: float = Field(
        default=0.0,
        ge=0,
        description="Box height in unit-square space",
    )
    maxseg: int = Field(
        default=0,
        ge=0,
        description="Maximum polygon vertex count",
    )
    polysize: float = Field(
        default=0.0,
        ge=0,
        description="Polygon radius in unit-square space",
    )
    params: DistributionParams = Field(
        default_factory=NoParams,
        description="Distribution parameters matching dist_type",
    )

    @model_validator(mode="before")
    @classmethod
    def default_params_for_distribution(cls, data: Any) -> Any:
        """Fill in default params for the distribution when omitted."""
        if isinstance(data, dict) and data.get("params") is None and "dist_type" in data:
            try:
                dist_type = DistributionType(data["dist_type"])
            except ValueError:
                return data
            data = {**data, "params": {"type": _PARAMS_FOR_DISTRIBUTION[dist_type]}}
        return data

    @model_validator(mode="after")
    def validate_consistency(self) -> Self:
        """Validate the config as a whole.

        Raises:
            ValueError: If params do not match dist_type, shape parameters are
                missing, dim is not 2, or an affine matrix is singular.
        """
        if self.dim != 2:
            raise ValueError(f"Only dim=2 is supported, got dim={self.dim}")

        if self.dist_type == DistributionType.PARCEL:
            raise ValueError("The parcel distribution is not implemented")

        expected = _PARAMS_FOR_DISTRIBUTION[self.dist_type]
        if self.params.type != expected:
            raise ValueError(
                f"dist_type '{self.dist_type.value}' requires params of type "
                f"'{expected}', got '{self.params.type}'"
            )

        if self.geom_type == GeometryType.BOX and (self.width <= 0 or self.height <= 0):
            raise ValueError("Box geometry requires positive width and height")
        if self.geom_type == GeometryType.POLYGON:
            if self.maxseg < 3:
                raise ValueError("Polygon geometry requires maxseg >= 3")
            if self.polysize <= 0:
                raise ValueError("Polygon geometry requires positive polysize")

        if self.affine is not None and self.continent_affines is not None:
            raise ValueError("affine and continent_affines are mutually exclusive")
        if self.affine is not None and is_singular(self.affine):
            raise ValueError("affine matrix is singular")
        if self.continent_affines is not None:
            if not self.continent_affines:
                raise ValueError("continent_affines must not be empty")
            for name, matrix in self.continent_affines.items():
                if is_singular(matrix):
                    raise ValueError(f"affine matrix for region '{name}' is singular")
        return self
