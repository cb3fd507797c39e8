"""Table cardinalities as a function of the scale factor.

This module provides:
- TableName: the six benchmark tables
- row_count: canonical row count per table and scale factor
- ZoneCardinalityPolicy: pluggable zone sizing (tiered or fixed)
- TableSpec: resolved cardinality of a table and the dimensions it references
"""

from __future__ import annotations

import bisect
import math
from enum import Enum
from typing import Protocol

from pydantic import BaseModel, ConfigDict, Field

from spatialbench.errors import ConfigurationError


class TableName(str, Enum):
    """Benchmark tables."""

    VEHICLE = "vehicle"
    DRIVER = "driver"
    CUSTOMER = "customer"
    TRIP = "trip"
    BUILDING = "building"
    ZONE = "zone"


# Rows per unit of scale factor
SCALE_BASE: dict[TableName, int] = {
    TableName.VEHICLE: 100,
    TableName.DRIVER: 500,
    TableName.CUSTOMER: 30_000,
    TableName.TRIP: 6_000_000,
}

BUILDING_SCALE_BASE = 20_000

# (subtype, row count) per tier, added once the scale factor reaches the threshold
ZONE_TIERS: tuple[tuple[float, tuple[tuple[str, int], ...]], ...] = (
    (0.0, (("microhood", 74_797), ("macrohood", 42_619))),
    (10.0, (("neighborhood", 298_615), ("county", 39_680))),
    (
        100.0,
        (("localadmin", 19_007), ("locality", 555_834), ("region", 4_714), ("dependency", 105)),
    ),
    (1000.0, (("country", 378),)),
)

DEFAULT_FIXED_ZONE_COUNT = 596_124


def validate_scale_factor(scale_factor: float) -> float:
    """Return ``scale_factor`` if it is a finite positive number.

    Raises:
        ConfigurationError: If the scale factor is zero, negative or not finite.
    """
    if not math.isfinite(scale_factor) or scale_factor <= 0:
        raise ConfigurationError(
            f"Scale factor must be a positive number, got {scale_factor}",
            field_path="scale_factor",
        )
    return scale_factor


class ZoneLayout(BaseModel):
    """Zone subtypes laid out as consecutive ordinal ranges.

    Attributes:
        subtypes: Subtype names in ordinal order.
        boundaries: Exclusive end ordinal of each subtype's range.
    """

    model_config = ConfigDict(frozen=True)

    subtypes: tuple[str, ...]
    boundaries: tuple[int, ...]

    @property
    def total(self) -> int:
        return self.boundaries[-1] if self.boundaries else 0

    def subtype_for(self, ordinal: int) -> str:
        """Subtype of zone row ``ordinal``."""
        index = bisect.bisect_right(self.boundaries, ordinal)
        return self.subtypes[min(index, len(self.subtypes) - 1)]

    @classmethod
    def from_counts(cls, counts: list[tuple[str, int]], total: int) -> ZoneLayout:
        """Scale ``counts`` so that they sum to ``total`` rows."""
        full = sum(count for _, count in counts)
        boundaries: list[int] = []
        acc = 0
        for _, count in counts:
            acc += count
            boundaries.append(math.ceil(acc * total / full))
        boundaries[-1] = total
        return cls(
            subtypes=tuple(name for name, _ in counts),
            boundaries=tuple(boundaries),
        )


class ZoneCardinalityPolicy(Protocol):
    """Decides how many zone rows a scale factor produces, and of which subtypes."""

    name: str

    def layout(self, scale_factor: float) -> ZoneLayout: ...


class TieredZoneCardinality:
    """Subtype set grows with the scale factor; proportional below SF 1."""

    name = "tiered"

    def subtypes(self, scale_factor: float) -> list[tuple[str, int]]:
        counts: list[tuple[str, int]] = []
        for threshold, tier in ZONE_TIERS:
            if scale_factor >= threshold:
                counts.extend(tier)
        return counts

    def layout(self, scale_factor: float) -> ZoneLayout:
        counts = self.subtypes(scale_factor)
        full = sum(count for _, count in counts)
        total = math.ceil(full * scale_factor) if scale_factor < 1.0 else full
        return ZoneLayout.from_counts(counts, max(total, 1))


class FixedZoneCardinality:
    """Same zone table at every scale factor."""

    name = "fixed"

    def __init__(self, count: int = DEFAULT_FIXED_ZONE_COUNT) -> None:
        if count < 1:
            raise ConfigurationError(
                f"Fixed zone count must be at least 1, got {count}",
                field_path="fixed_zone_count",
            )
        self.count = count

    def layout(self, scale_factor: float) -> ZoneLayout:
        counts = [entry for _, tier in ZONE_TIERS for entry in tier]
        return ZoneLayout.from_counts(counts, self.count)


def zone_policy(name: str, fixed_count: int = DEFAULT_FIXED_ZONE_COUNT) -> ZoneCardinalityPolicy:
    """Look up a zone cardinality policy by name.

    Raises:
        ConfigurationError: If the policy name is unknown.
    """
    if name == TieredZoneCardinality.name:
        return TieredZoneCardinality()
    if name == FixedZoneCardinality.name:
        return FixedZoneCardinality(fixed_count)
    raise ConfigurationError(
        f"Unknown zone policy '{name}'. Available: tiered, fixed",
        field_path="zone_policy",
    )


def row_count(
    table: TableName,
    scale_factor: float,
    policy: ZoneCardinalityPolicy | None = None,
) -> int:
    """Canonical row count of ``table`` at ``scale_factor``.

    Every table has at least one row.

    Args:
        table: Table to size.
        scale_factor: Positive scale factor.
        policy: Zone cardinality policy (tiered if omitted).

    Returns:
        Number of rows.
    """
    validate_scale_factor(scale_factor)
    if table == TableName.ZONE:
        return (policy or TieredZoneCardinality()).layout(scale_factor).total
    if table == TableName.BUILDING:
        rows = BUILDING_SCALE_BASE * (1.0 + math.log2(scale_factor))
    else:
        rows = SCALE_BASE[table] * scale_factor
    # floor, tolerant of products like 0.07 * 30_000 landing just below an integer
    return max(math.floor(rows + 1e-9), 1)


# Dimensions referenced by each table
REFERENCES: dict[TableName, tuple[TableName, ...]] = {
    TableName.TRIP: (TableName.CUSTOMER, TableName.DRIVER, TableName.VEHICLE),
}


class TableSpec(BaseModel):
    """Resolved cardinality of one table.

    Attributes:
        table: Table name.
        scale_factor: Scale factor the counts were computed for.
        row_count: Rows in this table.
        dimensions: Row counts of the dimension tables it references.

    Example:
        >>> spec = TableSpec.resolve(TableName.TRIP, 0.01)
        >>> spec.row_count, spec.dimensions[TableName.CUSTOMER]
        (60000, 300)
    """

    model_config = ConfigDict(frozen=True)

    table: TableName
    scale_factor: float = Field(..., gt=0)
    row_count: int = Field(..., ge=1)
    dimensions: dict[TableName, int] = Field(default_factory=dict)

    @classmethod
    def resolve(
        cls,
        table: TableName,
        scale_factor: float,
        policy: ZoneCardinalityPolicy | None = None,
    ) -> TableSpec:
        """Compute the spec of ``table`` at ``scale_factor``."""
        return cls(
            table=table,
            scale_factor=validate_scale_factor(scale_factor),
            row_count=row_count(table, scale_factor, policy),
            dimensions={
                dim: row_count(dim, scale_factor, policy) for dim in REFERENCES.get(table, ())
            },
        )
