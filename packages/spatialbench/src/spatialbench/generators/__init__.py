"""Row generators for the benchmark tables.

Key Components:
- base: RowGenerator base class, RowBatch, deterministic Faker access
- dimensions: vehicle, driver and customer generators
- trip: trip fact table generator
- building, zone: spatial dimension generators

Example:
    >>> from spatialbench.cardinality import TableName, TableSpec
    >>> from spatialbench.generators import create_generator
    >>>
    >>> spec = TableSpec.resolve(TableName.TRIP, 0.01)
    >>> generator = create_generator(spec)
    >>> batch = generator.generate_batch(0, 1000)
"""

from __future__ import annotations

from collections.abc import Mapping

from spatialbench.cardinality import TableName, TableSpec, ZoneCardinalityPolicy
from spatialbench.errors import ConfigurationError
from spatialbench.generators.base import RowBatch, RowGenerator, seeded_faker
from spatialbench.generators.building import BuildingGenerator
from spatialbench.generators.dimensions import (
    CustomerGenerator,
    DriverGenerator,
    VehicleGenerator,
)
from spatialbench.generators.trip import TripGenerator, select_driver
from spatialbench.generators.zone import ZoneGenerator
from spatialbench.schemas.rows import Row
from spatialbench.spider.config import SpiderConfig
from spatialbench.spider.defaults import default_configs

SPATIAL_TABLES: frozenset[TableName] = frozenset(
    {TableName.TRIP, TableName.BUILDING, TableName.ZONE}
)


def create_generator(
    spec: TableSpec,
    spider_configs: Mapping[str, SpiderConfig] | None = None,
    zone_policy: ZoneCardinalityPolicy | None = None,
) -> RowGenerator:
    """Create the row generator for ``spec.table``.

    Args:
        spec: Resolved table spec.
        spider_configs: Spider config per spatial table name; missing tables
            use the built-in defaults.
        zone_policy: Zone cardinality policy used to resolve ``spec``.

    Returns:
        RowGenerator for the table.

    Raises:
        ConfigurationError: If a Spider config does not fit its table.
    """
    configs = {**default_configs(), **(spider_configs or {})}
    table = spec.table
    if table == TableName.VEHICLE:
        return VehicleGenerator(spec)
    if table == TableName.DRIVER:
        return DriverGenerator(spec)
    if table == TableName.CUSTOMER:
        return CustomerGenerator(spec)
    if table == TableName.TRIP:
        return TripGenerator(spec, configs[table.value])
    if table == TableName.BUILDING:
        return BuildingGenerator(spec, configs[table.value])
    return ZoneGenerator(spec, configs[table.value], zone_policy)


def generate_row(
    table: TableName,
    ordinal: int,
    table_spec: TableSpec,
    spider_config: SpiderConfig | None = None,
) -> Row:
    """Generate a single row without keeping a generator around.

    Args:
        table: Table to generate.
        ordinal: Zero-based row ordinal.
        table_spec: Resolved spec of ``table``.
        spider_config: Spider config for spatial tables (default if omitted).

    Returns:
        The row at ``ordinal``.
    """
    if table != table_spec.table:
        raise ConfigurationError(
            f"Table spec is for '{table_spec.table.value}', not '{table.value}'",
            field_path="table",
        )
    configs = {table.value: spider_config} if spider_config is not None else None
    return create_generator(table_spec, configs).generate(ordinal)


__all__ = [
    "BuildingGenerator",
    "CustomerGenerator",
    "DriverGenerator",
    "RowBatch",
    "RowGenerator",
    "SPATIAL_TABLES",
    "TripGenerator",
    "VehicleGenerator",
    "ZoneGenerator",
    "create_generator",
    "generate_row",
    "seeded_faker",
    "select_driver",
]
