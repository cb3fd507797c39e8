"""Base class for tables with a Spider-generated geometry column."""

from __future__ import annotations

from typing import ClassVar

from spatialbench.cardinality import TableSpec
from spatialbench.errors import ConfigurationError
from spatialbench.generators.base import RowGenerator
from spatialbench.spider.config import GeometryType, SpiderConfig
from spatialbench.spider.generator import SpiderGenerator
from spatialbench.spider.geometry import GeneratedGeometry


class SpatialRowGenerator(RowGenerator):
    """Row generator whose geometry column comes from a Spider config.

    Attributes:
        geometry_types: Geometry types the table accepts.
    """

    geometry_types: ClassVar[frozenset[GeometryType]]

    def __init__(self, spec: TableSpec, spider_config: SpiderConfig) -> None:
        """Initialize the generator.

        Args:
            spec: Resolved cardinality of the table.
            spider_config: Validated Spider config for the geometry column.

        Raises:
            ConfigurationError: If the config's geometry type does not fit the table.
        """
        super().__init__(spec)
        if spider_config.geom_type not in self.geometry_types:
            allowed = ", ".join(sorted(t.value for t in self.geometry_types))
            raise ConfigurationError(
                f"Table '{self.table.value}' requires geom_type {allowed}, "
                f"got '{spider_config.geom_type.value}'",
                field_path=f"{self.table.value}.geom_type",
            )
        self.spider_config = spider_config
        self.spider = SpiderGenerator(spider_config)

    def geometry(self, ordinal: int) -> GeneratedGeometry:
        return self.spider.generate(ordinal)
