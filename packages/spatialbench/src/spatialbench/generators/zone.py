"""Zone dimension generator.

Real zone boundaries come from external (Overture Maps) division areas,
which are not bundled. This generator synthesizes a zone table with the
same columns and subtype mix: row counts and subtypes follow the selected
ZoneCardinalityPolicy, and boundaries are Spider polygons scaled per
subtype.
"""

from __future__ import annotations

import uuid

from spatialbench.cardinality import (
    TableName,
    TableSpec,
    TieredZoneCardinality,
    ZoneCardinalityPolicy,
)
from spatialbench.errors import ConfigurationError
from spatialbench.generators.reference import NATIONS, ZONE_SUBTYPE_SCALE
from spatialbench.generators.spatial import SpatialRowGenerator
from spatialbench.schemas.rows import Zone
from spatialbench.spider import prf
from spatialbench.spider.config import GeometryType, SpiderConfig
from spatialbench.spider.generator import SpiderGenerator
from spatialbench.spider.geometry import GeneratedGeometry

# Field tags
_GERSID_HIGH = 1
_GERSID_LOW = 2
_COUNTRY = 3
_REGION = 4


class ZoneGenerator(SpatialRowGenerator):
    """Synthetic zones (division areas) with Box or Polygon boundaries."""

    table = TableName.ZONE
    seed = 1_621_478_633
    geometry_types = frozenset({GeometryType.BOX, GeometryType.POLYGON})

    def __init__(
        self,
        spec: TableSpec,
        spider_config: SpiderConfig,
        policy: ZoneCardinalityPolicy | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            spec: Resolved cardinality of the zone table.
            spider_config: Spider config for the smallest subtype.
            policy: Zone cardinality policy the spec was resolved with.

        Raises:
            ConfigurationError: If the policy layout disagrees with the spec.
        """
        super().__init__(spec, spider_config)
        self.policy = policy or TieredZoneCardinality()
        self.layout = self.policy.layout(spec.scale_factor)
        if self.layout.total != spec.row_count:
            raise ConfigurationError(
                f"Zone policy '{self.policy.name}' yields {self.layout.total} rows "
                f"but the table spec has {spec.row_count}",
                field_path="zone_policy",
            )
        self._spiders: dict[str, SpiderGenerator] = {
            subtype: SpiderGenerator(
                spider_config.model_copy(
                    update={
                        "polysize": spider_config.polysize * ZONE_SUBTYPE_SCALE[subtype],
                        "width": spider_config.width * ZONE_SUBTYPE_SCALE[subtype],
                        "height": spider_config.height * ZONE_SUBTYPE_SCALE[subtype],
                    }
                )
            )
            for subtype in self.layout.subtypes
        }

    def subtype(self, ordinal: int) -> str:
        return self.layout.subtype_for(ordinal)

    def geometry(self, ordinal: int) -> GeneratedGeometry:
        return self._spiders[self.subtype(ordinal)].generate(ordinal)

    def gers_id(self, ordinal: int) -> str:
        """Stable UUID-shaped identifier of zone ``ordinal``."""
        value = (prf.hash64(self.seed, ordinal, _GERSID_HIGH) << 64) | prf.hash64(
            self.seed, ordinal, _GERSID_LOW
        )
        return str(uuid.UUID(int=value, version=4))

    def generate(self, ordinal: int) -> Zone:
        nation = NATIONS[self._randint(ordinal, _COUNTRY, 0, len(NATIONS) - 1)]
        return Zone(
            z_zonekey=ordinal + 1,
            z_gersid=self.gers_id(ordinal),
            z_country=nation.iso,
            z_region=f"{nation.iso}-{self._randint(ordinal, _REGION, 1, 99):02d}",
            z_name=self._faker(ordinal).city(),
            z_subtype=self.subtype(ordinal),
            z_boundary=self.geometry(ordinal),
        )
