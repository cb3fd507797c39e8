"""Building dimension generator: 20,000 x (1 + log2 SF) footprints."""

from __future__ import annotations

from spatialbench.cardinality import TableName
from spatialbench.generators.reference import BUILDING_NAME_WORDS
from spatialbench.generators.spatial import SpatialRowGenerator
from spatialbench.schemas.rows import Building
from spatialbench.spider.config import GeometryType

_NAME = 1


class BuildingGenerator(SpatialRowGenerator):
    """Buildings with a Box or Polygon footprint."""

    table = TableName.BUILDING
    seed = 1_841_581_359
    geometry_types = frozenset({GeometryType.BOX, GeometryType.POLYGON})

    def generate(self, ordinal: int) -> Building:
        word = BUILDING_NAME_WORDS[self._randint(ordinal, _NAME, 0, len(BUILDING_NAME_WORDS) - 1)]
        return Building(
            b_buildingkey=ordinal + 1,
            b_name=word,
            b_boundary=self.geometry(ordinal),
        )
