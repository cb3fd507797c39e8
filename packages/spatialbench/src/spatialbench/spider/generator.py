"""Spider geometry generator.

Composes sampling, region selection, affine mapping and shape building into
a single pure function of the row ordinal.
"""

from __future__ import annotations

from spatialbench.spider.affine import AffineMapper
from spatialbench.spider.config import SpiderConfig
from spatialbench.spider.geometry import GeneratedGeometry, build_geometry
from spatialbench.spider.sampler import CoordinateSampler


class SpiderGenerator:
    """Generate the geometry of row ``ordinal`` for one Spider config.

    Instances hold no mutable state and may be shared between threads.

    Example:
        >>> generator = SpiderGenerator(default_trip_config())
        >>> generator.generate(0)
        Point(x=..., y=...)
    """

    def __init__(self, config: SpiderConfig) -> None:
        """Initialize the generator.

        Args:
            config: Validated Spider configuration.
        """
        self.config = config
        self.sampler = CoordinateSampler(config)
        self.mapper = AffineMapper.from_config(config)

    def generate(self, ordinal: int) -> GeneratedGeometry:
        """Return the geometry of row ``ordinal``.

        Raises:
            GenerationError: If the geometry degenerates after rounding.
        """
        center = self.sampler.sample(ordinal)
        return build_geometry(self.config, center, ordinal, self.mapper.matrix_for(ordinal))
