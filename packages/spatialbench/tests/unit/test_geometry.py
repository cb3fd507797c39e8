"""Unit tests for geometry values and the geometry builder."""

from __future__ import annotations

import pytest
import shapely

from spatialbench.errors import GenerationError
from spatialbench.spider.affine import IDENTITY
from spatialbench.spider.config import DistributionType, GeometryType, SpiderConfig
from spatialbench.spider.defaults import (
    FULL_WORLD_AFFINE,
    default_building_config,
    default_zone_config,
)
from spatialbench.spider.generator import SpiderGenerator
from spatialbench.spider.geometry import (
    Box,
    Point,
    Polygon,
    build_geometry,
    to_wkb,
    to_wkt,
)

pytestmark = pytest.mark.unit


def _box_config(width: float = 0.1, height: float = 0.2) -> SpiderConfig:
    return SpiderConfig(geom_type=GeometryType.BOX, seed=3, width=width, height=height)


def _polygon_config(maxseg: int = 6, polysize: float = 0.05) -> SpiderConfig:
    return SpiderConfig(geom_type=GeometryType.POLYGON, seed=3, maxseg=maxseg, polysize=polysize)


class TestGeometryValues:
    """Tests for Point, Box and Polygon."""

    def test_box_requires_positive_extent(self) -> None:
        """A box with min == max is rejected."""
        with pytest.raises(ValueError, match="Degenerate"):
            Box(0.0, 0.0, 0.0, 1.0)

    def test_box_ring_is_closed(self) -> None:
        """The box ring repeats its first corner."""
        ring = Box(0.0, 0.0, 2.0, 1.0).ring
        assert len(ring) == 5
        assert ring[0] == ring[-1]

    def test_polygon_vertices_drop_closing_point(self) -> None:
        """vertices omits the closing repeat."""
        polygon = Polygon(((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (0.0, 0.0)))
        assert polygon.vertices == ((0.0, 0.0), (1.0, 0.0), (0.0, 1.0))

    def test_geometry_types(self) -> None:
        """Each value reports its geometry type."""
        assert Point(0.0, 0.0).geom_type == GeometryType.POINT
        assert Box(0.0, 0.0, 1.0, 1.0).geom_type == GeometryType.BOX


class TestEncoding:
    """Tests for WKT and WKB encoding."""

    def test_point_wkt(self) -> None:
        """Points encode as WKT with full precision."""
        assert to_wkt([Point(1.5, -2.25)]) == ["POINT (1.5 -2.25)"]

    def test_box_wkt_is_polygon(self) -> None:
        """Boxes encode as five-corner polygons."""
        (wkt,) = to_wkt([Box(0.0, 0.0, 1.0, 2.0)])
        assert wkt.startswith("POLYGON ((")

    def test_wkb_little_endian(self) -> None:
        """WKB output is little-endian 2D."""
        (wkb,) = to_wkb([Point(1.0, 2.0)])
        assert wkb[0] == 1
        assert len(wkb) == 21
        assert shapely.from_wkb(wkb).equals(shapely.Point(1.0, 2.0))

    def test_empty_input(self) -> None:
        """Encoding an empty sequence returns an empty list."""
        assert to_wkt([]) == []
        assert to_wkb([]) == []


class TestBuildPoint:
    """Tests for point geometry."""

    def test_point_mapped_through_affine(self) -> None:
        """The center is mapped through the row's matrix."""
        config = SpiderConfig(seed=1)
        point = build_geometry(config, (0.5, 0.25), 0, FULL_WORLD_AFFINE)
        assert point == Point(0.0, -45.0)

    def test_coordinates_rounded(self) -> None:
        """Coordinates are rounded to 8 decimal places."""
        config = SpiderConfig(seed=1)
        point = build_geometry(config, (1 / 3, 1 / 7), 0, IDENTITY)
        assert isinstance(point, Point)
        assert point.x == round(1 / 3, 8)
        assert point.y == round(1 / 7, 8)


class TestBuildBox:
    """Tests for box geometry."""

    def test_box_extent_bounded_by_config(self) -> None:
        """Box extents lie between half and all of width/height."""
        config = _box_config()
        for ordinal in range(200):
            box = build_geometry(config, (0.5, 0.5), ordinal, IDENTITY)
            assert isinstance(box, Box)
            assert 0.05 - 1e-9 <= box.maxx - box.minx <= 0.1 + 1e-9
            assert 0.1 - 1e-9 <= box.maxy - box.miny <= 0.2 + 1e-9

    def test_box_centered(self) -> None:
        """The box is centered on the sampled point."""
        box = build_geometry(_box_config(), (0.5, 0.5), 9, IDENTITY)
        assert isinstance(box, Box)
        assert (box.minx + box.maxx) / 2 == pytest.approx(0.5)
        assert (box.miny + box.maxy) / 2 == pytest.approx(0.5)

    def test_degenerate_box_raises(self) -> None:
        """A box that rounds to zero extent raises GenerationError."""
        config = _box_config(width=1e-12, height=1e-12)
        with pytest.raises(GenerationError, match="Box collapsed") as exc_info:
            build_geometry(config, (0.5, 0.5), 4, IDENTITY)
        assert exc_info.value.ordinal == 4


class TestBuildPolygon:
    """Tests for polygon geometry."""

    def test_polygons_valid(self) -> None:
        """Polygons are closed, simple and have 3..maxseg vertices."""
        config = _polygon_config(maxseg=7)
        for ordinal in range(300):
            polygon = build_geometry(config, (0.5, 0.5), ordinal, IDENTITY)
            assert isinstance(polygon, Polygon)
            assert polygon.ring[0] == polygon.ring[-1]
            assert 3 <= len(polygon.vertices) <= 7
            assert len(set(polygon.vertices)) == len(polygon.vertices)
            shape = polygon.to_shapely()
            assert shape.is_valid
            assert shape.area > 0

    def test_triangle_only_when_maxseg_three(self) -> None:
        """maxseg=3 always yields triangles."""
        config = _polygon_config(maxseg=3)
        for ordinal in range(50):
            polygon = build_geometry(config, (0.5, 0.5), ordinal, IDENTITY)
            assert isinstance(polygon, Polygon)
            assert len(polygon.vertices) == 3

    def test_polygon_near_edge_clamped(self) -> None:
        """Vertices stay inside the unit square before mapping."""
        config = _polygon_config(polysize=0.2)
        for ordinal in range(50):
            polygon = build_geometry(config, (0.0, 1.0), ordinal, IDENTITY)
            assert isinstance(polygon, Polygon)
            for x, y in polygon.ring:
                assert 0.0 <= x <= 1.0
                assert 0.0 <= y <= 1.0

    def test_degenerate_polygon_raises(self) -> None:
        """A polygon that rounds to a single point raises GenerationError."""
        config = _polygon_config(polysize=1e-12)
        with pytest.raises(GenerationError, match="fewer than 3"):
            build_geometry(config, (0.5, 0.5), 0, IDENTITY)


class TestSpiderGenerator:
    """Tests for the composed SpiderGenerator."""

    def test_default_building_polygons_valid(self) -> None:
        """Default building footprints are valid polygons."""
        generator = SpiderGenerator(default_building_config())
        for ordinal in range(200):
            polygon = generator.generate(ordinal)
            assert isinstance(polygon, Polygon)
            assert polygon.to_shapely().is_valid

    def test_default_zone_polygons_within_world(self) -> None:
        """Default zones land inside longitude/latitude bounds."""
        generator = SpiderGenerator(default_zone_config())
        for ordinal in range(200):
            polygon = generator.generate(ordinal)
            assert isinstance(polygon, Polygon)
            for x, y in polygon.ring:
                assert -180.0 <= x <= 180.0
                assert -90.0 <= y <= 90.0

    def test_generation_is_order_independent(self) -> None:
        """Generating rows in any order gives the same geometry."""
        config = SpiderConfig(
            dist_type=DistributionType.NORMAL,
            geom_type=GeometryType.POLYGON,
            seed=8,
            maxseg=5,
            polysize=0.01,
        )
        forward = [SpiderGenerator(config).generate(o) for o in range(20)]
        backward = [SpiderGenerator(config).generate(o) for o in reversed(range(20))]
        assert forward == list(reversed(backward))
