"""Unit tests for the table row generators.

Tests cover:
- Primary keys and deterministic row content
- Referential integrity of trip foreign keys
- Spider geometry columns
- Error handling for mismatched configs and degenerate geometry
"""

from __future__ import annotations

import uuid
from decimal import Decimal

import pytest
import shapely

from spatialbench.cardinality import FixedZoneCardinality, TableName, TableSpec
from spatialbench.errors import ConfigurationError, GenerationError
from spatialbench.generators import (
    BuildingGenerator,
    CustomerGenerator,
    DriverGenerator,
    TripGenerator,
    VehicleGenerator,
    ZoneGenerator,
    create_generator,
    generate_row,
    select_driver,
)
from spatialbench.generators.reference import NATIONS
from spatialbench.partition import partitions
from spatialbench.schemas.rows import Trip
from spatialbench.spider.config import GeometryType, SpiderConfig
from spatialbench.spider.defaults import PRESETS, default_building_config, default_trip_config
from spatialbench.spider.geometry import Box, Point, Polygon

pytestmark = pytest.mark.unit

SCALE = 0.01


def _generator(table: TableName, scale_factor: float = SCALE):
    return create_generator(TableSpec.resolve(table, scale_factor))


class TestCreateGenerator:
    """Tests for create_generator and generate_row."""

    @pytest.mark.parametrize(
        ("table", "cls"),
        [
            (TableName.VEHICLE, VehicleGenerator),
            (TableName.DRIVER, DriverGenerator),
            (TableName.CUSTOMER, CustomerGenerator),
            (TableName.TRIP, TripGenerator),
            (TableName.BUILDING, BuildingGenerator),
            (TableName.ZONE, ZoneGenerator),
        ],
    )
    def test_generator_per_table(self, table: TableName, cls: type) -> None:
        """Each table gets its generator."""
        generator = _generator(table)
        assert isinstance(generator, cls)
        assert generator.table == table

    def test_spec_mismatch(self) -> None:
        """A generator refuses a spec for another table."""
        with pytest.raises(ConfigurationError, match="cannot generate"):
            VehicleGenerator(TableSpec.resolve(TableName.DRIVER, 1.0))

    def test_generate_row_matches_generator(self) -> None:
        """generate_row returns the same row as a generator."""
        spec = TableSpec.resolve(TableName.CUSTOMER, SCALE)
        assert generate_row(TableName.CUSTOMER, 42, spec) == create_generator(spec).generate(42)

    def test_generate_row_table_mismatch(self) -> None:
        """generate_row checks the spec's table."""
        spec = TableSpec.resolve(TableName.CUSTOMER, SCALE)
        with pytest.raises(ConfigurationError):
            generate_row(TableName.DRIVER, 0, spec)

    def test_spider_override(self) -> None:
        """Spider configs override the defaults per table."""
        spec = TableSpec.resolve(TableName.TRIP, SCALE)
        generator = create_generator(spec, {"trip": PRESETS["trip-uniform"]})
        assert isinstance(generator, TripGenerator)
        assert generator.spider_config == PRESETS["trip-uniform"]


class TestDeterminism:
    """Row content is a pure function of the ordinal."""

    @pytest.mark.parametrize("table", list(TableName))
    def test_same_row_twice(self, table: TableName) -> None:
        """Two generators produce identical rows."""
        first = _generator(table)
        second = _generator(table)
        for ordinal in (0, 1, 17, first.row_count - 1):
            assert first.generate(ordinal) == second.generate(ordinal)

    @pytest.mark.parametrize("table", list(TableName))
    def test_order_independent(self, table: TableName) -> None:
        """Generating out of order does not change rows."""
        generator = _generator(table)
        forward = [generator.generate(o) for o in range(30)]
        backward = [generator.generate(o) for o in reversed(range(30))]
        assert forward == list(reversed(backward))

    def test_batch_equals_rows(self) -> None:
        """generate_batch returns the rows of its range."""
        generator = _generator(TableName.DRIVER)
        batch = generator.generate_batch(2, 5)
        assert batch.start == 2
        assert batch.end == 5
        assert list(batch.rows) == [generator.generate(o) for o in range(2, 5)]

    def test_stream_concatenation(self) -> None:
        """Streaming partitions reproduces the whole table."""
        generator = _generator(TableName.CUSTOMER)
        whole = [generator.generate(o) for o in range(generator.row_count)]
        streamed = [
            row
            for partition in partitions(generator.row_count, 4)
            for batch in generator.generate_stream(partition, batch_size=37)
            for row in batch.rows
        ]
        assert streamed == whole


class TestPrimaryKeys:
    """Primary keys are ordinal + 1."""

    @pytest.mark.parametrize("table", list(TableName))
    def test_key_is_ordinal_plus_one(self, table: TableName) -> None:
        """The first column is the 1-based key."""
        generator = _generator(table)
        for ordinal in (0, 5, generator.row_count - 1):
            assert generator.generate(ordinal)[0] == ordinal + 1


class TestDimensions:
    """Tests for vehicle, driver and customer rows."""

    def test_vehicle_columns(self) -> None:
        """Vehicle manufacturer and brand stay consistent."""
        generator = _generator(TableName.VEHICLE, 1.0)
        for ordinal in range(100):
            row = generator.generate(ordinal)
            mfgr = int(row.v_mfgr.removeprefix("Manufacturer#"))
            brand = int(row.v_brand.removeprefix("Brand#"))
            assert 1 <= mfgr <= 5
            assert brand // 10 == mfgr
            assert 1 <= brand % 10 <= 5
            assert len(row.v_type.split()) == 3
            assert row.v_license

    def test_customer_columns(self) -> None:
        """Customer names, nations and phones are well formed."""
        generator = _generator(TableName.CUSTOMER)
        nations = {nation.name: nation for nation in NATIONS}
        for ordinal in range(100):
            row = generator.generate(ordinal)
            assert row.c_name == f"Customer#{ordinal + 1:09d}"
            nation = nations[row.c_nation]
            assert row.c_region == nation.region
            parts = row.c_phone.split("-")
            assert parts[0] == str(nation.key + 10)
            assert [len(p) for p in parts[1:]] == [3, 3, 4]
            assert row.c_address

    def test_driver_name(self) -> None:
        """Driver names embed the key."""
        row = _generator(TableName.DRIVER).generate(3)
        assert row.d_name == "Driver#000000004"


class TestTrip:
    """Tests for trip rows."""

    @pytest.fixture
    def trip_generator(self) -> TripGenerator:
        generator = _generator(TableName.TRIP)
        assert isinstance(generator, TripGenerator)
        return generator

    def test_foreign_keys_in_range(self, trip_generator: TripGenerator) -> None:
        """Foreign keys reference existing dimension rows."""
        dims = trip_generator.spec.dimensions
        for ordinal in range(2000):
            row = trip_generator.generate(ordinal)
            assert 1 <= row.t_custkey <= dims[TableName.CUSTOMER]
            assert 1 <= row.t_driverkey <= dims[TableName.DRIVER]
            assert 1 <= row.t_vehiclekey <= dims[TableName.VEHICLE]

    def test_customer_mortality(self, trip_generator: TripGenerator) -> None:
        """Customers whose key is a multiple of 3 never take trips."""
        keys = {trip_generator.customer_key(o) for o in range(5000)}
        assert all(key % 3 != 0 for key in keys)
        assert len(keys) > 100

    def test_amounts_consistent(self, trip_generator: TripGenerator) -> None:
        """Total is fare plus tip; tips never exceed 30% of the fare."""
        for ordinal in range(500):
            row = trip_generator.generate(ordinal)
            assert row.t_totalamount == row.t_fare + row.t_tip
            assert Decimal("0") <= row.t_tip <= row.t_fare * Decimal("0.3")
            assert row.t_fare >= Decimal("2.50")
            assert row.t_fare.as_tuple().exponent == -2

    def test_times_ordered(self, trip_generator: TripGenerator) -> None:
        """Dropoff follows pickup by at least a minute."""
        for ordinal in range(500):
            row = trip_generator.generate(ordinal)
            assert (row.t_dropofftime - row.t_pickuptime).total_seconds() >= 60
            assert row.t_pickuptime.year >= 1992

    def test_locations_are_points(self, trip_generator: TripGenerator) -> None:
        """Pickup and dropoff are points near each other."""
        for ordinal in range(500):
            row = trip_generator.generate(ordinal)
            assert isinstance(row, Trip)
            assert isinstance(row.t_pickuploc, Point)
            assert isinstance(row.t_dropoffloc, Point)
            assert abs(row.t_dropoffloc.x - row.t_pickuploc.x) <= 0.5 + 1e-8
            assert abs(row.t_dropoffloc.y - row.t_pickuploc.y) <= 0.5 + 1e-8

    def test_pickup_from_spider(self, trip_generator: TripGenerator) -> None:
        """The pickup location is the Spider geometry of the row."""
        assert trip_generator.generate(9).t_pickuploc == trip_generator.geometry(9)

    def test_rejects_polygon_config(self) -> None:
        """Trips need point geometry."""
        spec = TableSpec.resolve(TableName.TRIP, SCALE)
        with pytest.raises(ConfigurationError, match="geom_type"):
            TripGenerator(spec, default_building_config())

    def test_select_driver_range(self) -> None:
        """Selected drivers exist and vary per driver number."""
        for vehicle_key in range(1, 50):
            drivers = {select_driver(vehicle_key, n, 500) for n in range(4)}
            assert all(1 <= d <= 500 for d in drivers)
            assert len(drivers) == 4

    def test_select_driver_single(self) -> None:
        """With one driver every vehicle uses it."""
        assert {select_driver(v, n, 1) for v in range(1, 10) for n in range(4)} == {1}


class TestSpatialDimensions:
    """Tests for building and zone rows."""

    def test_building_boundaries(self) -> None:
        """Default building boundaries are valid polygons."""
        generator = _generator(TableName.BUILDING, 1.0)
        for ordinal in range(200):
            row = generator.generate(ordinal)
            assert isinstance(row.b_boundary, Polygon)
            assert shapely.Polygon(row.b_boundary.ring).is_valid
            assert row.b_name

    def test_building_boxes(self) -> None:
        """The building-box preset yields boxes."""
        spec = TableSpec.resolve(TableName.BUILDING, 1.0)
        generator = create_generator(spec, {"building": PRESETS["building-box"]})
        row = generator.generate(0)
        assert isinstance(row.b_boundary, Box)

    def test_building_rejects_points(self) -> None:
        """Buildings need box or polygon geometry."""
        spec = TableSpec.resolve(TableName.BUILDING, 1.0)
        with pytest.raises(ConfigurationError):
            BuildingGenerator(spec, default_trip_config())

    def test_degenerate_geometry_names_table(self) -> None:
        """Geometry failures carry the table and ordinal."""
        config = SpiderConfig(
            geom_type=GeometryType.POLYGON, seed=1, maxseg=4, polysize=1e-12
        )
        generator = BuildingGenerator(TableSpec.resolve(TableName.BUILDING, 1.0), config)
        with pytest.raises(GenerationError) as exc_info:
            generator.generate_batch(10, 20)
        assert exc_info.value.table == "building"
        assert exc_info.value.ordinal == 10
        assert "building" in str(exc_info.value)

    def test_zone_columns(self) -> None:
        """Zones carry a UUID, ISO country and subtype."""
        generator = _generator(TableName.ZONE)
        assert isinstance(generator, ZoneGenerator)
        isos = {nation.iso for nation in NATIONS}
        for ordinal in range(200):
            row = generator.generate(ordinal)
            assert uuid.UUID(row.z_gersid).version == 4
            assert row.z_country in isos
            assert row.z_region.startswith(f"{row.z_country}-")
            assert row.z_subtype in generator.layout.subtypes
            assert isinstance(row.z_boundary, Polygon)

    def test_zone_ids_unique(self) -> None:
        """GERS ids differ between zones."""
        generator = _generator(TableName.ZONE)
        ids = {generator.gers_id(o) for o in range(generator.row_count)}
        assert len(ids) == generator.row_count

    def test_zone_policy_mismatch(self) -> None:
        """The zone generator checks its spec against the policy."""
        spec = TableSpec.resolve(TableName.ZONE, 1.0)
        with pytest.raises(ConfigurationError, match="zone policy|Zone policy"):
            ZoneGenerator(spec, create_generator(spec).spider_config, FixedZoneCardinality(10))

    def test_larger_subtypes_larger_boundaries(self) -> None:
        """Macrohoods are drawn larger than microhoods."""
        generator = _generator(TableName.ZONE, 1.0)
        assert isinstance(generator, ZoneGenerator)
        micro = generator._spiders["microhood"].config.polysize
        macro = generator._spiders["macrohood"].config.polysize
        assert macro == pytest.approx(2 * micro)
