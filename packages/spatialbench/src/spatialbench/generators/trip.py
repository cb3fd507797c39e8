"""Trip fact table generator.

Each trip references a customer, a vehicle and one of the vehicle's
drivers. The pickup point comes from the trip Spider config; the dropoff is
the pickup moved along a random bearing by an exponentially distributed
distance. Fare, tip and trip duration all derive from that distance.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from decimal import Decimal

from spatialbench.cardinality import TableName, TableSpec
from spatialbench.generators.spatial import SpatialRowGenerator
from spatialbench.schemas.rows import Trip
from spatialbench.spider.config import GeometryType, SpiderConfig
from spatialbench.spider.geometry import COORDINATE_DECIMALS, Point

MIN_PICKUP_TIME = datetime(1992, 1, 1)
PICKUP_WINDOW_SECONDS = int((datetime(1999, 1, 1) - MIN_PICKUP_TIME).total_seconds())

DRIVERS_PER_VEHICLE = 4

MEAN_TRIP_DEGREES = 0.02
MAX_TRIP_DEGREES = 0.5
MILES_PER_DEGREE = 69.0

BASE_FARE_CENTS = 250
FARE_CENTS_PER_MILE = (150, 300)
TIP_PERCENT = (0, 30)
SECONDS_PER_MILE = (90, 240)
MIN_TRIP_SECONDS = 60

# Field tags
_CUSTKEY = 1
_VEHICLEKEY = 2
_DRIVER_NUMBER = 3
_PICKUP_SECOND = 4
_DISTANCE = 5
_BEARING = 6
_FARE_RATE = 7
_TIP_PERCENT = 8
_PACE = 9


def select_driver(vehicle_key: int, driver_number: int, driver_count: int) -> int:
    """Key of driver ``driver_number`` (0-3) assigned to ``vehicle_key``.

    Spreads the drivers of one vehicle across the driver table, so every
    vehicle has ``DRIVERS_PER_VEHICLE`` stable drivers.
    """
    stride = driver_count // DRIVERS_PER_VEHICLE + (vehicle_key - 1) // driver_count
    return (vehicle_key + driver_number * stride) % driver_count + 1


def _hundredths(value: int) -> Decimal:
    return Decimal(value).scaleb(-2)


class TripGenerator(SpatialRowGenerator):
    """Trip fact table: 6,000,000 x SF rows with pickup and dropoff points."""

    table = TableName.TRIP
    seed = 1_434_868_289
    geometry_types = frozenset({GeometryType.POINT})

    def __init__(self, spec: TableSpec, spider_config: SpiderConfig) -> None:
        super().__init__(spec, spider_config)
        self._driver_count = spec.dimensions[TableName.DRIVER]

    def customer_key(self, ordinal: int) -> int:
        """Customer of trip ``ordinal``; keys divisible by 3 never take trips."""
        key = self._foreign_key(ordinal, _CUSTKEY, TableName.CUSTOMER)
        if key % 3 == 0:
            key -= 1
        return key

    def generate(self, ordinal: int) -> Trip:
        vehicle_key = self._foreign_key(ordinal, _VEHICLEKEY, TableName.VEHICLE)
        driver_key = select_driver(
            vehicle_key,
            self._randint(ordinal, _DRIVER_NUMBER, 0, DRIVERS_PER_VEHICLE - 1),
            self._driver_count,
        )

        pickup = self.geometry(ordinal)
        assert isinstance(pickup, Point)

        # Exponential distance, 1 - u keeps the log argument in (0, 1]
        degrees = min(
            -math.log(1.0 - self._unit(ordinal, _DISTANCE)) * MEAN_TRIP_DEGREES,
            MAX_TRIP_DEGREES,
        )
        bearing = 2.0 * math.pi * self._unit(ordinal, _BEARING)
        dropoff = Point(
            round(pickup.x + degrees * math.cos(bearing), COORDINATE_DECIMALS),
            round(pickup.y + degrees * math.sin(bearing), COORDINATE_DECIMALS),
        )

        distance_hundredths = round(degrees * MILES_PER_DEGREE * 100)
        fare_cents = BASE_FARE_CENTS + distance_hundredths * self._randint(
            ordinal, _FARE_RATE, *FARE_CENTS_PER_MILE
        ) // 100
        tip_cents = fare_cents * self._randint(ordinal, _TIP_PERCENT, *TIP_PERCENT) // 100

        pickup_time = MIN_PICKUP_TIME + timedelta(
            seconds=self._randint(ordinal, _PICKUP_SECOND, 0, PICKUP_WINDOW_SECONDS - 1)
        )
        duration = MIN_TRIP_SECONDS + distance_hundredths * self._randint(
            ordinal, _PACE, *SECONDS_PER_MILE
        ) // 100

        return Trip(
            t_tripkey=ordinal + 1,
            t_custkey=self.customer_key(ordinal),
            t_driverkey=driver_key,
            t_vehiclekey=vehicle_key,
            t_pickuptime=pickup_time,
            t_dropofftime=pickup_time + timedelta(seconds=duration),
            t_fare=_hundredths(fare_cents),
            t_tip=_hundredths(tip_cents),
            t_totalamount=_hundredths(fare_cents + tip_cents),
            t_distance=_hundredths(distance_hundredths),
            t_pickuploc=pickup,
            t_dropoffloc=dropoff,
        )
