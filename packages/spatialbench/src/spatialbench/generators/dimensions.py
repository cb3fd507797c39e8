"""Generators for the non-spatial dimension tables.

Tables:
- vehicle: manufacturer, brand, type and license plate
- driver: name, address, nation/region and phone
- customer: name, address, nation/region and phone
"""

from __future__ import annotations

from spatialbench.cardinality import TableName
from spatialbench.distributions import WeightedChoice
from spatialbench.generators.base import RowGenerator
from spatialbench.generators.reference import (
    BRANDS_PER_MANUFACTURER,
    MANUFACTURER_COUNT,
    NATIONS,
    VEHICLE_SIZE_WEIGHTS,
    VEHICLE_TYPE_SYLLABLES,
    Nation,
)
from spatialbench.schemas.rows import Customer, Driver, Vehicle

# Field tags
_MFGR = 1
_BRAND = 2
_TYPE_SIZE = 3
_TYPE_FINISH = 4
_TYPE_MATERIAL = 5
_NATION = 6
_PHONE_EXCHANGE = 7
_PHONE_LINE = 8
_PHONE_SUBSCRIBER = 9

_VEHICLE_SIZES: WeightedChoice[str] = WeightedChoice(VEHICLE_SIZE_WEIGHTS)


class VehicleGenerator(RowGenerator):
    """Vehicle dimension: 100 x SF rows."""

    table = TableName.VEHICLE
    seed = 1_201_320_433

    def generate(self, ordinal: int) -> Vehicle:
        mfgr = self._randint(ordinal, _MFGR, 1, MANUFACTURER_COUNT)
        brand = mfgr * 10 + self._randint(ordinal, _BRAND, 1, BRANDS_PER_MANUFACTURER)
        _, finishes, materials = VEHICLE_TYPE_SYLLABLES
        vehicle_type = " ".join(
            (
                _VEHICLE_SIZES.choose(self._unit(ordinal, _TYPE_SIZE)),
                finishes[self._randint(ordinal, _TYPE_FINISH, 0, len(finishes) - 1)],
                materials[self._randint(ordinal, _TYPE_MATERIAL, 0, len(materials) - 1)],
            )
        )
        return Vehicle(
            v_vehiclekey=ordinal + 1,
            v_mfgr=f"Manufacturer#{mfgr}",
            v_brand=f"Brand#{brand}",
            v_type=vehicle_type,
            v_license=self._faker(ordinal).license_plate(),
        )


class _PersonGenerator(RowGenerator):
    """Shared attributes of drivers and customers."""

    def _nation(self, ordinal: int) -> Nation:
        return NATIONS[self._randint(ordinal, _NATION, 0, len(NATIONS) - 1)]

    def _phone(self, ordinal: int, nation: Nation) -> str:
        # Country code, exchange, line, subscriber: "CC-EEE-LLL-SSSS"
        return "-".join(
            (
                str(nation.key + 10),
                str(self._randint(ordinal, _PHONE_EXCHANGE, 100, 999)),
                str(self._randint(ordinal, _PHONE_LINE, 100, 999)),
                str(self._randint(ordinal, _PHONE_SUBSCRIBER, 1000, 9999)),
            )
        )


class DriverGenerator(_PersonGenerator):
    """Driver dimension: 500 x SF rows."""

    table = TableName.DRIVER
    seed = 1_335_826_707

    def generate(self, ordinal: int) -> Driver:
        key = ordinal + 1
        nation = self._nation(ordinal)
        return Driver(
            d_driverkey=key,
            d_name=f"Driver#{key:09d}",
            d_address=self._faker(ordinal).street_address(),
            d_region=nation.region,
            d_nation=nation.name,
            d_phone=self._phone(ordinal, nation),
        )


class CustomerGenerator(_PersonGenerator):
    """Customer dimension: 30,000 x SF rows."""

    table = TableName.CUSTOMER
    seed = 881_155_353

    def generate(self, ordinal: int) -> Customer:
        key = ordinal + 1
        nation = self._nation(ordinal)
        return Customer(
            c_custkey=key,
            c_name=f"Customer#{key:09d}",
            c_address=self._faker(ordinal).street_address(),
            c_region=nation.region,
            c_nation=nation.name,
            c_phone=self._phone(ordinal, nation),
        )
