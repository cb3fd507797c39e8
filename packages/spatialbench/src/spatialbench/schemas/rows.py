"""Row types for the benchmark tables.

Rows are immutable named tuples: cheap to build in bulk, hashable, and
directly transposable into Arrow columns. Primary keys are
``ordinal + 1``; foreign keys reference those 1-based keys.

Tables:
- Vehicle, Driver, Customer: plain dimensions
- Trip: fact table with pickup/dropoff points
- Building, Zone: spatial dimensions with polygon boundaries
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import NamedTuple, Union

from spatialbench.spider.geometry import GeneratedGeometry, Point


class Vehicle(NamedTuple):
    """Vehicle dimension row."""

    v_vehiclekey: int
    v_mfgr: str
    v_brand: str
    v_type: str
    v_license: str


class Driver(NamedTuple):
    """Driver dimension row."""

    d_driverkey: int
    d_name: str
    d_address: str
    d_region: str
    d_nation: str
    d_phone: str


class Customer(NamedTuple):
    """Customer dimension row."""

    c_custkey: int
    c_name: str
    c_address: str
    c_region: str
    c_nation: str
    c_phone: str


class Trip(NamedTuple):
    """Trip fact row.

    Amounts are in dollars with two decimal places; ``t_distance`` is in miles.
    """

    t_tripkey: int
    t_custkey: int
    t_driverkey: int
    t_vehiclekey: int
    t_pickuptime: datetime
    t_dropofftime: datetime
    t_fare: Decimal
    t_tip: Decimal
    t_totalamount: Decimal
    t_distance: Decimal
    t_pickuploc: Point
    t_dropoffloc: Point


class Building(NamedTuple):
    """Building dimension row; the boundary is a Box or Polygon."""

    b_buildingkey: int
    b_name: str
    b_boundary: GeneratedGeometry


class Zone(NamedTuple):
    """Zone dimension row."""

    z_zonekey: int
    z_gersid: str
    z_country: str
    z_region: str
    z_name: str
    z_subtype: str
    z_boundary: GeneratedGeometry


Row = Union[Vehicle, Driver, Customer, Trip, Building, Zone]
