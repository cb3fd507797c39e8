"""Row types and Arrow schemas for the benchmark tables.

This module provides:
- rows: immutable row types (Vehicle, Driver, Customer, Trip, Building, Zone)
- arrow: per-table Arrow schemas and row-to-table conversion
"""

from __future__ import annotations

from spatialbench.schemas.arrow import (
    GeometryEncoding,
    arrow_schema,
    column_names,
    geometry_columns,
    rows_to_table,
)
from spatialbench.schemas.rows import Building, Customer, Driver, Row, Trip, Vehicle, Zone

__all__ = [
    # Rows
    "Building",
    "Customer",
    "Driver",
    "Row",
    "Trip",
    "Vehicle",
    "Zone",
    # Arrow
    "GeometryEncoding",
    "arrow_schema",
    "column_names",
    "geometry_columns",
    "rows_to_table",
]
