"""Arrow schemas for the benchmark tables.

Geometry columns are encoded as WKB (binary, for Parquet) or WKT (string,
for the text formats); every other column has a fixed Arrow type.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import pyarrow as pa

from spatialbench.cardinality import TableName
from spatialbench.schemas.rows import Row
from spatialbench.spider.geometry import to_wkb, to_wkt

MONEY = pa.decimal128(15, 2)
DISTANCE = pa.decimal128(15, 2)
"""Miles, to two decimal places."""
TIMESTAMP = pa.timestamp("s")


class GeometryEncoding(str, Enum):
    """Serialized form of geometry columns."""

    WKB = "wkb"
    WKT = "wkt"


# Column name and type per table; None marks a geometry column
COLUMNS: dict[TableName, tuple[tuple[str, pa.DataType | None], ...]] = {
    TableName.VEHICLE: (
        ("v_vehiclekey", pa.int64()),
        ("v_mfgr", pa.string()),
        ("v_brand", pa.string()),
        ("v_type", pa.string()),
        ("v_license", pa.string()),
    ),
    TableName.DRIVER: (
        ("d_driverkey", pa.int64()),
        ("d_name", pa.string()),
        ("d_address", pa.string()),
        ("d_region", pa.string()),
        ("d_nation", pa.string()),
        ("d_phone", pa.string()),
    ),
    TableName.CUSTOMER: (
        ("c_custkey", pa.int64()),
        ("c_name", pa.string()),
        ("c_address", pa.string()),
        ("c_region", pa.string()),
        ("c_nation", pa.string()),
        ("c_phone", pa.string()),
    ),
    TableName.TRIP: (
        ("t_tripkey", pa.int64()),
        ("t_custkey", pa.int64()),
        ("t_driverkey", pa.int64()),
        ("t_vehiclekey", pa.int64()),
        ("t_pickuptime", TIMESTAMP),
        ("t_dropofftime", TIMESTAMP),
        ("t_fare", MONEY),
        ("t_tip", MONEY),
        ("t_totalamount", MONEY),
        ("t_distance", DISTANCE),
        ("t_pickuploc", None),
        ("t_dropoffloc", None),
    ),
    TableName.BUILDING: (
        ("b_buildingkey", pa.int64()),
        ("b_name", pa.string()),
        ("b_boundary", None),
    ),
    TableName.ZONE: (
        ("z_zonekey", pa.int64()),
        ("z_gersid", pa.string()),
        ("z_country", pa.string()),
        ("z_region", pa.string()),
        ("z_name", pa.string()),
        ("z_subtype", pa.string()),
        ("z_boundary", None),
    ),
}


def column_names(table: TableName) -> list[str]:
    """Column names of ``table`` in output order."""
    return [name for name, _ in COLUMNS[table]]


def geometry_columns(table: TableName) -> list[str]:
    """Names of the geometry columns of ``table``."""
    return [name for name, dtype in COLUMNS[table] if dtype is None]


def arrow_schema(table: TableName, encoding: GeometryEncoding = GeometryEncoding.WKB) -> pa.Schema:
    """Arrow schema of ``table`` with geometry columns in ``encoding``."""
    geometry_type = pa.binary() if encoding == GeometryEncoding.WKB else pa.string()
    fields = []
    for name, dtype in COLUMNS[table]:
        if dtype is None:
            fields.append(
                pa.field(
                    name,
                    geometry_type,
                    nullable=False,
                    metadata={"encoding": encoding.value.upper()},
                )
            )
        else:
            fields.append(pa.field(name, dtype, nullable=False))
    return pa.schema(fields)


def rows_to_table(
    table: TableName,
    rows: Sequence[Row],
    encoding: GeometryEncoding = GeometryEncoding.WKB,
) -> pa.Table:
    """Transpose rows into an Arrow table.

    Args:
        table: Table the rows belong to.
        rows: Rows of that table, in output order.
        encoding: Geometry column encoding.

    Returns:
        PyArrow Table with ``arrow_schema(table, encoding)``.
    """
    schema = arrow_schema(table, encoding)
    encode = to_wkb if encoding == GeometryEncoding.WKB else to_wkt
    columns = list(zip(*rows)) if rows else [() for _ in schema]

    arrays = []
    for field, (_, dtype), values in zip(schema, COLUMNS[table], columns):
        if dtype is None:
            arrays.append(pa.array(encode(values), type=field.type))
        else:
            arrays.append(pa.array(values, type=field.type))
    return pa.Table.from_arrays(arrays, schema=schema)
