"""Text output formats.

- TblSink: pipe-delimited rows with a trailing ``|`` and no header
- CsvSink: comma-separated rows with a header, written through pyarrow.csv

Geometry columns are written as WKT in both formats.
"""

from __future__ import annotations

from datetime import datetime
from typing import IO, Any

import pyarrow.csv as pacsv

from spatialbench.generators.base import RowBatch
from spatialbench.schemas.arrow import (
    GeometryEncoding,
    arrow_schema,
    column_names,
    geometry_columns,
)
from spatialbench.spider.geometry import to_wkt
from spatialbench.writers.base import FileSink

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return str(value)


class TblSink(FileSink):
    """Pipe-delimited ``.tbl`` output."""

    extension = "tbl"

    _file: IO[str] | None = None
    _geometry_indices: tuple[int, ...] = ()

    def _open(self) -> None:
        geometry = set(geometry_columns(self.table))
        self._geometry_indices = tuple(
            index for index, name in enumerate(column_names(self.table)) if name in geometry
        )
        self._file = open(self.tmp_path, "w", encoding="utf-8", newline="\n")

    def _write(self, batch: RowBatch) -> None:
        assert self._file is not None
        if not batch.rows:
            return
        columns = list(zip(*batch.rows))
        for index in self._geometry_indices:
            columns[index] = tuple(to_wkt(columns[index]))
        self._file.writelines(
            "|".join(_format(value) for value in row) + "|\n" for row in zip(*columns)
        )

    def _finish(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class CsvSink(FileSink):
    """Comma-separated ``.csv`` output with a header row."""

    extension = "csv"

    _writer: pacsv.CSVWriter | None = None

    def _open(self) -> None:
        self._writer = pacsv.CSVWriter(
            str(self.tmp_path),
            arrow_schema(self.table, GeometryEncoding.WKT),
        )

    def _write(self, batch: RowBatch) -> None:
        assert self._writer is not None
        self._writer.write_table(batch.to_arrow(GeometryEncoding.WKT))

    def _finish(self) -> None:
        if self._writer is not None:
            self._writer.close()
            self._writer = None
