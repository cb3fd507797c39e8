"""Parquet output through pyarrow.parquet.ParquetWriter.

Geometry columns are stored as WKB. Incoming batches are buffered into row
groups of ``row_group_rows`` rows.
"""

from __future__ import annotations

import re
from pathlib import Path

import pyarrow as pa
import pyarrow.parquet as pq

from spatialbench.cardinality import TableName
from spatialbench.errors import ConfigurationError
from spatialbench.generators.base import RowBatch
from spatialbench.schemas.arrow import GeometryEncoding, arrow_schema
from spatialbench.writers.base import FileSink

PARQUET_CODECS = frozenset({"none", "snappy", "gzip", "brotli", "zstd", "lz4"})
DEFAULT_ROW_GROUP_ROWS = 131_072

_COMPRESSION_PATTERN = re.compile(r"^(?P<codec>[a-z0-9]+)(?:\((?P<level>-?\d+)\))?$")


def parse_compression(value: str) -> tuple[str, int | None]:
    """Parse ``codec`` or ``codec(level)``, e.g. ``zstd(3)``.

    Raises:
        ConfigurationError: If the codec is unknown or the level is malformed.
    """
    match = _COMPRESSION_PATTERN.match(value.strip().lower())
    if match is None or match.group("codec") not in PARQUET_CODECS:
        raise ConfigurationError(
            f"Unknown parquet compression '{value}'. "
            f"Available: {', '.join(sorted(PARQUET_CODECS))}",
            field_path="parquet_compression",
        )
    level = match.group("level")
    if level is not None and match.group("codec") in {"none", "snappy", "lz4"}:
        raise ConfigurationError(
            f"Compression '{match.group('codec')}' does not take a level",
            field_path="parquet_compression",
        )
    return match.group("codec"), int(level) if level is not None else None


class ParquetSink(FileSink):
    """Parquet output, one file per table part."""

    extension = "parquet"

    def __init__(
        self,
        path: str | Path,
        table: TableName,
        compression: str = "snappy",
        row_group_rows: int = DEFAULT_ROW_GROUP_ROWS,
    ) -> None:
        super().__init__(path, table)
        self.codec, self.compression_level = parse_compression(compression)
        self.row_group_rows = row_group_rows
        self.schema = arrow_schema(table, GeometryEncoding.WKB)
        self._writer: pq.ParquetWriter | None = None
        self._pending: list[pa.Table] = []
        self._pending_rows = 0

    def _open(self) -> None:
        self._writer = pq.ParquetWriter(
            str(self.tmp_path),
            self.schema,
            compression=self.codec,
            compression_level=self.compression_level,
        )

    def _flush(self) -> None:
        assert self._writer is not None
        if self._pending:
            self._writer.write_table(pa.concat_tables(self._pending))
            self._pending = []
            self._pending_rows = 0

    def _write(self, batch: RowBatch) -> None:
        if not batch.rows:
            return
        self._pending.append(batch.to_arrow(GeometryEncoding.WKB))
        self._pending_rows += len(batch)
        if self._pending_rows >= self.row_group_rows:
            self._flush()

    def _finish(self) -> None:
        if self._writer is not None:
            self._flush()
            self._writer.close()
            self._writer = None

    def _discard(self) -> None:
        self._pending = []
        self._pending_rows = 0
        if self._writer is not None:
            self._writer.close()
            self._writer = None
