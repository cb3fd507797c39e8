"""Writer sinks for generated tables.

Key Components:
- base: WriterSink interface, FileSink temp-file handling, MemorySink
- text: TblSink and CsvSink (WKT geometry)
- parquet: ParquetSink (WKB geometry)

Example:
    >>> from spatialbench.writers import OutputFormat, create_sink
    >>> sink = create_sink(OutputFormat.PARQUET, Path("out"), TableName.TRIP)
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from spatialbench.cardinality import TableName
from spatialbench.writers.base import FileSink, MemorySink, WriterSink
from spatialbench.writers.parquet import ParquetSink, parse_compression
from spatialbench.writers.text import CsvSink, TblSink


class OutputFormat(str, Enum):
    """Supported output file formats."""

    TBL = "tbl"
    CSV = "csv"
    PARQUET = "parquet"


def output_path(
    output_dir: Path,
    table: TableName,
    fmt: OutputFormat,
    part: int | None = None,
) -> Path:
    """Path of a table's output file.

    ``<table>.<ext>`` for a whole table, ``<table>.<part>.<ext>`` for one part.
    """
    if part is None:
        return output_dir / f"{table.value}.{fmt.value}"
    return output_dir / f"{table.value}.{part}.{fmt.value}"


def create_sink(
    fmt: OutputFormat,
    path: Path,
    table: TableName,
    parquet_compression: str = "snappy",
) -> FileSink:
    """Create a file sink writing ``table`` to ``path`` in ``fmt``."""
    if fmt == OutputFormat.TBL:
        return TblSink(path, table)
    if fmt == OutputFormat.CSV:
        return CsvSink(path, table)
    return ParquetSink(path, table, compression=parquet_compression)


__all__ = [
    "CsvSink",
    "FileSink",
    "MemorySink",
    "OutputFormat",
    "ParquetSink",
    "TblSink",
    "WriterSink",
    "create_sink",
    "output_path",
    "parse_compression",
]
