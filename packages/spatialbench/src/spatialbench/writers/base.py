"""Writer sink interface and shared file handling.

A WriterSink receives RowBatch objects strictly in ordinal order from one
thread. File-backed sinks write to a hidden temporary sibling of their
target path and only rename it into place on ``close()``; ``abort()``
removes the partial file.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

import pyarrow as pa
import structlog

from spatialbench.cardinality import TableName
from spatialbench.errors import WriteError
from spatialbench.generators.base import RowBatch
from spatialbench.schemas.arrow import GeometryEncoding

logger = structlog.get_logger(__name__)


class WriterSink(ABC):
    """Consumer of ordered row batches."""

    @abstractmethod
    def write_batch(self, batch: RowBatch) -> None:  # pragma: no cover - abstract method
        """Persist one batch.

        Raises:
            WriteError: If the batch cannot be written.
        """
        ...

    @abstractmethod
    def close(self) -> None:  # pragma: no cover - abstract method
        """Flush and finalize the output."""
        ...

    @abstractmethod
    def abort(self) -> None:  # pragma: no cover - abstract method
        """Discard any partial output."""
        ...


class MemorySink(WriterSink):
    """Collect batches in memory.

    Example:
        >>> sink = MemorySink()
        >>> pipeline.run(partitions, sink)
        >>> table = sink.to_arrow()
    """

    def __init__(self) -> None:
        self.batches: list[RowBatch] = []
        self.closed = False
        self.aborted = False

    def write_batch(self, batch: RowBatch) -> None:
        self.batches.append(batch)

    def close(self) -> None:
        self.closed = True

    def abort(self) -> None:
        self.aborted = True
        self.batches.clear()

    @property
    def rows(self) -> list:
        return [row for batch in self.batches for row in batch.rows]

    def to_arrow(self, encoding: GeometryEncoding = GeometryEncoding.WKB) -> pa.Table:
        """Concatenate the collected batches into one Arrow table."""
        if not self.batches:
            raise ValueError("No batches collected")
        return pa.concat_tables(batch.to_arrow(encoding) for batch in self.batches)


class FileSink(WriterSink):
    """Base class for sinks writing one file per table (or table part).

    Subclasses implement ``_open``, ``_write`` and ``_finish``.

    Attributes:
        path: Final output path.
        tmp_path: Temporary path written until ``close()``.
        rows_written: Rows persisted so far.
    """

    extension: ClassVar[str]

    def __init__(self, path: str | Path, table: TableName) -> None:
        self.path = Path(path)
        self.table = table
        self.tmp_path = self.path.with_name(f".{self.path.name}.tmp")
        self.rows_written = 0
        self._opened = False
        self._log = logger.bind(table=table.value, path=str(self.path))

    @abstractmethod
    def _open(self) -> None: ...

    @abstractmethod
    def _write(self, batch: RowBatch) -> None: ...

    @abstractmethod
    def _finish(self) -> None: ...

    def _discard(self) -> None:
        """Release open handles without finalizing."""
        self._finish()

    def _ensure_open(self) -> None:
        if not self._opened:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._open()
            self._opened = True

    def _error(self, message: str, exc: Exception) -> WriteError:
        return WriteError(
            message,
            table=self.table.value,
            path=str(self.path),
            internal_details=f"{type(exc).__name__}: {exc}",
        )

    def write_batch(self, batch: RowBatch) -> None:
        try:
            self._ensure_open()
            self._write(batch)
        except (OSError, pa.ArrowException) as exc:
            raise self._error("Failed to write batch", exc) from exc
        self.rows_written += len(batch)

    def close(self) -> None:
        try:
            self._ensure_open()
            self._finish()
            os.replace(self.tmp_path, self.path)
        except (OSError, pa.ArrowException) as exc:
            raise self._error("Failed to finalize output file", exc) from exc
        self._log.info("output_written", rows=self.rows_written)

    def abort(self) -> None:
        try:
            if self._opened:
                self._discard()
        except (OSError, pa.ArrowException) as exc:
            self._log.warning("sink_discard_failed", error=str(exc))
        finally:
            self.tmp_path.unlink(missing_ok=True)
        self._log.info("output_aborted", rows=self.rows_written)
