"""Base row generator and shared generation utilities.

This module defines the RowGenerator base class that every table generator
implements, the RowBatch unit of work handed between pipeline stages, and
helpers for deterministic per-row randomness.

Row content is a pure function of ``(configuration, ordinal)``: generators
hold no mutable state and may be called from any thread in any order.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import ClassVar

import pyarrow as pa
import structlog
from faker import Faker

from spatialbench.cardinality import TableName, TableSpec
from spatialbench.errors import ConfigurationError, GenerationError
from spatialbench.partition import Partition, batches
from spatialbench.schemas.arrow import GeometryEncoding, rows_to_table
from spatialbench.schemas.rows import Row
from spatialbench.spider import prf

logger = structlog.get_logger(__name__)

FAKER_LOCALE = "en_US"

# Field tag reserved for reseeding Faker on each row
FAKER_STREAM = 0xFA4E

_local = threading.local()


def seeded_faker(seed: int) -> Faker:
    """Return this thread's Faker instance, reseeded with ``seed``.

    Faker instances are not thread-safe, so each thread keeps its own and
    reseeds it before every row.
    """
    fake: Faker | None = getattr(_local, "fake", None)
    if fake is None:
        fake = Faker(FAKER_LOCALE)
        _local.fake = fake
    fake.seed_instance(seed)
    return fake


@dataclass(frozen=True, slots=True)
class RowBatch:
    """Consecutive rows ``[start, start + len(rows))`` of one table."""

    table: TableName
    start: int
    rows: tuple[Row, ...]

    @property
    def end(self) -> int:
        return self.start + len(self.rows)

    def __len__(self) -> int:
        return len(self.rows)

    def to_arrow(self, encoding: GeometryEncoding = GeometryEncoding.WKB) -> pa.Table:
        """Convert the batch to an Arrow table."""
        return rows_to_table(self.table, self.rows, encoding)


class RowGenerator(ABC):
    """Abstract base class for table row generators.

    Subclasses set ``table`` and ``seed`` and implement ``generate``.

    Example:
        >>> generator = VehicleGenerator(TableSpec.resolve(TableName.VEHICLE, 1.0))
        >>> generator.generate(0).v_vehiclekey
        1
        >>> batch = generator.generate_batch(0, 50)
        >>> len(batch)
        50
    """

    table: ClassVar[TableName]
    seed: ClassVar[int]

    def __init__(self, spec: TableSpec) -> None:
        """Initialize the generator.

        Args:
            spec: Resolved cardinality of the table.

        Raises:
            ConfigurationError: If ``spec`` describes a different table.
        """
        if spec.table != self.table:
            raise ConfigurationError(
                f"{type(self).__name__} cannot generate table '{spec.table.value}'",
                field_path="table",
            )
        self.spec = spec

    @property
    def row_count(self) -> int:
        return self.spec.row_count

    @abstractmethod
    def generate(self, ordinal: int) -> Row:  # pragma: no cover - abstract method
        """Generate the row at zero-based ``ordinal``.

        Raises:
            GenerationError: If the row violates its postconditions.
        """
        ...

    def generate_batch(self, start: int, end: int) -> RowBatch:
        """Generate rows ``[start, end)``.

        Raises:
            GenerationError: With the table name filled in.
        """
        try:
            rows = tuple(self.generate(ordinal) for ordinal in range(start, end))
        except GenerationError as exc:
            if exc.table is None:
                exc.table = self.table.value
            raise
        return RowBatch(table=self.table, start=start, rows=rows)

    def generate_stream(self, partition: Partition, batch_size: int = 4096) -> Iterator[RowBatch]:
        """Sequentially yield the batches of ``partition``.

        Args:
            partition: Ordinal range to generate.
            batch_size: Rows per batch.

        Yields:
            RowBatch objects in ordinal order.
        """
        for start, end in batches(partition, batch_size):
            yield self.generate_batch(start, end)
        self._log_generation(len(partition))

    def _log_generation(self, count: int) -> None:
        logger.debug("rows_generated", table=self.table.value, count=count)

    # Deterministic per-row draws keyed by (table seed, ordinal, field)

    def _unit(self, ordinal: int, field: int) -> float:
        return prf.unit(self.seed, ordinal, field)

    def _randint(self, ordinal: int, field: int, low: int, high: int) -> int:
        return prf.randint(self.seed, ordinal, field, low, high)

    def _foreign_key(self, ordinal: int, field: int, dimension: TableName) -> int:
        """1-based key of a row in ``dimension`` referenced by row ``ordinal``."""
        return prf.reduce(self.seed, ordinal, field, self.spec.dimensions[dimension]) + 1

    def _faker(self, ordinal: int) -> Faker:
        return seeded_faker(prf.hash64(self.seed, ordinal, FAKER_STREAM))
