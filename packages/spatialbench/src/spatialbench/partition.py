"""Partition and batch scheduling.

A table of ``total`` rows split into ``parts`` partitions assigns part ``p``
(1-based) the half-open ordinal range
``[floor((p - 1) * total / parts), floor(p * total / parts))``. Partitions are
disjoint, contiguous, cover every ordinal and differ in size by at most one.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from spatialbench.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class Partition:
    """Half-open ordinal range ``[start, end)`` owned by part ``part``."""

    part: int
    start: int
    end: int

    def __len__(self) -> int:
        return self.end - self.start

    def __contains__(self, ordinal: object) -> bool:
        return isinstance(ordinal, int) and self.start <= ordinal < self.end


def _validate(total_rows: int, parts: int) -> None:
    if total_rows < 0:
        raise ConfigurationError(
            f"Row count must not be negative, got {total_rows}",
            field_path="total_rows",
        )
    if parts < 1:
        raise ConfigurationError(
            f"Number of parts must be at least 1, got {parts}",
            field_path="parts",
        )


def partition_for(total_rows: int, part: int, parts: int) -> Partition:
    """Return partition ``part`` of ``parts``.

    Raises:
        ConfigurationError: If ``parts < 1`` or ``part`` is outside ``[1, parts]``.
    """
    _validate(total_rows, parts)
    if not 1 <= part <= parts:
        raise ConfigurationError(
            f"Part must be between 1 and {parts}, got {part}",
            field_path="part",
        )
    return Partition(
        part=part,
        start=(part - 1) * total_rows // parts,
        end=part * total_rows // parts,
    )


def partitions(total_rows: int, parts: int) -> list[Partition]:
    """Split ``total_rows`` into ``parts`` partitions.

    Example:
        >>> [(p.start, p.end) for p in partitions(10, 3)]
        [(0, 3), (3, 6), (6, 10)]
    """
    _validate(total_rows, parts)
    return [partition_for(total_rows, part, parts) for part in range(1, parts + 1)]


def batches(partition: Partition, batch_size: int) -> Iterator[tuple[int, int]]:
    """Yield the ``(start, end)`` batch ranges of ``partition`` in order."""
    if batch_size < 1:
        raise ConfigurationError(
            f"Batch size must be at least 1, got {batch_size}",
            field_path="batch_size",
        )
    for start in range(partition.start, partition.end, batch_size):
        yield start, min(start + batch_size, partition.end)


def batch_count(partition: Partition, batch_size: int) -> int:
    """Number of batches ``batches(partition, batch_size)`` yields."""
    return -(-len(partition) // batch_size)
