"""Streaming generation pipeline.

This module runs a RowGenerator over one or more partitions with a pool of
worker threads and hands the resulting batches to a WriterSink in strict
ordinal order.

Architecture:
- BatchCursor: per-partition claim counter; workers claim fixed-size batches
- ReorderBuffer: bounded map of finished batches keyed by sequence number;
  the caller's thread takes them in order and writes them to the sink
- StreamingPipeline: state machine, worker pool, failure handling

Lifecycle:
    IDLE -> SCHEDULING -> RUNNING -> DRAINING -> COMPLETED
                 \\            \\          \\
                  +-----------+----------+---> FAILED

Claims are handed out in increasing sequence order and the buffer admits a
batch only while it is fewer than ``capacity`` positions ahead of the next
batch to write, so the batch at the head can always be inserted and the
pipeline cannot deadlock. Memory stays bounded by ``capacity`` buffered
batches plus one in-flight batch per worker.

On the first error (generation or write), workers stop claiming, blocked
workers are released, the sink is aborted and the error is re-raised from
``run``.
"""

from __future__ import annotations

import enum
import os
import threading
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import structlog
from pydantic import BaseModel, ConfigDict

from spatialbench.errors import ConfigurationError, GenerationError, SpatialBenchError
from spatialbench.generators.base import RowBatch, RowGenerator
from spatialbench.partition import Partition, batch_count
from spatialbench.writers.base import WriterSink

logger = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 4096


class PipelineState(enum.Enum):
    """State of a StreamingPipeline.

    Attributes:
        IDLE: Created, not yet run
        SCHEDULING: Building batch cursors for the partitions
        RUNNING: Workers generating, batches being written in order
        DRAINING: Every batch written; waiting for workers and closing the sink
        COMPLETED: Output finalized
        FAILED: A generation or write error ended the run
    """

    IDLE = "idle"
    SCHEDULING = "scheduling"
    RUNNING = "running"
    DRAINING = "draining"
    COMPLETED = "completed"
    FAILED = "failed"


_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.SCHEDULING}),
    PipelineState.SCHEDULING: frozenset({PipelineState.RUNNING, PipelineState.FAILED}),
    PipelineState.RUNNING: frozenset({PipelineState.DRAINING, PipelineState.FAILED}),
    PipelineState.DRAINING: frozenset({PipelineState.COMPLETED, PipelineState.FAILED}),
    PipelineState.COMPLETED: frozenset(),
    PipelineState.FAILED: frozenset(),
}


class PipelineStateError(Exception):
    """Raised when a pipeline is used outside its lifecycle.

    Raised when:
    - run() is called on a pipeline that has already run
    """

    pass


@dataclass(frozen=True, slots=True)
class BatchClaim:
    """A batch assigned to a worker."""

    sequence: int
    start: int
    end: int


class BatchCursor:
    """Hands out the batches of one partition in order.

    Args:
        partition: Ordinal range to cover.
        batch_size: Rows per batch.
        first_sequence: Sequence number of the partition's first batch.
    """

    def __init__(self, partition: Partition, batch_size: int, first_sequence: int) -> None:
        self.partition = partition
        self.batch_size = batch_size
        self.first_sequence = first_sequence
        self._next_start = partition.start
        self._lock = threading.Lock()

    def claim(self) -> BatchClaim | None:
        """Claim the next batch, or None once the partition is exhausted."""
        with self._lock:
            start = self._next_start
            if start >= self.partition.end:
                return None
            end = min(start + self.batch_size, self.partition.end)
            self._next_start = end
        sequence = self.first_sequence + (start - self.partition.start) // self.batch_size
        return BatchClaim(sequence=sequence, start=start, end=end)


class ReorderBuffer:
    """Bounded buffer releasing batches in sequence order.

    ``put`` blocks while the batch is ``capacity`` or more positions ahead of
    the head; ``take`` blocks until the head batch arrives. ``cancel`` wakes
    every waiter and makes both return a failure value.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ConfigurationError(
                f"Reorder buffer capacity must be at least 1, got {capacity}",
                field_path="reorder_capacity",
            )
        self.capacity = capacity
        self.high_water = 0
        self._pending: dict[int, RowBatch] = {}
        self._head = 0
        self._cancelled = False
        self._cond = threading.Condition()

    @property
    def head(self) -> int:
        """Sequence number of the next batch ``take`` returns."""
        with self._cond:
            return self._head

    def put(self, sequence: int, batch: RowBatch) -> bool:
        """Insert a finished batch.

        Returns:
            False if the buffer was cancelled (the batch is dropped).
        """
        with self._cond:
            while not self._cancelled and sequence >= self._head + self.capacity:
                self._cond.wait()
            if self._cancelled:
                return False
            self._pending[sequence] = batch
            self.high_water = max(self.high_water, len(self._pending))
            self._cond.notify_all()
            return True

    def take(self) -> RowBatch | None:
        """Remove and return the head batch, or None if cancelled."""
        with self._cond:
            while not self._cancelled and self._head not in self._pending:
                self._cond.wait()
            if self._cancelled:
                return None
            batch = self._pending.pop(self._head)
            self._head += 1
            self._cond.notify_all()
            return batch

    def cancel(self) -> None:
        with self._cond:
            self._cancelled = True
            self._pending.clear()
            self._cond.notify_all()


class PipelineResult(BaseModel):
    """Result of a pipeline run.

    Attributes:
        table: Table generated
        rows: Rows written to the sink
        batches: Batches written to the sink
        partitions: Number of partitions covered
        workers: Worker threads used
        elapsed_seconds: Wall-clock duration of the run
    """

    model_config = ConfigDict(frozen=True)

    table: str
    rows: int
    batches: int
    partitions: int
    workers: int
    elapsed_seconds: float


class StreamingPipeline:
    """Generate partitions in parallel and write them in order.

    Output is identical for any ``num_workers`` and ``batch_size``.

    Example:
        >>> generator = create_generator(TableSpec.resolve(TableName.TRIP, 0.01))
        >>> pipeline = StreamingPipeline(generator, num_workers=8)
        >>> result = pipeline.run(partitions(generator.row_count, 1), sink)
        >>> result.rows
        60000
    """

    def __init__(
        self,
        generator: RowGenerator,
        *,
        num_workers: int | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        reorder_capacity: int | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            generator: Row generator for the table.
            num_workers: Worker threads (defaults to the CPU count).
            batch_size: Rows per claimed batch.
            reorder_capacity: Reorder window in batches (defaults to num_workers).

        Raises:
            ConfigurationError: If any size is smaller than 1.
        """
        workers = num_workers if num_workers is not None else (os.cpu_count() or 1)
        if workers < 1:
            raise ConfigurationError(
                f"Number of workers must be at least 1, got {workers}",
                field_path="num_threads",
            )
        if batch_size < 1:
            raise ConfigurationError(
                f"Batch size must be at least 1, got {batch_size}",
                field_path="batch_size",
            )
        self.generator = generator
        self.num_workers = workers
        self.batch_size = batch_size
        self.reorder_capacity = reorder_capacity if reorder_capacity is not None else workers
        if self.reorder_capacity < 1:
            raise ConfigurationError(
                f"Reorder capacity must be at least 1, got {self.reorder_capacity}",
                field_path="reorder_capacity",
            )

        self._state = PipelineState.IDLE
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._error: BaseException | None = None
        self._buffer: ReorderBuffer | None = None
        self._log = logger.bind(table=generator.table.value)

    @property
    def state(self) -> PipelineState:
        with self._lock:
            return self._state

    def _transition(self, new_state: PipelineState) -> None:
        with self._lock:
            if new_state not in _TRANSITIONS[self._state]:
                raise PipelineStateError(
                    f"Cannot move pipeline from {self._state.value} to {new_state.value}"
                )
            self._state = new_state
        self._log.debug("pipeline_state_changed", state=new_state.value)

    def _fail(self, exc: BaseException) -> None:
        with self._lock:
            if self._error is None:
                self._error = exc
            self._cancelled.set()
            buffer = self._buffer
        if buffer is not None:
            buffer.cancel()

    def cancel(self) -> None:
        """Request cancellation; ``run`` stops at the next batch boundary."""
        self._fail(GenerationError("Generation cancelled", table=self.generator.table.value))

    def _work(self, cursors: Sequence[BatchCursor], buffer: ReorderBuffer) -> None:
        for cursor in cursors:
            while not self._cancelled.is_set():
                claim = cursor.claim()
                if claim is None:
                    break
                try:
                    batch = self.generator.generate_batch(claim.start, claim.end)
                except Exception as exc:
                    # Re-raised from run() on the caller's thread
                    self._fail(exc)
                    return
                if not buffer.put(claim.sequence, batch):
                    return

    def run(self, partitions: Sequence[Partition], sink: WriterSink) -> PipelineResult:
        """Generate ``partitions`` in order into ``sink``.

        Args:
            partitions: Ordinal ranges to generate, written in the given order.
            sink: Destination of the ordered batches; closed on success and
                aborted on failure.

        Returns:
            PipelineResult with row and batch counts.

        Raises:
            GenerationError: If a row could not be generated.
            WriteError: If the sink failed.
            PipelineStateError: If the pipeline has already run.
        """
        self._transition(PipelineState.SCHEDULING)
        started = time.perf_counter()

        cursors: list[BatchCursor] = []
        total_batches = 0
        for partition in partitions:
            cursors.append(BatchCursor(partition, self.batch_size, total_batches))
            total_batches += batch_count(partition, self.batch_size)
        buffer = ReorderBuffer(self.reorder_capacity)
        with self._lock:
            self._buffer = buffer
        if self._cancelled.is_set():
            # cancel() ran before the buffer existed
            buffer.cancel()

        self._log.info(
            "pipeline_started",
            partitions=len(cursors),
            batches=total_batches,
            workers=self.num_workers,
            batch_size=self.batch_size,
        )
        self._transition(PipelineState.RUNNING)

        rows = 0
        written = 0
        executor = ThreadPoolExecutor(
            max_workers=self.num_workers,
            thread_name_prefix=f"spatialbench-{self.generator.table.value}",
        )
        try:
            futures = [
                executor.submit(self._work, cursors, buffer) for _ in range(self.num_workers)
            ]
            while written < total_batches:
                batch = buffer.take()
                if batch is None:
                    break
                sink.write_batch(batch)
                rows += len(batch)
                written += 1
            if not self._cancelled.is_set():
                self._transition(PipelineState.DRAINING)
                for future in futures:
                    future.result()
                sink.close()
        except BaseException as exc:
            self._fail(exc)
        finally:
            executor.shutdown(wait=True)

        elapsed = time.perf_counter() - started
        error = self._error
        if error is not None:
            sink.abort()
            self._transition(PipelineState.FAILED)
            self._log.error(
                "pipeline_failed",
                error_type=type(error).__name__,
                error=str(error),
                rows_written=rows,
                elapsed_seconds=round(elapsed, 3),
            )
            if isinstance(error, SpatialBenchError) or not isinstance(error, Exception):
                raise error
            raise GenerationError(
                "Row generation failed",
                table=self.generator.table.value,
                internal_details=f"{type(error).__name__}: {error}",
            ) from error

        self._transition(PipelineState.COMPLETED)
        self._log.info(
            "pipeline_completed",
            rows=rows,
            batches=written,
            reorder_high_water=buffer.high_water,
            elapsed_seconds=round(elapsed, 3),
        )
        return PipelineResult(
            table=self.generator.table.value,
            rows=rows,
            batches=written,
            partitions=len(cursors),
            workers=self.num_workers,
            elapsed_seconds=elapsed,
        )
