"""Table generation orchestration.

Turns a GenerationRequest into output files: resolves cardinalities and
Spider configs, validates the partition selection, then runs one
StreamingPipeline per table part. Every configuration problem is raised
before the first file is opened.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field

from spatialbench.cardinality import (
    DEFAULT_FIXED_ZONE_COUNT,
    TableName,
    TableSpec,
    validate_scale_factor,
    zone_policy,
)
from spatialbench.config import load_spider_configs
from spatialbench.errors import ConfigurationError
from spatialbench.generators import create_generator
from spatialbench.generators.base import RowGenerator
from spatialbench.partition import partition_for
from spatialbench.pipeline import DEFAULT_BATCH_SIZE, StreamingPipeline
from spatialbench.spider.config import SpiderConfig
from spatialbench.writers import OutputFormat, create_sink, output_path, parse_compression

logger = structlog.get_logger(__name__)

ALL_TABLES: tuple[TableName, ...] = tuple(TableName)


class GenerationRequest(BaseModel):
    """What to generate and where.

    Attributes:
        scale_factor: Dataset scale factor.
        tables: Tables to generate, in order.
        output_dir: Directory receiving the output files.
        output_format: File format.
        parts: Number of partitions per table.
        part: Single part to generate (all parts if None).
        num_threads: Worker threads per pipeline.
        batch_size: Rows per claimed batch.
        zone_policy: Zone cardinality policy name.
        fixed_zone_count: Zone rows under the fixed policy.
        parquet_compression: Parquet codec.
        config_file: Spider config file (resolution order applies if None).
    """

    model_config = ConfigDict(frozen=True)

    scale_factor: float = 1.0
    tables: tuple[TableName, ...] = ALL_TABLES
    output_dir: Path = Field(default_factory=Path.cwd)
    output_format: OutputFormat = OutputFormat.PARQUET
    parts: int = 1
    part: int | None = None
    num_threads: int = 1
    batch_size: int = DEFAULT_BATCH_SIZE
    zone_policy: str = "tiered"
    fixed_zone_count: int = DEFAULT_FIXED_ZONE_COUNT
    parquet_compression: str = "snappy"
    config_file: Path | None = None


class TableResult(BaseModel):
    """Outcome of writing one table part.

    Attributes:
        table: Table name
        part: Part number (1-based)
        parts: Total number of parts
        path: Output file
        rows: Rows written
        elapsed_seconds: Wall-clock duration
    """

    model_config = ConfigDict(frozen=True)

    table: str
    part: int
    parts: int
    path: str
    rows: int
    elapsed_seconds: float


def _selected_parts(request: GenerationRequest) -> list[int]:
    if request.part is None:
        if request.parts < 1:
            raise ConfigurationError(
                f"Number of parts must be at least 1, got {request.parts}",
                field_path="parts",
            )
        return list(range(1, request.parts + 1))
    # Validates 1 <= part <= parts
    partition_for(0, request.part, request.parts)
    return [request.part]


def prepare_generators(
    request: GenerationRequest,
    spider_configs: Mapping[str, SpiderConfig] | None = None,
) -> dict[TableName, RowGenerator]:
    """Validate ``request`` and build a generator per requested table.

    Raises:
        ConfigurationError: On any invalid setting.
    """
    validate_scale_factor(request.scale_factor)
    if not request.tables:
        raise ConfigurationError("No tables selected", field_path="tables")
    policy = zone_policy(request.zone_policy, request.fixed_zone_count)
    configs = (
        dict(spider_configs)
        if spider_configs is not None
        else load_spider_configs(request.config_file)
    )
    return {
        table: create_generator(
            TableSpec.resolve(table, request.scale_factor, policy),
            configs,
            policy,
        )
        for table in dict.fromkeys(request.tables)
    }


def generate_tables(
    request: GenerationRequest,
    spider_configs: Mapping[str, SpiderConfig] | None = None,
) -> list[TableResult]:
    """Generate the requested tables to files.

    Args:
        request: Generation request.
        spider_configs: Spider configs per spatial table; resolved from
            ``request.config_file`` (or the defaults) if omitted.

    Returns:
        One TableResult per written file, in generation order.

    Raises:
        ConfigurationError: Before any output, if the request is invalid.
        GenerationError: If a row cannot be generated.
        WriteError: If an output file cannot be written.
    """
    parts = _selected_parts(request)
    if request.output_format == OutputFormat.PARQUET:
        parse_compression(request.parquet_compression)
    generators = prepare_generators(request, spider_configs)

    log = logger.bind(scale_factor=request.scale_factor, format=request.output_format.value)
    log.info(
        "generation_started",
        tables=[table.value for table in generators],
        parts=request.parts,
        selected_parts=parts,
        threads=request.num_threads,
    )

    results: list[TableResult] = []
    for table, generator in generators.items():
        for part in parts:
            partition = partition_for(generator.row_count, part, request.parts)
            path = output_path(
                request.output_dir,
                table,
                request.output_format,
                part if request.parts > 1 else None,
            )
            sink = create_sink(
                request.output_format,
                path,
                table,
                parquet_compression=request.parquet_compression,
            )
            pipeline = StreamingPipeline(
                generator,
                num_workers=request.num_threads,
                batch_size=request.batch_size,
            )
            outcome = pipeline.run([partition], sink)
            results.append(
                TableResult(
                    table=table.value,
                    part=part,
                    parts=request.parts,
                    path=str(path),
                    rows=outcome.rows,
                    elapsed_seconds=outcome.elapsed_seconds,
                )
            )
            log.info(
                "table_part_written",
                table=table.value,
                part=part,
                rows=outcome.rows,
                path=str(path),
            )

    log.info("generation_completed", files=len(results), rows=sum(r.rows for r in results))
    return results
