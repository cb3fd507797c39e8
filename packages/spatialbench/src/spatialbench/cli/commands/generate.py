"""spatialbench generate command - write benchmark tables to files."""

from __future__ import annotations

from pathlib import Path

import click

from spatialbench.cli.errors import (
    EXIT_USER_ERROR,
    CLIError,
    format_pydantic_error,
    handle_spatialbench_error,
)
from spatialbench.cli.output import print_table, success

# Single-letter table aliases
TABLE_ALIASES = {
    "V": "vehicle",
    "d": "driver",
    "c": "customer",
    "T": "trip",
    "b": "building",
    "z": "zone",
}


def parse_tables(value: str) -> list[str]:
    """Parse a comma-separated table list (names, aliases or ``all``).

    Raises:
        CLIError: If a name is not a known table.
    """
    from spatialbench.cardinality import TableName

    names = [item.strip() for item in value.split(",") if item.strip()]
    if not names or names == ["all"]:
        return [table.value for table in TableName]

    known = {table.value for table in TableName}
    tables: list[str] = []
    for name in names:
        table = TABLE_ALIASES.get(name, name.lower())
        if table not in known:
            raise CLIError(
                f"Unknown table '{name}'. Available: {', '.join(t.value for t in TableName)}",
                exit_code=EXIT_USER_ERROR,
            )
        if table not in tables:
            tables.append(table)
    return tables


def _log_level(verbose: int, default: str) -> str:
    if verbose >= 2:
        return "DEBUG"
    if verbose == 1:
        return "INFO"
    return default


@click.command()
@click.option(
    "-s",
    "--scale-factor",
    type=float,
    default=1.0,
    show_default=True,
    help="Scale factor (Trip = 6,000,000 x SF rows).",
)
@click.option(
    "-T",
    "--tables",
    default="all",
    show_default=True,
    help=(
        "Comma-separated tables or aliases "
        "(V=vehicle, d=driver, c=customer, T=trip, b=building, z=zone)."
    ),
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["tbl", "csv", "parquet"]),
    default="parquet",
    show_default=True,
    help="Output file format.",
)
@click.option(
    "-o",
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Output directory.",
)
@click.option(
    "-p",
    "--parts",
    type=int,
    default=1,
    show_default=True,
    help="Number of partitions per table.",
)
@click.option(
    "--part",
    type=int,
    default=None,
    help="Generate only this partition (1-based). All partitions if omitted.",
)
@click.option(
    "-n",
    "--num-threads",
    type=int,
    default=None,
    help="Worker threads [default: CPU count or SPATIALBENCH_NUM_THREADS].",
)
@click.option(
    "--batch-size",
    type=int,
    default=None,
    help="Rows per batch [default: 4096 or SPATIALBENCH_BATCH_SIZE].",
)
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Spider config file [default: ./spatialbench.yaml if present].",
)
@click.option(
    "--zone-policy",
    type=click.Choice(["tiered", "fixed"]),
    default=None,
    help="Zone cardinality policy [default: tiered].",
)
@click.option(
    "--parquet-compression",
    default=None,
    help="Parquet codec, e.g. snappy, zstd or zstd(3) [default: snappy].",
)
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log renderer.",
)
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v info, -vv debug).")
def generate(
    scale_factor: float,
    tables: str,
    output_format: str,
    output_dir: Path,
    parts: int,
    part: int | None,
    num_threads: int | None,
    batch_size: int | None,
    config_file: Path | None,
    zone_policy: str | None,
    parquet_compression: str | None,
    log_format: str | None,
    verbose: int,
) -> None:
    """Generate benchmark tables.

    Output files are named `<table>.<format>`, or `<table>.<part>.<format>`
    when `--parts` is greater than 1. Output is identical for any thread
    count.

    Examples:

        spatialbench generate -s 1 -f parquet -o out/

        spatialbench generate -s 10 -T trip,building -p 8 --part 3
    """
    # Import here to keep CLI startup fast
    from pydantic import ValidationError as PydanticValidationError

    from spatialbench.config import GenerationSettings
    from spatialbench.errors import SpatialBenchError
    from spatialbench.generate import GenerationRequest, generate_tables
    from spatialbench.observability import configure_logging
    from spatialbench.writers import OutputFormat

    try:
        settings = GenerationSettings()
    except PydanticValidationError as e:
        raise CLIError(
            f"Invalid SPATIALBENCH_* environment settings:\n{format_pydantic_error(e)}",
            exit_code=EXIT_USER_ERROR,
        ) from None

    try:
        configure_logging(
            log_level=_log_level(verbose, settings.log_level),
            json_format=(log_format or settings.log_format) == "json",
        )
    except ValueError as e:
        raise CLIError(f"Invalid SPATIALBENCH_LOG_LEVEL: {e}", exit_code=EXIT_USER_ERROR) from None

    request = GenerationRequest(
        scale_factor=scale_factor,
        tables=tuple(parse_tables(tables)),
        output_dir=output_dir,
        output_format=OutputFormat(output_format),
        parts=parts,
        part=part,
        num_threads=num_threads if num_threads is not None else settings.num_threads,
        batch_size=batch_size if batch_size is not None else settings.batch_size,
        zone_policy=zone_policy or settings.zone_policy,
        fixed_zone_count=settings.fixed_zone_count,
        parquet_compression=parquet_compression or settings.parquet_compression,
        config_file=config_file or settings.config_file,
    )

    try:
        results = generate_tables(request)
    except SpatialBenchError as e:
        handle_spatialbench_error(e)

    print_table(
        "Generated tables",
        ["File", "Rows", "Seconds"],
        [(r.path, f"{r.rows:,}", f"{r.elapsed_seconds:.2f}") for r in results],
    )
    success(f"Generated {len(results)} file(s) at scale factor {scale_factor}")
