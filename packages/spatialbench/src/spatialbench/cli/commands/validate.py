"""spatialbench validate command - check a Spider config file."""

from __future__ import annotations

from pathlib import Path

import click

from spatialbench.cli.output import error, print_table, success


@click.command()
@click.option(
    "-c",
    "--config",
    "file_path",
    type=click.Path(exists=False),
    default="./spatialbench.yaml",
    help="Path to the Spider config file [default: ./spatialbench.yaml]",
)
def validate(file_path: str) -> None:
    """Validate a Spider config file.

    Each of the `trip`, `building` and `zone` sections is checked against the
    Spider config schema. Errors are reported with field paths.

    Examples:

        spatialbench validate

        spatialbench validate --config path/to/spatialbench.yaml
    """
    path = Path(file_path)

    if not path.exists():
        error(f"File not found: {file_path}")
        raise SystemExit(2)

    try:
        # Import here to avoid heavy imports at CLI startup
        from spatialbench.config import SpiderConfigFile

        config_file = SpiderConfigFile.from_yaml(path)

    except FileNotFoundError:
        error(f"File not found: {file_path}")
        raise SystemExit(2) from None

    except Exception as e:
        from pydantic import ValidationError as PydanticValidationError

        from spatialbench.cli.errors import format_pydantic_error, handle_yaml_error

        if "yaml" in type(e).__module__.lower():
            handle_yaml_error(e, file_path)
        elif isinstance(e, PydanticValidationError):
            formatted = format_pydantic_error(e)
            error(f"Invalid configuration in {file_path}:\n{formatted}")
            raise SystemExit(1) from None
        else:
            error(f"Validation failed: {e}")
            raise SystemExit(1) from None

    overrides = config_file.overrides()
    if overrides:
        print_table(
            "Spider overrides",
            ["Table", "Distribution", "Geometry", "Seed"],
            [
                (table, config.dist_type.value, config.geom_type.value, config.seed)
                for table, config in overrides.items()
            ],
        )
    success("Configuration valid")
