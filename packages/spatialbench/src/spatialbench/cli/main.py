"""CLI entry point for spatialbench.

Defines the main command group. Subcommands are imported only when invoked,
so ``spatialbench --help`` stays fast despite pyarrow and shapely imports.
"""

from __future__ import annotations

import importlib
from collections.abc import Sequence
from typing import Any

import click
import rich_click as rclick

from spatialbench import __version__
from spatialbench.cli.output import set_no_color

rclick.rich_click.TEXT_MARKUP = "markdown"
rclick.rich_click.SHOW_ARGUMENTS = True
rclick.rich_click.GROUP_ARGUMENTS_OPTIONS = True


class CommandGroup(rclick.RichGroup):
    """Command group whose subcommands live in ``spatialbench.cli.commands``.

    Each subcommand is a module of that package exposing a click command of
    the same name; the module is imported the first time the command is
    resolved. Commands are listed in workflow order (generate, validate,
    info) rather than alphabetically.
    """

    package = "spatialbench.cli.commands"

    def __init__(self, *args: Any, command_names: Sequence[str] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.command_names = tuple(command_names)
        self._loaded: dict[str, click.Command] = {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.command_names)

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name not in self.command_names:
            return None
        if cmd_name not in self._loaded:
            module = importlib.import_module(f"{self.package}.{cmd_name}")
            self._loaded[cmd_name] = getattr(module, cmd_name)
        return self._loaded[cmd_name]


COMMANDS = ("generate", "validate", "info")


@click.command(cls=CommandGroup, command_names=COMMANDS)
@click.version_option(version=__version__, prog_name="spatialbench")
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable colored output.",
    is_eager=True,
    expose_value=False,
    callback=lambda ctx, param, value: set_no_color(value) if value else None,
)
def cli() -> None:
    """SpatialBench - spatial star-schema benchmark data generator.

    Generate reproducible Trip, Customer, Driver, Vehicle, Building and Zone
    tables at any scale factor.

    **Getting Started:**

    - `spatialbench generate -s 1 -f parquet -o out/` - Generate every table
    - `spatialbench generate -T trip -p 8 --part 3` - Generate one partition
    - `spatialbench validate -c spatialbench.yaml` - Check a Spider config file
    - `spatialbench info -s 10` - Show table cardinalities
    """
    pass


if __name__ == "__main__":
    cli()
