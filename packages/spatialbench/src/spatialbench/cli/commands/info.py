"""spatialbench info command - show table cardinalities and presets."""

from __future__ import annotations

import click

from spatialbench.cli.output import info as print_info
from spatialbench.cli.output import print_table


@click.command()
@click.option(
    "-s",
    "--scale-factor",
    type=float,
    default=1.0,
    show_default=True,
    help="Scale factor.",
)
@click.option(
    "--zone-policy",
    type=click.Choice(["tiered", "fixed"]),
    default="tiered",
    show_default=True,
    help="Zone cardinality policy.",
)
def info(scale_factor: float, zone_policy: str) -> None:
    """Show row counts per table and the available Spider presets.

    Examples:

        spatialbench info

        spatialbench info -s 100 --zone-policy fixed
    """
    from spatialbench.cardinality import TableName, row_count
    from spatialbench.cardinality import zone_policy as make_zone_policy
    from spatialbench.cli.errors import handle_spatialbench_error
    from spatialbench.errors import SpatialBenchError
    from spatialbench.spider.defaults import PRESETS

    try:
        policy = make_zone_policy(zone_policy)
        counts = [(table.value, row_count(table, scale_factor, policy)) for table in TableName]
    except SpatialBenchError as e:
        handle_spatialbench_error(e)

    print_table(
        f"Cardinalities at scale factor {scale_factor}",
        ["Table", "Rows"],
        [(table, f"{count:,}") for table, count in counts],
    )
    print_table(
        "Spider presets",
        ["Preset", "Distribution", "Geometry"],
        [
            (name, config.dist_type.value, config.geom_type.value)
            for name, config in sorted(PRESETS.items())
        ],
    )
    print_info("Use a preset name as a section value in spatialbench.yaml.")
