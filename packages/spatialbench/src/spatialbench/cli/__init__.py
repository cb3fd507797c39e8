"""Command-line interface for spatialbench.

Commands:
- generate: write benchmark tables to tbl, csv or parquet files
- validate: check a Spider config file
- info: show table cardinalities and available presets
"""

from __future__ import annotations

from spatialbench import __version__

__all__ = ["__version__"]
