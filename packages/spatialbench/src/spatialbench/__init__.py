"""Spatial star-schema benchmark data generator.

This package generates reproducible, geospatially realistic benchmark
datasets (Trip fact table; Customer, Driver, Vehicle, Building and Zone
dimensions) at any scale factor. Output is identical for any thread count
or partitioning.

Key Components:
- spider: deterministic geometry sampling (distributions, affine, shapes)
- cardinality: table sizes as a function of the scale factor
- generators: per-table row generators
- partition: partition and batch scheduling
- pipeline: parallel streaming pipeline with ordered output
- writers: tbl, csv and parquet sinks
- config: Spider config files and runtime settings
- generate: end-to-end orchestration

Example:
    >>> from spatialbench.generate import GenerationRequest, generate_tables
    >>>
    >>> request = GenerationRequest(scale_factor=0.01, output_dir=Path("out"))
    >>> results = generate_tables(request)
"""

from __future__ import annotations

__version__ = "0.1.0"
