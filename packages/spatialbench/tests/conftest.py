"""Shared pytest fixtures for spatialbench tests.

Provides structlog test configuration, CliRunner fixtures and small
resolved table specs.
"""

from __future__ import annotations

import sys
from collections.abc import Generator

import pytest
import structlog
from click.testing import CliRunner

from spatialbench.cardinality import TableName, TableSpec


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture.

    The CLI reconfigures logging when it runs; resetting here keeps tests
    independent of execution order.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,  # Important for test isolation
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def isolated_runner(cli_runner: CliRunner) -> Generator[CliRunner, None, None]:
    """Click test runner inside a temporary working directory."""
    with cli_runner.isolated_filesystem():
        yield cli_runner


@pytest.fixture
def small_scale() -> float:
    """Scale factor small enough for fast end-to-end generation."""
    return 0.0005


@pytest.fixture
def trip_spec(small_scale: float) -> TableSpec:
    """Trip spec at the small scale (3,000 trips)."""
    return TableSpec.resolve(TableName.TRIP, small_scale)
