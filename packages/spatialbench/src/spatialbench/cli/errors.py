"""CLI error handling for spatialbench.

Wraps spatialbench exceptions in CLIError so that users see a short message
and the process exits with a meaningful code.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import click
from pydantic import ValidationError as PydanticValidationError

from spatialbench.cli import output
from spatialbench.errors import ConfigurationError, SpatialBenchError

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails


# Exit codes
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Invalid config, scale factor or partition selection
EXIT_SYSTEM_ERROR = 2  # Generation or write failure, missing files


class CLIError(click.ClickException):
    """CLI-specific exception with exit code support.

    Attributes:
        message: User-facing error message.
        exit_code: Exit code for the CLI (default: 1).
    """

    def __init__(self, message: str, exit_code: int = EXIT_USER_ERROR) -> None:
        super().__init__(message)
        self.exit_code = exit_code

    def show(self, file: object = None) -> None:
        """Display the error message using Rich formatting.

        Args:
            file: Output file (unused, for Click compatibility).
        """
        output.error(self.format_message())


def format_pydantic_error(err: PydanticValidationError) -> str:
    """Format Pydantic validation error into user-friendly message.

    Example:
        >>> format_pydantic_error(err)
        "Validation failed:\\n  - trip.params: dist_type 'bit' requires params..."
    """
    errors: list[ErrorDetails] = err.errors()
    lines = ["Validation failed:"]

    for e in errors:
        loc = ".".join(str(x) for x in e["loc"])
        lines.append(f"  - {loc}: {e['msg']}")

    return "\n".join(lines)


def handle_yaml_error(err: Exception, file_path: str) -> NoReturn:
    """Raise CLIError for a YAML syntax error, with line information when available."""
    error_msg = str(err)
    mark = getattr(err, "problem_mark", None)
    if mark is not None:
        error_msg = (
            f"YAML syntax error at line {mark.line + 1}, column {mark.column + 1}: "
            f"{getattr(err, 'problem', err)}"
        )

    raise CLIError(f"Invalid YAML in {file_path}: {error_msg}")


def handle_spatialbench_error(err: SpatialBenchError) -> NoReturn:
    """Raise CLIError for a spatialbench exception.

    Configuration errors are user errors; generation and write failures are
    system errors.
    """
    exit_code = EXIT_USER_ERROR if isinstance(err, ConfigurationError) else EXIT_SYSTEM_ERROR
    raise CLIError(str(err), exit_code=exit_code) from err
