"""Custom exception hierarchy for spatialbench.

This module defines the exception classes used throughout spatialbench:
- SpatialBenchError: Base exception for all spatialbench errors
- ConfigurationError: Invalid Spider config, scale factor or partition selection
- GenerationError: A row or geometry violated its postconditions
- WriteError: A writer sink failed to persist a batch

Design:
- User-facing messages are safe to display (no internal details)
- Technical details logged internally via structlog
- Configuration errors are raised before any row is generated
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)


class SpatialBenchError(Exception):
    """Base exception for spatialbench.

    All spatialbench exceptions inherit from this class. User-facing messages
    are safe to display; technical details are logged internally.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details for logging. This is
            logged internally but never shown to the user.

    Example:
        >>> raise SpatialBenchError(
        ...     "Generation failed",
        ...     internal_details="worker 3 raised ZeroDivisionError",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        """Initialize SpatialBenchError with user message and optional internal details.

        Args:
            user_message: Safe message to display to the user.
            internal_details: Technical details for internal logging only.
        """
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "spatialbench_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class ConfigurationError(SpatialBenchError):
    """Raised when configuration parsing or validation fails.

    Use this exception when:
    - A Spider config file cannot be read or parsed
    - The distribution params variant does not match the distribution type
    - Shape parameters required by the geometry type are missing
    - The affine matrix is singular, or dim is not 2
    - The scale factor or the (parts, part) selection is invalid

    Attributes:
        file_path: Path to the configuration file (if known).
        field_path: Dot-separated path to the invalid field (e.g., "trip.params").
        line_number: Line number in the file where the error occurred (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "Distribution params do not match dist_type",
        ...     file_path="spatialbench.yaml",
        ...     field_path="trip.params",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        line_number: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        """Initialize ConfigurationError with context.

        Args:
            user_message: Safe message to display to the user.
            file_path: Path to the configuration file (optional).
            field_path: Dot-separated path to the field (optional).
            line_number: Line number in the file (optional).
            internal_details: Technical details for internal logging only.
        """
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if line_number:
            context_parts.append(f"line {line_number}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path
        self.line_number = line_number


class GenerationError(SpatialBenchError):
    """Raised when a generated row violates its postconditions.

    Typical causes are a degenerate box (min == max after rounding) or a
    polygon that keeps fewer than three distinct vertices after every
    deterministic retry.

    Attributes:
        table: Name of the table being generated (filled in by the row generator).
        ordinal: Zero-based row ordinal that failed.
    """

    def __init__(
        self,
        user_message: str,
        *,
        table: str | None = None,
        ordinal: int | None = None,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message, internal_details=internal_details)
        self.table = table
        self.ordinal = ordinal

    def __str__(self) -> str:
        context_parts: list[str] = []
        if self.table:
            context_parts.append(f"table '{self.table}'")
        if self.ordinal is not None:
            context_parts.append(f"ordinal {self.ordinal}")
        if context_parts:
            return f"{self.user_message} ({', '.join(context_parts)})"
        return self.user_message


class WriteError(SpatialBenchError):
    """Raised when a writer sink cannot persist a batch.

    Attributes:
        table: Name of the table being written.
        path: Output path of the sink (if file-backed).
    """

    def __init__(
        self,
        user_message: str,
        *,
        table: str | None = None,
        path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        full_message = f"{user_message} ({path})" if path else user_message
        super().__init__(full_message, internal_details=internal_details)
        self.table = table
        self.path = path
