"""Unit tests for the exception hierarchy."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from spatialbench.errors import (
    ConfigurationError,
    GenerationError,
    SpatialBenchError,
    WriteError,
)

pytestmark = pytest.mark.unit


class TestSpatialBenchError:
    """Tests for the base exception."""

    def test_subclasses(self) -> None:
        """All errors share the base class."""
        for cls in (ConfigurationError, GenerationError, WriteError):
            assert issubclass(cls, SpatialBenchError)

    def test_internal_details_not_in_message(self) -> None:
        """Internal details are logged, not shown."""
        err = SpatialBenchError("Generation failed", internal_details="stack trace here")
        assert str(err) == "Generation failed"
        assert "stack trace" not in str(err)

    @patch("spatialbench.errors.logger")
    def test_internal_details_logged(self, mock_logger: MagicMock) -> None:
        """Internal details go to the structured log."""
        SpatialBenchError("Generation failed", internal_details="worker 3 crashed")
        mock_logger.error.assert_called_once_with(
            "spatialbench_error",
            error_type="SpatialBenchError",
            user_message="Generation failed",
            internal_details="worker 3 crashed",
        )

    @patch("spatialbench.errors.logger")
    def test_no_details_not_logged(self, mock_logger: MagicMock) -> None:
        """Errors without internal details log nothing."""
        SpatialBenchError("Generation failed")
        mock_logger.error.assert_not_called()


class TestConfigurationError:
    """Tests for ConfigurationError context."""

    def test_full_context(self) -> None:
        """File, line and field are appended to the message."""
        err = ConfigurationError(
            "Invalid Spider config",
            file_path="spatialbench.yaml",
            line_number=4,
            field_path="trip.params",
        )
        assert str(err) == (
            "Invalid Spider config (in spatialbench.yaml, line 4, field 'trip.params')"
        )
        assert err.user_message == str(err)
        assert err.field_path == "trip.params"

    def test_no_context(self) -> None:
        """Without context the message is unchanged."""
        assert str(ConfigurationError("Bad scale factor")) == "Bad scale factor"


class TestGenerationError:
    """Tests for GenerationError context."""

    def test_context_in_str(self) -> None:
        """Table and ordinal are shown."""
        err = GenerationError("Degenerate polygon", table="building", ordinal=12)
        assert str(err) == "Degenerate polygon (table 'building', ordinal 12)"

    def test_table_filled_later(self) -> None:
        """The table can be set after construction."""
        err = GenerationError("Degenerate polygon", ordinal=0)
        err.table = "zone"
        assert "table 'zone'" in str(err)
        assert "ordinal 0" in str(err)


class TestWriteError:
    """Tests for WriteError."""

    def test_path_in_message(self) -> None:
        """The output path is shown."""
        err = WriteError("Failed to write batch", table="trip", path="/tmp/trip.parquet")
        assert str(err) == "Failed to write batch (/tmp/trip.parquet)"
        assert err.table == "trip"
