"""Unit tests for table generation orchestration."""

from __future__ import annotations

from pathlib import Path

import pyarrow.parquet as pq
import pytest

from spatialbench.cardinality import TableName
from spatialbench.errors import ConfigurationError, GenerationError
from spatialbench.generate import GenerationRequest, generate_tables, prepare_generators
from spatialbench.spider.config import GeometryType, SpiderConfig
from spatialbench.spider.defaults import default_configs
from spatialbench.writers import OutputFormat

pytestmark = pytest.mark.unit


def _lines(path: Path) -> list[str]:
    return path.read_text(encoding="utf-8").splitlines()


def _request(tmp_path: Path, **kwargs: object) -> GenerationRequest:
    values: dict[str, object] = {
        "scale_factor": 0.0005,
        "output_dir": tmp_path / "out",
        "output_format": OutputFormat.TBL,
    }
    values.update(kwargs)
    return GenerationRequest.model_validate(values)


class TestGenerateTables:
    """Tests for generate_tables."""

    def test_dimension_tables_tbl(self, tmp_path: Path) -> None:
        """Every requested table gets one file with its cardinality."""
        request = _request(
            tmp_path,
            tables=(TableName.VEHICLE, TableName.DRIVER, TableName.CUSTOMER),
        )

        results = generate_tables(request, default_configs())

        out = tmp_path / "out"
        assert [r.table for r in results] == ["vehicle", "driver", "customer"]
        assert [r.rows for r in results] == [1, 1, 15]
        assert len(_lines(out / "customer.tbl")) == 15
        assert _lines(out / "customer.tbl")[0].startswith("1|")
        assert all(line.endswith("|") for line in _lines(out / "customer.tbl"))
        assert sorted(p.name for p in out.iterdir()) == [
            "customer.tbl",
            "driver.tbl",
            "vehicle.tbl",
        ]

    def test_parts_split(self, tmp_path: Path) -> None:
        """Parts cover the table contiguously with continuing keys."""
        request = _request(tmp_path, tables=(TableName.TRIP,), parts=3, batch_size=256)

        results = generate_tables(request, default_configs())

        out = tmp_path / "out"
        assert [r.path for r in results] == [str(out / f"trip.{i}.tbl") for i in (1, 2, 3)]
        assert sum(r.rows for r in results) == 3000
        keys = [
            int(line.split("|", 1)[0])
            for part in (1, 2, 3)
            for line in _lines(out / f"trip.{part}.tbl")
        ]
        assert keys == list(range(1, 3001))

    def test_single_part(self, tmp_path: Path) -> None:
        """Selecting one part writes only that part's file."""
        request = _request(tmp_path, tables=(TableName.TRIP,), parts=3, part=2)

        results = generate_tables(request, default_configs())

        out = tmp_path / "out"
        assert len(results) == 1
        assert [p.name for p in out.iterdir()] == ["trip.2.tbl"]
        assert _lines(out / "trip.2.tbl")[0].startswith("1001|")

    def test_parquet_output(self, tmp_path: Path) -> None:
        """Parquet output carries the table's rows and WKB geometry."""
        request = _request(
            tmp_path,
            tables=(TableName.CUSTOMER, TableName.ZONE),
            output_format=OutputFormat.PARQUET,
            parquet_compression="zstd(3)",
        )

        generate_tables(request, default_configs())

        customer = pq.read_table(tmp_path / "out" / "customer.parquet")
        zone = pq.read_table(tmp_path / "out" / "zone.parquet")
        assert customer.num_rows == 15
        assert customer.column("c_custkey").to_pylist() == list(range(1, 16))
        assert zone.num_rows == 59

    def test_thread_count_does_not_change_output(self, tmp_path: Path) -> None:
        """One worker and many workers produce identical files."""
        configs = default_configs()
        single = _request(
            tmp_path / "single",
            tables=(TableName.TRIP, TableName.BUILDING),
            num_threads=1,
            batch_size=97,
        )
        many = _request(
            tmp_path / "many",
            tables=(TableName.TRIP, TableName.BUILDING),
            num_threads=4,
            batch_size=97,
        )

        generate_tables(single, configs)
        generate_tables(many, configs)

        for name in ("trip.tbl", "building.tbl"):
            single_bytes = (tmp_path / "single" / "out" / name).read_bytes()
            assert single_bytes == (tmp_path / "many" / "out" / name).read_bytes()

    def test_same_seed_same_output(self, tmp_path: Path) -> None:
        """Repeated runs are byte-identical."""
        first = _request(tmp_path / "a", tables=(TableName.DRIVER, TableName.ZONE))
        second = _request(tmp_path / "b", tables=(TableName.DRIVER, TableName.ZONE))

        generate_tables(first, default_configs())
        generate_tables(second, default_configs())

        for name in ("driver.tbl", "zone.tbl"):
            assert (tmp_path / "a" / "out" / name).read_bytes() == (
                tmp_path / "b" / "out" / name
            ).read_bytes()


class TestGenerateTablesErrors:
    """Configuration and generation failures."""

    def test_part_out_of_range(self, tmp_path: Path) -> None:
        """A part beyond the part count fails before any output."""
        request = _request(tmp_path, parts=2, part=3)
        with pytest.raises(ConfigurationError):
            generate_tables(request, default_configs())
        assert not (tmp_path / "out").exists()

    def test_zero_parts(self, tmp_path: Path) -> None:
        """Zero parts is rejected."""
        with pytest.raises(ConfigurationError, match="at least 1"):
            generate_tables(_request(tmp_path, parts=0), default_configs())

    def test_unknown_compression(self, tmp_path: Path) -> None:
        """Unknown parquet codecs fail before any output."""
        request = _request(
            tmp_path,
            output_format=OutputFormat.PARQUET,
            parquet_compression="brotlix",
        )
        with pytest.raises(ConfigurationError, match="Unknown parquet compression"):
            generate_tables(request, default_configs())
        assert not (tmp_path / "out").exists()

    @pytest.mark.parametrize("scale_factor", [0.0, -1.0, float("nan")])
    def test_invalid_scale_factor(self, tmp_path: Path, scale_factor: float) -> None:
        """Non-positive or non-finite scale factors are rejected."""
        with pytest.raises(ConfigurationError):
            generate_tables(_request(tmp_path, scale_factor=scale_factor), default_configs())
        assert not (tmp_path / "out").exists()

    def test_unknown_zone_policy(self, tmp_path: Path) -> None:
        """Unknown zone policies are rejected."""
        with pytest.raises(ConfigurationError):
            prepare_generators(_request(tmp_path, zone_policy="quadratic"), default_configs())

    def test_degenerate_geometry_leaves_no_file(self, tmp_path: Path) -> None:
        """A geometry failure aborts the sink and removes partial output."""
        configs = default_configs()
        configs["building"] = SpiderConfig(
            geom_type=GeometryType.BOX,
            seed=1,
            width=1e-12,
            height=1e-12,
        )
        request = _request(tmp_path, tables=(TableName.VEHICLE, TableName.BUILDING))

        with pytest.raises(GenerationError) as exc_info:
            generate_tables(request, configs)

        out = tmp_path / "out"
        assert exc_info.value.table == "building"
        assert (out / "vehicle.tbl").exists()
        assert not (out / "building.tbl").exists()
        assert not (out / ".building.tbl.tmp").exists()


class TestPrepareGenerators:
    """Tests for prepare_generators."""

    def test_one_generator_per_table(self, tmp_path: Path) -> None:
        """Duplicate tables collapse and row counts follow the scale factor."""
        request = _request(tmp_path, tables=(TableName.TRIP, TableName.TRIP, TableName.ZONE))
        generators = prepare_generators(request, default_configs())
        assert list(generators) == [TableName.TRIP, TableName.ZONE]
        assert generators[TableName.TRIP].row_count == 3000
        assert generators[TableName.ZONE].row_count == 59

    def test_fixed_zone_policy(self, tmp_path: Path) -> None:
        """The fixed policy ignores the scale factor."""
        request = _request(
            tmp_path,
            tables=(TableName.ZONE,),
            zone_policy="fixed",
            fixed_zone_count=25,
        )
        generators = prepare_generators(request, default_configs())
        assert generators[TableName.ZONE].row_count == 25

    def test_no_tables(self, tmp_path: Path) -> None:
        """An empty table selection is rejected."""
        with pytest.raises(ConfigurationError, match="No tables"):
            prepare_generators(_request(tmp_path, tables=()), default_configs())
