"""End-to-end test: scraped CSV batches to a clean Parquet file."""

from __future__ import annotations

from pathlib import Path

import polars as pl
import pytest

from src.common.config import NormalizerConfig
from src.normalizer.corrections import CorrectionRegistry, RecordKey, ReplaceDerivedValue
from src.normalizer.records import RawResultRecord
from src.normalizer.schemas import CLEAN_RESULT_SCHEMA, SOURCE_COLUMN_MAP
from src.pipeline.__main__ import main
from src.pipeline.normalizer import ResultNormalizer, to_raw
from src.pipeline.orchestrator import PipelineOrchestrator

_HEADER_BY_FIELD = {v: k for k, v in SOURCE_COLUMN_MAP.items()}


@pytest.fixture
def data_dir(tmp_path: Path, mixed_batch: list[RawResultRecord]) -> Path:
    """Mixed batch split over two scraped CSV files."""
    rows = [
        {_HEADER_BY_FIELD[k]: str(v) for k, v in vars(record).items()}
        for record in mixed_batch
    ]
    raw_dir = tmp_path / "raw"
    raw_dir.mkdir()
    pl.DataFrame(rows[:5]).write_csv(raw_dir / "batch_a.csv")
    pl.DataFrame(rows[5:]).write_csv(raw_dir / "batch_b.csv")
    return raw_dir


class TestPipelineEndToEnd:
    """Full pipeline: load, normalize, validate, write."""

    def test_run_full(
        self, data_dir: Path, tmp_path: Path, normalizer: ResultNormalizer
    ) -> None:
        output = tmp_path / "processed" / "results.parquet"
        orchestrator = PipelineOrchestrator(
            data_dir=data_dir, output_path=output, normalizer=normalizer
        )
        summary = orchestrator.run_full()

        assert summary["input_rows"] == 10
        assert summary["clean_rows"] == 6
        assert summary["dropped"] == {"discipline": 1, "cancelled": 2, "currency_format": 1}
        assert summary["validation_errors"] == []
        assert summary["output"] == str(output)

        df = pl.read_parquet(output)
        assert df.columns == list(CLEAN_RESULT_SCHEMA)
        assert len(df) == 6
        shifted = df.filter(pl.col("horse") == "Shifted").row(0, named=True)
        assert shifted["pace_seconds"] is None
        assert shifted["pace_string"] == "0.31,2"

    def test_dry_run_writes_nothing(
        self, data_dir: Path, tmp_path: Path, normalizer: ResultNormalizer
    ) -> None:
        output = tmp_path / "processed" / "results.parquet"
        summary = PipelineOrchestrator(
            data_dir=data_dir, output_path=output, normalizer=normalizer
        ).run_full(dry_run=True)

        assert summary["output"] is None
        assert not output.exists()

    def test_validation_findings_in_summary(self, data_dir: Path, tmp_path: Path) -> None:
        registry = CorrectionRegistry(
            [ReplaceDerivedValue(RecordKey(30001, "3"), "odds_decimal", 0.0)]
        )
        normalizer = ResultNormalizer(registry=registry, config=NormalizerConfig())
        summary = PipelineOrchestrator(
            data_dir=data_dir, output_path=tmp_path / "x.parquet", normalizer=normalizer
        ).run_full(dry_run=True)

        assert summary["validation_errors"] == [
            "Column 'odds_decimal' has 4 out-of-range values"
        ]

    def test_all_rows_dropped_reported(self, tmp_path: Path) -> None:
        raw_dir = tmp_path / "raw"
        raw_dir.mkdir()
        (raw_dir / "batch.csv").write_text(
            "Evenement,Koersinfo,Paard\n1,Vlakkoers - 1600m,Flat Runner\n",
            encoding="utf-8",
        )
        summary = PipelineOrchestrator(
            data_dir=raw_dir,
            output_path=tmp_path / "x.parquet",
            normalizer=ResultNormalizer(config=NormalizerConfig()),
        ).run_full(dry_run=True)

        assert summary["clean_rows"] == 0
        assert summary["dropped"] == {"discipline": 1}
        assert summary["validation_errors"] == ["DataFrame has no rows"]

    def test_stage_order_enforced(self, data_dir: Path, tmp_path: Path) -> None:
        orchestrator = PipelineOrchestrator(data_dir=data_dir, output_path=tmp_path / "x.parquet")
        with pytest.raises(RuntimeError, match="import_data"):
            orchestrator.normalize()

    def test_rerun_on_clean_output_is_noop(
        self, data_dir: Path, tmp_path: Path, normalizer: ResultNormalizer
    ) -> None:
        orchestrator = PipelineOrchestrator(
            data_dir=data_dir, output_path=tmp_path / "x.parquet", normalizer=normalizer
        )
        orchestrator.import_data()
        first = orchestrator.normalize()

        second = normalizer.normalize([to_raw(r) for r in first.records])
        assert second.dropped_count == 0
        assert second.records == first.records

    def test_cli(self, data_dir: Path, tmp_path: Path) -> None:
        output = tmp_path / "cli" / "results.parquet"
        exit_code = main(["--data-dir", str(data_dir), "--output", str(output)])

        assert exit_code == 0
        assert len(pl.read_parquet(output)) == 6
