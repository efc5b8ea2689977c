"""Pipeline orchestrator for a full normalization run.

Coordinates loading the scraped batches, normalizing them, validating
the clean frame and persisting it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from src.common.logging import get_logger
from src.normalizer.frames import frame_from_records
from src.normalizer.loader import ResultLoader
from src.normalizer.records import NormalizationResult, RawResultRecord
from src.normalizer.validators.data_validator import DataValidator
from src.normalizer.writer import ResultWriter
from src.pipeline.normalizer import ResultNormalizer

logger = get_logger(__name__)


class PipelineOrchestrator:
    """Runs load -> normalize -> validate -> write.

    Stages:
        1. import_data: Read and concatenate the CSV batches
        2. normalize: Filter, parse and correct every record
        3. validate: Check the clean frame
        4. save_results: Write the clean frame to Parquet

    Args:
        data_dir: Directory holding the CSV batches (default: from config).
        output_path: Parquet target (default: from config).
        normalizer: Pre-built normalizer, mainly for tests.
    """

    def __init__(
        self,
        data_dir: Path | None = None,
        output_path: Path | None = None,
        normalizer: ResultNormalizer | None = None,
    ) -> None:
        self._loader = ResultLoader(data_dir=data_dir)
        self._writer = ResultWriter(output_path=output_path)
        self._normalizer = normalizer or ResultNormalizer()

        # Pipeline state
        self._raw_records: list[RawResultRecord] | None = None
        self._result: NormalizationResult | None = None
        self._validation_errors: list[str] = []

    def run_full(self, dry_run: bool = False) -> dict[str, Any]:
        """Execute every stage.

        Args:
            dry_run: Skip writing the clean frame.

        Returns:
            Dict with run summary.
        """
        self.import_data()
        self.normalize()
        self.validate()
        output = None if dry_run else self.save_results()
        return self.summary(output)

    def import_data(self) -> list[RawResultRecord]:
        self._raw_records = self._loader.load()
        return self._raw_records

    def normalize(self) -> NormalizationResult:
        if self._raw_records is None:
            raise RuntimeError("import_data() must be called first")
        self._result = self._normalizer.normalize(self._raw_records)
        return self._result

    def validate(self) -> list[str]:
        """Validate the clean frame and keep the messages for the summary."""
        if self._result is None:
            raise RuntimeError("normalize() must be called first")
        errors = DataValidator().validate(frame_from_records(self._result.records))
        self._validation_errors = [e.message for e in errors]
        return self._validation_errors

    def save_results(self) -> Path:
        if self._result is None:
            raise RuntimeError("normalize() must be called first")
        return self._writer.write(self._result.records)

    def summary(self, output: Path | None = None) -> dict[str, Any]:
        if self._result is None:
            raise RuntimeError("normalize() must be called first")
        return {
            "input_rows": len(self._raw_records or []),
            "clean_rows": len(self._result.records),
            "dropped": {
                reason.value: count for reason, count in self._result.dropped.items()
            },
            "warnings": len(self._result.warnings),
            "validation_errors": self._validation_errors,
            "output": str(output) if output else None,
        }
