"""Parquet writer for the clean result dataset."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from src.common.config import get_settings
from src.common.logging import get_logger
from src.normalizer.frames import frame_from_records
from src.normalizer.records import CleanResultRecord

logger = get_logger(__name__)


class ResultWriter:
    """Writes clean records to a local Parquet file.

    Args:
        output_path: Target file. Defaults to settings.io.output_path.
    """

    def __init__(self, output_path: Path | None = None) -> None:
        if output_path is not None:
            self._output_path = Path(output_path)
        else:
            self._output_path = Path(get_settings().io.output_path)

    def write(self, records: Sequence[CleanResultRecord]) -> Path:
        """Persist clean records.

        Args:
            records: Clean records in output order.

        Returns:
            Path of the written file.
        """
        df = frame_from_records(records)
        self._output_path.parent.mkdir(parents=True, exist_ok=True)
        df.write_parquet(self._output_path)
        logger.info("Clean results written", path=str(self._output_path), rows=len(df))
        return self._output_path
